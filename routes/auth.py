from functools import wraps

from flask import Blueprint, current_app, g, jsonify, request

from services.auth_service import AuthService
from services.token_service import TokenError, TokenExpiredError, TokenService

auth_bp = Blueprint('auth', __name__)

ACCESS_COOKIE = 'accessToken'
REFRESH_COOKIE = 'refreshToken'


def _respond(result):
    return jsonify(result.body), result.status_code


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def set_auth_cookies(response, access_token=None, refresh_token=None):
    """Attach the session cookies with lifetimes matching the token TTLs."""
    tokens = TokenService.from_config(current_app.config)
    options = {
        'httponly': True,
        'secure': current_app.config.get('AUTH_COOKIE_SECURE', False),
        'samesite': current_app.config.get('AUTH_COOKIE_SAMESITE', 'Lax'),
        'path': '/',
    }
    if access_token:
        response.set_cookie(ACCESS_COOKIE, access_token,
                            max_age=int(tokens.access_ttl.total_seconds()), **options)
    if refresh_token:
        response.set_cookie(REFRESH_COOKIE, refresh_token,
                            max_age=int(tokens.refresh_ttl.total_seconds()), **options)
    return response


def clear_auth_cookies(response):
    options = {
        'httponly': True,
        'secure': current_app.config.get('AUTH_COOKIE_SECURE', False),
        'samesite': current_app.config.get('AUTH_COOKIE_SAMESITE', 'Lax'),
        'path': '/',
    }
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response


def get_access_token():
    """Access token from the cookie, falling back to ``Authorization: Bearer``."""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    header = request.headers.get('Authorization', '')
    scheme, _, credentials = header.partition(' ')
    if scheme.lower() == 'bearer' and credentials.strip():
        return credentials.strip()
    return None


def token_required(f):
    """Decorator to require a valid access token; claims land on ``g.token_claims``"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_access_token()
        if not token:
            return jsonify({'success': False, 'error': 'Access token required'}), 401

        try:
            g.token_claims = TokenService.from_config(current_app.config).verify_access_token(token)
        except TokenExpiredError as e:
            return jsonify({'success': False, 'error': 'Access token expired', 'code': e.code}), 401
        except TokenError as e:
            current_app.logger.info(f'Rejected access token on {request.path}: {e}')
            return jsonify({'success': False, 'error': 'Invalid or expired token', 'code': e.code}), 403
        return f(*args, **kwargs)
    return decorated_function


def current_user_id():
    claims = getattr(g, 'token_claims', None) or {}
    return claims.get('userId')


@auth_bp.route('/register', methods=['POST'])
def register():
    return _respond(AuthService().register(_json_body()))


@auth_bp.route('/login', methods=['POST'])
def login():
    data = _json_body()
    result = AuthService().login(data.get('email'), data.get('password'))
    if result.status_code != 200:
        return _respond(result)

    # Tokens travel only in the httpOnly cookies
    payload = result.body['data']
    access_token = payload.pop('accessToken')
    refresh_token = payload.pop('refreshToken')
    response = jsonify(result.body)
    return set_auth_cookies(response, access_token, refresh_token), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    result = AuthService().logout()
    response = jsonify(result.body)
    return clear_auth_cookies(response), result.status_code


@auth_bp.route('/refresh', methods=['POST'])
def refresh():
    refresh_token = request.cookies.get(REFRESH_COOKIE) or _json_body().get('refreshToken')
    result = AuthService().refresh_access_token(refresh_token)
    if result.status_code != 200:
        response = jsonify(result.body)
        if result.status_code == 401:
            clear_auth_cookies(response)
        return response, result.status_code

    access_token = result.body['data'].pop('accessToken')
    response = jsonify(result.body)
    return set_auth_cookies(response, access_token=access_token), 200


@auth_bp.route('/verify', methods=['GET'])
def verify():
    """Session check for the frontend; always answers 200."""
    token = get_access_token()
    user = AuthService().authenticated_user(token) if token else None
    if user is None:
        return jsonify({'success': False, 'message': 'Not authenticated', 'authenticated': False}), 200
    return jsonify({
        'success': True,
        'message': 'Authenticated',
        'authenticated': True,
        'data': user.to_dict(),
    }), 200


@auth_bp.route('/profile', methods=['GET'])
@token_required
def get_profile():
    return _respond(AuthService().get_profile(current_user_id()))


@auth_bp.route('/profile', methods=['PUT'])
@token_required
def update_profile():
    return _respond(AuthService().update_profile(current_user_id(), _json_body()))


@auth_bp.route('/change-password', methods=['PUT'])
@token_required
def change_password():
    data = _json_body()
    return _respond(AuthService().change_password(
        current_user_id(), data.get('currentPassword'), data.get('newPassword')))


@auth_bp.route('/check-email/<path:email>', methods=['GET'])
def check_email(email):
    return _respond(AuthService().check_email(email))


@auth_bp.route('/verify-email/<token>', methods=['GET'])
def verify_email(token):
    return _respond(AuthService().verify_email(token))


@auth_bp.route('/resend-verification', methods=['POST'])
def resend_verification():
    data = _json_body()
    if not data.get('email'):
        return jsonify({'success': False, 'error': 'Email is required'}), 400
    return _respond(AuthService().resend_verification_email(data.get('email')))


@auth_bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    data = _json_body()
    if not data.get('email'):
        return jsonify({'success': False, 'error': 'Email is required'}), 400
    return _respond(AuthService().request_password_reset(data.get('email')))


@auth_bp.route('/reset-password/<token>', methods=['GET'])
def verify_reset_token(token):
    return _respond(AuthService().verify_reset_token(token))


@auth_bp.route('/reset-password', methods=['POST'])
def reset_password():
    data = _json_body()
    if not data.get('token') or not data.get('password'):
        return jsonify({'success': False, 'error': 'Token and password are required'}), 400
    return _respond(AuthService().reset_password(data.get('token'), data.get('password')))


@auth_bp.route('/users/<user_type>', methods=['GET'])
@token_required
def users_by_type(user_type):
    return _respond(AuthService().list_users_by_type(
        user_type,
        limit=request.args.get('limit', 50),
        requester_type=g.token_claims.get('userType'),
    ))


@auth_bp.route('/search-users', methods=['GET'])
@token_required
def search_users():
    return _respond(AuthService().search_users(
        request.args.get('q', ''),
        user_type=request.args.get('userType'),
        limit=request.args.get('limit', 20),
        requester_type=g.token_claims.get('userType'),
    ))
