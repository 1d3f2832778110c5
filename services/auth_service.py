"""Authentication Service.
Registration, email verification, login, access-token refresh and password
reset. Every operation returns a ``ServiceResponse`` envelope; business
failures never escape as exceptions.
"""
from datetime import datetime, timedelta
from functools import partial
import secrets

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from extensions import db, bcrypt
from models.user import User, USER_TYPES
from responses import (
    ErrorKind,
    conflict_response,
    error_response,
    forbidden_response,
    internal_error_response,
    not_found_response,
    success_response,
    unauthorized_response,
)
from services.email_service import EmailService
from services.search_service import icontains
from services.token_service import TokenError, TokenService, TokenTypeError
from services.validators import (
    is_valid_email,
    normalize_children,
    normalize_email,
    validate_password,
    validate_profile_fields,
    validate_registration,
)

INVALID_CREDENTIALS_MESSAGE = 'Invalid email or password'
DUPLICATE_EMAIL_MESSAGE = 'Email already registered. Please use a different email or try logging in.'
RESET_REQUESTED_MESSAGE = 'If an account exists with that email, a password reset link has been sent.'
VERIFICATION_RESENT_MESSAGE = 'If an account exists with that email, a verification email has been sent.'
INVALID_VERIFICATION_MESSAGE = 'Invalid or expired verification token'
INVALID_RESET_MESSAGE = 'Invalid or expired reset token'

INVALID_OR_EXPIRED_TOKEN = 'INVALID_OR_EXPIRED_TOKEN'
EMAIL_NOT_VERIFIED = 'EMAIL_NOT_VERIFIED'

# Roles allowed to browse other accounts
USER_DIRECTORY_ROLES = ('provider', 'admin')

_dummy_hash = None


def generate_single_use_token():
    """Opaque 32-byte token, hex encoded."""
    return secrets.token_hex(32)


def _burn_password_check(password):
    """Spend a bcrypt comparison so unknown emails cost the same as wrong passwords."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = bcrypt.generate_password_hash(secrets.token_hex(16)).decode('utf-8')
    bcrypt.check_password_hash(_dummy_hash, password or '')


class AuthService:

    def __init__(self, token_service=None, email_service=None):
        self.token_service = token_service or TokenService.from_config(current_app.config)
        self.email_service = email_service or EmailService()

    # Registration and verification

    def register(self, payload):
        """Create an unverified account and email its verification link."""
        payload = payload or {}
        try:
            email = normalize_email(payload.get('email'))
            if not email:
                return error_response('Email is required')

            if self.email_exists(email):
                current_app.logger.info(f'Registration rejected, email already exists: {email}')
                return conflict_response(DUPLICATE_EMAIL_MESSAGE)

            errors = validate_registration(payload)
            if errors:
                return error_response('Validation failed', ErrorKind.VALIDATION_FAILED, errors)

            preferences = payload['communicationPreferences']
            user = User(
                email=email,
                first_name=str(payload.get('firstName') or 'User').strip(),
                last_name=str(payload.get('lastName') or '').strip(),
                user_type=payload.get('userType') or 'parent',
                phone=str(payload.get('phone') or '').strip(),
                address=str(payload.get('address') or '').strip(),
                children=normalize_children(payload.get('children')),
                daycare_id=str(payload.get('daycareId') or '').strip() or None,
                role=payload.get('role'),
                email_consent=True,
                sms_consent=bool(preferences.get('sms', False)),
                promotional_consent=bool(preferences.get('promotional', False)),
                acknowledgement=True,
                email_verified=False,
                is_active=True,
            )
            user.set_password(payload['password'])
            user.update_profile_complete()

            token = generate_single_use_token()
            user.set_verification_token(token, self._expiry('VERIFICATION_TOKEN_HOURS', 24))

            db.session.add(user)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            current_app.logger.info('Registration lost a race on the unique email index')
            return conflict_response(DUPLICATE_EMAIL_MESSAGE)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Registration error: {e}')
            return internal_error_response('Registration failed. Please try again.')

        current_app.logger.info(f'User {user.id} registered, awaiting email verification')
        user_data = user.to_dict()

        self.email_service.dispatch(
            self.email_service.send_verification_email,
            user.email, user.first_name or 'User', token,
        )

        return success_response(
            {'user': user_data, 'requiresEmailVerification': True},
            'Registration successful! Please check your email to verify your account before logging in.',
            201,
        )

    def verify_email(self, token):
        """Consume a verification token and mark the address verified."""
        if not token or not isinstance(token, str):
            return self._invalid_token_response(INVALID_VERIFICATION_MESSAGE)

        try:
            user = User.query.filter(
                User.email_verification_token == token,
                User.email_verification_expires > datetime.utcnow(),
                User.is_active.is_(True),
            ).first()

            if not user:
                return self._invalid_token_response(INVALID_VERIFICATION_MESSAGE)

            if user.email_verified:
                return success_response({'email': user.email, 'alreadyVerified': True},
                                        'Email is already verified')

            user.email_verified = True
            user.clear_verification_token()
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Error verifying email: {e}')
            return internal_error_response('Failed to verify email')

        current_app.logger.info(f'Email verification completed for user {user.id}')
        self.email_service.dispatch(self.email_service.send_welcome_email,
                                    user.email, user.first_name or 'User')

        return success_response({'email': user.email, 'verified': True}, 'Email verified successfully')

    def resend_verification_email(self, email):
        """Issue a fresh verification token. The reply never reveals whether the account exists."""
        generic = success_response(None, VERIFICATION_RESENT_MESSAGE)
        email = normalize_email(email)
        if not is_valid_email(email):
            return generic

        try:
            user = User.query.filter_by(email=email, is_active=True).first()
            if not user or user.email_verified:
                return generic

            token = generate_single_use_token()
            user.set_verification_token(token, self._expiry('VERIFICATION_TOKEN_HOURS', 24))
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Resend verification error: {e}')
            return generic

        self.email_service.dispatch(
            self.email_service.send_verification_email,
            user.email, user.first_name or 'User', token,
            on_failure=partial(self._discard_verification_token, user.id, token),
        )
        return generic

    # Sessions

    def login(self, email, password):
        if not email or not password:
            return error_response('Email and password are required')

        try:
            user = User.query.filter_by(email=normalize_email(email)).first()

            if not user or not user.is_active:
                _burn_password_check(password)
                return unauthorized_response(INVALID_CREDENTIALS_MESSAGE)

            if not user.check_password(password):
                return unauthorized_response(INVALID_CREDENTIALS_MESSAGE)

            if not user.email_verified:
                current_app.logger.info(f'Login blocked for unverified user {user.id}')
                return forbidden_response(
                    'Please verify your email address before logging in. '
                    'Check your inbox for the verification link.',
                    {'code': EMAIL_NOT_VERIFIED, 'emailVerified': False, 'requiresVerification': True},
                )

            user.last_login = datetime.utcnow()
            db.session.commit()

            access_token = self.token_service.issue_access_token(user)
            refresh_token = self.token_service.issue_refresh_token(user)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Login error: {e}')
            return internal_error_response('An error occurred during login. Please try again.')

        current_app.logger.info(f'User {user.id} logged in successfully')
        return success_response(
            {'user': user.to_dict(), 'accessToken': access_token, 'refreshToken': refresh_token},
            'Login successful',
        )

    def refresh_access_token(self, refresh_token):
        """Mint a new access token from a valid refresh token. The refresh token is not rotated."""
        if not refresh_token:
            return unauthorized_response('Refresh token is required')

        try:
            claims = self.token_service.verify_refresh_token(refresh_token)
        except TokenTypeError as e:
            return unauthorized_response('Invalid token type', {'code': e.code})
        except TokenError as e:
            current_app.logger.info(f'Refresh token rejected: {e}')
            return unauthorized_response('Invalid or expired refresh token', {'code': e.code})

        try:
            user = db.session.get(User, claims['userId'])
            if not user or not user.is_active:
                return not_found_response('User not found')

            access_token = self.token_service.issue_access_token(user)
        except Exception as e:
            current_app.logger.error(f'Token refresh error: {e}')
            return internal_error_response('Token refresh failed')

        return success_response({'user': user.to_dict(), 'accessToken': access_token},
                                'Token refreshed successfully')

    def logout(self):
        # Tokens stay valid until expiry; the boundary clears the cookies.
        return success_response(None, 'Logged out successfully')

    def authenticated_user(self, access_token):
        """Resolve an access token to its active user, or None."""
        try:
            claims = self.token_service.verify_access_token(access_token)
        except TokenError:
            return None
        user = db.session.get(User, claims['userId'])
        if not user or not user.is_active:
            return None
        return user

    # Password reset

    def request_password_reset(self, email):
        """Email a reset link. Same reply whether or not the account exists."""
        generic = success_response(None, RESET_REQUESTED_MESSAGE)
        email = normalize_email(email)
        if not is_valid_email(email):
            return generic

        try:
            user = User.query.filter_by(email=email, is_active=True).first()
            if not user:
                return generic

            token = generate_single_use_token()
            user.set_reset_token(token, self._expiry('RESET_TOKEN_HOURS', 1))
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Password reset request error: {e}')
            return generic

        current_app.logger.info(f'Password reset requested for user {user.id}')
        self.email_service.dispatch(
            self.email_service.send_password_reset_email,
            user.email, user.first_name or 'User', token,
            on_failure=partial(self._discard_reset_token, user.id, token),
        )
        return generic

    def verify_reset_token(self, token):
        try:
            user = self._find_by_reset_token(token)
        except Exception as e:
            current_app.logger.error(f'Error validating reset token: {e}')
            return self._invalid_token_response(INVALID_RESET_MESSAGE)

        if not user:
            return self._invalid_token_response(INVALID_RESET_MESSAGE)
        return success_response({'email': user.email, 'valid': True}, 'Token is valid')

    def reset_password(self, token, new_password):
        if not token or not isinstance(token, str):
            return self._invalid_token_response(INVALID_RESET_MESSAGE)

        errors = validate_password(new_password)
        if errors:
            return error_response(errors[0])

        try:
            user = self._find_by_reset_token(token)
            if not user:
                return self._invalid_token_response(INVALID_RESET_MESSAGE)

            user.set_password(new_password)
            user.clear_reset_token()
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Password reset error: {e}')
            return internal_error_response('Failed to reset password')

        current_app.logger.info(f'Password reset completed for user {user.id}')
        return success_response(None, 'Password has been reset successfully')

    # Profile

    def get_profile(self, user_id):
        user = self._active_user(user_id)
        if not user:
            return not_found_response('User not found')
        return success_response(user.to_dict())

    def update_profile(self, user_id, data):
        user = self._active_user(user_id)
        if not user:
            return not_found_response('User not found')

        data = data or {}
        errors = validate_profile_fields(data)
        if errors:
            return error_response('Validation failed', ErrorKind.VALIDATION_FAILED, errors)

        try:
            if 'firstName' in data:
                user.first_name = str(data['firstName']).strip()
            if 'lastName' in data:
                user.last_name = str(data['lastName'] or '').strip()
            if 'phone' in data:
                user.phone = str(data['phone'] or '').strip()
            if 'address' in data:
                user.address = str(data['address'] or '').strip()
            if 'children' in data:
                user.children = normalize_children(data['children'])
            if 'daycareId' in data:
                user.daycare_id = data['daycareId'] or None
            if 'role' in data:
                user.role = data['role']

            preferences = data.get('communicationPreferences')
            if isinstance(preferences, dict):
                if 'sms' in preferences:
                    user.sms_consent = bool(preferences['sms'])
                if 'promotional' in preferences:
                    user.promotional_consent = bool(preferences['promotional'])

            user.update_profile_complete()
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Profile update error: {e}')
            return internal_error_response('Failed to update profile')

        return success_response(user.to_dict(), 'Profile updated successfully')

    def change_password(self, user_id, current_password, new_password):
        if not current_password or not new_password:
            return error_response('Current password and new password are required')

        if validate_password(new_password):
            return error_response('New password must be at least 6 characters long')

        user = self._active_user(user_id)
        if not user:
            return not_found_response('User not found')

        if not user.check_password(current_password):
            return error_response('Current password is incorrect')

        try:
            user.set_password(new_password)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Password change error: {e}')
            return internal_error_response('Failed to change password')

        current_app.logger.info(f'Password changed for user {user.id}')
        return success_response(None, 'Password changed successfully')

    # Lookups

    def email_exists(self, email):
        """Existence check across active and inactive accounts."""
        return User.query.filter_by(email=normalize_email(email)).first() is not None

    def check_email(self, email):
        if not email or '@' not in email:
            return error_response('Valid email is required')
        email = normalize_email(email)
        return success_response({'email': email, 'exists': self.email_exists(email)})

    def list_users_by_type(self, user_type, limit=50, requester_type=None):
        if requester_type not in USER_DIRECTORY_ROLES:
            return forbidden_response('Access denied')
        if user_type not in USER_TYPES:
            return error_response(f'User type must be one of: {", ".join(USER_TYPES)}')

        users = (User.query
                 .filter_by(user_type=user_type, is_active=True)
                 .order_by(User.created_at.desc())
                 .limit(self._bounded_limit(limit, 50))
                 .all())
        return success_response([user.to_dict() for user in users])

    def search_users(self, query, user_type=None, limit=20, requester_type=None):
        if requester_type not in USER_DIRECTORY_ROLES:
            return forbidden_response('Access denied')

        users = User.query.filter(User.is_active.is_(True))
        if query:
            query = query.strip()
            users = users.filter(or_(
                icontains(User.email, query),
                icontains(User.first_name, query),
                icontains(User.last_name, query),
            ))
        if user_type:
            users = users.filter(User.user_type == user_type)

        users = users.order_by(User.id).limit(self._bounded_limit(limit, 20)).all()
        return success_response([user.to_dict() for user in users])

    # Helpers

    @staticmethod
    def _expiry(config_key, default_hours):
        hours = current_app.config.get(config_key, default_hours)
        return datetime.utcnow() + timedelta(hours=hours)

    @staticmethod
    def _bounded_limit(limit, default):
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            return default
        return min(max(limit, 1), 100)

    @staticmethod
    def _invalid_token_response(message):
        return error_response(message, ErrorKind.VALIDATION_FAILED, {'code': INVALID_OR_EXPIRED_TOKEN})

    @staticmethod
    def _active_user(user_id):
        user = db.session.get(User, user_id) if user_id is not None else None
        if not user or not user.is_active:
            return None
        return user

    @staticmethod
    def _find_by_reset_token(token):
        if not token or not isinstance(token, str):
            return None
        return User.query.filter(
            User.reset_password_token == token,
            User.reset_password_expires > datetime.utcnow(),
            User.is_active.is_(True),
        ).first()

    @staticmethod
    def _discard_reset_token(user_id, token, error=None):
        """Clear a reset token whose email never went out."""
        user = db.session.get(User, user_id)
        if user and user.reset_password_token == token:
            user.clear_reset_token()
            db.session.commit()
            current_app.logger.info(f'Cleared undelivered reset token for user {user_id}')

    @staticmethod
    def _discard_verification_token(user_id, token, error=None):
        user = db.session.get(User, user_id)
        if user and user.email_verification_token == token:
            user.clear_verification_token()
            db.session.commit()
            current_app.logger.info(f'Cleared undelivered verification token for user {user_id}')
