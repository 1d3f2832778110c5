"""Token Service.
Issues and verifies the signed access and refresh JWTs. Stateless: expiry is
the only invalidation mechanism, there is no revocation list.
"""
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

logger = logging.getLogger(__name__)

ACCESS = 'access'
REFRESH = 'refresh'

DEFAULT_DURATION = timedelta(minutes=15)
_DURATION_UNITS = {'s': 'seconds', 'm': 'minutes', 'h': 'hours', 'd': 'days'}
_REQUIRED_CLAIMS = ('userId', 'email', 'type')


class TokenError(Exception):
    """Base class for token verification failures."""
    code = 'TOKEN_INVALID'


class TokenInvalidError(TokenError):
    code = 'TOKEN_INVALID'


class TokenExpiredError(TokenError):
    code = 'TOKEN_EXPIRED'


class TokenTypeError(TokenError):
    code = 'TOKEN_TYPE_INVALID'


def parse_duration(value) -> timedelta:
    """Parse ``"15m"``/``"30d"``/``"12h"``/``"3600s"`` into a timedelta.

    Falls back to 15 minutes for anything it cannot read.
    """
    if isinstance(value, timedelta):
        return value
    match = re.fullmatch(r'\s*(\d+)\s*([smhd])\s*', str(value or ''))
    if not match:
        return DEFAULT_DURATION
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


class TokenService:

    def __init__(self, access_secret, refresh_secret, access_ttl=timedelta(minutes=15),
                 refresh_ttl=timedelta(days=30), algorithm='HS256'):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_ttl = parse_duration(access_ttl)
        self.refresh_ttl = parse_duration(refresh_ttl)
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config):
        return cls(
            access_secret=config['JWT_ACCESS_SECRET'],
            refresh_secret=config['JWT_REFRESH_SECRET'],
            access_ttl=config.get('JWT_ACCESS_EXPIRES_IN', '15m'),
            refresh_ttl=config.get('JWT_REFRESH_EXPIRES_IN', '30d'),
            algorithm=config.get('JWT_ALGORITHM', 'HS256'),
        )

    @staticmethod
    def claims_for(user) -> Dict[str, Any]:
        return {
            'userId': user.id,
            'email': user.email,
            'userType': user.user_type,
        }

    def issue_access_token(self, user, expires_delta: Optional[timedelta] = None) -> str:
        return self._encode(self.claims_for(user), ACCESS, self.access_secret,
                            expires_delta or self.access_ttl)

    def issue_refresh_token(self, user, expires_delta: Optional[timedelta] = None) -> str:
        return self._encode(self.claims_for(user), REFRESH, self.refresh_secret,
                            expires_delta or self.refresh_ttl)

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        return self._decode(token, ACCESS, self.access_secret)

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        return self._decode(token, REFRESH, self.refresh_secret)

    def _encode(self, claims, token_type, secret, lifetime):
        now = datetime.now(timezone.utc)
        to_encode = dict(claims)
        to_encode.update({
            'type': token_type,
            'iat': now,
            'exp': now + lifetime,
        })
        logger.debug(f'Issuing {token_type} token for user_id={claims.get("userId")}')
        return jwt.encode(to_encode, secret, algorithm=self.algorithm)

    def _decode(self, token, expected_type, secret):
        if not token or not isinstance(token, str):
            raise TokenInvalidError('Token is required')
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm],
                                 options={'require_exp': True})
        except ExpiredSignatureError as e:
            raise TokenExpiredError(f'{expected_type.capitalize()} token has expired') from e
        except JWTError as e:
            logger.info(f'{expected_type} token rejected: {type(e).__name__}')
            raise TokenInvalidError(f'Invalid {expected_type} token') from e

        if any(claim not in payload for claim in _REQUIRED_CLAIMS):
            raise TokenInvalidError('Token is missing required claims')
        if payload.get('type') != expected_type:
            raise TokenTypeError('Invalid token type')
        return payload
