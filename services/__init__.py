"""Business logic service layer.

This package groups higher-level operations that coordinate multiple models or
perform complex queries. Keeping business logic out of route handlers makes
the codebase easier to test and maintain.
"""

from services.auth_service import AuthService  # noqa: F401
from services.daycare_service import DaycareService  # noqa: F401
from services.email_service import EmailService  # noqa: F401
from services.search_service import SearchFilters, DaycareQueryBuilder, search_daycares  # noqa: F401
from services.token_service import TokenService  # noqa: F401


__all__ = [
    "AuthService",
    "DaycareService",
    "EmailService",
    "SearchFilters",
    "DaycareQueryBuilder",
    "search_daycares",
    "TokenService",
]
