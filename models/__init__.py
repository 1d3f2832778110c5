"""Database models package.

This package contains the SQLAlchemy ORM model definitions for the application.
Each model lives in its own module (user, daycare) and is re-exported here for
convenience.
"""

# Re-export model classes from individual modules
from .user import User, USER_TYPES  # noqa: F401
from .daycare import (  # noqa: F401
    AGE_GROUP_KEYS,
    PRICE_UNKNOWN,
    Daycare,
    DaycareAgeGroup,
    DaycareFeature,
)

__all__ = [
    "User",
    "USER_TYPES",
    "Daycare",
    "DaycareAgeGroup",
    "DaycareFeature",
    "AGE_GROUP_KEYS",
    "PRICE_UNKNOWN",
]
