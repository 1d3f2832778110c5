# Blueprint registration module
from .auth import auth_bp
from .daycares import daycares_bp

__all__ = [
    'auth_bp',
    'daycares_bp',
]
