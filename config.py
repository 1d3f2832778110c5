import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # Security settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:3000')

    # Database configuration
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///daycare_directory.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT configuration
    JWT_ACCESS_SECRET = os.environ.get('JWT_ACCESS_SECRET') or 'dev-access-secret-change-in-production'
    JWT_REFRESH_SECRET = os.environ.get('JWT_REFRESH_SECRET') or 'dev-refresh-secret-change-in-production'
    JWT_ACCESS_EXPIRES_IN = os.environ.get('JWT_ACCESS_EXPIRES_IN', '15m')
    JWT_REFRESH_EXPIRES_IN = os.environ.get('JWT_REFRESH_EXPIRES_IN', '30d')
    JWT_ALGORITHM = os.environ.get('JWT_ALGORITHM', 'HS256')

    # Auth cookies
    AUTH_COOKIE_SECURE = False
    AUTH_COOKIE_SAMESITE = 'Lax'

    # Origins allowed to call the API with cookies; defaults to the frontend
    CORS_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.environ.get('CORS_ALLOWED_ORIGINS', FRONTEND_URL).split(',')
        if origin.strip()
    ]

    # Password hashing and single-use tokens
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', 12))
    VERIFICATION_TOKEN_HOURS = int(os.environ.get('VERIFICATION_TOKEN_HOURS', 24))
    RESET_TOKEN_HOURS = int(os.environ.get('RESET_TOKEN_HOURS', 1))

    # Email configuration
    MAIL_SERVER = os.environ.get('MAIL_SERVER')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'True').lower() == 'true'
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'noreply@kinderbridge.ca')
    MAIL_BRAND_NAME = os.environ.get('MAIL_BRAND_NAME', 'KinderBridge')
    EMAIL_DISPATCH_ASYNC = os.environ.get('EMAIL_DISPATCH_ASYNC', 'True').lower() == 'true'

    # Search pagination
    SEARCH_DEFAULT_LIMIT = int(os.environ.get('SEARCH_DEFAULT_LIMIT', 10))
    SEARCH_MAX_LIMIT = int(os.environ.get('SEARCH_MAX_LIMIT', 100))

    # Logging
    LOG_TO_STDOUT = os.environ.get('LOG_TO_STDOUT', 'False').lower() == 'true'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Debug mode - automatically set based on environment
    DEBUG = os.environ.get('FLASK_ENV', 'development').lower() == 'development'

    # Testing mode
    TESTING = False

class ProductionConfig(Config):
    DEBUG = False
    AUTH_COOKIE_SECURE = True
    AUTH_COOKIE_SAMESITE = 'None'


class DevelopmentConfig(Config):
    DEBUG = True

class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    BCRYPT_LOG_ROUNDS = 4
    MAIL_SERVER = 'localhost'
    MAIL_SUPPRESS_SEND = True
    EMAIL_DISPATCH_ASYNC = False

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': Config
}

def get_config():
    """Get configuration based on environment variable"""
    env = os.environ.get('FLASK_ENV', 'development').lower()
    return config.get(env, config['default'])
