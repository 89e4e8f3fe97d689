import os
import secrets
import logging
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))

# Default to production (secure)
FLASK_ENV = os.environ.get('FLASK_ENV', 'production')
IS_PRODUCTION = FLASK_ENV == 'production'
IS_DEVELOPMENT = FLASK_ENV == 'development'


class Config:
    _env_secret_key = os.environ.get('SECRET_KEY')
    if IS_PRODUCTION and not _env_secret_key:
        logging.warning(
            "SECRET_KEY not set in production environment! "
            "Sessions will be invalidated on server restart. "
            "Set SECRET_KEY environment variable for persistent sessions."
        )
    SECRET_KEY = _env_secret_key or secrets.token_hex(32)

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///' + os.path.join(basedir, 'database', 'hotel.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }

    # Logging
    LOG_FILE = os.environ.get('LOG_FILE', os.path.join(basedir, 'app.log'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Property local time (Philippines, UTC+08:00) used for "today" and logs
    PROPERTY_UTC_OFFSET = float(os.environ.get('PROPERTY_UTC_OFFSET', '8'))
    DEFAULT_CURRENCY = os.environ.get('DEFAULT_CURRENCY', 'PHP')

    # Access routing
    AUTH_PREFIX = '/auth'
    SIGN_IN_PATH = '/auth/sign-in'
    SETUP_PATH = '/setup'
    ACCESS_ROUTER_EXEMPT_PREFIXES = ('/static', '/api', '/favicon.ico')

    # CSRF Protection
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600  # 1 hour CSRF token validity

    # Session Security - only relax secure cookies in explicit development mode
    SESSION_COOKIE_SECURE = not IS_DEVELOPMENT
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Strict' if IS_PRODUCTION else 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour session lifetime

    REMEMBER_COOKIE_SECURE = not IS_DEVELOPMENT
    REMEMBER_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_DURATION = 86400  # 1 day remember me

    # Password Security
    PASSWORD_MIN_LENGTH = 8

    # Rate Limiting - Redis in production if available
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = "200 per minute"
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL', 'memory://')
    SIGN_IN_RATE_LIMIT = "10 per minute"

    # Login Security
    MAX_LOGIN_ATTEMPTS = 5  # Lock after 5 failed attempts
    LOGIN_LOCKOUT_DURATION = 300  # 5 minutes lockout (in seconds)

    # Listing
    ITEMS_PER_PAGE = 20
