# ==============================================================================
# CONFIGURATION - environment driven settings
# ==============================================================================
# Every setting can be overridden with an environment variable or a local
# .env file (loaded with python-dotenv).
#
# PRODUCTION:
#   export STOREFRONT_SECRET_KEY="a_long_random_secret"
#   export STOREFRONT_API_URL="https://api.example.com/api/v1"
#   export STOREFRONT_BACKEND_WEB_URL="https://deligo.example.com"
#   export STOREFRONT_PRODUCTION=1
# ==============================================================================

import os
from urllib.parse import urlsplit
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default='0'):
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name, default):
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return int(default)


# ═══════════════════════════════════════════════════════════════════════════════
# BACKEND API
# ═══════════════════════════════════════════════════════════════════════════════
API_URL = os.getenv('STOREFRONT_API_URL', 'http://localhost:8000/api/v1').rstrip('/')
API_TIMEOUT = _env_int('STOREFRONT_API_TIMEOUT', '10')

# Backend web app serving the pages the storefront links out to
# (driver application, driver dashboard). Defaults to the API origin.
_api_parts = urlsplit(API_URL)
BACKEND_WEB_URL = os.getenv(
    'STOREFRONT_BACKEND_WEB_URL',
    f'{_api_parts.scheme}://{_api_parts.netloc}',
).rstrip('/')

# ═══════════════════════════════════════════════════════════════════════════════
# PRODUCTION MODE / SESSIONS
# ═══════════════════════════════════════════════════════════════════════════════
PRODUCTION_MODE = _env_flag('STOREFRONT_PRODUCTION')

DEFAULT_SECRET = 'deligo_storefront_dev_secret_key_change_in_production'
SECRET_KEY = os.getenv('STOREFRONT_SECRET_KEY')

SESSION_SETTINGS = dict(
    SESSION_COOKIE_HTTPONLY=True,
    SESSION_COOKIE_SECURE=False,       # True only behind HTTPS
    SESSION_COOKIE_SAMESITE='Lax',
    PERMANENT_SESSION_LIFETIME=86400,  # 24 hours
)

# ═══════════════════════════════════════════════════════════════════════════════
# LOCALE
# ═══════════════════════════════════════════════════════════════════════════════
SUPPORTED_LOCALES = ('ar', 'en')
RTL_LOCALES = frozenset(['ar'])
DEFAULT_LOCALE = os.getenv('STOREFRONT_DEFAULT_LOCALE', 'ar')
if DEFAULT_LOCALE not in SUPPORTED_LOCALES:
    DEFAULT_LOCALE = 'ar'

# ═══════════════════════════════════════════════════════════════════════════════
# UPLOADS
# ═══════════════════════════════════════════════════════════════════════════════
MAX_UPLOAD_MB = _env_int('STOREFRONT_MAX_UPLOAD_MB', '2')
AVATAR_EXTENSIONS = frozenset(['jpeg', 'jpg', 'png', 'gif'])

# ═══════════════════════════════════════════════════════════════════════════════
# PROFILING
# ═══════════════════════════════════════════════════════════════════════════════
ENABLE_PROFILING = _env_flag('STOREFRONT_ENABLE_PROFILING', '1')
