# settings/development.py
"""
Development settings for the Academia enrollment project.
"""
import copy

from .base import *  # noqa: F401,F403

# Debug settings
DEBUG = True
ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# Database configuration for development
DATABASES = copy.deepcopy(DATABASES)
DATABASES['default']['ATOMIC_REQUESTS'] = True

# Logging configuration for development
LOGGING = copy.deepcopy(LOGGING)
(BASE_DIR / 'logs').mkdir(exist_ok=True)

LOGGING['handlers']['file'] = {
    'level': 'DEBUG',
    'class': 'logging.FileHandler',
    'filename': BASE_DIR / 'logs' / 'development.log',
    'formatter': 'verbose',
}

for app_logger in ('core', 'students', 'admissions'):
    LOGGING['loggers'][app_logger]['handlers'] = ['console', 'file']

# Disable security settings for development
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SECURE_SSL_REDIRECT = False

# CORS settings for development
CORS_ALLOW_ALL_ORIGINS = True
