# settings/test.py
"""
Test settings: in-memory SQLite, fast hashing, quiet logging.
"""
import copy

from .base import *  # noqa: F401,F403

DEBUG = False
SECRET_KEY = 'test-secret-key'
ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

REST_FRAMEWORK = dict(REST_FRAMEWORK, DEFAULT_THROTTLE_CLASSES=[])

LOGGING = copy.deepcopy(LOGGING)
LOGGING['handlers']['console']['level'] = 'WARNING'
LOGGING['root']['level'] = 'WARNING'
