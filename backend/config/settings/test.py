"""
Test settings for the task tracker project.

In-memory SQLite; no log files, no Sentry.
"""

from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

RECALCULATION['FAILURE_SINK'] = 'logging'
RECALCULATION['REPRIORITIZE_ON_MARK_ONLY'] = False

# =============================================================================
# LOGGING - Test (everything propagates to root, where pytest captures it)
# =============================================================================
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}
