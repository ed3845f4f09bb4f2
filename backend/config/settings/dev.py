"""
Development settings for the task tracker project.
"""

from .base import *

# =============================================================================
# DEBUG
# =============================================================================
DEBUG = True

# =============================================================================
# ALLOWED HOSTS
# =============================================================================
ALLOWED_HOSTS = ['*']

# =============================================================================
# LOGGING - Development
# =============================================================================
LOG_DIR.mkdir(exist_ok=True)

LOGGING['root']['level'] = 'DEBUG'
LOGGING['loggers']['tracker']['level'] = 'DEBUG'
LOGGING['loggers']['domain']['level'] = 'DEBUG'
LOGGING['loggers']['application']['level'] = 'DEBUG'
LOGGING['loggers']['infrastructure']['level'] = 'DEBUG'
