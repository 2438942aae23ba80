# config/logging.py
import os
from django.utils.log import RequireDebugFalse


def build_production_logging(log_dir):
    """Rotating file logging for production; errors also go to their own file."""
    os.makedirs(log_dir, exist_ok=True)

    def rotating(filename, level):
        return {
            'level': level,
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': os.path.join(log_dir, filename),
            'maxBytes': 10485760,  # 10MB
            'backupCount': 10,
            'formatter': 'detailed',
        }

    app_logger = {
        'handlers': ['console', 'file', 'error_file'],
        'level': 'INFO',
        'propagate': False,
    }

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'detailed': {
                'format': '{asctime} {levelname} [{name}:{lineno}] {message}',
                'style': '{',
            },
        },
        'filters': {
            'require_debug_false': {
                '()': RequireDebugFalse,
            },
        },
        'handlers': {
            'console': {
                'level': 'WARNING',
                'class': 'logging.StreamHandler',
                'formatter': 'detailed',
            },
            'file': rotating('academia.log', 'INFO'),
            'admissions_file': rotating('admissions.log', 'INFO'),
            'error_file': dict(rotating('error.log', 'ERROR'), filters=['require_debug_false']),
        },
        'loggers': {
            'django': {
                'handlers': ['console', 'file', 'error_file'],
                'level': 'INFO',
                'propagate': False,
            },
            'core': app_logger,
            'students': app_logger,
            'admissions': {
                'handlers': ['console', 'admissions_file', 'error_file'],
                'level': 'INFO',
                'propagate': False,
            },
        },
        'root': {
            'handlers': ['console', 'file', 'error_file'],
            'level': 'INFO',
        },
    }
