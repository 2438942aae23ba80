# students/apps.py
from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class StudentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'students'
    verbose_name = 'Student Records'

    def ready(self):
        """Connect student signals."""
        from . import signals  # noqa: F401
        logger.debug("Students app initialized")
