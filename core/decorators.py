# core/decorators.py
import logging
from functools import wraps

from django.db import transaction

from core.exceptions import AcademiaException
from core.results import ServiceResult

logger = logging.getLogger(__name__)


def workflow_operation(operation_name=None):
    """
    Run a workflow operation atomically and report its outcome as a ServiceResult.

    Expected failures (AcademiaException subclasses with an error kind) roll the
    transaction back and come back as a failed result carrying that kind.
    Anything else is logged and re-raised.
    """
    def decorator(func):
        name = operation_name or func.__name__

        @wraps(func)
        def _wrapped(*args, **kwargs):
            try:
                with transaction.atomic():
                    value = func(*args, **kwargs)
            except AcademiaException as e:
                logger.warning(f"{name} rejected: {e.message}")
                # Errors without a kind (permission denials) are not workflow outcomes
                if e.error_kind is None:
                    raise
                return ServiceResult.from_exception(e)
            except Exception as e:
                logger.error(f"{name} failed unexpectedly: {e}", exc_info=True)
                raise

            if isinstance(value, ServiceResult):
                return value
            return ServiceResult.success(value)
        return _wrapped
    return decorator
