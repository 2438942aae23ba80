# students/signals.py
import logging
from django.db.models.signals import pre_save
from django.dispatch import receiver
from django.utils import timezone

from .models import Student

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Student)
def stamp_enrollment_status_date(sender, instance, **kwargs):
    """Record when the enrollment status last changed."""
    if instance._state.adding or instance.pk is None:
        if instance.enrollment_status_date is None:
            instance.enrollment_status_date = timezone.now()
        return

    previous = (
        Student.objects.filter(pk=instance.pk)
        .values_list('enrollment_status', flat=True)
        .first()
    )
    if previous is not None and previous != instance.enrollment_status:
        instance.enrollment_status_date = timezone.now()
        logger.debug(f"Student {instance.pk} enrollment status changed: {previous} -> {instance.enrollment_status}")
