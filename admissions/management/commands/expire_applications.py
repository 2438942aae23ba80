# admissions/management/commands/expire_applications.py
from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from admissions.models import EnrollmentApplication
from admissions.services import AdmissionWorkflowService
from shared.constants import ApplicationStatus


class Command(BaseCommand):
    help = 'Expire submitted or incomplete applications that have waited too long for a decision'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=None,
            help='Age in days after which an application expires (default: ADMISSIONS_EXPIRY_DAYS)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be expired without changing anything',
        )

    def handle(self, *args, **options):
        days = options['days']
        if days is None:
            days = getattr(settings, 'ADMISSIONS_EXPIRY_DAYS', 180)
        dry_run = options.get('dry_run')

        if dry_run:
            cutoff = timezone.now() - timedelta(days=days)
            stale = EnrollmentApplication.objects.filter(
                status__in=[ApplicationStatus.SUBMITTED, ApplicationStatus.INCOMPLETE_DOCUMENTS],
                application_date__lte=cutoff,
            ).order_by('application_date')
            for application in stale:
                self.stdout.write(f"Would expire application {application.pk} ({application.applicant_name})")
            self.stdout.write(self.style.WARNING(f"Dry run: {stale.count()} application(s) older than {days} days"))
            return

        result = AdmissionWorkflowService.expire_stale_applications(days=days)
        if not result:
            raise CommandError(result.message)

        self.stdout.write(self.style.SUCCESS(f"Expired {len(result.value)} application(s) older than {days} days"))
