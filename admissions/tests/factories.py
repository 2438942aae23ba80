# admissions/tests/factories.py
from datetime import timedelta

import factory
from faker import Faker
from django.utils import timezone

from shared.constants import ApplicationStatus, ApplicationPriority
from admissions.models import EnrollmentApplication, ApplicationDocument
from students.tests.factories import StudentFactory

fake = Faker()


class EnrollmentApplicationFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = EnrollmentApplication

    applicant = factory.SubFactory(StudentFactory)
    applicant_name = factory.LazyAttribute(lambda o: o.applicant.full_name)
    email = factory.LazyAttribute(lambda o: o.applicant.email)
    program = "CS-BS"
    department_name = "Computer Science"
    academic_term = "FALL"
    academic_year = 2025
    # Old enough to clear the minimum review period
    application_date = factory.LazyFunction(lambda: timezone.now() - timedelta(days=3))
    status = ApplicationStatus.SUBMITTED
    priority = ApplicationPriority.NORMAL
    previous_institution = factory.LazyAttribute(lambda _: fake.company())


class ApplicationDocumentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ApplicationDocument

    application = factory.SubFactory(EnrollmentApplicationFactory)
    document_type = "Transcript"
    file_name = factory.LazyAttribute(lambda _: fake.file_name(extension='pdf'))
    file_size = 2048
    mime_type = "application/pdf"
    is_required = True
    is_verified = False
