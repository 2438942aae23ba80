# students/tests/factories.py
import factory
from faker import Faker

from shared.constants import EnrollmentStatus, AcademicStanding
from students.models import Student

fake = Faker()


class StudentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Student

    student_number = factory.Sequence(lambda n: f"S{n:06d}")
    first_name = factory.LazyAttribute(lambda _: fake.first_name())
    last_name = factory.LazyAttribute(lambda _: fake.last_name())
    email = factory.LazyAttribute(lambda o: f"{o.student_number.lower()}@students.example.edu")
    phone_number = factory.LazyAttribute(lambda _: fake.numerify("555-###-####"))
    department_name = "Computer Science"
    program = ""
    enrollment_status = EnrollmentStatus.APPLIED
    academic_standing = AcademicStanding.NEW_STUDENT
    cumulative_gpa = None
