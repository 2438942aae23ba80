# students/serializers.py
from rest_framework import serializers

from shared.constants import EnrollmentStatus, AcademicStanding

from .models import Student, EnrollmentHistory


class StudentSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Student
        fields = [
            'id',
            'student_number',
            'full_name',
            'first_name',
            'last_name',
            'email',
            'program',
            'department_name',
            'enrollment_status',
            'academic_standing',
            'cumulative_gpa',
            'enrollment_status_date',
            'enrollment_date',
            'actual_graduation_date',
        ]
        read_only_fields = fields


class EnrollmentHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = EnrollmentHistory
        fields = [
            'id',
            'student',
            'application',
            'event_type',
            'previous_status',
            'new_status',
            'event_date',
            'effective_date',
            'academic_term',
            'academic_year',
            'reason',
            'notes',
            'processed_by',
            'is_system_generated',
            'department_name',
            'program',
            'metadata',
        ]
        read_only_fields = fields


class EnrollmentStatusChangeSerializer(serializers.Serializer):
    new_status = serializers.ChoiceField(choices=EnrollmentStatus.choices)
    reason = serializers.CharField(max_length=1000)
    effective_date = serializers.DateField(required=False, allow_null=True)


class AcademicStandingSerializer(serializers.Serializer):
    standing = serializers.ChoiceField(choices=AcademicStanding.choices)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)
