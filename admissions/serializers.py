# admissions/serializers.py
from rest_framework import serializers

from shared.constants import AdmissionDecision, ApplicationPriority

from .models import EnrollmentApplication, ApplicationDocument


class ApplicationDocumentSerializer(serializers.ModelSerializer):
    class Meta:
        model = ApplicationDocument
        fields = [
            'id',
            'document_type',
            'file_name',
            'file_size',
            'mime_type',
            'upload_date',
            'is_required',
            'is_verified',
            'verification_date',
            'verified_by',
        ]
        read_only_fields = fields


class EnrollmentApplicationSerializer(serializers.ModelSerializer):
    student_number = serializers.CharField(source='applicant.student_number', read_only=True)

    class Meta:
        model = EnrollmentApplication
        fields = [
            'id',
            'applicant',
            'student_number',
            'applicant_name',
            'email',
            'program',
            'department_name',
            'academic_term',
            'academic_year',
            'application_date',
            'expected_enrollment_date',
            'status',
            'priority',
            'decision',
            'decision_date',
            'decision_reason',
            'decision_made_by',
            'notes',
            'previous_gpa',
            'previous_institution',
            'requires_financial_aid',
            'is_international_student',
        ]
        read_only_fields = fields


class ApplicationDetailSerializer(EnrollmentApplicationSerializer):
    documents = ApplicationDocumentSerializer(many=True, read_only=True)

    class Meta(EnrollmentApplicationSerializer.Meta):
        fields = EnrollmentApplicationSerializer.Meta.fields + ['documents']
        read_only_fields = fields


# ============ REQUEST SERIALIZERS ============

class SubmitApplicationSerializer(serializers.Serializer):
    student_id = serializers.IntegerField()
    program = serializers.CharField(max_length=100)
    preferred_start_date = serializers.DateField(required=False, allow_null=True)
    department_name = serializers.CharField(max_length=100, required=False)
    academic_term = serializers.CharField(max_length=20, required=False, allow_blank=True)
    academic_year = serializers.IntegerField(required=False, min_value=1900)
    priority = serializers.ChoiceField(choices=ApplicationPriority.choices, required=False)
    previous_gpa = serializers.DecimalField(max_digits=3, decimal_places=2, required=False, min_value=0, max_value=4)
    previous_institution = serializers.CharField(max_length=200, required=False, allow_blank=True)
    requires_financial_aid = serializers.BooleanField(required=False)
    is_international_student = serializers.BooleanField(required=False)


class ReviewSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class DocumentRequestSerializer(serializers.Serializer):
    documents = serializers.ListField(child=serializers.CharField(max_length=100), allow_empty=False)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class HoldSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000)
    expected_resolution_date = serializers.DateField(required=False, allow_null=True)


class RemoveHoldSerializer(serializers.Serializer):
    resolution_notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class DecisionSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=AdmissionDecision.choices)
    reason = serializers.CharField(max_length=1000)
    conditional_requirements = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    enforce_readiness = serializers.BooleanField(required=False, default=False)


class EnrollmentSerializer(serializers.Serializer):
    enrollment_date = serializers.DateField(required=False, allow_null=True)
    academic_term = serializers.CharField(max_length=20, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000)


class DecisionReadinessSerializer(serializers.Serializer):
    is_ready = serializers.BooleanField()
    issues = serializers.ListField(child=serializers.CharField())
    warnings = serializers.ListField(child=serializers.CharField())
    all_documents_submitted = serializers.BooleanField()
    earliest_decision_date = serializers.DateTimeField(allow_null=True)


class ApplicationEventSerializer(serializers.Serializer):
    event_date = serializers.DateTimeField()
    event_type = serializers.CharField()
    description = serializers.CharField()
    processed_by = serializers.CharField(allow_blank=True)
    status = serializers.CharField(allow_null=True)
    decision = serializers.CharField(allow_null=True)
