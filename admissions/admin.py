# admissions/admin.py
from django.contrib import admin
from .models import EnrollmentApplication, ApplicationDocument


class ApplicationDocumentInline(admin.TabularInline):
    model = ApplicationDocument
    extra = 0
    fields = ['document_type', 'file_name', 'is_required', 'is_verified', 'verified_by', 'verification_date']
    readonly_fields = ['verified_by', 'verification_date']


@admin.register(EnrollmentApplication)
class EnrollmentApplicationAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'applicant_name',
        'program',
        'department_name',
        'status',
        'priority',
        'decision',
        'application_date',
    ]
    list_filter = ['status', 'priority', 'decision', 'department_name', 'academic_term']
    search_fields = ['applicant_name', 'email', 'program', 'applicant__student_number']
    raw_id_fields = ['applicant']
    inlines = [ApplicationDocumentInline]

    # Workflow-owned fields
    readonly_fields = [
        'status',
        'decision',
        'decision_date',
        'decision_reason',
        'decision_made_by',
        'notes',
        'application_date',
        'created_at',
        'updated_at',
    ]
