# students/admin.py
from django.contrib import admin
from .models import Student, EnrollmentHistory


# ===== STUDENT ADMIN =====
@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = [
        'student_number',
        'full_name',
        'program',
        'department_name',
        'enrollment_status',
        'academic_standing',
    ]
    list_filter = ['enrollment_status', 'academic_standing', 'department_name']
    search_fields = ['student_number', 'first_name', 'last_name', 'email']
    raw_id_fields = ['user']

    # Status fields change only through the admissions workflow
    readonly_fields = [
        'enrollment_status',
        'academic_standing',
        'enrollment_status_date',
        'enrollment_date',
        'actual_graduation_date',
        'last_academic_review_date',
        'created_at',
        'updated_at',
    ]

    fieldsets = (
        ('Personal Information', {
            'fields': ('student_number', 'first_name', 'last_name', 'email', 'phone_number', 'user')
        }),
        ('Academic Placement', {
            'fields': ('program', 'department_name', 'cumulative_gpa')
        }),
        ('Enrollment', {
            'fields': (
                'enrollment_status',
                'enrollment_status_date',
                'academic_standing',
                'last_academic_review_date',
                'enrollment_date',
                'actual_graduation_date',
            )
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


# ===== ENROLLMENT HISTORY ADMIN =====
@admin.register(EnrollmentHistory)
class EnrollmentHistoryAdmin(admin.ModelAdmin):
    list_display = ['student', 'event_type', 'previous_status', 'new_status', 'event_date', 'processed_by']
    list_filter = ['event_type', 'new_status', 'is_system_generated', 'department_name']
    search_fields = ['student__student_number', 'student__last_name', 'reason', 'processed_by']
    date_hierarchy = 'event_date'
    raw_id_fields = ['student', 'application']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
