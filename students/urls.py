# students/urls.py
from django.urls import path
from . import views

app_name = 'students'

urlpatterns = [
    path('<int:student_id>/', views.StudentDetailView.as_view(), name='student_detail'),
    path('<int:student_id>/history/', views.StudentHistoryView.as_view(), name='student_history'),
    path('<int:student_id>/status/', views.EnrollmentStatusView.as_view(), name='student_status'),
    path('<int:student_id>/standing/', views.AcademicStandingView.as_view(), name='student_standing'),
]
