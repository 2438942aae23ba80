# admissions/urls.py
from django.urls import path
from . import views

app_name = 'admissions'

urlpatterns = [
    # ============ APPLICATIONS ============
    path('applications/', views.ApplicationListView.as_view(), name='application_list'),
    path('applications/attention/', views.ApplicationsRequiringAttentionView.as_view(), name='application_attention'),
    path('applications/<int:application_id>/', views.ApplicationDetailView.as_view(), name='application_detail'),
    path('applications/<int:application_id>/readiness/', views.ApplicationReadinessView.as_view(), name='application_readiness'),
    path('applications/<int:application_id>/timeline/', views.ApplicationTimelineView.as_view(), name='application_timeline'),

    # ============ WORKFLOW ACTIONS ============
    path('applications/<int:application_id>/review/', views.InitiateReviewView.as_view(), name='application_review'),
    path('applications/<int:application_id>/documents-request/', views.RequestDocumentsView.as_view(), name='application_documents_request'),
    path('applications/<int:application_id>/hold/', views.PlaceOnHoldView.as_view(), name='application_hold'),
    path('applications/<int:application_id>/hold/remove/', views.RemoveHoldView.as_view(), name='application_hold_remove'),
    path('applications/<int:application_id>/decision/', views.AdmissionDecisionView.as_view(), name='application_decision'),
    path('applications/<int:application_id>/admit/', views.AdmitStudentView.as_view(), name='application_admit'),
    path('applications/<int:application_id>/enrollment/', views.ProcessEnrollmentView.as_view(), name='application_enrollment'),
    path('applications/<int:application_id>/withdraw/', views.WithdrawApplicationView.as_view(), name='application_withdraw'),
    path('applications/<int:application_id>/expedite/', views.ExpediteApplicationView.as_view(), name='application_expedite'),

    # ============ REPORTING ============
    path('stats/', views.AdmissionStatsView.as_view(), name='admission_stats'),
]
