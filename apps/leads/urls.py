from django.urls import path
from . import views

app_name = 'leads'

urlpatterns = [
    path('intake/', views.lead_intake_webhook, name='lead_intake'),
    path('create/', views.lead_create_view, name='lead_create'),
    path('<int:pk>/update/', views.lead_update_view, name='lead_update'),
    path('<int:pk>/archive/', views.lead_archive_view, name='lead_archive'),
    path('<int:pk>/call-outcome/', views.lead_call_outcome_view, name='lead_call_outcome'),
    path('<int:pk>/qualify/', views.lead_qualify_view, name='lead_qualify'),
    path('<int:pk>/language-evaluation/', views.lead_language_evaluation_view, name='lead_language_evaluation'),
    path('<int:pk>/workflow/', views.lead_workflow_view, name='lead_workflow'),
]
