"""URL configuration for the client dashboard."""
from django.urls import path

from dashboard import views

app_name = "dashboard"

urlpatterns = [
    path("", views.overview, name="index"),
    path("projects/", views.project_list, name="projects"),
    path("billing/", views.billing, name="billing"),
    path("services/", views.service_list, name="services"),
    path("switch-company/", views.company_switch, name="switch-company"),
]
