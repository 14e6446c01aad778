"""Public document URLs shared with clients by token."""
from django.urls import path

from dashboard import public_views

app_name = "public"

urlpatterns = [
    path("proposals/<uuid:token>/", public_views.proposal_page, name="proposal"),
    path("proposals/<uuid:token>/accept/", public_views.proposal_accept, name="proposal-accept"),
    path("proposals/<uuid:token>/decline/", public_views.proposal_decline, name="proposal-decline"),
    path("agreements/<uuid:token>/", public_views.agreement_page, name="agreement"),
    path("agreements/<uuid:token>/sign/", public_views.agreement_sign, name="agreement-sign"),
]
