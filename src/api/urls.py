"""Main API URL router for /api/v1/."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from api.v1 import views as v1_views
from api.v1 import document_views
from api.v1 import reporting_views
from api.auth_views import (
    CookieTokenObtainPairView,
    CookieTokenRefreshView,
    LogoutAPIView,
    CSRFTokenAPIView,
    PasswordResetRequestAPIView,
    PasswordResetConfirmAPIView,
)

router = DefaultRouter()
router.register(r'users', v1_views.UserViewSet)
router.register(r'companies', v1_views.CompanyViewSet)
router.register(r'contacts', v1_views.ContactViewSet)
router.register(r'service-categories', v1_views.ServiceCategoryViewSet)
router.register(r'services', v1_views.ServiceViewSet)
router.register(r'company-services', v1_views.CompanyServiceViewSet)
router.register(r'projects', v1_views.ProjectViewSet)
router.register(r'invoices', v1_views.InvoiceViewSet)
router.register(r'admin/proposals', document_views.ProposalViewSet, basename='proposal')
router.register(r'admin/agreements', document_views.AgreementViewSet, basename='agreement')
router.register(r'report-sets', reporting_views.ReportSetViewSet)
router.register(r'reports', reporting_views.ReportViewSet)
router.register(r'report-items', reporting_views.ReportItemViewSet)


app_name = 'api'
urlpatterns = [
    path('', include(router.urls)),

    # Auth endpoints
    path('auth/csrf/', CSRFTokenAPIView.as_view(), name='auth-csrf'),
    path('auth/token/', CookieTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/logout/', LogoutAPIView.as_view(), name='auth-logout'),
    path('auth/me/', v1_views.MeView.as_view(), name='auth-me'),
    path('auth/password/change/', v1_views.ChangePasswordView.as_view(), name='auth-password-change'),
    path('auth/password/reset/', PasswordResetRequestAPIView.as_view(), name='auth-password-reset'),
    path('auth/password/reset/confirm/', PasswordResetConfirmAPIView.as_view(), name='auth-password-reset-confirm'),

    # Current company
    path('me/companies/', v1_views.MyCompaniesView.as_view(), name='me-companies'),
    path('me/current-company/', v1_views.CurrentCompanyView.as_view(), name='me-current-company'),
    path('dashboard/', v1_views.DashboardView.as_view(), name='dashboard'),

    # Admin integrations
    path('admin/stripe-sync/', v1_views.StripeSyncView.as_view(), name='stripe-sync'),
    path('admin/clickup/folders/', v1_views.ClickUpFoldersView.as_view(), name='clickup-folders'),
    path('admin/clickup/lists/', v1_views.ClickUpListsView.as_view(), name='clickup-lists'),
    path('admin/clickup/members/', v1_views.ClickUpMembersView.as_view(), name='clickup-members'),

    # Reporting
    path('admin/reporting/', reporting_views.SeedReportSetView.as_view(), name='reporting-seed'),
    path('admin/reporting/analyze/', reporting_views.AnalyzeReportView.as_view(), name='reporting-analyze'),

    # Public documents (token is the only lookup key)
    path('public/proposals/<uuid:token>/', document_views.PublicProposalView.as_view(), name='public-proposal'),
    path('public/proposals/<uuid:token>/accept/', document_views.PublicProposalAcceptView.as_view(), name='public-proposal-accept'),
    path('public/proposals/<uuid:token>/decline/', document_views.PublicProposalDeclineView.as_view(), name='public-proposal-decline'),
    path('public/agreements/<uuid:token>/', document_views.PublicAgreementView.as_view(), name='public-agreement'),
    path('public/agreements/<uuid:token>/sign/', document_views.PublicAgreementSignView.as_view(), name='public-agreement-sign'),

    # Webhooks & health
    path('webhooks/resend/', v1_views.ResendWebhookView.as_view(), name='webhook-resend'),
    path('health/', v1_views.HealthView.as_view(), name='health'),
]
