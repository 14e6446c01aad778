"""ViewSets and API views for the client portal API v1."""
import logging
import time

from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import ImproperlyConfigured
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.db import connection
from django.utils import timezone

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from billing.models import Invoice
from catalog.models import CompanyService, Service, ServiceCategory
from companies.models import Company, Contact
from core.export import cents_column, queryset_to_csv_response
from core.http import client_ip
from integrations.exceptions import IntegrationError
from projects.models import Project

from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsAdmin, IsAdminOrReadOnly, IsPortalUser, IsStaffMember
from api.v1.serializers import (
    ChangePasswordSerializer,
    CompanySerializer,
    CompanyServiceSerializer,
    CompanySummarySerializer,
    ContactSerializer,
    InviteUserSerializer,
    InvoiceSerializer,
    MeSerializer,
    ProjectCreateSerializer,
    ProjectSerializer,
    ServiceCategorySerializer,
    ServiceSerializer,
    UserSerializer,
)

logger = logging.getLogger("portal")


def _current_company(request):
    """Company the API caller is viewing, resolved from the cookie."""
    from companies.services import resolve_current_company
    return resolve_current_company(request, request.user)


def _is_admin(user):
    return user.is_authenticated and user.role == User.Role.ADMIN


class CompanyScopedQuerysetMixin:
    """Admins see every row; other users only rows of their current company."""

    company_field = 'company'

    def get_queryset(self):
        qs = super().get_queryset()
        if _is_admin(self.request.user):
            return qs
        company = _current_company(self.request)
        if company is None:
            return qs.none()
        return qs.filter(**{self.company_field: company})


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Admin user management: list, retrieve, change role/active flag, invite."""

    serializer_class = UserSerializer
    queryset = User.objects.select_related('client').order_by('email')
    permission_classes = [IsAdmin]
    filterset_fields = ['role', 'is_active', 'client']
    search_fields = ['email', 'first_name', 'last_name']
    ordering_fields = ['email', 'date_joined', 'last_login']
    pagination_class = StandardResultsSetPagination

    def perform_update(self, serializer):
        before = {'role': serializer.instance.role, 'is_active': serializer.instance.is_active}
        user = serializer.save()
        from core.services import create_audit_log
        create_audit_log(
            actor=self.request.user,
            company=user.client,
            action='USER_UPDATED',
            entity_type='User',
            entity_id=str(user.pk),
            before=before,
            after={'role': user.role, 'is_active': user.is_active},
            ip=client_ip(self.request),
        )

    @action(detail=False, methods=['post'], url_path='invite')
    def invite(self, request):
        """POST /api/v1/users/invite/ - create a user and email a password-set link."""
        serializer = InviteUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        from accounts.services import invite_user
        try:
            user = invite_user(
                request.user,
                email=serializer.validated_data['email'],
                full_name=serializer.validated_data['full_name'],
                role=serializer.validated_data['role'],
                client_id=serializer.validated_data.get('client_id'),
            )
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {'success': True, 'user_id': str(user.pk)},
            status=status.HTTP_201_CREATED,
        )


class MeView(APIView):
    """
    GET /api/v1/auth/me/ - the authenticated user's profile.
    PATCH /api/v1/auth/me/ - update first_name, last_name, phone.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)

    def patch(self, request):
        serializer = MeSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class ChangePasswordView(APIView):
    """POST /api/v1/auth/password/change/ - change the caller's password."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data['new_password'])
        request.user.save()
        logger.info("Password changed for %s", request.user.email)
        return Response({'detail': 'Password changed.'})


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------

class CompanyViewSet(viewsets.ModelViewSet):
    """Companies (leads, prospects and clients): staff read, admins write."""

    serializer_class = CompanySerializer
    queryset = Company.objects.all()
    permission_classes = [IsAdmin]
    filterset_fields = ['type', 'status', 'industry']
    search_fields = ['name', 'slug', 'contact_name', 'contact_email', 'city']
    ordering_fields = ['name', 'created_at', 'status']
    pagination_class = StandardResultsSetPagination

    def get_permissions(self):
        if self.action in ('list', 'retrieve'):
            return [IsStaffMember()]
        return super().get_permissions()

    @action(detail=True, methods=['post'], url_path='qualify')
    def qualify(self, request, pk=None):
        """Promote a lead to a prospect awaiting a proposal."""
        company = self.get_object()
        from companies.services import qualify_lead
        try:
            company = qualify_lead(company, request.user)
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(CompanySerializer(company).data)

    @action(detail=False, methods=['get'], url_path='export-csv')
    def export_csv(self, request):
        qs = self.filter_queryset(self.get_queryset())
        columns = [
            ('name', 'Name'),
            ('type', 'Type'),
            ('status', 'Status'),
            ('industry', 'Industry'),
            ('website_url', 'Website'),
            ('contact_name', 'Contact'),
            ('contact_email', 'Contact email'),
            ('phone', 'Phone'),
            ('full_address', 'Address'),
            ('created_at', 'Created'),
        ]
        return queryset_to_csv_response(qs, columns, 'companies')


class ContactViewSet(viewsets.ModelViewSet):
    serializer_class = ContactSerializer
    queryset = Contact.objects.select_related('company')
    permission_classes = [IsAdmin]
    filterset_fields = ['company', 'is_primary', 'role']
    search_fields = ['full_name', 'email', 'phone']
    ordering_fields = ['full_name', 'created_at']
    pagination_class = StandardResultsSetPagination


class MyCompaniesView(APIView):
    """GET /api/v1/me/companies/ - companies the caller can view, and the current one."""

    permission_classes = [IsPortalUser]

    def get(self, request):
        from companies.services import user_companies
        current = _current_company(request)
        return Response({
            'companies': CompanySummarySerializer(user_companies(request.user), many=True).data,
            'current_company_id': str(current.pk) if current else None,
        })


class CurrentCompanyView(APIView):
    """POST /api/v1/me/current-company/ - switch the current company cookie."""

    permission_classes = [IsPortalUser]

    def post(self, request):
        from companies.services import set_current_company_cookie, switch_current_company
        try:
            company = switch_current_company(request.user, str(request.data.get('company_id') or ''))
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except DjangoPermissionDenied as e:
            raise PermissionDenied(str(e))
        response = Response({'success': True, 'company': CompanySummarySerializer(company).data})
        set_current_company_cookie(response, company.pk)
        return response


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ServiceCategoryViewSet(viewsets.ModelViewSet):
    serializer_class = ServiceCategorySerializer
    queryset = ServiceCategory.objects.all()
    permission_classes = [IsAdminOrReadOnly]
    search_fields = ['name']
    ordering_fields = ['sort_order', 'name']
    pagination_class = StandardResultsSetPagination


class ServiceViewSet(viewsets.ModelViewSet):
    """Service catalog; clients only see active services."""

    serializer_class = ServiceSerializer
    queryset = Service.objects.select_related('category')
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['category', 'service_type', 'billing_frequency', 'is_active']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'base_price_cents', 'created_at']
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        qs = super().get_queryset()
        if not _is_admin(self.request.user):
            qs = qs.filter(is_active=True)
        return qs


class CompanyServiceViewSet(CompanyScopedQuerysetMixin, viewsets.ModelViewSet):
    serializer_class = CompanyServiceSerializer
    queryset = CompanyService.objects.select_related('company', 'service')
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['company', 'service', 'status']
    ordering_fields = ['created_at', 'started_at']
    pagination_class = StandardResultsSetPagination


class StripeSyncView(APIView):
    """POST /api/v1/admin/stripe-sync/ - match Stripe products to services."""

    permission_classes = [IsAdmin]

    def post(self, request):
        from catalog.services import sync_stripe_catalog
        dry_run = bool(request.data.get('dry_run', False))
        try:
            result = sync_stripe_catalog(dry_run=dry_run, actor=request.user)
        except IntegrationError as e:
            return Response({'detail': str(e)}, status=status.HTTP_502_BAD_GATEWAY)
        except ImproperlyConfigured as e:
            return Response({'detail': f'Stripe API error: {e}'}, status=status.HTTP_502_BAD_GATEWAY)
        return Response(result)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class ProjectViewSet(CompanyScopedQuerysetMixin, viewsets.ModelViewSet):
    """Projects CRUD (admin); clients read their current company's projects."""

    serializer_class = ProjectSerializer
    queryset = Project.objects.select_related('company')
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['company', 'status']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'created_at', 'start_date', 'end_date']
    pagination_class = StandardResultsSetPagination

    def create(self, request, *args, **kwargs):
        """Create the project and, when a list is given, its ClickUp task."""
        serializer = ProjectCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        company = None
        if data.get('company_id'):
            company = Company.objects.filter(pk=data['company_id']).first()
            if company is None:
                return Response({'detail': 'Company not found'}, status=status.HTTP_404_NOT_FOUND)

        from projects.services import create_project
        try:
            result = create_project(
                actor=request.user,
                company=company,
                name=data['name'],
                description=data['description'],
                status=data['status'],
                start_date=data.get('start_date'),
                end_date=data.get('end_date'),
                clickup_list_id=data['clickup_list_id'],
                clickup_assignee_id=data.get('clickup_assignee_id'),
            )
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                'project': ProjectSerializer(result.project).data,
                'clickup_task_id': result.clickup_task_id,
                'clickup_warning': result.clickup_warning,
            },
            status=status.HTTP_201_CREATED,
        )


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------

class InvoiceViewSet(CompanyScopedQuerysetMixin, viewsets.ModelViewSet):
    """Invoices CRUD (admin) with payment actions; read-only for clients."""

    serializer_class = InvoiceSerializer
    queryset = Invoice.objects.select_related('company')
    permission_classes = [IsAdminOrReadOnly]
    filterset_fields = ['company', 'status', 'currency']
    search_fields = ['description', 'stripe_invoice_id', 'company__name']
    ordering_fields = ['invoice_date', 'due_date', 'amount_cents', 'created_at']
    pagination_class = StandardResultsSetPagination

    def get_permissions(self):
        if self.action in ('mark_paid', 'void', 'export_csv'):
            return [IsAdmin()]
        return super().get_permissions()

    @action(detail=True, methods=['post'], url_path='mark-paid')
    def mark_paid(self, request, pk=None):
        invoice = self.get_object()
        from billing.services import mark_invoice_paid
        try:
            invoice = mark_invoice_paid(invoice, request.user, ip=client_ip(request))
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(InvoiceSerializer(invoice).data)

    @action(detail=True, methods=['post'], url_path='void')
    def void(self, request, pk=None):
        invoice = self.get_object()
        from billing.services import void_invoice
        try:
            invoice = void_invoice(invoice, request.user, ip=client_ip(request))
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(InvoiceSerializer(invoice).data)

    @action(detail=False, methods=['get'], url_path='export-csv')
    def export_csv(self, request):
        qs = self.filter_queryset(self.get_queryset())
        columns = [
            (lambda inv: inv.company.name, 'Company'),
            ('description', 'Description'),
            (cents_column('amount_cents'), 'Amount'),
            ('currency', 'Currency'),
            ('status', 'Status'),
            ('invoice_date', 'Invoice date'),
            ('due_date', 'Due date'),
            ('paid_at', 'Paid at'),
        ]
        return queryset_to_csv_response(qs, columns, 'invoices')


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class DashboardView(APIView):
    """GET /api/v1/dashboard/ - overview for the current company."""

    permission_classes = [IsPortalUser]

    def get(self, request):
        from dashboard.services import dashboard_summary
        summary = dashboard_summary(_current_company(request))
        company = summary['company']
        return Response({
            'company': CompanySummarySerializer(company).data if company else None,
            'active_projects': summary['active_projects'],
            'open_invoices': summary['open_invoices'],
            'open_total_cents': summary['open_total_cents'],
            'active_services': summary['active_services'],
            'recent_projects': ProjectSerializer(summary['recent_projects'], many=True).data,
        })


# ---------------------------------------------------------------------------
# Health & webhooks
# ---------------------------------------------------------------------------

class HealthView(APIView):
    """GET /api/v1/health/ - database and cache checks."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        started = time.monotonic()
        checks = {'database': self._check_database(), 'cache': self._check_cache()}
        healthy = all(value == 'ok' for value in checks.values())
        payload = {
            'status': 'ok' if healthy else 'degraded',
            'version': settings.APP_VERSION,
            'checks': checks,
            'latency_ms': round((time.monotonic() - started) * 1000),
            'timestamp': timezone.now().isoformat(),
        }
        return Response(payload, status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE)

    @staticmethod
    def _check_database():
        try:
            with connection.cursor() as cursor:
                cursor.execute('SELECT 1')
                cursor.fetchone()
        except Exception as exc:
            logger.warning("Health check: database unavailable: %s", exc)
            return 'error'
        return 'ok'

    @staticmethod
    def _check_cache():
        try:
            cache.set('health:ping', 'pong', 10)
            if cache.get('health:ping') != 'pong':
                return 'error'
        except Exception as exc:
            logger.warning("Health check: cache unavailable: %s", exc)
            return 'error'
        return 'ok'


class ResendWebhookView(APIView):
    """POST /api/v1/webhooks/resend/ - delivery events from Resend."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        from notifications.services import apply_resend_event
        payload = request.data if isinstance(request.data, dict) else {}
        apply_resend_event(payload)
        return Response({'received': True})


# ---------------------------------------------------------------------------
# ClickUp
# ---------------------------------------------------------------------------

class ClickUpFoldersView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        from integrations import clickup
        try:
            return Response(clickup.get_folders())
        except (IntegrationError, ImproperlyConfigured):
            logger.exception("ClickUp folders fetch failed")
            return Response({'detail': 'Failed to fetch ClickUp folders'}, status=status.HTTP_502_BAD_GATEWAY)


class ClickUpListsView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        folder_id = request.query_params.get('folder_id')
        if not folder_id:
            return Response({'detail': 'folder_id is required'}, status=status.HTTP_400_BAD_REQUEST)
        from integrations import clickup
        try:
            return Response(clickup.get_lists(folder_id))
        except (IntegrationError, ImproperlyConfigured):
            logger.exception("ClickUp lists fetch failed for folder %s", folder_id)
            return Response({'detail': 'Failed to fetch ClickUp lists'}, status=status.HTTP_502_BAD_GATEWAY)


class ClickUpMembersView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        from integrations import clickup
        try:
            return Response(clickup.get_members())
        except (IntegrationError, ImproperlyConfigured):
            logger.exception("ClickUp members fetch failed")
            return Response({'detail': 'Failed to fetch ClickUp members'}, status=status.HTTP_502_BAD_GATEWAY)
