"""Proposal and agreement API views: admin workflow plus public token access."""
import logging

from django.core.exceptions import ImproperlyConfigured
from django.shortcuts import get_object_or_404

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from agreements.models import Agreement
from companies.models import Company
from core.http import client_ip, user_agent
from integrations.exceptions import AIError
from proposals.models import Proposal

from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsAdmin
from api.v1.serializers import (
    AgreementGenerateSerializer,
    AgreementSendSerializer,
    AgreementSerializer,
    AgreementSignSerializer,
    AutoGenerateSerializer,
    GenerateSectionsSerializer,
    ProposalAcceptSerializer,
    ProposalCreateSerializer,
    ProposalSerializer,
    ProposalUpdateSerializer,
    PublicAgreementSerializer,
    PublicProposalSerializer,
    RegenerateSectionSerializer,
)

logger = logging.getLogger("portal")

AI_ERRORS = (AIError, ImproperlyConfigured)


def _company_or_none(company_id):
    if not company_id:
        return None
    return get_object_or_404(Company, pk=company_id)


def _ai_error_response(exc):
    logger.error("Proposal generation failed: %s", exc)
    return Response({'detail': str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


# ---------------------------------------------------------------------------
# Proposals (admin)
# ---------------------------------------------------------------------------

class ProposalViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Proposal drafting and sending.

    - create: draft with line items (and optional generated sections)
    - partial_update: edit fields; ``items`` replaces every line item
    - send: draft -> sent, emails the share link
    - generate / generate-section / auto-generate: AI drafting
    """

    serializer_class = ProposalSerializer
    queryset = Proposal.objects.select_related('company', 'created_by').prefetch_related('items')
    permission_classes = [IsAdmin]
    filterset_fields = ['company', 'status', 'generation_status']
    search_fields = ['title', 'company__name']
    ordering_fields = ['created_at', 'valid_until', 'total_amount_cents', 'status']
    pagination_class = StandardResultsSetPagination

    def create(self, request, *args, **kwargs):
        serializer = ProposalCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        from proposals.services import create_proposal
        try:
            proposal = create_proposal(
                request.user,
                company=_company_or_none(data.get('company_id')),
                title=data['title'],
                items=data['items'],
                valid_until=data.get('valid_until'),
                notes=data['notes'],
                sections=data.get('sections'),
                meeting_notes_url=data['meeting_notes_url'],
                meeting_notes_content=data['meeting_notes_content'],
            )
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {'proposal': {'id': str(proposal.pk), 'token': proposal.token}},
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, *args, **kwargs):
        proposal = self.get_object()
        serializer = ProposalUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        changes = dict(serializer.validated_data)
        items = changes.pop('items', None)

        from proposals.services import update_proposal
        try:
            update_proposal(proposal, request.user, items=items, **changes)
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'success': True})

    def update(self, request, *args, **kwargs):
        return self.partial_update(request, *args, **kwargs)

    @action(detail=True, methods=['post'], url_path='send')
    def send(self, request, pk=None):
        proposal = self.get_object()
        from proposals.services import send_proposal
        try:
            proposal = send_proposal(proposal, request.user, ip=client_ip(request))
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ProposalSerializer(proposal).data)

    @action(detail=False, methods=['post'], url_path='generate')
    def generate(self, request):
        """Draft the narrative sections from meeting notes and chosen services."""
        serializer = GenerateSectionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if not data.get('company_id') or not data['service_ids']:
            return Response(
                {'detail': 'company_id and at least one service_id are required'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        company = _company_or_none(data['company_id'])

        from proposals.services import generate_sections_for_company
        try:
            sections = generate_sections_for_company(company, data['service_ids'], data['meeting_notes'])
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except AI_ERRORS as e:
            return _ai_error_response(e)
        return Response({'sections': sections})

    @action(detail=False, methods=['post'], url_path='generate/section')
    def generate_section(self, request):
        serializer = RegenerateSectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if not data.get('company_id'):
            return Response(
                {'detail': 'company_id, service_ids, and a valid section_type are required'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        company = _company_or_none(data['company_id'])

        from proposals.services import regenerate_section_for_company
        try:
            section = regenerate_section_for_company(
                company,
                data['service_ids'],
                data['meeting_notes'],
                data['section_type'],
                data['current_content'],
            )
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except AI_ERRORS as e:
            return _ai_error_response(e)
        return Response({'section': section})

    @action(detail=False, methods=['post'], url_path='auto-generate')
    def auto_generate(self, request):
        """Recommend services, draft sections and create the proposal in one go."""
        serializer = AutoGenerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if not data.get('company_id'):
            return Response({'detail': 'company_id is required'}, status=status.HTTP_400_BAD_REQUEST)
        company = _company_or_none(data['company_id'])

        from proposals.services import auto_generate_proposal
        try:
            proposal, recommendations = auto_generate_proposal(
                request.user,
                company,
                data['meeting_notes'],
                meeting_notes_url=data['meeting_notes_url'],
            )
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except AI_ERRORS as e:
            return _ai_error_response(e)
        return Response(
            {
                'proposal_id': str(proposal.pk),
                'token': proposal.token,
                'slug': company.slug,
                'recommendations': recommendations,
            },
            status=status.HTTP_201_CREATED,
        )


# ---------------------------------------------------------------------------
# Agreements (admin)
# ---------------------------------------------------------------------------

class AgreementViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = AgreementSerializer
    queryset = Agreement.objects.select_related('company', 'proposal', 'template')
    permission_classes = [IsAdmin]
    filterset_fields = ['company', 'proposal', 'type', 'status']
    search_fields = ['title', 'company__name', 'signed_by_email']
    ordering_fields = ['created_at', 'signed_at', 'status']
    pagination_class = StandardResultsSetPagination

    @action(detail=False, methods=['post'], url_path='generate')
    def generate(self, request):
        """Create a draft agreement of ``type`` from an accepted proposal."""
        serializer = AgreementGenerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        proposal = get_object_or_404(Proposal.objects.select_related('company'), pk=serializer.validated_data['proposal_id'])

        from agreements.services import generate_agreement
        try:
            agreement = generate_agreement(proposal, serializer.validated_data['type'], actor=request.user)
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(AgreementSerializer(agreement).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='send')
    def send(self, request, pk=None):
        agreement = self.get_object()
        serializer = AgreementSendSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        from agreements.services import send_agreement
        try:
            agreement = send_agreement(
                agreement,
                request.user,
                valid_until=serializer.validated_data.get('valid_until'),
                ip=client_ip(request),
            )
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(AgreementSerializer(agreement).data)

    @action(detail=True, methods=['get'], url_path='pdf')
    def pdf(self, request, pk=None):
        """Render the agreement, signed or not, as a PDF attachment."""
        agreement = self.get_object()
        from agreements.services import agreement_pdf_context
        from core.pdf import render_pdf, safe_pdf_filename
        return render_pdf(
            'agreements/agreement_pdf.html',
            agreement_pdf_context(agreement),
            filename=safe_pdf_filename(agreement.title, 'agreement'),
        )


# ---------------------------------------------------------------------------
# Public token endpoints
# ---------------------------------------------------------------------------

class PublicProposalView(APIView):
    """GET /api/v1/public/proposals/<token>/ - view a shared proposal."""

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = 'public_documents'

    def get(self, request, token):
        from proposals.services import view_proposal_by_token
        proposal = view_proposal_by_token(token)
        return Response(PublicProposalSerializer(proposal).data)


class PublicProposalAcceptView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = 'public_documents'

    def post(self, request, token):
        from proposals.services import accept_proposal
        serializer = ProposalAcceptSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            proposal = accept_proposal(
                token,
                serializer.validated_data['email'],
                ip=client_ip(request),
                user_agent=user_agent(request),
            )
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'success': True, 'accepted_at': proposal.accepted_at})


class PublicProposalDeclineView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = 'public_documents'

    def post(self, request, token):
        from proposals.services import decline_proposal
        try:
            proposal = decline_proposal(token, ip=client_ip(request), user_agent=user_agent(request))
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'success': True, 'declined_at': proposal.declined_at})


class PublicAgreementView(APIView):
    """GET /api/v1/public/agreements/<token>/ - view a shared agreement."""

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = 'public_documents'

    def get(self, request, token):
        from agreements.services import view_agreement_by_token
        agreement = view_agreement_by_token(token)
        return Response(PublicAgreementSerializer(agreement).data)


class PublicAgreementSignView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = 'public_documents'

    def post(self, request, token):
        from agreements.services import sign_agreement
        serializer = AgreementSignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            agreement = sign_agreement(
                token,
                serializer.validated_data['name'],
                serializer.validated_data['email'],
                ip=client_ip(request),
                user_agent=user_agent(request),
            )
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'success': True, 'signed_at': agreement.signed_at})

