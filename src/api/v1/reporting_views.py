"""Marketing report API: seeding, re-analysis and item edits."""
import logging

from django.shortcuts import get_object_or_404

from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from companies.models import Company
from reports.models import Report, ReportItem, ReportSet

from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsAdmin, IsAdminOrReadOnly
from api.v1.serializers import (
    AnalyzeReportSerializer,
    ReportItemSerializer,
    ReportSerializer,
    ReportSetSerializer,
    SeedReportSetSerializer,
)
from api.v1.views import CompanyScopedQuerysetMixin

logger = logging.getLogger("portal")


class SeedReportSetView(APIView):
    """POST /api/v1/admin/reporting/ - create and pre-fill a company's report set."""

    permission_classes = [IsAdmin]

    def post(self, request):
        serializer = SeedReportSetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        company_id = serializer.validated_data.get('company_id')
        if not company_id:
            return Response({'detail': 'company_id is required'}, status=status.HTTP_400_BAD_REQUEST)
        company = get_object_or_404(Company, pk=company_id)

        from reports.services import ReportSetExists, seed_report_set
        try:
            result = seed_report_set(company, actor=request.user)
        except ReportSetExists as e:
            return Response(
                {'detail': str(e), 'report_set_id': str(e.report_set_id)},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(result, status=status.HTTP_201_CREATED)


class AnalyzeReportView(APIView):
    """POST /api/v1/admin/reporting/analyze/ - re-run a report's analyzer."""

    permission_classes = [IsAdmin]

    def post(self, request):
        serializer = AnalyzeReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report_id = serializer.validated_data.get('report_id')
        report_type = serializer.validated_data['report_type']
        if not report_id or not report_type:
            return Response(
                {'detail': 'report_id and report_type are required'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        report = get_object_or_404(
            Report.objects.select_related('report_set', 'report_set__company'),
            pk=report_id,
        )

        from reports.services import AnalysisFailed, analyze_report
        try:
            result = analyze_report(report, report_type, actor=request.user)
        except ValueError as e:
            return Response({'detail': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except AnalysisFailed:
            return Response({'detail': 'Analysis failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(result)


class ReportSetViewSet(CompanyScopedQuerysetMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = ReportSetSerializer
    queryset = ReportSet.objects.select_related('company').prefetch_related('reports__items')
    permission_classes = [IsAuthenticated]
    filterset_fields = ['company', 'status', 'overall_tier']
    ordering_fields = ['created_at', 'overall_score']
    pagination_class = StandardResultsSetPagination


class ReportViewSet(CompanyScopedQuerysetMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = ReportSerializer
    queryset = Report.objects.select_related('report_set').prefetch_related('items')
    permission_classes = [IsAuthenticated]
    company_field = 'report_set__company'
    filterset_fields = ['report_set', 'report_type', 'status', 'tier']
    ordering_fields = ['created_at', 'score']
    pagination_class = StandardResultsSetPagination


class ReportItemViewSet(
    CompanyScopedQuerysetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Report items; admin edits cascade into the report and set scores."""

    serializer_class = ReportItemSerializer
    queryset = ReportItem.objects.select_related('report', 'report__report_set')
    permission_classes = [IsAdminOrReadOnly]
    company_field = 'report__report_set__company'
    filterset_fields = ['report', 'status']
    ordering_fields = ['sort_order', 'score']
    pagination_class = StandardResultsSetPagination

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        item = self.get_object()
        serializer = self.get_serializer(item, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        from reports.services import update_report_item
        item = update_report_item(item, actor=request.user, **serializer.validated_data)
        logger.info("Report item %s updated by %s", item.pk, request.user)
        return Response(ReportItemSerializer(item).data)
