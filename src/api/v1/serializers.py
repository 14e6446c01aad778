"""Serializers for the client portal API v1."""
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from accounts.models import User
from agreements.models import Agreement, AgreementType
from billing.models import Invoice
from catalog.models import CompanyService, Service, ServiceCategory
from companies.models import Company, Contact
from projects.models import Project
from proposals.models import Proposal, ProposalItem
from reports.models import Report, ReportItem, ReportSet
from reports.scoring import calculate_percentage, tier_label


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserSerializer(serializers.ModelSerializer):
    """Admin view of a portal user; only role and active flag are writable."""

    full_name = serializers.CharField(source='get_full_name', read_only=True)
    client_name = serializers.CharField(source='client.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'full_name', 'phone',
            'role', 'is_active', 'client', 'client_name',
            'invited_at', 'last_login', 'last_login_ip', 'login_count',
            'date_joined',
        ]
        read_only_fields = [
            'id', 'email', 'first_name', 'last_name', 'full_name', 'phone',
            'client', 'client_name', 'invited_at', 'last_login',
            'last_login_ip', 'login_count', 'date_joined',
        ]


class InviteUserSerializer(serializers.Serializer):
    email = serializers.EmailField()
    full_name = serializers.CharField(required=False, allow_blank=True, default='')
    role = serializers.CharField(required=False, default='client')
    client_id = serializers.UUIDField(required=False, allow_null=True)


class MeSerializer(serializers.ModelSerializer):
    """The authenticated user's own profile (GET/PATCH)."""

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name',
            'phone', 'role', 'is_active', 'client',
        ]
        read_only_fields = ['id', 'email', 'role', 'is_active', 'client']


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Extends the JWT token response with the user profile."""

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = MeSerializer(self.user).data
        return data


class ChangePasswordSerializer(serializers.Serializer):
    old_password = serializers.CharField(required=True, write_only=True)
    new_password = serializers.CharField(required=True, min_length=8, write_only=True)

    def validate_old_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect.')
        return value

    def validate_new_password(self, value):
        from django.contrib.auth.password_validation import validate_password
        from django.core.exceptions import ValidationError as DjangoValidationError
        user = self.context['request'].user
        try:
            validate_password(value, user=user)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(list(exc.messages))
        return value


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------

class CompanySerializer(serializers.ModelSerializer):
    industry_key = serializers.CharField(read_only=True)
    full_address = serializers.CharField(read_only=True)

    class Meta:
        model = Company
        fields = [
            'id', 'name', 'slug', 'type', 'status', 'industry', 'industry_key',
            'website_url', 'address', 'city', 'state', 'postal_code', 'country',
            'full_address', 'phone', 'contact_name', 'contact_email', 'notes',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'slug', 'created_at', 'updated_at']
        extra_kwargs = {'status': {'required': False}}

    def create(self, validated_data):
        from companies.services import create_company
        try:
            return create_company(self.context['request'].user, **validated_data)
        except ValueError as e:
            raise serializers.ValidationError({'detail': str(e)})


class CompanySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = ['id', 'name', 'slug', 'type', 'status']
        read_only_fields = fields


class ContactSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.name', read_only=True)

    class Meta:
        model = Contact
        fields = [
            'id', 'company', 'company_name', 'user', 'full_name', 'email',
            'phone', 'title', 'role', 'is_primary', 'notes',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def create(self, validated_data):
        from companies.services import save_contact
        return save_contact(Contact(**validated_data))

    def update(self, instance, validated_data):
        from companies.services import save_contact
        for field, value in validated_data.items():
            setattr(instance, field, value)
        return save_contact(instance)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ServiceCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceCategory
        fields = ['id', 'name', 'slug', 'sort_order']
        read_only_fields = ['id']


class ServiceSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    badge_path = serializers.CharField(read_only=True)

    class Meta:
        model = Service
        fields = [
            'id', 'category', 'category_name', 'name', 'slug', 'description',
            'service_type', 'billing_frequency', 'base_price_cents',
            'proposal_copy', 'contract_copy', 'included_scope', 'not_included',
            'projected_timeline', 'stripe_product_id', 'stripe_price_id',
            'is_active', 'badge_path', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'slug', 'badge_path', 'created_at', 'updated_at']

    def create(self, validated_data):
        from core.text import unique_slug
        validated_data['slug'] = unique_slug(Service, validated_data['name'])
        return super().create(validated_data)


class CompanyServiceSerializer(serializers.ModelSerializer):
    service_name = serializers.CharField(source='service.name', read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True)

    class Meta:
        model = CompanyService
        fields = [
            'id', 'company', 'company_name', 'service', 'service_name',
            'status', 'started_at', 'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def create(self, validated_data):
        from catalog.services import assign_service
        company = validated_data.pop('company')
        service = validated_data.pop('service')
        try:
            return assign_service(company, service, self.context['request'].user, **validated_data)
        except ValueError as e:
            raise serializers.ValidationError({'detail': str(e)})


# ---------------------------------------------------------------------------
# Projects & billing
# ---------------------------------------------------------------------------

class ProjectSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.name', read_only=True)

    class Meta:
        model = Project
        fields = [
            'id', 'company', 'company_name', 'name', 'slug', 'description',
            'status', 'start_date', 'end_date', 'clickup_task_id',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'slug', 'created_at', 'updated_at']


class ProjectCreateSerializer(serializers.Serializer):
    company_id = serializers.UUIDField(required=False, allow_null=True)
    name = serializers.CharField(required=False, allow_blank=True, default='')
    description = serializers.CharField(required=False, allow_blank=True, default='')
    status = serializers.ChoiceField(choices=Project.Status.choices, allow_blank=True, default='')
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    clickup_list_id = serializers.CharField(required=False, allow_blank=True, default='')
    clickup_assignee_id = serializers.IntegerField(required=False, allow_null=True)


class InvoiceSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.name', read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id', 'company', 'company_name', 'description', 'amount_cents',
            'currency', 'status', 'invoice_date', 'due_date', 'paid_at',
            'invoice_url', 'stripe_invoice_id', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'paid_at', 'created_at', 'updated_at']


# ---------------------------------------------------------------------------
# Proposals
# ---------------------------------------------------------------------------

class ProposalItemSerializer(serializers.ModelSerializer):
    line_total_cents = serializers.IntegerField(read_only=True)

    class Meta:
        model = ProposalItem
        fields = [
            'id', 'service', 'name', 'description', 'quantity',
            'unit_price_cents', 'sort_order', 'line_total_cents',
        ]
        read_only_fields = fields


class ProposalItemInputSerializer(serializers.Serializer):
    service_id = serializers.UUIDField(required=False, allow_null=True)
    name = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, default='')
    quantity = serializers.IntegerField(required=False, min_value=1, allow_null=True)
    unit_price_cents = serializers.IntegerField(min_value=0)
    sort_order = serializers.IntegerField(required=False, min_value=0, allow_null=True)


class ProposalSectionSerializer(serializers.Serializer):
    type = serializers.CharField()
    title = serializers.CharField(allow_blank=True)
    content = serializers.CharField(allow_blank=True, allow_null=True, required=False)
    sort_order = serializers.IntegerField()


class ProposalSerializer(serializers.ModelSerializer):
    """Read serializer for Proposal with nested items."""

    items = ProposalItemSerializer(many=True, read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True)

    class Meta:
        model = Proposal
        fields = [
            'id', 'company', 'company_name', 'title', 'token', 'status',
            'valid_until', 'notes', 'total_amount_cents', 'sections',
            'meeting_notes_url', 'meeting_notes_content',
            'generation_status', 'generated_at',
            'sent_at', 'first_viewed_at', 'view_count',
            'accepted_at', 'accepted_by_email', 'accepted_by_ip',
            'accepted_by_user_agent', 'declined_at',
            'created_by', 'items', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ProposalCreateSerializer(serializers.Serializer):
    company_id = serializers.UUIDField(required=False, allow_null=True)
    title = serializers.CharField(required=False, allow_blank=True, default='')
    valid_until = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    sections = ProposalSectionSerializer(many=True, required=False)
    meeting_notes_url = serializers.URLField(required=False, allow_blank=True, default='')
    meeting_notes_content = serializers.CharField(required=False, allow_blank=True, default='')
    items = ProposalItemInputSerializer(many=True, required=False, default=list)


class ProposalUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(required=False)
    valid_until = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    sections = ProposalSectionSerializer(many=True, required=False)
    meeting_notes_url = serializers.URLField(required=False, allow_blank=True)
    meeting_notes_content = serializers.CharField(required=False, allow_blank=True)
    total_amount_cents = serializers.IntegerField(required=False, min_value=0)
    items = ProposalItemInputSerializer(many=True, required=False)


class GenerateSectionsSerializer(serializers.Serializer):
    company_id = serializers.UUIDField(required=False, allow_null=True)
    service_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    meeting_notes = serializers.CharField(required=False, allow_blank=True, default='')
    meeting_notes_url = serializers.CharField(required=False, allow_blank=True, default='')


class RegenerateSectionSerializer(GenerateSectionsSerializer):
    section_type = serializers.CharField(required=False, allow_blank=True, default='')
    current_content = serializers.CharField(required=False, allow_blank=True, default='')


class AutoGenerateSerializer(serializers.Serializer):
    company_id = serializers.UUIDField(required=False, allow_null=True)
    meeting_notes = serializers.CharField(required=False, allow_blank=True, default='')
    meeting_notes_url = serializers.CharField(required=False, allow_blank=True, default='')


class ProposalAcceptSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=254, allow_blank=True, default='')


class AgreementSignSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, allow_blank=True, default='')
    email = serializers.CharField(max_length=254, allow_blank=True, default='')


class PublicProposalSerializer(serializers.ModelSerializer):
    """What a client sees through the share link."""

    items = ProposalItemSerializer(many=True, read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True)
    company_contact_email = serializers.CharField(source='company.contact_email', read_only=True)
    sections = serializers.JSONField(source='sorted_sections', read_only=True)

    class Meta:
        model = Proposal
        fields = [
            'id', 'title', 'status', 'valid_until', 'notes', 'total_amount_cents',
            'sections', 'company_name', 'company_contact_email', 'items',
            'sent_at', 'accepted_at', 'accepted_by_email', 'declined_at',
        ]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Agreements
# ---------------------------------------------------------------------------

class AgreementSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.name', read_only=True)

    class Meta:
        model = Agreement
        fields = [
            'id', 'company', 'company_name', 'proposal', 'template', 'type',
            'title', 'status', 'token', 'content_snapshot', 'valid_until',
            'sent_at', 'first_viewed_at', 'view_count',
            'signed_at', 'signed_by_name', 'signed_by_email', 'signed_by_ip',
            'signed_by_user_agent', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class AgreementGenerateSerializer(serializers.Serializer):
    proposal_id = serializers.UUIDField()
    type = serializers.ChoiceField(choices=AgreementType.choices)


class AgreementSendSerializer(serializers.Serializer):
    valid_until = serializers.DateField(required=False, allow_null=True)


class PublicAgreementSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.name', read_only=True)

    class Meta:
        model = Agreement
        fields = [
            'id', 'type', 'title', 'status', 'content_snapshot', 'valid_until',
            'company_name', 'sent_at', 'signed_at', 'signed_by_name',
            'signed_by_email',
        ]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

class ReportItemSerializer(serializers.ModelSerializer):
    max_score = serializers.FloatField(read_only=True)

    class Meta:
        model = ReportItem
        fields = [
            'id', 'report', 'category', 'status', 'score', 'max_score',
            'rating', 'total_reviews', 'feedback_summary', 'notes',
            'metadata', 'sort_order', 'updated_at',
        ]
        read_only_fields = ['id', 'report', 'category', 'max_score', 'sort_order', 'updated_at']


class ReportSerializer(serializers.ModelSerializer):
    items = ReportItemSerializer(many=True, read_only=True)
    label = serializers.CharField(source='get_report_type_display', read_only=True)
    tier_label = serializers.SerializerMethodField()
    percentage = serializers.SerializerMethodField()

    class Meta:
        model = Report
        fields = [
            'id', 'report_set', 'report_type', 'label', 'status', 'score',
            'max_score', 'tier', 'tier_label', 'percentage', 'opportunities_text',
            'items', 'updated_at',
        ]
        read_only_fields = fields

    def get_tier_label(self, obj):
        return tier_label(obj.tier)

    def get_percentage(self, obj):
        return calculate_percentage(obj.score, obj.max_score)


class ReportSetSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.name', read_only=True)
    company_slug = serializers.CharField(source='company.slug', read_only=True)
    reports = ReportSerializer(many=True, read_only=True)
    overall_tier_label = serializers.SerializerMethodField()

    class Meta:
        model = ReportSet
        fields = [
            'id', 'company', 'company_name', 'company_slug', 'status',
            'overall_score', 'overall_max_score', 'overall_tier', 'overall_tier_label',
            'reports', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_overall_tier_label(self, obj):
        return tier_label(obj.overall_tier)


class SeedReportSetSerializer(serializers.Serializer):
    company_id = serializers.UUIDField(required=False, allow_null=True)


class AnalyzeReportSerializer(serializers.Serializer):
    report_id = serializers.UUIDField(required=False, allow_null=True)
    report_type = serializers.CharField(required=False, allow_blank=True, default='')
