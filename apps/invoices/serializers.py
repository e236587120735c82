from rest_framework import serializers

from .models import Invoice, InvoiceStatus, InvoiceType, InvoiceKind, UI_STATUSES
from .presentation import display_status


# =============================================================================
# Input Serializers
# =============================================================================

class InvoiceFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for invoice filtering.

    Query Parameters:
        project (UUID): Filter by project ID
        status (str): Filter by displayed status (pending includes cancelled)
        kind (str): client or third_party
        date_from (date): Invoices dated on or after
        date_to (date): Invoices dated on or before
    """

    project = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=[s.value for s in UI_STATUSES], required=False)
    kind = serializers.ChoiceField(choices=InvoiceKind.choices, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        """Validate date range."""
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })

        return attrs


class InvoiceCreateSerializer(serializers.Serializer):
    """Validate client invoice creation input."""

    project_id = serializers.UUIDField()
    invoice_number = serializers.CharField(max_length=100)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    date = serializers.DateField()
    description = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=InvoiceStatus.choices, required=False)
    type = serializers.ChoiceField(choices=InvoiceType.choices, required=False, allow_null=True)
    po_number = serializers.CharField(max_length=100, required=False, allow_blank=True)


class ThirdPartyInvoiceCreateSerializer(serializers.Serializer):
    """
    Validate third-party invoice creation input.

    ``amount`` may be omitted when ``client_invoice_id`` is given; the client
    invoice's amount is then used.
    """

    project_id = serializers.UUIDField()
    company = serializers.CharField(max_length=200)
    invoice_number = serializers.CharField(max_length=90)
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    date = serializers.DateField()
    description = serializers.CharField(required=False, allow_blank=True)
    client_invoice_id = serializers.UUIDField(required=False, allow_null=True)
    type = serializers.ChoiceField(choices=InvoiceType.choices, required=False, allow_null=True)
    po_number = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs.get('amount') is None and not attrs.get('client_invoice_id'):
            raise serializers.ValidationError({
                'amount': 'Amount is required unless client_invoice_id is given'
            })
        return attrs


class InvoiceUpdateSerializer(serializers.Serializer):
    """Validate partial invoice edits. Project and owner cannot change."""

    invoice_number = serializers.CharField(max_length=100, required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=InvoiceStatus.choices, required=False)
    type = serializers.ChoiceField(choices=InvoiceType.choices, required=False, allow_null=True)
    po_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    third_party_company = serializers.CharField(max_length=200, required=False, allow_blank=True)
    third_party_invoice_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    third_party_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )


class InvoiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in UI_STATUSES])


# =============================================================================
# Output Serializers
# =============================================================================

class ThirdPartySerializer(serializers.Serializer):
    company = serializers.CharField(source='third_party_company')
    invoice_number = serializers.CharField(source='third_party_invoice_number')
    amount = serializers.DecimalField(
        source='third_party_amount', max_digits=14, decimal_places=2, allow_null=True
    )


class InvoiceSerializer(serializers.ModelSerializer):
    """
    Invoice as shown to users.

    ``status`` is the displayed status: stored ``cancelled`` reads as
    ``pending``. ``third_party`` is null for client invoices.
    """

    project_id = serializers.UUIDField(read_only=True)
    status = serializers.SerializerMethodField()
    kind = serializers.CharField(read_only=True)
    third_party = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = [
            'id',
            'project_id',
            'project_name',
            'invoice_number',
            'amount',
            'date',
            'description',
            'status',
            'type',
            'po_number',
            'kind',
            'third_party',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_status(self, obj) -> str:
        return display_status(obj.status)

    def get_third_party(self, obj):
        if not obj.is_third_party:
            return None
        return ThirdPartySerializer(obj).data


class ProjectTotalsSerializer(serializers.Serializer):
    """Project running totals returned alongside a ledger write."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    budget = serializers.DecimalField(max_digits=14, decimal_places=2)
    invoiced = serializers.DecimalField(max_digits=14, decimal_places=2)
    invoice_count = serializers.IntegerField()
    hardware_invoiced = serializers.DecimalField(max_digits=14, decimal_places=2)
    service_invoiced = serializers.DecimalField(max_digits=14, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2)


class BudgetCheckSerializer(serializers.Serializer):
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2)
    exceeds = serializers.BooleanField()
    partition = serializers.CharField(allow_null=True)


class LedgerResultSerializer(serializers.Serializer):
    invoice = InvoiceSerializer()
    project = ProjectTotalsSerializer(allow_null=True)
    budget_check = BudgetCheckSerializer(allow_null=True)
