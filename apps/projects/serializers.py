from rest_framework import serializers

from .models import Project, ProjectStatus, POType
from .services import normalize_active_pos


# =============================================================================
# Input Serializers
# =============================================================================

class ProjectFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for project listing.

    Query Parameters:
        status (str): Filter by project status
        search (str): Match against project or client name
    """

    status = serializers.ChoiceField(choices=ProjectStatus.choices, required=False)
    search = serializers.CharField(max_length=200, required=False)


class ProjectWriteSerializer(serializers.Serializer):
    """
    Validate project create/update input.

    Running totals are not accepted. ``current_po`` is the older single
    active-PO field and is folded into ``active_pos``.
    """

    name = serializers.CharField(max_length=200)
    client = serializers.CharField(max_length=200)
    status = serializers.ChoiceField(choices=ProjectStatus.choices, required=False)
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    budget = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    hardware_budget = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    service_budget = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )

    po_hardware = serializers.CharField(max_length=100, required=False, allow_blank=True)
    po_software = serializers.CharField(max_length=100, required=False, allow_blank=True)
    po_combined = serializers.CharField(max_length=100, required=False, allow_blank=True)
    active_pos = serializers.ListField(
        child=serializers.ChoiceField(choices=POType.choices),
        required=False
    )
    current_po = serializers.ChoiceField(choices=POType.choices, required=False, write_only=True)

    gst_enabled = serializers.BooleanField(required=False)
    gst_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False
    )
    tds_enabled = serializers.BooleanField(required=False)
    tds_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False
    )

    def validate(self, attrs):
        """Check dates and fold the legacy current_po into active_pos."""
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({
                'end_date': 'End date cannot be before start date'
            })

        if 'current_po' in attrs:
            current_po = attrs.pop('current_po')
            if not attrs.get('active_pos'):
                attrs['active_pos'] = normalize_active_pos(None, current_po)

        if not self.partial:
            split = [attrs.get('hardware_budget'), attrs.get('service_budget')]
            if attrs.get('budget') is None and None in split:
                raise serializers.ValidationError({
                    'budget': 'Provide budget, or both hardware_budget and service_budget'
                })

        return attrs


class POOptionsQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=['hardware', 'service'], required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class ProjectSerializer(serializers.ModelSerializer):
    """Full project representation including derived budget figures."""

    is_split = serializers.BooleanField(read_only=True)
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    hardware_remaining = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True, allow_null=True
    )
    service_remaining = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True, allow_null=True
    )
    percent_used = serializers.DecimalField(max_digits=7, decimal_places=2, read_only=True)

    class Meta:
        model = Project
        fields = [
            'id',
            'name',
            'client',
            'status',
            'start_date',
            'end_date',
            'budget',
            'hardware_budget',
            'service_budget',
            'is_split',
            'invoiced',
            'invoice_count',
            'hardware_invoiced',
            'service_invoiced',
            'remaining',
            'hardware_remaining',
            'service_remaining',
            'percent_used',
            'po_hardware',
            'po_software',
            'po_combined',
            'active_pos',
            'gst_enabled',
            'gst_percentage',
            'tds_enabled',
            'tds_percentage',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ProjectListSerializer(serializers.ModelSerializer):
    """Compact project listing."""

    remaining = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Project
        fields = [
            'id',
            'name',
            'client',
            'status',
            'budget',
            'invoiced',
            'invoice_count',
            'remaining',
            'end_date',
            'updated_at',
        ]
        read_only_fields = fields


class POOptionSerializer(serializers.Serializer):
    po_type = serializers.CharField()
    number = serializers.CharField()


class POResolutionSerializer(serializers.Serializer):
    default = serializers.CharField(allow_blank=True)
    options = POOptionSerializer(many=True)
    requires_choice = serializers.BooleanField()


class BudgetLineSerializer(serializers.Serializer):
    budget = serializers.DecimalField(max_digits=14, decimal_places=2)
    invoiced = serializers.DecimalField(max_digits=14, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2)
    percent_used = serializers.DecimalField(max_digits=7, decimal_places=2)


class BudgetSummarySerializer(serializers.Serializer):
    total = BudgetLineSerializer()
    invoice_count = serializers.IntegerField()
    is_split = serializers.BooleanField()
    partitions = serializers.DictField(child=BudgetLineSerializer())
    taxes = serializers.DictField()
