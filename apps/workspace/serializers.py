from rest_framework import serializers

from apps.invoices.serializers import InvoiceSerializer
from apps.projects.serializers import ProjectSerializer
from apps.vendors.serializers import VendorSerializer


class DashboardSerializer(serializers.Serializer):
    total_budget = serializers.DecimalField(max_digits=16, decimal_places=2)
    total_invoiced = serializers.DecimalField(max_digits=16, decimal_places=2)
    total_remaining = serializers.DecimalField(max_digits=16, decimal_places=2)
    active_projects = serializers.IntegerField()
    pending_invoices = serializers.IntegerField()
    third_party_invoices = serializers.IntegerField()
    recent_invoice_ids = serializers.ListField(child=serializers.UUIDField())


class WorkspaceSnapshotSerializer(serializers.Serializer):
    """Schema of the cached workspace snapshot (documentation only)."""

    projects = ProjectSerializer(many=True)
    invoices = InvoiceSerializer(many=True)
    vendors = VendorSerializer(many=True)
    dashboard = DashboardSerializer()
    loaded_at = serializers.DateTimeField()
