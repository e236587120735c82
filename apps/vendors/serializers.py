from rest_framework import serializers

from .models import Vendor, VendorStatus


# =============================================================================
# Input Serializers
# =============================================================================

class VendorFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for vendor listing.

    Query Parameters:
        status (str): active or inactive
        search (str): Match against name or contact email
    """

    status = serializers.ChoiceField(choices=VendorStatus.choices, required=False)
    search = serializers.CharField(max_length=200, required=False)


class VendorWriteSerializer(serializers.Serializer):
    """Vendor create/update input. ``total_invoiced`` is derived and not accepted."""

    name = serializers.CharField(max_length=200)
    contact_email = serializers.EmailField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=VendorStatus.choices, required=False)


class SimilarVendorQuerySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    threshold = serializers.IntegerField(min_value=0, max_value=100, required=False)


class ReconcileInputSerializer(serializers.Serializer):
    dry_run = serializers.BooleanField(required=False, default=False)


# =============================================================================
# Output Serializers
# =============================================================================

class VendorSerializer(serializers.ModelSerializer):

    class Meta:
        model = Vendor
        fields = [
            'id',
            'name',
            'contact_email',
            'status',
            'total_invoiced',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class SimilarVendorSerializer(serializers.Serializer):
    vendor = VendorSerializer()
    similarity = serializers.IntegerField()


class VendorCreateResponseSerializer(serializers.Serializer):
    vendor = VendorSerializer()
    similar = SimilarVendorSerializer(many=True)


class ReconciliationReportSerializer(serializers.Serializer):
    created = serializers.ListField(child=serializers.CharField())
    updated = serializers.ListField(child=serializers.CharField())
    unchanged = serializers.ListField(child=serializers.CharField())
    writes = serializers.IntegerField()
