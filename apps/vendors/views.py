from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.core.exceptions import LedgerError
from apps.core.responses import error_response
from apps.invoices.serializers import InvoiceSerializer
from .serializers import (
    VendorFilterSerializer,
    VendorWriteSerializer,
    SimilarVendorQuerySerializer,
    ReconcileInputSerializer,
    VendorSerializer,
    SimilarVendorSerializer,
    VendorCreateResponseSerializer,
    ReconciliationReportSerializer,
)
from .services import (
    create_vendor,
    get_vendor_by_id,
    list_vendors,
    update_vendor,
    delete_vendor,
    get_vendor_invoices,
    find_similar_vendors,
    reconcile_vendor_totals,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class VendorPagination(PageNumberPagination):
    """Custom pagination for vendors."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _similar_payload(matches):
    return [{'vendor': vendor, 'similarity': score} for vendor, score in matches]


class VendorViewSet(viewsets.GenericViewSet):
    """
    Vendors owned by the current user.

    list: Vendors by name (filter by status, search)
    create: Create a vendor; near-duplicate names are reported, not refused
    retrieve / partial_update / destroy: Single vendor operations
    invoices: Third-party invoices billed under the vendor's name
    similar: Fuzzy name lookup
    reconcile: Recompute every vendor total from the invoices
    """

    serializer_class = VendorSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = VendorPagination

    def get_queryset(self):
        filter_serializer = VendorFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return list_vendors(user=self.request.user, **filter_serializer.validated_data)

    @extend_schema(
        parameters=[VendorFilterSerializer],
        responses={200: VendorSerializer(many=True)},
        tags=['vendors'],
    )
    def list(self, request):
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(VendorSerializer(page, many=True).data)

    @extend_schema(
        request=VendorWriteSerializer,
        responses={201: VendorCreateResponseSerializer, 400: ErrorResponseSerializer},
        tags=['vendors'],
    )
    def create(self, request):
        serializer = VendorWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            vendor = create_vendor(user=request.user, **serializer.validated_data)
        except LedgerError as e:
            return error_response(e)

        similar = find_similar_vendors(user=request.user, name=vendor.name, exclude_id=vendor.id)
        return Response(VendorCreateResponseSerializer({
            'vendor': vendor,
            'similar': _similar_payload(similar),
        }).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        responses={200: VendorSerializer, 404: ErrorResponseSerializer},
        tags=['vendors'],
    )
    def retrieve(self, request, pk=None):
        try:
            vendor = get_vendor_by_id(user=request.user, vendor_id=pk)
        except LedgerError as e:
            return error_response(e)

        return Response(VendorSerializer(vendor).data)

    @extend_schema(
        request=VendorWriteSerializer,
        responses={200: VendorSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['vendors'],
    )
    def partial_update(self, request, pk=None):
        serializer = VendorWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            vendor = update_vendor(user=request.user, vendor_id=pk, **serializer.validated_data)
        except LedgerError as e:
            return error_response(e)

        return Response(VendorSerializer(vendor).data)

    @extend_schema(
        responses={204: None, 404: ErrorResponseSerializer},
        tags=['vendors'],
    )
    def destroy(self, request, pk=None):
        try:
            delete_vendor(user=request.user, vendor_id=pk)
        except LedgerError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        responses={200: InvoiceSerializer(many=True), 404: ErrorResponseSerializer},
        tags=['vendors'],
    )
    @action(detail=True, methods=['get'])
    def invoices(self, request, pk=None):
        """
        Third-party invoices for this vendor.

        GET /api/vendors/{id}/invoices/
        """
        try:
            invoices = get_vendor_invoices(user=request.user, vendor_id=pk)
        except LedgerError as e:
            return error_response(e)

        return Response(InvoiceSerializer(invoices, many=True).data)

    @extend_schema(
        parameters=[SimilarVendorQuerySerializer],
        responses={200: SimilarVendorSerializer(many=True)},
        tags=['vendors'],
    )
    @action(detail=False, methods=['get'])
    def similar(self, request):
        """
        Vendors whose names look like ``name``.

        GET /api/vendors/similar/?name=Acme%20Corp
        """
        query = SimilarVendorQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        matches = find_similar_vendors(user=request.user, **query.validated_data)
        return Response(SimilarVendorSerializer(_similar_payload(matches), many=True).data)

    @extend_schema(
        request=ReconcileInputSerializer,
        responses={200: ReconciliationReportSerializer},
        tags=['vendors'],
    )
    @action(detail=False, methods=['post'])
    def reconcile(self, request):
        """
        Recompute vendor totals from third-party invoices; creates missing vendors.

        POST /api/vendors/reconcile/
        """
        serializer = ReconcileInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        report = reconcile_vendor_totals(user=request.user, **serializer.validated_data)
        return Response(ReconciliationReportSerializer(report.as_dict()).data)
