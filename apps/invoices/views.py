from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.core.exceptions import LedgerError
from apps.core.responses import error_response
from .presentation import DISPLAY_STATUS
from .serializers import (
    InvoiceFilterSerializer,
    InvoiceCreateSerializer,
    ThirdPartyInvoiceCreateSerializer,
    InvoiceUpdateSerializer,
    InvoiceStatusSerializer,
    InvoiceSerializer,
    LedgerResultSerializer,
)
from .services import (
    invoice_store,
    create_invoice,
    create_third_party_invoice,
    update_invoice,
    update_invoice_status,
    delete_invoice,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class InvoicePagination(PageNumberPagination):
    """Custom pagination for invoices."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _stored_statuses(shown):
    """Stored statuses that display as ``shown``."""
    return [shown] + [stored for stored, mapped in DISPLAY_STATUS.items() if mapped == shown]


class InvoiceViewSet(viewsets.GenericViewSet):
    """
    Invoices owned by the current user. Every write goes through the ledger,
    which keeps the project's totals in step.

    list: Invoices, newest first (filter by project, status, kind, dates)
    create: Create a client invoice
    retrieve: Get an invoice
    partial_update: Edit an invoice; amount/type changes adjust project totals
    destroy: Delete an invoice and take it off the project's totals
    third_party: Create a third-party invoice (TP- number, vendor total)
    set_status: Change status from the status menu (paid, pending, overdue)
    """

    serializer_class = InvoiceSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = InvoicePagination

    def get_queryset(self):
        """Filter invoices using input serializer validation."""
        queryset = invoice_store.scoped(self.request.user.id).order_by('-created_at')

        filter_serializer = InvoiceFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'project' in params:
            queryset = queryset.filter(project_id=params['project'])
        if 'status' in params:
            queryset = queryset.filter(status__in=_stored_statuses(params['status']))
        if 'kind' in params:
            queryset = queryset.of_kind(params['kind'])
        if 'date_from' in params:
            queryset = queryset.filter(date__gte=params['date_from'])
        if 'date_to' in params:
            queryset = queryset.filter(date__lte=params['date_to'])

        return queryset

    @extend_schema(
        parameters=[InvoiceFilterSerializer],
        responses={200: InvoiceSerializer(many=True)},
        tags=['invoices'],
    )
    def list(self, request):
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(InvoiceSerializer(page, many=True).data)

    @extend_schema(
        request=InvoiceCreateSerializer,
        responses={201: LedgerResultSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Create a client invoice. Over-budget amounts are accepted; "
                    "budget_check reports the overrun.",
        tags=['invoices'],
    )
    def create(self, request):
        serializer = InvoiceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = create_invoice(user=request.user, **serializer.validated_data)
        except LedgerError as e:
            return error_response(e)

        return Response(LedgerResultSerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        responses={200: InvoiceSerializer, 404: ErrorResponseSerializer},
        tags=['invoices'],
    )
    def retrieve(self, request, pk=None):
        try:
            invoice = invoice_store.get(request.user.id, pk)
        except LedgerError as e:
            return error_response(e)

        return Response(InvoiceSerializer(invoice).data)

    @extend_schema(
        request=InvoiceUpdateSerializer,
        responses={200: LedgerResultSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['invoices'],
    )
    def partial_update(self, request, pk=None):
        serializer = InvoiceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = update_invoice(user=request.user, invoice_id=pk, **serializer.validated_data)
        except LedgerError as e:
            return error_response(e)

        return Response(LedgerResultSerializer(result).data)

    @extend_schema(
        responses={204: None, 404: ErrorResponseSerializer},
        tags=['invoices'],
    )
    def destroy(self, request, pk=None):
        try:
            delete_invoice(user=request.user, invoice_id=pk)
        except LedgerError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=ThirdPartyInvoiceCreateSerializer,
        responses={201: LedgerResultSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['invoices'],
    )
    @action(detail=False, methods=['post'])
    def third_party(self, request):
        """
        Create a third-party invoice and add it to the vendor's total.

        POST /api/invoices/third_party/
        """
        serializer = ThirdPartyInvoiceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = create_third_party_invoice(user=request.user, **serializer.validated_data)
        except LedgerError as e:
            return error_response(e)

        return Response(LedgerResultSerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=InvoiceStatusSerializer,
        responses={200: InvoiceSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['invoices'],
    )
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        """
        Set status to paid, pending or overdue.

        POST /api/invoices/{id}/status/
        """
        serializer = InvoiceStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = update_invoice_status(
                user=request.user,
                invoice_id=pk,
                status=serializer.validated_data['status']
            )
        except LedgerError as e:
            return error_response(e)

        return Response(InvoiceSerializer(result.invoice).data)
