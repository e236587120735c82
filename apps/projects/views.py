from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.db.models import Q
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.core.exceptions import LedgerError
from apps.core.responses import error_response
from .models import Project
from .serializers import (
    ProjectFilterSerializer,
    ProjectWriteSerializer,
    POOptionsQuerySerializer,
    ProjectSerializer,
    ProjectListSerializer,
    POResolutionSerializer,
    BudgetSummarySerializer,
)
from .services import (
    create_project,
    get_project_by_id,
    update_project,
    delete_project,
    resolve_po,
    get_budget_summary,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class BlockedResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()
    reason = drf_serializers.CharField()
    invoice_count = drf_serializers.IntegerField()


class ProjectPagination(PageNumberPagination):
    """Custom pagination for projects."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ProjectViewSet(viewsets.GenericViewSet):
    """
    Projects owned by the current user.

    list: Projects, most recently updated first (filter by status, search)
    create: Create a project with zero running totals
    retrieve: Get a project with derived budget figures
    partial_update: Edit project attributes (running totals are read-only)
    destroy: Delete a project; refused with 409 while invoices reference it
    budget: Budget/invoiced/remaining per total and partition
    po_options: Default PO and eligible choices for an invoice type
    """

    serializer_class = ProjectSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = ProjectPagination

    def get_queryset(self):
        """Filter projects using input serializer validation."""
        queryset = Project.objects.filter(user=self.request.user).order_by('-updated_at')

        filter_serializer = ProjectFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'status' in params:
            queryset = queryset.filter(status=params['status'])
        if params.get('search'):
            queryset = queryset.filter(
                Q(name__icontains=params['search']) |
                Q(client__icontains=params['search'])
            )

        return queryset

    @extend_schema(
        parameters=[ProjectFilterSerializer],
        responses={200: ProjectListSerializer(many=True)},
        tags=['projects'],
    )
    def list(self, request):
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(ProjectListSerializer(page, many=True).data)

    @extend_schema(
        request=ProjectWriteSerializer,
        responses={201: ProjectSerializer, 400: ErrorResponseSerializer},
        tags=['projects'],
    )
    def create(self, request):
        serializer = ProjectWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            project = create_project(user=request.user, **serializer.validated_data)
        except LedgerError as e:
            return error_response(e)

        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        responses={200: ProjectSerializer, 404: ErrorResponseSerializer},
        tags=['projects'],
    )
    def retrieve(self, request, pk=None):
        try:
            project = get_project_by_id(user=request.user, project_id=pk)
        except LedgerError as e:
            return error_response(e)

        return Response(ProjectSerializer(project).data)

    @extend_schema(
        request=ProjectWriteSerializer,
        responses={200: ProjectSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['projects'],
    )
    def partial_update(self, request, pk=None):
        serializer = ProjectWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            project = update_project(
                user=request.user,
                project_id=pk,
                **serializer.validated_data
            )
        except LedgerError as e:
            return error_response(e)

        return Response(ProjectSerializer(project).data)

    @extend_schema(
        responses={204: None, 404: ErrorResponseSerializer, 409: BlockedResponseSerializer},
        tags=['projects'],
    )
    def destroy(self, request, pk=None):
        try:
            delete_project(user=request.user, project_id=pk)
        except LedgerError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        responses={200: BudgetSummarySerializer, 404: ErrorResponseSerializer},
        tags=['projects'],
    )
    @action(detail=True, methods=['get'])
    def budget(self, request, pk=None):
        """
        Budget summary with informational GST/TDS amounts.

        GET /api/projects/{id}/budget/
        """
        try:
            project = get_project_by_id(user=request.user, project_id=pk)
        except LedgerError as e:
            return error_response(e)

        return Response(BudgetSummarySerializer(get_budget_summary(project)).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('type', str, description="Invoice type: hardware or service"),
        ],
        responses={200: POResolutionSerializer, 404: ErrorResponseSerializer},
        tags=['projects'],
    )
    @action(detail=True, methods=['get'])
    def po_options(self, request, pk=None):
        """
        Default PO number and the eligible choices for drafting an invoice.

        GET /api/projects/{id}/po_options/?type=service
        """
        query = POOptionsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            project = get_project_by_id(user=request.user, project_id=pk)
        except LedgerError as e:
            return error_response(e)

        resolution = resolve_po(project, query.validated_data.get('type'))
        return Response(POResolutionSerializer({
            'default': resolution.default,
            'options': resolution.options,
            'requires_choice': resolution.requires_choice,
        }).data)
