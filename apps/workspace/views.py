from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .cache import WorkspaceCache
from .serializers import WorkspaceSnapshotSerializer


@extend_schema(
    responses={200: WorkspaceSnapshotSerializer},
    description="Projects, invoices, vendors and dashboard totals for the current user. "
                "Served from cache until the next write or refresh.",
    tags=['workspace'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def snapshot(request):
    """Get the cached workspace snapshot."""
    return Response(WorkspaceCache(request.user).snapshot())


@extend_schema(
    request=None,
    responses={200: WorkspaceSnapshotSerializer},
    description="Discard the cached snapshot and reload it from the database.",
    tags=['workspace'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def refresh(request):
    """Reload the workspace snapshot."""
    return Response(WorkspaceCache(request.user).refresh())
