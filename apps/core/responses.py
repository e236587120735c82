"""Map ledger exceptions onto DRF responses."""

from rest_framework import status
from rest_framework.response import Response

from .exceptions import (
    LedgerError,
    NotAuthenticatedError,
    NotFoundError,
    LedgerValidationError,
    BlockedOperationError,
)


STATUS_CODES = (
    (NotAuthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (LedgerValidationError, status.HTTP_400_BAD_REQUEST),
    (BlockedOperationError, status.HTTP_409_CONFLICT),
)


def status_for(exc: LedgerError) -> int:
    for exc_class, status_code in STATUS_CODES:
        if isinstance(exc, exc_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def error_response(exc: LedgerError) -> Response:
    """
    Build ``{'error': message}`` plus ``field`` for validation errors and
    ``reason`` (and ``invoice_count`` when known) for blocked operations.
    """
    body = {'error': str(exc)}
    if getattr(exc, 'field', None):
        body['field'] = exc.field
    if isinstance(exc, BlockedOperationError):
        body['reason'] = exc.reason
        if hasattr(exc, 'invoice_count'):
            body['invoice_count'] = exc.invoice_count
    return Response(body, status=status_for(exc))
