"""Status mapping applied at the read boundary (serializers, workspace snapshot)."""

from .models import InvoiceStatus


# Backend statuses without a place in the UI status menu
DISPLAY_STATUS = {
    InvoiceStatus.CANCELLED.value: InvoiceStatus.PENDING.value,
}


def display_status(status):
    """Map a stored status onto the UI set {paid, pending, overdue}."""
    return DISPLAY_STATUS.get(status, status)
