from django.db import models
from decimal import Decimal
import uuid


class VendorStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'


class Vendor(models.Model):
    """
    Third-party company that bills through the user's projects.

    ``name`` is matched exactly against ``Invoice.third_party_company``;
    ``total_invoiced`` is derived from those invoices and kept in step by the
    ledger and the reconciliation pass.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='vendors'
    )

    name = models.CharField(max_length=200)
    contact_email = models.EmailField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=VendorStatus.choices,
        default=VendorStatus.ACTIVE
    )
    total_invoiced = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00')
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vendors'
        constraints = [
            models.UniqueConstraint(fields=['user', 'name'], name='unique_vendor_name_per_user'),
        ]
        indexes = [
            models.Index(fields=['user', 'status'], name='vendors_user_status_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.total_invoiced})"
