from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid

from apps.projects.models import BudgetPartition


class InvoiceStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    OVERDUE = 'overdue', 'Overdue'
    CANCELLED = 'cancelled', 'Cancelled'


# Statuses a user can pick from the invoice status menu
UI_STATUSES = (InvoiceStatus.PAID, InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)

# Invoice type doubles as the split-budget partition
InvoiceType = BudgetPartition


class InvoiceKind(models.TextChoices):
    CLIENT = 'client', 'Client invoice'
    THIRD_PARTY = 'third_party', 'Third-party invoice'


THIRD_PARTY_PREFIX = 'TP-'


class InvoiceQuerySet(models.QuerySet):

    def client(self):
        return self.filter(third_party_company='')

    def third_party(self):
        return self.exclude(third_party_company='')

    def of_kind(self, kind):
        if kind == InvoiceKind.THIRD_PARTY:
            return self.third_party()
        return self.client()


class Invoice(models.Model):
    """
    Invoice billed against a project.

    An invoice is either a plain client invoice or a third-party invoice,
    which additionally records the vendor company, the vendor's own invoice
    number and the amount owed to the vendor. ``kind`` is derived from the
    presence of ``third_party_company``; load through the ``ClientInvoice``
    or ``ThirdPartyInvoice`` proxies to get one kind only.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='invoices'
    )
    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.PROTECT,
        related_name='invoices'
    )
    project_name = models.CharField(max_length=200, blank=True)

    invoice_number = models.CharField(max_length=100)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    date = models.DateField()
    description = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.PENDING
    )
    type = models.CharField(
        max_length=20,
        choices=InvoiceType.choices,
        null=True,
        blank=True
    )
    po_number = models.CharField(max_length=100, blank=True)

    # Third-party details (blank company means a client invoice)
    third_party_company = models.CharField(max_length=200, blank=True, db_index=True)
    third_party_invoice_number = models.CharField(max_length=100, blank=True)
    third_party_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InvoiceQuerySet.as_manager()

    class Meta:
        db_table = 'invoices'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='invoices_user_created_idx'),
            models.Index(fields=['project', 'status'], name='invoices_project_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.invoice_number} - {self.amount} ({self.status})"

    @property
    def kind(self):
        if self.third_party_company:
            return InvoiceKind.THIRD_PARTY
        return InvoiceKind.CLIENT

    @property
    def is_third_party(self):
        return self.kind == InvoiceKind.THIRD_PARTY


class ClientInvoiceManager(models.Manager):
    def get_queryset(self):
        return InvoiceQuerySet(self.model, using=self._db).client()


class ThirdPartyInvoiceManager(models.Manager):
    def get_queryset(self):
        return InvoiceQuerySet(self.model, using=self._db).third_party()


class ClientInvoice(Invoice):
    """Invoice billed to the client with no vendor behind it."""

    objects = ClientInvoiceManager()

    class Meta:
        proxy = True


class ThirdPartyInvoice(Invoice):
    """Invoice passed through from a vendor; counts toward the vendor's total."""

    objects = ThirdPartyInvoiceManager()

    class Meta:
        proxy = True

    @property
    def vendor_amount(self):
        return self.third_party_amount or Decimal('0.00')
