from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
import uuid


class ProjectStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    PENDING = 'pending', 'Pending'
    CANCELLED = 'cancelled', 'Cancelled'


class POType(models.TextChoices):
    HARDWARE = 'hardware', 'Hardware'
    SOFTWARE = 'software', 'Software'
    COMBINED = 'combined', 'Combined'


class BudgetPartition(models.TextChoices):
    """Split-budget partitions; also the invoice ``type`` values."""
    HARDWARE = 'hardware', 'Hardware'
    SERVICE = 'service', 'Service'


# PO slot -> model field
PO_FIELDS = {
    POType.HARDWARE: 'po_hardware',
    POType.SOFTWARE: 'po_software',
    POType.COMBINED: 'po_combined',
}

# Fields only the ledger may write
AGGREGATE_FIELDS = ('invoiced', 'invoice_count', 'hardware_invoiced', 'service_invoiced')

ZERO = Decimal('0.00')


class Project(models.Model):
    """
    Client project with a budget and running invoice totals.

    ``invoiced`` and ``invoice_count`` (plus the two partition totals when the
    budget is split) are maintained by the invoice ledger, never edited
    directly. When both ``hardware_budget`` and ``service_budget`` are set the
    project is split and ``budget`` is kept equal to their sum.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='projects'
    )

    name = models.CharField(max_length=200)
    client = models.CharField(max_length=200)
    status = models.CharField(
        max_length=20,
        choices=ProjectStatus.choices,
        default=ProjectStatus.ACTIVE
    )
    start_date = models.DateField()
    end_date = models.DateField()

    # Budget
    budget = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=ZERO,
        validators=[MinValueValidator(ZERO)]
    )
    hardware_budget = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(ZERO)]
    )
    service_budget = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(ZERO)]
    )

    # Running totals (ledger-maintained)
    invoiced = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    invoice_count = models.PositiveIntegerField(default=0)
    hardware_invoiced = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    service_invoiced = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)

    # Purchase orders
    po_hardware = models.CharField(max_length=100, blank=True)
    po_software = models.CharField(max_length=100, blank=True)
    po_combined = models.CharField(max_length=100, blank=True)
    active_pos = models.JSONField(default=list, blank=True)

    # Tax display settings (never applied to totals)
    gst_enabled = models.BooleanField(default=False)
    gst_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('18.00'),
        validators=[MinValueValidator(ZERO), MaxValueValidator(Decimal('100'))]
    )
    tds_enabled = models.BooleanField(default=False)
    tds_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('2.00'),
        validators=[MinValueValidator(ZERO), MaxValueValidator(Decimal('100'))]
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projects'
        indexes = [
            models.Index(fields=['user', 'status'], name='projects_user_status_idx'),
            models.Index(fields=['user', 'updated_at'], name='projects_user_updated_idx'),
        ]
        ordering = ['-updated_at']

    def __str__(self):
        return f"{self.name} ({self.client})"

    def save(self, *args, **kwargs):
        """Keep ``budget`` equal to the partition sum for split projects."""
        if self.is_split:
            self.budget = self.hardware_budget + self.service_budget
            update_fields = kwargs.get('update_fields')
            if update_fields is not None:
                fields = set(update_fields)
                if fields & {'hardware_budget', 'service_budget'}:
                    fields.add('budget')
                    kwargs['update_fields'] = list(fields)
        super().save(*args, **kwargs)

    @property
    def is_split(self):
        return self.hardware_budget is not None and self.service_budget is not None

    @property
    def remaining(self):
        """May go negative; over-budget invoicing is allowed."""
        return self.budget - self.invoiced

    @property
    def hardware_remaining(self):
        if not self.is_split:
            return None
        return self.hardware_budget - self.hardware_invoiced

    @property
    def service_remaining(self):
        if not self.is_split:
            return None
        return self.service_budget - self.service_invoiced

    @property
    def percent_used(self):
        if not self.budget:
            return ZERO
        return (self.invoiced / self.budget * 100).quantize(Decimal('0.01'))

    def po_numbers(self):
        """Return {po_type: number} for every slot, blank slots included."""
        return {po_type.value: getattr(self, field) for po_type, field in PO_FIELDS.items()}

    def partition_fields(self, invoice_type):
        """Return (budget_field, invoiced_field) for a split partition, or None."""
        if not self.is_split or invoice_type not in BudgetPartition.values:
            return None
        return f'{invoice_type}_budget', f'{invoice_type}_invoiced'
