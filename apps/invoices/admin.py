from django.contrib import admin
from django.utils.html import format_html
from .models import Invoice, InvoiceStatus


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """
    Read-mostly admin for invoices.

    Amounts and project links are read-only so admin edits cannot push a
    project's running totals out of step with its invoices.
    """

    list_display = [
        'invoice_number',
        'project_name',
        'user',
        'amount',
        'status_badge',
        'type',
        'kind_label',
        'date',
    ]
    list_filter = ['status', 'type', 'date']
    search_fields = ['invoice_number', 'project_name', 'third_party_company', 'user__email']
    date_hierarchy = 'date'

    fieldsets = (
        ('Invoice', {
            'fields': ('user', 'project', 'project_name', 'invoice_number', 'amount', 'type')
        }),
        ('Details', {
            'fields': ('date', 'status', 'po_number', 'description'),
        }),
        ('Third party', {
            'fields': ('third_party_company', 'third_party_invoice_number', 'third_party_amount'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    readonly_fields = [
        'user',
        'project',
        'project_name',
        'amount',
        'type',
        'third_party_company',
        'third_party_amount',
        'created_at',
        'updated_at',
    ]

    def has_add_permission(self, request):
        """Invoices are created through the ledger API."""
        return False

    def status_badge(self, obj):
        colors = {
            InvoiceStatus.PENDING.value: ('#E5C49A', '#2C1810'),
            InvoiceStatus.PAID.value: ('#6B8E5E', 'white'),
            InvoiceStatus.OVERDUE.value: ('#B85C5C', 'white'),
            InvoiceStatus.CANCELLED.value: ('#ccc', '#666'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def kind_label(self, obj):
        return obj.kind.label
    kind_label.short_description = 'Kind'

    def has_delete_permission(self, request, obj=None):
        """Deleting must go through the ledger to reverse project totals."""
        return False
