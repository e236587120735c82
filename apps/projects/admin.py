from django.contrib import admin
from django.utils.html import format_html
from .models import Project, ProjectStatus
from .services import recompute_project_aggregates


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """
    Admin interface for projects.

    Running totals are read-only here; use the recompute action if they were
    changed outside the ledger.
    """

    list_display = [
        'name',
        'client',
        'user',
        'status_badge',
        'budget',
        'invoiced',
        'invoice_count',
        'updated_at',
    ]
    list_filter = ['status', 'gst_enabled', 'tds_enabled', 'created_at']
    search_fields = ['name', 'client', 'user__email']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Project', {
            'fields': ('user', 'name', 'client', 'status', 'start_date', 'end_date')
        }),
        ('Budget', {
            'fields': ('budget', 'hardware_budget', 'service_budget'),
        }),
        ('Running totals', {
            'fields': ('invoiced', 'invoice_count', 'hardware_invoiced', 'service_invoiced'),
        }),
        ('Purchase orders', {
            'fields': ('po_hardware', 'po_software', 'po_combined', 'active_pos'),
            'classes': ('collapse',),
        }),
        ('Taxes', {
            'fields': ('gst_enabled', 'gst_percentage', 'tds_enabled', 'tds_percentage'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    readonly_fields = [
        'invoiced',
        'invoice_count',
        'hardware_invoiced',
        'service_invoiced',
        'created_at',
        'updated_at',
    ]

    actions = ['recompute_totals']

    def status_badge(self, obj):
        colors = {
            ProjectStatus.ACTIVE.value: '#6B8E5E',
            ProjectStatus.COMPLETED.value: '#4A6FA5',
            ProjectStatus.PENDING.value: '#E5C49A',
            ProjectStatus.CANCELLED.value: '#B85C5C',
        }
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            colors.get(obj.status, '#ccc'), obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    @admin.action(description='Recompute running totals from invoices')
    def recompute_totals(self, request, queryset):
        corrected = 0
        for project in queryset:
            corrected += len(recompute_project_aggregates(project_id=project.id))
        self.message_user(request, f'Corrected {corrected} of {queryset.count()} project(s).')
