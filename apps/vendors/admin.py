from django.contrib import admin
from .models import Vendor
from .services import reconcile_vendor_totals


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'status', 'contact_email', 'total_invoiced', 'updated_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'contact_email', 'user__email']
    readonly_fields = ['total_invoiced', 'created_at', 'updated_at']
    actions = ['reconcile_owners']

    @admin.action(description="Reconcile totals for the selected vendors' owners")
    def reconcile_owners(self, request, queryset):
        writes = 0
        for user in {vendor.user for vendor in queryset.select_related('user')}:
            writes += reconcile_vendor_totals(user=user).writes
        self.message_user(request, f'Reconciliation wrote {writes} vendor record(s).')
