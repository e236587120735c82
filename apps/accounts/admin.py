from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, UserProfile


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    fields = ['name', 'company', 'position', 'phone', 'country', 'currency', 'date_format']


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for email-based users; the profile is edited inline."""

    list_display = [
        'email',
        'display_name',
        'is_active',
        'is_staff',
        'created_at',
        'last_login',
    ]

    list_filter = ['is_active', 'is_staff', 'is_superuser', 'created_at']
    search_fields = ['email', 'display_name']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    inlines = [UserProfileInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = ['groups', 'user_permissions']

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users, skipping superusers."""
        count = queryset.filter(is_superuser=False).update(is_active=False)
        self.message_user(request, f'Deactivated {count} user(s).')

    actions = ['deactivate_users']


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'name', 'company', 'country', 'currency', 'updated_at']
    list_filter = ['currency', 'country', 'date_format']
    search_fields = ['user__email', 'name', 'company']
    readonly_fields = ['created_at', 'updated_at']
