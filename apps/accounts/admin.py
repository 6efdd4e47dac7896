from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _
from django.utils.html import format_html
from .models import User


# CUSTOM USER ADMIN
@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = (
        'email',
        'get_full_name_display',
        'role_badge',
        'centre',
        'qualification',
        'is_active_badge',
        'last_assigned_at',
        'total_leads_assigned',
    )

    # Fields that can be clicked to open edit form
    list_display_links = ('email', 'get_full_name_display')

    # Filters in right sidebar
    list_filter = (
        'role',
        'is_active',
        'centre',
        'qualification',
        'languages',
        'is_staff',
    )
    search_fields = (
        'email',
        'first_name',
        'last_name',
        'phone',
        'centre__name',
    )

    ordering = ('-date_joined',)
    list_per_page = 25
    list_select_related = ('centre',)
    filter_horizontal = ('languages', 'groups', 'user_permissions')

    fieldsets = (
        (_('Login Credentials'), {
            'fields': ('email', 'password'),
            'classes': ('wide',),
            'description': _('Email is used for login. Password is stored encrypted.')
        }),

        (_('Personal Information'), {
            'fields': ('first_name', 'last_name', 'phone'),
            'classes': ('wide',),
        }),

        # Everything the round-robin engine filters on
        (_('Team & Assignment'), {
            'fields': ('role', 'centre', 'languages', 'qualification'),
            'classes': ('wide',),
            'description': _('Role decides the team; centre, languages and qualification narrow which leads the agent receives')
        }),

        (_('Rotation'), {
            'fields': ('last_assigned_at', 'total_leads_assigned'),
            'classes': ('collapse',),
            'description': _('Maintained by the assignment engine')
        }),

        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),

        (_('Activity Tracking'), {
            'fields': ('date_joined', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    # Fields shown when creating NEW user
    add_fieldsets = (
        (_('Login Credentials'), {
            'fields': ('email', 'password1', 'password2'),
            'classes': ('wide',),
        }),
        (_('Personal Information'), {
            'fields': ('first_name', 'last_name', 'phone'),
            'classes': ('wide',),
        }),
        (_('Team & Assignment'), {
            'fields': ('role', 'centre', 'languages', 'qualification'),
            'classes': ('wide',),
        }),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff'),
        }),
    )

    readonly_fields = (
        'date_joined',
        'last_login',
        'last_assigned_at',
        'total_leads_assigned',
    )

    # CUSTOM DISPLAY METHODS
    def get_full_name_display(self, obj):
        return obj.get_full_name()

    get_full_name_display.short_description = _('Full Name')
    get_full_name_display.admin_order_field = 'first_name'

    def role_badge(self, obj):

        colors = {
            User.TEAM_PRESALES: '#17a2b8',
            User.TEAM_SALES: '#007bff',
        }
        color = colors.get(obj.team, '#28a745')

        return format_html(
            '<span style="background: {}; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color, obj.get_role_display()
        )

    role_badge.short_description = _('Role')
    role_badge.admin_order_field = 'role'

    def is_active_badge(self, obj):
        if obj.is_active:
            return format_html(
                '<span style="background: #28a745; color: white; padding: 3px 10px; '
                'border-radius: 3px; font-size: 11px;">Active</span>'
            )
        return format_html(
            '<span style="background: #dc3545; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-size: 11px;">Inactive</span>'
        )

    is_active_badge.short_description = _('Status')
    is_active_badge.admin_order_field = 'is_active'

    # CUSTOM ACTIONS
    actions = ['activate_users', 'deactivate_users']

    def activate_users(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(
            request,
            _('%(count)d user(s) were successfully activated.') % {'count': updated},
            level='success'
        )

    activate_users.short_description = _('Activate selected users')

    def deactivate_users(self, request, queryset):
        """
        Bulk action: take users out of the assignment rotation

        Note: Cannot deactivate superusers
        """
        queryset = queryset.filter(is_superuser=False)
        updated = queryset.update(is_active=False)
        self.message_user(
            request,
            _('%(count)d user(s) were successfully deactivated.') % {'count': updated},
            level='success'
        )

    deactivate_users.short_description = _('Deactivate selected users')

    # PERMISSIONS
    def has_delete_permission(self, request, obj=None):
        if obj and obj == request.user:
            return False  # Cannot delete yourself

        if obj and obj.is_superuser and not request.user.is_superuser:
            return False

        return super().has_delete_permission(request, obj)


# ADMIN SITE CUSTOMIZATION
admin.site.site_header = _('Lead Pipeline Administration')
admin.site.site_title = _('Lead Pipeline')
admin.site.index_title = _('Workflow, agents and reference data')
