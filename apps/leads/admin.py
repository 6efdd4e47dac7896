from django.contrib import admin
from django.utils.html import format_html
from apps.core.models import Status
from .models import Lead, CallLog, LeadActivity


class CallLogInline(admin.TabularInline):

    model = CallLog
    extra = 0
    fields = ['call_code', 'called_at', 'agent', 'connection', 'outcome', 'next_call_at', 'remarks']
    readonly_fields = fields
    classes = ['collapse']
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('agent')


class LeadActivityInline(admin.TabularInline):
    """Audit entries are append-only, so the inline is display only"""

    model = LeadActivity
    extra = 0
    fields = ['created_at', 'actor', 'note', 'lead_status', 'substatus', 'presales_owner', 'sales_owner']
    readonly_fields = fields
    classes = ['collapse']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('actor', 'lead_status', 'presales_owner', 'sales_owner')


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):

    list_display = [
        'lead_code',
        'name',
        'phone',
        'source',
        'status_badge',
        'substatus',
        'value_tier',
        'owner_display',
        'next_call_at',
        'created_at',
    ]

    list_filter = [
        'lead_status',
        'substatus',
        'is_qualified',
        'value_tier',
        'intake_channel',
        'source',
        'centre',
        'language',
        'created_at',
    ]

    search_fields = [
        'lead_code',
        'name',
        'phone',
        'email',
        'notes',
    ]

    ordering = ['-created_at']
    list_per_page = 50
    date_hierarchy = 'created_at'
    list_select_related = ['source', 'lead_status', 'presales_owner', 'sales_owner']

    fieldsets = [
        ('Basic Information', {
            'fields': ['lead_code', 'name', 'phone', 'email', 'source', 'intake_channel']
        }),
        ('Workflow', {
            'fields': ['lead_status', 'substatus', 'is_qualified', 'value_tier', 'centre', 'language'],
            'description': 'Status and ownership are normally changed through call outcomes, not here'
        }),
        ('Ownership & Scheduling', {
            'fields': ['presales_owner', 'sales_owner', 'next_call_at', 'cif_at']
        }),
        ('Milestones', {
            'fields': ['qualified_at', 'won_at', 'lost_at', 'deleted_at'],
            'classes': ['collapse'],
        }),
        ('Additional Info', {
            'fields': ['notes', 'tags'],
            'classes': ['collapse'],
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse'],
        }),
    ]

    readonly_fields = ['lead_code', 'intake_channel', 'qualified_at', 'won_at', 'lost_at', 'created_at', 'updated_at']
    inlines = [CallLogInline, LeadActivityInline]

    def status_badge(self, obj):
        colors = {
            Status.LEAD: '#17a2b8',
            Status.QUALIFIED: '#ffc107',
            Status.WON: '#28a745',
            Status.LOST: '#dc3545',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            colors.get(obj.status_slug, '#6c757d'),
            obj.lead_status.name
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'lead_status__order'

    def owner_display(self, obj):
        if obj.sales_owner:
            return format_html('{} <small style="color: #007bff;">(sales)</small>', obj.sales_owner.get_full_name())
        if obj.presales_owner:
            return format_html('{} <small style="color: #17a2b8;">(pre-sales)</small>', obj.presales_owner.get_full_name())
        return format_html('<span style="color: #999;">Unassigned</span>')
    owner_display.short_description = 'Owner'

    def has_delete_permission(self, request, obj=None):
        # Leads are archived with deleted_at, never removed
        return False


@admin.register(CallLog)
class CallLogAdmin(admin.ModelAdmin):

    list_display = ['call_code', 'lead', 'agent', 'connection', 'outcome', 'called_at', 'duration_seconds']
    list_filter = ['connection', 'outcome', 'called_at']
    search_fields = ['call_code', 'lead__name', 'lead__phone', 'agent__email']
    list_select_related = ['lead', 'agent']
    readonly_fields = ['call_code', 'lead', 'agent', 'created_at', 'updated_at']
    date_hierarchy = 'called_at'

    def has_add_permission(self, request):
        # Calls are logged through the workflow so the lead moves with them
        return False


@admin.register(LeadActivity)
class LeadActivityAdmin(admin.ModelAdmin):

    list_display = ['created_at', 'lead', 'actor', 'note', 'lead_status', 'substatus']
    list_filter = ['lead_status', 'substatus', 'created_at']
    search_fields = ['note', 'name', 'phone', 'lead__lead_code']
    list_select_related = ['lead', 'actor', 'lead_status']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
