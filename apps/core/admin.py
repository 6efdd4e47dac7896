from django.contrib import admin
from django.utils.html import format_html
from .models import Centre, Language, LeadSource, Status


def _active_badge(is_active):
    if is_active:
        return format_html(
            '<span style="background-color: #28a745; color: white; '
            'padding: 3px 10px; border-radius: 3px; font-size: 11px;">'
            'Active</span>'
        )
    return format_html(
        '<span style="background-color: #6c757d; color: white; '
        'padding: 3px 10px; border-radius: 3px; font-size: 11px;">'
        'Inactive</span>'
    )


@admin.register(Centre)
class CentreAdmin(admin.ModelAdmin):

    list_display = [
        'name',
        'city',
        'status_badge',
        'agents_count',
        'created_at'
    ]
    list_filter = ['is_active', 'city']
    search_fields = ['name', 'city']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug', 'city')
        }),
        ('Status', {
            'fields': ('is_active',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj):
        return _active_badge(obj.is_active)

    status_badge.short_description = 'Status'

    def agents_count(self, obj):

        count = obj.get_active_agents_count()
        return format_html(
            '<span style="color: #667eea; font-weight: bold;">{} agents</span>',
            count
        )

    agents_count.short_description = 'Agents'


@admin.register(Language)
class LanguageAdmin(admin.ModelAdmin):

    list_display = ['name', 'code', 'status_badge']
    list_filter = ['is_active']
    search_fields = ['name', 'code']

    def status_badge(self, obj):
        return _active_badge(obj.is_active)

    status_badge.short_description = 'Status'


@admin.register(LeadSource)
class LeadSourceAdmin(admin.ModelAdmin):

    list_display = [
        'order',
        'name',
        'is_api_source',
        'status_badge',
        'created_at'
    ]
    list_filter = ['is_active', 'is_api_source', 'created_at']
    search_fields = ['name']
    prepopulated_fields = {'slug': ('name',)}
    ordering = ['order', 'name']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug', 'description')
        }),
        ('Integration', {
            'fields': ('is_api_source', 'order'),
            'description': 'API sources receive leads through the intake webhook'
        }),
        ('Status', {
            'fields': ('is_active',)
        }),
    )

    def status_badge(self, obj):
        return _active_badge(obj.is_active)

    status_badge.short_description = 'Status'


@admin.register(Status)
class StatusAdmin(admin.ModelAdmin):

    list_display = [
        'order',
        'name',
        'slug',
        'type_badge',
        'status_badge'
    ]
    list_filter = ['type', 'is_active']
    search_fields = ['name', 'slug']
    ordering = ['type', 'order', 'name']

    def get_readonly_fields(self, request, obj=None):
        # The engine looks statuses up by type + slug
        if obj:
            return ['type', 'slug']
        return []

    def type_badge(self, obj):

        colors = {
            Status.TYPE_LEAD: '#17a2b8',
            Status.TYPE_LEAD_SUB: '#ffc107',
            Status.TYPE_ACCOUNT: '#6c757d',
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 10px; border-radius: 3px; font-size: 11px;">{}</span>',
            colors.get(obj.type, '#6c757d'),
            obj.get_type_display()
        )

    type_badge.short_description = 'Type'

    def status_badge(self, obj):
        return _active_badge(obj.is_active)

    status_badge.short_description = 'Active'
