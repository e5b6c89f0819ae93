"""
Django admin configuration for credential allocation records.

Both models are read-only here: generation events are immutable and usage
stats are maintained by CredentialAllocator.
"""

from django.contrib import admin

from credentials.models import GenerationEvent, UsageStats


@admin.register(GenerationEvent)
class GenerationEventAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "service", "created_at")
    list_filter = ("service",)
    search_fields = ("user__code", "user__username", "service")
    readonly_fields = ("id", "user", "service", "credential", "created_at", "updated_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(UsageStats)
class UsageStatsAdmin(admin.ModelAdmin):
    list_display = ("user", "total_generations", "last_activity")
    search_fields = ("user__code", "user__username")
    readonly_fields = ("user", "total_generations", "services", "last_activity", "created_at", "updated_at")

    def has_add_permission(self, request):
        return False
