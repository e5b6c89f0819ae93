"""
Django admin configuration for users.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for code-based users."""

    list_display = ("code", "username", "role", "is_premium", "is_active", "date_joined")
    list_filter = ("role", "is_premium", "is_active", "is_staff")
    search_fields = ("code", "username", "email")
    ordering = ("-date_joined",)
    readonly_fields = ("date_joined", "updated_at", "last_login")

    fieldsets = (
        (None, {"fields": ("code", "password")}),
        ("Profile", {"fields": ("username", "email", "role", "is_premium")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Dates", {"fields": ("last_login", "date_joined", "updated_at")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("code", "password1", "password2")}),
    )
