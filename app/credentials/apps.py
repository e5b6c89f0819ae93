"""
Credentials app configuration.
"""

from django.apps import AppConfig


class CredentialsConfig(AppConfig):
    """Configuration for the credentials application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "credentials"
    verbose_name = "Credentials"
