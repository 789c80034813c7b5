"""
Django app configuration for members.
"""

from django.apps import AppConfig


class MembersConfig(AppConfig):
    """Configuration for the members application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "members"
    verbose_name = "Members"
