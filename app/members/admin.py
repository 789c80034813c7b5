"""
Django admin configuration for the Member model.

Related files:
    - models.py: Model definitions
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from members.models import Member


@admin.register(Member)
class MemberAdmin(BaseUserAdmin):
    """
    Admin configuration for Member.

    Customized for email-based login; there is no username field.
    """

    list_display = (
        "email",
        "surname",
        "first_name",
        "matric_number",
        "level",
        "is_active",
        "date_joined",
    )
    list_filter = ("level", "department", "is_active", "is_staff")
    search_fields = ("email", "matric_number", "surname", "first_name")
    ordering = ("-date_joined",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (
            "Student",
            {
                "fields": (
                    "first_name",
                    "middle_name",
                    "surname",
                    "matric_number",
                    "level",
                    "department",
                )
            },
        ),
        (
            "Status",
            {"fields": ("is_active", "is_staff", "is_superuser")},
        ),
        (
            "Permissions",
            {"fields": ("groups", "user_permissions")},
        ),
        (
            "Important dates",
            {"fields": ("date_joined", "last_login")},
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login")
