"""
Serializers for member endpoints.

Related files:
    - models.py: Member model
    - views.py: Views that use these serializers
    - services.py: MemberService.register

Security:
    - Password fields are write-only
    - Identity fields are read-only on MemberSerializer
"""

from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from members.models import Level, Member


class MemberSerializer(serializers.ModelSerializer):
    """Read-only representation of a member."""

    full_name = serializers.CharField(read_only=True)
    level_display = serializers.CharField(source="get_level_display", read_only=True)

    class Meta:
        model = Member
        fields = [
            "id",
            "email",
            "first_name",
            "middle_name",
            "surname",
            "full_name",
            "matric_number",
            "level",
            "level_display",
            "department",
            "date_joined",
        ]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """
    Input for member registration.

    Uniqueness is checked by MemberService so the race with a concurrent
    registration ends in the same ConflictError as a plain duplicate.
    """

    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Password must be at least 8 characters.",
    )
    first_name = serializers.CharField(max_length=100)
    middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    surname = serializers.CharField(max_length=100)
    matric_number = serializers.CharField(max_length=50)
    level = serializers.ChoiceField(choices=Level.choices)
    department = serializers.CharField(max_length=150, required=False, allow_blank=True)

    def validate_password(self, value):
        validate_password(value)
        return value
