"""
Member services.

This module provides the MemberService class for member registration.

Related files:
    - models.py: Member
    - serializers.py: RegisterSerializer feeds register()

Security:
    - Passwords hashed with Django's configured hasher
    - Email and matric number uniqueness enforced case-insensitively,
      both here and by database constraints
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import IntegrityError

from core.exceptions import ConflictError, ValidationError
from core.services import BaseService

if TYPE_CHECKING:
    from members.models import Member

logger = logging.getLogger(__name__)


class MemberService(BaseService):
    """
    Registration business logic.

    Usage:
        from members.services import MemberService

        member = MemberService.register(
            email='ada@example.com',
            password='S3curePass!',
            first_name='Ada',
            surname='Obi',
            matric_number='CS/2021/001',
            level='nd1',
        )
    """

    @classmethod
    def register(
        cls,
        email: str,
        password: str,
        first_name: str,
        surname: str,
        matric_number: str,
        level: str,
        middle_name: str = "",
        department: str | None = None,
    ) -> Member:
        """
        Register a new member.

        Args:
            email: Login email (unique, case-insensitive)
            password: Raw password, hashed before storage
            first_name: Given name
            surname: Family name
            matric_number: Registration number (unique, case-insensitive)
            level: Academic level (nd1, nd2, hnd1, hnd2)
            middle_name: Optional middle name
            department: Department; defaults to the model default

        Returns:
            The created Member

        Raises:
            ValidationError: If a required field is blank
            ConflictError: If the email or matric number is already registered
        """
        from members.models import Member

        missing = cls.validate_required(
            email=email,
            password=password,
            first_name=first_name,
            surname=surname,
            matric_number=matric_number,
            level=level,
        )
        if missing is not None:
            raise ValidationError(
                missing.error,
                error_code=missing.error_code,
                details=missing.errors,
            )

        email = email.lower().strip()
        matric_number = Member.objects.normalize_matric_number(matric_number)

        if Member.objects.filter(email__iexact=email).exists():
            raise ConflictError(
                "Email already exists",
                error_code="EMAIL_EXISTS",
                details={"email": email},
            )

        if Member.objects.filter(matric_number__iexact=matric_number).exists():
            raise ConflictError(
                "Matric number already exists",
                error_code="MATRIC_NUMBER_EXISTS",
                details={"matric_number": matric_number},
            )

        extra = {}
        if department:
            extra["department"] = department.strip()

        try:
            with cls.atomic():
                member = Member.objects.create_user(
                    email=email,
                    password=password,
                    first_name=first_name.strip(),
                    middle_name=(middle_name or "").strip(),
                    surname=surname.strip(),
                    matric_number=matric_number,
                    level=level,
                    **extra,
                )
        except IntegrityError:
            # Lost a race with a concurrent registration for the same identity
            raise ConflictError(
                "Email or matric number already exists",
                error_code="MEMBER_EXISTS",
                details={"email": email, "matric_number": matric_number},
            )

        logger.info(
            f"Member registered: {member.email}",
            extra={"member_id": str(member.id), "matric_number": matric_number},
        )
        return member
