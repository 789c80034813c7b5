"""
Member model.

A Member is a registered department student who can log in and pay fees.
The payments app only reads members; it snapshots the display fields into
each ledger entry at write time so receipts never change afterwards.

Related files:
    - managers.py: MemberManager for email-based creation
    - services.py: MemberService registration logic
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.db.models.functions import Lower

from core.model_mixins import UUIDPrimaryKeyMixin
from members.managers import MemberManager


DEFAULT_DEPARTMENT = "Computer Science"


class Level(models.TextChoices):
    """Academic levels a member can register under."""

    ND1 = "nd1", "ND1"
    ND2 = "nd2", "ND2"
    HND1 = "hnd1", "HND1"
    HND2 = "hnd2", "HND2"


class Member(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom user model using email as the login identifier.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        email: Login identifier, unique (case-insensitive)
        first_name / middle_name / surname: Name parts
        matric_number: Registration number, unique (case-insensitive);
            NULL for staff accounts
        level: Academic level (nd1, nd2, hnd1, hnd2)
        department: Department name
        is_active / is_staff: Account flags
        date_joined / updated_at: Timestamps

    Usage:
        member = Member.objects.create_user(
            email='ada@example.com',
            password='securepassword',
            first_name='Ada',
            surname='Obi',
            matric_number='CS/2021/001',
            level=Level.ND1,
        )
        member.display_name  # "Ada Obi"
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="Member's email address (login identifier)",
    )

    first_name = models.CharField(max_length=100, blank=True)
    middle_name = models.CharField(max_length=100, blank=True)
    surname = models.CharField(max_length=100, blank=True)

    matric_number = models.CharField(
        max_length=50,
        unique=True,
        null=True,
        blank=True,
        help_text="Matric/registration number, stored upper-cased",
    )
    level = models.CharField(
        max_length=10,
        choices=Level.choices,
        blank=True,
    )
    department = models.CharField(
        max_length=150,
        default=DEFAULT_DEPARTMENT,
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the member can access the admin site.",
    )

    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = MemberManager()

    class Meta:
        verbose_name = "member"
        verbose_name_plural = "members"
        ordering = ["-date_joined"]
        constraints = [
            models.UniqueConstraint(
                Lower("email"),
                name="unique_member_email_case_insensitive",
            ),
        ]

    def __str__(self):
        """Return the member's email as string representation."""
        return self.email

    @property
    def display_name(self) -> str:
        """First name and surname, the form printed on receipts."""
        return " ".join(part for part in (self.first_name, self.surname) if part)

    @property
    def full_name(self) -> str:
        """All name parts, skipping a blank middle name."""
        parts = (self.first_name, self.middle_name, self.surname)
        return " ".join(part for part in parts if part)

    def get_full_name(self):
        return self.full_name or self.email

    def get_short_name(self):
        return self.first_name or self.email.split("@")[0]
