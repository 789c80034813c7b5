"""
Custom manager for email-based member accounts.

Related files:
    - models.py: Member model that uses this manager

Security:
    - Passwords are automatically hashed via set_password()
    - Email addresses are normalized (lowercase)
    - Matric numbers are normalized (stripped, uppercase)
"""

from django.contrib.auth.models import BaseUserManager


class MemberManager(BaseUserManager):
    """
    Custom manager for Member model with email-based authentication.

    Usage:
        member = Member.objects.create_user(
            email='ada@example.com',
            password='securepassword',
            first_name='Ada',
            surname='Obi',
            matric_number='CS/2021/001',
            level='nd1',
        )

        admin = Member.objects.create_superuser(
            email='admin@example.com',
            password='adminpassword',
        )
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a member with the given email and password.

        Args:
            email: Member's email address (required)
            password: Member's password
            **extra_fields: Name parts, matric_number, level, department

        Returns:
            Member: The created member instance

        Raises:
            ValueError: If email is not provided
        """
        if not email:
            raise ValueError("The Email field must be set")

        email = self.normalize_email(email).lower()

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        matric_number = extra_fields.get("matric_number")
        if matric_number:
            extra_fields["matric_number"] = self.normalize_matric_number(matric_number)
        else:
            # Staff accounts have no matric number; NULL keeps them out of
            # the unique index.
            extra_fields["matric_number"] = None

        member = self.model(email=email, **extra_fields)

        if password:
            member.set_password(password)
        else:
            member.set_unusable_password()

        member.save(using=self._db)
        return member

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and save a superuser with the given email and password.

        Raises:
            ValueError: If is_staff or is_superuser is not True
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_matric_number(value: str) -> str:
        """Return the canonical form of a matric number ('cs/21/001 ' -> 'CS/21/001')."""
        return value.strip().upper()
