"""Tests for MemberManager."""

import pytest

from members.models import Member


@pytest.mark.django_db
class TestCreateUser:
    """Tests for MemberManager.create_user."""

    def test_lowercases_email(self):
        """Should store the email in lowercase."""
        member = Member.objects.create_user(email="Ada@Example.COM", password="x" * 10)

        assert member.email == "ada@example.com"

    def test_hashes_password(self):
        """Should never store the raw password."""
        member = Member.objects.create_user(email="ada@example.com", password="S3curePass!")

        assert member.password != "S3curePass!"
        assert member.check_password("S3curePass!")

    def test_missing_password_sets_unusable(self):
        """Should mark the password unusable when none is given."""
        member = Member.objects.create_user(email="ada@example.com")

        assert not member.has_usable_password()

    def test_normalizes_matric_number(self):
        """Should strip and upper-case the matric number."""
        member = Member.objects.create_user(
            email="ada@example.com", matric_number="  cs/2021/001 "
        )

        assert member.matric_number == "CS/2021/001"

    def test_blank_matric_number_stored_as_null(self):
        """Should store NULL so several staff accounts can coexist."""
        first = Member.objects.create_user(email="a@example.com", matric_number="")
        second = Member.objects.create_user(email="b@example.com")

        assert first.matric_number is None
        assert second.matric_number is None

    def test_requires_email(self):
        """Should raise ValueError without an email."""
        with pytest.raises(ValueError):
            Member.objects.create_user(email="", password="x" * 10)


@pytest.mark.django_db
class TestCreateSuperuser:
    """Tests for MemberManager.create_superuser."""

    def test_sets_staff_flags(self):
        """Should create a staff superuser."""
        admin = Member.objects.create_superuser(email="admin@example.com", password="x" * 10)

        assert admin.is_staff
        assert admin.is_superuser

    def test_rejects_is_staff_false(self):
        """Should refuse a superuser without staff access."""
        with pytest.raises(ValueError):
            Member.objects.create_superuser(
                email="admin@example.com", password="x" * 10, is_staff=False
            )
