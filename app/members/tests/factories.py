"""
Factory Boy factories for member models.

Usage:
    from members.tests.factories import MemberFactory

    member = MemberFactory()
    member = MemberFactory(level="hnd2", first_name="Ada")
"""

import factory

from members.models import Level, Member


class MemberFactory(factory.django.DjangoModelFactory):
    """
    Factory for Member model.

    Goes through MemberManager.create_user() so the password is hashed
    and the matric number normalized exactly as in production.

    Examples:
        member = MemberFactory()
        staff = MemberFactory(is_staff=True, matric_number=None)
    """

    class Meta:
        model = Member
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"student{n}@example.com")
    first_name = factory.Faker("first_name")
    middle_name = ""
    surname = factory.Faker("last_name")
    matric_number = factory.Sequence(lambda n: f"CS/2021/{n:04d}")
    level = Level.ND1
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use MemberManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )
