"""
Factory Boy factories for authentication models.

Usage:
    from authentication.tests.factories import UserFactory, AdminFactory

    user = UserFactory()
    admin = AdminFactory()
    suspended = UserFactory(is_suspended=True, suspended_reason="Spam")
"""

import factory

from authentication.models import SystemRole, User


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    By default, users are active, non-admin and not suspended.
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    full_name = factory.Faker("name")
    system_role = SystemRole.USER
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class AdminFactory(UserFactory):
    """Platform administrator."""

    email = factory.Sequence(lambda n: f"admin{n}@example.com")
    system_role = SystemRole.ADMIN
    is_staff = True
