"""
Factory Boy factories for notification models.

Usage:
    from notifications.tests.factories import NotificationFactory

    notification = NotificationFactory(recipient=user)
    read = NotificationFactory(recipient=user, is_read=True)
"""

import factory
from django.utils import timezone

from authentication.tests.factories import UserFactory
from notifications.models import Notification, NotificationType


class NotificationFactory(factory.django.DjangoModelFactory):
    """Unread collaboration-request notification with an actor."""

    class Meta:
        model = Notification

    recipient = factory.SubFactory(UserFactory)
    actor = factory.SubFactory(UserFactory)
    notification_type = NotificationType.COLLABORATION_REQUEST
    message = factory.Sequence(lambda n: f"Someone requested to collaborate on Project {n}")
    metadata = factory.LazyFunction(dict)
    is_read = False
    read_at = factory.Maybe(
        "is_read",
        yes_declaration=factory.LazyFunction(timezone.now),
        no_declaration=None,
    )
