"""
Factory Boy factories for moderation models.

Usage:
    from moderation.tests.factories import ReportFactory

    report = ReportFactory(target_kind="project", target_id=project.id)
"""

import factory

from authentication.tests.factories import UserFactory
from moderation.models import Report, ReportReason, ReportStatus


class ReportFactory(factory.django.DjangoModelFactory):
    """Pending spam report; pass target_kind/target_id for a real target."""

    class Meta:
        model = Report

    reporter = factory.SubFactory(UserFactory)
    target_kind = "user"
    target_id = factory.LazyAttribute(lambda o: UserFactory().id)
    reason = ReportReason.SPAM
    description = ""
    status = ReportStatus.PENDING
