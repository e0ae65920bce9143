"""
Tests for NotificationDispatcher.

Recipient rules per event, message rendering, and the never-raise contract.
"""

from decimal import Decimal

import pytest

from authentication.tests.factories import AdminFactory, UserFactory
from messaging.models import Message
from moderation.models import Report, ReportReason
from notifications import dispatcher as dispatcher_module
from notifications.dispatcher import NotificationDispatcher, NotificationEvent
from notifications.models import Notification, NotificationType
from projects.models import Vote
from projects.states import VoteType
from projects.tests.factories import (
    CollaborationFactory,
    CommentFactory,
    FundingRequestFactory,
    ProjectFactory,
    ResourceFactory,
)

pytestmark = pytest.mark.django_db


@pytest.fixture
def owner(db):
    return UserFactory(full_name="Olivia Owner")


@pytest.fixture
def project(owner):
    return ProjectFactory(owner=owner, title="Solar Car")


def recipients(notifications):
    return sorted(n.recipient_id for n in notifications)


class TestDispatchContract:
    def test_every_event_has_a_builder(self):
        assert NotificationDispatcher.registered_events() == set(NotificationEvent.values)

    def test_unknown_event_returns_empty(self, mocker, project):
        logger = mocker.patch.object(NotificationDispatcher, "get_logger").return_value

        result = NotificationDispatcher.dispatch("no_such_event", project)

        assert result == []
        logger.error.assert_called_once()

    def test_builder_failure_is_swallowed(self, mocker, project):
        logger = mocker.patch.object(NotificationDispatcher, "get_logger").return_value
        failing = mocker.Mock(side_effect=RuntimeError("template exploded"))
        mocker.patch.dict(
            dispatcher_module._BUILDERS, {NotificationEvent.PROJECT_MILESTONE: failing}
        )

        result = NotificationDispatcher.dispatch(
            NotificationEvent.PROJECT_MILESTONE, project, actor=project.owner
        )

        assert result == []
        assert not Notification.objects.exists()
        logger.exception.assert_called_once()
        assert "project_milestone" in logger.exception.call_args.args[0]

    def test_dispatch_is_not_idempotent(self, project):
        comment = CommentFactory(project=project)

        NotificationDispatcher.dispatch(NotificationEvent.COMMENT_POSTED, comment, actor=comment.user)
        NotificationDispatcher.dispatch(NotificationEvent.COMMENT_POSTED, comment, actor=comment.user)

        assert Notification.objects.filter(recipient=project.owner).count() == 2


class TestFundingEvents:
    def test_amount_is_formatted_with_separators(self, project, owner):
        funding_request = FundingRequestFactory(
            project=project,
            amount=Decimal("1234567.80"),
            funder=UserFactory(full_name="Frank Funder"),
        )

        [notification] = NotificationDispatcher.dispatch(
            NotificationEvent.FUNDING_REQUESTED, funding_request, actor=funding_request.funder
        )

        assert notification.recipient == owner
        assert notification.message == "Frank Funder offered $1,234,567.80 funding for Solar Car"
        assert notification.metadata["funding_request_id"] == funding_request.id


class TestCommunityEvents:
    def test_self_like_is_silent(self, project):
        comment = CommentFactory(project=project)

        result = NotificationDispatcher.dispatch(
            NotificationEvent.COMMENT_LIKED, comment, actor=comment.user
        )

        assert result == []

    def test_owner_voting_own_project_is_silent(self, project, owner):
        vote = Vote.objects.create(project=project, user=owner, vote_type=VoteType.UP)

        assert NotificationDispatcher.dispatch(NotificationEvent.PROJECT_VOTED, vote, actor=owner) == []

    def test_downvote_is_silent(self, project):
        voter = UserFactory()
        vote = Vote.objects.create(project=project, user=voter, vote_type=VoteType.DOWN)

        assert NotificationDispatcher.dispatch(NotificationEvent.PROJECT_VOTED, vote, actor=voter) == []

    def test_resource_recipients_are_deduplicated(self, project, owner):
        adder = CollaborationFactory(project=project).user
        other = CollaborationFactory(project=project).user
        CollaborationFactory(project=project, user=owner)
        resource = ResourceFactory(project=project, added_by=adder)

        notifications = NotificationDispatcher.dispatch(
            NotificationEvent.RESOURCE_ADDED, resource, actor=adder
        )

        assert recipients(notifications) == sorted([owner.id, other.id])

    def test_milestone_skips_announcer(self, project, owner):
        member = CollaborationFactory(project=project).user

        notifications = NotificationDispatcher.dispatch(
            NotificationEvent.PROJECT_MILESTONE, project, actor=owner, milestone="Beta"
        )

        assert recipients(notifications) == [member.id]
        assert notifications[0].metadata["milestone"] == "Beta"


class TestMessageEvents:
    def test_message_preview_is_truncated(self):
        sender = UserFactory(full_name="Sid Sender")
        receiver = UserFactory()
        message = Message.objects.create(sender=sender, receiver=receiver, content="word " * 60)

        [notification] = NotificationDispatcher.dispatch(
            NotificationEvent.MESSAGE_RECEIVED, message, actor=sender
        )

        assert notification.recipient == receiver
        assert notification.notification_type == NotificationType.NEW_MESSAGE
        assert notification.message == "Sid Sender sent you a message"
        assert len(notification.metadata["message_preview"]) <= 100
        assert notification.target_kind == "message"


class TestModerationEvents:
    def test_project_report_notifies_admins_and_owner(self, project, owner):
        admin = AdminFactory()
        reporting_admin = AdminFactory()
        report = Report.objects.create(
            reporter=reporting_admin,
            target_kind="project",
            target_id=project.id,
            reason=ReportReason.SPAM,
        )

        notifications = NotificationDispatcher.dispatch(
            NotificationEvent.REPORT_FILED, report, actor=reporting_admin
        )

        by_recipient = {n.recipient_id: n for n in notifications}
        assert set(by_recipient) == {admin.id, owner.id}
        assert by_recipient[admin.id].message == "New content report: project - Spam"
        assert by_recipient[owner.id].notification_type == NotificationType.PROJECT_REPORTED

    def test_user_report_notifies_reported_user(self):
        reported = UserFactory()
        reporter = UserFactory()
        report = Report.objects.create(
            reporter=reporter,
            target_kind="user",
            target_id=reported.id,
            reason=ReportReason.HARASSMENT,
        )

        notifications = NotificationDispatcher.dispatch(
            NotificationEvent.REPORT_FILED, report, actor=reporter
        )

        assert [n.recipient for n in notifications] == [reported]
        assert notifications[0].notification_type == NotificationType.USER_REPORTED

    def test_hidden_comment_notifies_author(self, project):
        comment = CommentFactory(project=project)
        admin = AdminFactory()

        [notification] = NotificationDispatcher.dispatch(
            NotificationEvent.CONTENT_HIDDEN, comment, actor=admin, reason="Off topic"
        )

        assert notification.recipient == comment.user
        assert notification.message == "Your comment has been hidden: Off topic"

    def test_suspension(self):
        user = UserFactory()

        [notification] = NotificationDispatcher.dispatch(
            NotificationEvent.USER_SUSPENDED, user, actor=AdminFactory(), reason="Spam"
        )

        assert notification.message == "Your account has been suspended: Spam"
        assert notification.target_kind == "user"
