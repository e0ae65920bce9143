"""
Tests for project, membership and community services.

Test Classes:
    TestProjectService: Creation, moderation on write, visibility, milestones
    TestCollaborationService: Removing members and changing roles
    TestCommentService: Comments, replies, likes and counters
    TestVoteService: Votes and tallies
    TestResourceService: Member-only resources
    TestTagService: Tag normalization and project tagging
"""

from decimal import Decimal

import pytest

from authentication.tests.factories import UserFactory
from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from moderation.models import Report
from notifications.models import Notification, NotificationType
from projects.models import Collaboration, CollaborationRequest, Comment, ProjectStat, Tag, Vote
from projects.services import (
    CollaborationService,
    CommentService,
    ProjectService,
    ResourceService,
    TagService,
    VoteService,
)
from projects.states import CollaborationRole, ProjectVisibility, VoteType
from projects.tests.factories import (
    CollaborationFactory,
    CollaborationRequestFactory,
    CommentFactory,
    ProjectFactory,
    TagFactory,
)

SPAM_TEXT = (
    "CONGRATULATIONS WINNER! Click here link to claim your lottery prize. "
    "Earn $500 per day with bitcoin crypto casino $$$$"
)
SUSPICIOUS_TEXT = "Win the lottery prize, invest in bitcoin and crypto today"


class TestProjectService:
    def test_create_project_creates_stats_row(self, owner):
        project = ProjectService.create_project(
            owner, title="  Rover  ", description="Mars rover prototype", funding_goal=Decimal("500")
        )

        assert project.title == "Rover"
        assert project.current_funding == Decimal("0.00")
        assert ProjectStat.objects.filter(project=project).exists()
        assert not project.is_hidden

    def test_blank_title_is_rejected(self, owner):
        with pytest.raises(ValidationError) as exc_info:
            ProjectService.create_project(owner, title="   ")

        assert "title" in exc_info.value.details

    def test_spam_project_is_hidden_and_reported(self, owner):
        project = ProjectService.create_project(owner, title="Offer", description=SPAM_TEXT)

        project.refresh_from_db()
        assert project.is_hidden
        assert project.is_reported
        assert Report.objects.filter(target_kind="project", target_id=project.id).exists()

    def test_update_is_owner_only(self, project):
        with pytest.raises(AuthorizationError):
            ProjectService.update_project(project, UserFactory(), title="Hijacked")

    def test_update_rejects_unknown_fields(self, project, owner):
        with pytest.raises(ValidationError) as exc_info:
            ProjectService.update_project(project, owner, current_funding=Decimal("1000"))

        assert "current_funding" in exc_info.value.details

    def test_update_remoderates_text(self, project, owner):
        ProjectService.update_project(project, owner, description=SUSPICIOUS_TEXT)

        project.refresh_from_db()
        assert project.is_reported
        assert not project.is_hidden

    def test_delete_by_admin(self, project, admin_user):
        ProjectService.delete_project(project, admin_user)

        assert not type(project).objects.filter(pk=project.pk).exists()

    def test_delete_by_stranger_is_forbidden(self, project):
        with pytest.raises(AuthorizationError):
            ProjectService.delete_project(project, UserFactory())

    def test_visibility_rules(self, owner, student, admin_user):
        public = ProjectFactory(owner=owner)
        private = ProjectFactory(owner=owner, visibility=ProjectVisibility.PRIVATE)
        hidden = ProjectFactory(owner=owner, is_hidden=True)
        shared = ProjectFactory(visibility=ProjectVisibility.PRIVATE)
        CollaborationFactory(project=shared, user=student)

        assert set(ProjectService.visible_to(student)) == {public, shared}
        assert set(ProjectService.visible_to(owner)) == {public, private, hidden}
        assert set(ProjectService.visible_to(admin_user)) == {public, private, hidden, shared}

    def test_get_visible_hides_private_project(self, student):
        private = ProjectFactory(visibility=ProjectVisibility.PRIVATE)

        with pytest.raises(NotFoundError):
            ProjectService.get_visible(private.id, student)

    def test_record_view_increments_counter(self, project):
        ProjectService.record_view(project)
        ProjectService.record_view(project)

        assert ProjectStat.objects.get(project=project).total_views == 2

    def test_milestone_notifies_collaborators(self, project, owner, collaborator):
        notifications = ProjectService.announce_milestone(project, owner, "Prototype finished")

        assert [n.recipient for n in notifications] == [collaborator]
        assert notifications[0].message == "Solar Car reached a new milestone: Prototype finished"

    def test_milestone_is_owner_only(self, project, collaborator):
        with pytest.raises(AuthorizationError):
            ProjectService.announce_milestone(project, collaborator, "Done")


class TestCollaborationService:
    def test_owner_removes_collaborator_and_their_requests(self, project, owner):
        member = UserFactory()
        CollaborationRequestFactory(project=project, user=member)
        collaboration = CollaborationFactory(project=project, user=member)

        CollaborationService.remove_collaborator(collaboration.id, owner)

        assert not Collaboration.objects.filter(pk=collaboration.pk).exists()
        assert not CollaborationRequest.objects.filter(project=project, user=member).exists()

    def test_collaborator_may_leave(self, project, collaborator):
        collaboration = Collaboration.objects.get(project=project, user=collaborator)

        CollaborationService.remove_collaborator(collaboration.id, collaborator)

        assert not project.has_collaborator(collaborator)

    def test_stranger_cannot_remove(self, project, collaborator):
        collaboration = Collaboration.objects.get(project=project, user=collaborator)

        with pytest.raises(AuthorizationError):
            CollaborationService.remove_collaborator(collaboration.id, UserFactory())

    def test_change_role(self, project, owner, collaborator):
        collaboration = Collaboration.objects.get(project=project, user=collaborator)

        updated = CollaborationService.change_role(collaboration.id, owner, CollaborationRole.VIEWER)

        assert updated.role == CollaborationRole.VIEWER

    def test_owner_role_cannot_be_assigned(self, project, owner, collaborator):
        collaboration = Collaboration.objects.get(project=project, user=collaborator)

        with pytest.raises(ValidationError) as exc_info:
            CollaborationService.change_role(collaboration.id, owner, CollaborationRole.OWNER)

        assert exc_info.value.error_code == "INVALID_ROLE"


class TestCommentService:
    def test_comment_increments_counter_and_notifies_owner(self, project, owner, student):
        comment = CommentService.post_comment(project, student, "Nice work on the chassis")

        assert ProjectStat.objects.get(project=project).total_comments == 1
        notification = Notification.objects.get(recipient=owner)
        assert notification.notification_type == NotificationType.PROJECT_COMMENT
        assert notification.metadata["comment_id"] == comment.id

    def test_owner_comment_does_not_notify_owner(self, project, owner):
        CommentService.post_comment(project, owner, "Update: wheels arrived")

        assert not Notification.objects.exists()

    def test_reply_notifies_parent_author_only(self, project, owner, student):
        parent = CommentFactory(project=project, user=student)
        replier = UserFactory(full_name="Rita Replier")

        CommentService.post_comment(project, replier, "Agreed!", parent_id=parent.id)

        notification = Notification.objects.get()
        assert notification.recipient == student
        assert notification.notification_type == NotificationType.COMMENT_REPLY
        assert notification.message == "Rita Replier replied to your comment on Solar Car"

    def test_reply_parent_must_be_on_same_project(self, project, student):
        foreign_parent = CommentFactory()

        with pytest.raises(NotFoundError):
            CommentService.post_comment(project, student, "Hi", parent_id=foreign_parent.id)

    def test_blank_comment_is_rejected(self, project, student):
        with pytest.raises(ValidationError):
            CommentService.post_comment(project, student, "   ")

    def test_spam_comment_is_hidden_without_notification(self, project, student):
        comment = CommentService.post_comment(project, student, SPAM_TEXT)

        comment.refresh_from_db()
        assert comment.is_hidden
        assert not Notification.objects.filter(
            notification_type=NotificationType.PROJECT_COMMENT
        ).exists()
        assert list(CommentService.comments_for_project(project, student)) == []

    def test_like_once_per_user(self, project, owner, student):
        comment = CommentFactory(project=project, user=owner)

        liked = CommentService.like_comment(comment.id, student)
        with pytest.raises(ValidationError) as exc_info:
            CommentService.like_comment(comment.id, student)

        assert liked.likes == 1
        assert exc_info.value.error_code == "ALREADY_LIKED"
        comment.refresh_from_db()
        assert comment.likes == 1
        assert Notification.objects.get().notification_type == NotificationType.COMMENT_LIKED

    def test_unlike(self, project, student):
        comment = CommentFactory(project=project)
        CommentService.like_comment(comment.id, student)

        unliked = CommentService.unlike_comment(comment.id, student)

        assert unliked.likes == 0
        with pytest.raises(NotFoundError):
            CommentService.unlike_comment(comment.id, student)


class TestVoteService:
    def test_upvote_counts_once_and_notifies_owner(self, project, owner, student):
        VoteService.cast_vote(project, student, VoteType.UP)
        VoteService.cast_vote(project, student, VoteType.UP)

        assert Vote.objects.filter(project=project).count() == 1
        assert ProjectStat.objects.get(project=project).total_votes == 1
        assert Notification.objects.filter(recipient=owner).count() == 1

    def test_changing_vote_keeps_total(self, project, student):
        VoteService.cast_vote(project, student, VoteType.UP)
        VoteService.cast_vote(project, student, VoteType.DOWN)

        assert VoteService.tally(project) == {"upvotes": 0, "downvotes": 1}
        assert ProjectStat.objects.get(project=project).total_votes == 1

    def test_downvote_does_not_notify(self, project, student):
        VoteService.cast_vote(project, student, VoteType.DOWN)

        assert not Notification.objects.exists()

    def test_invalid_vote_type(self, project, student):
        with pytest.raises(ValidationError) as exc_info:
            VoteService.cast_vote(project, student, "sideways")

        assert exc_info.value.error_code == "INVALID_VOTE_TYPE"

    def test_remove_vote(self, project, student):
        VoteService.cast_vote(project, student, VoteType.UP)

        VoteService.remove_vote(project, student)

        assert ProjectStat.objects.get(project=project).total_votes == 0
        with pytest.raises(NotFoundError):
            VoteService.remove_vote(project, student)


class TestResourceService:
    def test_member_adds_resource_and_team_is_notified(self, project, owner, collaborator):
        resource = ResourceService.add_resource(
            project, collaborator, "Wiring diagram", "https://example.com/wiring.png"
        )

        recipients = set(
            Notification.objects.filter(
                notification_type=NotificationType.RESOURCE_ADDED
            ).values_list("recipient_id", flat=True)
        )
        assert recipients == {owner.id}
        assert resource.added_by == collaborator

    def test_owner_adding_resource_notifies_each_collaborator_once(
        self, project, owner, collaborator
    ):
        ResourceService.add_resource(project, owner, "Budget", "https://example.com/budget.xlsx")

        assert list(Notification.objects.values_list("recipient_id", flat=True)) == [
            collaborator.id
        ]

    def test_outsider_cannot_add(self, project, student):
        with pytest.raises(AuthorizationError) as exc_info:
            ResourceService.add_resource(project, student, "Spam", "https://example.com")

        assert exc_info.value.error_code == "NOT_PROJECT_MEMBER"

    @pytest.mark.parametrize("url", ["not a url", "ftp://example.com/file", ""])
    def test_invalid_url(self, project, owner, url):
        with pytest.raises(ValidationError) as exc_info:
            ResourceService.add_resource(project, owner, "Doc", url)

        assert exc_info.value.error_code == "INVALID_URL"

    def test_outsider_cannot_list(self, project, student):
        with pytest.raises(AuthorizationError):
            ResourceService.resources_for_project(project, student)


class TestTagService:
    def test_normalize(self):
        assert TagService.normalize([" Robotics ", "energy", "ROBOTICS", "", "  "]) == [
            "robotics",
            "energy",
        ]

    def test_overlong_name_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            TagService.normalize(["x" * 51])

        assert exc_info.value.error_code == "INVALID_TAG"

    def test_create_project_with_tags_reuses_existing(self, owner):
        existing = TagFactory(name="energy")

        project = ProjectService.create_project(owner, "Solar Car", tags=["Energy", "Vehicles"])

        assert sorted(project.tags.values_list("name", flat=True)) == ["energy", "vehicles"]
        assert project.tags.get(name="energy") == existing
        assert Tag.objects.count() == 2

    def test_update_replaces_tags(self, project, owner):
        TagService.set_project_tags(project, ["energy"])

        ProjectService.update_project(project, owner, tags=["robotics"])

        assert list(project.tags.values_list("name", flat=True)) == ["robotics"]

    def test_update_without_tags_keeps_them(self, project, owner):
        TagService.set_project_tags(project, ["energy"])

        ProjectService.update_project(project, owner, title="Solar Car II")

        assert list(project.tags.values_list("name", flat=True)) == ["energy"]

    def test_get_or_create(self, db):
        tag, created = TagService.get_or_create(" AI ")
        again, created_again = TagService.get_or_create("ai")

        assert created
        assert not created_again
        assert again == tag
        assert tag.name == "ai"
