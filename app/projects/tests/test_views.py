"""
API tests for project endpoints.

Covers the HTTP mapping of the service errors:
    ValidationError / StateError -> 422
    AuthorizationError -> 403
    NotFoundError -> 404
and the ``{error, error_code, details}`` error body.
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from notifications.models import Notification
from projects.models import Collaboration, CollaborationRequest, Fund, Project, Tag
from projects.states import FundingRequestStatus, ProjectStatus, ProjectVisibility
from projects.tests.factories import CommentFactory, FundingRequestFactory, ProjectFactory, TagFactory


def project_url(project_id):
    return reverse("projects:project-detail", kwargs={"pk": project_id})


class TestProjectEndpoints:
    def test_requires_authentication(self, api_client, db):
        response = api_client.get(reverse("projects:project-list"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_project(self, student_client, student):
        response = student_client.post(
            reverse("projects:project-list"),
            {"title": "Campus Garden", "description": "Rooftop vegetables", "funding_goal": "300.00"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["owner"]["id"] == student.id
        assert response.data["current_funding"] == "0.00"
        assert response.data["stats"] == {"total_views": 0, "total_votes": 0, "total_comments": 0}

    def test_create_requires_title(self, student_client):
        response = student_client.post(reverse("projects:project-list"), {}, format="json")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data["error_code"] == "VALIDATION_ERROR"
        assert "title" in response.data["details"]

    def test_list_excludes_private_projects(self, student_client, project):
        ProjectFactory(visibility=ProjectVisibility.PRIVATE)

        response = student_client.get(reverse("projects:project-list"))

        assert response.status_code == status.HTTP_200_OK
        assert [item["id"] for item in response.data["results"]] == [project.id]

    def test_list_filters_by_status(self, student_client, project):
        completed = ProjectFactory(status=ProjectStatus.COMPLETED)

        response = student_client.get(reverse("projects:project-list"), {"status": "completed"})

        assert [item["id"] for item in response.data["results"]] == [completed.id]

    def test_list_mine(self, owner_client, project, student):
        ProjectFactory(owner=student)

        response = owner_client.get(reverse("projects:project-list"), {"mine": "true"})

        assert [item["id"] for item in response.data["results"]] == [project.id]

    def test_list_rejects_unknown_status(self, student_client, db):
        response = student_client.get(reverse("projects:project-list"), {"status": "archived"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "status" in response.data["details"]

    def test_retrieve_counts_view(self, student_client, project):
        response = student_client.get(project_url(project.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["stats"]["total_views"] == 1

    def test_private_project_is_not_found(self, student_client):
        private = ProjectFactory(visibility=ProjectVisibility.PRIVATE)

        response = student_client.get(project_url(private.id))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "PROJECT_NOT_FOUND"

    def test_stranger_cannot_update(self, student_client, project):
        response = student_client.patch(project_url(project.id), {"title": "Mine now"}, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == {
            "error": "Only the project owner can edit this project",
            "error_code": "NOT_PROJECT_OWNER",
        }

    def test_owner_deletes_project(self, owner_client, project):
        response = owner_client.delete(project_url(project.id))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Project.objects.filter(pk=project.pk).exists()

    def test_vote_and_withdraw(self, student_client, project):
        url = reverse("projects:project-vote", kwargs={"pk": project.id})

        response = student_client.post(url, {"vote_type": "up"}, format="json")
        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"vote_type": "up", "upvotes": 1, "downvotes": 0}

        response = student_client.delete(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data["upvotes"] == 0

    def test_milestone(self, owner_client, project, collaborator):
        response = owner_client.post(
            reverse("projects:project-milestones", kwargs={"pk": project.id}),
            {"milestone": "First test drive"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data == {"milestone": "First test drive", "notified": 1}


class TestCollaborationEndpoints:
    def test_request_then_approve(self, student_client, owner_client, project, student):
        response = student_client.post(
            reverse("projects:collaboration-request-list", kwargs={"project_id": project.id}),
            {"message": "I can help with CAD"},
            format="json",
        )
        assert response.status_code == status.HTTP_201_CREATED
        request_id = response.data["id"]

        response = owner_client.post(
            reverse(
                "projects:collaboration-request-approve",
                kwargs={"project_id": project.id, "pk": request_id},
            )
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == "approved"
        assert Collaboration.objects.filter(project=project, user=student).exists()

    def test_duplicate_request_is_422(self, student_client, project, collaboration_request):
        response = student_client.post(
            reverse("projects:collaboration-request-list", kwargs={"project_id": project.id}),
            {},
            format="json",
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data["error_code"] == "DUPLICATE_PENDING_REQUEST"

    def test_non_owner_approve_is_403(self, student_client, project, collaboration_request):
        response = student_client.post(
            reverse(
                "projects:collaboration-request-approve",
                kwargs={"project_id": project.id, "pk": collaboration_request.id},
            )
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_PROJECT_OWNER"

    def test_second_approve_is_422(self, owner_client, project, collaboration_request):
        url = reverse(
            "projects:collaboration-request-approve",
            kwargs={"project_id": project.id, "pk": collaboration_request.id},
        )
        owner_client.post(url)

        response = owner_client.post(url)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data["error_code"] == "ALREADY_PROCESSED"
        assert Collaboration.objects.count() == 1

    def test_reject_is_204(self, owner_client, project, collaboration_request):
        response = owner_client.post(
            reverse(
                "projects:collaboration-request-reject",
                kwargs={"project_id": project.id, "pk": collaboration_request.id},
            )
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not CollaborationRequest.objects.exists()

    def test_unknown_request_is_404(self, owner_client, project):
        response = owner_client.post(
            reverse(
                "projects:collaboration-request-approve",
                kwargs={"project_id": project.id, "pk": 424242},
            )
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_pending_queue_is_owner_only(self, student_client, owner_client, project, collaboration_request):
        url = reverse("projects:collaboration-request-list", kwargs={"project_id": project.id})

        assert student_client.get(url).status_code == status.HTTP_403_FORBIDDEN
        response = owner_client.get(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1

    def test_change_role(self, owner_client, project, collaborator):
        collaboration = Collaboration.objects.get(project=project, user=collaborator)

        response = owner_client.patch(
            reverse(
                "projects:collaboration-detail",
                kwargs={"project_id": project.id, "pk": collaboration.id},
            ),
            {"role": "viewer"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["role"] == "viewer"


class TestFundingEndpoints:
    def test_offer_then_verify(self, funder_client, owner_client, project):
        response = funder_client.post(
            reverse("projects:funding-request-list", kwargs={"project_id": project.id}),
            {"amount": "125.5", "note": "Good luck"},
            format="json",
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["amount"] == "125.50"

        response = owner_client.post(
            reverse(
                "projects:funding-request-verify",
                kwargs={"project_id": project.id, "pk": response.data["id"]},
            )
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == FundingRequestStatus.VERIFIED
        project.refresh_from_db()
        assert project.current_funding == Decimal("125.50")
        assert Fund.objects.filter(project=project).count() == 1

    @pytest.mark.parametrize("amount", ["0", "-10", "lots"])
    def test_invalid_amount_is_422(self, funder_client, project, amount):
        response = funder_client.post(
            reverse("projects:funding-request-list", kwargs={"project_id": project.id}),
            {"amount": amount},
            format="json",
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data["error_code"] == "INVALID_AMOUNT"
        assert "amount" in response.data["details"]

    def test_funder_cannot_verify_own_offer(self, funder_client, project, funding_request):
        response = funder_client.post(
            reverse(
                "projects:funding-request-verify",
                kwargs={"project_id": project.id, "pk": funding_request.id},
            )
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Fund.objects.exists()

    def test_non_owner_sees_only_own_offers(self, funder_client, owner_client, project, funding_request):
        url = reverse("projects:funding-request-list", kwargs={"project_id": project.id})

        FundingRequestFactory(project=project)

        assert funder_client.get(url).data["count"] == 1
        assert owner_client.get(url).data["count"] == 2


class TestCommunityEndpoints:
    def test_post_and_list_comments(self, student_client, project, owner):
        url = reverse("projects:comment-list", kwargs={"project_id": project.id})

        response = student_client.post(url, {"content": "Looks promising"}, format="json")
        assert response.status_code == status.HTTP_201_CREATED

        response = student_client.get(url)
        assert response.data["count"] == 1
        assert response.data["results"][0]["content"] == "Looks promising"
        assert Notification.objects.filter(recipient=owner).count() == 1

    def test_like_twice_is_422(self, student_client, project):
        comment = CommentFactory(project=project)
        url = reverse("projects:comment-like", kwargs={"project_id": project.id, "pk": comment.id})

        assert student_client.post(url).status_code == status.HTTP_200_OK
        response = student_client.post(url)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data["error_code"] == "ALREADY_LIKED"

    def test_resources_are_member_only(self, student_client, owner_client, project):
        url = reverse("projects:resource-list", kwargs={"project_id": project.id})

        response = owner_client.post(
            url, {"title": "Budget", "url": "https://example.com/budget"}, format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED

        response = student_client.get(url)
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_PROJECT_MEMBER"


class TestTagEndpoints:
    def test_create_project_with_tags(self, student_client):
        response = student_client.post(
            reverse("projects:project-list"),
            {"title": "Campus Garden", "tags": ["Robotics", "energy", "robotics"]},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert sorted(response.data["tags"]) == ["energy", "robotics"]

    def test_owner_replaces_tags(self, owner_client, project):
        project.tags.add(TagFactory(name="energy"))

        response = owner_client.patch(project_url(project.id), {"tags": ["vehicles"]}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["tags"] == ["vehicles"]

    def test_overlong_tag_is_422(self, owner_client, project):
        response = owner_client.patch(project_url(project.id), {"tags": ["x" * 51]}, format="json")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "tags" in response.data["details"]

    def test_filter_projects_by_tag(self, student_client, project):
        project.tags.add(TagFactory(name="robotics"))
        ProjectFactory().tags.add(TagFactory(name="music"))
        ProjectFactory()

        response = student_client.get(reverse("projects:project-list"), {"tags": "Robotics,chemistry"})

        assert [item["id"] for item in response.data["results"]] == [project.id]

    def test_anonymous_lists_tags(self, api_client, db):
        TagFactory(name="robotics")
        TagFactory(name="energy")

        response = api_client.get(reverse("projects:tag-list"))

        assert response.status_code == status.HTTP_200_OK
        assert [tag["name"] for tag in response.data] == ["energy", "robotics"]

    def test_tag_detail_shows_visible_projects(self, api_client, project):
        tag = TagFactory(name="robotics")
        project.tags.add(tag)
        ProjectFactory(visibility=ProjectVisibility.PRIVATE).tags.add(tag)
        ProjectFactory(is_hidden=True).tags.add(tag)

        response = api_client.get(reverse("projects:tag-detail", kwargs={"pk": tag.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["name"] == "robotics"
        assert [item["id"] for item in response.data["projects"]] == [project.id]

    def test_create_tag(self, student_client):
        created = student_client.post(reverse("projects:tag-list"), {"name": "AI"}, format="json")
        existing = student_client.post(reverse("projects:tag-list"), {"name": "ai "}, format="json")

        assert created.status_code == status.HTTP_201_CREATED
        assert existing.status_code == status.HTTP_200_OK
        assert existing.data["id"] == created.data["id"]
        assert Tag.objects.get().name == "ai"

    def test_create_tag_requires_authentication(self, api_client, db):
        response = api_client.post(reverse("projects:tag-list"), {"name": "ai"}, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
