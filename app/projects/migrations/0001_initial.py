"""
Initial schema for projects, membership, funding and community models.
"""

from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import django_fsm


def _id():
    return models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")


def _timestamps():
    return [
        (
            "created_at",
            models.DateTimeField(
                auto_now_add=True,
                db_index=True,
                help_text="Timestamp when this record was created",
            ),
        ),
        (
            "updated_at",
            models.DateTimeField(
                auto_now=True,
                help_text="Timestamp when this record was last modified",
            ),
        ),
    ]


def _moderation_flags():
    return [
        (
            "is_hidden",
            models.BooleanField(
                db_index=True,
                default=False,
                help_text="Whether this content is hidden from public listings",
            ),
        ),
        (
            "is_reported",
            models.BooleanField(default=False, help_text="Whether this content has been reported"),
        ),
        (
            "hidden_at",
            models.DateTimeField(
                blank=True, null=True, help_text="Timestamp when this content was hidden"
            ),
        ),
        (
            "hidden_reason",
            models.CharField(
                blank=True,
                default="",
                max_length=255,
                help_text="Reason the content was hidden",
            ),
        ),
        (
            "hidden_by",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
                help_text="Admin who hid this content",
            ),
        ),
    ]


def _user_fk(related_name):
    return models.ForeignKey(
        on_delete=django.db.models.deletion.CASCADE,
        related_name=related_name,
        to=settings.AUTH_USER_MODEL,
    )


def _project_fk(related_name):
    return models.ForeignKey(
        on_delete=django.db.models.deletion.CASCADE,
        related_name=related_name,
        to="projects.project",
    )


OPTIONS = {"ordering": ["-created_at"], "abstract": False}


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", _id()),
                *_timestamps(),
                *_moderation_flags(),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("ideation", "Ideation"),
                            ("ongoing", "Ongoing"),
                            ("completed", "Completed"),
                        ],
                        default="ideation",
                        max_length=20,
                    ),
                ),
                (
                    "visibility",
                    models.CharField(
                        choices=[
                            ("public", "Public"),
                            ("private", "Private"),
                            ("restricted", "Restricted"),
                        ],
                        default="public",
                        max_length=20,
                    ),
                ),
                (
                    "funding_goal",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
                ),
                (
                    "current_funding",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                ("owner", _user_fk("owned_projects")),
            ],
            options={
                **OPTIONS,
                "indexes": [
                    models.Index(fields=["owner", "-created_at"], name="project_owner_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProjectStat",
            fields=[
                ("id", _id()),
                *_timestamps(),
                ("total_views", models.PositiveIntegerField(default=0)),
                ("total_votes", models.PositiveIntegerField(default=0)),
                ("total_comments", models.PositiveIntegerField(default=0)),
                (
                    "project",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stats",
                        to="projects.project",
                    ),
                ),
            ],
            options=OPTIONS,
        ),
        migrations.CreateModel(
            name="Collaboration",
            fields=[
                ("id", _id()),
                *_timestamps(),
                (
                    "role",
                    models.CharField(
                        choices=[("owner", "Owner"), ("member", "Member"), ("viewer", "Viewer")],
                        default="member",
                        max_length=10,
                    ),
                ),
                ("project", _project_fk("collaborations")),
                ("user", _user_fk("collaborations")),
            ],
            options={
                **OPTIONS,
                "constraints": [
                    models.UniqueConstraint(
                        fields=("project", "user"), name="unique_project_collaborator"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CollaborationRequest",
            fields=[
                ("id", _id()),
                *_timestamps(),
                ("message", models.TextField(blank=True, default="")),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=50,
                    ),
                ),
                ("project", _project_fk("collaboration_requests")),
                ("user", _user_fk("collaboration_requests")),
            ],
            options={
                **OPTIONS,
                "indexes": [
                    models.Index(
                        fields=["project", "user", "status"], name="collab_req_lookup_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="FundingRequest",
            fields=[
                ("id", _id()),
                *_timestamps(),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("note", models.TextField(blank=True, default="")),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending"),
                            ("verified", "Verified"),
                            ("rejected", "Rejected"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=50,
                    ),
                ),
                ("verified_at", models.DateTimeField(blank=True, null=True)),
                ("funder", _user_fk("funding_requests")),
                ("project", _project_fk("funding_requests")),
                (
                    "verified_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                **OPTIONS,
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="funding_request_amount_positive",
                    ),
                ],
                "indexes": [
                    models.Index(
                        fields=["project", "funder", "status"], name="funding_req_lookup_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Fund",
            fields=[
                ("id", _id()),
                *_timestamps(),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("funded_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("funder", _user_fk("funds")),
                ("project", _project_fk("funds")),
                (
                    "funding_request",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.RESTRICT,
                        related_name="fund",
                        to="projects.fundingrequest",
                    ),
                ),
            ],
            options=OPTIONS,
        ),
        migrations.CreateModel(
            name="Comment",
            fields=[
                ("id", _id()),
                *_timestamps(),
                *_moderation_flags(),
                ("content", models.TextField()),
                ("likes", models.PositiveIntegerField(default=0)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="replies",
                        to="projects.comment",
                    ),
                ),
                ("project", _project_fk("comments")),
                ("user", _user_fk("comments")),
            ],
            options=OPTIONS,
        ),
        migrations.CreateModel(
            name="CommentLike",
            fields=[
                ("id", _id()),
                *_timestamps(),
                (
                    "comment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="like_records",
                        to="projects.comment",
                    ),
                ),
                ("user", _user_fk("comment_likes")),
            ],
            options={
                **OPTIONS,
                "constraints": [
                    models.UniqueConstraint(fields=("comment", "user"), name="unique_comment_like"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Vote",
            fields=[
                ("id", _id()),
                *_timestamps(),
                (
                    "vote_type",
                    models.CharField(choices=[("up", "Up"), ("down", "Down")], max_length=10),
                ),
                ("project", _project_fk("votes")),
                ("user", _user_fk("votes")),
            ],
            options={
                **OPTIONS,
                "constraints": [
                    models.UniqueConstraint(fields=("project", "user"), name="unique_project_vote"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Resource",
            fields=[
                ("id", _id()),
                *_timestamps(),
                ("title", models.CharField(max_length=200)),
                ("url", models.URLField(max_length=500)),
                ("description", models.TextField(blank=True, default="")),
                ("added_by", _user_fk("resources")),
                ("project", _project_fk("resources")),
            ],
            options=OPTIONS,
        ),
    ]
