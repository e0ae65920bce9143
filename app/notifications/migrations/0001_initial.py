"""
Initial schema for in-app notifications.
"""

from django.conf import settings
from django.db import migrations, models
import django.core.serializers.json
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
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
                (
                    "notification_type",
                    models.CharField(
                        choices=[
                            ("collaboration_request", "Collaboration request"),
                            ("collaboration_approved", "Collaboration approved"),
                            ("collaboration_rejected", "Collaboration rejected"),
                            ("funding_request", "Funding request"),
                            ("funding_verified", "Funding verified"),
                            ("funding_rejected", "Funding rejected"),
                            ("project_comment", "Project comment"),
                            ("project_vote", "Project vote"),
                            ("project_milestone", "Project milestone"),
                            ("comment_reply", "Comment reply"),
                            ("comment_liked", "Comment liked"),
                            ("new_message", "New message"),
                            ("resource_added", "Resource added"),
                            ("project_reported", "Project reported"),
                            ("user_reported", "User reported"),
                            ("content_reported", "Content reported"),
                            ("user_suspended", "User suspended"),
                            ("user_unsuspended", "User unsuspended"),
                            ("content_hidden", "Content hidden"),
                        ],
                        db_index=True,
                        max_length=40,
                    ),
                ),
                (
                    "target_kind",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("project", "Project"),
                            ("collaboration_request", "Collaboration request"),
                            ("funding_request", "Funding request"),
                            ("comment", "Comment"),
                            ("vote", "Vote"),
                            ("message", "Message"),
                            ("resource", "Resource"),
                            ("report", "Report"),
                            ("user", "User"),
                        ],
                        default="",
                        max_length=30,
                    ),
                ),
                ("target_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("message", models.CharField(max_length=500)),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                    ),
                ),
                ("is_read", models.BooleanField(default=False)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "recipient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "notifications_notification",
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["recipient", "is_read", "-created_at"],
                        name="notif_recipient_unread_idx",
                    ),
                    models.Index(
                        fields=["target_kind", "target_id"],
                        name="notif_target_idx",
                    ),
                ],
            },
        ),
    ]
