"""
Audit trail for admin moderation actions.
"""

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("moderation", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditLog",
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
                    "action",
                    models.CharField(
                        choices=[
                            ("report_reviewing", "Report under review"),
                            ("report_resolved", "Report resolved"),
                            ("report_dismissed", "Report dismissed"),
                            ("content_hidden", "Content hidden"),
                            ("content_unhidden", "Content unhidden"),
                            ("user_suspended", "User suspended"),
                            ("user_unsuspended", "User unsuspended"),
                        ],
                        db_index=True,
                        max_length=30,
                    ),
                ),
                (
                    "target_kind",
                    models.CharField(
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
                        max_length=30,
                    ),
                ),
                ("target_id", models.PositiveBigIntegerField()),
                ("details", models.TextField(blank=True, default="")),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                (
                    "actor",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="audit_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["target_kind", "target_id"], name="audit_target_idx"),
                ],
            },
        ),
    ]
