"""
Project tags.

Usage:
    from projects.services import TagService

    TagService.set_project_tags(project, ["Robotics", "energy"])
    project.tags.values_list("name", flat=True)   # ["energy", "robotics"]
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import ValidationError
from core.services import BaseService
from projects.models import Tag

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from projects.models import Project


class TagService(BaseService):
    """
    Methods:
        normalize: Clean a list of tag names
        get_or_create: One tag by name
        set_project_tags: Replace a project's tags
        all: Tags ordered by name
    """

    @classmethod
    def normalize(cls, names) -> list[str]:
        """
        Strip and lowercase names, drop blanks and duplicates, keep input order.

        Raises:
            ValidationError: a name is longer than Tag.MAX_NAME_LENGTH
        """
        cleaned = []
        for name in names or []:
            name = str(name).strip().lower()
            if not name or name in cleaned:
                continue
            if len(name) > Tag.MAX_NAME_LENGTH:
                raise ValidationError(
                    "Tag name is too long",
                    error_code="INVALID_TAG",
                    details={"tags": [f"Tag names are at most {Tag.MAX_NAME_LENGTH} characters."]},
                )
            cleaned.append(name)
        return cleaned

    @classmethod
    def get_or_create(cls, name: str) -> tuple[Tag, bool]:
        names = cls.normalize([name])
        if not names:
            raise ValidationError(
                "Tag name is required",
                details={"name": ["This field may not be blank."]},
            )
        return Tag.objects.get_or_create(name=names[0])

    @classmethod
    def set_project_tags(cls, project: Project, names) -> list[Tag]:
        tags = [Tag.objects.get_or_create(name=name)[0] for name in cls.normalize(names)]
        project.tags.set(tags)
        return tags

    @classmethod
    def all(cls) -> QuerySet[Tag]:
        return Tag.objects.order_by("name")
