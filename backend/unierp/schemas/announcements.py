"""Announcement Schemas — course announcements and system-wide announcements.

Invariants:
    - visible_until, when both bounds are given, is after visible_from
    - priority is one of: low, normal, high
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from unierp.core.domain_types import AnnouncementPriority
from unierp.schemas.partial_update import PartialUpdate


class _VisibilityWindow(BaseModel):

    @model_validator(mode="after")
    def window_is_ordered(self):
        start, end = self.visible_from, self.visible_until
        if start is not None and end is not None and end <= start:
            raise ValueError("visible_until must be after visible_from")
        return self


class AnnouncementCreate(_VisibilityWindow):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    created_by: UUID | None = None
    priority: AnnouncementPriority = Field(
        AnnouncementPriority.NORMAL, validate_default=True,
    )
    is_pinned: bool = False
    visible_from: datetime | None = None
    visible_until: datetime | None = None


class CourseAnnouncementCreate(AnnouncementCreate):
    attachment_urls: list[str] = Field(default_factory=list)


class AnnouncementUpdate(PartialUpdate):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset(
        {"title", "content", "priority", "is_pinned"},
    )

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)
    priority: AnnouncementPriority | None = None
    is_pinned: bool | None = None
    visible_from: datetime | None = None
    visible_until: datetime | None = None


class CourseAnnouncementUpdate(AnnouncementUpdate):
    NON_NULLABLE: ClassVar[frozenset[str]] = (
        AnnouncementUpdate.NON_NULLABLE | {"attachment_urls"}
    )

    attachment_urls: list[str] | None = None


class AnnouncementResponse(BaseModel):
    id: UUID
    title: str
    content: str
    priority: str
    is_pinned: bool
    visible_from: datetime | None = None
    visible_until: datetime | None = None
    created_by: UUID | None = None
    creator_name: str | None = None
    created_at: datetime


class CourseAnnouncementResponse(AnnouncementResponse):
    course_offering_id: UUID
    course_id: str
    course_name: str
    attachment_urls: list[str] = Field(default_factory=list)
