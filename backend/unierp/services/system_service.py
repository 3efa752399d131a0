"""System Service — system-wide settings and announcements.

Invariants:
    - Settings are upserted by key; listing orders by key
    - The registration_open flag only accepts "true" or "false"
    - Visible global announcements: inside their visibility window, pinned first,
      then newest first
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from unierp.core.coursework import check_visibility_window, is_visible
from unierp.core.errors import BusinessRuleError, ResourceNotFoundError
from unierp.core.system_settings import FLAG_DEFAULTS, REGISTRATION_OPEN, read_flag
from unierp.models.global_announcement import GlobalAnnouncement
from unierp.models.system_setting import SystemSetting
from unierp.models.user import User
from unierp.schemas.announcements import (
    AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate,
)
from unierp.schemas.partial_update import apply_update
from unierp.schemas.system import SettingUpdate

logger = logging.getLogger(__name__)

Author = aliased(User)


def _response(a: GlobalAnnouncement, author: str | None) -> AnnouncementResponse:
    return AnnouncementResponse(
        id=a.id,
        title=a.title,
        content=a.content,
        priority=a.priority,
        is_pinned=a.is_pinned,
        visible_from=a.visible_from,
        visible_until=a.visible_until,
        created_by=a.created_by,
        creator_name=author,
        created_at=a.created_at,
    )


class SystemService:
    """Key/value settings and global announcements."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Settings ───────────────────────────────────────────────

    async def list_settings(self) -> list[SystemSetting]:
        result = await self.db.execute(
            select(SystemSetting).order_by(SystemSetting.key),
        )
        return list(result.scalars().all())

    async def get_setting(self, key: str) -> SystemSetting:
        setting = await self._find_setting(key)
        if setting is None:
            raise ResourceNotFoundError("Setting", key)
        return setting

    async def registration_open(self) -> bool:
        setting = await self._find_setting(REGISTRATION_OPEN)
        return read_flag(REGISTRATION_OPEN, setting.value if setting else None)

    async def put_setting(self, key: str, body: SettingUpdate) -> SystemSetting:
        value = body.value.strip()
        if key in FLAG_DEFAULTS:
            value = value.lower()
            if value not in ("true", "false"):
                raise BusinessRuleError(
                    f"Setting '{key}' must be 'true' or 'false'", "INVALID_SETTING",
                )
        setting = await self._find_setting(key)
        if setting is None:
            setting = SystemSetting(key=key)
            self.db.add(setting)
        setting.value = value
        setting.updated_by = body.updated_by
        setting.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(setting)
        logger.info(f"Setting {key} = {value}", extra={"user_id": body.updated_by})
        return setting

    # ─── Global announcements ───────────────────────────────────

    async def list_announcements(
        self, include_hidden: bool = False, now: datetime | None = None,
    ) -> list[AnnouncementResponse]:
        """Announcements inside their visibility window, or all of them."""
        now = now or datetime.now(timezone.utc)
        result = await self.db.execute(self._query())
        return [
            _response(*row) for row in result.all()
            if include_hidden
            or is_visible(now, row[0].visible_from, row[0].visible_until)
        ]

    async def get_announcement(self, announcement_id: UUID) -> AnnouncementResponse:
        result = await self.db.execute(
            self._query()
            .where(GlobalAnnouncement.id == announcement_id)
            .execution_options(populate_existing=True),
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError("Global announcement", str(announcement_id))
        return _response(*row)

    async def create_announcement(
        self, body: AnnouncementCreate,
    ) -> AnnouncementResponse:
        announcement = GlobalAnnouncement(**body.model_dump())
        self.db.add(announcement)
        await self.db.commit()
        logger.info(f"Global announcement posted: {announcement.title}")
        return await self.get_announcement(announcement.id)

    async def update_announcement(
        self, announcement_id: UUID, body: AnnouncementUpdate,
    ) -> AnnouncementResponse:
        announcement = await self._require_announcement_row(announcement_id)
        apply_update(announcement, body, "global announcement")
        try:
            check_visibility_window(
                announcement.visible_from, announcement.visible_until,
            )
        except BusinessRuleError:
            await self.db.rollback()
            raise
        await self.db.commit()
        return await self.get_announcement(announcement_id)

    async def delete_announcement(self, announcement_id: UUID) -> None:
        announcement = await self._require_announcement_row(announcement_id)
        await self.db.delete(announcement)
        await self.db.commit()

    # ─── Helpers ────────────────────────────────────────────────

    @staticmethod
    def _query():
        return (
            select(GlobalAnnouncement, Author.name)
            .outerjoin(Author, Author.id == GlobalAnnouncement.created_by)
            .order_by(
                GlobalAnnouncement.is_pinned.desc(),
                GlobalAnnouncement.created_at.desc(),
            )
        )

    async def _find_setting(self, key: str) -> SystemSetting | None:
        result = await self.db.execute(
            select(SystemSetting).where(SystemSetting.key == key),
        )
        return result.scalar_one_or_none()

    async def _require_announcement_row(
        self, announcement_id: UUID,
    ) -> GlobalAnnouncement:
        announcement = await self.db.get(GlobalAnnouncement, announcement_id)
        if announcement is None:
            raise ResourceNotFoundError("Global announcement", str(announcement_id))
        return announcement
