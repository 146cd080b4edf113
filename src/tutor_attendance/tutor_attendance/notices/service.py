from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .repository import NoticeBackend


@dataclass(frozen=True)
class VersionStatus:
    update_required: bool
    current_version: Optional[str]
    message: str


@dataclass(frozen=True)
class Announcement:
    announcement_id: str
    body: str
    title: Optional[str] = None
    created_at: Optional[str] = None


class NoticeService:
    def __init__(self, app_version: str):
        self._app_version = app_version

    async def check_version(self, api: NoticeBackend) -> VersionStatus:
        data = await api.check_version(self._app_version)
        return VersionStatus(
            update_required=bool(data.get("updateRequired", False)),
            current_version=data.get("currentVersion"),
            message=str(data.get("message", "")),
        )

    async def announcements(self, api: NoticeBackend) -> list[Announcement]:
        items = await api.get_announcements()
        out = [
            Announcement(
                announcement_id=str(a.get("_id", "")),
                body=str(a.get("body", "")),
                title=a.get("title"),
                created_at=a.get("createdAt"),
            )
            for a in items
            if isinstance(a, dict)
        ]
        out.sort(key=lambda a: a.created_at or "", reverse=True)
        return out
