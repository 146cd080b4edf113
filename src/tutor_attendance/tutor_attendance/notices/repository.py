from __future__ import annotations

from typing import Any, Dict, Protocol


class NoticeBackend(Protocol):
    async def get_announcements(self) -> list:
        raise NotImplementedError

    async def check_version(self, app_version: str) -> Dict[str, Any]:
        raise NotImplementedError
