from __future__ import annotations

from typing import Any, Dict, Protocol


class AuthBackend(Protocol):
    async def login(self, phone: str, password: str) -> Dict[str, Any]:
        raise NotImplementedError
