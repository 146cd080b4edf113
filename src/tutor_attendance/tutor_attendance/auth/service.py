from __future__ import annotations

import logging

from ..common.validators import require_non_empty
from ..core.exceptions import ApiError, AuthenticationError, TransientApiError
from ..geo.model import Center
from .model import TutorSession
from .repository import AuthBackend

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate tutor (login) against the backend."""

    def __init__(self, backend: AuthBackend):
        self._backend = backend

    async def login(self, phone: str, password: str) -> TutorSession:
        phone = require_non_empty(phone, "Phone")
        password = require_non_empty(password, "Password")

        try:
            data = await self._backend.login(phone, password)
        except TransientApiError:
            raise
        except ApiError as e:
            logger.info("Login rejected for %s: %s", phone, e.message)
            raise AuthenticationError(e.message or "Invalid phone or password") from e

        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise AuthenticationError("Login response did not include a token")

        return TutorSession(
            tutor_id=str(data.get("_id", "")),
            name=str(data.get("name", "")),
            phone=str(data.get("phone") or phone),
            email=data.get("email"),
            role=data.get("role"),
            token=str(token),
            center=Center.from_api(data.get("assignedCenter")),
        )
