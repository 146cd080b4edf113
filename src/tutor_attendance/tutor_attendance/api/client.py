"""
Backend Client for the Tuition Center API
=========================================
Async client used by the services to reach the tuition-center REST backend.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

import aiohttp

from ..core.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS
from ..core.exceptions import ApiError, AuthenticationError, TransientApiError
from ..geo.model import Coordinate
from .endpoints import ENDPOINTS

logger = logging.getLogger(__name__)

TRANSIENT_STATUSES = {408, 429}
UPGRADE_REQUIRED = 426


class TuitionApiClient:
    """
    Async JSON client with bearer-token auth.

    A fresh aiohttp session is opened per call so the client can be shared by
    Flask views that each run on their own event loop.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        endpoints: Optional[Dict[str, str]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = float(timeout)
        self._endpoints = dict(endpoints or ENDPOINTS)

    def authorized(self, token: str) -> "TuitionApiClient":
        """Same backend, bound to a tutor's bearer token."""
        return TuitionApiClient(self.base_url, token=token, timeout=self._timeout, endpoints=self._endpoints)

    @property
    def token(self) -> Optional[str]:
        return self._token

    def _path(self, name: str, **params: str) -> str:
        path = self._endpoints[name]
        for key, value in params.items():
            path = path.replace(f":{key}", quote(str(value), safe=""))
        return path

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: Any = None,
        auth: bool = True,
        accept_statuses: Iterable[int] = (),
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json"}
        if auth:
            if not self._token:
                raise AuthenticationError("Not logged in")
            headers["Authorization"] = f"Bearer {self._token}"

        logger.info("API Call: %s %s", method, url)
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout)) as session:
                async with session.request(method, url, json=payload, headers=headers) as response:
                    data = self._decode(await response.text())
                    status = response.status
                    logger.info("API Response: %s %s", status, response.reason)
        except asyncio.TimeoutError as e:
            logger.error("Request to %s timed out", url)
            raise TransientApiError("Request timeout - API call took too long") from e
        except aiohttp.ClientError as e:
            logger.error("Connection error for %s: %s", url, e)
            raise TransientApiError(
                "Network request failed. Please check your internet connection and ensure the server is running."
            ) from e

        if 200 <= status < 300 or status in set(accept_statuses):
            return data

        message = self._error_message(data, status)
        logger.error("API Error Response: %s %s", status, message)
        if status >= 500 or status in TRANSIENT_STATUSES:
            raise TransientApiError(message, status=status, payload=data)
        raise ApiError(message, status=status, payload=data)

    @staticmethod
    def _decode(text: str) -> Any:
        if not text:
            return {}
        try:
            return json.loads(text)
        except ValueError:
            return {"message": text}

    @staticmethod
    def _error_message(data: Any, status: int) -> str:
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return f"HTTP error! status: {status}"

    # --- auth / tutor ---

    async def login(self, phone: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "POST", self._path("TUTOR_LOGIN"), payload={"phone": phone, "password": password}, auth=False
        )

    async def get_tutor(self, tutor_id: str) -> Dict[str, Any]:
        return await self._request("GET", self._path("TUTOR", id=tutor_id))

    # --- tutor attendance ---

    async def submit_attendance(self, coordinate: Coordinate) -> Dict[str, Any]:
        """POST the tutor's fix as [lat, lng]; the response carries message and attendance."""
        return await self._request(
            "POST", self._path("ATTENDANCE"), payload={"currentLocation": coordinate.as_pair()}
        )

    async def get_button_status(self) -> Dict[str, Any]:
        return await self._request("GET", self._path("BUTTON_STATUS"))

    async def get_recent_attendance(self) -> list:
        data = await self._request("GET", self._path("ATTENDANCE_RECENT"))
        return data if isinstance(data, list) else []

    # --- students ---

    async def get_student(self, student_id: str) -> Dict[str, Any]:
        return await self._request("GET", self._path("STUDENT", id=student_id))

    async def update_student(self, student_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", self._path("STUDENT", id=student_id), payload=payload)

    async def mark_student_attendance(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self._path("MARK_STUDENT_ATTENDANCE"), payload=payload)

    # --- subjects / marks ---

    async def get_student_subjects(self, student_id: str) -> Any:
        return await self._request("GET", self._path("STUDENT_SUBJECTS_BY_STUDENT", studentId=student_id))

    async def add_subject_marks(self, student_id: str, subject_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        path = self._path("STUDENT_SUBJECT_ADD_MARKS", studentId=student_id, subjectId=subject_id)
        return await self._request("POST", path, payload=payload)

    async def update_subject_marks(self, student_id: str, subject_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        path = self._path("STUDENT_SUBJECT_UPDATE", studentId=student_id, subjectId=subject_id)
        return await self._request("PUT", path, payload=payload)

    async def delete_subject_marks(self, mark_id: str, subject_id: str) -> Dict[str, Any]:
        path = self._path("STUDENT_SUBJECT_DELETE_MARK", markId=mark_id, subjectId=subject_id)
        return await self._request("DELETE", path)

    # --- notices ---

    async def get_announcements(self) -> list:
        data = await self._request("GET", self._path("ANNOUNCEMENTS"))
        return data if isinstance(data, list) else []

    async def check_version(self, app_version: str) -> Dict[str, Any]:
        """426 Upgrade Required carries the version info in its body."""
        return await self._request(
            "POST",
            self._path("VERSION_CHECK"),
            payload={"userVersion": app_version},
            auth=False,
            accept_statuses=(UPGRADE_REQUIRED,),
        )
