from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, session

from ..common.web import json_error, login_required
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/version", methods=["GET"], endpoint="version_check")
    async def version_check():
        try:
            status = await container.notice_service.check_version(container.api)
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, **asdict(status)})

    @app.route("/api/announcements", methods=["GET"], endpoint="announcements")
    @login_required
    async def announcements():
        try:
            items = await container.notice_service.announcements(container.api.authorized(session["token"]))
        except DomainError as e:
            return json_error(e)
        return jsonify({"success": True, "announcements": [asdict(a) for a in items]})
