from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.web import json_error
from ..container import Container
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    async def login():
        data = request.get_json(silent=True) or {}
        try:
            tutor = await container.auth_service.login(data.get("phone", ""), data.get("password", ""))
        except DomainError as e:
            return json_error(e)

        session.clear()
        session.update(tutor.to_session())
        logger.info("tutor %s logged in", tutor.tutor_id)
        return jsonify({"success": True, "tutor": {k: v for k, v in tutor.to_session().items() if k != "token"}})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"})
