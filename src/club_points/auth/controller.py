from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, server_error
from ..container import Container
from ..core.exceptions import UnauthorizedError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        cni = str(data.get("cni") or "").strip()
        password = str(data.get("password") or "")

        if not cni or not password:
            return jsonify({"message": "CNI and password are required"}), 400

        try:
            token = container.auth_service.issue_token(cni, password)
            return jsonify({"message": "Login successful", "token": token})
        except UnauthorizedError as e:
            return error_response(e)
        except Exception:
            return server_error("logging in")
