from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, json_body, make_admin_required, server_error
from ..common.serializers import standing_json
from ..container import Container
from ..core.exceptions import DomainError
from ..exchange.snapshot import member_to_dict
from .model import Member

# JSON key -> Member field
_FIELDS = {
    "name": "name",
    "cni": "cni",
    "cne": "cne",
    "schoolLevel": "school_level",
    "whatsapp": "whatsapp",
}


def member_from_json(data: dict) -> Member:
    return Member(
        member_id=None,
        name=str(data.get("name") or ""),
        cni=data.get("cni"),
        cne=data.get("cne"),
        school_level=data.get("schoolLevel"),
        whatsapp=data.get("whatsapp"),
    )


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service)

    @app.route("/api/members", methods=["GET"], endpoint="list_members")
    def list_members():
        return jsonify([member_to_dict(m) for m in container.registry.list_members()])

    @app.route("/api/members", methods=["POST"], endpoint="create_member")
    @admin_required
    def create_member():
        data = json_body()
        try:
            member = container.registry.register(member_from_json(data.get("memberData") or data))
            return jsonify(member_to_dict(member)), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("creating member")

    @app.route("/api/members/<member_id>", methods=["PUT"], endpoint="update_member")
    @admin_required
    def update_member(member_id: str):
        data = json_body()
        fields = {attr: data[key] for key, attr in _FIELDS.items() if key in data}
        try:
            member = container.registry.update_member(member_id, **fields)
            return jsonify(member_to_dict(member))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("updating member")

    @app.route("/api/members/<member_id>", methods=["DELETE"], endpoint="delete_member")
    @admin_required
    def delete_member(member_id: str):
        try:
            container.registry.delete_member(member_id)
            return "", 204
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("deleting member")

    @app.route("/api/standings", methods=["GET"], endpoint="member_standing")
    def member_standing():
        """Self-service: a member looks up their own record by CNI."""

        cni = (request.args.get("cni") or "").strip()
        if not cni:
            return jsonify({"message": "CNI is required"}), 400
        try:
            return jsonify(standing_json(container.standings.lookup(cni)))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("looking up member")
