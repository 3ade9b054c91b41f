from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, make_admin_required, server_error
from ..common.serializers import populated_event_json
from ..container import Container
from ..core.exceptions import DomainError
from ..members.controller import member_from_json
from .service import UNSET


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service)

    def _event_json(event):
        return populated_event_json(container.ledger.populated_event(event))

    @app.route("/api/events", methods=["GET"], endpoint="list_events")
    def list_events():
        events = container.ledger.populate(container.ledger.list_events())
        return jsonify([populated_event_json(e) for e in events])

    @app.route("/api/events", methods=["POST"], endpoint="create_event")
    @admin_required
    def create_event():
        try:
            event = container.ledger.create_event(str(json_body().get("name") or ""))
            return jsonify(_event_json(event)), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("creating event")

    @app.route("/api/events/<event_id>", methods=["DELETE"], endpoint="delete_event")
    @admin_required
    def delete_event(event_id: str):
        try:
            container.ledger.delete_event(event_id)
            return "", 204
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("deleting event")

    @app.route("/api/events/<event_id>/participants", methods=["POST"], endpoint="add_participant")
    @admin_required
    def add_participant(event_id: str):
        """Enroll an existing member ({memberId}) or register and enroll a new one ({member})."""

        data = json_body()
        try:
            if isinstance(data.get("member"), dict):
                event = container.ledger.enroll_new(event_id, member_from_json(data["member"]))
            elif data.get("memberId"):
                event = container.ledger.enroll(event_id, str(data["memberId"]))
            else:
                return jsonify({"message": "memberId or member is required"}), 400
            return jsonify(_event_json(event)), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("adding participant")

    @app.route(
        "/api/events/<event_id>/participants/<member_id>",
        methods=["PUT"],
        endpoint="update_participant",
    )
    @admin_required
    def update_participant(event_id: str, member_id: str):
        data = json_body()
        try:
            event = container.ledger.update_participant(
                event_id,
                member_id,
                status=data.get("status"),
                points=data["points"] if "points" in data else UNSET,
            )
            return jsonify(_event_json(event))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("updating participant")

    @app.route(
        "/api/events/<event_id>/participants/<member_id>",
        methods=["DELETE"],
        endpoint="remove_participant",
    )
    @admin_required
    def remove_participant(event_id: str, member_id: str):
        try:
            event = container.ledger.unenroll(event_id, member_id)
            return jsonify(_event_json(event))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("removing participant")
