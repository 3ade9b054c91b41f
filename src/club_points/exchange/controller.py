from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import error_response, make_admin_required, server_error
from ..common.serializers import populated_event_json
from ..container import Container
from ..core.exceptions import DomainError
from .exporters import export_participants, export_participation_report, participants_filename, report_filename
from .snapshot import export_all, member_to_dict


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service)

    def _download(body: str, *, filename: str, mimetype: str):
        # CSV downloads start with a BOM
        encoding = "utf-8-sig" if mimetype == "text/csv" else "utf-8"
        return app.response_class(
            body.encode(encoding),
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/data", methods=["GET"], endpoint="all_data")
    def all_data():
        """Members (name order) and events (newest first) in one call."""

        events = container.ledger.populate(container.ledger.list_events())
        return jsonify(
            {
                "members": [member_to_dict(m) for m in container.registry.list_members()],
                "events": [populated_event_json(e) for e in events],
            }
        )

    @app.route("/api/members/import", methods=["POST"], endpoint="import_members")
    @admin_required
    def import_members():
        upload = request.files.get("file")
        if upload is not None:
            text = upload.read().decode("utf-8-sig", errors="replace")
        else:
            text = request.get_data(as_text=True)

        try:
            summary = container.importer.import_members(text)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("importing members")

        return jsonify(
            {
                "imported": summary.imported,
                "skipped": summary.skipped,
                "members": [member_to_dict(m) for m in summary.members],
                "reasons": [{"line": r.line, "reason": r.reason, "cni": r.value} for r in summary.reasons],
            }
        ), 201

    @app.route("/api/events/<event_id>/participants.csv", methods=["GET"], endpoint="export_participants_csv")
    @admin_required
    def export_participants_csv(event_id: str):
        try:
            event = container.ledger.get_event(event_id)
        except DomainError as e:
            return error_response(e)

        body = export_participants(event, container.registry.list_members())
        return _download(body, filename=participants_filename(event), mimetype="text/csv")

    @app.route("/api/export/report.csv", methods=["GET"], endpoint="export_report_csv")
    @admin_required
    def export_report_csv():
        events = container.ledger.list_events()
        if not events:
            return jsonify({"message": "No activities to export data from."}), 404

        body = export_participation_report(container.registry.list_members(), events)
        return _download(body, filename=report_filename(now_local().date()), mimetype="text/csv")

    @app.route("/api/export", methods=["GET"], endpoint="export_backup")
    @admin_required
    def export_backup():
        body = export_all(container.registry.list_members(), container.ledger.list_events())
        stamp = now_local().strftime("%Y%m%d_%H%M%S")
        return _download(body, filename=f"club_points_{stamp}.json", mimetype="application/json")
