"""JSON views returned by the HTTP layer."""

from __future__ import annotations

from .datetime_utils import to_iso
from ..events.model import PopulatedEvent
from ..exchange.snapshot import member_to_dict
from ..standings.service import MemberStanding


def populated_event_json(pe: PopulatedEvent) -> dict:
    return {
        "id": pe.event.event_id,
        "name": pe.event.name,
        "date": to_iso(pe.event.date),
        "participants": [
            {
                "memberId": pp.participant.member_id,
                "member": member_to_dict(pp.member) if pp.member else None,
                "status": pp.participant.status.value,
                "points": pp.participant.points,
            }
            for pp in pe.participants
        ],
    }


def standing_json(standing: MemberStanding) -> dict:
    return {
        "member": member_to_dict(standing.member),
        "totalPoints": standing.total_points,
        "history": [
            {
                "eventId": row.event_id,
                "eventName": row.event_name,
                "eventDate": to_iso(row.event_date),
                "status": row.status.value,
                "points": row.points,
            }
            for row in standing.history
        ],
    }
