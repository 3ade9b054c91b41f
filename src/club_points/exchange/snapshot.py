"""JSON snapshot of the whole ledger (backup / restore / JSON file storage).

Wire shape (same keys as the HTTP API):

    {"members": [{"id", "name", "cni", "cne", "schoolLevel", "whatsapp", "registeredAt"}],
     "events":  [{"id", "name", "date", "participants": [{"memberId", "status", "points"}]}]}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..common.datetime_utils import now_local, parse_iso_datetime, to_iso
from ..common.validators import clean_optional, coerce_points
from ..core.enums import ParticipantStatus
from ..core.exceptions import FormatError
from ..events.model import Event, Participant
from ..members.model import Member


@dataclass(frozen=True)
class Snapshot:
    members: list[Member] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)


def member_to_dict(m: Member) -> dict:
    return {
        "id": m.member_id,
        "name": m.name,
        "cni": m.cni,
        "cne": m.cne,
        "schoolLevel": m.school_level,
        "whatsapp": m.whatsapp,
        "registeredAt": to_iso(m.registered_at),
    }


def participant_to_dict(p: Participant) -> dict:
    return {"memberId": p.member_id, "status": p.status.value, "points": p.points}


def event_to_dict(e: Event) -> dict:
    return {
        "id": e.event_id,
        "name": e.name,
        "date": to_iso(e.date),
        "participants": [participant_to_dict(p) for p in e.participants],
    }


def _read_id(raw: dict) -> Optional[str]:
    value = raw.get("id", raw.get("_id"))
    return str(value) if value not in (None, "") else None


def member_from_dict(raw: dict) -> Member:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise FormatError("Member entry without a name")
    try:
        registered_at = parse_iso_datetime(raw.get("registeredAt", raw.get("registrationDate")))
    except ValueError:
        raise FormatError(f"Invalid registration date: {raw.get('registeredAt')!r}")
    return Member(
        member_id=_read_id(raw),
        name=str(raw["name"]).strip(),
        cni=clean_optional(raw.get("cni")),
        cne=clean_optional(raw.get("cne")),
        school_level=clean_optional(raw.get("schoolLevel", raw.get("school_level"))),
        whatsapp=clean_optional(raw.get("whatsapp")),
        registered_at=registered_at,
    )


def participant_from_dict(raw: dict) -> Participant:
    member_ref = raw.get("memberId", raw.get("member_id"))
    # Populated documents embed the whole member record.
    if isinstance(member_ref, dict):
        member_ref = _read_id(member_ref)
    if not member_ref:
        raise FormatError("Participant entry without memberId")

    try:
        status = ParticipantStatus(str(raw.get("status") or ParticipantStatus.UNMARKED.value).lower())
    except ValueError:
        raise FormatError(f"Invalid participant status: {raw.get('status')!r}")

    points = 0 if status == ParticipantStatus.ABSENT else coerce_points(raw.get("points"))
    return Participant(member_id=str(member_ref), status=status, points=points)


def event_from_dict(raw: dict) -> Event:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise FormatError("Event entry without a name")
    try:
        date = parse_iso_datetime(raw.get("date")) or now_local()
    except ValueError:
        raise FormatError(f"Invalid event date: {raw.get('date')!r}")

    participants: list[Participant] = []
    seen: set[str] = set()
    for item in raw.get("participants") or []:
        p = participant_from_dict(item)
        if p.member_id in seen:
            continue
        seen.add(p.member_id)
        participants.append(p)

    return Event(event_id=_read_id(raw), name=str(raw["name"]).strip(), date=date, participants=tuple(participants))


def snapshot_to_dict(members: Iterable[Member], events: Iterable[Event]) -> dict:
    return {
        "members": [member_to_dict(m) for m in members],
        "events": [event_to_dict(e) for e in events],
    }


def export_all(members: Iterable[Member], events: Iterable[Event]) -> str:
    """Full backup of both collections as JSON text."""
    return json.dumps(snapshot_to_dict(members, events), ensure_ascii=False, indent=2)


def load_snapshot(text: str) -> Snapshot:
    try:
        doc: Any = json.loads(text) if text and text.strip() else {}
    except json.JSONDecodeError as e:
        raise FormatError(f"Backup is not valid JSON: {e}")

    if not isinstance(doc, dict):
        raise FormatError("Backup must be an object with 'members' and 'events'")

    members = doc.get("members") or []
    events = doc.get("events") or []
    if not isinstance(members, list) or not isinstance(events, list):
        raise FormatError("'members' and 'events' must be arrays")

    return Snapshot(
        members=[member_from_dict(m) for m in members],
        events=[event_from_dict(e) for e in events],
    )
