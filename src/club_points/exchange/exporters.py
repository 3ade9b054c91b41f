from __future__ import annotations

import csv
import io
import re
from datetime import date
from typing import Iterable

from ..core import constants as C
from ..events.model import Event
from ..members.model import Member

_SPACES = re.compile(r"\s+")


def _writer(out: io.StringIO):
    # QUOTE_MINIMAL quotes any field holding the delimiter, a quote or a newline
    # and doubles embedded quotes.
    return csv.writer(out, delimiter=",", quoting=csv.QUOTE_MINIMAL, lineterminator="\n")


def export_participants(event: Event, members: Iterable[Member]) -> str:
    """One CSV row per participant, member fields joined from the registry."""

    by_id = {m.member_id: m for m in members}
    out = io.StringIO()
    writer = _writer(out)
    writer.writerow(C.PARTICIPANT_EXPORT_HEADER)

    for p in event.participants:
        m = by_id.get(p.member_id)
        writer.writerow(
            [
                m.name if m else "",
                (m.cni or "") if m else "",
                (m.cne or "") if m else "",
                (m.school_level or "") if m else "",
                (m.whatsapp or "") if m else "",
                p.status.value,
                p.points,
            ]
        )
    return out.getvalue()


def export_participation_report(members: Iterable[Member], events: Iterable[Event]) -> str:
    """Every participant entry of every event, one row each."""

    by_id = {m.member_id: m for m in members}
    out = io.StringIO()
    writer = _writer(out)
    writer.writerow(C.PARTICIPATION_REPORT_HEADER)

    for e in events:
        for p in e.participants:
            m = by_id.get(p.member_id)
            if m is None:
                continue
            writer.writerow([m.name, m.cni or "", m.school_level or "", m.whatsapp or "", e.name, p.points])
    return out.getvalue()


def participants_filename(event: Event) -> str:
    slug = _SPACES.sub("_", event.name.strip())
    return f"Participants_{slug}.csv"


def report_filename(today: date) -> str:
    return f"club_participation_report_{today.strftime('%Y-%m-%d')}.csv"
