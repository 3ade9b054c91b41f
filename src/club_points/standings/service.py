from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..core.enums import ParticipantStatus
from ..core.exceptions import NotFoundError
from ..events.model import Event
from ..events.service import LedgerService
from ..members.model import Member
from ..members.service import MemberRegistry


@dataclass(frozen=True)
class HistoryRow:
    event_id: Optional[str]
    event_name: str
    event_date: datetime
    status: ParticipantStatus
    points: int


@dataclass(frozen=True)
class MemberStanding:
    """Self-service view: one member, their total and their history."""

    member: Member
    total_points: int
    history: list[HistoryRow]


def total_points(member_id: str, events: Iterable[Event]) -> int:
    """Sum of points over every participant entry of the member.

    Absent entries contribute 0 because the ledger keeps their points at 0.
    """

    total = 0
    for e in events:
        p = e.find_participant(member_id)
        if p is not None:
            total += int(p.points)
    return total


def participation_history(member_id: str, events: Iterable[Event]) -> list[HistoryRow]:
    """One row per event the member is enrolled in, in the given events' order."""

    rows: list[HistoryRow] = []
    for e in events:
        p = e.find_participant(member_id)
        if p is None:
            continue
        rows.append(
            HistoryRow(
                event_id=e.event_id,
                event_name=e.name,
                event_date=e.date,
                status=p.status,
                points=p.points,
            )
        )
    return rows


class StandingService:
    def __init__(self, registry: MemberRegistry, ledger: LedgerService):
        self._registry = registry
        self._ledger = ledger

    def standing_for(self, member: Member) -> MemberStanding:
        events = self._ledger.list_events()
        return MemberStanding(
            member=member,
            total_points=total_points(member.member_id, events),
            history=participation_history(member.member_id, events),
        )

    def lookup(self, cni: str) -> MemberStanding:
        member = self._registry.find_by_cni(cni)
        if not member:
            raise NotFoundError("No member was found with the provided CNI.")
        return self.standing_for(member)
