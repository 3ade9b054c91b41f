from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import ParticipantStatus
from ..members.model import Member


@dataclass(frozen=True)
class Participant:
    """Per-event record joining one member to a status and a point value."""

    member_id: str
    status: ParticipantStatus = ParticipantStatus.UNMARKED
    points: int = 0


@dataclass(frozen=True)
class Event:
    """Domain entity: an event and its participants in enrollment order."""

    event_id: Optional[str]
    name: str
    date: datetime
    participants: tuple[Participant, ...] = field(default_factory=tuple)

    def find_participant(self, member_id: str) -> Optional[Participant]:
        for p in self.participants:
            if p.member_id == member_id:
                return p
        return None

    def has_member(self, member_id: str) -> bool:
        return self.find_participant(member_id) is not None


@dataclass(frozen=True)
class PopulatedParticipant:
    """Read-model: participant joined with its member record (None if dangling)."""

    participant: Participant
    member: Optional[Member]


@dataclass(frozen=True)
class PopulatedEvent:
    """Read-model serving the admin views and the JSON API."""

    event: Event
    participants: tuple[PopulatedParticipant, ...]
