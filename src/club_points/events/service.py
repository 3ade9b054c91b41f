from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional, Union

from ..common.datetime_utils import now_local
from ..common.validators import coerce_points, require_non_empty
from ..core.enums import ParticipantStatus
from ..core.exceptions import AlreadyEnrolledError, NotFoundError, ValidationError
from ..members.model import Member
from ..members.service import MemberRegistry
from .model import Event, Participant, PopulatedEvent, PopulatedParticipant
from .repository import EventRepository

logger = logging.getLogger(__name__)

# marks "points not given"; an explicit None still means "store 0"
UNSET: Any = object()


def parse_status(value: Union[str, ParticipantStatus]) -> ParticipantStatus:
    if isinstance(value, ParticipantStatus):
        return value
    try:
        return ParticipantStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid status: {value!r}")


def apply_status(participant: Participant, status: ParticipantStatus) -> Participant:
    """New participant value with ``status``; absence forces zero points."""
    if status == ParticipantStatus.ABSENT:
        return replace(participant, status=status, points=0)
    return replace(participant, status=status)


def apply_points(participant: Participant, points: Any) -> Participant:
    """New participant value with coerced points; absent participants keep 0."""
    if participant.status == ParticipantStatus.ABSENT:
        return replace(participant, points=0)
    return replace(participant, points=coerce_points(points))


class LedgerService:
    """Use case: the participation ledger (events and their participants).

    Every mutation loads the event, builds a new immutable value and saves it
    once, so readers never see a status/points pair from two different updates.
    """

    def __init__(self, events: EventRepository, registry: MemberRegistry):
        self._events = events
        self._registry = registry

    # ----- events -----

    def list_events(self) -> list[Event]:
        """Events newest-first by date."""
        return sorted(
            self._events.load_events(),
            key=lambda e: (e.date, e.event_id or ""),
            reverse=True,
        )

    def get_event(self, event_id: str) -> Event:
        event = self._events.get_by_id(str(event_id))
        if not event:
            raise NotFoundError("Event not found")
        return event

    def create_event(self, name: str, *, now: Optional[datetime] = None) -> Event:
        name = require_non_empty(name, "Event name")
        event = self._events.save_event(Event(event_id=None, name=name, date=now or now_local(), participants=()))
        logger.info("Created event %s (%s)", event.event_id, event.name)
        return event

    def delete_event(self, event_id: str) -> None:
        event = self.get_event(event_id)
        if not self._events.delete_event(event.event_id):
            raise NotFoundError("Event not found")
        logger.info("Deleted event %s with %d participant(s)", event.event_id, len(event.participants))

    # ----- participants -----

    def enroll(self, event_id: str, member_id: str) -> Event:
        event = self.get_event(event_id)
        member = self._registry.get(member_id)

        if event.has_member(member.member_id):
            raise AlreadyEnrolledError("Member is already a participant")

        updated = replace(event, participants=event.participants + (Participant(member_id=member.member_id),))
        saved = self._events.save_event(updated)
        logger.info("Enrolled member %s in event %s", member.member_id, event.event_id)
        return saved

    def unenroll(self, event_id: str, member_id: str) -> Event:
        event = self.get_event(event_id)
        member_id = str(member_id)
        if not event.has_member(member_id):
            return event

        kept = tuple(p for p in event.participants if p.member_id != member_id)
        saved = self._events.save_event(replace(event, participants=kept))
        logger.info("Removed member %s from event %s", member_id, event.event_id)
        return saved

    def set_status(self, event_id: str, member_id: str, status: Union[str, ParticipantStatus]) -> Event:
        new_status = parse_status(status)
        return self._update_participant(event_id, member_id, lambda p: apply_status(p, new_status))

    def set_points(self, event_id: str, member_id: str, points: Any) -> Event:
        return self._update_participant(event_id, member_id, lambda p: apply_points(p, points))

    def update_participant(
        self,
        event_id: str,
        member_id: str,
        *,
        status: Union[str, ParticipantStatus, None] = None,
        points: Any = UNSET,
    ) -> Event:
        """Apply status then points in a single save.

        ``points=None`` is coerced like any other bad input; leave it out to
        keep the current value.
        """

        if status is None and points is UNSET:
            raise ValidationError("No fields to update")
        new_status = parse_status(status) if status is not None else None

        def change(p: Participant) -> Participant:
            if new_status is not None:
                p = apply_status(p, new_status)
            if points is not UNSET:
                p = apply_points(p, points)
            return p

        return self._update_participant(event_id, member_id, change)

    def enroll_new(self, event_id: str, candidate: Member) -> Event:
        """Register a new member, then enroll them.

        Known gap: if enrollment fails after registration succeeded, the
        member stays registered.
        """

        member = self._registry.register(candidate)
        return self.enroll(event_id, member.member_id)

    def _update_participant(self, event_id: str, member_id: str, change) -> Event:
        event = self.get_event(event_id)
        member_id = str(member_id)
        current = event.find_participant(member_id)
        if current is None:
            raise NotFoundError("Participant not found")

        updated = change(current)
        participants = tuple(updated if p.member_id == member_id else p for p in event.participants)
        saved = self._events.save_event(replace(event, participants=participants))
        logger.info(
            "Participant %s in event %s -> status=%s points=%d",
            member_id,
            event.event_id,
            updated.status.value,
            updated.points,
        )
        return saved

    # ----- read views -----

    def populated_event(self, event: Event) -> PopulatedEvent:
        return self.populate([event])[0]

    def populate(self, events: list[Event]) -> list[PopulatedEvent]:
        by_id = {m.member_id: m for m in self._registry.list_members()}
        return [
            PopulatedEvent(
                event=e,
                participants=tuple(
                    PopulatedParticipant(participant=p, member=by_id.get(p.member_id)) for p in e.participants
                ),
            )
            for e in events
        ]
