from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..events.model import Event
from ..events.repository import EventRepository
from ..members.model import Member
from ..members.repository import MemberRepository


def new_id() -> str:
    return uuid.uuid4().hex


class InMemoryMemberRepository(MemberRepository):
    """Dict-backed member storage. Insertion order is preserved."""

    def __init__(self, members: Iterable[Member] = ()):
        self._by_id: dict[str, Member] = {}
        for m in members:
            self.save_member(m)

    def load_members(self) -> Sequence[Member]:
        return list(self._by_id.values())

    def get_by_id(self, member_id: str) -> Optional[Member]:
        return self._by_id.get(member_id)

    def save_member(self, member: Member) -> Member:
        if member.member_id is None:
            member = replace(member, member_id=new_id())
        self._by_id[member.member_id] = member
        return member

    def delete_member(self, member_id: str) -> bool:
        return self._by_id.pop(member_id, None) is not None


class InMemoryEventRepository(EventRepository):
    def __init__(self, events: Iterable[Event] = ()):
        self._by_id: dict[str, Event] = {}
        for e in events:
            self.save_event(e)

    def load_events(self) -> Sequence[Event]:
        return list(self._by_id.values())

    def get_by_id(self, event_id: str) -> Optional[Event]:
        return self._by_id.get(event_id)

    def save_event(self, event: Event) -> Event:
        if event.event_id is None:
            event = replace(event, event_id=new_id())
        self._by_id[event.event_id] = event
        return event

    def delete_event(self, event_id: str) -> bool:
        return self._by_id.pop(event_id, None) is not None
