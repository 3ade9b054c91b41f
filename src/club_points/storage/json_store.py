from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from ..events.model import Event
from ..events.repository import EventRepository
from ..exchange.snapshot import Snapshot, export_all, load_snapshot
from ..members.model import Member
from ..members.repository import MemberRepository
from .memory import new_id

logger = logging.getLogger(__name__)


class JsonFileStore:
    """Local persisted state: the whole ledger kept in one JSON snapshot file.

    Every read loads the file and every write rewrites it (temp file + replace),
    so the file on disk is always a complete backup document.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Snapshot:
        if not self._path.exists():
            return Snapshot()
        return load_snapshot(self._path.read_text(encoding="utf-8"))

    def write(self, snapshot: Snapshot) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".club_points_", suffix=".json", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(export_all(snapshot.members, snapshot.events))
            os.replace(tmp, self._path)
        except Exception:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        logger.debug("Wrote %s (%d members, %d events)", self._path, len(snapshot.members), len(snapshot.events))


class JsonMemberRepository(MemberRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def load_members(self) -> Sequence[Member]:
        return self._store.read().members

    def get_by_id(self, member_id: str) -> Optional[Member]:
        for m in self._store.read().members:
            if m.member_id == member_id:
                return m
        return None

    def save_member(self, member: Member) -> Member:
        if member.member_id is None:
            member = replace(member, member_id=new_id())

        snap = self._store.read()
        if any(m.member_id == member.member_id for m in snap.members):
            members = [member if m.member_id == member.member_id else m for m in snap.members]
        else:
            members = snap.members + [member]
        self._store.write(replace(snap, members=members))
        return member

    def delete_member(self, member_id: str) -> bool:
        snap = self._store.read()
        members = [m for m in snap.members if m.member_id != member_id]
        if len(members) == len(snap.members):
            return False
        self._store.write(replace(snap, members=members))
        return True


class JsonEventRepository(EventRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def load_events(self) -> Sequence[Event]:
        return self._store.read().events

    def get_by_id(self, event_id: str) -> Optional[Event]:
        for e in self._store.read().events:
            if e.event_id == event_id:
                return e
        return None

    def save_event(self, event: Event) -> Event:
        if event.event_id is None:
            event = replace(event, event_id=new_id())

        snap = self._store.read()
        if any(e.event_id == event.event_id for e in snap.events):
            events = [event if e.event_id == event.event_id else e for e in snap.events]
        else:
            events = snap.events + [event]
        self._store.write(replace(snap, events=events))
        return event

    def delete_event(self, event_id: str) -> bool:
        snap = self._store.read()
        events = [e for e in snap.events if e.event_id != event_id]
        if len(events) == len(snap.events):
            return False
        self._store.write(replace(snap, events=events))
        return True
