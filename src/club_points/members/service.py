from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..common.validators import clean_optional, normalize_cni, require_non_empty
from ..core.exceptions import DuplicateKeyError, NotFoundError, ValidationError
from ..events.repository import EventRepository
from .model import Member
from .repository import MemberRepository

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "cni", "cne", "school_level", "whatsapp")


class MemberRegistry:
    """Use case: the member directory (identity registry).

    Members are listed name-ascending (case-insensitive, ties by id).
    """

    def __init__(self, members: MemberRepository, events: Optional[EventRepository] = None):
        self._members = members
        self._events = events

    def list_members(self) -> list[Member]:
        return sorted(self._members.load_members(), key=lambda m: (m.name.casefold(), m.member_id or ""))

    def get(self, member_id: str) -> Member:
        member = self._members.get_by_id(str(member_id))
        if not member:
            raise NotFoundError("Member not found")
        return member

    def find_by_cni(self, cni: Optional[str]) -> Optional[Member]:
        key = normalize_cni(cni)
        if not key:
            return None
        for m in self._members.load_members():
            if normalize_cni(m.cni) == key:
                return m
        return None

    def cni_taken(self, cni: Optional[str], *, exclude_id: Optional[str] = None) -> bool:
        found = self.find_by_cni(cni)
        return found is not None and found.member_id != exclude_id

    def register(self, candidate: Member) -> Member:
        name = require_non_empty(candidate.name, "Name")
        cni = clean_optional(candidate.cni)

        if cni and self.cni_taken(cni):
            raise DuplicateKeyError("A member with this CNI already exists.")

        member = Member(
            member_id=None,
            name=name,
            cni=cni,
            cne=clean_optional(candidate.cne),
            school_level=clean_optional(candidate.school_level),
            whatsapp=clean_optional(candidate.whatsapp),
            registered_at=candidate.registered_at or now_local(),
        )
        stored = self._members.save_member(member)
        logger.info("Registered member %s (%s)", stored.member_id, stored.name)
        return stored

    def update_member(self, member_id: str, **fields: Any) -> Member:
        """Edit profile fields. Unknown field names are rejected."""

        unknown = set(fields) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown member field(s): {', '.join(sorted(unknown))}")

        current = self.get(member_id)
        changes: dict[str, Any] = {}
        if "name" in fields:
            changes["name"] = require_non_empty(fields["name"], "Name")
        for key in ("cni", "cne", "school_level", "whatsapp"):
            if key in fields:
                changes[key] = clean_optional(fields[key])

        if changes.get("cni") and self.cni_taken(changes["cni"], exclude_id=current.member_id):
            raise DuplicateKeyError("A member with this CNI already exists.")

        updated = self._members.save_member(replace(current, **changes))
        logger.info("Updated member %s", updated.member_id)
        return updated

    def delete_member(self, member_id: str) -> None:
        """Delete a member and cascade-remove their participant entries."""

        member = self.get(member_id)
        if self._events is not None:
            for event in self._events.load_events():
                if event.has_member(member.member_id):
                    kept = tuple(p for p in event.participants if p.member_id != member.member_id)
                    self._events.save_event(replace(event, participants=kept))

        if not self._members.delete_member(member.member_id):
            raise NotFoundError("Member not found")
        logger.info("Deleted member %s", member.member_id)
