from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Member


class MemberRepository(Protocol):
    """Storage interface for members.

    Note (DIP): the registry depends on this interface, never on a concrete backend.
    """

    def load_members(self) -> Sequence[Member]:
        raise NotImplementedError

    def get_by_id(self, member_id: str) -> Optional[Member]:
        raise NotImplementedError

    def save_member(self, member: Member) -> Member:
        """Insert or update. An id is assigned only when ``member.member_id`` is None."""

        raise NotImplementedError

    def delete_member(self, member_id: str) -> bool:
        raise NotImplementedError
