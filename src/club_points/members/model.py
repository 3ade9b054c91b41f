from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Member:
    """Domain entity: a club member.

    Note: plain data object, no storage access. ``member_id`` stays None
    until the storage collaborator saves the record for the first time.
    """

    member_id: Optional[str]
    name: str
    cni: Optional[str] = None
    cne: Optional[str] = None
    school_level: Optional[str] = None
    whatsapp: Optional[str] = None
    registered_at: Optional[datetime] = None
