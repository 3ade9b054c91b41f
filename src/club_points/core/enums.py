from __future__ import annotations

from enum import Enum


class ParticipantStatus(str, Enum):
    """Attendance state of a member inside one event."""

    UNMARKED = "unmarked"
    PRESENT = "present"
    ABSENT = "absent"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    JSON = "json"
    MYSQL = "mysql"
