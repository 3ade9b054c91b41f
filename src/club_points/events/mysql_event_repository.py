from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import ParticipantStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import Row, db_cursor, fetchall, fetchone, new_row_id
from .model import Event, Participant
from .repository import EventRepository


def row_to_participant(r: Row) -> Participant:
    return Participant(
        member_id=str(r["member_id"]),
        status=ParticipantStatus(r["status"]),
        points=int(r.get("points") or 0),
    )


class MySQLEventRepository(EventRepository):
    """Events with their participant rows.

    Participant order is kept in the ``position`` column; save_event rewrites
    all participant rows of the event inside one transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_events(self) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT event_id, name, date FROM events ORDER BY date DESC, event_id DESC")
            event_rows = fetchall(cur)
            cur.execute(
                """
                SELECT event_id, member_id, status, points
                FROM participants
                ORDER BY event_id, position
                """
            )
            by_event: dict[int, list[Participant]] = {}
            for r in fetchall(cur):
                by_event.setdefault(int(r["event_id"]), []).append(row_to_participant(r))

        return [
            Event(
                event_id=str(r["event_id"]),
                name=r["name"],
                date=r["date"],
                participants=tuple(by_event.get(int(r["event_id"]), [])),
            )
            for r in event_rows
        ]

    def get_by_id(self, event_id: str) -> Optional[Event]:
        if not str(event_id).isdigit():
            return None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT event_id, name, date FROM events WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            if not r:
                return None
            cur.execute(
                """
                SELECT member_id, status, points
                FROM participants
                WHERE event_id=%s
                ORDER BY position
                """,
                (int(event_id),),
            )
            participants = tuple(row_to_participant(p) for p in fetchall(cur))
            return Event(event_id=str(r["event_id"]), name=r["name"], date=r["date"], participants=participants)

    def save_event(self, event: Event) -> Event:
        with db_cursor(self._conn_factory) as (_, cur):
            if event.event_id is None:
                cur.execute("INSERT INTO events(name, date) VALUES(%s,%s)", (event.name, event.date))
                event = replace(event, event_id=new_row_id(cur))
            else:
                cur.execute(
                    "UPDATE events SET name=%s, date=%s WHERE event_id=%s",
                    (event.name, event.date, int(event.event_id)),
                )

            event_id = int(event.event_id)
            cur.execute("DELETE FROM participants WHERE event_id=%s", (event_id,))
            if event.participants:
                cur.executemany(
                    """
                    INSERT INTO participants(event_id, member_id, position, status, points)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    [
                        (event_id, int(p.member_id), pos, p.status.value, int(p.points))
                        for pos, p in enumerate(event.participants)
                    ],
                )
        return event

    def delete_event(self, event_id: str) -> bool:
        if not str(event_id).isdigit():
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            # participants go with the event (ON DELETE CASCADE)
            cur.execute("DELETE FROM events WHERE event_id=%s", (int(event_id),))
            return cur.rowcount > 0
