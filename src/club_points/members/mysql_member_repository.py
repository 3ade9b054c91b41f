from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import Row, db_cursor, fetchall, fetchone, new_row_id
from .model import Member
from .repository import MemberRepository

_COLUMNS = "member_id, name, cni, cne, school_level, whatsapp, registered_at"


def row_to_member(r: Row) -> Member:
    return Member(
        member_id=str(r["member_id"]),
        name=r["name"],
        cni=r.get("cni"),
        cne=r.get("cne"),
        school_level=r.get("school_level"),
        whatsapp=r.get("whatsapp"),
        registered_at=r.get("registered_at"),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_members(self) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members ORDER BY member_id")
            return [row_to_member(r) for r in fetchall(cur)]

    def get_by_id(self, member_id: str) -> Optional[Member]:
        if not str(member_id).isdigit():
            return None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE member_id=%s", (int(member_id),))
            r = fetchone(cur)
            return row_to_member(r) if r else None

    def save_member(self, member: Member) -> Member:
        values = (member.name, member.cni, member.cne, member.school_level, member.whatsapp)
        with db_cursor(self._conn_factory) as (_, cur):
            if member.member_id is None:
                cur.execute(
                    """
                    INSERT INTO members(name, cni, cne, school_level, whatsapp, registered_at)
                    VALUES(%s,%s,%s,%s,%s,COALESCE(%s, NOW()))
                    """,
                    values + (member.registered_at,),
                )
                return replace(member, member_id=new_row_id(cur))

            cur.execute(
                """
                UPDATE members
                SET name=%s, cni=%s, cne=%s, school_level=%s, whatsapp=%s
                WHERE member_id=%s
                """,
                values + (int(member.member_id),),
            )
            return member

    def delete_member(self, member_id: str) -> bool:
        if not str(member_id).isdigit():
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM members WHERE member_id=%s", (int(member_id),))
            return cur.rowcount > 0
