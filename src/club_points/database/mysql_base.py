from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One unit of work: commit when the block exits cleanly, roll back otherwise."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        logger.warning("Rolling back MySQL transaction", exc_info=True)
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Row]:
    row = cur.fetchone()
    return row or None


def fetchall(cur) -> List[Row]:
    return list(cur.fetchall() or [])


def new_row_id(cur) -> str:
    """Auto-increment id of the last INSERT, as the opaque string id used by the domain."""
    if not cur.lastrowid:
        raise RuntimeError("INSERT did not return an id")
    return str(cur.lastrowid)
