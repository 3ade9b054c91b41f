"""Write a JSON backup of every member and event.

Works with any storage backend. Restore by pointing a JSON-backed
instance (STORAGE_BACKEND=json) at the produced file.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from club_points.common.datetime_utils import now_local
from club_points.container import build_container
from club_points.exchange.snapshot import export_all
from club_points.main import load_settings


def main() -> None:
    load_dotenv(override=False)
    container = build_container(settings=load_settings())

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = now_local().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"club_points_{ts}.json"

    members = container.registry.list_members()
    events = container.ledger.list_events()
    out_file.write_text(export_all(members, events), encoding="utf-8")
    print(f"OK: Backup created: {out_file} (members={len(members)}, events={len(events)})")


if __name__ == "__main__":
    main()
