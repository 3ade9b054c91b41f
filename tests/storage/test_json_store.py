from __future__ import annotations

import json
from datetime import datetime

from club_points.core.enums import ParticipantStatus
from club_points.events.service import LedgerService
from club_points.members.model import Member
from club_points.members.service import MemberRegistry
from club_points.storage.json_store import JsonEventRepository, JsonFileStore, JsonMemberRepository


def _services(path):
    store = JsonFileStore(path)
    members, events = JsonMemberRepository(store), JsonEventRepository(store)
    registry = MemberRegistry(members, events)
    return registry, LedgerService(events, registry)


def test_state_survives_reopen(tmp_path):
    path = tmp_path / "data" / "ledger.json"
    registry, ledger = _services(path)
    ali = registry.register(Member(member_id=None, name="Ali", cni="X1"))
    event = ledger.create_event("Weekly Meeting", now=datetime(2025, 3, 3, 18, 0))
    ledger.enroll(event.event_id, ali.member_id)
    ledger.update_participant(event.event_id, ali.member_id, status="present", points=5)

    registry, ledger = _services(path)

    assert registry.find_by_cni("x1").member_id == ali.member_id
    p = ledger.get_event(event.event_id).find_participant(ali.member_id)
    assert (p.status, p.points) == (ParticipantStatus.PRESENT, 5)

    doc = json.loads(path.read_text(encoding="utf-8"))
    assert set(doc) == {"members", "events"}
    assert list(tmp_path.joinpath("data").iterdir()) == [path]


def test_missing_file_reads_empty(tmp_path):
    store = JsonFileStore(tmp_path / "absent.json")

    assert JsonMemberRepository(store).load_members() == []
    assert JsonEventRepository(store).load_events() == []


def test_save_assigns_id_once(tmp_path):
    repo = JsonMemberRepository(JsonFileStore(tmp_path / "s.json"))

    saved = repo.save_member(Member(member_id=None, name="Ali"))
    again = repo.save_member(saved)

    assert again.member_id == saved.member_id
    assert len(repo.load_members()) == 1
    assert repo.delete_member(saved.member_id)
    assert not repo.delete_member(saved.member_id)
