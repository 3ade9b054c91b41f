from __future__ import annotations

import pytest

from club_points.core.enums import ParticipantStatus
from club_points.core.exceptions import DuplicateKeyError, NotFoundError, ValidationError
from club_points.members.model import Member


def _candidate(name, cni=None, **kwargs):
    return Member(member_id=None, name=name, cni=cni, **kwargs)


def test_register_assigns_id_and_registration_time(registry, fixed_now):
    member = registry.register(_candidate("  Ali  ", " X1 ", whatsapp=" "))

    assert member.member_id
    assert member.name == "Ali"
    assert member.cni == "X1"
    assert member.whatsapp is None
    assert member.registered_at == fixed_now
    assert registry.get(member.member_id) == member


def test_register_rejects_duplicate_cni_case_insensitive(registry):
    registry.register(_candidate("Ali", "ab123"))

    with pytest.raises(DuplicateKeyError):
        registry.register(_candidate("Other", "AB123"))

    assert len(registry.list_members()) == 1


def test_register_allows_many_members_without_cni(registry):
    registry.register(_candidate("Ali"))
    registry.register(_candidate("Sara", cni=""))

    assert len(registry.list_members()) == 2


def test_register_requires_name(registry):
    with pytest.raises(ValidationError):
        registry.register(_candidate("   ", "X1"))


def test_list_members_is_name_ascending(registry):
    for name in ("youssef", "Amine", "brahim"):
        registry.register(_candidate(name))

    assert [m.name for m in registry.list_members()] == ["Amine", "brahim", "youssef"]


def test_find_by_cni(registry, ali):
    assert registry.find_by_cni("x1") == ali
    assert registry.find_by_cni(" X1 ") == ali
    assert registry.find_by_cni("X2") is None
    assert registry.find_by_cni("") is None


def test_get_unknown_member(registry):
    with pytest.raises(NotFoundError):
        registry.get("missing")


def test_update_member_changes_fields(registry, ali):
    updated = registry.update_member(ali.member_id, name="Ali B.", school_level="Bac+2", whatsapp="")

    assert updated.member_id == ali.member_id
    assert updated.name == "Ali B."
    assert updated.school_level == "Bac+2"
    assert updated.whatsapp is None
    assert updated.cni == "X1"


def test_update_member_keeps_own_cni_but_refuses_another(registry, ali):
    other = registry.register(_candidate("Sara", "Y2"))

    assert registry.update_member(ali.member_id, cni="x1").cni == "x1"
    with pytest.raises(DuplicateKeyError):
        registry.update_member(other.member_id, cni="X1")


def test_update_member_rejects_unknown_field(registry, ali):
    with pytest.raises(ValidationError):
        registry.update_member(ali.member_id, points=3)


def test_delete_member_removes_participant_entries(registry, ledger, ali, weekly_meeting):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)
    ledger.set_status(weekly_meeting.event_id, ali.member_id, ParticipantStatus.PRESENT)

    registry.delete_member(ali.member_id)

    assert registry.list_members() == []
    assert ledger.get_event(weekly_meeting.event_id).participants == ()


def test_delete_unknown_member(registry):
    with pytest.raises(NotFoundError):
        registry.delete_member("missing")
