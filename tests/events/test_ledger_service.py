from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from club_points.core.enums import ParticipantStatus
from club_points.core.exceptions import AlreadyEnrolledError, DuplicateKeyError, NotFoundError, ValidationError
from club_points.events.model import Participant
from club_points.members.model import Member
from club_points.standings.service import total_points


def test_create_event_sets_date_and_empty_participants(ledger, fixed_now):
    event = ledger.create_event("  Weekly Meeting ")

    assert event.event_id
    assert event.name == "Weekly Meeting"
    assert event.date == fixed_now
    assert event.participants == ()


def test_create_event_requires_name(ledger):
    with pytest.raises(ValidationError):
        ledger.create_event("   ")


def test_list_events_newest_first(ledger):
    old = ledger.create_event("Kickoff", now=datetime(2025, 1, 10, 18, 0))
    new = ledger.create_event("Hackathon", now=datetime(2025, 2, 10, 18, 0))

    assert [e.event_id for e in ledger.list_events()] == [new.event_id, old.event_id]


def test_weekly_meeting_points_flow(ledger, registry, weekly_meeting, ali):
    event = ledger.enroll(weekly_meeting.event_id, ali.member_id)

    assert len(event.participants) == 1
    p = event.participants[0]
    assert p.member_id == ali.member_id
    assert p.status == ParticipantStatus.UNMARKED
    assert p.points == 0

    ledger.set_status(weekly_meeting.event_id, ali.member_id, "present")
    ledger.set_points(weekly_meeting.event_id, ali.member_id, 5)
    assert total_points(ali.member_id, ledger.list_events()) == 5

    event = ledger.set_status(weekly_meeting.event_id, ali.member_id, ParticipantStatus.ABSENT)
    assert event.find_participant(ali.member_id).points == 0
    assert total_points(ali.member_id, ledger.list_events()) == 0


def test_status_transitions_are_free(ledger, weekly_meeting, ali):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)

    for status in ("absent", "present", "unmarked", "PRESENT"):
        event = ledger.set_status(weekly_meeting.event_id, ali.member_id, status)
        assert event.find_participant(ali.member_id).status == ParticipantStatus(status.lower())


def test_set_status_rejects_unknown_value(ledger, weekly_meeting, ali):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)

    with pytest.raises(ValidationError):
        ledger.set_status(weekly_meeting.event_id, ali.member_id, "late")


def test_set_points_on_absent_participant_stays_zero(ledger, weekly_meeting, ali):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)
    ledger.set_status(weekly_meeting.event_id, ali.member_id, "absent")

    event = ledger.set_points(weekly_meeting.event_id, ali.member_id, 7)

    assert event.find_participant(ali.member_id).points == 0


@pytest.mark.parametrize(
    "raw, expected",
    [("abc", 0), (None, 0), (float("nan"), 0), ("12", 12), (3.9, 3), ("-2", -2), (10**12, 0), ("1e12", 0)],
)
def test_set_points_coerces_input(ledger, weekly_meeting, ali, raw, expected):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)

    event = ledger.set_points(weekly_meeting.event_id, ali.member_id, raw)

    assert event.find_participant(ali.member_id).points == expected


def test_enroll_twice_is_rejected(ledger, weekly_meeting, ali):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)

    with pytest.raises(AlreadyEnrolledError):
        ledger.enroll(weekly_meeting.event_id, ali.member_id)
    assert len(ledger.get_event(weekly_meeting.event_id).participants) == 1


def test_enroll_unknown_event_or_member(ledger, weekly_meeting, ali):
    with pytest.raises(NotFoundError):
        ledger.enroll("missing", ali.member_id)
    with pytest.raises(NotFoundError):
        ledger.enroll(weekly_meeting.event_id, "missing")


def test_enroll_keeps_insertion_order(ledger, registry, weekly_meeting):
    ids = [registry.register(Member(member_id=None, name=n)).member_id for n in ("Zed", "Amal", "Mona")]
    for member_id in ids:
        ledger.enroll(weekly_meeting.event_id, member_id)

    assert [p.member_id for p in ledger.get_event(weekly_meeting.event_id).participants] == ids


def test_unenroll_not_enrolled_is_noop(ledger, weekly_meeting, ali):
    before = ledger.get_event(weekly_meeting.event_id)

    after = ledger.unenroll(weekly_meeting.event_id, ali.member_id)

    assert after == before


def test_unenroll_removes_entry(ledger, weekly_meeting, ali):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)

    event = ledger.unenroll(weekly_meeting.event_id, ali.member_id)

    assert not event.has_member(ali.member_id)


def test_update_unknown_participant(ledger, weekly_meeting, ali):
    with pytest.raises(NotFoundError):
        ledger.set_status(weekly_meeting.event_id, ali.member_id, "present")
    with pytest.raises(NotFoundError):
        ledger.set_points("missing", ali.member_id, 1)


def test_update_participant_applies_status_then_points(ledger, weekly_meeting, ali):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)

    event = ledger.update_participant(weekly_meeting.event_id, ali.member_id, status="present", points="4")
    assert event.find_participant(ali.member_id).points == 4

    event = ledger.update_participant(weekly_meeting.event_id, ali.member_id, status="absent", points=9)
    p = event.find_participant(ali.member_id)
    assert p.status == ParticipantStatus.ABSENT
    assert p.points == 0


def test_update_participant_needs_a_field(ledger, weekly_meeting, ali):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)

    with pytest.raises(ValidationError):
        ledger.update_participant(weekly_meeting.event_id, ali.member_id)


def test_enroll_new_registers_then_enrolls(ledger, registry, weekly_meeting):
    event = ledger.enroll_new(weekly_meeting.event_id, Member(member_id=None, name="Sara", cni="S9"))

    sara = registry.find_by_cni("s9")
    assert sara is not None
    assert event.has_member(sara.member_id)


def test_enroll_new_duplicate_cni_enrolls_nobody(ledger, weekly_meeting, ali):
    with pytest.raises(DuplicateKeyError):
        ledger.enroll_new(weekly_meeting.event_id, Member(member_id=None, name="Ali again", cni="x1"))

    assert ledger.get_event(weekly_meeting.event_id).participants == ()


def test_enroll_new_unknown_event_leaves_member_registered(ledger, registry):
    with pytest.raises(NotFoundError):
        ledger.enroll_new("missing", Member(member_id=None, name="Sara", cni="S9"))

    assert registry.find_by_cni("S9") is not None


def test_delete_event(ledger, weekly_meeting):
    ledger.delete_event(weekly_meeting.event_id)

    assert ledger.list_events() == []
    with pytest.raises(NotFoundError):
        ledger.delete_event(weekly_meeting.event_id)


def test_populated_event_joins_members(ledger, events_repo, weekly_meeting, ali):
    event = ledger.enroll(weekly_meeting.event_id, ali.member_id)
    # dangling reference left behind by a raw storage write
    events_repo.save_event(replace(event, participants=event.participants + (Participant(member_id="gone"),)))

    populated = ledger.populated_event(ledger.get_event(weekly_meeting.event_id))

    assert [pp.member for pp in populated.participants] == [ali, None]


def test_update_participant_with_explicit_none_points(ledger, weekly_meeting, ali):
    ledger.enroll(weekly_meeting.event_id, ali.member_id)
    ledger.set_points(weekly_meeting.event_id, ali.member_id, 7)

    event = ledger.update_participant(weekly_meeting.event_id, ali.member_id, points=None)

    assert event.find_participant(ali.member_id).points == 0
