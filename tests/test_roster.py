"""
Tests for the Roster Tracker
"""

import pytest

from roomchat import Roster, roster_label


@pytest.fixture
def roster():
    return Roster()


def test_roster_starts_empty(roster):
    assert roster.current() == ()
    assert len(roster) == 0


def test_join_appends_in_order(roster):
    roster.apply_join("7")
    roster.apply_join("41")
    roster.apply_join("3")
    assert roster.current() == ("7", "41", "3")


def test_duplicate_join_is_idempotent(roster):
    assert roster.apply_join("7") is True
    assert roster.apply_join("7") is False
    assert roster.current() == ("7",)


def test_leave_removes_member(roster):
    roster.apply_join("7")
    roster.apply_join("41")

    assert roster.apply_leave("7") is True
    assert roster.current() == ("41",)


def test_leave_unknown_on_empty_roster_is_noop(roster):
    assert roster.apply_leave("99") is False
    assert roster.current() == ()


def test_leave_unknown_keeps_members(roster):
    roster.apply_join("7")
    roster.apply_leave("99")
    assert roster.current() == ("7",)


def test_rejoin_moves_member_to_end(roster):
    roster.apply_join("7")
    roster.apply_join("41")
    roster.apply_leave("7")
    roster.apply_join("7")
    assert roster.current() == ("41", "7")


def test_reset_clears_roster(roster):
    roster.apply_join("7")
    roster.apply_join("41")
    roster.reset()
    assert roster.current() == ()


def test_snapshot_is_not_affected_by_later_changes(roster):
    roster.apply_join("7")
    snapshot = roster.current()
    roster.apply_join("41")
    assert snapshot == ("7",)


def test_membership_and_iteration(roster):
    roster.apply_join("7")
    roster.apply_join("41")
    assert "7" in roster
    assert "99" not in roster
    assert list(roster) == ["7", "41"]


# ----------------------------------------------------------------------------
# roster_label()
# ----------------------------------------------------------------------------


@pytest.mark.parametrize(
    "members, expected",
    [
        ((), "Member:"),
        (("7",), "Member:"),
        (("7", "41"), "Members:"),
        (("7", "41", "3"), "Members:"),
    ],
)
def test_roster_label(members, expected):
    assert roster_label(members) == expected
