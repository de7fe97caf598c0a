import pytest

from volleyscout.models import Lineup
from volleyscout.validation import find_duplicates, sanitize_jersey, validate_setup

FULL = Lineup.of("1", "2", "3", "4", "5", "6")


@pytest.mark.parametrize("raw, expected", [
    ("12", "12"),
    ("7a", "7"),
    ("123", "12"),
    (" 9 ", "9"),
    ("", ""),
    ("07", None),
    ("0", None),
])
def test_sanitize_jersey(raw, expected):
    assert sanitize_jersey(raw) == expected


def test_find_duplicates_includes_libero():
    assert find_duplicates(FULL, "3") == ["3"]
    assert find_duplicates(FULL.replace(2, "1"), "") == ["1"]
    assert find_duplicates(Lineup(), "") == []


def test_valid_setup():
    assert validate_setup(FULL, Lineup.of("11", "12", "13", "14", "15", "16"), "9", "19") is None


def test_same_numbers_across_teams_are_fine():
    assert validate_setup(FULL, FULL) is None


def test_empty_slots_reported_before_duplicates():
    message = validate_setup(FULL.replace(4, ""), FULL, my_libero="1")

    assert "my team" in message


def test_opponent_empty_slot():
    assert "opponent" in validate_setup(FULL, Lineup())


def test_my_duplicates_reported_first():
    message = validate_setup(FULL, FULL, my_libero="2", op_libero="3")

    assert message == "Duplicate jersey numbers in my team: 2"


def test_opponent_duplicates():
    message = validate_setup(FULL, FULL.replace(6, "5"))

    assert message == "Duplicate jersey numbers in the opponent team: 5"
