import re
from typing import List, Optional

from volleyscout.models import Lineup

_NON_DIGITS = re.compile(r"[^0-9]")

MAX_JERSEY_DIGITS = 2


def sanitize_jersey(value: str) -> Optional[str]:
    """
    Clean a jersey number typed into the setup form.

    Keeps digits only, at most two of them. Returns None when the edit
    must be rejected (a leading zero).
    """
    digits = _NON_DIGITS.sub("", value or "")[:MAX_JERSEY_DIGITS]
    if digits.startswith("0"):
        return None
    return digits


def find_duplicates(lineup: Lineup, libero: str = "") -> List[str]:
    seen = set()
    duplicates: List[str] = []
    for number in lineup.numbers() + [libero]:
        number = number.strip()
        if not number:
            continue
        if number in seen and number not in duplicates:
            duplicates.append(number)
        seen.add(number)
    return duplicates


def validate_setup(
    my_lineup: Lineup,
    op_lineup: Lineup,
    my_libero: str = "",
    op_libero: str = "",
) -> Optional[str]:
    """
    Return the first blocking problem, or None when the match can start.
    """
    if not my_lineup.is_complete():
        return "Enter every starting jersey number for my team"
    if not op_lineup.is_complete():
        return "Enter every starting jersey number for the opponent"

    my_dups = find_duplicates(my_lineup, my_libero)
    if my_dups:
        return f"Duplicate jersey numbers in my team: {', '.join(my_dups)}"

    op_dups = find_duplicates(op_lineup, op_libero)
    if op_dups:
        return f"Duplicate jersey numbers in the opponent team: {', '.join(op_dups)}"

    return None
