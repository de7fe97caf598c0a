from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from volleyscout.models import LogEntry, TeamSide


@dataclass(frozen=True)
class ScoreSnapshot:
    index: int
    set_number: int
    my_score: int
    op_score: int
    serving_team: TeamSide
    manual: bool


@dataclass(frozen=True)
class SetResult:
    set_number: int
    my_score: int
    op_score: int

    @property
    def leader(self) -> Optional[TeamSide]:
        if self.my_score > self.op_score:
            return TeamSide.ME
        if self.op_score > self.my_score:
            return TeamSide.OP
        return None


def build_score_timeline(
    entries: Iterable[LogEntry],
    set_number: Optional[int] = None,
) -> List[ScoreSnapshot]:
    """
    Replays the ledger into the score after each entry.
    Entries without a score change (Normal results) are kept so that
    the timeline lines up with the ledger rows.
    Does NOT mutate external state.
    """
    timeline: List[ScoreSnapshot] = []

    for index, entry in enumerate(entries):
        if set_number is not None and entry.set_number != set_number:
            continue

        timeline.append(
            ScoreSnapshot(
                index=index + 1,
                set_number=entry.set_number,
                my_score=entry.my_score,
                op_score=entry.op_score,
                serving_team=entry.serving_team,
                manual=entry.manual,
            )
        )

    return timeline


def set_results(entries: Iterable[LogEntry]) -> List[SetResult]:
    """
    Last recorded score of every set present in the ledger.
    """
    last: Dict[int, LogEntry] = {}
    for entry in entries:
        last[entry.set_number] = entry

    return [
        SetResult(set_number=n, my_score=last[n].my_score, op_score=last[n].op_score)
        for n in sorted(last)
    ]

