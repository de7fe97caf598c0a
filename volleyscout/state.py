from dataclasses import dataclass, field, replace
from typing import Any, Dict

from volleyscout.ledger import EventLedger
from volleyscout.models import Lineup, RoleMapping, TeamSide


@dataclass(frozen=True)
class TeamState:
    lineup: Lineup = field(default_factory=Lineup)
    roles: RoleMapping = field(default_factory=RoleMapping)
    libero: str = ""


@dataclass(frozen=True)
class GameState:
    """
    Point-in-time match snapshot; the unit of undo/redo.

    Immutable: every mutation builds a new GameState with
    dataclasses.replace, so history stacks share lineups, roles and
    LogEntry objects with the live state. Each snapshot still holds its
    own ledger tuple of entry references.
    """
    current_set: int = 1
    my_set_wins: int = 0
    op_set_wins: int = 0
    me: TeamState = field(default_factory=TeamState)
    op: TeamState = field(default_factory=TeamState)
    my_score: int = 0
    op_score: int = 0
    serving_team: TeamSide = TeamSide.ME
    ledger: EventLedger = field(default_factory=EventLedger)

    def team(self, side: TeamSide) -> TeamState:
        return self.me if TeamSide(side) is TeamSide.ME else self.op

    def score(self, side: TeamSide) -> int:
        return self.my_score if TeamSide(side) is TeamSide.ME else self.op_score

    def with_team(self, side: TeamSide, team: TeamState) -> "GameState":
        if TeamSide(side) is TeamSide.ME:
            return replace(self, me=team)
        return replace(self, op=team)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentSet": self.current_set,
            "mySetWins": self.my_set_wins,
            "opSetWins": self.op_set_wins,
            "myLineup": self.me.lineup.to_dict(),
            "opLineup": self.op.lineup.to_dict(),
            "myRoles": self.me.roles.to_dict(),
            "opRoles": self.op.roles.to_dict(),
            "myLibero": self.me.libero,
            "opLibero": self.op.libero,
            "myScore": self.my_score,
            "opScore": self.op_score,
            "servingTeam": self.serving_team.value,
            "logs": self.ledger.to_list(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "GameState":
        # Older saves may lack set counters, roles or liberos
        my_roles = d.get("myRoles")
        op_roles = d.get("opRoles")
        return GameState(
            current_set=int(d.get("currentSet") or 1),
            my_set_wins=int(d.get("mySetWins") or 0),
            op_set_wins=int(d.get("opSetWins") or 0),
            me=TeamState(
                lineup=Lineup.from_dict(d["myLineup"]),
                roles=RoleMapping.from_dict(my_roles) if my_roles else RoleMapping(),
                libero=str(d.get("myLibero") or ""),
            ),
            op=TeamState(
                lineup=Lineup.from_dict(d["opLineup"]),
                roles=RoleMapping.from_dict(op_roles) if op_roles else RoleMapping(),
                libero=str(d.get("opLibero") or ""),
            ),
            my_score=int(d["myScore"]),
            op_score=int(d["opScore"]),
            serving_team=TeamSide(d["servingTeam"]),
            ledger=EventLedger.from_list(d.get("logs") or []),
        )
