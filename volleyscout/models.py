from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from volleyscout.config import DEFAULT_MATCH_NAME, DEFAULT_MY_NAME, DEFAULT_OP_NAME


class TeamSide(str, Enum):
    ME = "me"
    OP = "op"

    def other(self) -> "TeamSide":
        return TeamSide.OP if self is TeamSide.ME else TeamSide.ME


class ActionType(str, Enum):
    SERVE = "Serve"
    ATTACK = "Attack"
    BLOCK = "Block"
    DIG = "Dig"
    SET = "Set"
    RECEIVE = "Receive"


class ActionQuality(str, Enum):
    PERFECT = "Perfect"
    GOOD = "Good"
    NORMAL = "Normal"
    POOR = "Poor"


class ResultType(str, Enum):
    POINT = "Point"
    ERROR = "Error"
    NORMAL = "Normal"


class PlayerRole(str, Enum):
    SETTER = "S"
    OUTSIDE = "OH"
    MIDDLE = "MB"
    OPPOSITE = "OP"
    DEFENSIVE_SPECIALIST = "DS"
    LIBERO = "L"
    UNKNOWN = "?"


POSITIONS: Tuple[int, ...] = (1, 2, 3, 4, 5, 6)
LIBERO = "L"

# A rotation position 1..6 or the libero slot
Position = Union[int, str]


def _slot_index(position: int) -> int:
    if isinstance(position, bool) or position not in POSITIONS:
        raise KeyError(f"Invalid rotation position: {position!r}")
    return position - 1


def parse_position(value: Any) -> Position:
    """
    Accepts 1..6 (int or numeric string) or "L".
    """
    if value == LIBERO:
        return LIBERO
    try:
        position = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid position: {value!r}")
    if position not in POSITIONS:
        raise ValueError(f"Invalid position: {value!r}")
    return position


@dataclass(frozen=True)
class Coordinate:
    """
    Trajectory point in percentage court space (0-100 on each axis).
    """
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Coordinate":
        return Coordinate(x=float(d["x"]), y=float(d["y"]))


@dataclass(frozen=True)
class Lineup:
    """
    Jersey numbers of the six rotation positions.

    Backed by a fixed 6-tuple where slot i holds position i + 1.
    """
    slots: Tuple[str, ...] = ("", "", "", "", "", "")

    def __post_init__(self):
        if len(self.slots) != len(POSITIONS):
            raise ValueError("Lineup must have exactly six positions")

    def __getitem__(self, position: int) -> str:
        return self.slots[_slot_index(position)]

    def replace(self, position: int, number: str) -> "Lineup":
        slots = list(self.slots)
        slots[_slot_index(position)] = number
        return Lineup(tuple(slots))

    def stripped(self) -> "Lineup":
        return Lineup(tuple(n.strip() for n in self.slots))

    def numbers(self) -> List[str]:
        return list(self.slots)

    def is_complete(self) -> bool:
        return all(n.strip() for n in self.slots)

    def to_dict(self) -> Dict[str, str]:
        return {str(p): self[p] for p in POSITIONS}

    @staticmethod
    def from_dict(d: Dict[Any, Any]) -> "Lineup":
        normalized = {int(k): str(v) for k, v in d.items()}
        if set(normalized) != set(POSITIONS):
            raise ValueError(f"Lineup keys must be 1..6, got {sorted(normalized)}")
        return Lineup(tuple(normalized[p] for p in POSITIONS))

    @staticmethod
    def of(*numbers: str) -> "Lineup":
        """
        Lineup.of("1", "2", "3", "4", "5", "6") -> positions 1..6 in order.
        """
        return Lineup(tuple(numbers))


@dataclass(frozen=True)
class RoleMapping:
    slots: Tuple[PlayerRole, ...] = (PlayerRole.UNKNOWN,) * 6

    def __post_init__(self):
        if len(self.slots) != len(POSITIONS):
            raise ValueError("RoleMapping must have exactly six positions")

    def __getitem__(self, position: int) -> PlayerRole:
        return self.slots[_slot_index(position)]

    def replace(self, position: int, role: PlayerRole) -> "RoleMapping":
        slots = list(self.slots)
        slots[_slot_index(position)] = PlayerRole(role)
        return RoleMapping(tuple(slots))

    def to_dict(self) -> Dict[str, str]:
        return {str(p): self[p].value for p in POSITIONS}

    @staticmethod
    def from_dict(d: Dict[Any, Any]) -> "RoleMapping":
        normalized = {int(k): PlayerRole(v) for k, v in d.items()}
        return RoleMapping(
            tuple(normalized.get(p, PlayerRole.UNKNOWN) for p in POSITIONS)
        )


@dataclass(frozen=True)
class TeamConfig:
    match_name: str = ""
    my_name: str = ""
    op_name: str = ""

    def with_defaults(self) -> "TeamConfig":
        return TeamConfig(
            match_name=self.match_name.strip(),
            my_name=self.my_name.strip() or DEFAULT_MY_NAME,
            op_name=self.op_name.strip() or DEFAULT_OP_NAME,
        )

    def team_name(self, side: TeamSide) -> str:
        return self.my_name if TeamSide(side) is TeamSide.ME else self.op_name

    def file_stem(self) -> str:
        return self.match_name or DEFAULT_MATCH_NAME

    def to_dict(self) -> Dict[str, str]:
        return {
            "matchName": self.match_name,
            "myName": self.my_name,
            "opName": self.op_name,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TeamConfig":
        return TeamConfig(
            match_name=str(d.get("matchName", "") or ""),
            my_name=str(d.get("myName", "") or ""),
            op_name=str(d.get("opName", "") or ""),
        )


@dataclass(frozen=True)
class LogEntry:
    """
    One committed ledger record. Never mutated after creation.

    Manual score adjustments have no player, position, action or
    trajectory and carry manual=True.
    """
    id: str
    timestamp: int  # epoch millis
    set_number: int
    my_score: int
    op_score: int
    player_number: str
    position: Optional[Position]
    action: Optional[ActionType]
    quality: ActionQuality
    result: ResultType
    serving_team: TeamSide
    note: str = ""
    start_coord: Optional[Coordinate] = None
    end_coord: Optional[Coordinate] = None
    manual: bool = False

    def has_trajectory(self) -> bool:
        return self.start_coord is not None and self.end_coord is not None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "setNumber": self.set_number,
            "myScore": self.my_score,
            "opScore": self.op_score,
            "playerNumber": self.player_number,
            "position": self.position,
            "action": self.action.value if self.action else None,
            "quality": self.quality.value,
            "result": self.result.value,
            "note": self.note,
            "servingTeam": self.serving_team.value,
            "manual": self.manual,
        }
        if self.start_coord is not None:
            d["startCoord"] = self.start_coord.to_dict()
        if self.end_coord is not None:
            d["endCoord"] = self.end_coord.to_dict()
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "LogEntry":
        position = d.get("position")
        action = d.get("action")
        start = d.get("startCoord")
        end = d.get("endCoord")
        return LogEntry(
            id=str(d["id"]),
            timestamp=int(d["timestamp"]),
            set_number=int(d.get("setNumber", 1)),
            my_score=int(d["myScore"]),
            op_score=int(d["opScore"]),
            player_number=str(d.get("playerNumber", "") or ""),
            position=parse_position(position) if position is not None else None,
            action=ActionType(action) if action else None,
            quality=ActionQuality(d.get("quality", ActionQuality.NORMAL.value)),
            result=ResultType(d["result"]),
            serving_team=TeamSide(d["servingTeam"]),
            note=str(d.get("note", "") or ""),
            start_coord=Coordinate.from_dict(start) if start else None,
            end_coord=Coordinate.from_dict(end) if end else None,
            manual=bool(d.get("manual", False)),
        )
