from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from volleyscout.config import (
    COURT_LENGTH,
    COURT_VIEW_BOX,
    COURT_WIDTH,
    HIT_RADIUS,
    SERVE_OFFSET,
)
from volleyscout.models import LIBERO, ActionType, Coordinate, Position, TeamSide


# Point in logical court units: x along the 18 unit length, y across the 9 unit width
Point = Tuple[float, float]

_COURT_SCALE = np.array([COURT_LENGTH, COURT_WIDTH], dtype=float)

# 3x2 zone grid per half; my team plays the left half, the opponent the right
_ZONE_CENTERS: Dict[TeamSide, Dict[int, Point]] = {
    TeamSide.ME: {
        4: (7.5, 1.5), 3: (7.5, 4.5), 2: (7.5, 7.5),
        5: (3.0, 1.5), 6: (3.0, 4.5), 1: (3.0, 7.5),
    },
    TeamSide.OP: {
        2: (10.5, 1.5), 3: (10.5, 4.5), 4: (10.5, 7.5),
        1: (15.0, 1.5), 6: (15.0, 4.5), 5: (15.0, 7.5),
    },
}

_SERVE_X: Dict[TeamSide, float] = {
    TeamSide.ME: -SERVE_OFFSET,
    TeamSide.OP: COURT_LENGTH + SERVE_OFFSET,
}

CHART_ORIENTATIONS = ("landscape", "portrait")


def normalize(point: Point) -> Coordinate:
    """
    Logical court point (18x9) -> percentage coordinate (0-100 per axis).
    """
    pct = np.asarray(point, dtype=float) / _COURT_SCALE * 100.0
    return Coordinate(x=float(pct[0]), y=float(pct[1]))


def denormalize(coord: Coordinate) -> Point:
    logical = np.array([coord.x, coord.y], dtype=float) / 100.0 * _COURT_SCALE
    return float(logical[0]), float(logical[1])


def screen_to_court(
    screen: Point,
    viewport_width: float,
    viewport_height: float,
    view_box: Tuple[float, float, float, float] = COURT_VIEW_BOX,
) -> Point:
    """
    Map a device pixel to logical court units.

    The court drawing is scaled uniformly to fit the viewport and centred
    on the spare axis, so the same pixel maps to the same court spot in
    any resolution or orientation.
    """
    if viewport_width <= 0 or viewport_height <= 0:
        raise ValueError("viewport dimensions must be positive")

    min_x, min_y, box_w, box_h = view_box
    scale = min(viewport_width / box_w, viewport_height / box_h)
    offset = np.array([
        (viewport_width - box_w * scale) / 2.0,
        (viewport_height - box_h * scale) / 2.0,
    ])
    logical = (np.asarray(screen, dtype=float) - offset) / scale + np.array([min_x, min_y])
    return float(logical[0]), float(logical[1])


def zone_center(
    side: TeamSide,
    position: Position,
    action: Optional[ActionType] = None,
) -> Point:
    """
    Canonical start point for a player's trajectory.

    The libero is drawn from middle back (position 6). Serves start
    outside the team's own baseline.
    """
    side = TeamSide(side)
    slot = 6 if position == LIBERO else int(position)
    if slot not in _ZONE_CENTERS[side]:
        raise KeyError(f"Invalid rotation position: {position!r}")

    x, y = _ZONE_CENTERS[side][slot]
    if action is not None and ActionType(action) is ActionType.SERVE:
        x = _SERVE_X[side]
    return x, y


def distance(p1: Point, p2: Point) -> float:
    return float(np.linalg.norm(np.subtract(p1, p2, dtype=float)))


def hit_test(point: Point, handle: Optional[Point], radius: float = HIT_RADIUS) -> bool:
    if handle is None:
        return False
    return distance(point, handle) < radius


def to_chart_space(coords: Sequence[Coordinate], orientation: str = "landscape") -> np.ndarray:
    """
    Project stored percentage coordinates onto the shot chart grid.

    landscape: court spans 200 x 100 units (long axis horizontal)
    portrait:  court spans 100 x 200 units (long axis vertical)

    Returns an (n, 2) array of chart points.
    """
    if orientation not in CHART_ORIENTATIONS:
        raise ValueError(f"Unknown chart orientation: {orientation}")

    pts = np.array([[c.x, c.y] for c in coords], dtype=float).reshape(-1, 2)

    if orientation == "landscape":
        return pts * np.array([2.0, 1.0])
    return np.column_stack((pts[:, 1], pts[:, 0] * 2.0))
