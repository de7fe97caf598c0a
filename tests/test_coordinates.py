import numpy as np
import pytest

from volleyscout.coordinates import (
    denormalize,
    distance,
    hit_test,
    normalize,
    screen_to_court,
    to_chart_space,
    zone_center,
)
from volleyscout.models import LIBERO, ActionType, Coordinate, TeamSide


# ---------------------------------------------------------
# Normalization
# ---------------------------------------------------------

def test_normalize_court_center():
    assert normalize((9.0, 4.5)) == Coordinate(50.0, 50.0)


def test_normalize_corners():
    assert normalize((0.0, 0.0)) == Coordinate(0.0, 0.0)
    assert normalize((18.0, 9.0)) == Coordinate(100.0, 100.0)


def test_normalize_off_court_point():
    coord = normalize((-0.5, 4.5))

    assert coord.x < 0
    assert coord.y == pytest.approx(50.0)


def test_denormalize_inverts_normalize():
    x, y = denormalize(normalize((3.3, 7.1)))

    assert x == pytest.approx(3.3)
    assert y == pytest.approx(7.1)


def test_screen_to_court_wide_viewport():
    # 20x10 view box scaled x100, no letterboxing
    assert screen_to_court((100, 50), 2000, 1000) == pytest.approx((0.0, 0.0))
    assert screen_to_court((1900, 950), 2000, 1000) == pytest.approx((18.0, 9.0))


def test_screen_to_court_letterboxed_viewport():
    # Square viewport: court centred vertically with 500px bands
    assert screen_to_court((100, 550), 2000, 2000) == pytest.approx((0.0, 0.0))


def test_screen_to_court_rejects_empty_viewport():
    with pytest.raises(ValueError):
        screen_to_court((0, 0), 0, 100)


# ---------------------------------------------------------
# Zone centres
# ---------------------------------------------------------

@pytest.mark.parametrize("side, position, expected", [
    (TeamSide.ME, 4, (7.5, 1.5)),
    (TeamSide.ME, 1, (3.0, 7.5)),
    (TeamSide.OP, 2, (10.5, 1.5)),
    (TeamSide.OP, 5, (15.0, 7.5)),
])
def test_zone_center(side, position, expected):
    assert zone_center(side, position) == expected


def test_zone_center_mirrors_sides():
    for position in range(1, 7):
        me_x, _ = zone_center(TeamSide.ME, position)
        op_x, _ = zone_center(TeamSide.OP, position)
        assert me_x < 9 < op_x


def test_libero_starts_middle_back():
    assert zone_center(TeamSide.ME, LIBERO) == zone_center(TeamSide.ME, 6)


def test_serve_starts_off_court():
    assert zone_center(TeamSide.ME, 1, ActionType.SERVE) == (-0.5, 7.5)
    assert zone_center(TeamSide.OP, 1, ActionType.SERVE) == (18.5, 1.5)


def test_non_serve_action_keeps_zone():
    assert zone_center(TeamSide.ME, 1, ActionType.ATTACK) == (3.0, 7.5)


def test_zone_center_invalid_position():
    with pytest.raises(KeyError):
        zone_center(TeamSide.ME, 7)


# ---------------------------------------------------------
# Hit testing
# ---------------------------------------------------------

def test_distance():
    assert distance((0, 0), (3, 4)) == pytest.approx(5.0)


def test_hit_test_radius():
    assert hit_test((1.0, 1.0), (1.5, 1.5))
    assert not hit_test((0.0, 0.0), (1.5, 0.0))
    assert not hit_test((0.0, 0.0), None)


# ---------------------------------------------------------
# Shot chart projection
# ---------------------------------------------------------

def test_chart_space_landscape():
    pts = to_chart_space([Coordinate(50, 25), Coordinate(100, 100)])

    assert pts.shape == (2, 2)
    np.testing.assert_allclose(pts, [[100, 25], [200, 100]])


def test_chart_space_portrait():
    pts = to_chart_space([Coordinate(50, 25)], orientation="portrait")

    np.testing.assert_allclose(pts, [[25, 100]])


def test_chart_space_empty():
    assert to_chart_space([]).shape == (0, 2)


def test_chart_space_unknown_orientation():
    with pytest.raises(ValueError):
        to_chart_space([Coordinate(0, 0)], orientation="diagonal")
