"""
Shot location mapping for the court diagram.

Converts a tap on the half-court diagram into normalized court coordinates
and a scoring zone. Coordinates run 0-100 on both axes: x from the left
sideline, y from the baseline (basket end) towards half court, with the
basket at (50, 5).

Boundary points are resolved as follows:
    - paint and corner rectangles are closed (edges belong to the zone)
    - a point exactly on the three-point arc is a two
    - the top-of-key split is exclusive (y == 50 is a wing)
    - the wing split is exclusive on the left (x == 50 is the right wing)
"""
import math
from typing import Dict, Tuple

from ..models import ShotLocation, StatType
from ..utils import PERSPECTIVE_TEAM_A_UP, PERSPECTIVE_TEAM_B_UP

# Court geometry (percentages of the half-court diagram)
BASKET_X = 50.0
BASKET_Y = 5.0
ARC_RADIUS_X = 45.0
ARC_RADIUS_Y = 40.0

PAINT_LEFT = 30.0
PAINT_RIGHT = 70.0
PAINT_BOTTOM = 35.0

CORNER_3_MAX_Y = 18.0
CORNER_3_LEFT_MAX_X = 15.0
CORNER_3_RIGHT_MIN_X = 85.0

WING_Y_MAX = 50.0

PAINT = "paint"
MID_RANGE = "mid_range"
CORNER_3_LEFT = "corner_3_left"
CORNER_3_RIGHT = "corner_3_right"
WING_3_LEFT = "wing_3_left"
WING_3_RIGHT = "wing_3_right"
TOP_3 = "top_3"

ZONE_CONFIGS: Dict[str, Tuple[str, StatType, int]] = {
    PAINT: ("Paint", StatType.FIELD_GOAL, 2),
    MID_RANGE: ("Mid-Range", StatType.FIELD_GOAL, 2),
    CORNER_3_LEFT: ("Left Corner 3", StatType.THREE_POINTER, 3),
    CORNER_3_RIGHT: ("Right Corner 3", StatType.THREE_POINTER, 3),
    WING_3_LEFT: ("Left Wing 3", StatType.THREE_POINTER, 3),
    WING_3_RIGHT: ("Right Wing 3", StatType.THREE_POINTER, 3),
    TOP_3: ("Top of Key 3", StatType.THREE_POINTER, 3),
}

TWO_POINT_ZONES = frozenset(z for z, cfg in ZONE_CONFIGS.items() if cfg[2] == 2)
THREE_POINT_ZONES = frozenset(z for z, cfg in ZONE_CONFIGS.items() if cfg[2] == 3)

PERSPECTIVES = (PERSPECTIVE_TEAM_A_UP, PERSPECTIVE_TEAM_B_UP)


def map_tap(
    pixel_x: float,
    pixel_y: float,
    container_width: float,
    container_height: float,
    perspective: str = PERSPECTIVE_TEAM_A_UP,
) -> ShotLocation:
    """
    Map a tap on the court diagram to court coordinates and a zone.

    Args:
        pixel_x: Tap x offset inside the diagram's bounding box
        pixel_y: Tap y offset inside the diagram's bounding box
        container_width: Width of the bounding box in pixels
        container_height: Height of the bounding box in pixels
        perspective: Which team attacks "up" on the rendered diagram

    Returns:
        ShotLocation with x/y on a 0-100 scale and the detected zone

    Raises:
        ValueError: For an empty container or an unknown perspective
    """
    if container_width <= 0 or container_height <= 0:
        raise ValueError("Container dimensions must be positive")
    if perspective not in PERSPECTIVES:
        raise ValueError(f"Unknown court perspective: {perspective!r}")

    x = _clamp(pixel_x / container_width * 100.0)
    y = _clamp(pixel_y / container_height * 100.0)
    if perspective == PERSPECTIVE_TEAM_B_UP:
        x, y = 100.0 - x, 100.0 - y

    x = round(x, 2)
    y = round(y, 2)
    return ShotLocation(x=x, y=y, zone=detect_zone(x, y))


def detect_zone(x: float, y: float) -> str:
    """Classify normalized court coordinates into a zone."""
    if PAINT_LEFT <= x <= PAINT_RIGHT and y <= PAINT_BOTTOM:
        return PAINT
    if x <= CORNER_3_LEFT_MAX_X and y <= CORNER_3_MAX_Y:
        return CORNER_3_LEFT
    if x >= CORNER_3_RIGHT_MIN_X and y <= CORNER_3_MAX_Y:
        return CORNER_3_RIGHT
    if is_beyond_arc(x, y):
        if y > WING_Y_MAX:
            return TOP_3
        if x < BASKET_X:
            return WING_3_LEFT
        return WING_3_RIGHT
    return MID_RANGE


def is_beyond_arc(x: float, y: float) -> bool:
    """Elliptical approximation of the three-point line; on the line is inside."""
    dx = abs(x - BASKET_X) / ARC_RADIUS_X
    dy = (y - BASKET_Y) / ARC_RADIUS_Y
    return math.sqrt(dx ** 2 + dy ** 2) > 1.0


def shot_type_for_zone(zone: str) -> StatType:
    return ZONE_CONFIGS[zone][1]


def points_for_zone(zone: str) -> int:
    return ZONE_CONFIGS[zone][2]


def zone_label(zone: str) -> str:
    return ZONE_CONFIGS[zone][0]


def court_to_pixel(
    location: ShotLocation,
    container_width: float,
    container_height: float,
    perspective: str = PERSPECTIVE_TEAM_A_UP,
) -> Tuple[float, float]:
    """Inverse of map_tap for rendering markers: court coordinates to pixels."""
    x, y = location.x, location.y
    if perspective == PERSPECTIVE_TEAM_B_UP:
        x, y = 100.0 - x, 100.0 - y
    return (x / 100.0 * container_width, y / 100.0 * container_height)


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))
