"""Court geometry and zone classification.

Coordinates are in court-diagram units with the baseline at y=0 and y
growing toward half court. Each court standard has its own unit: the FIBA
diagram uses centimetres, the NBA diagram tenths of a foot.
"""

import math
from dataclasses import dataclass

from .errors import ValidationError


FREE_THROW = 'free-throw'
PAINT = 'paint'
LOGO_SHOT = 'logo-shot'
CORNER_THREE = 'corner-three'
THREE_POINT = 'three-point'
MID_RANGE = 'mid-range'

ZONE_NAMES = (FREE_THROW, PAINT, LOGO_SHOT, CORNER_THREE, THREE_POINT, MID_RANGE)

# Half-height of the band around the free-throw line, in diagram units
FREE_THROW_BAND = 20

METRES_PER_FOOT = 0.3048


@dataclass(frozen=True)
class CourtGeometry:
    standard: str
    width: float
    height: float
    basket_x: float
    basket_y: float
    baseline_y: float
    key_left_x: float
    key_right_x: float
    key_depth: float
    ft_circle_radius: float
    restricted_radius: float
    three_point_radius: float
    three_point_line_x: float
    three_point_y: float
    logo_shot_y: float
    units_per_foot: float


FIBA = CourtGeometry(
    standard='fiba',
    width=1500, height=1400,
    basket_x=750, basket_y=157.5, baseline_y=0,
    key_left_x=505, key_right_x=995, key_depth=580,
    ft_circle_radius=180, restricted_radius=125,
    three_point_radius=675, three_point_line_x=90, three_point_y=299.1,
    logo_shot_y=1100,
    units_per_foot=100 * METRES_PER_FOOT,
)

NBA = CourtGeometry(
    standard='nba',
    width=500, height=470,
    basket_x=250, basket_y=52.5, baseline_y=0,
    key_left_x=170, key_right_x=330, key_depth=190,
    ft_circle_radius=60, restricted_radius=40,
    three_point_radius=237.5, three_point_line_x=30, three_point_y=140,
    logo_shot_y=380,
    units_per_foot=10,
)

COURT_STANDARDS = {g.standard: g for g in (FIBA, NBA)}


def geometry_for(standard: str) -> CourtGeometry:
    try:
        return COURT_STANDARDS[(standard or '').lower()]
    except KeyError:
        raise ValidationError(f'Unknown court standard: {standard}') from None


@dataclass(frozen=True)
class Zone:
    name: str
    label: str

    def to_dict(self) -> dict:
        return {'name': self.name, 'label': self.label}


class ZoneClassifier:
    """Maps a point on one court diagram to its scoring zone.

    A classifier is tied to a single geometry; switching court standard
    means building a new classifier.
    """

    def __init__(self, geometry: CourtGeometry):
        self._court = geometry

    @property
    def geometry(self) -> CourtGeometry:
        return self._court

    def classify(self, x: float, y: float) -> Zone:
        c = self._court
        dist = math.hypot(x - c.basket_x, y - c.basket_y)
        # First match wins; the order encodes which marking takes priority.
        if self._at_free_throw_line(x, y):
            return Zone(FREE_THROW, 'Free Throw Line')
        if dist <= c.restricted_radius:
            return Zone(PAINT, 'Restricted Area')
        if self._in_paint(x, y):
            return Zone(PAINT, 'In the Paint')
        if y > c.logo_shot_y:
            return Zone(LOGO_SHOT, 'Logo Shot')
        if self._in_corner(x, y):
            return Zone(CORNER_THREE, 'Corner 3')
        if dist > c.three_point_radius:
            return Zone(THREE_POINT, 'Three-Point Range')
        return Zone(MID_RANGE, 'Mid-Range')

    def distance(self, x: float, y: float) -> float:
        """Distance from the basket in feet, rounded to one decimal."""
        c = self._court
        return round(math.hypot(x - c.basket_x, y - c.basket_y) / c.units_per_foot, 1)

    def _at_free_throw_line(self, x, y):
        c = self._court
        return (c.key_depth - FREE_THROW_BAND < y < c.key_depth + FREE_THROW_BAND
                and c.key_left_x < x < c.key_right_x)

    def _in_paint(self, x, y):
        c = self._court
        return c.key_left_x <= x <= c.key_right_x and c.baseline_y <= y <= c.key_depth

    def _in_corner(self, x, y):
        c = self._court
        return y <= c.three_point_y and (x < c.three_point_line_x or x > c.width - c.three_point_line_x)
