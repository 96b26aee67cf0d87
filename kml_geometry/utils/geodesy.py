"""Great-circle path lengths on a spherical Earth (haversine formula).

All lengths are in metres. Coordinates are ``(lon, lat)`` in degrees.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from kml_geometry.core.constants import EARTH_RADIUS_M
from kml_geometry.models.geometry import Geometry, LineString, MultiLineString

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kml_geometry.models.geometry import Position


def haversine_m(a: Position, b: Position) -> float:
    """Great-circle distance between two ``(lon, lat)`` positions in metres."""
    lon1, lat1 = a
    lon2, lat2 = b
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def path_length_m(coords: Sequence[Position]) -> float:
    """Sum of consecutive haversine distances; 0.0 for fewer than 2 positions."""
    return sum((haversine_m(coords[i], coords[i + 1]) for i in range(len(coords) - 1)), 0.0)


def geometry_length_m(geometry: Geometry) -> float | None:
    """Length of a line geometry in metres, or ``None`` for other kinds.

    A MultiLineString's length is the sum of its lines; the gaps between
    lines are not counted.
    """
    if isinstance(geometry, LineString):
        return path_length_m(geometry.coordinates)
    if isinstance(geometry, MultiLineString):
        return sum((path_length_m(line) for line in geometry.coordinates), 0.0)
    return None
