"""Render optimisation: uniform-stride decimation of long coordinate runs.

Each LineString and each Polygon ring longer than ``max_points`` is
thinned to roughly ``max_points`` positions by keeping every
``ceil(N / max_points)``-th position, always bracketed by the input's
first and last positions. This bounds rendering cost; it does not try
to preserve shape.

Points, Multi* geometries and geometry collections pass through as-is.
Feature order, names and descriptions are never touched.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import TYPE_CHECKING, TypeVar, assert_never

from kml_geometry.core.config import ConfigValidationError
from kml_geometry.core.constants import DEFAULT_MAX_RENDER_POINTS, MIN_MAX_RENDER_POINTS
from kml_geometry.models.feature import Feature, FeatureCollection
from kml_geometry.models.geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("kml_geometry.activities.optimize_geometry")

T = TypeVar("T")


def decimate(coords: Sequence[T], max_points: int = DEFAULT_MAX_RENDER_POINTS) -> tuple[T, ...]:
    """Thin *coords* to at most *max_points* entries.

    Sequences of ``max_points`` or fewer are returned unchanged. Longer
    ones keep index 0, every ``step``-th index strictly below
    ``N - step``, and index ``N - 1``, where ``step = ceil(N / max_points)``.
    """
    n = len(coords)
    if n <= max_points:
        return tuple(coords)

    step = math.ceil(n / max_points)
    reduced = [coords[0]]
    reduced.extend(coords[i] for i in range(step, n - step, step))
    reduced.append(coords[n - 1])
    return tuple(reduced)


def optimize_geometry(geometry: Geometry, max_points: int = DEFAULT_MAX_RENDER_POINTS) -> Geometry:
    """Return *geometry* with long lines/rings decimated; other kinds unchanged."""
    if isinstance(geometry, LineString):
        if len(geometry.coordinates) <= max_points:
            return geometry
        return LineString(decimate(geometry.coordinates, max_points))
    if isinstance(geometry, Polygon):
        if all(len(ring) <= max_points for ring in geometry.coordinates):
            return geometry
        return Polygon(tuple(decimate(ring, max_points) for ring in geometry.coordinates))
    if isinstance(
        geometry,
        Point | MultiPoint | MultiLineString | MultiPolygon | GeometryCollection,
    ):
        return geometry
    assert_never(geometry)


def optimize_collection(
    collection: FeatureCollection,
    max_points: int = DEFAULT_MAX_RENDER_POINTS,
) -> FeatureCollection:
    """Decimate every feature's geometry for rendering.

    Returns a new collection with the same features in the same order.

    Raises:
        ConfigValidationError: If *max_points* is too small to keep a
            decimated ring valid.
    """
    if max_points < MIN_MAX_RENDER_POINTS:
        raise ConfigValidationError(
            "max_points",
            max_points,
            f"must be >= {MIN_MAX_RENDER_POINTS} (points)",
        )

    optimized: list[Feature] = []
    reduced = 0
    for feature in collection:
        geometry = optimize_geometry(feature.geometry, max_points)
        if geometry is not feature.geometry:
            reduced += 1
            optimized.append(replace(feature, geometry=geometry))
        else:
            optimized.append(feature)

    if reduced:
        logger.info(
            "Decimated %d of %d feature(s) to <= %d points per line/ring",
            reduced,
            len(optimized),
            max_points,
        )
    return FeatureCollection(tuple(optimized))
