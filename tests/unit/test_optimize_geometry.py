"""Tests for render decimation.

Covers:
- Sequences at or below the limit are returned unchanged
- Long sequences keep both endpoints and stay within the limit
- The exact stride rule (``step = ceil(N / max_points)``)
- Polygon rings decimated independently; other kinds untouched
- Feature order and properties preserved; limit validation
"""

from __future__ import annotations

import math

import pytest

from kml_geometry.activities.optimize_geometry import (
    decimate,
    optimize_collection,
    optimize_geometry,
)
from kml_geometry.core.config import ConfigValidationError
from kml_geometry.models.feature import Feature, FeatureCollection, FeatureProperties
from kml_geometry.models.geometry import (
    LineString,
    MultiLineString,
    MultiPoint,
    Point,
    Polygon,
)


def _run(n: int) -> tuple[tuple[float, float], ...]:
    return tuple((float(i), float(i) / 2) for i in range(n))


class TestDecimate:
    """The per-sequence stride rule."""

    @pytest.mark.parametrize("n", [0, 1, 2, 999, 1000])
    def test_short_sequences_unchanged(self, n: int) -> None:
        coords = _run(n)
        assert decimate(coords) == coords

    @pytest.mark.parametrize("n", [1001, 1999, 2000, 2001, 5003, 100_000])
    def test_long_sequences_bounded_with_endpoints(self, n: int) -> None:
        coords = _run(n)
        reduced = decimate(coords)
        assert reduced[0] == coords[0]
        assert reduced[-1] == coords[-1]
        assert len(reduced) <= 1000

    def test_stride_indices(self) -> None:
        coords = list(range(2500))
        step = math.ceil(2500 / 1000)
        expected = [0, *range(step, 2500 - step, step), 2499]
        assert list(decimate(coords)) == expected
        assert step == 3

    def test_just_over_limit(self) -> None:
        reduced = decimate(list(range(1001)))
        assert reduced[:3] == (0, 2, 4)
        assert reduced[-2:] == (998, 1000)
        assert len(reduced) == 501

    def test_custom_limit(self) -> None:
        assert decimate(list(range(10)), max_points=4) == (0, 3, 6, 9)

    def test_deterministic(self) -> None:
        coords = _run(4321)
        assert decimate(coords) == decimate(coords)


class TestOptimizeGeometry:
    """Which geometry kinds are decimated."""

    def test_long_linestring_decimated(self) -> None:
        geometry = optimize_geometry(LineString(_run(3000)))
        assert isinstance(geometry, LineString)
        assert len(geometry.coordinates) <= 1000

    def test_short_linestring_is_same_object(self) -> None:
        line = LineString(_run(10))
        assert optimize_geometry(line) is line

    def test_polygon_rings_decimated_independently(self) -> None:
        outer = _run(2500)
        hole = ((0.5, 0.5), (0.6, 0.5), (0.6, 0.6), (0.5, 0.5))
        geometry = optimize_geometry(Polygon((outer, hole)))
        assert isinstance(geometry, Polygon)
        assert geometry.coordinates[0] == decimate(outer)
        assert geometry.coordinates[1] == hole

    @pytest.mark.parametrize(
        "geometry",
        [
            Point((1.0, 1.0)),
            MultiPoint(_run(5000)),
            MultiLineString((_run(5000),)),
        ],
    )
    def test_other_kinds_untouched(self, geometry: object) -> None:
        assert optimize_geometry(geometry) is geometry  # type: ignore[arg-type]


class TestOptimizeCollection:
    """Collection-level guarantees."""

    def test_order_and_properties_preserved(self) -> None:
        features = (
            Feature(Point((0.0, 0.0)), FeatureProperties("first", "a")),
            Feature(LineString(_run(2000)), FeatureProperties("second", "b")),
            Feature(Polygon((_run(1500),)), FeatureProperties("third", "c")),
        )
        optimized = optimize_collection(FeatureCollection(features))
        assert len(optimized) == 3
        assert [f.properties for f in optimized] == [f.properties for f in features]
        assert optimized[0] is features[0]
        assert len(optimized[1].geometry.coordinates) <= 1000  # type: ignore[union-attr]

    def test_input_collection_not_modified(self) -> None:
        line = LineString(_run(2000))
        collection = FeatureCollection((Feature(line),))
        optimize_collection(collection)
        assert collection[0].geometry is line
        assert len(line.coordinates) == 2000

    def test_limit_below_minimum_rejected(self) -> None:
        with pytest.raises(ConfigValidationError, match="max_points"):
            optimize_collection(FeatureCollection(), max_points=3)
