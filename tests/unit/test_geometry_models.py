"""Tests for the geometry and feature models.

Covers:
- Construction invariants (NaN rejection, minimum positions)
- Coordinate normalisation (altitude dropped, tuples)
- GeoJSON serialisation shape for features and collections
- ``geometry_from_geojson`` dispatch, including collections
- ``FeatureCollection.bounds()``
"""

from __future__ import annotations

import math

import pytest

from kml_geometry.core.exceptions import ContractError
from kml_geometry.models.feature import Feature, FeatureCollection, FeatureProperties
from kml_geometry.models.geometry import (
    GeometryCollection,
    GeometryKind,
    GeometryValidationError,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    geometry_from_geojson,
    iter_positions,
)


class TestGeometryInvariants:
    """Invariants enforced at construction."""

    @pytest.mark.parametrize(
        "build",
        [
            lambda: Point((math.nan, 1.0)),
            lambda: LineString(((0.0, 0.0), (1.0, math.nan))),
            lambda: Polygon((((0.0, 0.0), (1.0, 0.0), (math.nan, 1.0)),)),
            lambda: MultiPoint(((math.nan, math.nan),)),
        ],
    )
    def test_nan_rejected(self, build: object) -> None:
        with pytest.raises(GeometryValidationError, match="NaN"):
            build()  # type: ignore[operator]

    def test_line_needs_two_positions(self) -> None:
        with pytest.raises(GeometryValidationError, match="at least 2"):
            LineString(((0.0, 0.0),))

    def test_ring_needs_three_positions(self) -> None:
        with pytest.raises(GeometryValidationError, match="at least 3"):
            Polygon((((0.0, 0.0), (1.0, 1.0)),))

    def test_polygon_needs_a_ring(self) -> None:
        with pytest.raises(GeometryValidationError):
            Polygon(())

    def test_multilinestring_checks_each_line(self) -> None:
        with pytest.raises(GeometryValidationError):
            MultiLineString((((0.0, 0.0), (1.0, 1.0)), ((2.0, 2.0),)))

    def test_out_of_range_values_allowed(self) -> None:
        assert Point((540.0, -95.0)).coordinates == (540.0, -95.0)

    def test_validation_error_is_value_error(self) -> None:
        err = GeometryValidationError("Point", None, "bad")
        assert isinstance(err, ValueError)
        assert err.category == "validation"
        assert err.code == "GEOMETRY_INVALID"


class TestCoordinateNormalisation:
    """Positions are stored as ``(lon, lat)`` float tuples."""

    def test_lists_become_tuples_and_altitude_dropped(self) -> None:
        line = LineString([[0, 0, 100], [1, 2, 200]])  # type: ignore[arg-type]
        assert line.coordinates == ((0.0, 0.0), (1.0, 2.0))

    def test_numeric_strings_accepted(self) -> None:
        assert Point(("1.5", "2.5")).coordinates == (1.5, 2.5)  # type: ignore[arg-type]

    def test_kind_tags(self) -> None:
        assert Point((0.0, 0.0)).kind is GeometryKind.POINT
        assert MultiPolygon(()).kind is GeometryKind.MULTI_POLYGON


class TestGeoJSON:
    """GeoJSON interchange shape."""

    def test_feature_shape(self) -> None:
        feature = Feature(Point((-122.4, 37.8)), FeatureProperties("SF", "City"))
        assert feature.to_geojson() == {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [-122.4, 37.8]},
            "properties": {"name": "SF", "description": "City"},
        }

    def test_collection_shape(self) -> None:
        collection = FeatureCollection(
            (Feature(LineString(((0.0, 0.0), (1.0, 1.0)))),)
        )
        assert collection.to_geojson() == {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "geometry": {"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 1.0]]},
                    "properties": {"name": "", "description": ""},
                }
            ],
        }

    def test_polygon_rings_nested(self) -> None:
        ring = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0))
        assert Polygon((ring,)).to_geojson()["coordinates"] == [[list(p) for p in ring]]

    def test_collection_from_geojson(self) -> None:
        data = {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "geometry": {"type": "MultiPoint", "coordinates": [[0, 0], [1, 1]]},
                    "properties": {"name": "pair", "extra": "ignored"},
                },
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [2, 2]},
                    "properties": None,
                },
            ],
        }
        collection = FeatureCollection.from_geojson(data)
        assert collection[0].geometry == MultiPoint(((0.0, 0.0), (1.0, 1.0)))
        assert collection[0].properties == FeatureProperties(name="pair")
        assert collection[1].properties == FeatureProperties()

    def test_feature_without_geometry_rejected(self) -> None:
        with pytest.raises(ContractError, match="geometry must be an object"):
            Feature.from_geojson({"type": "Feature", "geometry": None})

    def test_features_must_be_list(self) -> None:
        with pytest.raises(ContractError):
            FeatureCollection.from_geojson({"features": "nope"})


class TestGeometryFromGeoJSON:
    """Dispatch from GeoJSON type names to variants."""

    def test_geometry_collection(self) -> None:
        geometry = geometry_from_geojson(
            {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "Point", "coordinates": (1.0, 2.0)},
                    {"type": "LineString", "coordinates": ((0.0, 0.0), (1.0, 1.0))},
                ],
            }
        )
        assert isinstance(geometry, GeometryCollection)
        assert [g.kind for g in geometry.geometries] == [
            GeometryKind.POINT,
            GeometryKind.LINE_STRING,
        ]
        assert geometry.to_geojson()["type"] == "GeometryCollection"

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(GeometryValidationError, match="unsupported geometry type"):
            geometry_from_geojson({"type": "Curve", "coordinates": []})

    def test_multipolygon(self) -> None:
        ring = [[0, 0], [1, 0], [1, 1], [0, 0]]
        geometry = geometry_from_geojson({"type": "MultiPolygon", "coordinates": [[ring]]})
        assert isinstance(geometry, MultiPolygon)
        assert len(geometry.coordinates[0][0]) == 4


class TestBounds:
    """Envelope of all feature positions."""

    def test_empty_collection_has_no_bounds(self) -> None:
        assert FeatureCollection().bounds() is None

    def test_bounds_cover_all_kinds(self) -> None:
        collection = FeatureCollection(
            (
                Feature(Point((-10.0, 5.0))),
                Feature(LineString(((0.0, -3.0), (2.0, 1.0)))),
                Feature(Polygon((((20.0, 0.0), (21.0, 0.0), (21.0, 8.0)),))),
            )
        )
        assert collection.bounds() == (-10.0, -3.0, 21.0, 8.0)

    def test_iter_positions_walks_collections(self) -> None:
        geometry = GeometryCollection(
            (Point((1.0, 1.0)), MultiLineString((((0.0, 0.0), (2.0, 2.0)),)))
        )
        assert list(iter_positions(geometry)) == [(1.0, 1.0), (0.0, 0.0), (2.0, 2.0)]
