"""Shared pytest fixtures for the KML Geometry test suite."""

from __future__ import annotations

import pytest

from kml_geometry.models.feature import Feature, FeatureCollection, FeatureProperties
from kml_geometry.models.geometry import LineString, Point
from tests.kml_samples import KML_HEADER, kml_document, line, placemark, point, polygon

# ---------------------------------------------------------------------------
# Sample KML fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mixed_kml() -> str:
    """Three named Placemarks: a Point, a LineString and a closed Polygon."""
    return kml_document(
        placemark(point("-122.4,37.8,0"), name="Ferry Building", description="Pier")
        + placemark(line("-122.4,37.8,0 -122.41,37.81,0 -122.42,37.8,0"), name="Bay Walk")
        + placemark(
            polygon("-122.5,37.7,0 -122.4,37.7,0 -122.4,37.8,0 -122.5,37.7,0"),
            name="Block",
            description="City block",
        )
    )


@pytest.fixture()
def no_namespace_kml() -> str:
    """Placemarks in a file without the KML namespace."""
    return kml_document(
        placemark(point("10.0,50.0"), name="Depot")
        + placemark(line("10.0,50.0 10.1,50.1"), name="Route 1"),
        namespace=False,
    )


@pytest.fixture()
def empty_kml() -> str:
    """A well-formed KML document with no Placemarks."""
    return kml_document("<name>Empty</name>")


@pytest.fixture()
def malformed_kml() -> str:
    """Markup with an unclosed tag."""
    return f"{KML_HEADER}<kml><Document><Placemark><name>Broken</Placemark></Document></kml>"


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def points_and_lines() -> FeatureCollection:
    """Three Points followed by two LineStrings."""
    features = [
        Feature(Point((float(i), 0.0)), FeatureProperties(name=f"P{i}")) for i in range(3)
    ]
    features += [
        Feature(LineString(((0.0, 0.0), (0.0, 1.0))), FeatureProperties(name="L0")),
        Feature(LineString(((1.0, 0.0), (1.0, 1.0))), FeatureProperties(name="L1")),
    ]
    return FeatureCollection(tuple(features))
