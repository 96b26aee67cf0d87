"""Shared constants for KML parsing."""

from __future__ import annotations

# KML 2.2 namespace
KML_NAMESPACE = "http://www.opengis.net/kml/2.2"

# Element paths for the fallback walk. ``{*}`` matches any namespace or
# none, so files that omit the KML namespace are still read.
PLACEMARK_TAG = "{*}Placemark"
NAME_PATH = ".//{*}name"
DESCRIPTION_PATH = ".//{*}description"
POINT_COORDINATES_PATH = ".//{*}Point//{*}coordinates"
LINESTRING_COORDINATES_PATH = ".//{*}LineString//{*}coordinates"
POLYGON_OUTER_COORDINATES_PATH = (
    ".//{*}Polygon//{*}outerBoundaryIs//{*}LinearRing//{*}coordinates"
)
COORDINATES_TAG = "{*}coordinates"
MULTIGEOMETRY_TAG = "{*}MultiGeometry"

# Minimum valid positions per fallback geometry
MIN_LINESTRING_POINTS = 2
MIN_POLYGON_POINTS = 3
