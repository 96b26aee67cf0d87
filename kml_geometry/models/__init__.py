"""Data models and schemas.

Defines the data structures used throughout the pipeline:
- Geometry variants: Point, LineString, Polygon, Multi*, GeometryCollection
- Feature / FeatureCollection: geometry plus name and description
- SummaryReport / DetailReport: derived report payloads
"""

from kml_geometry.models.feature import Feature, FeatureCollection, FeatureProperties
from kml_geometry.models.geometry import (
    Geometry,
    GeometryCollection,
    GeometryKind,
    GeometryValidationError,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Position,
    geometry_from_geojson,
    iter_positions,
)
from kml_geometry.models.reports import SUMMARY_KINDS, DetailReport, DetailRow, SummaryReport

__all__ = [
    "SUMMARY_KINDS",
    "DetailReport",
    "DetailRow",
    "Feature",
    "FeatureCollection",
    "FeatureProperties",
    "Geometry",
    "GeometryCollection",
    "GeometryKind",
    "GeometryValidationError",
    "LineString",
    "MultiLineString",
    "MultiPoint",
    "MultiPolygon",
    "Point",
    "Polygon",
    "Position",
    "SummaryReport",
    "geometry_from_geojson",
    "iter_positions",
]
