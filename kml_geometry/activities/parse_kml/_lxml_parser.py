"""lxml-based KML extractor (fallback).

Walks every ``Placemark`` in document order and reads Point, LineString
and Polygon (outer ring only) coordinates directly from the tree. Used
only when the fiona extractor yields nothing.

The three geometry attempts per Placemark are independent: a Placemark
holding a Point and a LineString contributes two features that share
its name and description.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_geometry.activities.parse_kml._constants import (
    DESCRIPTION_PATH,
    LINESTRING_COORDINATES_PATH,
    MIN_LINESTRING_POINTS,
    MIN_POLYGON_POINTS,
    NAME_PATH,
    PLACEMARK_TAG,
    POINT_COORDINATES_PATH,
    POLYGON_OUTER_COORDINATES_PATH,
)
from kml_geometry.activities.parse_kml._document import NoFeaturesExtractedError
from kml_geometry.activities.parse_kml._normalization import (
    element_text,
    parse_coordinates_text,
    parse_position,
)
from kml_geometry.core.constants import PLACEMARK_NAME_TEMPLATE
from kml_geometry.models.feature import Feature, FeatureCollection, FeatureProperties
from kml_geometry.models.geometry import Geometry, LineString, Point, Polygon

if TYPE_CHECKING:
    from lxml.etree import _Element

    from kml_geometry.activities.parse_kml._document import GeometryDocument

logger = logging.getLogger("kml_geometry.activities.parse_kml")


def extract_with_lxml(document: GeometryDocument) -> FeatureCollection:
    """Extract features by walking Placemark elements.

    Raises:
        NoFeaturesExtractedError: If no Placemark yields a usable geometry
            (including documents with no Placemarks at all).
    """
    features: list[Feature] = []
    placemarks: list[_Element] = (
        list(document.root.iter(PLACEMARK_TAG)) if document.root is not None else []
    )

    if not placemarks:
        logger.warning("No Placemarks found in KML")

    for idx, pm in enumerate(placemarks):
        properties = FeatureProperties(
            name=element_text(pm, NAME_PATH).strip() or PLACEMARK_NAME_TEMPLATE.format(index=idx),
            description=element_text(pm, DESCRIPTION_PATH).strip(),
        )
        for geometry in _placemark_geometries(pm):
            features.append(Feature(geometry=geometry, properties=properties))

    if not features:
        msg = "Could not extract any valid features from the KML file"
        raise NoFeaturesExtractedError(msg)

    logger.info(
        "lxml extracted %d feature(s) from %d Placemark(s)",
        len(features),
        len(placemarks),
    )
    return FeatureCollection(tuple(features))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _placemark_geometries(pm: _Element) -> list[Geometry]:
    """Return every geometry the Placemark yields, in Point/Line/Polygon order."""
    geometries: list[Geometry] = []

    point_text = element_text(pm, POINT_COORDINATES_PATH)
    if point_text:
        position = parse_position(point_text)
        if position is not None:
            geometries.append(Point(position))

    line_text = element_text(pm, LINESTRING_COORDINATES_PATH)
    if line_text:
        coords = parse_coordinates_text(line_text)
        if len(coords) >= MIN_LINESTRING_POINTS:
            geometries.append(LineString(tuple(coords)))
        else:
            logger.debug("Skipping LineString with %d valid point(s)", len(coords))

    ring_text = element_text(pm, POLYGON_OUTER_COORDINATES_PATH)
    if ring_text:
        ring = parse_coordinates_text(ring_text)
        if len(ring) >= MIN_POLYGON_POINTS:
            geometries.append(Polygon((tuple(ring),)))
        else:
            logger.debug("Skipping Polygon with %d valid point(s)", len(ring))

    return geometries
