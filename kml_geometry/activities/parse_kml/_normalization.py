"""Coordinate and property normalization helpers for KML parsing.

Responsibilities:
- Parse KML coordinate text (``lon,lat[,alt]`` tuples) to ``(lon, lat)``
- Read Placemark name/description text from lxml elements
- Read name/description from fiona record properties
- Rebuild a flat, cleaned copy of the document for the OGR KML driver

Malformed or non-finite positions are dropped, never raised: a bad
tuple costs only itself.
"""

from __future__ import annotations

import copy
import logging
import math
from typing import TYPE_CHECKING

from kml_geometry.activities.parse_kml._constants import (
    COORDINATES_TAG,
    KML_NAMESPACE,
    MIN_LINESTRING_POINTS,
    MIN_POLYGON_POINTS,
    MULTIGEOMETRY_TAG,
    PLACEMARK_TAG,
)
from kml_geometry.models.feature import FeatureProperties

if TYPE_CHECKING:
    from collections.abc import Mapping

    from lxml.etree import _Element

    from kml_geometry.models.geometry import Position

logger = logging.getLogger("kml_geometry.activities.parse_kml")


# ---------------------------------------------------------------------------
# KML coordinate text parsing
# ---------------------------------------------------------------------------


def parse_position(text: str) -> Position | None:
    """Parse one ``lon,lat[,alt]`` tuple, or return ``None`` if unusable.

    Altitude is ignored. Both lon and lat must parse to finite floats.
    """
    parts = text.strip().split(",")
    if len(parts) < 2:
        return None
    try:
        lon = float(parts[0])
        lat = float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return None
    return (lon, lat)


def parse_coordinates_text(text: str) -> list[Position]:
    """Parse KML coordinate text (``lon,lat,alt lon,lat,alt ...``) to (lon, lat) tuples."""
    coords: list[Position] = []
    for token in text.split():
        position = parse_position(token)
        if position is None:
            logger.debug("Dropping malformed coordinate tuple %r", token)
            continue
        coords.append(position)
    return coords


# ---------------------------------------------------------------------------
# Element text
# ---------------------------------------------------------------------------


def element_text(parent: _Element, path: str) -> str:
    """Return the full text content of the first match of *path*, or ``""``."""
    elem = parent.find(path)
    if elem is None:
        return ""
    return "".join(elem.itertext())


# ---------------------------------------------------------------------------
# Fiona properties
# ---------------------------------------------------------------------------


def properties_from_record(props: Mapping[str, object]) -> FeatureProperties:
    """Pick name/description out of OGR KML driver properties.

    The driver reports them as ``Name``/``Description``; lower-case keys
    are accepted too.
    """
    name = props.get("Name") or props.get("name") or ""
    description = props.get("Description") or props.get("description") or ""
    return FeatureProperties(name=str(name).strip(), description=str(description).strip())


# ---------------------------------------------------------------------------
# OGR input
# ---------------------------------------------------------------------------

# Minimum valid positions for the element that owns a <coordinates> block
_MIN_POSITIONS = {
    "Point": 1,
    "LineString": MIN_LINESTRING_POINTS,
    "LinearRing": MIN_POLYGON_POINTS,
}


def document_for_ogr(root: _Element) -> bytes:
    """Serialise every Placemark under *root* as one flat KML Document.

    The OGR KML driver reads each Folder as a separate layer and parses
    coordinates with ``atof``. The copy handed to it therefore:

    - holds all Placemarks, in document order, under a single ``<Document>``;
    - has every ``<coordinates>`` block rewritten through the same
      per-tuple rules as the lxml walk, with geometries left below their
      minimum position count removed;
    - places un-namespaced elements in the KML namespace.

    The source tree is not modified.
    """
    from lxml import etree  # type: ignore[attr-defined]

    kml = etree.Element(f"{{{KML_NAMESPACE}}}kml", nsmap={None: KML_NAMESPACE})
    container = etree.SubElement(kml, f"{{{KML_NAMESPACE}}}Document")

    for pm in root.iter(PLACEMARK_TAG):
        cleaned = copy.deepcopy(pm)
        _qualify(cleaned)
        _clean_coordinates(cleaned)
        _drop_empty_multigeometries(cleaned)
        container.append(cleaned)

    return etree.tostring(kml, xml_declaration=True, encoding="UTF-8")


def _qualify(elem: _Element) -> None:
    for node in elem.iter():
        if isinstance(node.tag, str) and not node.tag.startswith("{"):
            node.tag = f"{{{KML_NAMESPACE}}}{node.tag}"


def _clean_coordinates(placemark: _Element) -> None:
    from lxml import etree  # type: ignore[attr-defined]

    for coords in list(placemark.iter(COORDINATES_TAG)):
        owner = coords.getparent()
        if owner is None:
            continue
        kind = etree.QName(owner).localname
        text = "".join(coords.itertext())

        if kind == "Point":
            position = parse_position(text)
            positions = [position] if position is not None else []
        else:
            positions = parse_coordinates_text(text)

        if len(positions) < _MIN_POSITIONS.get(kind, 1):
            logger.debug("Removing %s with %d valid point(s)", kind, len(positions))
            _remove(_removal_target(owner, kind))
            continue

        coords.text = " ".join(f"{lon},{lat}" for lon, lat in positions)


def _removal_target(owner: _Element, kind: str) -> _Element:
    """An invalid outer ring takes its Polygon with it; an inner ring only its boundary."""
    from lxml import etree  # type: ignore[attr-defined]

    if kind != "LinearRing":
        return owner
    boundary = owner.getparent()
    if boundary is None:
        return owner
    boundary_kind = etree.QName(boundary).localname
    if boundary_kind == "outerBoundaryIs":
        polygon = boundary.getparent()
        return polygon if polygon is not None else boundary
    if boundary_kind == "innerBoundaryIs":
        return boundary
    return owner


def _drop_empty_multigeometries(placemark: _Element) -> None:
    # Innermost first, so a parent emptied by its children's removal goes too.
    for multi in reversed(list(placemark.iter(MULTIGEOMETRY_TAG))):
        if len(multi) == 0:
            _remove(multi)


def _remove(elem: _Element) -> None:
    parent = elem.getparent()
    if parent is not None:
        parent.remove(elem)
