"""Fiona-based KML extractor (primary).

Reads the document through fiona's OGR KML driver from an in-memory
file. The driver is given a flattened, coordinate-cleaned copy (see
``document_for_ogr``), so records come back in document order and a
malformed tuple is dropped rather than read as 0.0. Every OGR geometry
type is accepted; shapely drops the altitude dimension before the
geometry is turned into a model variant.

Failures never propagate: a record that violates a geometry invariant
is skipped with a warning, and a failure of the driver itself yields an
empty collection so the caller can fall back to the lxml walk.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_geometry.activities.parse_kml._normalization import (
    document_for_ogr,
    properties_from_record,
)
from kml_geometry.models.feature import Feature, FeatureCollection
from kml_geometry.models.geometry import geometry_from_geojson

if TYPE_CHECKING:
    from kml_geometry.activities.parse_kml._document import GeometryDocument

logger = logging.getLogger("kml_geometry.activities.parse_kml")


def extract_with_fiona(document: GeometryDocument) -> FeatureCollection:
    """Extract features using fiona (OGR KML driver).

    Returns an empty collection when the driver finds nothing or fails.
    """
    if document.root is None:
        return FeatureCollection()

    try:
        features = _read_features(document_for_ogr(document.root))
    except Exception as exc:
        logger.warning("Fiona extraction failed, treating as empty: %s", exc)
        return FeatureCollection()

    logger.info("Fiona extracted %d feature(s)", len(features))
    return FeatureCollection(tuple(features))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_features(content: bytes) -> list[Feature]:
    import fiona
    from fiona.drvsupport import supported_drivers
    from fiona.io import MemoryFile

    # The read-only KML driver ships with GDAL but is not enabled by default.
    supported_drivers.setdefault("KML", "r")

    features: list[Feature] = []

    with MemoryFile(content, ext="kml") as memfile:
        for layer in fiona.listlayers(memfile.name):
            with memfile.open(driver="KML", layer=layer) as collection:
                for idx, record in enumerate(collection):
                    feature = _try_record(record, layer, idx)
                    if feature is not None:
                        features.append(feature)

    return features


def _try_record(record: object, layer: str, idx: int) -> Feature | None:
    """Convert one fiona record, returning None when it has no usable geometry."""
    from shapely import force_2d
    from shapely.errors import ShapelyError
    from shapely.geometry import mapping, shape

    geom = getattr(record, "geometry", None)
    if geom is None:
        return None

    props = dict(getattr(record, "properties", None) or {})
    properties = properties_from_record(props)

    try:
        flat = force_2d(shape(geom))
        if flat.is_empty:
            return None
        geometry = geometry_from_geojson(mapping(flat))
    except (ValueError, ShapelyError) as exc:
        logger.warning(
            "Skipping invalid feature %d ('%s') in layer '%s': %s",
            idx,
            properties.name,
            layer,
            exc,
        )
        return None

    return Feature(geometry=geometry, properties=properties)
