"""KML parsing activity: composable extraction pipeline.

Parses KML text and extracts features with geometry, name and
description. Uses fiona (OGR KML driver) as the primary extractor, with
an lxml walk as the fallback when fiona yields nothing.

The parsing pipeline is split into focused stages:
- **_document**: recovery-mode XML parse, malformed-document check, errors
- **_normalization**: coordinate text → tuples, name/description lookup
- **_fiona_parser**: primary extractor using fiona/OGR
- **_lxml_parser**: fallback extractor walking Placemark elements

Supported KML structures:
- Point, LineString and Polygon Placemarks (both extractors)
- MultiGeometry and nested Folders (primary extractor)
- Files without the KML namespace (fallback extractor)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from kml_geometry.activities.parse_kml._constants import KML_NAMESPACE
from kml_geometry.activities.parse_kml._document import (
    GeometryDocument,
    KmlParseError,
    MalformedDocumentError,
    NoFeaturesExtractedError,
    load_document,
    parse_document,
)
from kml_geometry.activities.parse_kml._fiona_parser import extract_with_fiona
from kml_geometry.activities.parse_kml._lxml_parser import extract_with_lxml
from kml_geometry.activities.parse_kml._normalization import (
    parse_coordinates_text,
    parse_position,
)
from kml_geometry.models.feature import FeatureCollection

logger = logging.getLogger("kml_geometry.activities.parse_kml")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "KML_NAMESPACE",
    "ExtractionResult",
    "GeometryDocument",
    "KmlParseError",
    "MalformedDocumentError",
    "NoFeaturesExtractedError",
    "extract_features",
    "extract_with_fiona",
    "extract_with_lxml",
    "load_document",
    "parse_coordinates_text",
    "parse_document",
    "parse_kml_text",
    "parse_position",
]


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Features extracted from a document and the extractor that produced them."""

    collection: FeatureCollection
    parser: Literal["fiona", "lxml"]


def extract_features(document: GeometryDocument) -> ExtractionResult:
    """Extract features, trying fiona first and the lxml walk second.

    An empty fiona result is an expected outcome, not an error; it is
    what routes the document to the fallback.

    Raises:
        NoFeaturesExtractedError: If the fallback also finds nothing.
    """
    primary = extract_with_fiona(document)
    if not primary.is_empty:
        return ExtractionResult(collection=primary, parser="fiona")

    logger.info("No features found with fiona, attempting manual KML parsing")
    return ExtractionResult(collection=extract_with_lxml(document), parser="lxml")


def parse_kml_text(text: str) -> ExtractionResult:
    """Parse KML text and extract its features.

    Raises:
        MalformedDocumentError: If the text is not well-formed XML.
        NoFeaturesExtractedError: If no feature could be extracted.
    """
    document = parse_document(text)
    result = extract_features(document)
    logger.info(
        "Parsed %d feature(s) with %s",
        len(result.collection),
        result.parser,
    )
    return result
