"""KML conversion pipeline.

Single linear flow with one branch:

1. Parse the text into a document (malformed markup is fatal)
2. Extract features with fiona; if none, walk Placemarks with lxml
3. Decimate long lines/rings for rendering

Reports are built on demand from the optimised collection. Every step
is a pure function of its input, so concurrent calls on different
documents need no coordination.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kml_geometry.activities.optimize_geometry import optimize_collection
from kml_geometry.activities.parse_kml import parse_kml_text
from kml_geometry.activities.reports import build_detail, build_popup_text, build_summary
from kml_geometry.core.constants import DEFAULT_MAX_RENDER_POINTS

if TYPE_CHECKING:
    from kml_geometry.models.feature import FeatureCollection
    from kml_geometry.models.reports import DetailReport, SummaryReport

logger = logging.getLogger("kml_geometry.orchestrators.kml_pipeline")


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Render-ready output of ``convert_kml``.

    Attributes:
        collection: Optimised feature collection, in discovery order.
        parser: Extractor that produced the features (``"fiona"`` or ``"lxml"``).
    """

    collection: FeatureCollection
    parser: str

    def to_geojson(self) -> dict[str, object]:
        return self.collection.to_geojson()

    def to_render_geojson(self) -> dict[str, object]:
        """GeoJSON for the map layer, with popup HTML under ``properties.popup``."""
        features: list[dict[str, object]] = []
        for feature in self.collection:
            entry = feature.to_geojson()
            entry["properties"] = {
                **feature.properties.to_dict(),
                "popup": build_popup_text(feature),
            }
            features.append(entry)
        return {"type": "FeatureCollection", "features": features}

    def summary(self) -> SummaryReport:
        return build_summary(self.collection)

    def detail(self) -> DetailReport:
        return build_detail(self.collection)


def convert_kml(text: str, *, max_points: int = DEFAULT_MAX_RENDER_POINTS) -> PipelineResult:
    """Convert KML text into an optimised feature collection.

    Args:
        text: Full KML document.
        max_points: Lines and rings longer than this are decimated.

    Returns:
        ``PipelineResult`` with a non-empty collection.

    Raises:
        MalformedDocumentError: If the text is not well-formed XML.
        NoFeaturesExtractedError: If neither extractor found a feature.
        ConfigValidationError: If *max_points* is below the minimum.
    """
    extraction = parse_kml_text(text)
    collection = optimize_collection(extraction.collection, max_points)

    logger.info(
        "KML converted | features=%d | parser=%s | max_points=%d",
        len(collection),
        extraction.parser,
        max_points,
    )
    return PipelineResult(collection=collection, parser=extraction.parser)
