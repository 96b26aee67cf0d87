"""Report builders over an optimised feature collection.

- ``build_summary``: counts per standard geometry kind
- ``build_detail``: one descriptive row per feature, with line lengths
- ``build_popup_text``: HTML popup content for a single feature
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from kml_geometry.core.constants import (
    DETAIL_NAME_TEMPLATE,
    DETAIL_NO_DESCRIPTION,
    METRES_PER_KILOMETRE,
)
from kml_geometry.models.reports import SUMMARY_KINDS, DetailReport, DetailRow, SummaryReport
from kml_geometry.utils.geodesy import geometry_length_m

if TYPE_CHECKING:
    from kml_geometry.models.feature import Feature, FeatureCollection

logger = logging.getLogger("kml_geometry.activities.reports")

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def build_summary(collection: FeatureCollection) -> SummaryReport:
    """Count features per geometry kind.

    Kinds outside ``SUMMARY_KINDS`` (e.g. ``GeometryCollection``) are
    left out of the report.
    """
    counts = dict.fromkeys(SUMMARY_KINDS, 0)
    for feature in collection:
        kind = feature.geometry.kind.value
        if kind in counts:
            counts[kind] += 1
    return SummaryReport.model_validate(counts)


def build_detail(collection: FeatureCollection) -> DetailReport:
    """Build one row per feature, in collection order."""
    rows: list[DetailRow] = []
    for index, feature in enumerate(collection):
        length_m = geometry_length_m(feature.geometry)
        rows.append(
            DetailRow(
                id=index,
                type=feature.geometry.kind.value,
                name=feature.name or DETAIL_NAME_TEMPLATE.format(index=index),
                description=feature.description or DETAIL_NO_DESCRIPTION,
                length_km=_to_km(length_m) if length_m is not None else None,
            )
        )
    logger.debug("Built %d detail row(s)", len(rows))
    return DetailReport(rows=rows)


def build_popup_text(feature: Feature) -> str:
    """Render the map popup for *feature*.

    Bold name, description with HTML tags stripped, geometry type and,
    for line kinds, the length in kilometres.
    """
    parts: list[str] = []
    if feature.name:
        parts.append(f"<strong>{feature.name}</strong>")

    description = _WHITESPACE_RE.sub(" ", _HTML_TAG_RE.sub(" ", feature.description)).strip()
    if description:
        parts.append(description)

    parts.append(f"Type: {feature.geometry.kind.value}")

    length_m = geometry_length_m(feature.geometry)
    if length_m is not None:
        parts.append(f"Length: {length_m / METRES_PER_KILOMETRE:.2f} km")

    return "<br/>".join(parts)


def _to_km(length_m: float) -> float:
    return round(length_m / METRES_PER_KILOMETRE, 2)
