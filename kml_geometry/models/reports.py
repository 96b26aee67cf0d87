"""Pydantic report models derived from a feature collection.

- **SummaryReport**: feature counts for the six standard geometry kinds.
- **DetailReport**: one row per feature with display name, description
  and, for line kinds, the geodesic length in kilometres.

Both are plain data handed to a table/report collaborator; they never
reference the collection they were built from.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

#: Geometry kinds counted by the summary, in display order.
SUMMARY_KINDS: tuple[str, ...] = (
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
)


class SummaryReport(BaseModel):
    """Feature counts per geometry kind.

    Field names are snake_case; aliases are the GeoJSON type names used
    as keys by ``as_mapping()``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    point: int = Field(default=0, alias="Point", ge=0)
    line_string: int = Field(default=0, alias="LineString", ge=0)
    polygon: int = Field(default=0, alias="Polygon", ge=0)
    multi_point: int = Field(default=0, alias="MultiPoint", ge=0)
    multi_line_string: int = Field(default=0, alias="MultiLineString", ge=0)
    multi_polygon: int = Field(default=0, alias="MultiPolygon", ge=0)

    def as_mapping(self) -> dict[str, int]:
        """Return ``{kind_name: count}`` for all six kinds."""
        return self.model_dump(by_alias=True)

    @property
    def total(self) -> int:
        return sum(self.as_mapping().values())


class DetailRow(BaseModel):
    """Descriptive row for a single feature.

    Attributes:
        id: Positional index of the feature in its collection.
        type: GeoJSON geometry type name.
        name: Placemark name, or ``"Element <id>"``.
        description: Placemark description, or ``"No description"``.
        length_km: Geodesic length rounded to 2 decimals; only set for
            ``LineString`` and ``MultiLineString``.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    type: str
    name: str
    description: str
    length_km: float | None = None


class DetailReport(BaseModel):
    """Ordered detail rows, one per feature."""

    model_config = ConfigDict(frozen=True)

    rows: list[DetailRow] = Field(default_factory=list)

    def to_rows(self) -> list[dict[str, object]]:
        """Serialise rows, omitting ``length_km`` where it does not apply."""
        return [row.model_dump(exclude_none=True) for row in self.rows]
