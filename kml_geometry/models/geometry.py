"""Geometry variants for extracted KML features.

A geometry is one of a closed set of frozen dataclasses (``Point``,
``LineString``, ``Polygon``, their ``Multi*`` wrappers, and a
pass-through ``GeometryCollection``), each tagged with a ``kind``
class attribute. Stages dispatch on the concrete class, so adding a
variant means updating every ``isinstance`` chain that ends in
``assert_never``.

Coordinates are ``(lon, lat)`` float tuples. Altitude is dropped on
construction. Invariants enforced in ``__post_init__``:

- No NaN component, anywhere.
- A LineString has at least 2 positions.
- Every Polygon ring has at least 3 positions.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import ClassVar, assert_never

from kml_geometry.core.exceptions import ValidationError

Position = tuple[float, float]

MIN_LINE_POSITIONS = 2
MIN_RING_POSITIONS = 3


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class GeometryValidationError(ValueError, ValidationError):
    """Raised when a geometry is constructed with invalid coordinates.

    Attributes:
        model: Name of the geometry class that failed validation.
        value: The offending value.
    """

    default_stage = "model_validation"
    default_code = "GEOMETRY_INVALID"

    def __init__(self, model: str, value: object, message: str) -> None:
        self.model = model
        self.value = value
        ValidationError.__init__(self, f"{model}: {message} (got {value!r})")


class GeometryKind(enum.Enum):
    """GeoJSON geometry type names."""

    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"


# ---------------------------------------------------------------------------
# Coordinate normalisation
# ---------------------------------------------------------------------------


def _position(raw: object, model: str) -> Position:
    if not isinstance(raw, list | tuple) or len(raw) < 2:
        raise GeometryValidationError(model, raw, "position needs at least (lon, lat)")
    try:
        lon = float(raw[0])
        lat = float(raw[1])
    except (TypeError, ValueError) as exc:
        raise GeometryValidationError(model, raw, "position is not numeric") from exc
    if math.isnan(lon) or math.isnan(lat):
        raise GeometryValidationError(model, raw, "position contains NaN")
    return (lon, lat)


def _positions(raw: object, model: str, minimum: int = 0) -> tuple[Position, ...]:
    if not isinstance(raw, list | tuple):
        raise GeometryValidationError(model, raw, "expected a sequence of positions")
    positions = tuple(_position(p, model) for p in raw)
    if len(positions) < minimum:
        raise GeometryValidationError(
            model, len(positions), f"needs at least {minimum} positions"
        )
    return positions


def _rings(raw: object, model: str) -> tuple[tuple[Position, ...], ...]:
    if not isinstance(raw, list | tuple) or not raw:
        raise GeometryValidationError(model, raw, "expected at least one ring")
    return tuple(_positions(ring, model, MIN_RING_POSITIONS) for ring in raw)


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """A single ``(lon, lat)`` position."""

    coordinates: Position
    kind: ClassVar[GeometryKind] = GeometryKind.POINT

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", _position(self.coordinates, "Point"))

    def to_geojson(self) -> dict[str, object]:
        return {"type": self.kind.value, "coordinates": list(self.coordinates)}


@dataclass(frozen=True, slots=True)
class LineString:
    """An ordered path of at least two positions."""

    coordinates: tuple[Position, ...]
    kind: ClassVar[GeometryKind] = GeometryKind.LINE_STRING

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "coordinates",
            _positions(self.coordinates, "LineString", MIN_LINE_POSITIONS),
        )

    def to_geojson(self) -> dict[str, object]:
        return {"type": self.kind.value, "coordinates": [list(p) for p in self.coordinates]}


@dataclass(frozen=True, slots=True)
class Polygon:
    """One or more rings; the first is the outer boundary."""

    coordinates: tuple[tuple[Position, ...], ...]
    kind: ClassVar[GeometryKind] = GeometryKind.POLYGON

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", _rings(self.coordinates, "Polygon"))

    def to_geojson(self) -> dict[str, object]:
        return {
            "type": self.kind.value,
            "coordinates": [[list(p) for p in ring] for ring in self.coordinates],
        }


@dataclass(frozen=True, slots=True)
class MultiPoint:
    coordinates: tuple[Position, ...]
    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POINT

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", _positions(self.coordinates, "MultiPoint"))

    def to_geojson(self) -> dict[str, object]:
        return {"type": self.kind.value, "coordinates": [list(p) for p in self.coordinates]}


@dataclass(frozen=True, slots=True)
class MultiLineString:
    coordinates: tuple[tuple[Position, ...], ...]
    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_LINE_STRING

    def __post_init__(self) -> None:
        if not isinstance(self.coordinates, list | tuple):
            raise GeometryValidationError(
                "MultiLineString", self.coordinates, "expected a sequence of lines"
            )
        lines = tuple(
            _positions(line, "MultiLineString", MIN_LINE_POSITIONS) for line in self.coordinates
        )
        object.__setattr__(self, "coordinates", lines)

    def to_geojson(self) -> dict[str, object]:
        return {
            "type": self.kind.value,
            "coordinates": [[list(p) for p in line] for line in self.coordinates],
        }


@dataclass(frozen=True, slots=True)
class MultiPolygon:
    coordinates: tuple[tuple[tuple[Position, ...], ...], ...]
    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POLYGON

    def __post_init__(self) -> None:
        if not isinstance(self.coordinates, list | tuple):
            raise GeometryValidationError(
                "MultiPolygon", self.coordinates, "expected a sequence of polygons"
            )
        polygons = tuple(_rings(poly, "MultiPolygon") for poly in self.coordinates)
        object.__setattr__(self, "coordinates", polygons)

    def to_geojson(self) -> dict[str, object]:
        return {
            "type": self.kind.value,
            "coordinates": [
                [[list(p) for p in ring] for ring in poly] for poly in self.coordinates
            ],
        }


@dataclass(frozen=True, slots=True)
class GeometryCollection:
    """Heterogeneous geometries from a KML ``MultiGeometry``; passed through as-is."""

    geometries: tuple[Geometry, ...]
    kind: ClassVar[GeometryKind] = GeometryKind.GEOMETRY_COLLECTION

    def __post_init__(self) -> None:
        object.__setattr__(self, "geometries", tuple(self.geometries))

    def to_geojson(self) -> dict[str, object]:
        return {"type": self.kind.value, "geometries": [g.to_geojson() for g in self.geometries]}


Geometry = (
    Point
    | LineString
    | Polygon
    | MultiPoint
    | MultiLineString
    | MultiPolygon
    | GeometryCollection
)

_COORDINATE_VARIANTS: dict[str, type] = {
    cls.kind.value: cls
    for cls in (Point, LineString, Polygon, MultiPoint, MultiLineString, MultiPolygon)
}


def iter_positions(geometry: Geometry) -> Iterator[Position]:
    """Yield every position of *geometry*, rings and members included."""
    if isinstance(geometry, Point):
        yield geometry.coordinates
    elif isinstance(geometry, LineString | MultiPoint):
        yield from geometry.coordinates
    elif isinstance(geometry, Polygon | MultiLineString):
        for part in geometry.coordinates:
            yield from part
    elif isinstance(geometry, MultiPolygon):
        for poly in geometry.coordinates:
            for ring in poly:
                yield from ring
    elif isinstance(geometry, GeometryCollection):
        for member in geometry.geometries:
            yield from iter_positions(member)
    else:
        assert_never(geometry)


def geometry_from_geojson(data: Mapping[str, object]) -> Geometry:
    """Build a geometry variant from a GeoJSON-like mapping.

    Accepts anything shaped like ``shapely.geometry.mapping`` output or a
    parsed GeoJSON ``geometry`` member. Altitude components are dropped.

    Raises:
        GeometryValidationError: If the type is unknown or the
            coordinates violate a variant invariant.
    """
    geom_type = str(data.get("type", ""))
    if geom_type == GeometryKind.GEOMETRY_COLLECTION.value:
        members = data.get("geometries", [])
        if not isinstance(members, Sequence):
            raise GeometryValidationError(geom_type, members, "expected a list of geometries")
        return GeometryCollection(tuple(geometry_from_geojson(m) for m in members))

    cls = _COORDINATE_VARIANTS.get(geom_type)
    if cls is None:
        raise GeometryValidationError("Geometry", geom_type, "unsupported geometry type")
    return cls(data.get("coordinates"))  # type: ignore[no-any-return]
