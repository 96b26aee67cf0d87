"""Data model for extracted KML features.

A ``Feature`` pairs one geometry variant with the two Placemark
properties consumers ever read (name and description). A
``FeatureCollection`` keeps features in discovery order, which drives
report numbering and display order.

Both serialise to the GeoJSON interchange shape so a map renderer can
consume ``FeatureCollection.to_geojson()`` without translation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kml_geometry.core.exceptions import ContractError
from kml_geometry.models.geometry import Geometry, geometry_from_geojson, iter_positions

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


@dataclass(frozen=True, slots=True)
class FeatureProperties:
    """Placemark name and description.

    Either may be empty; report builders apply their own display defaults.
    """

    name: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "description": self.description}


@dataclass(frozen=True, slots=True)
class Feature:
    """A single geometry extracted from a KML Placemark.

    Attributes:
        geometry: One of the geometry variants in ``models.geometry``.
        properties: Placemark name and description.
    """

    geometry: Geometry
    properties: FeatureProperties = field(default_factory=FeatureProperties)

    @property
    def name(self) -> str:
        return self.properties.name

    @property
    def description(self) -> str:
        return self.properties.description

    def to_geojson(self) -> dict[str, object]:
        """Serialise to a GeoJSON ``Feature`` object."""
        return {
            "type": "Feature",
            "geometry": self.geometry.to_geojson(),
            "properties": self.properties.to_dict(),
        }

    @classmethod
    def from_geojson(cls, data: Mapping[str, object]) -> Feature:
        """Deserialise from a GeoJSON ``Feature`` mapping.

        Unknown properties are ignored; missing ``name``/``description``
        become ``""``.

        Raises:
            ContractError: If the geometry member is missing.
            GeometryValidationError: If the geometry is invalid.
        """
        geometry = data.get("geometry")
        if not isinstance(geometry, dict):
            msg = f"Feature geometry must be an object, got {type(geometry).__name__}"
            raise ContractError(msg, stage="models", code="INVALID_FEATURE")

        props = data.get("properties") or {}
        if not isinstance(props, dict):
            props = {}

        return cls(
            geometry=geometry_from_geojson(geometry),
            properties=FeatureProperties(
                name=str(props.get("name") or ""),
                description=str(props.get("description") or ""),
            ),
        )


@dataclass(frozen=True, slots=True)
class FeatureCollection:
    """Ordered, immutable sequence of features."""

    features: tuple[Feature, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", tuple(self.features))

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __getitem__(self, index: int) -> Feature:
        return self.features[index]

    @property
    def is_empty(self) -> bool:
        return not self.features

    def to_geojson(self) -> dict[str, object]:
        """Serialise to a GeoJSON ``FeatureCollection`` object."""
        return {
            "type": "FeatureCollection",
            "features": [f.to_geojson() for f in self.features],
        }

    @classmethod
    def from_geojson(cls, data: Mapping[str, object]) -> FeatureCollection:
        """Deserialise from a GeoJSON ``FeatureCollection`` mapping.

        Raises:
            ContractError: If ``features`` is not a list.
        """
        raw = data.get("features", [])
        if not isinstance(raw, list):
            msg = f"features must be a list, got {type(raw).__name__}"
            raise ContractError(msg, stage="models", code="INVALID_FEATURE_COLLECTION")
        return cls(tuple(Feature.from_geojson(f) for f in raw))

    def bounds(self) -> tuple[float, float, float, float] | None:
        """Return ``(min_lon, min_lat, max_lon, max_lat)`` over all features.

        Renderers use this to fit the map view to the data. Returns
        ``None`` for an empty collection.
        """
        from shapely.geometry import MultiPoint

        positions = [p for f in self.features for p in iter_positions(f.geometry)]
        if not positions:
            return None

        min_x, min_y, max_x, max_y = MultiPoint(positions).bounds
        return (min_x, min_y, max_x, max_y)
