"""Data models for district boundary layers and lookup results.

This module defines the core data structures used throughout the application
to represent district boundaries and the results of resolving a point against
them. A BoundaryLayer is one chamber's collection of labeled polygons; it is
built once by the layer store and never mutated afterwards, so it can be read
concurrently by any number of requests.

Example:
    Creating a layer from a single square district:
        >>> from shapely import geometry
        >>> from district_lookup.boundaries import models
        >>> square = geometry.box(-97.5, 32.5, -96.5, 33.5)
        >>> polygon = models.DistrictPolygon.from_geometry(
        ...     square, {"SLDLST": "108"}
        ... )
        >>> layer = models.BoundaryLayer(
        ...     name="house",
        ...     polygons=(polygon,),
        ...     bbox=square.bounds,
        ...     source="tx-house-2025.geojson",
        ... )

    Projecting a result onto the configured layers:
        >>> result = models.DistrictResult(house=108, senate=16)
        >>> result.to_dict(["house", "senate"])
        {'house': 108, 'senate': 16}
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Literal

from shapely import prepared

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from shapely.geometry.base import BaseGeometry

BBox = tuple[float, float, float, float]
Chamber = Literal["house", "senate", "sboe"]
DistrictId = int | str
Scalar = str | int | float | bool | None

POLYGONAL_TYPES = frozenset({"Polygon", "MultiPolygon"})


@dataclasses.dataclass(frozen=True)
class QueryPoint:
    """A WGS84 coordinate; both values are finite."""

    lon: float
    lat: float


@dataclasses.dataclass(frozen=True)
class DistrictPolygon:
    """One boundary feature with its attribute bag.

    Attributes:
        geometry_type: GeoJSON geometry type of the feature.
        geometry: Shapely geometry built from the feature.
        attributes: Free-form feature properties from the source file.
        prepared_geometry: Prepared form of geometry for repeated
            containment tests, None for non-polygonal features.
    """

    geometry_type: str
    geometry: BaseGeometry
    attributes: Mapping[str, Scalar]
    prepared_geometry: Any = dataclasses.field(
        default=None, compare=False, repr=False
    )

    @classmethod
    def from_geometry(
        cls,
        geometry: BaseGeometry,
        attributes: Mapping[str, Scalar],
    ) -> DistrictPolygon:
        """Wrap a shapely geometry, preparing it if it is polygonal."""
        prepared_geometry = (
            prepared.prep(geometry)
            if geometry.geom_type in POLYGONAL_TYPES
            else None
        )
        return cls(
            geometry_type=geometry.geom_type,
            geometry=geometry,
            attributes=attributes,
            prepared_geometry=prepared_geometry,
        )

    @property
    def is_polygonal(self) -> bool:
        return self.geometry_type in POLYGONAL_TYPES


@dataclasses.dataclass(frozen=True)
class BoundaryLayer:
    """Represents one chamber's district boundaries.

    Attributes:
        name: Chamber identifier ("house", "senate", "sboe").
        polygons: Features in source order; order decides ties.
        bbox: Bounding box as (min_lon, min_lat, max_lon, max_lat), or None
            when the layer has no geometry to measure.
        source: Where the layer was read from, for diagnostics.
    """

    name: Chamber
    polygons: tuple[DistrictPolygon, ...]
    bbox: BBox | None
    source: str = ""

    def sample_keys(self) -> list[str]:
        """Attribute keys of the first feature, empty for an empty layer."""
        if not self.polygons:
            return []

        return list(self.polygons[0].attributes)


@dataclasses.dataclass(frozen=True)
class DistrictResult:
    """District identifiers for one query point, None when unresolved."""

    house: DistrictId | None = None
    senate: DistrictId | None = None
    sboe: DistrictId | None = None

    @classmethod
    def from_mapping(
        cls, districts: Mapping[str, DistrictId | None]
    ) -> DistrictResult:
        return cls(**{
            field.name: districts.get(field.name)
            for field in dataclasses.fields(cls)
        })

    def to_dict(
        self, layers: Iterable[str] | None = None
    ) -> dict[str, DistrictId | None]:
        """Serialize the result, optionally limited to the given layers."""
        values = dataclasses.asdict(self)
        if layers is None:
            return values

        return {name: values[name] for name in layers}


@dataclasses.dataclass(frozen=True)
class Resolution:
    """Outcome of attribute resolution for one matched polygon.

    Attributes:
        district: Resolved identifier, or None when no rule applied.
        rule: Tag of the precedence rule that produced the identifier.
        key: Attribute key the identifier was read from.
    """

    district: DistrictId | None = None
    rule: str | None = None
    key: str | None = None


@dataclasses.dataclass(frozen=True)
class LayerMatch:
    """Diagnostic trace of resolving a point against one layer.

    A match with no polygon means no boundary contained the point; a match
    with a polygon but no resolved district means the boundary was found but
    its attributes did not yield an identifier.
    """

    layer: Chamber
    in_bbox: bool
    polygon: DistrictPolygon | None = None
    resolution: Resolution = dataclasses.field(default_factory=Resolution)

    @property
    def district(self) -> DistrictId | None:
        return self.resolution.district

    def matched_keys(self) -> list[str] | None:
        if self.polygon is None:
            return None

        return list(self.polygon.attributes)


@dataclasses.dataclass(frozen=True)
class LookupOutcome:
    """Combined result of resolving a point against configured layers."""

    result: DistrictResult
    matches: dict[str, LayerMatch] = dataclasses.field(default_factory=dict)
    errors: dict[str, str] = dataclasses.field(default_factory=dict)
