"""Parsing of GeoJSON boundary sources into district polygons.

This module turns the raw bytes of a boundary file into the polygon sequence
and bounding box of a BoundaryLayer. Boundary files are standard GeoJSON
FeatureCollections where each feature carries a Polygon or MultiPolygon
geometry and a free-form ``properties`` bag.

Any problem with the source (unreadable, not JSON, not a FeatureCollection,
a geometry shapely cannot build) is reported as a LoadError naming the layer.

Example:
    Parse a collection read from disk:
        >>> from district_lookup.utils.geojson_helpers import (
        ...     LoadError, parse_feature_collection,
        ... )

        >>> try:
        ...     polygons, bbox = parse_feature_collection(
        ...         "house", Path("tx-house-2025.geojson").read_bytes()
        ...     )
        ... except LoadError as e:
        ...     print(f"Layer unavailable: {e}")
"""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Any, cast

from shapely import errors as shapely_errors
from shapely import geometry as shapely_geometry

from district_lookup.boundaries import models

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


class LoadError(RuntimeError):
    """Exception raised when a boundary layer cannot be loaded.

    Raised when the layer's source is missing or unreadable, or when its
    content is not a well-formed collection of polygon features. The failure
    belongs to one layer only; other layers stay loadable.

    Example:
        Handle load failures:
            >>> try:
            ...     store.get_layer("senate")
            ... except LoadError as e:
            ...     print(f"{e.layer}: {e}")
    """

    def __init__(self, layer: str, message: str) -> None:
        super().__init__(message)
        self.layer = layer


def _embedded_bbox(collection: dict[str, Any]) -> models.BBox | None:
    """Return the collection's own bbox member if it is four finite numbers."""
    bbox = collection.get("bbox")
    if not isinstance(bbox, list) or len(bbox) != 4:
        return None

    try:
        values = [float(v) for v in bbox]
    except (TypeError, ValueError):
        return None

    if not all(math.isfinite(v) for v in values):
        return None

    return cast(models.BBox, tuple(values))


def compute_bbox(
    polygons: Iterable[models.DistrictPolygon],
) -> models.BBox | None:
    """Compute the bounding box enclosing all given polygons.

    Args:
        polygons: Polygons to measure. Empty geometries are ignored.

    Returns:
        (min_lon, min_lat, max_lon, max_lat), or None when nothing has
        extent.
    """
    bounds = [
        polygon.geometry.bounds
        for polygon in polygons
        if not polygon.geometry.is_empty
    ]
    if not bounds:
        return None

    return (
        min(b[0] for b in bounds),
        min(b[1] for b in bounds),
        max(b[2] for b in bounds),
        max(b[3] for b in bounds),
    )


def _build_polygon(
    layer: str, index: int, feature: Any
) -> models.DistrictPolygon | None:
    if not isinstance(feature, dict) or feature.get("type") != "Feature":
        return None

    geometry_mapping = feature.get("geometry")
    if not geometry_mapping:
        return None

    try:
        geometry = shapely_geometry.shape(geometry_mapping)
    except (
        shapely_errors.ShapelyError,
        AttributeError,
        IndexError,
        KeyError,
        TypeError,
        ValueError,
    ) as exc:
        raise LoadError(
            layer, f"Feature {index} of layer '{layer}' has invalid geometry: {exc}"
        ) from exc

    properties = feature.get("properties") or {}
    if not isinstance(properties, dict):
        properties = {}

    return models.DistrictPolygon.from_geometry(geometry, properties)


def parse_feature_collection(
    layer: str,
    content: bytes,
) -> tuple[tuple[models.DistrictPolygon, ...], models.BBox | None]:
    """Parse a GeoJSON FeatureCollection into district polygons.

    Features without a geometry, and entries that are not GeoJSON Features,
    are dropped. Non-polygonal features are kept in source order; the locator
    skips them. The collection's embedded bbox is reused when it is valid,
    otherwise the bbox is computed from the polygons.

    Args:
        layer: Layer name, used in error messages.
        content: Raw bytes of the boundary file.

    Returns:
        Tuple of (polygons in source order, bbox or None).

    Raises:
        LoadError: If the content is not JSON, not a FeatureCollection, or
            contains a geometry that cannot be built.
    """
    try:
        collection = json.loads(content)
    except (UnicodeDecodeError, ValueError) as exc:
        raise LoadError(
            layer, f"Boundary source for '{layer}' is not valid JSON: {exc}"
        ) from exc

    if (
        not isinstance(collection, dict)
        or collection.get("type") != "FeatureCollection"
    ):
        raise LoadError(
            layer, f"Boundary source for '{layer}' is not a FeatureCollection"
        )

    features: Sequence[Any] | None = collection.get("features")
    if not isinstance(features, list):
        raise LoadError(
            layer, f"Boundary source for '{layer}' has no features list"
        )

    polygons = tuple(
        polygon
        for index, feature in enumerate(features)
        if (polygon := _build_polygon(layer, index, feature)) is not None
    )
    bbox = _embedded_bbox(collection) or compute_bbox(polygons)
    return polygons, bbox
