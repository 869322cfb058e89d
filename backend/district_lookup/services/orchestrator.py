"""Resolution of one query point against every configured layer.

Layers are independent: each is located and resolved on its own, and a miss
or failure in one never changes the outcome of another.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from district_lookup.boundaries import models
from district_lookup.services import locator, resolver
from district_lookup.utils import geojson_helpers

if TYPE_CHECKING:
    from collections.abc import Iterable

    from district_lookup.boundaries import store as boundary_store

logger = logging.getLogger(__name__)


def match_layer(
    layer: models.BoundaryLayer,
    point: models.QueryPoint,
) -> models.LayerMatch:
    """Locate a point in one layer and resolve the matched district.

    The attribute resolver only runs when a polygon matched; a miss records
    an empty resolution directly.

    Args:
        layer: Loaded boundary layer.
        point: WGS84 query point.

    Returns:
        LayerMatch holding the bbox check, matched polygon, and resolution.
    """
    in_bbox = locator.point_in_bbox(point, layer.bbox)
    polygon = locator.locate(layer, point) if in_bbox else None
    if polygon is None:
        return models.LayerMatch(layer=layer.name, in_bbox=in_bbox)

    resolution = resolver.explain(polygon.attributes, layer.name)
    logger.debug(
        "Point (%f, %f) matched %s district %s via %s",
        point.lat,
        point.lon,
        layer.name,
        resolution.district,
        resolution.rule,
        extra={
            "layer": layer.name,
            "lat": point.lat,
            "lng": point.lon,
            "district": resolution.district,
            "rule": resolution.rule,
        },
    )
    return models.LayerMatch(
        layer=layer.name,
        in_bbox=in_bbox,
        polygon=polygon,
        resolution=resolution,
    )


def resolve(
    point: models.QueryPoint,
    layers: Iterable[models.BoundaryLayer],
) -> models.DistrictResult:
    """Resolve a point against each layer and combine the districts.

    Args:
        point: WGS84 query point.
        layers: Loaded layers; each layer's name selects its result field.

    Returns:
        DistrictResult with one identifier (or None) per layer.
    """
    return models.DistrictResult.from_mapping({
        layer.name: match_layer(layer, point).district for layer in layers
    })


def resolve_from_store(
    point: models.QueryPoint,
    store: boundary_store.BoundaryLayerStore,
    names: Iterable[str],
    strict: bool = True,
) -> models.LookupOutcome:
    """Load the named layers from a store and resolve a point against them.

    Args:
        point: WGS84 query point.
        store: Layer store supplying cached layers.
        names: Layers to resolve, in result order.
        strict: When True, a layer that fails to load fails the whole
            lookup. When False, that layer resolves to None and the error
            is reported in the outcome.

    Returns:
        LookupOutcome with the combined result, per-layer matches, and any
        load errors.

    Raises:
        LoadError: If strict and any named layer cannot be loaded.
    """
    matches: dict[str, models.LayerMatch] = {}
    errors: dict[str, str] = {}
    for name in names:
        try:
            layer = store.get_layer(name)
        except geojson_helpers.LoadError as exc:
            if strict:
                raise
            logger.warning(
                "Layer %s unavailable, returning partial result: %s",
                name,
                exc,
                extra={"layer": name},
            )
            errors[name] = str(exc)
            continue
        matches[name] = match_layer(layer, point)

    result = models.DistrictResult.from_mapping({
        name: match.district for name, match in matches.items()
    })
    return models.LookupOutcome(result=result, matches=matches, errors=errors)
