"""District lookup API endpoint.

This module exposes the single endpoint web clients call to find the
districts containing a coordinate. It validates the ``lat``/``lng`` query
parameters, resolves the point against every configured layer, and returns
the district identifiers as JSON, null where a layer has no district at the
point.

Example:
    Look up downtown Dallas:
        >>> response = client.get(
        ...     "/api/lookup", params={"lat": 32.7767, "lng": -96.7970}
        ... )
        >>> response.json()
        >>> # Returns: {"house": 108, "senate": 16, "sboe": 13}

    Inspect what the lookup saw:
        >>> response = client.get(
        ...     "/api/lookup",
        ...     params={"lat": 32.7767, "lng": -96.7970, "debug": "1"},
        ... )
        >>> # Returns bbox, bbox_check, sample_keys, matched_keys, rules,
        >>> # errors and result for each configured layer.
"""

from __future__ import annotations

import math
from typing import Any

import fastapi

from district_lookup.boundaries import models
from district_lookup.boundaries import store as boundary_store
from district_lookup.core import config
from district_lookup.services import orchestrator
from district_lookup.utils import geojson_helpers

router = fastapi.APIRouter(prefix="/api", tags=["lookup"])

BAD_COORDINATES_DETAIL = (
    "Provide numeric lat and lng query params, e.g. ?lat=32.7767&lng=-96.7970"
)
DEBUG_VALUES = frozenset({"1", "true"})


def _get_store() -> boundary_store.BoundaryLayerStore:
    """Resolve the boundary layer store dependency.

    Returns:
        The process-wide BoundaryLayerStore.
    """
    return boundary_store.get_layer_store()


def _parse_coordinate(value: str | None) -> float:
    """Parse a coordinate query parameter.

    Args:
        value: Raw query parameter value.

    Returns:
        The coordinate as a finite float.

    Raises:
        HTTPException: If the value is missing, not numeric, or not finite.
    """
    try:
        coordinate = float((value or "").strip())
    except ValueError:
        coordinate = math.nan

    if not math.isfinite(coordinate):
        raise fastapi.HTTPException(
            status_code=400,
            detail=BAD_COORDINATES_DETAIL,
        )

    return coordinate


def _debug_payload(
    point: models.QueryPoint,
    outcome: models.LookupOutcome,
    store: boundary_store.BoundaryLayerStore,
    layers: list[str],
) -> dict[str, Any]:
    """Project the lookup's internal state for operational debugging."""
    loaded = {
        name: store.get_layer(name)
        for name in layers
        if name in outcome.matches
    }
    return {
        "ok": True,
        "input": {"lat": point.lat, "lng": point.lon},
        "bbox": {
            name: list(layer.bbox) if layer.bbox else None
            for name, layer in loaded.items()
        },
        "bbox_check": {
            name: match.in_bbox for name, match in outcome.matches.items()
        },
        "sample_keys": {
            name: layer.sample_keys() for name, layer in loaded.items()
        },
        "matched_keys": {
            name: match.matched_keys()
            for name, match in outcome.matches.items()
        },
        "rules": {
            name: match.resolution.rule
            for name, match in outcome.matches.items()
        },
        "errors": outcome.errors,
        "result": outcome.result.to_dict(layers),
    }


@router.get("/lookup")
def lookup_districts(
    lat: str | None = None,
    lng: str | None = None,
    debug: str | None = None,
    settings: config.Settings = fastapi.Depends(config.get_settings),  # noqa: B008
    store: boundary_store.BoundaryLayerStore = fastapi.Depends(_get_store),  # noqa: B008
) -> dict[str, Any]:
    """Return the districts containing a coordinate.

    The handler is synchronous so FastAPI runs it in its threadpool; the
    first request for a layer reads and parses the boundary file.

    Args:
        lat: WGS84 latitude.
        lng: WGS84 longitude.
        debug: "1" or "true" to return the diagnostic payload.
        settings: Application settings (injected via FastAPI Depends).
        store: Boundary layer store (injected via FastAPI Depends).

    Returns:
        Mapping of each configured layer to its district identifier or
        None, or the diagnostic payload when debug is set.

    Raises:
        HTTPException: 400 for missing or non-numeric coordinates, 500 if a
            layer cannot be loaded and strict_layers is enabled.
    """
    point = models.QueryPoint(
        lon=_parse_coordinate(lng),
        lat=_parse_coordinate(lat),
    )
    layers = list(settings.layers)

    try:
        outcome = orchestrator.resolve_from_store(
            point,
            store,
            layers,
            strict=settings.strict_layers,
        )
    except geojson_helpers.LoadError as exc:
        raise fastapi.HTTPException(
            status_code=500,
            detail=f"Boundary layer '{exc.layer}' could not be loaded: {exc}",
        ) from exc

    if debug in DEBUG_VALUES:
        return _debug_payload(point, outcome, store, layers)

    return outcome.result.to_dict(layers)
