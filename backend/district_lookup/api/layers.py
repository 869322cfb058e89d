"""Boundary layer metadata API endpoints.

This module provides REST API endpoints for inspecting the configured
district layers: listing each layer with its source, polygon count and
bounding box, and retrieving the bounding box of a single layer. All
bounding boxes are returned as WGS84 longitude/latitude coordinates.
Requesting a layer loads it into the store if it is not cached yet.

Example:
    List all configured layers:
        >>> response = client.get("/api/layers")
        >>> layers = response.json()
        >>> # Returns: [{"name": "house", "source": "data/tx-house-2025.geojson",
        >>> #           "polygon_count": 150, "bbox": [...]}, ...]

    Get bounding box for a specific layer:
        >>> response = client.get("/api/layers/senate/bbox")
        >>> bbox = response.json()["bbox"]
        >>> # Returns: {"bbox": [-106.65, 25.84, -93.51, 36.5]}
        >>> # Format: [min_lon, min_lat, max_lon, max_lat]
"""

from typing import Any

import fastapi

from district_lookup.api import lookup
from district_lookup.boundaries import models
from district_lookup.boundaries import store as boundary_store
from district_lookup.core import config
from district_lookup.utils import geojson_helpers

router = fastapi.APIRouter(prefix="/api/layers", tags=["layers"])


def _load_layer(
    store: boundary_store.BoundaryLayerStore, name: str
) -> models.BoundaryLayer:
    """Load a layer, mapping load failures to a server error.

    Raises:
        HTTPException: If the layer cannot be loaded (500 status code).
    """
    try:
        return store.get_layer(name)
    except geojson_helpers.LoadError as exc:
        raise fastapi.HTTPException(
            status_code=500,
            detail=f"Boundary layer '{name}' could not be loaded: {exc}",
        ) from exc


@router.get("")
def list_layers(
    settings: config.Settings = fastapi.Depends(config.get_settings),  # noqa: B008
    store: boundary_store.BoundaryLayerStore = fastapi.Depends(lookup._get_store),  # noqa: B008
) -> list[dict[str, Any]]:
    """List all configured layers.

    Returns the layers the lookup endpoint resolves, in configured order,
    with the number of features and bounding box of each.

    Args:
        settings: Application settings (injected via FastAPI Depends).
        store: Boundary layer store (injected via FastAPI Depends).

    Returns:
        List of layer summaries with name, source, polygon_count and bbox.

    Raises:
        HTTPException: If any configured layer cannot be loaded.
    """
    summaries = []
    for name in settings.layers:
        layer = _load_layer(store, name)
        summaries.append({
            "name": layer.name,
            "source": layer.source,
            "polygon_count": len(layer.polygons),
            "bbox": list(layer.bbox) if layer.bbox else None,
        })
    return summaries


@router.get("/{name}/bbox")
def get_layer_bbox(
    name: str,
    settings: config.Settings = fastapi.Depends(config.get_settings),  # noqa: B008
    store: boundary_store.BoundaryLayerStore = fastapi.Depends(lookup._get_store),  # noqa: B008
) -> dict[str, models.BBox | None]:
    """Get the bounding box for a configured layer.

    The bbox is the one the lookup uses to reject points before scanning
    polygons, so it explains why a point resolved to null.

    Args:
        name: Layer (chamber) name.
        settings: Application settings (injected via FastAPI Depends).
        store: Boundary layer store (injected via FastAPI Depends).

    Returns:
        Dictionary containing the bounding box as
        [min_lon, min_lat, max_lon, max_lat], or None if the layer has no
        geometry.

    Raises:
        HTTPException: If the layer is not configured (404 status code) or
            cannot be loaded (500 status code).
    """
    if name not in settings.layers:
        raise fastapi.HTTPException(
            status_code=404,
            detail="Layer not found",
        )

    return {"bbox": _load_layer(store, name).bbox}
