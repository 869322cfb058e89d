"""Pytest configuration and shared boundary fixtures.

Exposes the backend package for imports and provides small synthetic
boundary layers shaped around Dallas, so lookup behaviour can be tested
without the real district files.
"""

from __future__ import annotations

import json
import pathlib
import sys
from typing import Any

import pytest

BACKEND_ROOT = pathlib.Path(__file__).resolve().parent

if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

DALLAS = (-96.7970, 32.7767)


def square(
    min_lon: float, min_lat: float, max_lon: float, max_lat: float
) -> list[list[list[float]]]:
    """Polygon coordinates of an axis-aligned square, counter-clockwise."""
    return [[
        [min_lon, min_lat],
        [max_lon, min_lat],
        [max_lon, max_lat],
        [min_lon, max_lat],
        [min_lon, min_lat],
    ]]


def feature(
    coordinates: Any,
    properties: dict[str, Any] | None,
    geometry_type: str = "Polygon",
) -> dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {"type": geometry_type, "coordinates": coordinates},
        "properties": properties,
    }


def collection(
    features: list[dict[str, Any]],
    bbox: list[float] | None = None,
) -> dict[str, Any]:
    result: dict[str, Any] = {"type": "FeatureCollection", "features": features}
    if bbox is not None:
        result["bbox"] = bbox
    return result


HOUSE = collection([
    feature(
        square(-97.5, 32.5, -96.5, 33.5),
        {
            "OBJECTID": 7,
            "SLDLST": "108",
            "NAMELSAD": "State House District 108",
        },
    ),
    feature(
        square(-98.5, 32.5, -97.5, 33.5),
        {
            "OBJECTID": 8,
            "SLDLST": "093",
            "NAMELSAD": "State House District 93",
        },
    ),
])

SENATE = collection([
    feature(
        square(-98.0, 32.0, -96.0, 34.0),
        {"OBJECTID": 1, "NAMELSAD": "State Senate District 16"},
    ),
    feature(square(-100.0, 32.0, -98.0, 34.0), {"DISTRICT": 22}),
])

SBOE = collection(
    [
        feature(
            [
                square(-97.5, 32.5, -96.5, 33.5),
                square(-95.5, 29.5, -95.0, 30.0),
            ],
            {"OBJECTID": 3, "SBOEDistrictCode": "13"},
            geometry_type="MultiPolygon",
        ),
    ],
    bbox=[-106.65, 25.84, -93.51, 36.5],
)


def encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8")


@pytest.fixture
def layer_payloads() -> dict[str, bytes]:
    """Raw GeoJSON bytes for the three synthetic layers."""
    return {"house": encode(HOUSE), "senate": encode(SENATE), "sboe": encode(SBOE)}


@pytest.fixture
def boundary_dir(
    tmp_path: pathlib.Path, layer_payloads: dict[str, bytes]
) -> pathlib.Path:
    """Directory holding the synthetic layers under their default names."""
    names = {
        "house": "tx-house-2025.geojson",
        "senate": "tx-senate-2025.geojson",
        "sboe": "tx-sboe-2025.geojson",
    }
    for layer, filename in names.items():
        (tmp_path / filename).write_bytes(layer_payloads[layer])
    return tmp_path


def _parse(name: str, payload: dict[str, Any]) -> Any:
    from district_lookup.boundaries import models
    from district_lookup.utils import geojson_helpers

    polygons, bbox = geojson_helpers.parse_feature_collection(
        name, encode(payload)
    )
    return models.BoundaryLayer(
        name=name, polygons=polygons, bbox=bbox, source=f"memory:{name}"
    )


@pytest.fixture
def house_layer() -> Any:
    return _parse("house", HOUSE)


@pytest.fixture
def senate_layer() -> Any:
    return _parse("senate", SENATE)


@pytest.fixture
def sboe_layer() -> Any:
    return _parse("sboe", SBOE)


@pytest.fixture
def dallas() -> Any:
    from district_lookup.boundaries import models

    return models.QueryPoint(lon=DALLAS[0], lat=DALLAS[1])
