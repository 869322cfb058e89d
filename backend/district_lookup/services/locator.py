"""Point-in-polygon lookup against a single boundary layer.

A query first checks the layer's bounding box, which cheaply rejects points
outside the covered region (or given in the wrong coordinate order), and
then scans the layer's polygons in stored order. The first polygon that
covers the point wins; a point on an edge shared by two districts therefore
resolves to whichever district comes first in the source file.

Example:
    >>> from district_lookup.boundaries import models
    >>> from district_lookup.services import locator
    >>> point = models.QueryPoint(lon=-96.7970, lat=32.7767)
    >>> polygon = locator.locate(layer, point)
    >>> polygon.attributes if polygon else None
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shapely import geometry as shapely_geometry

if TYPE_CHECKING:
    from district_lookup.boundaries import models


def point_in_bbox(point: models.QueryPoint, bbox: models.BBox | None) -> bool:
    """Check whether a point lies inside a bbox, edges included.

    A missing bbox cannot reject anything and counts as containing the
    point.
    """
    if bbox is None:
        return True

    min_lon, min_lat, max_lon, max_lat = bbox
    return min_lon <= point.lon <= max_lon and min_lat <= point.lat <= max_lat


def _contains(
    polygon: models.DistrictPolygon, point: shapely_geometry.Point
) -> bool:
    # covers() includes the boundary, so edge points match a district
    return bool(polygon.prepared_geometry.covers(point))


def locate(
    layer: models.BoundaryLayer,
    point: models.QueryPoint,
) -> models.DistrictPolygon | None:
    """Find the first polygon of a layer containing a point.

    Args:
        layer: Loaded boundary layer.
        point: WGS84 query point.

    Returns:
        The first polygon in stored order that covers the point, or None
        when the point is outside the layer's bbox or in no polygon.
    """
    if not point_in_bbox(point, layer.bbox):
        return None

    shape = shapely_geometry.Point(point.lon, point.lat)
    for polygon in layer.polygons:
        if not polygon.is_polygonal:
            continue
        if _contains(polygon, shape):
            return polygon

    return None
