"""Geometry conversion and bounding boxes.

Input geometry is GeoJSON (lon, lat). Output positions are (lat, lon), the
axis order of EPSG:4326 in S-100 GML.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .errors import UnsupportedGeometryError
from .geojson import (
    FeatureCollection,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    iter_positions,
)
from .gml import (
    BoundingShape,
    Curve,
    CurveProperty,
    Envelope,
    LinearRing,
    LineStringSegment,
    PointGeometry,
    PointProperty,
    Pos,
    PosList,
    PolygonPatch,
    SpatialProperty,
    Surface,
    SurfaceProperty,
)

BBox = Tuple[float, float, float, float]  # (min_lon, min_lat, max_lon, max_lat)


# --- Bounding boxes ---
def compute_bbox(geometries: Iterable[Geometry]) -> Optional[BBox]:
    """Smallest lon/lat rectangle enclosing all positions, or None if there are none."""
    min_lon = min_lat = float("inf")
    max_lon = max_lat = float("-inf")
    found = False
    for geometry in geometries:
        for lon, lat in iter_positions(geometry):
            found = True
            min_lon, max_lon = min(min_lon, lon), max(max_lon, lon)
            min_lat, max_lat = min(min_lat, lat), max(max_lat, lat)
    if not found:
        return None
    return (min_lon, min_lat, max_lon, max_lat)


def bounding_shape(bbox: Optional[BBox]) -> BoundingShape:
    if bbox is None:
        return BoundingShape()
    min_lon, min_lat, max_lon, max_lat = bbox
    return BoundingShape(
        Envelope(
            lower_corner=Pos.from_lon_lat((min_lon, min_lat)),
            upper_corner=Pos.from_lon_lat((max_lon, max_lat)),
        )
    )


def _collection_geometries(collections: Iterable[Optional[FeatureCollection]]) -> List[Geometry]:
    return [g for fc in collections if fc is not None for g in fc.geometries()]


def bounding_shape_for(collections: Iterable[Optional[FeatureCollection]]) -> BoundingShape:
    """Envelope for one or more feature collections."""
    return bounding_shape(compute_bbox(_collection_geometries(collections)))


def bounding_shape_for_messages(messages) -> BoundingShape:
    """Envelope over every part of every given message."""
    collections = [fc for m in messages for fc in m.feature_collections()]
    return bounding_shape_for(collections)


# --- Conversion ---
def _point(position, new_id: Callable[[], str]) -> PointProperty:
    return PointProperty(PointGeometry(id=new_id(), pos=Pos.from_lon_lat(position)))


def _curve(lines: Sequence[LineString], new_id: Callable[[], str]) -> CurveProperty:
    segments = [LineStringSegment(PosList.from_lon_lat(line.coordinates)) for line in lines]
    return CurveProperty(Curve(id=new_id(), segments=segments))


def _patch(polygon: Polygon) -> PolygonPatch:
    return PolygonPatch(
        exterior=LinearRing(PosList.from_lon_lat(polygon.exterior)),
        interiors=[LinearRing(PosList.from_lon_lat(r)) for r in polygon.interiors],
    )


def _surface(polygons: Sequence[Polygon], new_id: Callable[[], str]) -> SurfaceProperty:
    return SurfaceProperty(Surface(id=new_id(), patches=[_patch(p) for p in polygons]))


def convert_geometry(geometry: Geometry, new_id: Callable[[], str]) -> List[SpatialProperty]:
    """Convert one geometry to S-100 spatial properties.

    ``new_id`` is called once per produced point, curve or surface, in output
    order. Multi-points give one point each; multi-lines become one curve with
    a segment per line; multi-polygons become one surface with a patch per
    polygon. Collections are flattened in order.
    """
    if isinstance(geometry, Point):
        return [_point(geometry.coordinates, new_id)]
    if isinstance(geometry, MultiPoint):
        return [_point(p.coordinates, new_id) for p in geometry.points]
    if isinstance(geometry, LineString):
        return [_curve([geometry], new_id)]
    if isinstance(geometry, MultiLineString):
        return [_curve(geometry.lines, new_id)] if geometry.lines else []
    if isinstance(geometry, Polygon):
        return [_surface([geometry], new_id)]
    if isinstance(geometry, MultiPolygon):
        return [_surface(geometry.polygons, new_id)] if geometry.polygons else []
    if isinstance(geometry, GeometryCollection):
        return [prop for g in geometry.geometries for prop in convert_geometry(g, new_id)]
    raise UnsupportedGeometryError(f"Unsupported geometry type: {type(geometry).__name__}")


def convert_feature_collection(
    collection: Optional[FeatureCollection], new_id: Callable[[], str]
) -> List[SpatialProperty]:
    if collection is None:
        return []
    return [prop for g in collection.geometries() for prop in convert_geometry(g, new_id)]
