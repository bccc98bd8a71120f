"""GeoJSON geometry as a closed set of dataclasses.

Positions are (lon, lat) tuples, the GeoJSON axis order. Nothing in this
module swaps axes; that happens once, when output positions are built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .errors import UnsupportedGeometryError

Position = Tuple[float, float]  # (lon, lat)
Ring = List[Position]


# --- Geometry variants ---
@dataclass(frozen=True)
class Point:
    coordinates: Position


@dataclass(frozen=True)
class LineString:
    coordinates: List[Position]


@dataclass(frozen=True)
class Polygon:
    # First ring is the exterior, any further rings are holes
    rings: List[Ring]

    @property
    def exterior(self) -> Ring:
        return self.rings[0] if self.rings else []

    @property
    def interiors(self) -> List[Ring]:
        return self.rings[1:]


@dataclass(frozen=True)
class MultiPoint:
    points: List[Point]


@dataclass(frozen=True)
class MultiLineString:
    lines: List[LineString]


@dataclass(frozen=True)
class MultiPolygon:
    polygons: List[Polygon]


@dataclass(frozen=True)
class GeometryCollection:
    geometries: List["Geometry"]


Geometry = Union[
    Point,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
]


# --- Features ---
@dataclass
class Feature:
    geometry: Optional[Geometry]
    properties: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None


@dataclass
class FeatureCollection:
    features: List[Feature] = field(default_factory=list)

    def geometries(self) -> List[Geometry]:
        return [f.geometry for f in self.features if f.geometry is not None]


def iter_positions(geometry: Geometry) -> Iterator[Position]:
    """Yield every (lon, lat) position of a geometry, depth first."""
    if isinstance(geometry, Point):
        yield geometry.coordinates
    elif isinstance(geometry, LineString):
        yield from geometry.coordinates
    elif isinstance(geometry, Polygon):
        for ring in geometry.rings:
            yield from ring
    elif isinstance(geometry, MultiPoint):
        for p in geometry.points:
            yield p.coordinates
    elif isinstance(geometry, MultiLineString):
        for line in geometry.lines:
            yield from line.coordinates
    elif isinstance(geometry, MultiPolygon):
        for poly in geometry.polygons:
            yield from iter_positions(poly)
    elif isinstance(geometry, GeometryCollection):
        for g in geometry.geometries:
            yield from iter_positions(g)
    else:
        raise UnsupportedGeometryError(
            f"Unsupported geometry type: {type(geometry).__name__}"
        )


# --- Parsing ---
def _position(raw: Any) -> Position:
    try:
        lon, lat = float(raw[0]), float(raw[1])
    except (TypeError, ValueError, IndexError) as e:
        raise UnsupportedGeometryError(f"Invalid position: {raw!r}") from e
    return (lon, lat)


def _positions(raw: Any) -> List[Position]:
    return [_position(p) for p in raw or []]


def _polygon(raw: Any) -> Polygon:
    return Polygon(rings=[_positions(ring) for ring in raw or []])


def parse_geometry(data: Optional[Dict[str, Any]]) -> Optional[Geometry]:
    """Build a geometry from a GeoJSON geometry object (``None`` passes through)."""
    if data is None:
        return None
    gtype = data.get("type")
    coords = data.get("coordinates")
    if gtype == "Point":
        return Point(_position(coords))
    if gtype == "LineString":
        return LineString(_positions(coords))
    if gtype == "Polygon":
        return _polygon(coords)
    if gtype == "MultiPoint":
        return MultiPoint([Point(p) for p in _positions(coords)])
    if gtype == "MultiLineString":
        return MultiLineString([LineString(_positions(line)) for line in coords or []])
    if gtype == "MultiPolygon":
        return MultiPolygon([_polygon(poly) for poly in coords or []])
    if gtype == "GeometryCollection":
        members = [parse_geometry(g) for g in data.get("geometries") or []]
        return GeometryCollection([g for g in members if g is not None])
    raise UnsupportedGeometryError(f"Unsupported geometry type: {gtype!r}")


def parse_feature_collection(data: Optional[Dict[str, Any]]) -> Optional[FeatureCollection]:
    """Accept a FeatureCollection, a single Feature or a bare geometry."""
    if not data:
        return None
    gtype = data.get("type")
    if gtype == "FeatureCollection":
        raw_features = data.get("features") or []
    elif gtype == "Feature":
        raw_features = [data]
    else:
        return FeatureCollection([Feature(parse_geometry(data))])
    features = [
        Feature(
            geometry=parse_geometry(f.get("geometry")),
            properties=dict(f.get("properties") or {}),
            id=f.get("id"),
        )
        for f in raw_features
    ]
    return FeatureCollection(features)
