"""In-memory S-124 dataset tree.

Built fresh by each mapping call and handed to the marshaller. Positions are
stored in (lat, lon) order; the only way to make one from a GeoJSON position
is through ``from_lon_lat``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple, Union

from .geojson import Position

EPSG_4326 = "EPSG:4326"


# --- Positions ---
@dataclass(frozen=True)
class Pos:
    lat: float
    lon: float

    @classmethod
    def from_lon_lat(cls, position: Position) -> "Pos":
        lon, lat = position
        return cls(lat=lat, lon=lon)

    def values(self) -> Tuple[float, float]:
        return (self.lat, self.lon)


@dataclass(frozen=True)
class PosList:
    positions: Tuple[Pos, ...]

    @classmethod
    def from_lon_lat(cls, positions: Sequence[Position]) -> "PosList":
        return cls(tuple(Pos.from_lon_lat(p) for p in positions))

    def values(self) -> List[float]:
        return [v for pos in self.positions for v in pos.values()]


@dataclass(frozen=True)
class Envelope:
    lower_corner: Pos
    upper_corner: Pos
    srs_name: str = EPSG_4326


@dataclass(frozen=True)
class BoundingShape:
    envelope: Optional[Envelope] = None

    @property
    def is_empty(self) -> bool:
        return self.envelope is None


# --- Spatial properties ---
@dataclass
class PointGeometry:
    id: str
    pos: Pos
    srs_name: str = EPSG_4326


@dataclass
class PointProperty:
    point: PointGeometry


@dataclass
class LineStringSegment:
    pos_list: PosList


@dataclass
class Curve:
    id: str
    segments: List[LineStringSegment]
    srs_name: str = EPSG_4326


@dataclass
class CurveProperty:
    curve: Curve


@dataclass
class LinearRing:
    pos_list: PosList


@dataclass
class PolygonPatch:
    exterior: LinearRing
    interiors: List[LinearRing] = field(default_factory=list)


@dataclass
class Surface:
    id: str
    patches: List[PolygonPatch]
    srs_name: str = EPSG_4326


@dataclass
class SurfaceProperty:
    surface: Surface


SpatialProperty = Union[PointProperty, CurveProperty, SurfaceProperty]


def spatial_id(prop: SpatialProperty) -> str:
    if isinstance(prop, PointProperty):
        return prop.point.id
    if isinstance(prop, CurveProperty):
        return prop.curve.id
    return prop.surface.id


@dataclass
class PartGeometry:
    """Holder placing one spatial property in a part's geometry list."""

    property: SpatialProperty


# --- Attributes ---
@dataclass(frozen=True)
class Code:
    code: int
    value: str


@dataclass
class LocalizedText:
    language: Optional[str]
    text: str


@dataclass
class FeatureReference:
    href: str
    role: str


@dataclass
class MessageSeriesIdentifier:
    interoperability_identifier: str
    name_of_series: Optional[str] = None
    warning_type: Optional[Code] = None
    warning_number: Optional[int] = None
    year: Optional[int] = None
    production_agency: Optional[str] = None
    country: Optional[str] = None


@dataclass
class AffectedChartPublication:
    chart_number: str
    international_chart_number: Optional[int] = None
    publication_date: Optional[date] = None


@dataclass
class GeneralArea:
    location_name: LocalizedText


@dataclass
class FixedDateRange:
    date_start: Optional[date] = None
    date_end: Optional[date] = None


@dataclass
class Information:
    language: str
    headline: Optional[str] = None
    text: Optional[str] = None


@dataclass
class WarningInformation:
    information: Optional[Information] = None


# --- Features ---
@dataclass
class Preamble:
    id: str
    message_series_identifier: MessageSeriesIdentifier
    navwarn_titles: List[LocalizedText] = field(default_factory=list)
    general_areas: List[GeneralArea] = field(default_factory=list)
    localities: List[LocalizedText] = field(default_factory=list)
    affected_chart_publications: List[AffectedChartPublication] = field(default_factory=list)
    cancellation_date: Optional[datetime] = None
    int_service: bool = True
    navwarn_type_general: Optional[Code] = None
    publication_time: Optional[datetime] = None
    the_references: List[FeatureReference] = field(default_factory=list)


@dataclass
class Part:
    id: str
    bounded_by: BoundingShape = field(default_factory=BoundingShape)
    header: Optional[FeatureReference] = None
    affects: List[FeatureReference] = field(default_factory=list)
    fixed_date_ranges: List[FixedDateRange] = field(default_factory=list)
    warning_information: WarningInformation = field(default_factory=WarningInformation)
    geometries: List[PartGeometry] = field(default_factory=list)
    restriction: Optional[Code] = None


@dataclass
class ReferenceRecord:
    id: str
    no_message_on_hand: bool = False
    reference_category: Optional[str] = None
    message_series_identifiers: List[MessageSeriesIdentifier] = field(default_factory=list)


Member = Union[Preamble, Part, ReferenceRecord]


@dataclass
class DatasetIdentification:
    encoding_specification: str
    encoding_specification_edition: str
    product_identifier: str
    product_edition: str
    dataset_file_identifier: str
    dataset_title: str
    dataset_reference_date: date
    dataset_language: str
    dataset_abstract: Optional[str] = None
    dataset_purpose: str = "base"


@dataclass
class Dataset:
    id: str
    identification: DatasetIdentification
    bounded_by: BoundingShape = field(default_factory=BoundingShape)
    members: List[Member] = field(default_factory=list)

    @property
    def preamble(self) -> Optional[Preamble]:
        return next((m for m in self.members if isinstance(m, Preamble)), None)

    @property
    def parts(self) -> List[Part]:
        return [m for m in self.members if isinstance(m, Part)]

    @property
    def references(self) -> List[ReferenceRecord]:
        return [m for m in self.members if isinstance(m, ReferenceRecord)]
