"""Message graph read by the mapper.

The graph is handed over fully loaded: parts, areas, charts, categories,
tags and references are already resolved to their target objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from .geojson import FeatureCollection


# --- Vocabulary ---
class MainType(Enum):
    NW = "NW"  # navigational warning
    NM = "NM"  # notice to mariners


class MessageType(Enum):
    PERMANENT_NOTICE = "PERMANENT_NOTICE"
    TEMPORARY_NOTICE = "TEMPORARY_NOTICE"
    PRELIMINARY_NOTICE = "PRELIMINARY_NOTICE"
    MISCELLANEOUS_NOTICE = "MISCELLANEOUS_NOTICE"
    COASTAL_WARNING = "COASTAL_WARNING"
    SUBAREA_WARNING = "SUBAREA_WARNING"
    NAVAREA_WARNING = "NAVAREA_WARNING"
    LOCAL_WARNING = "LOCAL_WARNING"


class Status(Enum):
    DRAFT = "DRAFT"
    VERIFIED = "VERIFIED"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"
    DELETED = "DELETED"


class ReferenceType(Enum):
    REFERENCE = "reference"
    REPETITION = "repetition"
    REPETITION_NEW_TIME = "repetition-new-time"
    CANCELLATION = "cancellation"
    UPDATE = "update"


# --- Localised descriptions ---
@dataclass
class MessageDesc:
    lang: str
    title: Optional[str] = None
    vicinity: Optional[str] = None


@dataclass
class MessagePartDesc:
    lang: str
    subject: Optional[str] = None
    details: Optional[str] = None  # may hold HTML


@dataclass
class AreaDesc:
    lang: str
    name: Optional[str] = None


@dataclass
class CategoryDesc:
    lang: str
    name: Optional[str] = None


# --- Entities ---
@dataclass
class Area:
    id: Optional[int] = None
    descs: List[AreaDesc] = field(default_factory=list)
    mrn: Optional[str] = None


@dataclass
class Chart:
    chart_number: Optional[str] = None
    international_number: Optional[int] = None
    name: Optional[str] = None
    scale: Optional[int] = None


@dataclass
class Category:
    id: Optional[int] = None
    descs: List[CategoryDesc] = field(default_factory=list)
    legacy_id: Optional[str] = None


@dataclass
class MessageTag:
    name: str
    tag_id: Optional[str] = None


@dataclass
class MessageSeries:
    series_id: str
    main_type: Optional[MainType] = None


@dataclass
class DateInterval:
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    all_day: bool = False


@dataclass
class MessagePart:
    index_no: int
    descs: List[MessagePartDesc] = field(default_factory=list)
    event_dates: List[DateInterval] = field(default_factory=list)
    geometry: Optional[FeatureCollection] = None


@dataclass
class Reference:
    message: Optional["Message"] = None
    type: Optional[ReferenceType] = None
    message_id: Optional[str] = None  # id as written in the source data


@dataclass
class Message:
    id: Optional[int] = None
    short_id: Optional[str] = None
    main_type: Optional[MainType] = None
    type: Optional[MessageType] = None
    status: Optional[Status] = None
    number: Optional[int] = None
    publish_date_from: Optional[datetime] = None
    publish_date_to: Optional[datetime] = None
    message_series: Optional[MessageSeries] = None
    descs: List[MessageDesc] = field(default_factory=list)
    parts: List[MessagePart] = field(default_factory=list)
    areas: List[Area] = field(default_factory=list)
    charts: List[Chart] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    tags: List[MessageTag] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)

    def sorted_parts(self) -> List[MessagePart]:
        return sorted(self.parts, key=lambda p: p.index_no)

    def feature_collections(self) -> List[FeatureCollection]:
        """The message geometry: the feature collections attached to its parts."""
        return [p.geometry for p in self.sorted_parts() if p.geometry is not None]
