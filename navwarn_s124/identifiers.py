"""Identifiers used in the dataset.

    message id     DK.DK-001-24
    mrn            urn:mrn:iho:nw:dk:dk-001-24
    part id        urn:mrn:iho:nw:dk:dk-001-24.1
    geometry id    G.urn:mrn:iho:nw:dk:dk-001-24.1.3
"""

from __future__ import annotations

import itertools
import uuid as uuidlib
from typing import Optional

from .classification import warning_type_code
from .config import Settings
from .dates import local_date
from .gml import MessageSeriesIdentifier
from .model import Message, MessagePart

DEFAULT_DATASET_PREFIX = "urn:mrn:test:s124:"


def _local_id(message: Message) -> str:
    if message.short_id and message.short_id.strip():
        return message.short_id.strip()
    return "" if message.id is None else str(message.id)


def message_id(message: Message, country: str) -> str:
    return f"{country}.{_local_id(message)}"


def message_mrn(message: Message, country: str) -> str:
    main_type = message.main_type.value if message.main_type else ""
    return f"urn:mrn:iho:{main_type.lower()}:{country.lower()}:{_local_id(message).lower()}"


def part_id(mrn: str, part: MessagePart) -> str:
    return f"{mrn}.{part.index_no}"


def generate_dataset_id(prefix: Optional[str] = None, uuid: Optional[str] = None) -> str:
    """Dataset MRN made of a prefix and a UUID, both optional."""
    prefix = prefix or DEFAULT_DATASET_PREFIX
    if not prefix.endswith(":"):
        prefix += ":"
    return f"{prefix}{uuid or uuidlib.uuid4()}"


class GeometryIdSequence:
    """Hands out ``G.<partId>.<n>`` ids, ``n`` counting from 1.

    One sequence belongs to one mapping call and runs across all its parts.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def next_id(self, part_id: str) -> str:
        return f"G.{part_id}.{next(self._counter)}"


def message_series_identifier(message: Message, settings: Settings) -> MessageSeriesIdentifier:
    published = local_date(message.publish_date_from, settings.tzinfo)
    return MessageSeriesIdentifier(
        interoperability_identifier=message_mrn(message, settings.country),
        name_of_series=message.message_series.series_id if message.message_series else None,
        warning_type=warning_type_code(message.type) if message.type else None,
        warning_number=message.number,
        year=published.year if published else None,
        production_agency=settings.production_agency,
        country=settings.country,
    )
