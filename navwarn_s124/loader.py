"""Build message graphs from message JSON.

Accepts the camelCase message JSON of the message-management system: a single
message object, a list of them, or an object with a ``messages`` list.
Timestamps may be epoch milliseconds or ISO-8601 strings. References between
messages of the same batch are resolved to the loaded objects.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests
from dateutil import parser as dtparser

from .errors import LoadError, UnsupportedGeometryError
from .geojson import parse_feature_collection
from .model import (
    Area,
    AreaDesc,
    Category,
    CategoryDesc,
    Chart,
    DateInterval,
    MainType,
    Message,
    MessageDesc,
    MessagePart,
    MessagePartDesc,
    MessageSeries,
    MessageTag,
    MessageType,
    Reference,
    ReferenceType,
    Status,
)

logger = logging.getLogger(__name__)

# ---------------- Configuration ----------------
REQUEST_TIMEOUT = 20  # seconds
MAX_RETRIES = 4
RETRY_BACKOFF = 2.0  # exponential backoff factor
HEADERS = {"Accept": "application/json"}
# ------------------------------------------------

session = requests.Session()
session.headers.update(HEADERS)


# --- Scalars ---
def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    try:
        return dtparser.isoparse(str(value))
    except ValueError:
        try:
            return dtparser.parse(str(value))
        except (ValueError, OverflowError) as e:
            raise LoadError(f"Invalid timestamp: {value!r}") from e


def _enum(enum_cls, value: Any):
    if value is None or value == "":
        return None
    for candidate in (value, str(value).upper(), str(value).lower()):
        try:
            return enum_cls(candidate)
        except ValueError:
            pass
    try:
        return enum_cls[str(value).upper().replace("-", "_")]
    except KeyError:
        logger.warning("Unknown %s value %r", enum_cls.__name__, value)
        return None


# --- Entities ---
def _descs(raw: Optional[List[Dict[str, Any]]], cls, **fields):
    return [
        cls(lang=d.get("lang"), **{attr: d.get(key) for attr, key in fields.items()})
        for d in raw or []
        if d.get("lang")
    ]


def _entries(raw: Any, what: str) -> List[Dict[str, Any]]:
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(e, dict) for e in raw):
        raise LoadError(f"Expected {what} to be a list of objects, got {raw!r}")
    return raw


def _part(raw: Dict[str, Any], position: int) -> MessagePart:
    index_no = raw.get("indexNo")
    try:
        index_no = position if index_no is None else int(index_no)
    except (TypeError, ValueError) as e:
        raise LoadError(f"Part {position}: invalid indexNo {index_no!r}") from e
    try:
        geometry = parse_feature_collection(raw.get("geometry"))
    except UnsupportedGeometryError as e:
        raise LoadError(f"Part {index_no}: {e}") from e
    return MessagePart(
        index_no=index_no,
        descs=_descs(raw.get("descs"), MessagePartDesc, subject="subject", details="details"),
        event_dates=[
            DateInterval(
                from_date=parse_timestamp(d.get("fromDate")),
                to_date=parse_timestamp(d.get("toDate")),
                all_day=bool(d.get("allDay", False)),
            )
            for d in _entries(raw.get("eventDates"), "eventDates")
        ],
        geometry=geometry,
    )


def _tag(raw: Any) -> MessageTag:
    if isinstance(raw, str):
        return MessageTag(name=raw)
    return MessageTag(name=raw.get("name") or raw.get("tagId") or "", tag_id=raw.get("tagId"))


def message_from_dict(data: Dict[str, Any]) -> Message:
    """Build one message; references keep only the raw target id."""
    if not isinstance(data, dict):
        raise LoadError(f"Expected a message object, got {data!r}")
    series = data.get("messageSeries")
    return Message(
        id=data.get("id"),
        short_id=data.get("shortId"),
        main_type=_enum(MainType, data.get("mainType")),
        type=_enum(MessageType, data.get("type")),
        status=_enum(Status, data.get("status")),
        number=data.get("number"),
        publish_date_from=parse_timestamp(data.get("publishDateFrom")),
        publish_date_to=parse_timestamp(data.get("publishDateTo")),
        message_series=(
            MessageSeries(series_id=series["seriesId"], main_type=_enum(MainType, series.get("mainType")))
            if series and series.get("seriesId")
            else None
        ),
        descs=_descs(data.get("descs"), MessageDesc, title="title", vicinity="vicinity"),
        parts=[_part(p, i + 1) for i, p in enumerate(_entries(data.get("parts"), "parts"))],
        areas=[
            Area(id=a.get("id"), mrn=a.get("mrn"), descs=_descs(a.get("descs"), AreaDesc, name="name"))
            for a in data.get("areas") or []
        ],
        charts=[
            Chart(
                chart_number=c.get("chartNumber"),
                international_number=c.get("internationalNumber"),
                name=c.get("name"),
                scale=c.get("scale"),
            )
            for c in data.get("charts") or []
        ],
        categories=[
            Category(
                id=c.get("id"),
                legacy_id=c.get("legacyId"),
                descs=_descs(c.get("descs"), CategoryDesc, name="name"),
            )
            for c in data.get("categories") or []
        ],
        tags=[_tag(t) for t in data.get("tags") or []],
        references=[
            Reference(
                message_id=None if r.get("messageId") is None else str(r.get("messageId")),
                type=_enum(ReferenceType, r.get("type")),
            )
            for r in data.get("references") or []
        ],
    )


def _keys(message: Message) -> List[str]:
    return [str(k) for k in (message.id, message.short_id) if k is not None]


def load_messages(data: Any) -> List[Message]:
    """Build all messages in ``data`` and link their references to each other."""
    if isinstance(data, dict):
        raw = data["messages"] if "messages" in data else [data]
    else:
        raw = data
    if not isinstance(raw, list):
        raise LoadError(f"Expected a message object or list, got {type(raw).__name__}")
    messages = []
    for position, entry in enumerate(raw, 1):
        try:
            messages.append(message_from_dict(entry))
        except (TypeError, AttributeError, KeyError, ValueError) as e:
            raise LoadError(f"Malformed message {position}: {e}") from e
    by_key = {key: m for m in messages for key in _keys(m)}
    for m in messages:
        for ref in m.references:
            ref.message = by_key.get(ref.message_id)
            if ref.message is None:
                logger.info("Reference %s of message %s not in batch", ref.message_id, m.id)
    return messages


# --- Sources ---
def fetch_json(url: str) -> Any:
    """Fetch URL with retries and decode the JSON body."""
    for attempt in range(1, MAX_RETRIES + 1):
        try:
            resp = session.get(url, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            logger.warning(
                "Request error on %s (attempt %d/%d): %s", url, attempt, MAX_RETRIES, e
            )
        else:
            if 200 <= resp.status_code < 300:
                try:
                    return resp.json()
                except ValueError as e:
                    raise LoadError(f"Invalid JSON from {url}: {e}") from e
            logger.warning("HTTP %s for %s", resp.status_code, url)
        if attempt < MAX_RETRIES:
            time.sleep((RETRY_BACKOFF ** (attempt - 1)) + (0.1 * attempt))
    raise LoadError(f"Failed to fetch {url} after {MAX_RETRIES} attempts")


def load_source(source: Union[str, Path]) -> List[Message]:
    """Load messages from an http(s) URL or a JSON file."""
    text_source = str(source)
    if text_source.startswith(("http://", "https://")):
        return load_messages(fetch_json(text_source))
    path = Path(source)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LoadError(f"Cannot read {path}: {e}") from e
    return load_messages(data)
