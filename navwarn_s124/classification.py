"""Lookup tables from message vocabulary to S-124 codes."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .gml import Code
from .language import desc_for, resolve_desc
from .model import Category, MessagePart, MessageTag, MessageType, ReferenceType

logger = logging.getLogger(__name__)

# --- Warning type ---
WARNING_TYPES = {
    MessageType.LOCAL_WARNING: Code(1, "local navigational warning"),
    MessageType.COASTAL_WARNING: Code(2, "coastal navigational warning"),
    MessageType.SUBAREA_WARNING: Code(3, "sub-area navigational warning"),
    MessageType.NAVAREA_WARNING: Code(4, "NAVAREA navigational warning"),
}

# --- Restriction ---
ENTRY_PROHIBITED = Code(1, "entry prohibited")
ENTRY_RESTRICTED = Code(2, "entry restricted")
RESTRICTION_TAGS = {
    "RESTRICTED": ENTRY_PROHIBITED,
    "CAUTION": ENTRY_RESTRICTED,
}

# --- General warning type ---
AIDS_TO_NAVIGATION_CHANGES = Code(1, "aids to navigation changes")
DANGEROUS_NATURAL_PHENOMENA = Code(2, "dangerous natural phenomena")
DRIFTING_HAZARDS = Code(3, "drifting hazards")
NEWLY_DISCOVERED_DANGERS = Code(4, "newly discovered dangers")
COMMUNICATION_SERVICE_CHANGE = Code(5, "communication service change")
SPECIAL_OPERATIONS = Code(6, "special operations")
OTHER_HAZARDS = Code(7, "other hazards")

# Checked in order against the lower-cased category name
CATEGORY_KEYWORDS = [
    ("light", AIDS_TO_NAVIGATION_CHANGES),
    ("buoy", AIDS_TO_NAVIGATION_CHANGES),
    ("beacon", AIDS_TO_NAVIGATION_CHANGES),
    ("drifting object", DRIFTING_HAZARDS),
    ("radio navigation", COMMUNICATION_SERVICE_CHANGE),
    ("firing exercises", SPECIAL_OPERATIONS),
]
OBSTRUCTION = "obstruction"

# --- Reference category ---
REFERENCE_CATEGORIES = {
    ReferenceType.CANCELLATION: "cancellation",
    ReferenceType.REPETITION: "repetition",
    ReferenceType.REPETITION_NEW_TIME: "repetition",
    ReferenceType.UPDATE: "update",
    ReferenceType.REFERENCE: "source reference",
}


def warning_type_code(message_type: Optional[MessageType]) -> Optional[Code]:
    """S-124 type of warning; notices and unknown values map to None."""
    code = WARNING_TYPES.get(message_type)
    if code is None:
        logger.warning("No S-124 warning type for message type %s", message_type)
    return code


def restriction_for(tags: Iterable[MessageTag]) -> Optional[Code]:
    """Restriction from the first RESTRICTED or CAUTION tag, if any."""
    for tag in tags or []:
        code = RESTRICTION_TAGS.get(tag.name)
        if code is not None:
            return code
    return None


def category_name(category: Category, language: Optional[str]) -> Optional[str]:
    desc = resolve_desc(category.descs, language)
    if desc is not None and desc.name:
        return desc.name
    return category.legacy_id


def _classify_obstruction(parts: List[MessagePart]) -> Code:
    desc = desc_for(parts[0].descs, "en") if parts else None
    if desc is None or not desc.subject:
        logger.warning(
            "Obstruction category without an English part subject; "
            "classified as special operations"
        )
        return SPECIAL_OPERATIONS
    subject = desc.subject.lower()
    if "wreck" in subject:
        return DANGEROUS_NATURAL_PHENOMENA
    if any(k in subject for k in ("uncharted", "obstruction", "depth", "reduced")):
        return NEWLY_DISCOVERED_DANGERS
    return SPECIAL_OPERATIONS


def general_warning_type(
    categories: List[Category], parts: List[MessagePart], language: Optional[str]
) -> Optional[Code]:
    """Classify the message by its first category.

    Returns None when the message has no categories. Unknown names fall
    through to ``OTHER_HAZARDS``.
    """
    if not categories:
        return None
    name = (category_name(categories[0], language) or "").lower()
    for keyword, code in CATEGORY_KEYWORDS:
        if keyword in name:
            return code
    if OBSTRUCTION in name:
        return _classify_obstruction(parts)
    return OTHER_HAZARDS


def reference_category(ref_type: Optional[ReferenceType]) -> str:
    return REFERENCE_CATEGORIES.get(ref_type, "source reference")
