"""Map a navigational warning message to an S-124 dataset.

A dataset holds one preamble, then one part per message part (in index
order), then one reference record per referenced navigational warning::

    dataset = map_message(DatasetInfo.for_messages(settings, [msg]), msg, "en")
    dataset.preamble.id          # "DK.DK-001-24"
    dataset.parts[0].id          # "urn:mrn:iho:nw:dk:dk-001-24.1"

A ``DatasetMapper`` holds no per-call state and can be shared; every call to
``map`` builds its own geometry id sequence.
"""

from __future__ import annotations

import logging
import uuid as uuidlib
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel

from .classification import general_warning_type, reference_category, restriction_for
from .config import Settings
from .dates import as_aware, local_date
from .errors import ValidationError
from .geometry import bounding_shape_for, convert_feature_collection
from .gml import (
    AffectedChartPublication,
    Dataset,
    DatasetIdentification,
    FeatureReference,
    FixedDateRange,
    GeneralArea,
    Information,
    LocalizedText,
    Part,
    PartGeometry,
    Preamble,
    ReferenceRecord,
    WarningInformation,
)
from .identifiers import (
    GeometryIdSequence,
    generate_dataset_id,
    message_id,
    message_mrn,
    message_series_identifier,
    part_id,
)
from .language import FALLBACK_LANGUAGE, html_to_text, is_blank, resolve_desc
from .model import Area, MainType, Message, MessagePart, MessageType, ReferenceType

logger = logging.getLogger(__name__)


class DatasetInfo(BaseModel):
    """Dataset level metadata written to the identification block."""

    dataset_id: str
    file_identifier: str
    title: str
    abstract: Optional[str] = None
    language: str = "eng"
    purpose: str = "base"
    encoding_specification: str = "S100 Part 10b"
    encoding_specification_edition: str = "2.0.0"
    product_identifier: str = "S-124"
    product_edition: str = "2.0.0"

    @classmethod
    def for_messages(
        cls, settings: Settings, messages: Sequence[Message], uuid: Optional[str] = None
    ) -> "DatasetInfo":
        uuid = uuid or str(uuidlib.uuid4())
        ids = [message_id(m, settings.country) for m in messages]
        titles = []
        for m in messages:
            desc = resolve_desc(m.descs, FALLBACK_LANGUAGE)
            if desc is not None and not is_blank(desc.title):
                titles.append(desc.title.strip())
        title = f"{settings.organisation} navigational warnings"
        if ids:
            title += ": " + ", ".join(ids)
        return cls(
            dataset_id=generate_dataset_id(settings.dataset_id_prefix, uuid),
            file_identifier=f"S124_{settings.organisation}_{uuid}.gml",
            title=title,
            abstract="; ".join(titles) or None,
        )


def validate_input(dataset_info: Optional[DatasetInfo], message: Optional[Message]) -> None:
    if dataset_info is None:
        raise ValidationError("Dataset info is required")
    if message is None:
        raise ValidationError("Message is required")
    if message.main_type != MainType.NW:
        main_type = message.main_type.value if message.main_type else None
        raise ValidationError(
            f"Only navigational warnings (NW) can be mapped to S-124, got {main_type}"
        )


class DatasetMapper:
    def __init__(self, settings: Optional[Settings] = None, today: Optional[date] = None):
        self.settings = settings or Settings()
        self.today = today

    def reference_date(self) -> date:
        return self.today or datetime.now(self.settings.tzinfo).date()

    def map(
        self,
        dataset_info: Optional[DatasetInfo],
        message: Optional[Message],
        language: str = FALLBACK_LANGUAGE,
    ) -> Dataset:
        validate_input(dataset_info, message)
        return _MappingCall(self.settings, message, language).build(
            dataset_info, self.reference_date()
        )


def map_message(
    dataset_info: Optional[DatasetInfo],
    message: Optional[Message],
    language: str = FALLBACK_LANGUAGE,
    settings: Optional[Settings] = None,
) -> Dataset:
    return DatasetMapper(settings).map(dataset_info, message, language)


# --- One mapping call ---
class _MappingCall:
    """State of a single ``map`` call: the message, its ids and the geometry sequence."""

    def __init__(self, settings: Settings, message: Message, language: Optional[str]):
        self.settings = settings
        self.message = message
        self.language = language or FALLBACK_LANGUAGE
        self.zone = settings.tzinfo
        self.id = message_id(message, settings.country)
        self.mrn = message_mrn(message, settings.country)
        self.geometry_ids = GeometryIdSequence()
        self.targets = self._navwarn_targets()

    def _navwarn_targets(self) -> List[Tuple[Message, Optional[ReferenceType]]]:
        targets = []
        for ref in self.message.references:
            if ref.message is None:
                logger.debug("Dropping reference %s of %s: target not loaded", ref.message_id, self.id)
            elif ref.message.main_type != MainType.NW:
                logger.debug("Dropping reference of %s to a non-NW message", self.id)
            elif message_id(ref.message, self.settings.country) == self.id:
                logger.warning("Dropping reference of %s to itself", self.id)
            else:
                targets.append((ref.message, ref.type))
        return targets

    def build(self, info: DatasetInfo, reference_date: date) -> Dataset:
        dataset = Dataset(
            id=info.dataset_id,
            identification=DatasetIdentification(
                encoding_specification=info.encoding_specification,
                encoding_specification_edition=info.encoding_specification_edition,
                product_identifier=info.product_identifier,
                product_edition=info.product_edition,
                dataset_file_identifier=info.file_identifier,
                dataset_title=info.title,
                dataset_reference_date=reference_date,
                dataset_language=info.language,
                dataset_abstract=info.abstract,
                dataset_purpose=info.purpose,
            ),
            bounded_by=bounding_shape_for(self.message.feature_collections()),
        )

        preamble = self.build_preamble()
        dataset.members.append(preamble)
        for part in self.message.sorted_parts():
            dataset.members.append(self.build_part(part, preamble.id))

        records = self.build_reference_records()
        dataset.members.extend(records)
        preamble.the_references = [FeatureReference(f"#{r.id}", "reference") for r in records]
        return dataset

    # --- Preamble ---
    def build_preamble(self) -> Preamble:
        message = self.message
        general_type = general_warning_type(
            message.categories, message.sorted_parts(), self.language
        )
        return Preamble(
            id=self.id,
            message_series_identifier=message_series_identifier(message, self.settings),
            navwarn_titles=[
                LocalizedText(d.lang, d.title.strip())
                for d in message.descs
                if not is_blank(d.title)
            ],
            general_areas=[GeneralArea(self._area_name(a)) for a in message.areas],
            localities=self._localities(),
            affected_chart_publications=[
                AffectedChartPublication(
                    chart_number=c.chart_number.strip(),
                    international_chart_number=c.international_number,
                )
                for c in message.charts
                if not is_blank(c.chart_number)
            ],
            cancellation_date=as_aware(message.publish_date_to, self.zone),
            int_service=message.type != MessageType.LOCAL_WARNING,
            navwarn_type_general=general_type,
            publication_time=as_aware(message.publish_date_from, self.zone),
        )

    def _area_name(self, area: Area) -> LocalizedText:
        desc = resolve_desc(area.descs, self.language)
        if desc is not None and not is_blank(desc.name):
            return LocalizedText(desc.lang, desc.name.strip())
        if area.id is not None:
            return LocalizedText(None, str(area.id))
        return LocalizedText(None, area.mrn or "")

    def _localities(self) -> List[LocalizedText]:
        desc = resolve_desc(self.message.descs, self.language)
        if desc is None or is_blank(desc.vicinity):
            return []
        return [LocalizedText(desc.lang, desc.vicinity.strip())]

    # --- Parts ---
    def build_part(self, part: MessagePart, preamble_id: str) -> Part:
        pid = part_id(self.mrn, part)
        properties = convert_feature_collection(
            part.geometry, lambda: self.geometry_ids.next_id(pid)
        )
        return Part(
            id=pid,
            bounded_by=bounding_shape_for([part.geometry]),
            header=FeatureReference(f"#{preamble_id}", "header"),
            affects=[
                FeatureReference(
                    f"#{message_id(target, self.settings.country)}",
                    ref_type.value if ref_type else "reference",
                )
                for target, ref_type in self.targets
            ],
            fixed_date_ranges=[
                FixedDateRange(
                    date_start=local_date(i.from_date, self.zone),
                    date_end=local_date(i.to_date, self.zone),
                )
                for i in part.event_dates
            ],
            warning_information=self._warning_information(part),
            geometries=[PartGeometry(p) for p in properties],
            restriction=restriction_for(self.message.tags),
        )

    def _warning_information(self, part: MessagePart) -> WarningInformation:
        desc = resolve_desc(part.descs, self.language)
        if desc is None:
            return WarningInformation()
        return WarningInformation(
            Information(
                language=desc.lang,
                headline=None if is_blank(desc.subject) else desc.subject.strip(),
                text=html_to_text(desc.details),
            )
        )

    # --- References ---
    def build_reference_records(self) -> List[ReferenceRecord]:
        records: List[ReferenceRecord] = []
        seen = set()
        for target, ref_type in self.targets:
            rid = message_id(target, self.settings.country)
            if rid in seen:
                logger.debug("Skipping second reference record for %s", rid)
                continue
            seen.add(rid)
            records.append(
                ReferenceRecord(
                    id=rid,
                    no_message_on_hand=ref_type == ReferenceType.CANCELLATION,
                    reference_category=reference_category(ref_type),
                    message_series_identifiers=[message_series_identifier(target, self.settings)],
                )
            )
        return records
