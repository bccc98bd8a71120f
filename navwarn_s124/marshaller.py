"""Write a dataset tree as S-124 GML.

Numbers are rendered by an explicit formatter, so the output never depends on
the process locale::

    xml = marshal(dataset)
    xml = marshal(dataset, number_format=lambda v: f"{v:.6f}")
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable, Optional
from xml.etree import ElementTree as ET

from .gml import (
    AffectedChartPublication,
    BoundingShape,
    Code,
    CurveProperty,
    Dataset,
    FeatureReference,
    LocalizedText,
    MessageSeriesIdentifier,
    Part,
    PointProperty,
    Pos,
    PosList,
    Preamble,
    ReferenceRecord,
    SpatialProperty,
    SurfaceProperty,
)

CONTENT_TYPE = "application/gml+xml; charset=UTF-8"

S124_NS = "http://www.iho.int/S124/2.0"
S100_NS = "http://www.iho.int/s100gml/5.0"
GML_NS = "http://www.opengis.net/gml/3.2"
XLINK_NS = "http://www.w3.org/1999/xlink"

NAMESPACES = {"S124": S124_NS, "S100": S100_NS, "gml": GML_NS, "xlink": XLINK_NS}
for _prefix, _uri in NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)

NumberFormat = Callable[[float], str]


def default_number_format(value: float) -> str:
    """Shortest text that reads back as the same float; '.' as separator."""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _q(ns: str, tag: str) -> str:
    return f"{{{ns}}}{tag}"


class GmlWriter:
    def __init__(self, number_format: Optional[NumberFormat] = None):
        self.number_format = number_format or default_number_format

    # --- Primitives ---
    def _sub(self, parent: ET.Element, ns: str, tag: str, text=None) -> ET.Element:
        el = ET.SubElement(parent, _q(ns, tag))
        if text is not None:
            el.text = self._text(text)
        return el

    def _opt(self, parent: ET.Element, ns: str, tag: str, value) -> None:
        if value is not None:
            self._sub(parent, ns, tag, value)

    def _text(self, value) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            return self.number_format(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return str(value)

    def _numbers(self, values: Iterable[float]) -> str:
        return " ".join(self.number_format(v) for v in values)

    def _gml_id(self, el: ET.Element, gml_id: str) -> None:
        el.set(_q(GML_NS, "id"), gml_id)

    def _pos(self, parent: ET.Element, tag: str, pos: Pos) -> None:
        self._sub(parent, GML_NS, tag).text = self._numbers(pos.values())

    def _pos_list(self, parent: ET.Element, pos_list: PosList) -> None:
        self._sub(parent, GML_NS, "posList").text = self._numbers(pos_list.values())

    def _bounded_by(self, parent: ET.Element, shape: BoundingShape) -> None:
        bounded = self._sub(parent, GML_NS, "boundedBy")
        if shape.is_empty:
            self._sub(bounded, GML_NS, "Null", "missing")
            return
        env = self._sub(bounded, GML_NS, "Envelope")
        env.set("srsName", shape.envelope.srs_name)
        self._pos(env, "lowerCorner", shape.envelope.lower_corner)
        self._pos(env, "upperCorner", shape.envelope.upper_corner)

    def _code(self, parent: ET.Element, tag: str, code: Optional[Code]) -> None:
        if code is None:
            return
        el = self._sub(parent, S124_NS, tag)
        el.set("code", str(code.code))
        el.text = code.value

    def _localized(self, parent: ET.Element, tag: str, item: LocalizedText) -> None:
        el = self._sub(parent, S124_NS, tag)
        self._opt(el, S124_NS, "language", item.language)
        self._sub(el, S124_NS, "text", item.text)

    def _link(self, parent: ET.Element, tag: str, ref: FeatureReference) -> None:
        el = self._sub(parent, S124_NS, tag)
        el.set(_q(XLINK_NS, "href"), ref.href)
        el.set(_q(XLINK_NS, "role"), ref.role)

    # --- Geometry ---
    def _spatial(self, parent: ET.Element, prop: SpatialProperty) -> None:
        geometry = self._sub(parent, S124_NS, "geometry")
        if isinstance(prop, PointProperty):
            holder = self._sub(geometry, S100_NS, "pointProperty")
            point = self._sub(holder, S100_NS, "Point")
            self._gml_id(point, prop.point.id)
            point.set("srsName", prop.point.srs_name)
            self._pos(point, "pos", prop.point.pos)
        elif isinstance(prop, CurveProperty):
            holder = self._sub(geometry, S100_NS, "curveProperty")
            curve = self._sub(holder, S100_NS, "Curve")
            self._gml_id(curve, prop.curve.id)
            curve.set("srsName", prop.curve.srs_name)
            segments = self._sub(curve, GML_NS, "segments")
            for segment in prop.curve.segments:
                self._pos_list(self._sub(segments, GML_NS, "LineStringSegment"), segment.pos_list)
        elif isinstance(prop, SurfaceProperty):
            holder = self._sub(geometry, S100_NS, "surfaceProperty")
            surface = self._sub(holder, S100_NS, "Surface")
            self._gml_id(surface, prop.surface.id)
            surface.set("srsName", prop.surface.srs_name)
            patches = self._sub(surface, GML_NS, "patches")
            for patch in prop.surface.patches:
                el = self._sub(patches, GML_NS, "PolygonPatch")
                exterior = self._sub(self._sub(el, GML_NS, "exterior"), GML_NS, "LinearRing")
                self._pos_list(exterior, patch.exterior.pos_list)
                for ring in patch.interiors:
                    interior = self._sub(self._sub(el, GML_NS, "interior"), GML_NS, "LinearRing")
                    self._pos_list(interior, ring.pos_list)
        else:
            raise TypeError(f"Unknown spatial property: {type(prop).__name__}")

    # --- Features ---
    def _series(self, parent: ET.Element, series: MessageSeriesIdentifier) -> None:
        el = self._sub(parent, S124_NS, "messageSeriesIdentifier")
        self._opt(el, S124_NS, "nameOfSeries", series.name_of_series)
        self._code(el, "typeOfWarning", series.warning_type)
        self._opt(el, S124_NS, "warningNumber", series.warning_number)
        self._opt(el, S124_NS, "year", series.year)
        self._opt(el, S124_NS, "productionAgency", series.production_agency)
        self._opt(el, S124_NS, "country", series.country)
        self._sub(el, S124_NS, "interoperabilityIdentifier", series.interoperability_identifier)

    def _chart(self, parent: ET.Element, chart: AffectedChartPublication) -> None:
        el = self._sub(parent, S124_NS, "affectedChartPublications")
        affected = self._sub(el, S124_NS, "chartAffected")
        self._sub(affected, S124_NS, "chartNumber", chart.chart_number)
        self._opt(el, S124_NS, "internationalChartAffected", chart.international_chart_number)
        self._opt(el, S124_NS, "publicationDate", chart.publication_date)

    def _preamble(self, parent: ET.Element, p: Preamble) -> None:
        el = self._sub(parent, S124_NS, "NAVWARNPreamble")
        self._gml_id(el, p.id)
        for chart in p.affected_chart_publications:
            self._chart(el, chart)
        for area in p.general_areas:
            self._localized(self._sub(el, S124_NS, "generalArea"), "locationName", area.location_name)
        for locality in p.localities:
            self._localized(el, "locality", locality)
        self._series(el, p.message_series_identifier)
        for title in p.navwarn_titles:
            self._localized(el, "navwarnTitle", title)
        self._opt(el, S124_NS, "cancellationDate", p.cancellation_date)
        self._sub(el, S124_NS, "intService", p.int_service)
        self._code(el, "navwarnTypeGeneral", p.navwarn_type_general)
        self._opt(el, S124_NS, "publicationTime", p.publication_time)
        for ref in p.the_references:
            self._link(el, "theReferences", ref)

    def _part(self, parent: ET.Element, p: Part) -> None:
        el = self._sub(parent, S124_NS, "NAVWARNPart")
        self._gml_id(el, p.id)
        self._bounded_by(el, p.bounded_by)
        for r in p.fixed_date_ranges:
            rng = self._sub(el, S124_NS, "fixedDateRange")
            self._opt(rng, S124_NS, "dateStart", r.date_start)
            self._opt(rng, S124_NS, "dateEnd", r.date_end)
        info_el = self._sub(el, S124_NS, "warningInformation")
        info = p.warning_information.information
        if info is not None:
            body = self._sub(info_el, S124_NS, "information")
            self._sub(body, S124_NS, "language", info.language)
            self._opt(body, S124_NS, "headline", info.headline)
            self._opt(body, S124_NS, "text", info.text)
        self._code(el, "restriction", p.restriction)
        for g in p.geometries:
            self._spatial(el, g.property)
        if p.header is not None:
            self._link(el, "header", p.header)
        for ref in p.affects:
            self._link(el, "affects", ref)

    def _reference(self, parent: ET.Element, r: ReferenceRecord) -> None:
        el = self._sub(parent, S124_NS, "References")
        self._gml_id(el, r.id)
        self._opt(el, S124_NS, "referenceCategory", r.reference_category)
        self._sub(el, S124_NS, "noMessageOnHand", r.no_message_on_hand)
        for series in r.message_series_identifiers:
            self._series(el, series)

    def dataset(self, ds: Dataset) -> ET.Element:
        root = ET.Element(_q(S124_NS, "Dataset"))
        self._gml_id(root, ds.id)
        self._bounded_by(root, ds.bounded_by)

        ident = ds.identification
        info = self._sub(root, S100_NS, "DatasetIdentificationInformation")
        self._sub(info, S100_NS, "encodingSpecification", ident.encoding_specification)
        self._sub(info, S100_NS, "encodingSpecificationEdition", ident.encoding_specification_edition)
        self._sub(info, S100_NS, "productIdentifier", ident.product_identifier)
        self._sub(info, S100_NS, "productEdition", ident.product_edition)
        self._sub(info, S100_NS, "datasetFileIdentifier", ident.dataset_file_identifier)
        self._sub(info, S100_NS, "datasetTitle", ident.dataset_title)
        self._sub(info, S100_NS, "datasetReferenceDate", ident.dataset_reference_date)
        self._sub(info, S100_NS, "datasetLanguage", ident.dataset_language)
        self._opt(info, S100_NS, "datasetAbstract", ident.dataset_abstract)
        self._sub(info, S100_NS, "datasetPurpose", ident.dataset_purpose)

        members = self._sub(root, S124_NS, "members")
        for m in ds.members:
            if isinstance(m, Preamble):
                self._preamble(members, m)
            elif isinstance(m, Part):
                self._part(members, m)
            elif isinstance(m, ReferenceRecord):
                self._reference(members, m)
        return root


def marshal(
    dataset: Dataset, number_format: Optional[NumberFormat] = None, pretty: bool = True
) -> str:
    """Render ``dataset`` as a GML document string with an XML declaration."""
    root = GmlWriter(number_format).dataset(dataset)
    if pretty:
        ET.indent(root, space="  ")
    return ET.tostring(root, encoding="UTF-8", xml_declaration=True).decode("utf-8")
