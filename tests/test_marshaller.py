from xml.etree import ElementTree as ET

import pytest

from helpers import collection
from navwarn_s124.geojson import Point, Polygon
from navwarn_s124.marshaller import (
    CONTENT_TYPE,
    GML_NS,
    NAMESPACES,
    default_number_format,
    marshal,
)
from navwarn_s124.model import MessageDesc, MessageTag, Reference, ReferenceType

NS = NAMESPACES


@pytest.fixture
def xml_root(mapper, dataset_info, message):
    return ET.fromstring(marshal(mapper.map(dataset_info, message)).encode("utf-8"))


def test_content_type():
    assert CONTENT_TYPE == "application/gml+xml; charset=UTF-8"


@pytest.mark.parametrize(
    "value,text",
    [(55.5, "55.5"), (10.0, "10"), (-0.125, "-0.125"), (12.345678901, "12.345678901"), (3, "3")],
)
def test_default_number_format(value, text):
    assert default_number_format(value) == text


def test_declaration_and_root(mapper, dataset_info, message):
    xml = marshal(mapper.map(dataset_info, message))
    assert xml.startswith("<?xml version='1.0' encoding='UTF-8'?>")
    assert "\n  <" in xml  # indented
    root = ET.fromstring(xml.encode("utf-8"))
    assert root.tag == f"{{{NS['S124']}}}Dataset"
    assert root.get(f"{{{GML_NS}}}id") == "urn:mrn:iho:dataset:dk:test:001"


def test_compact_output(mapper, dataset_info, message):
    xml = marshal(mapper.map(dataset_info, message), pretty=False)
    assert "\n  <" not in xml


def test_envelope_is_lat_lon(xml_root):
    env = xml_root.find("gml:boundedBy/gml:Envelope", NS)
    assert env.get("srsName") == "EPSG:4326"
    assert env.find("gml:lowerCorner", NS).text == "55.5 10.5"
    assert env.find("gml:upperCorner", NS).text == "56 11"


def test_empty_envelope(mapper, dataset_info, make_message, make_part):
    xml = marshal(mapper.map(dataset_info, make_message(parts=[make_part(1)])))
    root = ET.fromstring(xml.encode("utf-8"))
    assert root.find("gml:boundedBy/gml:Null", NS).text == "missing"


def test_identification(xml_root):
    info = xml_root.find("S100:DatasetIdentificationInformation", NS)
    assert info.find("S100:encodingSpecification", NS).text == "S100 Part 10b"
    assert info.find("S100:productIdentifier", NS).text == "S-124"
    assert info.find("S100:datasetReferenceDate", NS).text == "2024-06-01"


def test_members(xml_root):
    members = list(xml_root.find("S124:members", NS))
    tags = [m.tag.split("}")[1] for m in members]
    assert tags == ["NAVWARNPreamble", "NAVWARNPart"]


def test_preamble_fields(xml_root):
    preamble = xml_root.find("S124:members/S124:NAVWARNPreamble", NS)
    assert preamble.get(f"{{{GML_NS}}}id") == "DK.DK-001-24"
    series = preamble.find("S124:messageSeriesIdentifier", NS)
    assert series.find("S124:interoperabilityIdentifier", NS).text == "urn:mrn:iho:nw:dk:dk-001-24"
    assert series.find("S124:typeOfWarning", NS).get("code") == "2"
    assert series.find("S124:warningNumber", NS).text == "42"
    assert preamble.find("S124:intService", NS).text == "true"
    assert preamble.find("S124:publicationTime", NS).text == "2024-01-15T10:00:00+00:00"
    assert preamble.find("S124:navwarnTitle/S124:text", NS).text == "Navigation warning test"
    assert preamble.find("S124:locality/S124:text", NS).text == "Great Belt"


def test_part_fields(xml_root):
    part = xml_root.find("S124:members/S124:NAVWARNPart", NS)
    assert part.get(f"{{{GML_NS}}}id") == "urn:mrn:iho:nw:dk:dk-001-24.1"
    header = part.find("S124:header", NS)
    assert header.get(f"{{{NS['xlink']}}}href") == "#DK.DK-001-24"
    rng = part.find("S124:fixedDateRange", NS)
    assert rng.find("S124:dateStart", NS).text == "2024-02-01"
    assert rng.find("S124:dateEnd", NS).text == "2024-03-01"
    info = part.find("S124:warningInformation/S124:information", NS)
    assert info.find("S124:language", NS).text == "en"
    assert info.find("S124:headline", NS).text == "Test warning part 1"
    surface = part.find("S124:geometry/S100:surfaceProperty/S100:Surface", NS)
    assert surface.get(f"{{{GML_NS}}}id") == "G.urn:mrn:iho:nw:dk:dk-001-24.1.1"
    pos_list = surface.find("gml:patches/gml:PolygonPatch/gml:exterior/gml:LinearRing/gml:posList", NS)
    assert pos_list.text.startswith("55.5 10.5 55.5 11")


def test_point_and_restriction(mapper, dataset_info, make_message, make_part):
    msg = make_message(
        parts=[make_part(1, collection(Point((10.5, 55.5))))], tags=[MessageTag("CAUTION")]
    )
    root = ET.fromstring(marshal(mapper.map(dataset_info, msg)).encode("utf-8"))
    part = root.find("S124:members/S124:NAVWARNPart", NS)
    pos = part.find("S124:geometry/S100:pointProperty/S100:Point/gml:pos", NS)
    assert pos.text == "55.5 10.5"
    assert part.find("S124:restriction", NS).get("code") == "2"


def test_reference_records(mapper, dataset_info, make_message):
    target = make_message(short_id="DK-002-24", msg_id=124)
    msg = make_message(references=[Reference(target, ReferenceType.CANCELLATION)])
    root = ET.fromstring(marshal(mapper.map(dataset_info, msg)).encode("utf-8"))
    record = root.find("S124:members/S124:References", NS)
    assert record.get(f"{{{GML_NS}}}id") == "DK.DK-002-24"
    assert record.find("S124:noMessageOnHand", NS).text == "true"
    assert record.find("S124:referenceCategory", NS).text == "cancellation"
    link = root.find("S124:members/S124:NAVWARNPreamble/S124:theReferences", NS)
    assert link.get(f"{{{NS['xlink']}}}href") == "#DK.DK-002-24"
    assert link.get(f"{{{NS['xlink']}}}role") == "reference"
    affects = root.find("S124:members/S124:NAVWARNPart/S124:affects", NS)
    assert affects.get(f"{{{NS['xlink']}}}role") == "cancellation"


def test_custom_number_format(mapper, dataset_info, make_message, make_part):
    msg = make_message(parts=[make_part(1, collection(Point((10.5, 55.5))))])
    xml = marshal(mapper.map(dataset_info, msg), number_format=lambda v: f"{v:.3f}")
    assert "55.500 10.500" in xml


def test_polygon_with_hole(mapper, dataset_info, make_message, make_part):
    outer = [(10.0, 55.0), (11.0, 55.0), (11.0, 56.0), (10.0, 55.0)]
    hole = [(10.2, 55.2), (10.4, 55.2), (10.4, 55.4), (10.2, 55.2)]
    msg = make_message(parts=[make_part(1, collection(Polygon([outer, hole])))])
    root = ET.fromstring(marshal(mapper.map(dataset_info, msg)).encode("utf-8"))
    interior = root.find(".//gml:PolygonPatch/gml:interior/gml:LinearRing/gml:posList", NS)
    assert interior.text.split()[:2] == ["55.2", "10.2"]


def test_non_ascii_text(mapper, dataset_info, make_message):
    msg = make_message(descs=[MessageDesc("da", "Advarsel", "Storebælt")])
    xml = marshal(mapper.map(dataset_info, msg, "da"))
    assert "Storebælt" in xml
