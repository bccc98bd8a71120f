from pathlib import Path
from xml.etree import ElementTree as ET

import pytest

from navwarn_s124.config import Settings
from navwarn_s124.errors import MessageNotFoundError, ValidationError
from navwarn_s124.loader import load_source
from navwarn_s124.marshaller import NAMESPACES
from navwarn_s124.model import MainType
from navwarn_s124.service import CONTENT_TYPE, S124Service

DATA_FILE = Path(__file__).parent / "test_data" / "messages.json"


@pytest.fixture
def service():
    return S124Service(Settings(), load_source(DATA_FILE))


def test_content_type():
    assert CONTENT_TYPE == "application/gml+xml; charset=UTF-8"


@pytest.mark.parametrize("key", ["123", 123, "DK-001-24"])
def test_find_by_numeric_or_short_id(service, key):
    assert service.find_message(key).id == 123


def test_unknown_id_is_404(service):
    with pytest.raises(MessageNotFoundError) as exc:
        service.generate_gml_for_id("999")
    assert exc.value.status_code == 404


def test_notice_to_mariners_rejected(service):
    with pytest.raises(ValidationError, match="Notices to Mariners") as exc:
        service.generate_gml_for_id("DK-NM-001-24")
    assert exc.value.status_code == 400


def test_unnumbered_warning_rejected(service):
    with pytest.raises(ValidationError, match="un-numbered"):
        service.generate_gml_for_id(126)


def test_generate_gml_end_to_end(service):
    xml = service.generate_gml_for_id("DK-001-24", "da")
    root = ET.fromstring(xml.encode("utf-8"))
    ns = NAMESPACES
    preamble = root.find("S124:members/S124:NAVWARNPreamble", ns)
    assert preamble.find("S124:locality/S124:text", ns).text == "Storebælt"
    assert preamble.find("S124:generalArea/S124:locationName/S124:text", ns).text == "Danmark"
    assert preamble.find("S124:navwarnTypeGeneral", ns).get("code") == "1"
    assert len(preamble.findall("S124:affectedChartPublications", ns)) == 1
    part = root.find("S124:members/S124:NAVWARNPart", ns)
    info = part.find("S124:warningInformation/S124:information", ns)
    assert info.find("S124:language", ns).text == "en"
    assert info.find("S124:text", ns).text == "Buoy No. 4 is missing."
    assert part.find("S124:restriction", ns).get("code") == "2"
    records = root.findall("S124:members/S124:References", ns)
    assert [r.get(f"{{{ns['gml']}}}id") for r in records] == ["DK.DK-002-24"]


def test_unknown_language_uses_default(service, monkeypatch):
    seen = []
    original = service.mapper.map

    def spy(info, message, language):
        seen.append(language)
        return original(info, message, language)

    monkeypatch.setattr(service.mapper, "map", spy)
    service.generate_gml_for_id(123, "fr")
    service.generate_gml_for_id(123, None)
    service.generate_gml_for_id(123, "da")
    assert seen == ["en", "en", "da"]


def test_dataset_info_for_messages(service):
    dataset = service.generate_dataset(service.find_message(123))
    assert dataset.id.startswith("urn:mrn:test:s124:")
    assert dataset.identification.dataset_title == "DMA navigational warnings: DK.DK-001-24"
    assert dataset.identification.dataset_abstract == "Navigation warning test"
    assert dataset.identification.dataset_file_identifier.endswith(".gml")


def test_service_accepts_mapping(make_message):
    msg = make_message()
    service = S124Service(messages={"abc": msg})
    assert service.find_message("abc") is msg
    with pytest.raises(MessageNotFoundError):
        service.find_message("123")


def test_mapper_validation_still_applies(make_message):
    msg = make_message(main_type=None)
    with pytest.raises(ValidationError):
        S124Service().generate_gml(msg)
