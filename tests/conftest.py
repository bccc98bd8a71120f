import sys, pathlib
from datetime import datetime

import pytest

# Ensure project root on path so 'navwarn_s124' is importable when running tests directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from navwarn_s124.config import Settings
from navwarn_s124.geojson import LineString, Point, Polygon
from navwarn_s124.mapper import DatasetInfo, DatasetMapper
from navwarn_s124.model import (
    DateInterval,
    MainType,
    Message,
    MessageDesc,
    MessagePart,
    MessagePartDesc,
    MessageSeries,
    MessageType,
    Status,
)

from helpers import SQUARE, TODAY, collection


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def mapper(settings):
    return DatasetMapper(settings, today=TODAY)


@pytest.fixture
def dataset_info():
    return DatasetInfo(
        dataset_id="urn:mrn:iho:dataset:dk:test:001",
        file_identifier="DK-DMA-S124.gml",
        title="Test dataset",
    )


@pytest.fixture
def make_part():
    def _make(index, geometry=None, lang="en"):
        return MessagePart(
            index_no=index,
            descs=[
                MessagePartDesc(
                    lang=lang,
                    subject=f"Test warning part {index}",
                    details=f"Details for test warning part {index}",
                )
            ],
            event_dates=[
                DateInterval(datetime(2024, 2, 1, 8, 0), datetime(2024, 3, 1, 18, 0))
            ],
            geometry=geometry,
        )

    return _make


@pytest.fixture
def make_message(make_part):
    def _make(short_id="DK-001-24", msg_id=123, parts=None, **overrides):
        fields = dict(
            id=msg_id,
            short_id=short_id,
            main_type=MainType.NW,
            type=MessageType.COASTAL_WARNING,
            status=Status.PUBLISHED,
            number=42,
            publish_date_from=datetime(2024, 1, 15, 10, 0),
            publish_date_to=datetime(2024, 12, 31, 23, 59),
            message_series=MessageSeries("DK-NW", MainType.NW),
            descs=[
                MessageDesc("en", title="Navigation warning test", vicinity="Great Belt")
            ],
            parts=parts if parts is not None else [make_part(1, collection(Polygon([SQUARE])))],
        )
        fields.update(overrides)
        return Message(**fields)

    return _make


@pytest.fixture
def message(make_message):
    return make_message()


@pytest.fixture
def point_geometry():
    return collection(Point((10.5, 55.5)))


@pytest.fixture
def line_geometry():
    return collection(LineString([(10.0, 55.0), (10.5, 55.5), (11.0, 56.0)]))
