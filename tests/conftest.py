"""
Pytest configuration for inspectdoc
"""

import json
import logging
import sys
from pathlib import Path

import pytest

from inspectdoc.config import LayoutConfig
from inspectdoc.models import ChecklistItem, Location, Task
from inspectdoc.surface.recording import RecordingSurface

from .factories import A4_HEIGHT, A4_WIDTH, StubImageCache, data_uri, entry, photo, png_bytes, record_data


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    import tempfile
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def layout_config():
    return LayoutConfig()


@pytest.fixture
def surface():
    """Headless A4 surface."""
    return RecordingSurface(A4_WIDTH, A4_HEIGHT)


@pytest.fixture
def png_data_uri():
    return data_uri(png_bytes())


@pytest.fixture
def stub_cache():
    return StubImageCache()


@pytest.fixture
def window_door_item():
    """One item, one location, a clean window and a door with five photos."""
    door_photos = [photo(f"https://cdn.example.com/door-{i}.jpg") for i in range(5)]
    door_photos[0] = photo("https://cdn.example.com/door-0.jpg", caption="Hinge loose")
    return ChecklistItem(
        id="item-1",
        name="Bedroom",
        locations=(Location(id="loc-1", name="Master Bedroom"),),
        tasks=(
            Task(id="t-window", name="Inspect window", condition="GOOD", location_id="loc-1"),
            Task(
                id="t-door",
                name="Inspect door",
                condition="FAIR",
                location_id="loc-1",
                entries=(entry("e-door", media=door_photos, task_id="t-door"),),
            ),
        ),
    )


@pytest.fixture
def record_file(temp_dir):
    """Record JSON written to disk."""
    path = temp_dir / "record.json"
    path.write_text(json.dumps(record_data()), encoding="utf-8")
    return path


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    logging.raiseExceptions = False
