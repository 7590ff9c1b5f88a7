import os

# Settings are read at import time; keep the limiter out of the way for tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("CATALOGUE_PATH", None)

import pytest
from fastapi.testclient import TestClient

from creamery_units.main import app
from creamery_units.deps import get_registry
from creamery_units.services.unit_catalogue import CategoryRegistry, load_registry
from creamery_units.services.unit_conversion import ConversionEngine


@pytest.fixture
def registry():
    """The built-in catalogue."""
    return load_registry()


@pytest.fixture
def engine(registry):
    return ConversionEngine(registry)


@pytest.fixture
def make_registry():
    """Build a registry from plain dicts, e.g. to exercise collisions."""
    def _make(raw):
        return CategoryRegistry.from_dicts(raw)
    return _make


@pytest.fixture
def client_with_registry():
    """Test client whose catalogue is swapped for the given registry."""
    def _client(registry):
        app.dependency_overrides[get_registry] = lambda: registry
        return TestClient(app)
    yield _client
    app.dependency_overrides.clear()
