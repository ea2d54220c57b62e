"""Shared test fixtures and configuration for Tag Courier tests."""

import pytest
from pathlib import Path
import sys

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import tagcourier
from tagcourier.tracking.config import TrackingConfig
from tagcourier.tracking.consent import ConsentGate
from tagcourier.tracking.context import ContextStore
from tagcourier.tracking.diagnostics import LoggingReporter
from tagcourier.transports.memory import RecordingTransport


TRACKING_ENV_VARS = [
    "TAG_COURIER_CONFIG",
    "TAG_COURIER_TRACKING_ENABLED",
    "TAG_COURIER_SITE_DOMAIN",
    "TAG_COURIER_API_HOST",
    "TAG_COURIER_ENVIRONMENT",
]


@pytest.fixture(autouse=True)
def clean_tracking_environment(monkeypatch):
    """Isolate tests from host environment and process-wide tracking state."""
    for name in TRACKING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    tagcourier.reset_default_client()
    tagcourier.default_consent.reset()
    tagcourier.clear_context()
    yield
    tagcourier.reset_default_client()
    tagcourier.default_consent.reset()
    tagcourier.clear_context()


@pytest.fixture
def tracking_config():
    """Enabled configuration without any registered transports."""
    return TrackingConfig(
        enabled=True,
        site_domain="example.com",
        api_host="https://plausible.example.com",
        environment="test",
        transports=[]
    )


@pytest.fixture
def recorder():
    """In-memory transport recording delivered events."""
    return RecordingTransport()


@pytest.fixture
def consent_gate():
    return ConsentGate(analytics=True)


@pytest.fixture
def context_store():
    return ContextStore()


@pytest.fixture
def reporter():
    return LoggingReporter(environment="test")


@pytest.fixture
def analytics_client(tracking_config, recorder, consent_gate, context_store, reporter):
    """Enabled client delivering to the in-memory recorder."""
    client = tagcourier.create_analytics_client(
        {"plugins": [recorder]},
        config=tracking_config,
        consent=consent_gate,
        context=context_store,
        reporter=reporter
    )
    yield client
    client.close()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
