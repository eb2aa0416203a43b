"""Shared fixtures: controllable probes and a recording transport."""

from typing import List

import pytest

from telemetry_client.config import Settings
from telemetry_client.models.payload import DeliveryResult
from telemetry_client.services.aggregator import TelemetryAggregator
from telemetry_client.services.environment import StaticEnvironmentProvider
from telemetry_client.services.performance_tracker import PerformanceTracker
from telemetry_client.services.probes import CallCounter, Clock, MemoryProbe
from telemetry_client.services.transport import Transport


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class FakeMemory(MemoryProbe):
    """Memory probe with settable figures."""

    def __init__(self, current: int = 1_000_000, peak: int = 2_000_000):
        self.current = current
        self.peak = peak

    def current_memory(self) -> int:
        return self.current

    def peak_memory(self) -> int:
        return self.peak


class RecordingTransport(Transport):
    """Transport that keeps every payload it is given."""

    def __init__(self, success: bool = True):
        self.success = success
        self.sent: List[bytes] = []

    def send(self, payload: bytes) -> DeliveryResult:
        self.sent.append(payload)
        if self.success:
            return DeliveryResult(success=True, status_code=200)
        return DeliveryResult(success=False, status_code=503, error="HTTP 503")


@pytest.fixture
def test_settings():
    """Settings independent of the process environment."""
    return Settings(
        _env_file=None,
        site_url="https://example.org",
        platform_version="6.4.2",
        root_path="/var/www/html",
        debug=False,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory():
    return FakeMemory()


@pytest.fixture
def counter():
    return CallCounter()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def environment(test_settings):
    return StaticEnvironmentProvider(settings=test_settings, runtime_version="3.12.1")


@pytest.fixture
def aggregator(test_settings, clock, memory, counter, transport, environment):
    """Aggregator wired with fakes."""
    tracker = PerformanceTracker(
        clock=clock,
        memory=memory,
        resource_counter=counter,
        settings=test_settings,
    )
    return TelemetryAggregator(
        transport=transport,
        environment=environment,
        tracker=tracker,
        settings=test_settings,
        clock=clock,
    )
