"""Pytest configuration and fixtures for cloudboard tests."""

import os
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import Mock

import pytest

from cloudboard.core.bridge import NotificationBridge
from cloudboard.core.dashboard import Dashboard
from cloudboard.core.models import Function, Identity, Instance
from cloudboard.core.settings import SettingsStore
from cloudboard.core.state import AppState
from fakes import FakeCloudClient

START_TIME = datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock returning timezone-aware UTC datetimes."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture(autouse=True)
def cleanup_cloudboard_env() -> Generator[None, None, None]:
    """Ensure cloudboard environment variables do not leak between tests.

    Yields
    ------
    None
        Control back to test after clearing the environment
    """
    saved = {
        key: os.environ.pop(key, None)
        for key in ("CLOUDBOARD_CONFIG", "CLOUDBOARD_DIR", "CLOUDBOARD_DEBUG")
    }

    yield

    for key, value in saved.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)


@pytest.fixture
def aws_credentials() -> Generator[None, None, None]:
    """Fixture to set AWS credentials for testing with proper cleanup.

    Sets mock AWS credentials in environment variables for the duration of the test,
    then restores the original environment state.

    Yields
    ------
    None
        Control back to test after setting credentials
    """
    keys = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION")
    saved = {key: os.environ.get(key) for key in keys}

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

    yield

    for key, value in saved.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_instances(clock: FakeClock) -> list[Instance]:
    """Three instances: A stopped, B running for 2h, C running for 5 minutes."""
    return [
        Instance("i-aaa", "A", "t3.micro", "stopped", launch_time=clock.now - timedelta(days=1)),
        Instance(
            "i-bbb",
            "B",
            "t3.large",
            "running",
            public_ip="203.0.113.10",
            launch_time=clock.now - timedelta(hours=2),
        ),
        Instance("i-ccc", "C", "t3.small", "running", launch_time=clock.now - timedelta(minutes=5)),
    ]


@pytest.fixture
def sample_functions() -> list[Function]:
    return [
        Function("resize-images", "python3.12", 256, "2026-01-10T08:00:00.000+0000"),
        Function("send-report", "nodejs20.x", 128, "2026-01-12T09:30:00.000+0000", "Daily"),
    ]


@pytest.fixture
def fake_client(sample_instances: list[Instance], sample_functions: list[Function]) -> FakeCloudClient:
    return FakeCloudClient(instances=sample_instances, functions=sample_functions)


@pytest.fixture
def settings_store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "settings.yaml")


@pytest.fixture
def sound() -> Mock:
    return Mock(name="sound")


@pytest.fixture
def login() -> Mock:
    return Mock(name="login", return_value=(True, ""))


@pytest.fixture
def client_factory() -> Mock:
    """Client factory building a FakeCloudClient for the requested identity."""
    return Mock(name="client_factory", side_effect=lambda identity: FakeCloudClient(identity=identity))


def run_inline(target: Callable[[], None], name: str) -> None:
    target()


@pytest.fixture
def state(fake_client: FakeCloudClient) -> AppState:
    return AppState(
        client=fake_client,
        available_profiles=["default", "dev", "prod"],
        identity=Identity(region="us-east-1"),
    )


@pytest.fixture
def dashboard(
    state: AppState,
    clock: FakeClock,
    settings_store: SettingsStore,
    sound: Mock,
    login: Mock,
    client_factory: Mock,
) -> Dashboard:
    """Dashboard with a fake client, a manual clock and inline background tasks."""
    return Dashboard(
        state,
        client_factory=client_factory,
        login=login,
        settings_store=settings_store,
        bridge=NotificationBridge(),
        clock=clock,
        spawn=run_inline,
        sound=sound,
    )
