from __future__ import annotations

import pytest

from chatwarden.app.bootstrap import BotService, build_service
from chatwarden.config.schema import Config
from tests.fakes import ADMIN, FakeClock, FakeCompletion, FakeTransport


@pytest.fixture
def config() -> Config:
    return Config(admins=[ADMIN])


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(
    config: Config,
    transport: FakeTransport,
    completion: FakeCompletion,
    clock: FakeClock,
) -> BotService:
    return build_service(config, transport=transport, completion=completion, clock=clock)
