import logging

import pytest
from starlette.testclient import TestClient

from scaffold.server import new

TEST_LOGGER = "scaffold.tests"


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def logger():
    return logging.getLogger(TEST_LOGGER)


@pytest.fixture
def journals(caplog):
    """Journals logged by the interceptor during the test, oldest first."""
    caplog.set_level(logging.INFO, logger=TEST_LOGGER)

    def collect():
        return [r.journal for r in caplog.records if r.name == TEST_LOGGER and r.getMessage() == "interceptor"]

    return collect


@pytest.fixture
def panics(caplog):
    caplog.set_level(logging.INFO, logger=TEST_LOGGER)

    def collect():
        return [r for r in caplog.records if r.name == TEST_LOGGER and r.getMessage() == "got panic"]

    return collect


@pytest.fixture
def make_server(logger):
    """Build a server and a client for it; routes can be added before requests are sent."""

    def factory(*options, **kwargs):
        mux = new(logger, *options, **kwargs)
        return mux, TestClient(mux)

    return factory


@pytest.fixture
def clock():
    return FakeClock()
