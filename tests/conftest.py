"""
Shared pytest fixtures for kleisli_iter tests.

This module provides the sample relations and arrow test doubles used
across the test modules.
"""

import pyarrow as pa
import pytest

from kleisli_iter import TraceConfig, configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    """
    Keep the package logger in its disabled state for every test.

    Tracing may be switched on in the developer's environment; tests that
    need it configure it themselves.
    """
    configure_logging(TraceConfig.for_testing())
    yield
    configure_logging(TraceConfig.for_testing())


@pytest.fixture
def db():
    """A small (key, value) relation with repeated keys."""
    return [(1, 2), (2, 3), (3, 4), (1, 5), (5, 7)]


@pytest.fixture
def db_table(db):
    """The same relation as a PyArrow table."""
    return pa.table({
        "key": [row[0] for row in db],
        "value": [row[1] for row in db],
    })


class Exploding:
    """Arrow that fails the test if it is ever invoked."""

    def __init__(self, name):
        self.name = name

    def __call__(self, a):
        raise AssertionError(f"arrow {self.name} was invoked with {a!r}")


class Recording:
    """Arrow returning a fixed mapping, recording each input it is called with."""

    def __init__(self, mapping):
        self.mapping = mapping
        self.calls = []

    def __call__(self, a):
        self.calls.append(a)
        return list(self.mapping.get(a, []))


@pytest.fixture
def exploding():
    return Exploding


@pytest.fixture
def recording():
    return Recording
