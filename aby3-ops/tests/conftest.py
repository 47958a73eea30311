"""
Pytest configuration and fixtures.

Ensures the fake engine helpers beside the tests are importable and builds
operator contexts over them.
"""

import sys
from pathlib import Path

import pytest

tests_path = Path(__file__).parent
if str(tests_path) not in sys.path:
    sys.path.insert(0, str(tests_path))

from fake_engine import FakeEngine  # noqa: E402

from aby3_ops.factory import FactoryConfig, ProtocolFactory  # noqa: E402

F = 16
EPS = 2.0 ** -F


@pytest.fixture
def engine():
    return FakeEngine(scaling_factor=F)


@pytest.fixture
def ctx(engine):
    return ProtocolFactory(FactoryConfig(scaling_factor=F)).build(engine, party_id=0)


@pytest.fixture
def ops(ctx):
    return ctx.operators


@pytest.fixture
def codec(ctx):
    return ctx.c.codec
