"""Shared fixtures and offline settings."""

import os

# Offline defaults, set before tradeguard.core.config is imported
os.environ["MARKET_DATA_PROVIDER"] = "mock"
os.environ["LLM_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest

from tests.factories import make_proposal, make_snapshot


@pytest.fixture
def proposal():
    return make_proposal()


@pytest.fixture
def snapshot():
    return make_snapshot()
