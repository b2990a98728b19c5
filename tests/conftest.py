# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for GCP client tests.

This module provides common test fixtures, mock objects, and configuration
that can be used across all test modules.
"""

import time
from unittest.mock import MagicMock

import pytest
from google.auth.credentials import Credentials

from Graphite.GcpClient.core.config import GcpClientConfig


class FakeClock:
    """Deterministic stand-in for ``time.monotonic``/``time.sleep``: sleeping advances the clock."""

    def __init__(self):
        self.now = 1000.0
        self.sleeps = []

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock(monkeypatch):
    """Patch ``time.monotonic`` and ``time.sleep`` with a clock that only moves when slept on."""
    clock = FakeClock()
    monkeypatch.setattr(time, "monotonic", clock.monotonic)
    monkeypatch.setattr(time, "sleep", clock.sleep)
    return clock


@pytest.fixture
def mock_credentials():
    """google-auth credentials double that passes the isinstance check."""
    credentials = MagicMock(spec=Credentials)
    credentials.valid = True
    credentials.token = "test_token_12345"
    return credentials


@pytest.fixture
def test_config():
    """Test configuration with safe defaults."""
    return GcpClientConfig(
        http_retries=0,
        http_backoff=0.1,
        http_timeout=5,
        operation_poll_interval=5.0,
        scan_poll_interval=1.0,
    )


@pytest.fixture
def sample_project_id():
    return "test-project"


@pytest.fixture
def sample_zone_link():
    return "https://www.googleapis.com/compute/v1/projects/test-project/zones/us-west1-a"
