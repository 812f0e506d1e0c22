"""Shared pytest fixtures."""

import os
from unittest.mock import patch

import pytest

from mcp_forwarded.analyzer import ForwardedAnalyzer
from mcp_forwarded.settings import Settings
from mcp_forwarded.utils.ip_utils import AddressClassifier, PrivateRangeSet


@pytest.fixture
def private_ranges():
    """Default private IPv4 ranges."""
    return PrivateRangeSet.default()


@pytest.fixture
def classifier(private_ranges):
    """Classifier over the default private ranges."""
    return AddressClassifier(private_ranges)


@pytest.fixture
def analyzer(private_ranges):
    """Analyzer over the default private ranges."""
    return ForwardedAnalyzer(private_ranges)


@pytest.fixture
def settings():
    """Settings built from an empty environment."""
    with patch.dict(os.environ, {}, clear=True):
        return Settings()
