"""
Shared fixtures for client tests.
"""

import pytest

from firemock import MockClient


@pytest.fixture
def ref() -> MockClient:
    """A client at /data of the default data set, manual flushing."""
    return MockClient().child("data")


@pytest.fixture
def empty() -> MockClient:
    """A client over an empty database."""
    return MockClient("Empty://", None)
