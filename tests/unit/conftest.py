"""
Shared test fixtures for the MFA exchange tests.
"""

import json

import pytest


@pytest.fixture
def client():
    """The authenticated OAuth client making the token request."""
    return {"id": "c123", "name": "Example"}


@pytest.fixture
def johndoe():
    """The user the MFA token belongs to."""
    return {"id": "1", "username": "johndoe"}


@pytest.fixture
def decode():
    """Decode a starlette response body."""

    def _decode(response):
        return json.loads(response.body)

    return _decode
