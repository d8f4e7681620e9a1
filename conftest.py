# Ensure tests import the service package from this directory first.
import os
import sys
from unittest.mock import AsyncMock, patch

import httpx
import pytest

SERVICE_ROOT = os.path.dirname(__file__)

if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)


@pytest.fixture
def upstream_response():
    """Build a buffered httpx response as the destination would return it."""

    def _create_response(status_code=200, headers=None, content=b"upstream body"):
        return httpx.Response(
            status_code,
            headers=headers or {"content-type": "text/plain"},
            content=content,
            request=httpx.Request("GET", "https://example.com/"),
        )

    return _create_response


@pytest.fixture
def mock_upstream():
    """Patch the outbound GET so no request leaves the test process."""
    with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
        yield mock_get
