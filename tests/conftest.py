"""
Shared test configuration.

Required settings are seeded before any glamora module is imported.
"""

import os

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("ADMIN_PASSWORD", "admin-password")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402


def make_cursor(docs):
    """Motor-style cursor whose chained calls resolve to ``docs``."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


@pytest.fixture
def cursor_factory():
    return make_cursor
