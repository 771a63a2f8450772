"""Test utilities for velix applications::

    from velix.testing import TestClient
"""

from velix.testing.client import TestClient, TestResponse

__all__ = [
    "TestClient",
    "TestResponse",
]
