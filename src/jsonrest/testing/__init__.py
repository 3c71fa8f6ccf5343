"""Test utilities for jsonrest routers and endpoints::

    from jsonrest.testing import TestClient, make_request
"""

from jsonrest.testing.client import TestClient, TestResponse
from jsonrest.testing.requests import make_request

__all__ = [
    "TestClient",
    "TestResponse",
    "make_request",
]
