"""Test utilities for httpschema routers.

Two ways in::

    from httpschema.testing import TestClient, create_test_client

``TestClient`` drives the ASGI app directly and returns ``Response``
objects. ``create_test_client`` returns a real ``HttpClient`` wired to
the router in-process.
"""

from httpschema.testing.client import TestClient, create_test_client

__all__ = ["TestClient", "create_test_client"]
