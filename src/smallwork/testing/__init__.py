"""Test utilities for smallwork applications.

    from smallwork.testing import TestClient
"""

from smallwork.testing.client import TestClient

__all__ = ["TestClient"]
