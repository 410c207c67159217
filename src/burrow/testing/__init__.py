"""Test utilities for burrow gateways.

Provides an in-process ASGI test client::

    from burrow.testing import TestClient
"""

from burrow.testing.client import TestClient, UpgradeResult

__all__ = ["TestClient", "UpgradeResult"]
