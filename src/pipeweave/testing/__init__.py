"""Test utilities for pipeweave applications.

    from pipeweave.testing import TestClient
"""

from pipeweave.testing.client import TestClient

__all__ = ["TestClient"]
