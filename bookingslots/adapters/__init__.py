"""
Adapters layer - External integrations (scheduling REST API).
"""

from .api_client import SchedulingAPIClient
from .mock_api_client import MockSchedulingClient

__all__ = ["SchedulingAPIClient", "MockSchedulingClient"]
