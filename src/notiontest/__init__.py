"""Mock Notion API for tests."""

from .app import MockAPIError, create_app
from .mock import Mock
from .util import new_database, new_id

__all__ = ["Mock", "MockAPIError", "create_app", "new_database", "new_id"]
