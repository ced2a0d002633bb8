"""Typed client for the Notion API."""

__version__ = "0.1.0"

from .blocks import Block
from .client import DEFAULT_PAGE_SIZE, NotionClient
from .database import Database
from .editor import PageEditor
from .errors import (
    BadRequestError,
    BlockNotFoundError,
    DatabaseNotFoundError,
    DecodeError,
    NotFoundError,
    NotionAPIError,
    NotionError,
    PageNotFoundError,
    RateLimitedError,
    UnauthorizedError,
    UserNotFoundError,
)
from .filters import Filter, SearchFilter, SearchSort, Sort
from .page import Page, new_page
from .properties import PropertyData, PropertyMetadata
from .types import PageParent, User, rich_text

__all__ = [
    "__version__",
    "BadRequestError",
    "Block",
    "BlockNotFoundError",
    "DEFAULT_PAGE_SIZE",
    "Database",
    "DatabaseNotFoundError",
    "DecodeError",
    "Filter",
    "NotFoundError",
    "NotionAPIError",
    "NotionClient",
    "NotionError",
    "Page",
    "PageEditor",
    "PageNotFoundError",
    "PageParent",
    "PropertyData",
    "PropertyMetadata",
    "RateLimitedError",
    "SearchFilter",
    "SearchSort",
    "Sort",
    "UnauthorizedError",
    "User",
    "UserNotFoundError",
    "new_page",
    "rich_text",
]
