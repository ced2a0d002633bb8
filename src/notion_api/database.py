"""Notion database objects."""

from typing import Dict, List, Literal, Optional, Tuple

from pydantic import Field

from .properties import PropertyMetadata
from .times import Timestamp
from .types import NotionModel, PageParent, PartialUser, RichTextObject, plain_text

# Read-only on update; the server owns them.
_READ_ONLY_FIELDS = (
    "object",
    "id",
    "parent",
    "created_time",
    "created_by",
    "last_edited_time",
    "last_edited_by",
    "url",
    "public_url",
)


class Database(NotionModel):
    """A Notion database with its property schema.

    ref: https://developers.notion.com/reference/database
    """

    object: Literal["database"] = "database"
    id: Optional[str] = None
    parent: Optional[PageParent] = None
    created_time: Optional[Timestamp] = None
    created_by: Optional[PartialUser] = None
    last_edited_time: Optional[Timestamp] = None
    last_edited_by: Optional[PartialUser] = None
    title: List[RichTextObject] = Field(default_factory=list)
    description: List[RichTextObject] = Field(default_factory=list)
    properties: Dict[str, PropertyMetadata] = Field(default_factory=dict)
    url: Optional[str] = None
    is_inline: bool = False
    public_url: Optional[str] = None
    archived: bool = False

    def get_title(self) -> str:
        """Extract the database title as plain text."""
        return plain_text(self.title)

    def title_property(self) -> Optional[Tuple[str, PropertyMetadata]]:
        """Return ``(name, schema)`` of the title column, if any."""
        for name, prop in self.properties.items():
            if prop.type == "title":
                return name, prop
        return None

    def update_payload(self) -> Dict[str, object]:
        """Body for ``PATCH /databases/{id}``: only writable fields."""
        data = self.to_wire()
        for key in _READ_ONLY_FIELDS:
            data.pop(key, None)
        return data
