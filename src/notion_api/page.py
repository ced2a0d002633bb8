"""Notion page objects."""

from typing import Dict, List, Literal, Optional

from pydantic import Field

from .blocks import Block
from .database import Database
from .properties import SERVER_COMPUTED_TYPES, PropertyData, TitlePropertyData
from .times import Timestamp
from .types import NotionModel, PageParent, User, plain_text, rich_text

# Cleared when a page is used as the template for a new one.
_TEMPLATE_CLEARED = ("id", "created_time", "last_edited_time")


def _keep_in_template(prop) -> bool:
    if prop.type in SERVER_COMPUTED_TYPES:
        return False
    if prop.type == "relation":
        return bool(prop.relation)
    if prop.type == "select":
        return prop.select is not None
    if prop.type == "multi_select":
        return bool(prop.multi_select)
    return True


class Page(NotionModel):
    """A Notion page.

    ref: https://developers.notion.com/reference/page
    """

    object: Literal["page"] = "page"
    id: Optional[str] = None
    created_time: Optional[Timestamp] = None
    created_by: Optional[User] = None
    last_edited_time: Optional[Timestamp] = None
    last_edited_by: Optional[User] = None
    archived: bool = False
    parent: Optional[PageParent] = None
    properties: Dict[str, PropertyData] = Field(default_factory=dict)
    # Only sent on create.
    children: Optional[List[Block]] = None
    url: Optional[str] = None
    public_url: Optional[str] = None

    def get_title(self) -> str:
        """Extract the page title from properties."""
        for prop in self.properties.values():
            if prop.type == "title":
                return plain_text(prop.title)
        return ""

    def get_property(self, name: str) -> Optional[PropertyData]:
        return self.properties.get(name)

    def as_template(self) -> "Page":
        """Derive a creation payload for a new page from this one.

        The copy goes through the wire codec, so it shares nothing with the
        source. Identifier and timestamps are cleared, and the properties
        the server computes or that carry no value (empty relation, unset
        select, empty multi_select) are dropped. Everything else is copied
        as-is without any schema validation.

        Returns:
            A new, independent Page.
        """
        data = self.to_wire()
        for key in _TEMPLATE_CLEARED:
            data.pop(key, None)
        page = Page.from_wire(data)
        page.properties = {
            name: prop for name, prop in page.properties.items() if _keep_in_template(prop)
        }
        if self.parent is not None and page.parent is not None:
            page.parent.resolve(self.parent.database)
        return page

    def set_property(self, name: str, value: PropertyData) -> None:
        """Set a property after checking it against the parent database schema.

        Args:
            name: Property name as it appears in the database schema
            value: The new property value

        Raises:
            RuntimeError: If the parent database is not resolved
            ValueError: If the schema has no such property or the types differ
        """
        database = self.parent.database if self.parent is not None else None
        if database is None:
            raise RuntimeError(f"parent database of page {self.id!r} is not resolved")

        schema = database.properties.get(name)
        if schema is None:
            raise ValueError(f"Property {name!r} not found in database schema")
        if schema.type != value.type:
            raise ValueError(f"Property {name!r} is type {schema.type!r}; got {value.type!r}")

        properties = dict(self.properties)
        properties[name] = value
        self.properties = properties


def new_page(
    database: Database, title: str, children: Optional[List[Block]] = None
) -> Page:
    """Build a page ready for ``create_page`` under ``database``.

    The title is keyed by the id of the database's title property.
    """
    if not database.id:
        raise ValueError("database has no id")
    found = database.title_property()
    if found is None:
        raise ValueError(f"database {database.id!r} has no title property")
    name, schema = found

    parent = PageParent(type="database_id", database_id=database.id)
    parent.resolve(database)
    page = Page(
        parent=parent,
        properties={schema.id or name: TitlePropertyData(title=[rich_text(title)])},
    )
    if children is not None:
        page.children = children
    return page
