import uuid

from notion_api.database import Database
from notion_api.types import rich_text


def new_id() -> str:
    return str(uuid.uuid4())


def new_database(title: str) -> Database:
    """A database with only a title, ready to be registered with the mock."""
    return Database(title=[rich_text(title)], properties={})
