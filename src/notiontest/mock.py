"""In-memory stand-in for the Notion API."""

import secrets
from typing import Dict, List, Optional

from fastapi import FastAPI
from fastapi.testclient import TestClient

from notion_api.database import Database
from notion_api.types import Bot, BotUser, Person, PersonUser

from . import util
from .app import create_app

SECRET_SEED = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Mock:
    """Holds users, databases and bot tokens served by the mock application.

    Example:
        mock = Mock().user("Alice", "alice@example.com").bot_user("Client")
        client = NotionClient(
            http_client=mock.authenticated_client("Client"),
            base_url="http://testserver",
        )
        users = client.list_all_users()
    """

    def __init__(self) -> None:
        self.users: List = []
        self.databases: List[Database] = []
        self.tokens: Dict[str, object] = {}
        self._app: Optional[FastAPI] = None

    def user(self, name: str, email: Optional[str] = None) -> "Mock":
        """Add a person user."""
        person = Person(email=email) if email else Person()
        self.users.append(PersonUser(object="user", id=util.new_id(), name=name, person=person))
        return self

    def bot_user(self, name: str) -> "Mock":
        """Add a bot user."""
        self.users.append(BotUser(object="user", id=util.new_id(), name=name, bot=Bot()))
        return self

    def database(self, db: Database) -> "Mock":
        """Add a database, assigning an id if it has none."""
        if not db.id:
            db.id = util.new_id()
        db.object = "database"
        self.databases.append(db)
        return self

    def new_database(self, title: str) -> Database:
        """Create a database with ``title`` and add it."""
        db = util.new_database(title)
        self.database(db)
        return db

    def find_user(self, name: str):
        for user in self.users:
            if user.name == name:
                return user
        return None

    def find_database(self, title: str) -> List[Database]:
        """Every database whose title is ``title``."""
        return [db for db in self.databases if db.title and db.get_title() == title]

    def get_database(self, database_id: str) -> Optional[Database]:
        for db in self.databases:
            if db.id == database_id:
                return db
        return None

    def replace_database(self, db: Database) -> None:
        for i, current in enumerate(self.databases):
            if current.id == db.id:
                self.databases[i] = db
                return
        raise ValueError(f"unknown database {db.id!r}")

    def generate_bot_token(self, bot_name: str) -> str:
        """Issue a new token that authenticates as the user named ``bot_name``."""
        bot = self.find_user(bot_name)
        if bot is None:
            raise ValueError(f"no user named {bot_name!r}")
        token = "secret_" + "".join(secrets.choice(SECRET_SEED) for _ in range(43))
        self.tokens[token] = bot
        return token

    @property
    def app(self) -> FastAPI:
        if self._app is None:
            self._app = create_app(self)
        return self._app

    def authenticated_client(self, bot_name: str) -> TestClient:
        """An httpx-compatible client that talks to the mock as ``bot_name``."""
        token = self.generate_bot_token(bot_name)
        return TestClient(self.app, headers={"Authorization": f"Bearer {token}"})
