import pytest
from fastapi.testclient import TestClient

from notion_api import DatabaseNotFoundError, NotionClient, UserNotFoundError
from notion_api.database import Database
from notion_api.properties import CheckboxPropertyMetadata
from notion_api.types import BotUser, PageParent, PersonUser, rich_text
from notiontest import Mock


@pytest.fixture
def mock():
    return Mock().user("Alice", "alice@example.com").user("Bob").bot_user("Client")


@pytest.fixture
def client(mock):
    return NotionClient(http_client=mock.authenticated_client("Client"), base_url="http://testserver")


def test_missing_version(mock):
    http = mock.authenticated_client("Client")
    r = http.get("/v1/users")
    assert r.status_code == 400
    assert r.json()["code"] == "missing_version"


def test_unauthorized(mock):
    r = TestClient(mock.app).get("/v1/users", headers={"Notion-Version": "2022-06-28"})
    assert r.status_code == 401
    assert r.json() == {
        "object": "object",
        "status": 401,
        "code": "unauthorized",
        "message": "API token is invalid.",
    }


def test_list_all_users(client):
    users = client.list_all_users()
    assert [u.name for u in users] == ["Alice", "Bob", "Client"]
    assert isinstance(users[0], PersonUser)
    assert users[0].person.email == "alice@example.com"
    assert isinstance(users[2], BotUser)


def test_list_users_paginates(mock, client):
    client.page_size = 2
    assert [u.name for u in client.list_all_users()] == ["Alice", "Bob", "Client"]

    http = mock.authenticated_client("Client")
    r = http.get("/v1/users", params={"page_size": 2}, headers={"Notion-Version": "2022-06-28"})
    data = r.json()
    assert data["has_more"] is True
    assert data["next_cursor"] == mock.find_user("Client").id


def test_get_user_and_me(mock, client):
    alice = mock.find_user("Alice")
    assert client.get_user(alice.id).name == "Alice"
    assert client.get_me().name == "Client"
    with pytest.raises(UserNotFoundError):
        client.get_user("00000000-0000-4000-8000-000000000000")


def test_databases(mock, client):
    page_id = "98ad959b-2b6a-4774-80ee-00246fb0ea9b"
    db = Database(
        parent=PageParent(type="page_id", page_id=page_id),
        title=[rich_text("Tasks")],
        properties={"Done": CheckboxPropertyMetadata()},
    )
    created = client.create_database(db)
    assert created.id
    assert mock.find_database("Tasks")[0].id == created.id

    fetched = client.get_database(created.id)
    assert fetched.get_title() == "Tasks"
    assert fetched.properties["Done"].type == "checkbox"

    fetched.title = [rich_text("Renamed")]
    updated = client.update_database(fetched)
    assert updated.id == created.id
    assert updated.get_title() == "Renamed"
    assert mock.find_database("Tasks") == []
    assert client.get_database(created.id).get_title() == "Renamed"

    with pytest.raises(DatabaseNotFoundError):
        client.get_database("00000000-0000-4000-8000-000000000000")


def test_preregistered_database(mock, client):
    db = mock.new_database("Inbox")
    assert client.get_database(db.id).get_title() == "Inbox"


def test_bot_token_format(mock):
    token = mock.generate_bot_token("Client")
    assert token.startswith("secret_")
    assert len(token) == len("secret_") + 43
    with pytest.raises(ValueError):
        mock.generate_bot_token("Nobody")


def test_environment_token_does_not_override_client_credentials(mock, monkeypatch):
    from notion_api import client as client_module

    monkeypatch.setattr(client_module.settings, "token", "secret_from_environment")
    client = NotionClient(http_client=mock.authenticated_client("Client"), base_url="http://testserver")
    assert client.token is None
    assert [u.name for u in client.list_all_users()] == ["Alice", "Bob", "Client"]
