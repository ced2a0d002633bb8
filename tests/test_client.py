import httpx
import pytest

from conftest import DATABASE, DATABASE_ID, LIST_USERS, PAGE, PAGE_ID, block_json, list_of, rich_text_json
from notion_api import (
    BadRequestError,
    BlockNotFoundError,
    Database,
    DatabaseNotFoundError,
    DecodeError,
    NotionAPIError,
    NotionClient,
    PageNotFoundError,
    RateLimitedError,
    UnauthorizedError,
    UserNotFoundError,
    __version__,
)
from notion_api.blocks import UnsupportedBlock, paragraph
from notion_api.filters import CheckboxFilter, Filter, SearchFilter, Sort
from notion_api.page import Page
from notion_api.properties import NumberPropertyData, RichTextPropertyData, RollupPropertyData
from notion_api.types import BotUser, PersonUser


def test_list_all_users(make_client):
    client, rec = make_client((200, LIST_USERS))
    users = client.list_all_users()

    assert len(users) == 2
    assert isinstance(users[0], PersonUser)
    assert users[0].type == "person"
    assert users[0].person.email == "foo@example.com"
    assert isinstance(users[1], BotUser)
    assert users[1].type == "bot"

    req = rec.requests[0]
    assert req.method == "GET"
    assert req.url.path == "/v1/users"
    assert req.url.params["page_size"] == "100"
    assert "start_cursor" not in req.url.params


def test_headers(make_client):
    client, rec = make_client((200, LIST_USERS["results"][0]), (200, DATABASE))
    client.get_user("u1")
    client.create_database(Database.from_wire(DATABASE))

    get, post = rec.requests
    assert get.headers["Notion-Version"] == "2022-06-28"
    assert get.headers["User-Agent"] == f"notion-api-python/{__version__}"
    assert get.headers["Authorization"] == "Bearer secret_test"
    assert "Content-Type" not in get.headers
    assert post.headers["Content-Type"] == "application/json"


def test_identifiers_are_single_path_segments(make_client):
    client, rec = make_client((200, PAGE))
    client.get_page("../users/me?x=1")
    assert rec.requests[0].url.raw_path == b"/v1/pages/..%2Fusers%2Fme%3Fx%3D1"


def test_base_url_path_is_forced_to_v1():
    client = NotionClient(token="t", base_url="https://example.com/some/where")
    assert client.api_base == "https://example.com/v1"
    assert client._url("blocks", "abc", "children") == "https://example.com/v1/blocks/abc/children"


def test_token_is_required_without_http_client(monkeypatch):
    from notion_api import client as client_module

    monkeypatch.setattr(client_module.settings, "token", None)
    with pytest.raises(RuntimeError, match="NOTION_TOKEN not set"):
        NotionClient()
    # A caller-supplied client may carry its own credentials.
    client = NotionClient(http_client=httpx.Client())
    assert "Authorization" not in client._headers()


def test_get_pagination_walks_every_page(make_client):
    pages = [
        list_of([block_json("b1", "one"), block_json("b2", "two")], True, "b3"),
        list_of([block_json("b3", "three")], True, "b4"),
        list_of([block_json("b4", "four")]),
    ]
    client, rec = make_client(*[(200, p) for p in pages])
    client.page_size = 2

    blocks = client.get_blocks("parent")
    assert [b.id for b in blocks] == ["b1", "b2", "b3", "b4"]
    assert [b.plain_text() for b in blocks] == ["one", "two", "three", "four"]
    assert len(rec.requests) == 3
    assert rec.requests[0].url.path == "/v1/blocks/parent/children"
    assert [r.url.params.get("start_cursor") for r in rec.requests] == [None, "b3", "b4"]
    assert all(r.url.params["page_size"] == "2" for r in rec.requests)


def test_query_database_carries_filter_on_every_page(make_client):
    second = dict(PAGE, id="second")
    client, rec = make_client((200, list_of([PAGE], True, "c2")), (200, list_of([second])))
    f = Filter(property="Done", checkbox=CheckboxFilter(equals=False))
    pages = client.query_database(DATABASE_ID, filter=f, sorts=[Sort(timestamp="last_edited_time")])

    assert [p.id for p in pages] == [PAGE_ID, "second"]
    assert rec.requests[0].method == "POST"
    assert rec.requests[0].url.path == f"/v1/databases/{DATABASE_ID}/query"
    first, last = rec.body(0), rec.body(1)
    assert "start_cursor" not in first
    assert last["start_cursor"] == "c2"
    for body in (first, last):
        assert body["filter"] == {"property": "Done", "checkbox": {"equals": False}}
        assert body["sorts"] == [{"timestamp": "last_edited_time", "direction": "ascending"}]
        assert body["page_size"] == 100


def test_pagination_error_discards_partial_results(make_client):
    client, rec = make_client(
        (200, list_of([LIST_USERS["results"][0]], True, "next")),
        (500, {"object": "error", "status": 500, "code": "internal_server_error", "message": "boom"}),
    )
    with pytest.raises(NotionAPIError) as e:
        client.list_all_users()
    assert e.value.status == 500
    assert e.value.code == "internal_server_error"
    assert len(rec.requests) == 2


def test_not_found_is_scoped_to_resource(make_client):
    client, _ = make_client(
        (404, b""),
        (404, {"object": "error", "status": 404, "code": "object_not_found", "message": "Could not find user."}),
        (404, b""),
        (404, b""),
    )
    with pytest.raises(DatabaseNotFoundError) as e:
        client.get_database(DATABASE_ID)
    assert e.value.code == "object_not_found"
    with pytest.raises(UserNotFoundError, match="object_not_found: Could not find user."):
        client.get_user("u1")
    with pytest.raises(PageNotFoundError):
        client.get_page(PAGE_ID)
    with pytest.raises(BlockNotFoundError):
        client.delete_block("b1")


def test_rate_limited_query(make_client):
    client, _ = make_client((429, b"slow down"))
    with pytest.raises(RateLimitedError) as e:
        client.query_database(DATABASE_ID)
    assert e.value.status == 429
    assert e.value.code == "rate_limited"


def test_structured_bad_request(make_client):
    body = {
        "object": "error",
        "status": 400,
        "code": "validation_error",
        "message": "Title is not a property that exists.",
    }
    client, _ = make_client((400, body), (401, b""))
    page = Page.from_wire(PAGE).as_template()
    with pytest.raises(BadRequestError) as e:
        client.create_page(page)
    assert e.value.code == "validation_error"
    assert str(e.value) == "validation_error: Title is not a property that exists."
    with pytest.raises(UnauthorizedError):
        client.get_me()


def test_create_page_not_found_follows_parent(make_client):
    client, _ = make_client((404, b""))
    page = Page.from_wire(PAGE).as_template()
    with pytest.raises(DatabaseNotFoundError):
        client.create_page(page)


def test_decode_error_names_operation(make_client):
    client, _ = make_client((200, b"<html>"), (200, {"object": "database", "id": "d", "created_time": "soon"}))
    with pytest.raises(DecodeError) as e:
        client.get_user("u1")
    assert e.value.operation == "get_user"
    assert str(e.value).startswith("failed to parse a response of get_user")
    with pytest.raises(DecodeError):
        client.get_database("d")


def test_update_database_sends_writable_fields(make_client):
    client, rec = make_client((200, DATABASE))
    db = Database.from_wire(DATABASE)
    updated = client.update_database(db)

    assert updated.id == DATABASE_ID
    assert rec.requests[0].method == "PATCH"
    body = rec.body()
    assert "id" not in body and "created_time" not in body
    assert body["properties"]["Status"]["select"]["options"][0]["name"] == "Todo"


def test_update_page(make_client):
    client, rec = make_client((200, PAGE))
    client.update_page(PAGE_ID, properties={"Estimate": NumberPropertyData(number=5)}, archived=False)
    assert rec.body() == {"properties": {"Estimate": {"type": "number", "number": 5}}, "archived": False}


def test_get_page_property_single_item(make_client):
    client, rec = make_client((200, {"object": "property_item", "id": "Xk5F", "type": "number", "number": 3}))
    prop = client.get_page_property(PAGE_ID, "Xk5F")
    assert isinstance(prop, NumberPropertyData)
    assert prop.number == 3
    assert rec.requests[0].url.path == f"/v1/pages/{PAGE_ID}/properties/Xk5F"


def test_get_page_property_merges_pages(make_client):
    def item(text):
        return {"object": "property_item", "id": "rt", "type": "rich_text", "rich_text": rich_text_json(text)}

    summary = {"id": "rt", "type": "rich_text", "rich_text": {}, "next_url": None}
    first = dict(list_of([item("Hello, ")], True, "c2"), property_item=summary)
    second = dict(list_of([item("world")]), property_item=summary)
    client, rec = make_client((200, first), (200, second))

    prop = client.get_page_property(PAGE_ID, "rt")
    assert isinstance(prop, RichTextPropertyData)
    assert str(prop) == "Hello, world"
    assert rec.requests[1].url.params["start_cursor"] == "c2"


def test_get_page_property_rollup_of_text_values(make_client):
    def item(text):
        return {"object": "property_item", "id": "ru", "type": "rich_text", "rich_text": rich_text_json(text)}

    summary = {"id": "ru", "type": "rollup", "rollup": {"type": "array", "function": "show_original"}, "next_url": None}
    first = dict(list_of([item("alpha")], True, "c2"), property_item=summary)
    second = dict(list_of([item("beta")]), property_item=summary)
    client, _ = make_client((200, first), (200, second))

    prop = client.get_page_property(PAGE_ID, "ru")
    assert isinstance(prop, RollupPropertyData)
    assert prop.rollup.function == "show_original"
    assert [str(v) for v in prop.rollup.array] == ["alpha", "beta"]
    assert str(prop) == "alpha, beta"

def test_blocks_round_trip(make_client):
    unknown = {"object": "block", "id": "b9", "type": "synced_block", "synced_block": {"synced_from": None}}
    client, rec = make_client(
        (200, unknown),
        (200, list_of([block_json("b1", "added")])),
        (200, block_json("b1", "changed")),
    )
    block = client.get_block("b9")
    assert isinstance(block, UnsupportedBlock)

    added = client.append_blocks("page", [paragraph("added")], after="b0")
    assert [b.id for b in added] == ["b1"]
    assert rec.requests[1].method == "PATCH"
    assert rec.body(1)["after"] == "b0"
    assert rec.body(1)["children"][0]["type"] == "paragraph"

    changed = added[0]
    changed.paragraph.rich_text[0].text.content = "changed"
    client.update_block(changed)
    body = rec.body(2)
    assert set(body) == {"paragraph", "archived"}
    assert body["paragraph"]["rich_text"][0]["text"]["content"] == "changed"


def test_search_returns_pages_and_databases(make_client):
    client, rec = make_client((200, list_of([PAGE, DATABASE])))
    results = client.search("Tasks", filter=SearchFilter(value="page"))
    assert isinstance(results[0], Page)
    assert isinstance(results[1], Database)
    assert rec.body() == {
        "query": "Tasks",
        "filter": {"value": "page", "property": "object"},
        "page_size": 100,
    }
