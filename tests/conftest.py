import json

import httpx
import pytest

from notion_api import NotionClient

DATABASE_ID = "56f2049d-feb1-4a3f-b227-2fa76ca74d0e"
PAGE_ID = "7b1c5b7c-1c9f-4a8a-bc73-2e4c2b6b9e10"
USER_ID = "2d2f95c8-c1b6-4ce1-88be-47b5b4e876e7"

LIST_USERS = {
    "object": "list",
    "results": [
        {
            "object": "user",
            "id": USER_ID,
            "type": "person",
            "name": "Foo Bar",
            "avatar_url": None,
            "person": {"email": "foo@example.com"},
        },
        {
            "object": "user",
            "id": "9a3b5ae0-c6e6-482d-b0e1-ed315ee6dc57",
            "type": "bot",
            "name": "Integration",
            "avatar_url": None,
            "bot": {},
        },
    ],
    "next_cursor": None,
    "has_more": False,
}


def rich_text_json(content):
    return {
        "type": "text",
        "text": {"content": content, "link": None},
        "annotations": {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            "color": "default",
        },
        "plain_text": content,
        "href": None,
    }


DATABASE = {
    "object": "database",
    "id": DATABASE_ID,
    "created_time": "2021-05-18T12:49:00.000Z",
    "last_edited_time": "2021-05-20T01:03:00.000Z",
    "created_by": {"object": "user", "id": USER_ID},
    "title": [rich_text_json("Tasks")],
    "description": [],
    "is_inline": False,
    "archived": False,
    "parent": {"type": "page_id", "page_id": "98ad959b-2b6a-4774-80ee-00246fb0ea9b"},
    "properties": {
        "Name": {"id": "title", "name": "Name", "type": "title", "title": {}},
        "Status": {
            "id": "%3AUPp",
            "name": "Status",
            "type": "select",
            "select": {
                "options": [
                    {"id": "1", "name": "Todo", "color": "red"},
                    {"id": "2", "name": "Done", "color": "green"},
                ]
            },
        },
        "Tags": {
            "id": "Jwna",
            "name": "Tags",
            "type": "multi_select",
            "multi_select": {"options": [{"id": "3", "name": "a", "color": "blue"}]},
        },
        "Estimate": {"id": "Xk5F", "name": "Estimate", "type": "number", "number": {"format": "number"}},
        "Created at": {"id": "cT", "name": "Created at", "type": "created_time", "created_time": {}},
        "Verification": {"id": "vf", "name": "Verification", "type": "verification", "verification": {}},
    },
    "url": f"https://www.notion.so/{DATABASE_ID.replace('-', '')}",
}

PAGE = {
    "object": "page",
    "id": PAGE_ID,
    "created_time": "2021-05-18T12:49:00.000Z",
    "last_edited_time": "2021-05-20T01:03:00.000Z",
    "created_by": {"object": "user", "id": USER_ID},
    "last_edited_by": {"object": "user", "id": USER_ID},
    "archived": False,
    "parent": {"type": "database_id", "database_id": DATABASE_ID},
    "url": "https://www.notion.so/Write-tests",
    "properties": {
        "Name": {"id": "title", "type": "title", "title": [rich_text_json("Write tests")]},
        "Status": {"id": "%3AUPp", "type": "select", "select": {"id": "1", "name": "Todo", "color": "red"}},
        "Priority": {"id": "pr", "type": "select", "select": None},
        "Tags": {"id": "Jwna", "type": "multi_select", "multi_select": []},
        "Estimate": {"id": "Xk5F", "type": "number", "number": 3},
        "Blocked by": {
            "id": "bb",
            "type": "relation",
            "relation": [{"id": "0c1f7cb2-8d7c-4b3b-9f3a-0e2f1a5e4c11"}],
            "has_more": False,
        },
        "Related": {"id": "rl", "type": "relation", "relation": [], "has_more": False},
        "Schedule": {"id": "sc", "type": "date", "date": {"start": "2021-12-01", "end": None, "time_zone": None}},
        "Created at": {"id": "cT", "type": "created_time", "created_time": "2021-05-18T12:49:00.000Z"},
        "Updated at": {"id": "uT", "type": "last_edited_time", "last_edited_time": "2021-05-20T01:03:00.000Z"},
        "Author": {"id": "au", "type": "created_by", "created_by": {"object": "user", "id": USER_ID}},
        "Editor": {"id": "ed", "type": "last_edited_by", "last_edited_by": {"object": "user", "id": USER_ID}},
    },
}


def list_of(results, has_more=False, next_cursor=None):
    return {"object": "list", "results": results, "has_more": has_more, "next_cursor": next_cursor}


def block_json(block_id, text):
    return {
        "object": "block",
        "id": block_id,
        "created_time": "2021-05-18T12:49:00.000Z",
        "last_edited_time": "2021-05-18T12:49:00.000Z",
        "has_children": False,
        "archived": False,
        "type": "paragraph",
        "paragraph": {"rich_text": [rich_text_json(text)], "color": "default"},
    }


class Recorder:
    """Serves canned responses in order and keeps every request it saw."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.responses.pop(0)
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, content=body or b"")

    def body(self, index=-1):
        return json.loads(self.requests[index].content)


@pytest.fixture
def make_client():
    """Build a NotionClient that answers from a Recorder."""

    def _make(*responses):
        recorder = Recorder(*responses)
        http = httpx.Client(transport=httpx.MockTransport(recorder))
        client = NotionClient(token="secret_test", base_url="https://example.com", http_client=http)
        return client, recorder

    return _make
