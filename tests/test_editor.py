import pytest

from conftest import PAGE, PAGE_ID
from notion_api.editor import PageEditor
from notion_api.properties import NumberPropertyData, SelectPropertyData
from notion_api.types import Option


def test_batch_update_commits_once(make_client):
    updated = dict(PAGE, properties=dict(PAGE["properties"], Estimate={"id": "Xk5F", "type": "number", "number": 5}))
    client, rec = make_client((200, PAGE), (200, updated))
    editor = PageEditor(client, PAGE_ID)

    with editor.batch_update():
        editor.queue_property_update("Estimate", NumberPropertyData(number=5))
        editor.queue_property_update("Status", SelectPropertyData(select=Option(name="Done")))

    assert [r.method for r in rec.requests] == ["GET", "PATCH"]
    assert rec.body() == {
        "properties": {
            "Estimate": {"type": "number", "number": 5},
            "Status": {"type": "select", "select": {"name": "Done"}},
        }
    }
    assert editor.pending == {}
    assert editor.page.properties["Estimate"].number == 5


def test_unchanged_value_is_skipped(make_client):
    client, rec = make_client((200, PAGE))
    editor = PageEditor(client, PAGE_ID)
    with editor.batch_update():
        editor.queue_property_update("Estimate", NumberPropertyData(number=3))
    assert len(rec.requests) == 1


def test_missing_or_mismatched_property(make_client):
    client, _ = make_client((200, PAGE))
    editor = PageEditor(client, PAGE_ID)
    with pytest.raises(RuntimeError):
        editor.queue_property_update("Nope", NumberPropertyData(number=1))
    with pytest.raises(RuntimeError):
        editor.queue_property_update("Status", NumberPropertyData(number=1))


def test_error_in_batch_discards_queue(make_client):
    client, rec = make_client((200, PAGE))
    editor = PageEditor(client, PAGE_ID)
    with pytest.raises(ValueError):
        with editor.batch_update():
            editor.queue_property_update("Estimate", NumberPropertyData(number=9))
            raise ValueError("abort")
    assert editor.pending == {}
    assert len(rec.requests) == 1


def test_same_name_different_option_is_queued(make_client):
    client, _ = make_client((200, PAGE))
    editor = PageEditor(client, PAGE_ID)
    editor.queue_property_update("Status", SelectPropertyData(select=Option(id="9", name="Todo")))
    assert list(editor.pending) == ["Status"]
