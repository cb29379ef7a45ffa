"""Tests for the Mongo topic store and the wire representation."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError
from pymongo.errors import ServerSelectionTimeoutError

from errors import StoreError
from schemas import Comment, Topic, TopicBase, tombstone
from store import MongoTopicStore, to_object_id


def _new_topic(**overrides):
    fields = dict(
        content="hello",
        mood="sad",
        mode="vent",
        user_id="u1",
        created_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return TopicBase(**fields)


def test_insert_stores_camel_case_document(store, collection):
    topic = store.insert(_new_topic())

    doc = collection.find_one({})
    assert str(doc["_id"]) == topic.id
    assert doc["userId"] == "u1"
    assert doc["votes"] == []
    assert doc["comments"] == []
    assert doc["reportCount"] == 0
    assert "agreeCount" not in doc


def test_wire_representation(store):
    topic = store.insert(_new_topic())
    store.add_vote(topic.id, "u2", "agree")
    store.add_vote(topic.id, "u3", "disagree")
    store.add_vote(topic.id, "u4", "agree")
    store.push_comment(topic.id, Comment(
        text="same", user_id="u5", timestamp=datetime(2024, 5, 1, 13, tzinfo=timezone.utc),
    ))

    wire = store.find_by_id(topic.id).to_wire()

    assert wire["_id"] == topic.id
    assert wire["userId"] == "u1"
    assert wire["agreeCount"] == 2
    assert wire["disagreeCount"] == 1
    assert wire["votes"][0] == {"userId": "u2", "type": "agree"}
    assert wire["comments"][0]["userId"] == "u5"
    assert isinstance(wire["createdAt"], str)
    assert wire["createdAt"].startswith("2024-05-01T12:30:00")
    assert wire["comments"][0]["timestamp"].startswith("2024-05-01T13:00:00")


def test_naive_datetimes_read_back_as_utc():
    topic = Topic.from_document({
        "_id": "abc",
        "content": "hi",
        "userId": "u1",
        "createdAt": datetime(2024, 1, 1, 8, 0),
    })
    assert topic.created_at.tzinfo == timezone.utc
    assert topic.mood == "neutral"
    assert topic.mode == "vent"


def test_tombstone():
    assert tombstone("abc") == {"_id": "abc", "deleted": True}


@pytest.mark.parametrize("value", [None, "", "nope", 42, "zzzzzzzzzzzzzzzzzzzzzzzz"])
def test_to_object_id_rejects_garbage(value):
    assert to_object_id(value) is None


def test_find_recent_limit_and_order(store):
    for hour in (1, 3, 2):
        store.insert(_new_topic(content=f"h{hour}", created_at=datetime(2024, 1, 1, hour, tzinfo=timezone.utc)))

    recent = store.find_recent(2)

    assert [t.content for t in recent] == ["h3", "h2"]


def test_vote_updates_are_conditional(store):
    topic = store.insert(_new_topic())

    assert store.remove_vote(topic.id, "u2", "agree") is False
    assert store.switch_vote(topic.id, "u2", "agree") is False
    assert store.add_vote(topic.id, "u2", "agree") is True
    assert store.add_vote(topic.id, "u2", "disagree") is False
    assert store.switch_vote(topic.id, "u2", "agree") is False
    assert store.switch_vote(topic.id, "u2", "disagree") is True
    assert store.remove_vote(topic.id, "u2", "agree") is False
    assert store.remove_vote(topic.id, "u2", "disagree") is True
    assert store.find_by_id(topic.id).votes == []


def test_increment_reports(store):
    topic = store.insert(_new_topic())
    store.increment_reports(topic.id)
    assert store.increment_reports(topic.id).report_count == 2


def test_delete_owned_requires_owner(store):
    topic = store.insert(_new_topic())

    assert store.delete_owned(topic.id, "u2") is False
    assert store.delete_owned(topic.id, "u1") is True
    assert store.find_by_id(topic.id) is None


def test_driver_errors_become_store_errors():
    collection = MagicMock()
    collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")
    broken = MongoTopicStore(collection)

    with pytest.raises(StoreError):
        broken.find_by_id("507f1f77bcf86cd799439011")


def test_missing_database_is_a_store_error():
    with pytest.raises(StoreError, match="Database not available"):
        MongoTopicStore(None).find_recent(20)


def test_find_recent_breaks_same_millisecond_ties_by_insertion(store):
    stamp = datetime(2024, 1, 1, 9, tzinfo=timezone.utc)
    for content in ("first", "second", "third"):
        store.insert(_new_topic(content=content, created_at=stamp))

    assert [t.content for t in store.find_recent(3)] == ["third", "second", "first"]


def test_malformed_record_is_a_store_error(store, collection):
    doc = _new_topic().to_document()
    doc["mood"] = "furious"
    topic_id = str(collection.insert_one(doc).inserted_id)

    with pytest.raises(StoreError, match="malformed topic") as excinfo:
        store.increment_reports(topic_id)
    assert isinstance(excinfo.value.__cause__, ValidationError)
