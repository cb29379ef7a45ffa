import os

# Tests always run against the embedded database
os.environ.pop("DATABASE_URL", None)
os.environ.pop("MONGO_URI", None)

import mongomock
import pytest

import topic_service
from store import MongoTopicStore


@pytest.fixture()
def collection():
    client = mongomock.MongoClient(tz_aware=True)
    return client["ventspace_test"]["topic"]


@pytest.fixture()
def store(collection):
    topic_store = MongoTopicStore(collection)
    topic_store.ensure_indexes()
    return topic_store


@pytest.fixture()
def topic(store):
    """A fresh topic owned by u1"""
    outcome = topic_service.create_topic(store, "hello", "neutral", "vent", "u1")
    assert outcome.success
    return outcome.topic
