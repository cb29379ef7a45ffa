"""
Topic store

CRUD-by-id over the "topic" collection. Every mutation is one atomic update
against a single document: votes, comments and reports are changed with
conditional update operators, never by rewriting the whole topic.
"""

import functools
import logging
from typing import List, Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from errors import StoreError
from schemas import Comment, Topic, TopicBase

logger = logging.getLogger(__name__)

# _id breaks ties between topics created in the same millisecond
RECENT_ORDER = [("createdAt", DESCENDING), ("_id", DESCENDING)]


def to_object_id(id_str) -> Optional[ObjectId]:
    """Parse a client supplied id; anything that is not an ObjectId matches nothing."""
    if isinstance(id_str, ObjectId):
        return id_str
    if not isinstance(id_str, str):
        return None
    try:
        return ObjectId(id_str.strip())
    except InvalidId:
        return None


class TopicStore(Protocol):
    def ensure_indexes(self) -> None: ...

    def insert(self, topic: TopicBase) -> Topic: ...

    def find_by_id(self, topic_id: str) -> Optional[Topic]: ...

    def find_recent(self, limit: int) -> List[Topic]: ...

    def remove_vote(self, topic_id: str, voter_id: str, vote_type: str) -> bool: ...

    def switch_vote(self, topic_id: str, voter_id: str, vote_type: str) -> bool: ...

    def add_vote(self, topic_id: str, voter_id: str, vote_type: str) -> bool: ...

    def push_comment(self, topic_id: str, comment: Comment) -> Optional[Topic]: ...

    def increment_reports(self, topic_id: str) -> Optional[Topic]: ...

    def delete_owned(self, topic_id: str, owner_id: str) -> bool: ...


def _guarded(method):
    """Re-raise driver errors and unreadable records as StoreError so callers deal with one failure type."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self.collection is None:
            raise StoreError("Database not available. Check DATABASE_URL and DATABASE_NAME environment variables.")
        try:
            return method(self, *args, **kwargs)
        except PyMongoError as exc:
            raise StoreError(f"{method.__name__} failed: {exc}") from exc
        except ValidationError as exc:
            raise StoreError(f"{method.__name__} read a malformed topic: {exc}") from exc
    return wrapper


class MongoTopicStore:
    """TopicStore backed by a pymongo (or mongomock) collection."""

    def __init__(self, collection):
        self.collection = collection

    @_guarded
    def ensure_indexes(self) -> None:
        self.collection.create_index(RECENT_ORDER)
        self.collection.create_index([("userId", ASCENDING)])

    @_guarded
    def insert(self, topic: TopicBase) -> Topic:
        doc = topic.to_document()
        inserted_id = self.collection.insert_one(doc).inserted_id
        return Topic.from_document({**doc, "_id": inserted_id})

    @_guarded
    def find_by_id(self, topic_id: str) -> Optional[Topic]:
        oid = to_object_id(topic_id)
        if oid is None:
            return None
        doc = self.collection.find_one({"_id": oid})
        return Topic.from_document(doc) if doc else None

    @_guarded
    def find_recent(self, limit: int) -> List[Topic]:
        cursor = self.collection.find({}).sort(RECENT_ORDER).limit(limit)
        return [Topic.from_document(d) for d in cursor]

    # Votes: each call applies only when its precondition on the voter's
    # current vote holds, and reports whether it matched.

    def _conditional_update(self, topic_id: str, condition: dict, update: dict) -> bool:
        oid = to_object_id(topic_id)
        if oid is None:
            return False
        result = self.collection.update_one({"_id": oid, **condition}, update)
        return result.matched_count > 0

    @_guarded
    def remove_vote(self, topic_id: str, voter_id: str, vote_type: str) -> bool:
        return self._conditional_update(
            topic_id,
            {"votes": {"$elemMatch": {"userId": voter_id, "type": vote_type}}},
            {"$pull": {"votes": {"userId": voter_id}}},
        )

    @_guarded
    def switch_vote(self, topic_id: str, voter_id: str, vote_type: str) -> bool:
        return self._conditional_update(
            topic_id,
            {"votes": {"$elemMatch": {"userId": voter_id, "type": {"$ne": vote_type}}}},
            {"$set": {"votes.$.type": vote_type}},
        )

    @_guarded
    def add_vote(self, topic_id: str, voter_id: str, vote_type: str) -> bool:
        return self._conditional_update(
            topic_id,
            {"votes.userId": {"$ne": voter_id}},
            {"$push": {"votes": {"userId": voter_id, "type": vote_type}}},
        )

    def _find_and_update(self, topic_id: str, update: dict) -> Optional[Topic]:
        oid = to_object_id(topic_id)
        if oid is None:
            return None
        doc = self.collection.find_one_and_update(
            {"_id": oid}, update, return_document=ReturnDocument.AFTER
        )
        return Topic.from_document(doc) if doc else None

    @_guarded
    def push_comment(self, topic_id: str, comment: Comment) -> Optional[Topic]:
        return self._find_and_update(topic_id, {"$push": {"comments": comment.model_dump(by_alias=True)}})

    @_guarded
    def increment_reports(self, topic_id: str) -> Optional[Topic]:
        return self._find_and_update(topic_id, {"$inc": {"reportCount": 1}})

    @_guarded
    def delete_owned(self, topic_id: str, owner_id: str) -> bool:
        oid = to_object_id(topic_id)
        if oid is None:
            return False
        result = self.collection.delete_one({"_id": oid, "userId": owner_id})
        return result.deleted_count > 0
