"""
Database Schemas for Ventspace (anonymous mood board)

Each Pydantic model corresponds to a MongoDB collection or an embedded document.
Collection name is the lowercase of the class name.
Field aliases are the camelCase keys used both in the database and on the wire.
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

Mood = Literal["sad", "angry", "stressed", "happy", "confused", "neutral"]
PostMode = Literal["vent", "advice"]
VoteType = Literal["agree", "disagree"]


def as_utc(value: datetime) -> datetime:
    # pymongo hands back naive datetimes unless the client is tz_aware
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Vote(BaseModel):
    """
    One voter's stance on a topic (embedded in Topic.votes)
    """
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", description="Voter id, unique within a topic")
    type: VoteType


class Comment(BaseModel):
    """
    Append-only reply on a topic (embedded in Topic.comments)
    """
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., description="Trimmed comment text")
    user_id: str = Field(..., alias="userId", description="Comment author id")
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class TopicBase(BaseModel):
    """
    Fields stored for every post
    Collection: "topic"
    """
    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(..., description="Post body")
    mood: Mood = Field("neutral", description="Emotional tag")
    mode: PostMode = Field("vent", description="Just venting or asking for advice")
    user_id: str = Field(..., alias="userId", description="Owner id, the only id allowed to delete")
    votes: List[Vote] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    created_at: datetime = Field(..., alias="createdAt")
    report_count: int = Field(0, ge=0, alias="reportCount")

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class Topic(TopicBase):
    """
    A stored post with its id. Vote counters are derived from `votes` on every read.
    """
    id: str = Field(..., alias="_id")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v

    @computed_field(alias="agreeCount")
    @property
    def agree_count(self) -> int:
        return sum(1 for v in self.votes if v.type == "agree")

    @computed_field(alias="disagreeCount")
    @property
    def disagree_count(self) -> int:
        return sum(1 for v in self.votes if v.type == "disagree")

    @classmethod
    def from_document(cls, doc: dict) -> "Topic":
        return cls.model_validate(doc)

    def to_wire(self) -> dict:
        """Wire representation: camelCase keys, ISO-8601 timestamps, derived counters."""
        return self.model_dump(by_alias=True, mode="json")


def tombstone(topic_id: str) -> dict:
    """Minimal payload broadcast in place of a deleted topic"""
    return {"_id": topic_id, "deleted": True}


# Inbound socket messages. Every field is optional so that missing values reach
# the validators and produce the usual error messages.

class InboundMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreateTopicIn(InboundMessage):
    content: Optional[str] = None
    mood: Optional[str] = None
    mode: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")


class VoteTopicIn(InboundMessage):
    topic_id: Optional[str] = Field(None, alias="topicId")
    type: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")


class CommentTopicIn(InboundMessage):
    topic_id: Optional[str] = Field(None, alias="topicId")
    text: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")


class DeleteTopicIn(InboundMessage):
    topic_id: Optional[str] = Field(None, alias="topicId")
    user_id: Optional[str] = Field(None, alias="userId")


class ReportTopicIn(InboundMessage):
    topic_id: Optional[str] = Field(None, alias="topicId")
    user_id: Optional[str] = Field(None, alias="userId")
