"""
Topic mutation engine

create / vote / comment / delete / report, each applied to an explicit TopicStore.
Validation, ownership and missing-topic failures come back as a failed Outcome;
StoreError from the store propagates to the caller.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from errors import ErrorKind, StoreError, message_for
from schemas import Comment, Topic, TopicBase
from store import TopicStore
from validation import (
    ValidationResult,
    normalize_id,
    sanitize_mode,
    sanitize_mood,
    validate_comment,
    validate_content,
    validate_topic_id,
    validate_user_id,
    validate_vote_type,
)

logger = logging.getLogger(__name__)

RECENT_TOPICS_LIMIT = 20
VOTE_ATTEMPTS = 3


@dataclass(frozen=True)
class Outcome:
    """Result of one operation: the topic snapshot on success, the error kind otherwise."""
    success: bool
    topic: Optional[Topic] = None
    topic_id: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @property
    def error(self) -> Optional[str]:
        return message_for(self.kind) if self.kind else None

    @classmethod
    def ok(cls, topic: Optional[Topic] = None, topic_id: Optional[str] = None) -> "Outcome":
        return cls(success=True, topic=topic, topic_id=topic_id or (topic.id if topic else None))

    @classmethod
    def fail(cls, kind: ErrorKind, topic_id: Optional[str] = None) -> "Outcome":
        return cls(success=False, kind=kind, topic_id=topic_id)

    @classmethod
    def rejected(cls, check: ValidationResult) -> "Outcome":
        return cls.fail(check.kind)


def _now() -> datetime:
    # MongoDB stores milliseconds; match it so broadcast and stored timestamps agree
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def recent_topics(store: TopicStore, limit: int = RECENT_TOPICS_LIMIT) -> List[Topic]:
    """Most recent topics, newest first"""
    return store.find_recent(limit)


def create_topic(store: TopicStore, content, mood, mode, owner_id) -> Outcome:
    check = validate_content(content)
    if not check.valid:
        return Outcome.rejected(check)
    check = validate_user_id(owner_id)
    if not check.valid:
        return Outcome.rejected(check)

    topic = store.insert(TopicBase(
        content=content.strip(),
        mood=sanitize_mood(mood),
        mode=sanitize_mode(mode),
        user_id=normalize_id(owner_id),
        created_at=_now(),
    ))
    return Outcome.ok(topic)


def vote_topic(store: TopicStore, topic_id, voter_id, vote_type) -> Outcome:
    """
    Toggle a voter's stance on a topic.

    No vote yet -> add it; same type again -> remove it; other type -> switch it.
    Each branch is a conditional update on the stored document, so concurrent
    voters never overwrite each other. When no branch matches, the voter's own
    vote changed underneath us (or the topic is gone) and the sequence runs again
    to finish this same toggle.
    """
    check = validate_user_id(voter_id)
    if not check.valid:
        return Outcome.rejected(check)
    check = validate_vote_type(vote_type)
    if not check.valid:
        return Outcome.rejected(check)

    voter = normalize_id(voter_id)
    # compare-and-set: a pass that matches no branch saw the voter's vote change
    # mid-toggle, so the next pass completes this one toggle; nothing failed
    for _ in range(VOTE_ATTEMPTS):
        if (store.remove_vote(topic_id, voter, vote_type)
                or store.switch_vote(topic_id, voter, vote_type)
                or store.add_vote(topic_id, voter, vote_type)):
            break
        if store.find_by_id(topic_id) is None:
            logger.debug("Vote on missing topic %s ignored", topic_id)
            return Outcome.fail(ErrorKind.NOT_FOUND, topic_id=topic_id)
    else:
        raise StoreError(f"vote on {topic_id} did not settle after {VOTE_ATTEMPTS} attempts")

    topic = store.find_by_id(topic_id)
    if topic is None:
        # deleted between the vote landing and the read-back
        return Outcome.fail(ErrorKind.NOT_FOUND, topic_id=topic_id)
    return Outcome.ok(topic)


def comment_topic(store: TopicStore, topic_id, text, author_id) -> Outcome:
    check = validate_comment(text)
    if not check.valid:
        return Outcome.rejected(check)
    check = validate_user_id(author_id)
    if not check.valid:
        return Outcome.rejected(check)

    comment = Comment(text=text.strip(), user_id=normalize_id(author_id), timestamp=_now())
    topic = store.push_comment(topic_id, comment)
    if topic is None:
        return Outcome.fail(ErrorKind.NOT_FOUND, topic_id=topic_id)
    return Outcome.ok(topic)


def delete_topic(store: TopicStore, topic_id, requester_id) -> Outcome:
    """Remove a topic for good. Only the owner (exact match after trimming) may do this."""
    check = validate_user_id(requester_id)
    if not check.valid:
        return Outcome.rejected(check)
    check = validate_topic_id(topic_id)
    if not check.valid:
        return Outcome.rejected(check)

    topic = store.find_by_id(topic_id)
    if topic is None:
        return Outcome.fail(ErrorKind.NOT_FOUND, topic_id=topic_id)
    if normalize_id(topic.user_id) != normalize_id(requester_id):
        return Outcome.fail(ErrorKind.NOT_OWNER, topic_id=topic.id)

    # conditional on the owner so a concurrent delete reports NotFound, not a second tombstone
    if not store.delete_owned(topic.id, topic.user_id):
        return Outcome.fail(ErrorKind.NOT_FOUND, topic_id=topic.id)
    return Outcome.ok(topic_id=topic.id)


def report_topic(store: TopicStore, topic_id, reporter_id) -> Outcome:
    check = validate_user_id(reporter_id)
    if not check.valid:
        return Outcome.rejected(check)

    topic = store.increment_reports(topic_id)
    if topic is None:
        return Outcome.fail(ErrorKind.NOT_FOUND, topic_id=topic_id)
    return Outcome.ok(topic)
