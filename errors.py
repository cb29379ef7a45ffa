"""
Error kinds for topic operations

Each kind maps to the human-readable message sent back to the client
in an `error {message}` event.
"""

from enum import Enum


class ErrorKind(str, Enum):
    EMPTY_CONTENT = "EmptyContent"
    CONTENT_TOO_LONG = "ContentTooLong"
    EMPTY_COMMENT = "EmptyComment"
    COMMENT_TOO_LONG = "CommentTooLong"
    MISSING_USER_ID = "MissingUserId"
    MISSING_TOPIC_ID = "MissingTopicId"
    NOT_FOUND = "NotFound"
    NOT_OWNER = "NotOwner"
    INVALID_VOTE_TYPE = "InvalidVoteType"
    INVALID_PAYLOAD = "InvalidPayload"
    STORE_FAILURE = "StoreFailure"


MESSAGES = {
    ErrorKind.EMPTY_CONTENT: "Content cannot be empty",
    ErrorKind.CONTENT_TOO_LONG: "Content must be 500 characters or less",
    ErrorKind.EMPTY_COMMENT: "Comment cannot be empty",
    ErrorKind.COMMENT_TOO_LONG: "Comment must be 300 characters or less",
    ErrorKind.MISSING_USER_ID: "User ID is required",
    ErrorKind.MISSING_TOPIC_ID: "Topic ID is required",
    ErrorKind.NOT_FOUND: "Topic not found",
    ErrorKind.NOT_OWNER: "You can only delete your own posts",
    ErrorKind.INVALID_VOTE_TYPE: "Vote type must be agree or disagree",
    ErrorKind.INVALID_PAYLOAD: "Invalid message payload",
}

# Generic per-operation messages for persistence failures
STORE_FAILURE_MESSAGES = {
    "load": "Failed to load topics",
    "create": "Failed to create topic",
    "vote": "Failed to vote on topic",
    "comment": "Failed to add comment",
    "delete": "Failed to delete topic",
    "report": "Failed to report topic",
}


def message_for(kind: ErrorKind, operation: str | None = None) -> str:
    if kind is ErrorKind.STORE_FAILURE:
        return STORE_FAILURE_MESSAGES.get(operation or "", "Something went wrong")
    return MESSAGES[kind]


class StoreError(Exception):
    """Raised by the topic store when the underlying database fails."""
