"""
Input validation for topic operations

Pure functions, no database access. Length limits apply to the trimmed text.
"""

from dataclasses import dataclass
from typing import Optional

from errors import ErrorKind, message_for

MAX_CONTENT_LENGTH = 500
MAX_COMMENT_LENGTH = 300

MOODS = ("sad", "angry", "stressed", "happy", "confused", "neutral")
MODES = ("vent", "advice")
VOTE_TYPES = ("agree", "disagree")

DEFAULT_MOOD = "neutral"
DEFAULT_MODE = "vent"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    kind: Optional[ErrorKind] = None

    @property
    def error(self) -> Optional[str]:
        return message_for(self.kind) if self.kind else None


OK = ValidationResult(valid=True)


def _fail(kind: ErrorKind) -> ValidationResult:
    return ValidationResult(valid=False, kind=kind)


def _trimmed(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_content(text) -> ValidationResult:
    trimmed = _trimmed(text)
    if not trimmed:
        return _fail(ErrorKind.EMPTY_CONTENT)
    if len(trimmed) > MAX_CONTENT_LENGTH:
        return _fail(ErrorKind.CONTENT_TOO_LONG)
    return OK


def validate_comment(text) -> ValidationResult:
    trimmed = _trimmed(text)
    if not trimmed:
        return _fail(ErrorKind.EMPTY_COMMENT)
    if len(trimmed) > MAX_COMMENT_LENGTH:
        return _fail(ErrorKind.COMMENT_TOO_LONG)
    return OK


def validate_user_id(user_id) -> ValidationResult:
    if not _trimmed(user_id):
        return _fail(ErrorKind.MISSING_USER_ID)
    return OK


def validate_topic_id(topic_id) -> ValidationResult:
    if not _trimmed(topic_id):
        return _fail(ErrorKind.MISSING_TOPIC_ID)
    return OK


def validate_vote_type(vote_type) -> ValidationResult:
    if vote_type not in VOTE_TYPES:
        return _fail(ErrorKind.INVALID_VOTE_TYPE)
    return OK


def sanitize_mood(value) -> str:
    """Return the mood unchanged when it is allowed, otherwise 'neutral'."""
    return value if value in MOODS else DEFAULT_MOOD


def sanitize_mode(value) -> str:
    """Return the mode unchanged when it is allowed, otherwise 'vent'."""
    return value if value in MODES else DEFAULT_MODE


def normalize_id(value) -> str:
    return _trimmed(value)
