"""Tests for the pure validators and sanitizers."""

import pytest

from errors import ErrorKind
from validation import (
    MAX_COMMENT_LENGTH,
    MAX_CONTENT_LENGTH,
    MOODS,
    normalize_id,
    sanitize_mode,
    sanitize_mood,
    validate_comment,
    validate_content,
    validate_topic_id,
    validate_user_id,
    validate_vote_type,
)


@pytest.mark.parametrize("text", ["", " ", "   \t\n  ", None])
def test_content_empty_or_whitespace(text):
    result = validate_content(text)
    assert not result.valid
    assert result.kind is ErrorKind.EMPTY_CONTENT
    assert result.error == "Content cannot be empty"


def test_content_length_boundary():
    assert validate_content("a" * MAX_CONTENT_LENGTH).valid
    too_long = validate_content("a" * (MAX_CONTENT_LENGTH + 1))
    assert too_long.kind is ErrorKind.CONTENT_TOO_LONG
    assert too_long.error == "Content must be 500 characters or less"


def test_content_length_measured_after_trim():
    assert validate_content("   " + "a" * MAX_CONTENT_LENGTH + "   ").valid


def test_content_length_counts_characters_not_utf16_units():
    assert validate_content("\U0001F622" * MAX_CONTENT_LENGTH).valid
    assert validate_content("\U0001F622" * (MAX_CONTENT_LENGTH + 1)).kind is ErrorKind.CONTENT_TOO_LONG


def test_comment_length_boundary():
    assert validate_comment("a" * MAX_COMMENT_LENGTH).valid
    result = validate_comment("a" * (MAX_COMMENT_LENGTH + 1))
    assert result.kind is ErrorKind.COMMENT_TOO_LONG
    assert result.error == "Comment must be 300 characters or less"


@pytest.mark.parametrize("text", ["", "    ", None])
def test_comment_empty(text):
    assert validate_comment(text).kind is ErrorKind.EMPTY_COMMENT


@pytest.mark.parametrize("user_id", [None, "", "   "])
def test_user_id_required(user_id):
    result = validate_user_id(user_id)
    assert result.kind is ErrorKind.MISSING_USER_ID
    assert result.error == "User ID is required"


def test_user_id_present():
    assert validate_user_id(" u1 ").valid


def test_topic_id_required():
    assert validate_topic_id("").kind is ErrorKind.MISSING_TOPIC_ID
    assert validate_topic_id("abc").valid


def test_vote_type():
    assert validate_vote_type("agree").valid
    assert validate_vote_type("disagree").valid
    assert validate_vote_type("AGREE").kind is ErrorKind.INVALID_VOTE_TYPE
    assert validate_vote_type(None).kind is ErrorKind.INVALID_VOTE_TYPE


@pytest.mark.parametrize("mood", MOODS)
def test_sanitize_mood_keeps_valid(mood):
    assert sanitize_mood(mood) == mood


@pytest.mark.parametrize("value", ["", "furious", "Happy", None, 3, ["sad"]])
def test_sanitize_mood_defaults_to_neutral(value):
    assert sanitize_mood(value) == "neutral"


@pytest.mark.parametrize("value", ["furious", "sad", "", "neutral"])
def test_sanitize_mood_is_idempotent(value):
    once = sanitize_mood(value)
    assert sanitize_mood(once) == once
    assert once in MOODS


def test_sanitize_mode():
    assert sanitize_mode("advice") == "advice"
    assert sanitize_mode("vent") == "vent"
    assert sanitize_mode("rant") == "vent"
    assert sanitize_mode(None) == "vent"


def test_normalize_id():
    assert normalize_id("  u1 ") == "u1"
    assert normalize_id(None) == ""
