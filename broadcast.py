"""
Broadcast coordinator

Maps the Outcome of each topic operation to a Delivery: the outbound event,
its payload, and who receives it (every connection, the requester only, or nobody).
Successful mutations go to everyone; failures go back to the requester only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from errors import ErrorKind, message_for
from schemas import Topic, tombstone
from topic_service import Outcome

LOAD_TOPICS = "load_topics"
NEW_TOPIC = "new_topic"
UPDATE_TOPIC = "update_topic"
ERROR = "error"


class Audience(str, Enum):
    ALL = "all"
    REQUESTER = "requester"
    NOBODY = "nobody"


@dataclass(frozen=True)
class Delivery:
    audience: Audience
    event: Optional[str] = None
    payload: Any = None


NOTHING = Delivery(Audience.NOBODY)


def error(message: str) -> Delivery:
    return Delivery(Audience.REQUESTER, ERROR, {"message": message})


def store_failure(operation: str) -> Delivery:
    return error(message_for(ErrorKind.STORE_FAILURE, operation))


def initial_load(topics: List[Topic]) -> Delivery:
    return Delivery(Audience.REQUESTER, LOAD_TOPICS, [t.to_wire() for t in topics])


def _updated(outcome: Outcome) -> Delivery:
    if outcome.success:
        return Delivery(Audience.ALL, UPDATE_TOPIC, outcome.topic.to_wire())
    return error(outcome.error)


def for_create(outcome: Outcome) -> Delivery:
    if outcome.success:
        return Delivery(Audience.ALL, NEW_TOPIC, outcome.topic.to_wire())
    return error(outcome.error)


def for_vote(outcome: Outcome) -> Delivery:
    # a vote racing a delete is dropped; the tombstone is already on its way
    if outcome.kind is ErrorKind.NOT_FOUND:
        return NOTHING
    return _updated(outcome)


def for_delete(outcome: Outcome) -> Delivery:
    if outcome.success:
        return Delivery(Audience.ALL, UPDATE_TOPIC, tombstone(outcome.topic_id))
    return error(outcome.error)


PLANNERS: Dict[str, Callable[[Outcome], Delivery]] = {
    "create": for_create,
    "vote": for_vote,
    "comment": _updated,
    "delete": for_delete,
    "report": _updated,
}


def plan(operation: str, outcome: Outcome) -> Delivery:
    return PLANNERS[operation](outcome)
