"""Socket.IO namespace relaying client messages to the topic mutation engine."""

import logging
from typing import Callable, Type

import socketio
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

import broadcast
import topic_service
from broadcast import Audience, Delivery
from errors import ErrorKind, StoreError, message_for
from schemas import (
    CommentTopicIn,
    CreateTopicIn,
    DeleteTopicIn,
    InboundMessage,
    ReportTopicIn,
    VoteTopicIn,
)
from store import TopicStore
from topic_service import Outcome

logger = logging.getLogger(__name__)


class TopicNamespace(socketio.AsyncNamespace):
    """Sends the recent feed on connect and fans each operation's result out to clients."""

    def __init__(self, store: TopicStore, namespace: str = "/") -> None:
        super().__init__(namespace)
        self.store = store

    async def deliver(self, sid: str, delivery: Delivery) -> None:
        if delivery.audience is Audience.ALL:
            await self.emit(delivery.event, delivery.payload)
        elif delivery.audience is Audience.REQUESTER:
            await self.emit(delivery.event, delivery.payload, to=sid)

    async def on_connect(self, sid: str, environ: dict, auth: dict | None = None) -> None:
        logger.info("Client connected: %s", sid)
        try:
            topics = await run_in_threadpool(topic_service.recent_topics, self.store)
        except StoreError:
            logger.exception("Loading topics failed for %s", sid)
            await self.deliver(sid, broadcast.store_failure("load"))
            return
        await self.deliver(sid, broadcast.initial_load(topics))

    async def on_disconnect(self, sid: str, reason=None) -> None:
        logger.info("Client disconnected: %s (%s)", sid, reason)

    async def _handle(
        self,
        sid: str,
        operation: str,
        model: Type[InboundMessage],
        data,
        run: Callable[[TopicStore, InboundMessage], Outcome],
    ) -> None:
        message = None
        if data is None or isinstance(data, dict):
            try:
                message = model.model_validate(data or {})
            except ValidationError as exc:
                logger.info("%s payload from %s invalid: %s", operation, sid, exc.errors())
        if message is None:
            await self.deliver(sid, broadcast.error(message_for(ErrorKind.INVALID_PAYLOAD)))
            return

        try:
            outcome = await run_in_threadpool(run, self.store, message)
        except StoreError:
            logger.exception("%s failed for %s", operation, sid)
            await self.deliver(sid, broadcast.store_failure(operation))
            return

        if not outcome.success:
            logger.info("%s rejected for %s: %s", operation, sid, outcome.kind.value)
        await self.deliver(sid, broadcast.plan(operation, outcome))

    async def on_create_topic(self, sid: str, data=None) -> None:
        await self._handle(
            sid, "create", CreateTopicIn, data,
            lambda store, m: topic_service.create_topic(store, m.content, m.mood, m.mode, m.user_id),
        )

    async def on_vote_topic(self, sid: str, data=None) -> None:
        await self._handle(
            sid, "vote", VoteTopicIn, data,
            lambda store, m: topic_service.vote_topic(store, m.topic_id, m.user_id, m.type),
        )

    async def on_comment_topic(self, sid: str, data=None) -> None:
        await self._handle(
            sid, "comment", CommentTopicIn, data,
            lambda store, m: topic_service.comment_topic(store, m.topic_id, m.text, m.user_id),
        )

    async def on_delete_topic(self, sid: str, data=None) -> None:
        await self._handle(
            sid, "delete", DeleteTopicIn, data,
            lambda store, m: topic_service.delete_topic(store, m.topic_id, m.user_id),
        )

    async def on_report_topic(self, sid: str, data=None) -> None:
        await self._handle(
            sid, "report", ReportTopicIn, data,
            lambda store, m: topic_service.report_topic(store, m.topic_id, m.user_id),
        )
