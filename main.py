import logging
import os

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

import socketio  # noqa: E402
from fastapi import FastAPI, HTTPException, Query  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

import database  # noqa: E402
import topic_service  # noqa: E402
from errors import ErrorKind, StoreError, message_for  # noqa: E402
from sockets import TopicNamespace  # noqa: E402
from store import MongoTopicStore  # noqa: E402

logger = logging.getLogger(__name__)

CLIENT_ORIGIN = os.getenv("CLIENT_ORIGIN", "http://localhost:3000")
allow_origins = [o.strip() for o in CLIENT_ORIGIN.split(",") if o.strip()]

app = FastAPI(title="Ventspace API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

topic_store = MongoTopicStore(database.get_collection())


@app.on_event("startup")
def ensure_indexes():
    # Best-effort: the feed still works without indexes, just slower
    try:
        topic_store.ensure_indexes()
    except StoreError:
        logger.exception("Could not create topic indexes")


@app.get("/")
def read_root():
    return {"message": "Ventspace API running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_backend": database.backend,
        "database_url": None,
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": []
    }

    if database.db is not None:
        response["database"] = "✅ Available"
        response["database_name"] = database.db.name
        response["connection_status"] = "Connected"
        try:
            collections = database.db.list_collection_names()
            response["collections"] = collections[:10]
            response["database"] = "✅ Connected & Working"
        except Exception as e:
            response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"

    response["database_url"] = "✅ Set" if database.database_url else "❌ Not Set"
    response["database_name"] = "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set"

    return response


# Read-only HTTP access to the feed. All mutations go through the socket events.

@app.get("/api/topics")
def list_topics(limit: int = Query(topic_service.RECENT_TOPICS_LIMIT, ge=1, le=50)):
    try:
        topics = topic_service.recent_topics(topic_store, limit)
    except StoreError:
        logger.exception("Listing topics failed")
        raise HTTPException(status_code=500, detail=message_for(ErrorKind.STORE_FAILURE, "load"))
    return [t.to_wire() for t in topics]


@app.get("/api/topics/{topic_id}")
def get_topic(topic_id: str):
    try:
        topic = topic_store.find_by_id(topic_id)
    except StoreError:
        logger.exception("Loading topic %s failed", topic_id)
        raise HTTPException(status_code=500, detail=message_for(ErrorKind.STORE_FAILURE, "load"))
    if topic is None:
        raise HTTPException(status_code=404, detail=message_for(ErrorKind.NOT_FOUND))
    return topic.to_wire()


# Real-time feed: the same origins as the REST API
sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*" if allow_origins == ["*"] else allow_origins,
)
sio.register_namespace(TopicNamespace(topic_store))
socket_app = socketio.ASGIApp(sio, other_asgi_app=app)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 3001))
    uvicorn.run(socket_app, host="0.0.0.0", port=port)
