"""
Database Helper Functions

MongoDB connection with graceful fallback.
- Primary: real MongoDB via DATABASE_URL (or MONGO_URI) + DATABASE_NAME
- Fallback: mongomock (embedded, in-memory MongoDB-compatible) so the app fully works without external DB
"""

import logging
import os

import mongomock
from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.errors import PyMongoError

# Load environment variables from .env file (noop if not present)
load_dotenv()

logger = logging.getLogger(__name__)

TOPIC_COLLECTION = "topic"

database_url = os.getenv("DATABASE_URL") or os.getenv("MONGO_URI")
database_name = os.getenv("DATABASE_NAME") or "ventspace_db"

_db = None
_client = None
backend = "embedded"

# Try real MongoDB first
if database_url:
    try:
        _client = MongoClient(database_url, serverSelectionTimeoutMS=2000, tz_aware=True)
        _client.admin.command("ping")  # ensure reachable now
        _db = _client[database_name]
        backend = "mongodb"
        logger.info("Connected to MongoDB database %s", database_name)
    except PyMongoError as exc:
        logger.warning("MongoDB unreachable (%s), using embedded database", exc)
        _client = None
        _db = None

# Fallback to mongomock (embedded) if real DB isn't configured/reachable
if _db is None:
    _client = mongomock.MongoClient(tz_aware=True)
    _db = _client[database_name]
    logger.info("Using embedded in-memory database %s", database_name)

# Export name expected by application

db = _db


def get_collection(collection_name: str = TOPIC_COLLECTION):
    """Return a collection handle from the active database"""
    return db[collection_name]
