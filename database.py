"""
Database Helper Functions

MongoDB helpers used by the API endpoints. The process-wide connection is
created once from the environment; endpoints receive it through the
``get_db`` dependency so tests can swap in an in-memory database.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from dotenv import load_dotenv
from pydantic import BaseModel
from pymongo import MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME", "stylehub")
DATABASE_TIMEOUT_MS = int(os.getenv("DATABASE_TIMEOUT_MS", 5000))

_client: Optional[MongoClient] = None
db: Optional[Database] = None


def connect(database_url: Optional[str], database_name: str, timeout_ms: int = 5000) -> Optional[Database]:
    """Open the shared client. Returns None when no connection string is configured."""
    global _client
    if not database_url:
        logger.warning("DATABASE_URL not set - running without database, sample data will be served")
        return None
    try:
        # mongodb+srv URLs are resolved here, so a bad host can fail before any query
        _client = MongoClient(database_url, serverSelectionTimeoutMS=timeout_ms)
    except PyMongoError as e:
        logger.warning("MongoDB connection failed - using sample data: %s", e)
        _client = None
        return None
    logger.info("MongoDB client created for database '%s'", database_name)
    return _client[database_name]


def close():
    global _client, db
    if _client is not None:
        _client.close()
        logger.info("MongoDB client closed")
    _client = None
    db = None


def get_db() -> Optional[Database]:
    return db


def is_connected(database: Optional[Database]) -> bool:
    if database is None:
        return False
    try:
        database.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("Database ping failed: %s", e)
        return False


def to_object_id(value: Optional[str]) -> Optional[ObjectId]:
    # ObjectId(None) would mint a fresh id
    if value is None:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize(value: Any) -> Any:
    """Make a stored document JSON friendly: ``_id`` becomes ``id`` and ObjectIds become strings."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [serialize(v) for v in value]
    if isinstance(value, dict):
        d = {k: serialize(v) for k, v in value.items() if k != "_id"}
        if "_id" in value:
            d["id"] = str(value["_id"])
        return d
    return value


def _stamp(data: Union[BaseModel, dict]) -> dict:
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = dict(data)
    now = datetime.now(timezone.utc)
    data_dict["createdAt"] = now
    data_dict["updatedAt"] = now
    return data_dict


def create_document(database: Database, collection_name: str, data: Union[BaseModel, dict]) -> dict:
    """Insert a single document with timestamps and return it, including its new ``_id``."""
    data_dict = _stamp(data)
    result = database[collection_name].insert_one(data_dict)
    data_dict["_id"] = result.inserted_id
    return data_dict


def insert_documents(database: Database, collection_name: str, items: List[Union[BaseModel, dict]]) -> List[dict]:
    docs = [_stamp(item) for item in items]
    if not docs:
        return []
    result = database[collection_name].insert_many(docs)
    for doc, oid in zip(docs, result.inserted_ids):
        doc["_id"] = oid
    return docs


def get_documents(
    database: Database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    sort: Optional[List[tuple]] = None,
    limit: Optional[int] = None,
) -> List[dict]:
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def find_by_id(database: Database, collection_name: str, doc_id: str) -> Optional[dict]:
    """Malformed ids are treated as a miss rather than an error."""
    oid = to_object_id(doc_id)
    if oid is None:
        return None
    return database[collection_name].find_one({"_id": oid})


def update_document(database: Database, collection_name: str, doc_id: str, changes: Dict[str, Any]) -> Optional[dict]:
    oid = to_object_id(doc_id)
    if oid is None:
        return None
    update = dict(changes)
    update["updatedAt"] = datetime.now(timezone.utc)
    return database[collection_name].find_one_and_update(
        {"_id": oid},
        {"$set": update},
        return_document=ReturnDocument.AFTER,
    )


def delete_document(database: Database, collection_name: str, doc_id: str) -> bool:
    oid = to_object_id(doc_id)
    if oid is None:
        return False
    result = database[collection_name].delete_one({"_id": oid})
    return result.deleted_count > 0


def count_documents(database: Database, collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> int:
    return database[collection_name].count_documents(filter_dict or {})


db = connect(DATABASE_URL, DATABASE_NAME, DATABASE_TIMEOUT_MS)
