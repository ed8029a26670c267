"""
MongoDB Connection Utility

MongoDB stores every resource of the job board:
- users: accounts (job seekers and company HRs)
- companies: company profiles, each owned by one HR user
- jobs: job postings, owned by the HR user who added them
- applications: submissions to a job, with the resume asset URL

Uniqueness of e-mails, mobile numbers and company names is ultimately
enforced by the unique indexes created in init_mongo_indexes().
"""
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from jobsearch.core.config import get_settings
from jobsearch.core.logger import get_logger

logger = get_logger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: Optional[MongoClient] = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri, serverSelectionTimeoutMS=5000)
    return _client


def get_database() -> Database:
    """
    FastAPI dependency - the job board database.
    Tests override this with an in-memory database.
    """
    return get_mongo_client()[get_settings().mongodb_db]


def get_collection(db: Database, name: str) -> Collection:
    return db[COLLECTIONS[name]]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        # ping command checks connection
        get_mongo_client().admin.command("ping")
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "companies": "companies",
    "jobs": "jobs",
    "applications": "applications",
}


def init_mongo_indexes(db: Database) -> None:
    """
    Create indexes. Call this once during app startup.
    The unique ones are the real guard against duplicate sign-ups and companies.
    """
    users = get_collection(db, "users")
    users.create_index([("email", ASCENDING)], unique=True)
    users.create_index([("mobileNumber", ASCENDING)], unique=True)
    users.create_index("recoveryEmail")

    companies = get_collection(db, "companies")
    companies.create_index([("companyName", ASCENDING)], unique=True)
    companies.create_index([("companyEmail", ASCENDING)], unique=True)
    companies.create_index("companyHR")

    get_collection(db, "jobs").create_index("addedBy")
    get_collection(db, "applications").create_index("jobId")

    logger.info("MongoDB indexes created successfully")


# ============================================================
# HELPERS: ids and JSON serialization
# ============================================================

def to_object_id(value: Any) -> Optional[ObjectId]:
    """ObjectId for a 24-char hex string (or an ObjectId); None for anything else."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    return _serialize_value(dict(doc))


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def populate(db: Database, docs: list, field: str, collection: str, projection: dict) -> list:
    """
    Replace the ObjectId in `field` of each doc with the referenced document
    (restricted by `projection`). Dangling references become None.
    """
    ids = {doc.get(field) for doc in docs if doc.get(field) is not None}
    if not ids:
        return docs

    # _id is needed for matching even when the projection hides it
    fetch = {k: v for k, v in projection.items() if k != "_id"}
    refs = {ref["_id"]: ref for ref in get_collection(db, collection).find({"_id": {"$in": list(ids)}}, fetch or None)}

    hide_id = projection.get("_id") == 0
    for doc in docs:
        ref = refs.get(doc.get(field))
        if ref is not None and hide_id:
            ref = {k: v for k, v in ref.items() if k != "_id"}
        doc[field] = ref
    return docs
