"""
MongoDB Connection Utility

MongoDB stores every entity of the job board:
- users: accounts (job seekers and recruiters) with embedded profiles
- companies: company records with owner and job back-references
- job_categories: categories with job back-references
- jobs: postings referencing a company and categories
- applications: one document per (job, applicant) pair

References between collections are stored ObjectIds, never embedded copies.
"""
import logging

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from jobboard.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Process-wide handles; pymongo pools connections per client
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Shared client. Server selection gives up after MONGODB_TIMEOUT_MS."""
    global _client
    if _client is None:
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            tz_aware=True,
        )
    return _client


def get_mongo_db() -> Database:
    """Get the job board database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection. Use the COLLECTIONS table for names."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        get_mongo_db().command("ping")
        return True
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Logical name -> collection name
COLLECTIONS = {
    "users": "users",
    "companies": "companies",
    "categories": "job_categories",
    "jobs": "jobs",
    "applications": "applications",
}


def init_mongo_indexes():
    """
    Create indexes. Call this once during app startup.

    The unique indexes are what enforce uniqueness; services treat the
    resulting DuplicateKeyError as a conflict instead of pre-checking.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)

    db[COLLECTIONS["companies"]].create_index("name", unique=True)
    db[COLLECTIONS["companies"]].create_index("userId")

    db[COLLECTIONS["categories"]].create_index("name", unique=True)

    db[COLLECTIONS["jobs"]].create_index("postedBy")
    db[COLLECTIONS["jobs"]].create_index("company")
    db[COLLECTIONS["jobs"]].create_index("createdAt")

    # One application per (job, applicant)
    db[COLLECTIONS["applications"]].create_index(
        [("job", ASCENDING), ("applicant", ASCENDING)],
        unique=True,
    )
    db[COLLECTIONS["applications"]].create_index("applicant")

    logger.info("MongoDB indexes created successfully")
