"""
MongoDB Service Helpers - shared plumbing for the collection services.

- ObjectId parsing and JSON serialization
- Timestamp stamping (createdAt / updatedAt, mongoose style)
- populate(): resolve stored references into embedded documents for responses
- BaseCollectionService: common lookups used by every registry
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.collection import Collection

from jobboard.core.errors import BadRequestError, NotFoundError
from jobboard.db.mongodb import COLLECTIONS, get_collection

# Newest first; _id breaks ties between documents created in the same millisecond
NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


# ============================================================
# HELPER: ObjectId handling
# ============================================================

def try_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id, returning None instead of raising."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str):
        try:
            return ObjectId(value)
        except InvalidId:
            return None
    return None


def parse_object_id(value: Any, label: str = "ID") -> ObjectId:
    """Parse a client-supplied id, raising BadRequest when malformed."""
    oid = try_object_id(value)
    if oid is None:
        raise BadRequestError(f"Invalid {label}")
    return oid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def stamp_new(doc: dict) -> dict:
    """Add createdAt/updatedAt to a document about to be inserted."""
    now = utcnow()
    doc["createdAt"] = now
    doc["updatedAt"] = now
    return doc


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: Any, exclude: Iterable[str] = ()) -> Any:
    """
    Convert a MongoDB document to a JSON-serializable value.

    ObjectIds anywhere in the tree become hex strings; top-level keys in
    `exclude` are dropped. Datetimes are left for FastAPI to encode.
    """
    if doc is None:
        return None
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, list):
        return [serialize_doc(item) for item in doc]
    if isinstance(doc, dict):
        return {
            key: serialize_doc(value)
            for key, value in doc.items()
            if key not in exclude
        }
    return doc


def serialize_docs(docs: Iterable[dict], exclude: Iterable[str] = ()) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc, exclude) for doc in docs]


# ============================================================
# HELPER: populate references
# ============================================================

def populate(
    docs: List[dict],
    field: str,
    collection: Collection,
    projection: Optional[Dict[str, int]] = None,
) -> List[dict]:
    """
    Replace the ObjectId stored in `field` of each doc with the referenced
    document, fetched in one $in query. Dangling references become None.
    """
    ids = {doc[field] for doc in docs if isinstance(doc.get(field), ObjectId)}
    if not ids:
        return docs

    found = {
        ref["_id"]: ref
        for ref in collection.find({"_id": {"$in": list(ids)}}, projection)
    }
    for doc in docs:
        if isinstance(doc.get(field), ObjectId):
            doc[field] = found.get(doc[field])
    return docs


# ============================================================
# BASE SERVICE
# ============================================================

class BaseCollectionService:
    """
    Common lookups for a single collection.
    Subclasses set `collection_key` (a key of COLLECTIONS), `entity_name`
    and `id_label` (used in "Invalid <id_label>" errors).
    """

    collection_key: str = ""
    entity_name: str = "Document"
    id_label: str = "ID"

    def __init__(self, collection: Optional[Collection] = None):
        self.collection: Collection = (
            collection if collection is not None else get_collection(self.collection_name())
        )

    @classmethod
    def collection_name(cls) -> str:
        return COLLECTIONS[cls.collection_key]

    def parse_id(self, value: Any) -> ObjectId:
        return parse_object_id(value, self.id_label)

    def get_or_404(self, doc_id: Any, projection: Optional[Dict[str, int]] = None) -> dict:
        """Fetch by id; BadRequest on malformed id, NotFound if absent."""
        oid = self.parse_id(doc_id)
        doc = self.collection.find_one({"_id": oid}, projection)
        if doc is None:
            raise NotFoundError(f"{self.entity_name} not found")
        return doc
