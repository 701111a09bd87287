"""
Job Category Service - categories jobs are filed under.

JobCategory.jobs is maintained by job_service. Deleting a category pulls its
id out of every job's `categories` list.
"""

import logging
from typing import List

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from jobboard.core.errors import BadRequestError, ConflictError, NotFoundError
from jobboard.db.mongodb import COLLECTIONS, get_collection
from jobboard.schemas.schemas import JobCategoryCreate, JobCategoryUpdate
from jobboard.services.mongo_service import (
    BaseCollectionService,
    serialize_doc,
    serialize_docs,
    stamp_new,
    utcnow,
)
from jobboard.utils.sanitize import sanitize_input

logger = logging.getLogger(__name__)


class JobCategoryService(BaseCollectionService):
    collection_key = "categories"
    entity_name = "Job category"
    id_label = "category ID"

    def __init__(self, collection=None, jobs=None):
        super().__init__(collection)
        self.jobs = jobs if jobs is not None else get_collection(COLLECTIONS["jobs"])

    def create(self, data: JobCategoryCreate) -> dict:
        doc = sanitize_input({"name": data.name})
        doc["jobs"] = []
        stamp_new(doc)

        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError(f'Category with name "{data.name}" already exists.')

        doc["_id"] = result.inserted_id
        logger.info("Created job category %s (%s)", doc["_id"], doc["name"])
        return serialize_doc(doc)

    def list_all(self) -> List[dict]:
        return serialize_docs(self.collection.find())

    def get_by_id(self, category_id: str) -> dict:
        return serialize_doc(self.get_or_404(category_id))

    def update(self, category_id: str, data: JobCategoryUpdate) -> dict:
        oid = self.parse_id(category_id)
        updates = sanitize_input(data.model_dump(by_alias=True, exclude_none=True))
        if not updates:
            raise BadRequestError("No fields to update")
        updates["updatedAt"] = utcnow()

        try:
            category = self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise ConflictError(f'Category with name "{data.name}" already exists.')

        if category is None:
            raise NotFoundError("Job category not found")
        return serialize_doc(category)

    def delete(self, category_id: str) -> dict:
        """Delete a category and pull it from every job filed under it."""
        oid = self.parse_id(category_id)
        category = self.collection.find_one_and_delete({"_id": oid})
        if category is None:
            raise NotFoundError("Job category not found")

        result = self.jobs.update_many({"categories": oid}, {"$pull": {"categories": oid}})
        logger.info(
            "Deleted job category %s (%s), unlinked from %d job(s)",
            oid, category["name"], result.modified_count,
        )
        return serialize_doc(category)
