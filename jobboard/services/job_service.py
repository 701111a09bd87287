"""
Job Service - job postings and their references to companies and categories.

Reference bookkeeping:
- post:   job inserted, then its id pushed into every named category's `jobs`
          and into the company's `jobs`
- delete: job removed, then its id pulled from every company and category
          that lists it

MongoDB only guarantees single-document atomicity here, so the follow-up
writes of `post` run under a compensation block: if a link write fails, the
links already made are pulled again and the new job is deleted before the
error propagates.
"""

import logging
import re
from typing import List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from jobboard.core.errors import BadRequestError, NotFoundError
from jobboard.db.mongodb import COLLECTIONS, get_collection
from jobboard.schemas.schemas import JobCreate, JobUpdate
from jobboard.services.mongo_service import (
    NEWEST_FIRST,
    BaseCollectionService,
    parse_object_id,
    populate,
    serialize_doc,
    serialize_docs,
    stamp_new,
    try_object_id,
    utcnow,
)
from jobboard.utils.sanitize import sanitize_input

logger = logging.getLogger(__name__)


class JobService(BaseCollectionService):
    collection_key = "jobs"
    entity_name = "Job"
    id_label = "Job ID"

    def __init__(self, collection=None, companies=None, categories=None):
        super().__init__(collection)
        self.companies = companies if companies is not None else get_collection(COLLECTIONS["companies"])
        self.categories = categories if categories is not None else get_collection(COLLECTIONS["categories"])

    # ------------------------------------------------------------
    # Create
    # ------------------------------------------------------------

    def post(self, user_id: str, data: JobCreate) -> dict:
        """
        Create a job posted by `user_id`.

        The company and every category must exist; if any category id does
        not resolve, nothing is written.
        """
        posted_by = parse_object_id(user_id, "User ID")
        fields = sanitize_input(data.model_dump(by_alias=True))

        company_id = try_object_id(data.company)
        if company_id is None or self.companies.find_one({"_id": company_id}, {"_id": 1}) is None:
            raise BadRequestError("Invalid company ID")

        category_ids = self._resolve_categories(data.categories)

        doc = {
            **fields,
            "company": company_id,
            "categories": category_ids,
            "postedBy": posted_by,
            "applicants": [],
        }
        stamp_new(doc)
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        self._link(doc["_id"], company_id, category_ids)
        logger.info(
            "Posted job %s for company %s in %d categories",
            doc["_id"], company_id, len(category_ids),
        )
        return serialize_doc(doc)

    def _resolve_categories(self, raw_ids: List[str]) -> List[ObjectId]:
        """All-or-nothing: every id must be well formed and exist."""
        # Duplicates in the request collapse to one reference
        unique_raw = list(dict.fromkeys(raw_ids))
        parsed = [try_object_id(raw) for raw in unique_raw]
        if any(oid is None for oid in parsed):
            raise BadRequestError("One or more job categories are invalid")

        found = self.categories.count_documents({"_id": {"$in": parsed}})
        if found != len(parsed):
            raise BadRequestError("One or more job categories are invalid")
        return parsed

    def _link(self, job_id: ObjectId, company_id: ObjectId, category_ids: List[ObjectId]) -> None:
        """Push the new job id into its categories and company, undoing on failure."""
        linked_categories = False
        try:
            self.categories.update_many(
                {"_id": {"$in": category_ids}},
                {"$push": {"jobs": job_id}},
            )
            linked_categories = True
            self.companies.update_one({"_id": company_id}, {"$push": {"jobs": job_id}})
        except PyMongoError:
            logger.exception("Linking job %s failed, rolling back", job_id)
            if linked_categories:
                self.categories.update_many({"jobs": job_id}, {"$pull": {"jobs": job_id}})
            self.collection.delete_one({"_id": job_id})
            raise

    # ------------------------------------------------------------
    # Read
    # ------------------------------------------------------------

    def get_by_id(self, job_id: str) -> dict:
        return serialize_doc(self.get_or_404(job_id))

    def list_all(self, keyword: Optional[str] = None) -> List[dict]:
        """
        Jobs whose title or description contains `keyword` (case-insensitive,
        literal match), newest first, with the company populated.
        """
        pattern = re.escape(keyword.strip()) if keyword else ""
        query = {
            "$or": [
                {"title": {"$regex": pattern, "$options": "i"}},
                {"description": {"$regex": pattern, "$options": "i"}},
            ]
        }
        jobs = list(self.collection.find(query).sort(NEWEST_FIRST))
        populate(jobs, "company", self.companies)
        return serialize_docs(jobs)

    def list_by_poster(self, user_id: str) -> List[dict]:
        posted_by = parse_object_id(user_id, "User ID")
        return serialize_docs(self.collection.find({"postedBy": posted_by}).sort(NEWEST_FIRST))

    # ------------------------------------------------------------
    # Update / Delete
    # ------------------------------------------------------------

    def update(self, job_id: str, data: JobUpdate) -> dict:
        oid = self.parse_id(job_id)
        updates = sanitize_input(data.model_dump(by_alias=True, exclude_none=True))
        if not updates:
            raise BadRequestError("No fields to update")
        updates["updatedAt"] = utcnow()

        job = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if job is None:
            raise NotFoundError("Job not found")
        return serialize_doc(job)

    def delete(self, job_id: str) -> dict:
        """
        Delete a job and pull its id from every company and category.

        Applications for the job are left as they are.
        """
        oid = self.parse_id(job_id)
        job = self.collection.find_one_and_delete({"_id": oid})
        if job is None:
            raise NotFoundError("Job not found")

        self.categories.update_many({"jobs": oid}, {"$pull": {"jobs": oid}})
        self.companies.update_many({"jobs": oid}, {"$pull": {"jobs": oid}})
        logger.info("Deleted job %s and unlinked it from companies/categories", oid)
        return serialize_doc(job)
