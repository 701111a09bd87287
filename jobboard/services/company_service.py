"""
Company Service - company records owned by users.

Company.jobs holds back-references to jobs and is maintained by
job_service; this module never writes it.
"""

import logging
from typing import List

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from jobboard.core.errors import BadRequestError, ConflictError, NotFoundError
from jobboard.schemas.schemas import CompanyCreate, CompanyUpdate
from jobboard.services.mongo_service import (
    BaseCollectionService,
    parse_object_id,
    serialize_doc,
    serialize_docs,
    stamp_new,
    utcnow,
)
from jobboard.utils.sanitize import sanitize_input

logger = logging.getLogger(__name__)


class CompanyService(BaseCollectionService):
    collection_key = "companies"
    entity_name = "Company"
    id_label = "Company ID"

    def create(self, owner_id: str, data: CompanyCreate) -> dict:
        """Create a company owned by `owner_id`. Names are unique."""
        doc = sanitize_input(data.model_dump(by_alias=True, exclude_none=True))
        doc["jobs"] = []
        doc["userId"] = [parse_object_id(owner_id, "User ID")]
        stamp_new(doc)

        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError(f"Company with name {data.name} already exists.")

        doc["_id"] = result.inserted_id
        logger.info("Created company %s (%s)", doc["_id"], doc["name"])
        return serialize_doc(doc)

    def list_by_owner(self, user_id: str) -> List[dict]:
        owner = parse_object_id(user_id, "User ID")
        return serialize_docs(self.collection.find({"userId": owner}))

    def get_by_id(self, company_id: str) -> dict:
        return serialize_doc(self.get_or_404(company_id))

    def list_all(self) -> List[dict]:
        return serialize_docs(self.collection.find())

    def update(self, company_id: str, data: CompanyUpdate) -> dict:
        oid = self.parse_id(company_id)
        updates = sanitize_input(data.model_dump(by_alias=True, exclude_none=True))
        if not updates:
            raise BadRequestError("No fields to update")
        updates["updatedAt"] = utcnow()

        try:
            company = self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise ConflictError(f"Company with name {data.name} already exists.")

        if company is None:
            raise NotFoundError("Company not found")
        return serialize_doc(company)

    def delete(self, company_id: str) -> dict:
        """
        Delete a company that no job references any more.

        A job's company is required, so deleting a referenced company would
        leave jobs pointing at nothing; those jobs must be deleted first.
        """
        company = self.get_or_404(company_id)
        if company.get("jobs"):
            raise ConflictError(
                f"{company['name']} still has {len(company['jobs'])} job posting(s). Delete its jobs first."
            )

        self.collection.delete_one({"_id": company["_id"]})
        logger.info("Deleted company %s (%s)", company["_id"], company["name"])
        return serialize_doc(company)
