"""
Application Service - job applications and the Job.applicants back-reference.

One application per (job, applicant) is enforced by a unique index; a
second insert surfaces as DuplicateKeyError and is reported as a conflict.
Status changes are unrestricted: any valid status can follow any other.
"""

import logging
from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from jobboard.core.errors import BadRequestError, ConflictError, NotFoundError
from jobboard.db.mongodb import COLLECTIONS, get_collection
from jobboard.schemas.schemas import ApplicationStatus
from jobboard.services.mongo_service import (
    NEWEST_FIRST,
    BaseCollectionService,
    parse_object_id,
    populate,
    serialize_doc,
    serialize_docs,
    stamp_new,
    utcnow,
)
from jobboard.services.user_service import USER_PUBLIC_PROJECTION
from jobboard.utils.sanitize import sanitize_input

logger = logging.getLogger(__name__)

VALID_STATUSES = [status.value for status in ApplicationStatus]


class ApplicationService(BaseCollectionService):
    collection_key = "applications"
    entity_name = "Application"
    id_label = "application ID"

    def __init__(self, collection=None, jobs=None, companies=None, users=None):
        super().__init__(collection)
        self.jobs = jobs if jobs is not None else get_collection(COLLECTIONS["jobs"])
        self.companies = companies if companies is not None else get_collection(COLLECTIONS["companies"])
        self.users = users if users is not None else get_collection(COLLECTIONS["users"])

    def apply(self, user_id: str, job_id: str, resume: Optional[str],
              cover_letter: Optional[str] = None) -> dict:
        """
        Apply `user_id` to `job_id`, then append the application to the job.

        Raises:
            NotFoundError: the job does not exist
            BadRequestError: no resume given
            ConflictError: the user already applied to this job
        """
        applicant = parse_object_id(user_id, "User ID")
        job_oid = parse_object_id(job_id, "Job ID")

        if self.jobs.find_one({"_id": job_oid}, {"_id": 1}) is None:
            raise NotFoundError("Job not found.")

        if not resume or not resume.strip():
            raise BadRequestError("Resume is required.")

        doc = {
            "job": job_oid,
            "applicant": applicant,
            "resume": sanitize_input(resume, "resume"),
            "status": ApplicationStatus.applied.value,
        }
        if cover_letter:
            doc["coverLetter"] = sanitize_input(cover_letter)
        stamp_new(doc)

        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("You have already applied for this job.")
        doc["_id"] = result.inserted_id

        try:
            self.jobs.update_one({"_id": job_oid}, {"$push": {"applicants": doc["_id"]}})
        except PyMongoError:
            logger.exception("Linking application %s to job %s failed, rolling back", doc["_id"], job_oid)
            self.collection.delete_one({"_id": doc["_id"]})
            raise

        logger.info("User %s applied to job %s", applicant, job_oid)
        return serialize_doc(doc)

    def list_for_applicant(self, user_id: str) -> List[dict]:
        """The user's applications, newest first, with job and job.company populated."""
        applicant = parse_object_id(user_id, "User ID")
        applications = list(self.collection.find({"applicant": applicant}).sort(NEWEST_FIRST))

        populate(applications, "job", self.jobs)
        jobs = [app["job"] for app in applications if app.get("job")]
        populate(jobs, "company", self.companies)
        return serialize_docs(applications)

    def list_for_job(self, job_id: str) -> List[dict]:
        """Applications to a job, newest first, with the applicant's public fields."""
        job_oid = parse_object_id(job_id, "Job ID")
        applications = list(self.collection.find({"job": job_oid}).sort(NEWEST_FIRST))
        populate(applications, "applicant", self.users, USER_PUBLIC_PROJECTION)
        return serialize_docs(applications)

    def update_status(self, application_id: str, status: Optional[str]) -> dict:
        oid = self.parse_id(application_id)

        if not status:
            raise BadRequestError("Status is required.")
        if status not in VALID_STATUSES:
            raise BadRequestError(
                "Invalid status value.",
                f"Expected one of: {', '.join(VALID_STATUSES)}",
            )

        application = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": status, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if application is None:
            raise NotFoundError("Application not found.")

        logger.info("Application %s moved to %s", oid, status)
        return serialize_doc(application)
