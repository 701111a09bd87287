"""
User Service - registration, credential checks and profile updates.

Passwords are hashed by a pre-save hook (_hash_password_if_modified) that
runs on every insert/save and only re-hashes when the stored value changed.
User documents never leave this module with the fields listed in
USER_PRIVATE_FIELDS.

Uploads happen after validation and right before the write; if the write
fails, the uploaded object is discarded again.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from pymongo.errors import DuplicateKeyError

from jobboard.core.auth import hash_password, verify_password
from jobboard.core.errors import BadRequestError, ConflictError, NotFoundError
from jobboard.schemas.schemas import Profile, UserCreate, UserDocument
from jobboard.services.mongo_service import (
    BaseCollectionService,
    serialize_doc,
    stamp_new,
    try_object_id,
    utcnow,
)
from jobboard.services.storage_service import ObjectStorage, StoredFile
from jobboard.utils.file_upload import BufferedUpload
from jobboard.utils.sanitize import sanitize_input

logger = logging.getLogger(__name__)

# Never returned to clients
USER_PRIVATE_FIELDS = ("password", "__v")
USER_PUBLIC_PROJECTION = {field: 0 for field in USER_PRIVATE_FIELDS}

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


def public_user(doc: Optional[dict]) -> Optional[dict]:
    """Serialize a user document without its private fields."""
    return serialize_doc(doc, exclude=USER_PRIVATE_FIELDS)


def _hash_password_if_modified(doc: dict, previous: Optional[dict] = None) -> dict:
    """Pre-save hook: hash `password` only when it differs from the stored value."""
    if previous is None or doc.get("password") != previous.get("password"):
        doc["password"] = hash_password(doc["password"])
    return doc


def _store_references(profile: dict) -> dict:
    """Experience entries reference their company by ObjectId once stored."""
    for entry in profile.get("experience") or []:
        company = try_object_id(entry.get("company"))
        if company is not None:
            entry["company"] = company
    return profile


@contextmanager
def _discard_upload_on_failure(storage: Optional[ObjectStorage], stored: Optional[StoredFile]):
    try:
        yield
    except Exception:
        if storage is not None and stored is not None:
            storage.discard(stored)
        raise


class UserService(BaseCollectionService):
    collection_key = "users"
    entity_name = "User"
    id_label = "User ID"

    def register(self, data: UserCreate, upload: Optional[BufferedUpload] = None,
                 storage: Optional[ObjectStorage] = None) -> dict:
        """
        Create a user. A supplied file becomes profile.profileImage.

        Raises:
            ConflictError: email already registered (unique index)
        """
        profile = sanitize_input(data.profile.model_dump(by_alias=True, exclude_none=True))
        doc = {
            "name": sanitize_input(data.name),
            "email": data.email.strip().lower(),
            "phone": data.phone,
            "password": data.password,
            "role": data.role.value,
            "profile": _store_references(profile),
        }
        _hash_password_if_modified(doc)
        stamp_new(doc)

        stored = None
        if upload is not None and storage is not None:
            stored = storage.upload(upload)
            doc["profile"]["profileImage"] = stored.url

        with _discard_upload_on_failure(storage, stored):
            try:
                result = self.collection.insert_one(doc)
            except DuplicateKeyError:
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        doc["_id"] = result.inserted_id
        logger.info("Registered user %s (%s)", doc["_id"], doc["role"])
        return public_user(doc)

    def authenticate(self, email: str, password: str, role: str) -> dict:
        """
        Check credentials and declared role.

        Returns the raw user document (callers serialize with public_user).
        """
        user = self.collection.find_one({"email": email.strip().lower()})
        if not user:
            raise NotFoundError("User not found")

        if not verify_password(password, user["password"]):
            raise BadRequestError("Invalid Credentials")

        if role != user["role"]:
            raise BadRequestError("Role does not match")

        return user

    def update_profile(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        profile: Optional[Profile] = None,
        upload: Optional[BufferedUpload] = None,
        storage: Optional[ObjectStorage] = None,
    ) -> dict:
        """
        Merge the supplied fields into the user and save the whole document.

        `profile` is shallow-merged: each top-level profile key that was sent
        replaces the stored one. Files go to profileImage for images and to
        resume/resumeOriginalName otherwise.
        """
        previous = self.get_or_404(user_id)
        user = dict(previous)

        if email:
            email = email.strip().lower()
            if email != previous["email"]:
                user["email"] = email

        if name:
            user["name"] = sanitize_input(name)
        if phone:
            user["phone"] = sanitize_input(phone)

        merged_profile = dict(previous.get("profile") or {})
        if profile is not None:
            patch = profile.model_dump(by_alias=True, exclude_unset=True)
            merged_profile.update(sanitize_input(patch))
        user["profile"] = merged_profile

        # Nothing is uploaded for a document that would be rejected anyway
        self._validate(user)

        stored = None
        if upload is not None and storage is not None:
            stored = storage.upload(upload)
            if upload.is_image:
                user["profile"]["profileImage"] = stored.url
            else:
                user["profile"]["resume"] = [stored.url]
                user["profile"]["resumeOriginalName"] = sanitize_input(upload.filename)

        with _discard_upload_on_failure(storage, stored):
            self._save(user, previous)
        return public_user(user)

    @staticmethod
    def _validate(user: dict) -> None:
        """Re-validate the full document and normalize its profile in place."""
        try:
            validated = UserDocument.model_validate(user)
        except ValueError as e:
            raise BadRequestError("Validation failed", str(e))
        user["profile"] = _store_references(
            validated.profile.model_dump(by_alias=True, exclude_none=True)
        )

    def _save(self, user: dict, previous: dict) -> None:
        """Run the password hook and replace the stored document."""
        _hash_password_if_modified(user, previous)
        user["updatedAt"] = utcnow()

        try:
            self.collection.replace_one({"_id": previous["_id"]}, user)
        except DuplicateKeyError:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        logger.info("Updated profile of user %s", previous["_id"])
