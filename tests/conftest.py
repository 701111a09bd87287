from __future__ import annotations

import os
from typing import Iterator

# Settings are read once at import time; keep hashing cheap under test.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import mongomock
import pytest
from fastapi.testclient import TestClient

from jobboard.db import mongodb
from jobboard.main import app
from jobboard.services.storage_service import StoredFile, get_object_storage

PASSWORD = "secret123"


class FakeStorage:
    """Stands in for Cloudinary: records uploads and returns predictable URLs."""

    def __init__(self) -> None:
        self.uploads: list = []
        self.discarded: list = []

    def upload(self, upload, folder: str = "profile_pictures") -> StoredFile:
        self.uploads.append(upload)
        public_id = f"{folder}/{upload.filename}"
        return StoredFile(
            url=f"https://files.example.com/{public_id}",
            public_id=public_id,
            resource_type="image" if upload.is_image else "raw",
        )

    def discard(self, stored: StoredFile) -> None:
        self.discarded.append(stored.public_id)


@pytest.fixture
def db(monkeypatch: pytest.MonkeyPatch):
    database = mongomock.MongoClient()["jobboard_test"]
    monkeypatch.setattr(mongodb, "_db", database)
    return database


@pytest.fixture
def storage() -> Iterator[FakeStorage]:
    fake = FakeStorage()
    app.dependency_overrides[get_object_storage] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_object_storage, None)


@pytest.fixture
def client(db, storage: FakeStorage) -> Iterator[TestClient]:
    # Entering the client runs the lifespan, which creates the indexes
    with TestClient(app) as test_client:
        yield test_client


def register_user(
    client: TestClient,
    email: str = "jane@example.com",
    role: str = "user",
    name: str = "Jane Doe",
    phone: str = "9876543210",
    password: str = PASSWORD,
    profile: str | None = None,
    files: dict | None = None,
):
    form = {
        "name": name,
        "email": email,
        "phone": phone,
        "password": password,
        "role": role,
    }
    if profile is not None:
        form["profile"] = profile
    return client.post("/api/v1/user/auth/create", data=form, files=files)


def login(client: TestClient, email: str, role: str, password: str = PASSWORD):
    return client.post(
        "/api/v1/user/auth/login",
        json={"email": email, "password": password, "role": role},
    )


def sign_in(client: TestClient, email: str = "jane@example.com", role: str = "user") -> dict:
    """Register (if needed) and log in; returns the public user document."""
    register_user(client, email=email, role=role)
    response = login(client, email, role)
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.fixture
def recruiter(client: TestClient) -> dict:
    return sign_in(client, email="recruiter@example.com", role="recruiter")


def create_company(client: TestClient, name: str = "Acme", **overrides) -> dict:
    payload = {
        "name": name,
        "description": "Makes everything",
        "website": "https://acme.example.com",
        "location": "Remote",
        **overrides,
    }
    response = client.post("/api/v1/company/create", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_category(client: TestClient, name: str = "Engineering") -> dict:
    response = client.post("/api/v1/job/category/create", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def job_payload(company_id: str, category_ids: list, **overrides) -> dict:
    return {
        "title": "Backend Engineer",
        "description": "Build Python API services",
        "company": company_id,
        "location": "Remote",
        "experience": 2,
        "salary": 85000,
        "jobOpenings": 3,
        "requirements": ["Python", "MongoDB"],
        "jobType": "Full-time",
        "categories": category_ids,
        **overrides,
    }


def post_job(client: TestClient, company_id: str, category_ids: list, **overrides) -> dict:
    response = client.post("/api/v1/job/post", json=job_payload(company_id, category_ids, **overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]
