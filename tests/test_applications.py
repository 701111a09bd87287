from __future__ import annotations

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError

from conftest import create_category, create_company, post_job, sign_in
from jobboard.main import app

pytestmark = pytest.mark.integration

RESUME = "https://files.example.com/profile_pictures/cv.pdf"


@pytest.fixture
def job(client: TestClient, recruiter: dict) -> dict:
    company = create_company(client)
    category = create_category(client)
    return post_job(client, company["_id"], [category["_id"]])


@pytest.fixture
def seeker(client: TestClient, job: dict) -> dict:
    return sign_in(client, email="seeker@example.com", role="user")


def apply(client: TestClient, job_id: str, **body):
    payload = {"resume": RESUME, **body}
    return client.post(f"/api/v1/application/apply/{job_id}", json=payload)


def test_apply_creates_application_and_links_job(client: TestClient, db, job: dict, seeker: dict) -> None:
    response = apply(client, job["_id"], coverLetter="I <3 APIs")

    assert response.status_code == 201
    application = response.json()["data"]
    assert application["job"] == job["_id"]
    assert application["applicant"] == seeker["_id"]
    assert application["status"] == "Applied"
    assert application["coverLetter"] == "I &lt;3 APIs"

    stored_job = db["jobs"].find_one({"_id": ObjectId(job["_id"])})
    assert stored_job["applicants"] == [ObjectId(application["_id"])]


def test_applying_twice_conflicts(client: TestClient, db, job: dict, seeker: dict) -> None:
    assert apply(client, job["_id"]).status_code == 201

    second = apply(client, job["_id"])

    assert second.status_code == 409
    assert second.json()["message"] == "You have already applied for this job."
    pair = {"job": ObjectId(job["_id"]), "applicant": ObjectId(seeker["_id"])}
    assert db["applications"].count_documents(pair) == 1
    assert len(db["jobs"].find_one({"_id": ObjectId(job["_id"])})["applicants"]) == 1


def test_apply_requires_resume(client: TestClient, db, job: dict, seeker: dict) -> None:
    response = client.post(f"/api/v1/application/apply/{job['_id']}", json={})

    assert response.status_code == 400
    assert response.json()["message"] == "Resume is required."
    assert db["applications"].count_documents({}) == 0


def test_apply_to_unknown_job(client: TestClient, seeker: dict) -> None:
    missing = apply(client, str(ObjectId()))
    assert missing.status_code == 404
    assert missing.json()["message"] == "Job not found."

    malformed = apply(client, "not-an-id")
    assert malformed.status_code == 400


def test_update_status(client: TestClient, job: dict, seeker: dict) -> None:
    application = apply(client, job["_id"]).json()["data"]

    response = client.put(
        f"/api/v1/application/status/{application['_id']}/update",
        json={"status": "Interview"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "Interview"


@pytest.mark.parametrize("body", [{"status": "Hired"}, {"status": "applied"}, {}])
def test_invalid_status_leaves_application_unchanged(
    client: TestClient, db, job: dict, seeker: dict, body: dict
) -> None:
    application = apply(client, job["_id"]).json()["data"]

    response = client.put(f"/api/v1/application/status/{application['_id']}/update", json=body)

    assert response.status_code == 400
    stored = db["applications"].find_one({"_id": ObjectId(application["_id"])})
    assert stored["status"] == "Applied"


def test_update_status_of_unknown_application(client: TestClient, seeker: dict) -> None:
    response = client.put(
        f"/api/v1/application/status/{ObjectId()}/update",
        json={"status": "Rejected"},
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Application not found."


def test_applicants_for_job_hide_private_fields(client: TestClient, job: dict, seeker: dict) -> None:
    apply(client, job["_id"])

    body = client.get(f"/api/v1/application/{job['_id']}/applicants").json()

    assert body["total"] == 1
    applicant = body["data"][0]["applicant"]
    assert applicant["_id"] == seeker["_id"]
    assert applicant["email"] == "seeker@example.com"
    assert "password" not in applicant


def test_job_without_applicants_lists_empty(client: TestClient, job: dict, seeker: dict) -> None:
    response = client.get(f"/api/v1/application/{job['_id']}/applicants")

    assert response.status_code == 200
    assert response.json()["data"] == []


def test_own_applications_include_job_and_company(client: TestClient, job: dict, seeker: dict) -> None:
    apply(client, job["_id"])

    response = client.get(f"/api/v1/application/{seeker['_id']}")

    assert response.status_code == 200
    applications = response.json()["data"]
    assert len(applications) == 1
    assert applications[0]["job"]["title"] == "Backend Engineer"
    assert applications[0]["job"]["company"]["name"] == "Acme"


def test_deleted_job_shows_as_missing_in_own_applications(client: TestClient, job: dict, seeker: dict) -> None:
    apply(client, job["_id"])
    client.delete(f"/api/v1/job/{job['_id']}")

    applications = client.get(f"/api/v1/application/{seeker['_id']}").json()["data"]

    assert len(applications) == 1
    assert applications[0]["job"] is None


def test_cannot_list_someone_elses_applications(client: TestClient, recruiter: dict, seeker: dict) -> None:
    response = client.get(f"/api/v1/application/{recruiter['_id']}")

    assert response.status_code == 403


def failing_update_one(self, *args, **kwargs):
    raise PyMongoError("write failed")


def test_failed_job_link_rolls_back_the_application(
    client: TestClient, db, job: dict, seeker: dict, monkeypatch: pytest.MonkeyPatch
) -> None:
    server = TestClient(app, raise_server_exceptions=False, cookies=client.cookies)

    with monkeypatch.context() as patch:
        patch.setattr(mongomock.Collection, "update_one", failing_update_one)
        response = server.post(f"/api/v1/application/apply/{job['_id']}", json={"resume": RESUME})

    assert response.status_code == 500
    assert db["applications"].count_documents({}) == 0
    assert db["jobs"].find_one({"_id": ObjectId(job["_id"])})["applicants"] == []

    # The rolled-back attempt does not count against the one-per-job rule
    assert apply(client, job["_id"]).status_code == 201
