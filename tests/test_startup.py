from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import OperationFailure

from jobboard.main import app

pytestmark = pytest.mark.integration


def test_startup_fails_when_indexes_cannot_be_created(db, monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse_indexes() -> None:
        raise OperationFailure("E11000 duplicate key error collection: users index: email_1")

    monkeypatch.setattr("jobboard.main.init_mongo_indexes", refuse_indexes)

    with pytest.raises(OperationFailure):
        with TestClient(app):
            pass


def test_startup_creates_unique_indexes(db) -> None:
    with TestClient(app):
        pass

    assert db["users"].index_information()["email_1"]["unique"] is True
    assert db["companies"].index_information()["name_1"]["unique"] is True
    assert db["job_categories"].index_information()["name_1"]["unique"] is True
    assert db["applications"].index_information()["job_1_applicant_1"]["unique"] is True
