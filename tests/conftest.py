"""
Pytest configuration and shared fixtures.

The app runs against an in-memory mongomock database with the real unique
indexes; the asset store and mailer are replaced with in-process fakes.
"""

import asyncio
import itertools
import os
from typing import Any, Dict, List

import mongomock
import pytest
from fastapi.testclient import TestClient

from jobsearch.core.config import Settings, get_settings
from jobsearch.core.security import TokenService
from jobsearch.db.mongodb import get_database, init_mongo_indexes
from jobsearch.main import app
from jobsearch.services.asset_store import get_asset_store
from jobsearch.services.email_service import get_email_service

PASSWORD = "Passw0rdX"

_counter = itertools.count(1)


class FakeAssetStore:
    """Records uploads; can be told to fail or to steal the buffered file."""

    def __init__(self):
        self.uploads: List[str] = []
        self.fail = False
        self.remove_file = False
        self.on_event_loop = None

    def upload(self, path: str) -> str:
        try:
            asyncio.get_running_loop()
            self.on_event_loop = True
        except RuntimeError:
            self.on_event_loop = False
        if self.fail:
            raise RuntimeError("asset store unavailable")
        self.uploads.append(path)
        if self.remove_file:
            os.remove(path)
        return f"https://assets.test/resumes/{os.path.basename(path)}"


class FakeMailer:
    """Keeps sent OTPs instead of talking SMTP."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []

    async def send_otp(self, to_email: str, otp: str) -> None:
        self.sent.append({"to": to_email, "otp": otp})


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Test settings: known secret, cheap bcrypt, uploads under tmp_path."""
    return Settings(
        jwt_secret_key="test-secret",
        bcrypt_salt_rounds=4,
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def db():
    """In-memory database with the production indexes."""
    database = mongomock.MongoClient()["JobSearchApp_Test"]
    init_mongo_indexes(database)
    return database


@pytest.fixture
def asset_store() -> FakeAssetStore:
    return FakeAssetStore()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def client(settings, db, asset_store, mailer):
    """TestClient with database, settings, asset store and mailer swapped out."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_database] = lambda: db
    app.dependency_overrides[get_asset_store] = lambda: asset_store
    app.dependency_overrides[get_email_service] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()


def _signup_payload(**overrides) -> Dict[str, Any]:
    """Valid signup body with a unique email and mobile number."""
    n = next(_counter)
    payload = {
        "firstName": "Test",
        "lastName": f"User{n}",
        "email": f"user{n}@example.com",
        "password": PASSWORD,
        "DOB": "1995-05-20",
        "mobileNumber": f"0101{n:07d}",
        "recoveryEmail": "recovery@example.com",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_user(client, db):
    """
    Factory: sign up and sign in a user.

    Returns the signup payload plus `id` and `token`.
    """

    def _create(role: str = "User", **overrides) -> Dict[str, Any]:
        payload = _signup_payload(role=role, **overrides)
        response = client.post("/user/signup", json=payload)
        assert response.status_code == 201, response.text

        response = client.post(
            "/user/SignIn",
            json={"emailOrRecoveryEmailOrMobile": payload["email"], "password": payload["password"]},
        )
        assert response.status_code == 200, response.text

        user = db.users.find_one({"email": payload["email"].lower()})
        return {**payload, "id": str(user["_id"]), "token": response.json()["token"]}

    return _create


@pytest.fixture
def hr(create_user):
    return create_user(role="Company_HR")


@pytest.fixture
def job_seeker(create_user):
    return create_user(role="User")


def _company_payload(hr_id: str, **overrides) -> Dict[str, Any]:
    n = next(_counter)
    payload = {
        "companyName": f"Acme {n}",
        "description": "Builds everything",
        "industry": "Software",
        "address": "1 Nile St, Cairo",
        "numberOfEmployees": "11-20 employees",
        "companyEmail": f"hr{n}@acme.example.com",
        "companyHR": hr_id,
    }
    payload.update(overrides)
    return payload


def _job_payload(**overrides) -> Dict[str, Any]:
    payload = {
        "jobTitle": "Backend Developer",
        "jobLocation": "remotely",
        "workingTime": "full-time",
        "seniorityLevel": "Junior",
        "jobDescription": "Build and run APIs",
        "technicalSkills": ["python", "mongodb"],
        "softSkills": ["communication"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_job(client, db):
    """Factory: post a job as the given HR user and return its id."""

    def _create(owner: Dict[str, Any], **overrides) -> str:
        payload = _job_payload(**overrides)
        response = client.post("/job/addJob", json=payload, headers={"token": owner["token"]})
        assert response.status_code == 201, response.text
        job = db.jobs.find_one({"jobTitle": payload["jobTitle"]}, sort=[("_id", -1)])
        return str(job["_id"])

    return _create


@pytest.fixture
def signup_data():
    return _signup_payload


@pytest.fixture
def company_data():
    return _company_payload


@pytest.fixture
def job_data():
    return _job_payload
