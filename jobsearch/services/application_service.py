"""
Application Submission - one job application, from form fields to record.

Stages (one pass, no retries, first failure stops the run):

1. parse    - userTechSkills / userSoftSkills are JSON text -> list[str]
2. lookup   - the job must exist
3. presence - a resume file must be attached (checked by the route)
4. upload   - buffer the file locally, push it to the asset store
5. persist  - insert the application with the resume URL
6. cleanup  - remove the local buffer

Every stage returns Ok/Err; submit() maps each Err code to an AppError via
STAGE_ERRORS. A cleanup failure after persist is reported as a 500 even
though the application is already recorded; nothing is rolled back.
"""

import json
import os
import shutil
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List

from fastapi import UploadFile
from pymongo.database import Database

from jobsearch.core.auth import Identity
from jobsearch.core.config import Settings
from jobsearch.core.errors import AppError
from jobsearch.core.logger import get_logger
from jobsearch.core.result import Err, Ok, Result
from jobsearch.db.mongodb import get_collection, to_object_id
from jobsearch.schemas.schemas import ApplyJobBody
from jobsearch.services.asset_store import AssetStore

logger = get_logger(__name__)

# Err.code -> HTTP status
STAGE_ERRORS = {
    "DECODE_FAILED": 500,
    "NOT_FOUND": 404,
    "UPLOAD_FAILED": 500,
    "PERSIST_FAILED": 500,
    "CLEANUP_FAILED": 500,
}


@dataclass(frozen=True)
class Skills:
    technical: List[str]
    soft: List[str]


def _decode_skill_list(field: str, raw: str) -> Result[List[str]]:
    try:
        value = json.loads(raw)
    except ValueError as e:
        return Err("DECODE_FAILED", f"{field} is not valid JSON", {"error": str(e)})
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return Err("DECODE_FAILED", f"{field} must be a JSON array of strings")
    return Ok(value)


class ApplicationSubmission:
    """Orchestrates a single job application."""

    def __init__(self, db: Database, asset_store: AssetStore, settings: Settings):
        self.jobs = get_collection(db, "jobs")
        self.applications = get_collection(db, "applications")
        self.asset_store = asset_store
        self.upload_dir = settings.upload_dir

    # ------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------

    def parse(self, body: ApplyJobBody) -> Result[Skills]:
        technical = _decode_skill_list("userTechSkills", body.userTechSkills)
        if isinstance(technical, Err):
            return technical
        soft = _decode_skill_list("userSoftSkills", body.userSoftSkills)
        if isinstance(soft, Err):
            return soft
        return Ok(Skills(technical=technical.value, soft=soft.value))

    def lookup(self, job_id: str) -> Result[dict]:
        oid = to_object_id(job_id)
        job = self.jobs.find_one({"_id": oid}) if oid else None
        if job is None:
            return Err("NOT_FOUND", "Job not found")
        return Ok(job)

    def buffer(self, resume: UploadFile) -> str:
        """Copy the upload to the local upload directory; return its path."""
        os.makedirs(self.upload_dir, exist_ok=True)
        name = os.path.basename(resume.filename or "resume")
        path = os.path.join(self.upload_dir, f"{uuid.uuid4().hex}-{name}")
        resume.file.seek(0)
        with open(path, "wb") as out:
            shutil.copyfileobj(resume.file, out)
        return path

    def upload(self, path: str) -> Result[str]:
        try:
            return Ok(self.asset_store.upload(path))
        except Exception as e:
            return Err("UPLOAD_FAILED", "Resume upload failed", {"error": str(e), "path": path})

    def persist(self, identity: Identity, job: dict, skills: Skills, resume_url: str) -> Result[str]:
        now = datetime.utcnow()
        doc = {
            "jobId": job["_id"],
            "userId": to_object_id(identity.subject_id),
            "userTechSkills": skills.technical,
            "userSoftSkills": skills.soft,
            "userResume": resume_url,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            return Ok(str(self.applications.insert_one(doc).inserted_id))
        except Exception as e:
            return Err("PERSIST_FAILED", "Application could not be saved", {"error": str(e)})

    def cleanup(self, path: str) -> Result[None]:
        try:
            os.remove(path)
        except OSError as e:
            return Err(
                "CLEANUP_FAILED",
                "Application submitted but the temporary resume file could not be removed",
                {"error": str(e), "path": path},
            )
        return Ok(None)

    # ------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------

    def _fail(self, err: Err) -> AppError:
        logger.warning("Application stage failed: %s %s %s", err.code, err.message, err.details or "")
        return AppError(err.message, STAGE_ERRORS.get(err.code, 500))

    def prepare(self, body: ApplyJobBody) -> tuple:
        """Stages 1-2. Returns (skills, job) or raises the mapped AppError."""
        skills = self.parse(body)
        if isinstance(skills, Err):
            raise self._fail(skills)

        job = self.lookup(body.jobId)
        if isinstance(job, Err):
            raise self._fail(job)
        return skills.value, job.value

    def submit(self, identity: Identity, skills: Skills, job: dict, resume: UploadFile) -> str:
        """Stages 4-6. Returns the new application id or raises the mapped AppError."""
        path = self.buffer(resume)

        url = self.upload(path)
        if isinstance(url, Err):
            raise self._fail(url)

        application_id = self.persist(identity, job, skills, url.value)
        if isinstance(application_id, Err):
            raise self._fail(application_id)

        cleaned = self.cleanup(path)
        if isinstance(cleaned, Err):
            logger.error("Application %s recorded but local file left behind", application_id.value)
            raise self._fail(cleaned)

        logger.info("Application %s submitted for job %s", application_id.value, job["_id"])
        return application_id.value
