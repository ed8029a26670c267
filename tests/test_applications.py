"""
Tests for the application submission workflow.
"""

import json
import os

import mongomock
from pymongo.errors import PyMongoError

from jobsearch.core.result import Err, Ok
from jobsearch.schemas.schemas import ApplyJobBody
from jobsearch.services.application_service import STAGE_ERRORS, ApplicationSubmission, _decode_skill_list

RESUME = ("cv.pdf", b"%PDF-1.4 resume", "application/pdf")


def form(job_id, tech=("python",), soft=("teamwork",)):
    return {
        "jobId": job_id,
        "userTechSkills": json.dumps(list(tech)),
        "userSoftSkills": json.dumps(list(soft)),
    }


class TestStages:
    """Test the individual stages."""

    def test_stage_codes_map_to_statuses(self):
        assert STAGE_ERRORS == {
            "DECODE_FAILED": 500,
            "NOT_FOUND": 404,
            "UPLOAD_FAILED": 500,
            "PERSIST_FAILED": 500,
            "CLEANUP_FAILED": 500,
        }
        assert Err("NOT_FOUND", "Job not found").details is None

    def test_decode_skill_list(self):
        assert _decode_skill_list("userTechSkills", '["python", "sql"]') == Ok(["python", "sql"])

    def test_decode_rejects_bad_json(self):
        result = _decode_skill_list("userTechSkills", "[python")
        assert isinstance(result, Err)
        assert result.code == "DECODE_FAILED"

    def test_decode_rejects_non_string_items(self):
        result = _decode_skill_list("userSoftSkills", "[1, 2]")
        assert isinstance(result, Err)
        assert result.message == "userSoftSkills must be a JSON array of strings"

    def test_lookup_treats_malformed_id_as_missing(self, db, settings, asset_store):
        submission = ApplicationSubmission(db, asset_store, settings)
        result = submission.lookup("not-an-id")
        assert isinstance(result, Err)
        assert result.code == "NOT_FOUND"

    def test_parse(self, db, settings, asset_store):
        submission = ApplicationSubmission(db, asset_store, settings)
        body = ApplyJobBody(jobId="x", userTechSkills='["go"]', userSoftSkills="[]")
        result = submission.parse(body)
        assert result.value.technical == ["go"]
        assert result.value.soft == []


class TestApplyToJob:
    """Test the full submission through the route."""

    def apply(self, client, user, data, resume=RESUME):
        files = {"userResume": resume} if resume else None
        return client.post("/job/applyToJob", data=data, files=files, headers={"token": user["token"]})

    def test_valid_submission(self, client, db, asset_store, settings, hr, job_seeker, create_job):
        job_id = create_job(hr)

        response = self.apply(client, job_seeker, form(job_id))

        assert response.status_code == 201
        assert response.json() == {"message": "Application submitted successfully"}
        assert db.applications.count_documents({}) == 1
        application = db.applications.find_one()
        assert str(application["jobId"]) == job_id
        assert str(application["userId"]) == job_seeker["id"]
        assert application["userTechSkills"] == ["python"]
        assert application["userResume"] == f"https://assets.test/resumes/{os.path.basename(asset_store.uploads[0])}"
        # Local buffer is gone
        assert os.listdir(settings.upload_dir) == []

    def test_missing_resume(self, client, db, hr, job_seeker, create_job):
        job_id = create_job(hr)

        response = self.apply(client, job_seeker, form(job_id), resume=None)

        assert response.status_code == 400
        assert response.json() == {"message": "Resume file is required"}
        assert db.applications.count_documents({}) == 0

    def test_unknown_job(self, client, db, job_seeker):
        response = self.apply(client, job_seeker, form("0123456789abcdef01234567"))
        assert response.status_code == 404
        assert response.json() == {"message": "Job not found"}

    def test_undecodable_skills(self, client, db, hr, job_seeker, create_job):
        job_id = create_job(hr)
        data = form(job_id)
        data["userTechSkills"] = "python, sql"

        response = self.apply(client, job_seeker, data)
        assert response.status_code == 500
        assert response.json() == {"message": "userTechSkills is not valid JSON"}
        assert db.applications.count_documents({}) == 0

    def test_missing_form_fields(self, client, job_seeker):
        response = self.apply(client, job_seeker, {"jobId": "x"})
        assert response.status_code == 400
        assert len(response.json()["message"]) == 2

    def test_upload_failure(self, client, db, asset_store, hr, job_seeker, create_job):
        asset_store.fail = True
        job_id = create_job(hr)

        response = self.apply(client, job_seeker, form(job_id))
        assert response.status_code == 500
        assert response.json() == {"message": "Resume upload failed"}
        assert db.applications.count_documents({}) == 0

    def test_cleanup_failure_keeps_the_record(self, client, db, asset_store, hr, job_seeker, create_job):
        asset_store.remove_file = True
        job_id = create_job(hr)

        response = self.apply(client, job_seeker, form(job_id))
        assert response.status_code == 500
        assert response.json() == {
            "message": "Application submitted but the temporary resume file could not be removed"
        }
        assert db.applications.count_documents({}) == 1

    def test_persist_failure_writes_nothing(self, client, db, hr, job_seeker, create_job, monkeypatch):
        job_id = create_job(hr)
        insert_one = mongomock.collection.Collection.insert_one

        def failing_insert(collection, document, *args, **kwargs):
            if collection.name == "applications":
                raise PyMongoError("write concern not satisfied")
            return insert_one(collection, document, *args, **kwargs)

        monkeypatch.setattr(mongomock.collection.Collection, "insert_one", failing_insert)

        response = self.apply(client, job_seeker, form(job_id))
        assert response.status_code == 500
        assert response.json() == {"message": "Application could not be saved"}
        assert db.applications.count_documents({}) == 0

    def test_empty_resume_part_means_no_resume(self, client, db, hr, job_seeker, create_job):
        """An unchosen file input posts `userResume` as an empty value."""
        job_id = create_job(hr)
        data = {**form(job_id), "userResume": ""}

        response = self.apply(client, job_seeker, data, resume=None)
        assert response.status_code == 400
        assert response.json() == {"message": "Resume file is required"}
        assert db.applications.count_documents({}) == 0

    def test_upload_runs_off_the_event_loop(self, client, asset_store, hr, job_seeker, create_job):
        job_id = create_job(hr)

        response = self.apply(client, job_seeker, form(job_id))
        assert response.status_code == 201
        assert asset_store.on_event_loop is False
