"""
Tests for job routes: posting, ownership, listings and filtering.
"""

import pytest


class TestJobOwnership:
    """Test resource-first ownership on update and delete."""

    def test_add_job_records_poster(self, client, db, hr, job_data):
        response = client.post("/job/addJob", json=job_data(), headers={"token": hr["token"]})

        assert response.status_code == 201
        assert response.json() == {"message": "Job added successfully"}
        assert str(db.jobs.find_one()["addedBy"]) == hr["id"]

    def test_other_hr_cannot_update(self, client, create_user, create_job):
        owner = create_user(role="Company_HR")
        other = create_user(role="Company_HR")
        job_id = create_job(owner)

        response = client.put(
            f"/job/updateJob/{job_id}", json={"jobTitle": "Hijacked"}, headers={"token": other["token"]}
        )
        assert response.status_code == 403
        assert response.json() == {"message": "Only the company owner can update the data"}

    def test_owner_updates(self, client, hr, create_job):
        job_id = create_job(hr)

        response = client.put(
            f"/job/updateJob/{job_id}",
            json={"jobTitle": "Senior Backend Developer", "seniorityLevel": "Senior"},
            headers={"token": hr["token"]},
        )
        assert response.status_code == 200
        job = response.json()["job"]
        assert response.json()["message"] == "Job data updated successfully"
        assert job["jobTitle"] == "Senior Backend Developer"
        assert job["seniorityLevel"] == "Senior"
        assert job["_id"] == job_id

    def test_body_id_cannot_retarget_update(self, client, db, hr, create_job):
        """The job named in the path is the one updated."""
        named = create_job(hr, jobTitle="Named")
        other = create_job(hr, jobTitle="Other")

        response = client.put(
            f"/job/updateJob/{named}",
            json={"id": other, "jobTitle": "Changed"},
            headers={"token": hr["token"]},
        )
        assert response.status_code == 200
        assert response.json()["job"]["_id"] == named
        assert db.jobs.count_documents({"jobTitle": "Changed"}) == 1
        assert db.jobs.count_documents({"jobTitle": "Other"}) == 1

    def test_null_title_is_rejected(self, client, db, hr, create_job):
        job_id = create_job(hr, jobTitle="Keeps Title")

        response = client.put(
            f"/job/updateJob/{job_id}", json={"jobTitle": None}, headers={"token": hr["token"]}
        )
        assert response.status_code == 400
        assert response.json() == {"message": ['"jobTitle" must not be null']}
        assert db.jobs.count_documents({"jobTitle": "Keeps Title"}) == 1

    def test_update_unknown_job(self, client, hr):
        response = client.put(
            "/job/updateJob/0123456789abcdef01234567", json={"jobTitle": "X"}, headers={"token": hr["token"]}
        )
        assert response.status_code == 404
        assert response.json() == {"message": "Job not found"}

    def test_other_hr_cannot_delete(self, client, db, create_user, create_job):
        owner = create_user(role="Company_HR")
        other = create_user(role="Company_HR")
        job_id = create_job(owner)

        response = client.delete(f"/job/deleteJob/{job_id}", headers={"token": other["token"]})
        assert response.status_code == 403
        assert response.json() == {"message": "Only the company owner can delete the data"}
        assert db.jobs.count_documents({}) == 1

    def test_owner_deletes(self, client, db, hr, create_job):
        job_id = create_job(hr)

        response = client.delete(f"/job/deleteJob/{job_id}", headers={"token": hr["token"]})
        assert response.status_code == 200
        assert response.json()["job"]["_id"] == job_id
        assert db.jobs.count_documents({}) == 0


class TestJobListings:
    """Test the company-oriented job views."""

    def test_jobs_with_companies(self, client, hr, job_seeker, company_data, create_job):
        client.post("/company/addCompany", json=company_data(hr["id"]), headers={"token": hr["token"]})
        create_job(hr)

        response = client.get("/job/JobsWithCompaniesInfo", headers={"token": job_seeker["token"]})
        assert response.status_code == 200
        companies = response.json()["companies"]
        assert len(companies) == 1
        assert len(companies[0]["jobs"]) == 1

    def test_no_companies(self, client, job_seeker):
        response = client.get("/job/JobsWithCompaniesInfo", headers={"token": job_seeker["token"]})
        assert response.status_code == 404
        assert response.json() == {"message": "No companies found"}

    def test_jobs_for_company(self, client, hr, job_seeker, company_data, create_job):
        payload = company_data(hr["id"])
        client.post("/company/addCompany", json=payload, headers={"token": hr["token"]})
        create_job(hr)

        response = client.get(
            "/job/getAllJobsForSpecificCompany",
            params={"companyName": payload["companyName"]},
            headers={"token": job_seeker["token"]},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["company"]["companyName"] == payload["companyName"]
        poster = body["jobs"][0]["addedBy"]
        assert poster["email"] == hr["email"]
        assert "password" not in poster

    def test_jobs_for_unknown_company(self, client, job_seeker):
        response = client.get(
            "/job/getAllJobsForSpecificCompany",
            params={"companyName": "Nobody Inc"},
            headers={"token": job_seeker["token"]},
        )
        assert response.status_code == 404
        assert response.json() == {"message": "Company not found"}


class TestFilteredJobs:
    """Test job search."""

    @pytest.fixture
    def jobs(self, hr, create_job):
        create_job(hr, jobTitle="Backend Developer", technicalSkills=["python", "mongodb"])
        create_job(hr, jobTitle="Frontend Developer", technicalSkills=["react"], jobLocation="onsite")
        create_job(
            hr, jobTitle="C++ Engineer", technicalSkills=["c++"],
            workingTime="part-time", seniorityLevel="Senior",
        )

    def search(self, client, user, **params):
        return client.get("/job/getFilteredJobs", params=params, headers={"token": user["token"]})

    def test_no_filters_returns_everything_and_is_idempotent(self, client, job_seeker, jobs):
        first = self.search(client, job_seeker)
        second = self.search(client, job_seeker)

        assert first.status_code == 200
        assert len(first.json()["jobs"]) == 3
        assert first.json() == second.json()

    def test_exact_filters(self, client, job_seeker, jobs):
        response = self.search(client, job_seeker, jobLocation="onsite")
        assert [job["jobTitle"] for job in response.json()["jobs"]] == ["Frontend Developer"]

        response = self.search(client, job_seeker, workingTime="part-time", seniorityLevel="Senior")
        assert [job["jobTitle"] for job in response.json()["jobs"]] == ["C++ Engineer"]

    def test_title_is_case_insensitive_substring(self, client, job_seeker, jobs):
        response = self.search(client, job_seeker, jobTitle="developer")
        assert len(response.json()["jobs"]) == 2

    def test_title_is_matched_literally(self, client, job_seeker, jobs):
        response = self.search(client, job_seeker, jobTitle="C++")
        assert [job["jobTitle"] for job in response.json()["jobs"]] == ["C++ Engineer"]

    def test_all_listed_skills_required(self, client, job_seeker, jobs):
        response = self.search(client, job_seeker, technicalSkills="python,mongodb")
        assert [job["jobTitle"] for job in response.json()["jobs"]] == ["Backend Developer"]

        response = self.search(client, job_seeker, technicalSkills="python,react")
        assert response.status_code == 404

    def test_nothing_found(self, client, job_seeker, jobs):
        response = self.search(client, job_seeker, jobTitle="Astronaut")
        assert response.status_code == 404
        assert response.json() == {"message": "There are no jobs with these specifications"}
