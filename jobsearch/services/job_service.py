"""
Job Service - job postings.

A job belongs to the HR user in `addedBy`; the company shown next to it is a
display join through company.companyHR, never an authorization anchor.
"""

import re
from datetime import datetime
from typing import List

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from jobsearch.core.auth import Identity
from jobsearch.core.errors import AppError
from jobsearch.core.ownership import JOB_DELETE, JOB_UPDATE
from jobsearch.db.mongodb import get_collection, populate, serialize_doc, serialize_docs, to_object_id
from jobsearch.schemas.schemas import JobCreate, JobFilterQuery, JobUpdate
from jobsearch.services.user_service import PUBLIC_USER_HIDDEN, projection


class JobService:
    """Handles the jobs collection."""

    def __init__(self, db: Database):
        self.db = db
        self.collection: Collection = get_collection(db, "jobs")

    def _with_poster(self, jobs: list) -> list:
        return populate(self.db, jobs, "addedBy", "users", projection(PUBLIC_USER_HIDDEN))

    def add_job(self, identity: Identity, data: JobCreate) -> None:
        now = datetime.utcnow()
        doc = data.changes()
        doc["addedBy"] = to_object_id(identity.subject_id)
        doc["createdAt"] = now
        doc["updatedAt"] = now
        self.collection.insert_one(doc)

    def update_job(self, identity: Identity, data: JobUpdate) -> dict:
        job = JOB_UPDATE.resolve(self.db, identity, data.id)
        updates = data.changes()
        updates["updatedAt"] = datetime.utcnow()
        updated = self.collection.find_one_and_update(
            {"_id": job["_id"]},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_doc(updated)

    def delete_job(self, identity: Identity, job_id: str) -> dict:
        job = JOB_DELETE.resolve(self.db, identity, job_id)
        return serialize_doc(self.collection.find_one_and_delete({"_id": job["_id"]}))

    def jobs_with_companies(self) -> List[dict]:
        """Every company, each with the jobs posted by its HR."""
        companies = list(get_collection(self.db, "companies").find())
        if not companies:
            raise AppError("No companies found", 404)

        result = []
        for company in companies:
            jobs = self.collection.find({"addedBy": company["companyHR"]}, {"addedBy": 0})
            entry = serialize_doc(company)
            entry["jobs"] = serialize_docs(jobs)
            result.append(entry)
        return result

    def jobs_for_company(self, company_name: str) -> dict:
        company = get_collection(self.db, "companies").find_one({"companyName": company_name})
        if not company:
            raise AppError("Company not found", 404)

        jobs = self._with_poster(list(self.collection.find({"addedBy": company["companyHR"]})))
        return {"company": serialize_doc(company), "jobs": serialize_docs(jobs)}

    def filtered_jobs(self, filters: JobFilterQuery) -> List[dict]:
        """Jobs matching every supplied filter. Read-only."""
        query = {}
        for field in ("workingTime", "jobLocation", "seniorityLevel"):
            value = getattr(filters, field)
            if value is not None:
                query[field] = value.value
        if filters.jobTitle:
            query["jobTitle"] = {"$regex": re.escape(filters.jobTitle), "$options": "i"}
        skills = filters.skill_list()
        if skills:
            query["technicalSkills"] = {"$all": skills}

        return serialize_docs(self._with_poster(list(self.collection.find(query))))
