"""
Company Service - company profiles owned by HR users.

Company ownership is resolved from the caller: the company whose companyHR is
the authenticated user. Jobs are linked to a company only through that HR
user (job.addedBy == company.companyHR).
"""

from datetime import datetime
from typing import List

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from jobsearch.core.auth import Identity
from jobsearch.core.errors import AppError
from jobsearch.core.ownership import COMPANY_DELETE, COMPANY_UPDATE, JOB_APPLICATIONS
from jobsearch.db.mongodb import get_collection, populate, serialize_doc, serialize_docs, to_object_id
from jobsearch.schemas.schemas import CompanyCreate, CompanyUpdate
from jobsearch.services.user_service import PUBLIC_USER_HIDDEN, projection


class CompanyService:
    """Handles the companies collection and the HR views built on it."""

    def __init__(self, db: Database):
        self.db = db
        self.collection: Collection = get_collection(db, "companies")

    def _company_exists(self, name: str, email: str) -> bool:
        return self.collection.find_one({"$or": [{"companyName": name}, {"companyEmail": email}]}) is not None

    def add_company(self, data: CompanyCreate) -> None:
        # Best-effort pre-check; the unique indexes have the final word
        if self._company_exists(data.companyName, data.companyEmail):
            raise AppError("Company already exists", 400)

        now = datetime.utcnow()
        doc = data.changes()
        doc["companyHR"] = to_object_id(data.companyHR)
        doc["createdAt"] = now
        doc["updatedAt"] = now
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise AppError("Company already exists", 409)

    def update_company(self, identity: Identity, data: CompanyUpdate) -> dict:
        company = COMPANY_UPDATE.resolve(self.db, identity)
        updates = data.changes()

        clashes = [{k: updates[k]} for k in ("companyName", "companyEmail") if k in updates]
        if clashes:
            existing = self.collection.find_one({"$or": clashes, "_id": {"$ne": company["_id"]}})
            if existing:
                if "companyEmail" in updates and existing.get("companyEmail") == updates["companyEmail"]:
                    raise AppError("Email already in use", 409)
                raise AppError("Company name already in use", 409)

        if "companyHR" in updates:
            updates["companyHR"] = to_object_id(updates["companyHR"])
        updates["updatedAt"] = datetime.utcnow()

        try:
            updated = self.collection.find_one_and_update(
                {"_id": company["_id"]},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise AppError("Company name or email already in use", 409)
        return serialize_doc(updated)

    def delete_company(self, identity: Identity) -> dict:
        company = COMPANY_DELETE.resolve(self.db, identity)
        return serialize_doc(self.collection.find_one_and_delete({"_id": company["_id"]}))

    def search_by_name(self, company_name: str) -> dict:
        company = self.collection.find_one({"companyName": company_name})
        if not company:
            raise AppError("Company not found", 404)
        return serialize_doc(company)

    def get_company_data(self, company_id: str) -> dict:
        """Company plus the jobs its HR has posted."""
        oid = to_object_id(company_id)
        company = self.collection.find_one({"_id": oid}) if oid else None
        if not company:
            raise AppError("Company not found", 404)

        jobs = get_collection(self.db, "jobs").find({"addedBy": company["companyHR"]}, {"addedBy": 0})
        return {"company": serialize_doc(company), "jobs": serialize_docs(jobs)}

    def applications_for_job(self, identity: Identity, job_id: str) -> List[dict]:
        """Applications to a job, visible only to the HR who posted it."""
        job = JOB_APPLICATIONS.resolve(self.db, identity, job_id)
        applications = list(get_collection(self.db, "applications").find({"jobId": job["_id"]}))
        populate(self.db, applications, "userId", "users", projection(PUBLIC_USER_HIDDEN))
        return serialize_docs(applications)
