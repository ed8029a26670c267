"""
Ownership authorization.

One rule, two lookup orders:

- "identity": find the resource by its owner field == caller id. Nothing found
  means the caller owns nothing here -> 403. (Companies are looked up this way.)
- "resource": fetch the resource by the target id first (absent -> 404), then
  compare its owner field with the caller id (mismatch -> 403). (Jobs.)

Existence is checked before ownership in the resource-first order. Neither
order is atomic with the write that follows it.
"""

from dataclasses import dataclass
from typing import Optional

from pymongo.database import Database

from jobsearch.core.auth import Identity
from jobsearch.core.errors import AppError
from jobsearch.core.logger import get_logger
from jobsearch.db.mongodb import get_collection, to_object_id

logger = get_logger(__name__)

IDENTITY_FIRST = "identity"
RESOURCE_FIRST = "resource"


@dataclass(frozen=True)
class OwnershipRule:
    collection: str
    owner_field: str
    lookup: str
    forbidden_message: str
    not_found_message: str = "Resource not found"

    def __post_init__(self):
        if self.lookup not in (IDENTITY_FIRST, RESOURCE_FIRST):
            raise ValueError(f"Unknown ownership lookup: {self.lookup}")

    def resolve(self, db: Database, identity: Identity, resource_id: Optional[str] = None) -> dict:
        """Return the resource owned by `identity`, or raise AppError (403/404)."""
        collection = get_collection(db, self.collection)
        owner_id = to_object_id(identity.subject_id)

        if self.lookup == IDENTITY_FIRST:
            doc = collection.find_one({self.owner_field: owner_id})
            if doc is None:
                logger.info("%s owns no %s", identity.subject_id, self.collection)
                raise AppError(self.forbidden_message, 403)
            return doc

        oid = to_object_id(resource_id)
        doc = collection.find_one({"_id": oid}) if oid is not None else None
        if doc is None:
            raise AppError(self.not_found_message, 404)

        if str(doc.get(self.owner_field)) != identity.subject_id:
            logger.info(
                "%s denied on %s %s owned by %s",
                identity.subject_id, self.collection, resource_id, doc.get(self.owner_field),
            )
            raise AppError(self.forbidden_message, 403)
        return doc


COMPANY_UPDATE = OwnershipRule(
    collection="companies",
    owner_field="companyHR",
    lookup=IDENTITY_FIRST,
    forbidden_message="Only the company owner can update the data",
)

COMPANY_DELETE = OwnershipRule(
    collection="companies",
    owner_field="companyHR",
    lookup=IDENTITY_FIRST,
    forbidden_message="Only the company owner can delete the data",
)

JOB_UPDATE = OwnershipRule(
    collection="jobs",
    owner_field="addedBy",
    lookup=RESOURCE_FIRST,
    forbidden_message="Only the company owner can update the data",
    not_found_message="Job not found",
)

JOB_DELETE = OwnershipRule(
    collection="jobs",
    owner_field="addedBy",
    lookup=RESOURCE_FIRST,
    forbidden_message="Only the company owner can delete the data",
    not_found_message="Job not found",
)

JOB_APPLICATIONS = OwnershipRule(
    collection="jobs",
    owner_field="addedBy",
    lookup=RESOURCE_FIRST,
    forbidden_message="Only the owner can view the applications for their jobs",
    not_found_message="Job not found",
)
