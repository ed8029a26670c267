"""
Service providers for route injection.

Everything is built per request from get_settings() and get_database(), so
tests swap the database, settings, asset store or mailer through
app.dependency_overrides.
"""

from fastapi import Depends
from pymongo.database import Database

from jobsearch.core.config import Settings, get_settings
from jobsearch.core.security import PasswordHasher, TokenService, get_password_hasher, get_token_service
from jobsearch.db.mongodb import get_database
from jobsearch.services.application_service import ApplicationSubmission
from jobsearch.services.asset_store import AssetStore, get_asset_store
from jobsearch.services.company_service import CompanyService
from jobsearch.services.email_service import EmailService, get_email_service
from jobsearch.services.job_service import JobService
from jobsearch.services.user_service import UserService


def get_user_service(
    db: Database = Depends(get_database),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    mailer: EmailService = Depends(get_email_service),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, hasher, settings, tokens=tokens, mailer=mailer)


def get_company_service(db: Database = Depends(get_database)) -> CompanyService:
    return CompanyService(db)


def get_job_service(db: Database = Depends(get_database)) -> JobService:
    return JobService(db)


def get_application_submission(
    db: Database = Depends(get_database),
    asset_store: AssetStore = Depends(get_asset_store),
    settings: Settings = Depends(get_settings),
) -> ApplicationSubmission:
    return ApplicationSubmission(db, asset_store, settings)
