"""
User Service - account lifecycle, sign-in and password recovery.

A user's `status` (online/offline) is a business flag flipped by sign-in and
logout: offline users cannot read, update or delete their own account or
change their password.
"""

import secrets
from datetime import datetime, time, timedelta
from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from jobsearch.core.auth import Identity, Role
from jobsearch.core.config import Settings
from jobsearch.core.errors import AppError
from jobsearch.core.logger import get_logger
from jobsearch.core.security import PasswordHasher, TokenService
from jobsearch.db.mongodb import get_collection, serialize_doc, serialize_docs, to_object_id
from jobsearch.schemas.schemas import (
    ForgetPasswordBody, SignInBody, SignUpBody, UpdateAccountBody,
    UpdatePasswordBody, UserStatus, VerifyOtpBody,
)
from jobsearch.services.email_service import EmailService

logger = get_logger(__name__)

# Never leave the service
PRIVATE_FIELDS = ("password", "otp", "otpExpire")
# Public profile of one user
PROFILE_HIDDEN = PRIVATE_FIELDS + ("recoveryEmail", "status")
# Accounts sharing a recovery e-mail
ACCOUNT_LIST_HIDDEN = PRIVATE_FIELDS + ("status",)
# A user shown next to a job or an application
PUBLIC_USER_HIDDEN = PRIVATE_FIELDS + ("_id", "firstName", "lastName", "recoveryEmail", "DOB", "status")


def projection(hidden):
    """Exclusion projection for `hidden`, built fresh for every query."""
    return {field: 0 for field in hidden}


def _as_datetime(value):
    """BSON has no date type; store dates as midnight datetimes."""
    return datetime.combine(value, time()) if value is not None else None


class UserService:
    """Handles the users collection."""

    def __init__(
        self,
        db: Database,
        hasher: PasswordHasher,
        settings: Settings,
        tokens: Optional[TokenService] = None,
        mailer: Optional[EmailService] = None,
    ):
        self.collection: Collection = get_collection(db, "users")
        self.hasher = hasher
        self.settings = settings
        self.tokens = tokens
        self.mailer = mailer

    # ------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------

    def _active_user(self, identity: Identity) -> dict:
        """The caller's record; 401 if it is gone or the user is offline."""
        user = self.collection.find_one({"_id": to_object_id(identity.subject_id)})
        if not user:
            raise AppError("Please SignUp", 401)
        if user.get("status") == UserStatus.offline.value:
            raise AppError("LogIn first", 401)
        return user

    def _find_by_email_or_mobile(self, value: str) -> Optional[dict]:
        return self.collection.find_one({
            "$or": [{"email": value.lower()}, {"mobileNumber": value}],
        })

    def _account_exists(self, email: str, mobile_number: str) -> bool:
        return self.collection.find_one({"$or": [{"email": email}, {"mobileNumber": mobile_number}]}) is not None

    # ------------------------------------------------------------
    # Sign up / sign in / logout
    # ------------------------------------------------------------

    def sign_up(self, data: SignUpBody) -> None:
        email = data.email.lower()
        # Best-effort pre-check; the unique indexes have the final word
        if self._account_exists(email, data.mobileNumber):
            raise AppError("Email already exists", 400)

        doc = {
            "firstName": data.firstName,
            "lastName": data.lastName,
            "username": f"{data.firstName}{data.lastName}".lower(),
            "email": email,
            "password": self.hasher.hash(data.password),
            "recoveryEmail": data.recoveryEmail.lower(),
            "DOB": _as_datetime(data.DOB),
            "mobileNumber": data.mobileNumber,
            "role": (data.role or Role.user).value,
            "status": UserStatus.offline.value,
        }
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError:
            logger.info("Sign-up for %s lost a uniqueness race", email)
            raise AppError("Email already exists", 409)

    def sign_in(self, data: SignInBody) -> str:
        """Verify credentials, mark the user online and return a signed credential."""
        login = data.emailOrRecoveryEmailOrMobile
        user = self.collection.find_one({
            "$or": [
                {"email": login.lower()},
                {"mobileNumber": login},
                {"recoveryEmail": login.lower()},
            ],
        })
        if not user or not self.hasher.verify(data.password, user.get("password")):
            raise AppError("Incorrect password or email", 400)

        self.collection.update_one({"_id": user["_id"]}, {"$set": {"status": UserStatus.online.value}})

        identity = Identity(
            subject_id=str(user["_id"]),
            username=user.get("username"),
            email=user["email"],
            role=user.get("role", Role.user.value),
        )
        logger.info("User %s signed in", identity.subject_id)
        return self.tokens.create_access_token(identity.to_claims())

    def logout(self, identity: Identity) -> None:
        user = self.collection.find_one({"_id": to_object_id(identity.subject_id)})
        if not user:
            raise AppError("Please SignUp", 401)
        if user.get("status") == UserStatus.offline.value:
            return
        self.collection.update_one({"_id": user["_id"]}, {"$set": {"status": UserStatus.offline.value}})

    # ------------------------------------------------------------
    # Own account
    # ------------------------------------------------------------

    def update_account(self, identity: Identity, data: UpdateAccountBody) -> dict:
        user = self._active_user(identity)
        updates = data.changes()
        for field in ("email", "recoveryEmail"):
            if field in updates:
                updates[field] = updates[field].lower()
        if "DOB" in updates:
            updates["DOB"] = _as_datetime(data.DOB)

        clashes = [{k: updates[k]} for k in ("email", "mobileNumber") if k in updates]
        if clashes:
            existing = self.collection.find_one({"$or": clashes, "_id": {"$ne": user["_id"]}})
            if existing:
                if "email" in updates and existing.get("email") == updates["email"]:
                    raise AppError("Email already in use", 409)
                raise AppError("Mobile number already in use", 409)

        if not updates:
            return serialize_doc(self.collection.find_one({"_id": user["_id"]}, projection(PRIVATE_FIELDS)))

        try:
            updated = self.collection.find_one_and_update(
                {"_id": user["_id"]},
                {"$set": updates},
                projection=projection(PRIVATE_FIELDS),
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise AppError("Email or mobile number already in use", 409)
        return serialize_doc(updated)

    def delete_account(self, identity: Identity) -> dict:
        user = self._active_user(identity)
        deleted = self.collection.find_one_and_delete(
            {"_id": user["_id"]}, projection=projection(PRIVATE_FIELDS)
        )
        return serialize_doc(deleted)

    def get_user_data(self, identity: Identity) -> dict:
        user = self._active_user(identity)
        return serialize_doc({k: v for k, v in user.items() if k not in PRIVATE_FIELDS})

    def update_password(self, identity: Identity, data: UpdatePasswordBody) -> None:
        user = self._active_user(identity)
        if not self.hasher.verify(data.currentPassword, user.get("password")):
            raise AppError("Current password is incorrect", 400)
        if self.hasher.verify(data.newPassword, user.get("password")):
            raise AppError("The current password matches the new password", 400)

        self.collection.update_one(
            {"_id": user["_id"]},
            {"$set": {"password": self.hasher.hash(data.newPassword)}},
        )

    # ------------------------------------------------------------
    # Public lookups
    # ------------------------------------------------------------

    def get_profile(self, user_id: str) -> dict:
        oid = to_object_id(user_id)
        user = self.collection.find_one({"_id": oid}, projection(PROFILE_HIDDEN)) if oid else None
        if not user:
            raise AppError("User not found", 404)
        return serialize_doc(user)

    def accounts_by_recovery_email(self, recovery_email: str) -> List[dict]:
        users = list(self.collection.find(
            {"recoveryEmail": recovery_email.lower()}, projection(ACCOUNT_LIST_HIDDEN)
        ))
        if not users:
            raise AppError("No accounts found with the provided recovery email", 404)
        return serialize_docs(users)

    # ------------------------------------------------------------
    # Password recovery
    # ------------------------------------------------------------

    async def forget_password(self, data: ForgetPasswordBody) -> None:
        """Issue a 6-digit OTP valid for `otp_expire_minutes` and mail it to the recovery address."""
        user = self._find_by_email_or_mobile(data.emailOrMobile)
        if not user:
            raise AppError("Incorrect email or mobile number", 400)

        otp = str(100000 + secrets.randbelow(900000))
        otp_expire = datetime.utcnow() + timedelta(minutes=self.settings.otp_expire_minutes)
        self.collection.update_one({"_id": user["_id"]}, {"$set": {"otp": otp, "otpExpire": otp_expire}})
        logger.info("OTP issued for user %s", user["_id"])

        await self.mailer.send_otp(user["recoveryEmail"], otp)

    def verify_otp_and_set_password(self, data: VerifyOtpBody) -> None:
        user = self._find_by_email_or_mobile(data.emailOrMobile)
        if not user or not user.get("otp") or user.get("otp") != data.otp:
            raise AppError("Invalid email or OTP", 400)

        clear_otp = {"otp": None, "otpExpire": None}
        otp_expire = user.get("otpExpire")
        if otp_expire is None or datetime.utcnow() > otp_expire:
            # Single use: an expired code is discarded on the first check
            self.collection.update_one({"_id": user["_id"]}, {"$set": clear_otp})
            raise AppError("OTP expired", 400)

        self.collection.update_one(
            {"_id": user["_id"]},
            {"$set": {"password": self.hasher.hash(data.newPassword), **clear_otp}},
        )
