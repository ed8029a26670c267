"""
Pydantic Schemas - Request Validation

All request schemas in one file for simplicity. Each schema is the contract
for one endpoint section; `messages` holds the wording for violations,
keyed by field and then by pydantic error type (see core.validation).
"""

from datetime import date
from enum import Enum
from typing import ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from jobsearch.core.auth import Role


# ============================================================
# ENUMS
# ============================================================

class UserStatus(str, Enum):
    online = "online"
    offline = "offline"


class CompanySize(str, Enum):
    tiny = "1-10 employees"
    very_small = "11-20 employees"
    small = "21-50 employees"
    small_medium = "51-100 employees"
    medium = "101-200 employees"
    medium_large = "201-500 employees"
    large = "501-1000 employees"
    very_large = "1001-5000 employees"
    enterprise = "5001-10,000 employees"
    giant = "10,001+ employees"


class JobLocation(str, Enum):
    onsite = "onsite"
    remotely = "remotely"
    hybrid = "hybrid"


class WorkingTime(str, Enum):
    part_time = "part-time"
    full_time = "full-time"


class SeniorityLevel(str, Enum):
    junior = "Junior"
    mid_level = "Mid-Level"
    senior = "Senior"
    team_lead = "Team-Lead"
    cto = "CTO"


# ============================================================
# SHARED PATTERNS AND MESSAGES
# ============================================================

PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d]{8,}$"
MOBILE_PATTERN = r"^(002|\+2)?01[0125][0-9]{8}$"
EMAIL_OR_MOBILE_PATTERN = (
    r"^(002|\+2)?01[0125][0-9]{8}$|^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)
OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

PASSWORD_RULES = (
    "Password must be at least 8 characters long, contain at least one uppercase letter, "
    "one lowercase letter, and one number."
)
MOBILE_RULES = (
    "Mobile number must be a valid Egyptian number "
    "(e.g., 00201XXXXXXXX or +201XXXXXXXX or 01XXXXXXXX)."
)
VALID_EMAIL = "Please provide a valid email address."
DOB_FORMAT = "Date of Birth must be in the format YYYY-MM-DD."
DOB_FUTURE = "Date of Birth cannot be in the future."


def _not_in_future(value: Optional[date]) -> Optional[date]:
    if value is not None and value > date.today():
        raise PydanticCustomError("date_future", "date cannot be in the future")
    return value


class RequestSchema(BaseModel):
    """Base for request sections: unknown keys are violations."""

    # Password rules use lookaheads, which the default rust regex engine rejects.
    model_config = ConfigDict(extra="forbid", regex_engine="python-re")

    messages: ClassVar[Dict[str, Dict[str, str]]] = {}

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        # Optional means "may be omitted", never "may be null"
        if value is None:
            raise PydanticCustomError("null_forbidden", "{field} must not be null", {"field": info.field_name})
        return value

    def changes(self) -> dict:
        """Only the fields the caller actually sent, enums as plain values."""
        return self.model_dump(mode="json", exclude_unset=True)


# ============================================================
# USER SCHEMAS
# ============================================================

class SignUpBody(RequestSchema):
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., pattern=PASSWORD_PATTERN)
    DOB: date
    mobileNumber: str = Field(..., pattern=MOBILE_PATTERN)
    recoveryEmail: EmailStr
    role: Optional[Role] = None

    messages = {
        "firstName": {"missing": "First name is required."},
        "lastName": {"missing": "Last name is required."},
        "email": {"value_error": VALID_EMAIL, "missing": "Email is required."},
        "password": {"string_pattern_mismatch": PASSWORD_RULES, "missing": "Password is required."},
        "DOB": {
            "date_from_datetime_parsing": DOB_FORMAT,
            "date_parsing": DOB_FORMAT,
            "date_type": DOB_FORMAT,
            "date_future": DOB_FUTURE,
            "missing": "Date of Birth is required.",
        },
        "mobileNumber": {"string_pattern_mismatch": MOBILE_RULES, "missing": "Mobile number is required."},
        "recoveryEmail": {"value_error": VALID_EMAIL, "missing": "recoveryEmail is required."},
        "role": {"enum": "Role must be either User or Company_HR."},
    }

    @field_validator("DOB")
    @classmethod
    def dob_not_in_future(cls, value):
        return _not_in_future(value)


class SignInBody(RequestSchema):
    emailOrRecoveryEmailOrMobile: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UpdateAccountBody(RequestSchema):
    firstName: Optional[str] = Field(None, min_length=1)
    lastName: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    DOB: Optional[date] = None
    mobileNumber: Optional[str] = Field(None, pattern=MOBILE_PATTERN)
    recoveryEmail: Optional[EmailStr] = None

    messages = {
        "email": {"value_error": VALID_EMAIL},
        "DOB": {
            "date_from_datetime_parsing": DOB_FORMAT,
            "date_parsing": DOB_FORMAT,
            "date_type": DOB_FORMAT,
            "date_future": DOB_FUTURE,
        },
        "mobileNumber": {"string_pattern_mismatch": MOBILE_RULES},
        "recoveryEmail": {"value_error": VALID_EMAIL},
    }

    @field_validator("DOB")
    @classmethod
    def dob_not_in_future(cls, value):
        return _not_in_future(value)


class UpdatePasswordBody(RequestSchema):
    currentPassword: str = Field(..., pattern=PASSWORD_PATTERN)
    newPassword: str = Field(..., pattern=PASSWORD_PATTERN)

    messages = {
        "currentPassword": {
            "string_pattern_mismatch": PASSWORD_RULES,
            "missing": "currentPassword is required.",
        },
        "newPassword": {
            "string_pattern_mismatch": PASSWORD_RULES,
            "missing": "newPassword is required.",
        },
    }


class ProfileQuery(RequestSchema):
    userId: str = Field(..., min_length=1)

    messages = {
        "userId": {"missing": "ID is required.", "string_too_short": "ID is required."},
    }


class RecoveryEmailQuery(RequestSchema):
    recoveryEmail: EmailStr

    messages = {
        "recoveryEmail": {"value_error": VALID_EMAIL, "missing": "recoveryEmail is required."},
    }


class ForgetPasswordBody(RequestSchema):
    emailOrMobile: str = Field(..., pattern=EMAIL_OR_MOBILE_PATTERN)

    messages = {
        "emailOrMobile": {
            "string_pattern_mismatch": "Please provide a valid mobile number or email address.",
        },
    }


class VerifyOtpBody(RequestSchema):
    emailOrMobile: str = Field(..., pattern=EMAIL_OR_MOBILE_PATTERN)
    otp: str = Field(..., min_length=6, max_length=6, pattern=r"^[0-9]+$")
    newPassword: str = Field(..., min_length=8, pattern=PASSWORD_PATTERN)

    messages = {
        "emailOrMobile": {
            "string_pattern_mismatch": "Please provide a valid mobile number or email address.",
        },
        "otp": {
            "string_too_short": "OTP must be exactly 6 digits.",
            "string_too_long": "OTP must be exactly 6 digits.",
            "string_pattern_mismatch": "OTP must contain only digits.",
        },
        "newPassword": {
            "string_too_short": "New password must be at least 8 characters long.",
            "string_pattern_mismatch": (
                "New password must contain at least one uppercase letter, "
                "one lowercase letter, and one digit."
            ),
        },
    }


# ============================================================
# COMPANY SCHEMAS
# ============================================================

COMPANY_SIZE_RULES = "Number of employees must be one of the specified values."


class CompanyCreate(RequestSchema):
    companyName: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    industry: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    numberOfEmployees: CompanySize
    companyEmail: EmailStr
    companyHR: str = Field(..., pattern=OBJECT_ID_PATTERN)

    messages = {
        "companyName": {"string_too_short": "Company name is required."},
        "description": {"string_too_short": "Description is required."},
        "industry": {"string_too_short": "Industry is required."},
        "address": {"string_too_short": "Address is required."},
        "numberOfEmployees": {"enum": COMPANY_SIZE_RULES},
        "companyEmail": {"value_error": "Company email must be a valid email address."},
        "companyHR": {"string_pattern_mismatch": "Company HR must be a valid MongoDB ObjectId."},
    }


class CompanyUpdate(RequestSchema):
    companyName: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    industry: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)
    numberOfEmployees: Optional[CompanySize] = None
    companyEmail: Optional[EmailStr] = None
    companyHR: Optional[str] = Field(None, pattern=OBJECT_ID_PATTERN)

    messages = {
        "numberOfEmployees": {"enum": COMPANY_SIZE_RULES},
        "companyEmail": {"value_error": "Company email must be a valid email address."},
        "companyHR": {"string_pattern_mismatch": "Company HR must be a valid ObjectId."},
    }


class CompanyNameQuery(RequestSchema):
    companyName: str = Field(..., min_length=1)

    messages = {
        "companyName": {"string_too_short": "Company name is required."},
    }


class IdParams(RequestSchema):
    id: str = Field(..., min_length=1)

    messages = {
        "id": {"missing": "ID is required.", "string_too_short": "ID is required."},
    }


# ============================================================
# JOB SCHEMAS
# ============================================================

JOB_LOCATION_RULES = "Job location must be one of onsite, remotely, hybrid"
WORKING_TIME_RULES = "Working time must be one of part-time, full-time"
SENIORITY_RULES = "Seniority level must be one of Junior, Mid-Level, Senior, Team-Lead, CTO"
TECH_SKILLS_RULES = "Technical skills must be an array of strings"
SOFT_SKILLS_RULES = "Soft skills must be an array of strings"


class JobCreate(RequestSchema):
    jobTitle: str = Field(..., min_length=1)
    jobLocation: JobLocation
    workingTime: WorkingTime
    seniorityLevel: SeniorityLevel
    jobDescription: str = Field(..., min_length=1)
    technicalSkills: List[str]
    softSkills: List[str]

    messages = {
        "jobTitle": {"string_too_short": "Job title is required"},
        "jobLocation": {"enum": JOB_LOCATION_RULES},
        "workingTime": {"enum": WORKING_TIME_RULES},
        "seniorityLevel": {"enum": SENIORITY_RULES},
        "jobDescription": {"string_too_short": "Job description is required"},
        "technicalSkills": {"list_type": TECH_SKILLS_RULES, "string_type": TECH_SKILLS_RULES},
        "softSkills": {"list_type": SOFT_SKILLS_RULES, "string_type": SOFT_SKILLS_RULES},
    }


class JobUpdate(RequestSchema):
    """Path id and body fields, validated together."""

    id: str = Field(..., min_length=1)
    jobTitle: Optional[str] = Field(None, min_length=1)
    jobLocation: Optional[JobLocation] = None
    workingTime: Optional[WorkingTime] = None
    seniorityLevel: Optional[SeniorityLevel] = None
    jobDescription: Optional[str] = Field(None, min_length=1)
    technicalSkills: Optional[List[str]] = None
    softSkills: Optional[List[str]] = None

    messages = {
        "jobLocation": {"enum": JOB_LOCATION_RULES},
        "workingTime": {"enum": WORKING_TIME_RULES},
        "seniorityLevel": {"enum": SENIORITY_RULES},
        "technicalSkills": {"list_type": TECH_SKILLS_RULES, "string_type": TECH_SKILLS_RULES},
        "softSkills": {"list_type": SOFT_SKILLS_RULES, "string_type": SOFT_SKILLS_RULES},
    }

    def changes(self) -> dict:
        data = super().changes()
        data.pop("id", None)
        return data


class JobDeleteParams(RequestSchema):
    id: str = Field(..., min_length=1)

    messages = {
        "id": {"string_too_short": "params.id (user ID) is required"},
    }


class JobFilterQuery(RequestSchema):
    workingTime: Optional[WorkingTime] = None
    jobLocation: Optional[JobLocation] = None
    seniorityLevel: Optional[SeniorityLevel] = None
    jobTitle: Optional[str] = Field(None, min_length=1)
    # Comma-separated list, e.g. "python,mongodb"
    technicalSkills: Optional[str] = Field(None, min_length=1)

    def skill_list(self) -> List[str]:
        if not self.technicalSkills:
            return []
        return [skill.strip() for skill in self.technicalSkills.split(",") if skill.strip()]


class ApplyJobBody(RequestSchema):
    """Form fields of the application; the skill lists arrive as JSON text."""

    jobId: str = Field(..., min_length=1)
    userTechSkills: str = Field(..., min_length=1)
    userSoftSkills: str = Field(..., min_length=1)


# ============================================================
# RESPONSE SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    message: str
    token: str
