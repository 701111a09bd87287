"""
Pydantic Schemas - Request Validation and Document Shapes

All API request schemas in one file for simplicity.
Python attributes are snake_case; the wire and stored documents use the
camelCase aliases (jobOpenings, coverLetter, socialLinks, ...).
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts both snake_case and camelCase input; dumps camelCase with by_alias."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _object_id_str(value: Any) -> str:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, str) and ObjectId.is_valid(value):
        return value
    raise ValueError("must be a valid object id")


ObjectIdStr = Annotated[str, BeforeValidator(_object_id_str)]


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    user = "user"
    recruiter = "recruiter"


class ApplicationStatus(str, Enum):
    applied = "Applied"
    reviewed = "Reviewed"
    interview = "Interview"
    offered = "Offered"
    rejected = "Rejected"


# ============================================================
# PROFILE (embedded in User)
# ============================================================

LINKEDIN_URL = r"^https?://(www\.)?linkedin\.com/.*$"
GITHUB_URL = r"^https?://(www\.)?github\.com/.*$"
TWITTER_URL = r"^https?://(www\.)?twitter\.com/.*$"
HTTP_URL = r"^https?://.*$"
PHONE_PATTERN = r"^\d{10}$"
# bcrypt only reads the first 72 bytes and rejects longer input
PASSWORD_MAX_BYTES = 72


class Education(CamelModel):
    degree: str = Field(..., min_length=1)
    institution: str = Field(..., min_length=1)
    start_date: datetime
    end_date: Optional[datetime] = None


class Experience(CamelModel):
    company: ObjectIdStr
    profile_photo: str = ""
    position: str = Field(..., min_length=1)
    start_date: datetime
    end_date: Optional[datetime] = None
    description: Optional[str] = None


class Project(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    technologies: List[str] = []
    link: Optional[str] = Field(None, pattern=HTTP_URL)


class SocialLinks(CamelModel):
    linked_in: Optional[str] = Field(None, pattern=LINKEDIN_URL)
    github: Optional[str] = Field(None, pattern=GITHUB_URL)
    twitter: Optional[str] = Field(None, pattern=TWITTER_URL)


class Profile(CamelModel):
    bio: Optional[str] = None
    skills: List[str] = []
    resume: List[str] = []
    resume_original_name: Optional[str] = None
    education: List[Education] = []
    experience: List[Experience] = []
    projects: List[Project] = []
    social_links: Optional[SocialLinks] = None
    profile_image: str = ""


# ============================================================
# USER SCHEMAS
# ============================================================

class UserCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.user
    profile: Profile = Field(default_factory=Profile)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
        return v


class UserDocument(CamelModel):
    """Full stored shape of a user; re-validated before every whole-document save."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    password: str = Field(..., min_length=6)
    role: UserRole
    profile: Profile = Field(default_factory=Profile)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    website: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    logo: Optional[str] = None


class CompanyUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None


# ============================================================
# JOB CATEGORY SCHEMAS
# ============================================================

class JobCategoryCreate(CamelModel):
    name: str = Field(..., min_length=1)


class JobCategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    experience: int = Field(..., ge=0, description="Years of experience")
    salary: float = Field(..., gt=0)
    job_openings: int = Field(..., ge=1)
    requirements: List[str] = Field(..., min_length=1)
    job_type: str = Field(..., min_length=1)
    categories: List[str] = Field(..., min_length=1)


class JobUpdate(CamelModel):
    """Patchable job fields. company/categories are maintained by job_service."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    experience: Optional[int] = Field(None, ge=0)
    salary: Optional[float] = Field(None, gt=0)
    job_openings: Optional[int] = Field(None, ge=1)
    requirements: Optional[List[str]] = Field(None, min_length=1)
    job_type: Optional[str] = Field(None, min_length=1)


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(CamelModel):
    # Presence is checked by application_service so the job lookup runs first
    resume: Optional[str] = None
    cover_letter: Optional[str] = None


class ApplicationStatusUpdate(CamelModel):
    status: Optional[str] = None


# ============================================================
# GENERIC RESPONSE
# ============================================================

def success_response(message: str, data: Any = None, total: Optional[int] = None) -> dict:
    """Uniform success envelope: {success, message, data?, total?}."""
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    if total is not None:
        body["total"] = total
    return body
