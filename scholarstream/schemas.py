"""
Request schemas for the ScholarStream API.

Each model validates one request body or query string before it reaches a
service. Models that back free-form documents (scholarships, application
edits, review edits) allow extra fields, matching what the web client sends.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .domain.roles import Role
from .domain.statuses import ApplicationStatus


def utcnow():
    return datetime.now(timezone.utc)


# ---------- Users ----------
class UserCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    photo: Optional[str] = None
    cover: Optional[str] = None


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    photo: Optional[str] = None
    cover: Optional[str] = None

    def provided_fields(self):
        # empty strings are treated as "not provided"
        return {k: v for k, v in self.model_dump().items() if v}


class RoleUpdate(BaseModel):
    role: Role


# ---------- Scholarships ----------
class ScholarshipCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    scholarshipName: str = Field(..., min_length=1)
    universityName: str = Field(..., min_length=1)
    subjectCategory: str = Field(..., min_length=1)
    scholarshipCategory: str = Field(..., min_length=1)
    degree: str = Field(..., min_length=1)
    applicationFees: float = Field(..., ge=0)
    postDate: datetime = Field(default_factory=utcnow)


class ScholarshipUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    scholarshipName: Optional[str] = Field(None, min_length=1)
    universityName: Optional[str] = Field(None, min_length=1)
    subjectCategory: Optional[str] = None
    scholarshipCategory: Optional[str] = None
    degree: Optional[str] = None
    applicationFees: Optional[float] = Field(None, ge=0)
    postDate: Optional[datetime] = None


class ScholarshipQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    search: Optional[str] = None
    subjectCategory: Optional[str] = None
    scholarshipCategory: Optional[str] = None
    degree: Optional[str] = None
    sortField: Literal["postDate", "applicationFees"] = "postDate"
    sortOrder: Literal["asc", "desc"] = "desc"

    @field_validator("search", "subjectCategory", "scholarshipCategory", "degree", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


# ---------- Applications ----------
class ApplicationCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    scholarshipId: str = Field(..., min_length=1)
    userName: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    previousEducation: Optional[str] = None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


# ---------- Reviews ----------
class ReviewCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    scholarshipId: str = Field(..., min_length=1)
    scholarshipName: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=2000)


class ReviewUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


# ---------- Payments ----------
class CheckoutRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    applicationId: str = Field(..., min_length=1)
    amount: Optional[float] = Field(None, gt=0)
    userEmail: Optional[EmailStr] = None


class CompletionRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sessionId: str = Field(..., min_length=1)
