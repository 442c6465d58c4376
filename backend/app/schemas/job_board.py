from __future__ import annotations

import enum
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.schemas.base import APIModel, Pagination


class JobType(str, enum.Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    FREELANCE = "FREELANCE"
    INTERNSHIP = "INTERNSHIP"
    TEMPORARY = "TEMPORARY"


class ExperienceLevel(str, enum.Enum):
    ENTRY = "ENTRY"
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"
    LEAD = "LEAD"
    EXECUTIVE = "EXECUTIVE"


class RemoteWorkType(str, enum.Enum):
    ON_SITE = "ON_SITE"
    REMOTE = "REMOTE"
    HYBRID = "HYBRID"


class JobStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"
    FILLED = "FILLED"


def _check_salary_range(lo: Optional[int], hi: Optional[int]) -> None:
    if lo is not None and hi is not None and lo > hi:
        raise ValueError("salaryMin cannot exceed salaryMax")


def _not_blank(v: Optional[str], label: str) -> Optional[str]:
    if v is None:
        return None
    v = " ".join(v.split())
    if not v:
        raise ValueError(f"{label} cannot be blank")
    return v


# -----------------------------
# Companies
# -----------------------------
class CompanyCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    website: Optional[str] = Field(None, max_length=1000)
    logo: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=200)
    industry: Optional[str] = Field(None, max_length=200)
    size: Optional[str] = Field(None, max_length=50)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "name")


class CompanyUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    website: Optional[str] = Field(None, max_length=1000)
    logo: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=200)
    industry: Optional[str] = Field(None, max_length=200)
    size: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "name")


class CompanyOut(APIModel):
    id: UUID
    site_id: UUID
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    is_active: bool
    job_listing_count: int = 0
    created_at: datetime
    updated_at: datetime


class CompanyRef(APIModel):
    id: UUID
    name: str
    logo: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None


# -----------------------------
# Job listings
# -----------------------------
class JobListingCreate(APIModel):
    company_id: UUID
    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1)
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    job_type: JobType
    experience_level: Optional[ExperienceLevel] = None
    remote_work_type: Optional[RemoteWorkType] = None
    status: JobStatus = JobStatus.ACTIVE
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    salary_currency: str = Field("USD", min_length=3, max_length=3)
    location: Optional[str] = Field(None, max_length=200)
    application_url: Optional[str] = Field(None, max_length=1000)
    image: Optional[str] = Field(None, max_length=1000)
    expires_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "title")

    @model_validator(mode="after")
    def _salary(self) -> "JobListingCreate":
        _check_salary_range(self.salary_min, self.salary_max)
        return self


class JobListingUpdate(APIModel):
    company_id: Optional[UUID] = None
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    job_type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    remote_work_type: Optional[RemoteWorkType] = None
    status: Optional[JobStatus] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    salary_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    location: Optional[str] = Field(None, max_length=200)
    application_url: Optional[str] = Field(None, max_length=1000)
    image: Optional[str] = Field(None, max_length=1000)
    expires_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "title")

    @model_validator(mode="after")
    def _salary(self) -> "JobListingUpdate":
        _check_salary_range(self.salary_min, self.salary_max)
        return self


class JobListingOut(APIModel):
    id: UUID
    site_id: UUID
    company_id: UUID
    title: str
    description: str
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    job_type: str
    experience_level: Optional[str] = None
    remote_work_type: Optional[str] = None
    status: str
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    salary_currency: str
    location: Optional[str] = None
    application_url: Optional[str] = None
    image: Optional[str] = None
    expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    company: Optional[CompanyRef] = None


class JobListingList(APIModel):
    job_listings: List[JobListingOut]
    pagination: Pagination


class JobBoardFilters(APIModel):
    job_types: List[str] = []
    experience_levels: List[str] = []
    remote_work_types: List[str] = []
    locations: List[str] = []
    companies: List[CompanyRef] = []


class PublicJobBoardOut(APIModel):
    job_listings: List[JobListingOut]
    pagination: Pagination
    filters: JobBoardFilters
