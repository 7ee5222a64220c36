"""Core record models for the job board: users, companies, jobs, applications."""

import uuid
from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(StrEnum):
    ADMIN = "ADMIN"
    EMPLOYER = "EMPLOYER"
    CANDIDATE = "CANDIDATE"


class EmployerSubRole(StrEnum):
    OWNER = "OWNER"
    RECRUITER = "RECRUITER"
    HIRING_MANAGER = "HIRING_MANAGER"


class PlanTier(StrEnum):
    FREE = "FREE"
    LITE = "LITE"
    PROFESSIONAL = "PROFESSIONAL"
    ENTERPRISE = "ENTERPRISE"


class SubscriptionStatus(StrEnum):
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"


class JobType(StrEnum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    REMOTE = "Remote"


class ApplicationStatus(StrEnum):
    APPLIED = "APPLIED"
    REVIEWING = "REVIEWING"
    INTERVIEW = "INTERVIEW"
    OFFER = "OFFER"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


def new_id(prefix: str = "") -> str:
    """Return a short random record id, optionally prefixed (e.g. 'co_')."""
    return f"{prefix}{uuid.uuid4().hex[:12]}"


# ---------------------------------------------------------------------------
# Candidate profile parts
# ---------------------------------------------------------------------------


class Experience(BaseModel):
    id: str = Field(default_factory=lambda: new_id("exp_"))
    title: str
    company: str
    location: str = ""
    start_date: date
    end_date: date | None = None
    current: bool = False
    description: str = ""


class JobAlert(BaseModel):
    id: str = Field(default_factory=lambda: new_id("al_"))
    query: str
    frequency: str = Field(default="weekly", pattern="^(daily|weekly|instant)$")
    active: bool = True


class SavedJob(BaseModel):
    job_id: str
    saved_at: datetime = Field(default_factory=datetime.now)


class CandidatePreferences(BaseModel):
    is_open_to_work: bool = False
    remote_only: bool = False
    hide_profile_from_employers: bool = False


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class User(BaseModel):
    """A platform account.

    Employer-only fields (company_id, employer_sub_role) and candidate-only
    fields (bio through preferences) are left at their defaults for other roles.
    """

    id: str = Field(default_factory=lambda: new_id("user_"))
    name: str
    email: str
    password: str | None = None
    provider: str = "email"
    role: UserRole
    is_active: bool = True

    company_id: str | None = None
    employer_sub_role: EmployerSubRole | None = None

    bio: str = ""
    title: str = ""
    skills: list[str] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    saved_jobs: list[SavedJob] = Field(default_factory=list)
    alerts: list[JobAlert] = Field(default_factory=list)
    preferences: CandidatePreferences = Field(default_factory=CandidatePreferences)

    def has_saved(self, job_id: str) -> bool:
        return any(s.job_id == job_id for s in self.saved_jobs)


class SubscriptionDetails(BaseModel):
    """The single active subscription embedded in a Company.

    job_credits of -1 means unlimited postings. A missing
    talent_access_expires_at means unlimited talent-pool access.
    """

    plan_id: PlanTier
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    start_date: datetime
    renews_at: datetime | None = None
    job_credits: int = Field(ge=-1)
    talent_access_expires_at: datetime | None = None


class Company(BaseModel):
    id: str = Field(default_factory=lambda: new_id("co_"))
    name: str
    description: str = ""
    owner_id: str
    website: str | None = None
    location: str | None = None
    size: str | None = None
    industry: str | None = None
    tech_stack: list[str] = Field(default_factory=list)
    subscription: SubscriptionDetails


class Job(BaseModel):
    """A job posting.

    company_name is copied from the Company when the job is posted and is not
    kept in sync afterwards.
    """

    id: str = Field(default_factory=lambda: new_id("job_"))
    title: str
    company_id: str
    company_name: str
    location: str
    type: JobType = JobType.FULL_TIME
    description: str = ""
    requirements: list[str] = Field(default_factory=list)
    salary_range: str = ""
    posted_at: datetime = Field(default_factory=datetime.now)
    is_active: bool = True
    author_id: str
    views: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    applicants_count: int = Field(default=0, ge=0)
    direct_apply_url: str | None = None


class JobDraft(BaseModel):
    """Employer-supplied fields for a new posting; the rest is filled on post."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    location: str = Field(min_length=1)
    type: JobType = JobType.FULL_TIME
    description: str = ""
    requirements: list[str] = Field(default_factory=list)
    salary_range: str = ""
    is_active: bool = True
    direct_apply_url: str | None = None


class Application(BaseModel):
    """A candidate's application to a job.

    candidate_name, candidate_email, job_title and company_name are snapshots
    taken at apply time so the record stays readable after the job or user
    is deleted.
    """

    id: str = Field(default_factory=lambda: new_id("app_"))
    job_id: str
    user_id: str
    status: ApplicationStatus = ApplicationStatus.APPLIED
    applied_at: datetime = Field(default_factory=datetime.now)

    internal_notes: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)

    candidate_notes: str | None = None

    candidate_name: str | None = None
    candidate_email: str | None = None
    job_title: str | None = None
    company_name: str | None = None
