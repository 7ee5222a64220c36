"""Job postings: post under the plan gate, edit, hide, delete, browse."""

import logging
from datetime import datetime
from typing import Any

from jobboard.billing.entitlements import EntitlementEngine
from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.results import ErrorKind, OperationResult
from jobboard.core.schemas import Application, Company, Job, JobDraft, JobType, User, UserRole, new_id
from jobboard.services.access import check_actor, login_required, not_found

logger = logging.getLogger(__name__)

ALL_TYPES = "All"

# Fields an owner or admin may change after posting.
EDITABLE_FIELDS = frozenset({
    "title",
    "location",
    "type",
    "description",
    "requirements",
    "salary_range",
    "is_active",
    "direct_apply_url",
})


def can_manage_job(actor: User, job: Job) -> bool:
    """Admins manage every job; employers manage their own company's jobs."""
    if actor.role == UserRole.ADMIN:
        return True
    return actor.role == UserRole.EMPLOYER and actor.company_id == job.company_id


def post_job(
    store: RecordStore,
    actor: User | None,
    draft: JobDraft,
    company_id: str | None = None,
    now: datetime | None = None,
) -> OperationResult[Job]:
    """Create a posting for the actor's company.

    Employers post for their own company and are re-checked against the plan
    limit inside the same transaction as the insert. Admins must name the
    company and are not limited.
    """
    if actor is None:
        return login_required()
    if (denied := check_actor(actor, UserRole.EMPLOYER, UserRole.ADMIN,
                              message="Only employers can post jobs.")) is not None:
        return denied

    if actor.role == UserRole.EMPLOYER:
        if not actor.company_id:
            return OperationResult.failure(
                ErrorKind.ROLE_VIOLATION, "Employer account is not linked to a company.",
            )
        company_id = actor.company_id
    elif not company_id:
        return not_found("Company")

    with store.atomic():
        company: Company | None = store.get_by_id(RecordKind.COMPANIES, company_id)
        if company is None:
            return not_found("Company")

        if actor.role == UserRole.EMPLOYER:
            decision = EntitlementEngine(store).can_post_job(company.id)
            if not decision.allowed:
                return OperationResult.failure(
                    ErrorKind.ENTITLEMENT_DENIED, decision.reason or "Plan limit reached.",
                )

        job = Job(
            id=new_id("job_"),
            company_id=company.id,
            company_name=company.name,
            author_id=actor.id,
            posted_at=now or datetime.now(),
            views=0,
            clicks=0,
            **draft.model_dump(),
        )
        store.create(RecordKind.JOBS, job)

    logger.info("Job '%s' posted for company '%s' by '%s'", job.id, company.id, actor.id)
    return OperationResult.success(job)


def _managed_job(store: RecordStore, actor: User | None, job_id: str) -> Job | OperationResult:
    """The job if ``actor`` may manage it, otherwise the failure to return."""
    if actor is None:
        return login_required()
    if (denied := check_actor(actor, UserRole.EMPLOYER, UserRole.ADMIN)) is not None:
        return denied
    job: Job | None = store.get_by_id(RecordKind.JOBS, job_id)
    if job is None:
        return not_found("Job")
    if not can_manage_job(actor, job):
        return OperationResult.failure(
            ErrorKind.ROLE_VIOLATION, "You can only manage your own company's jobs.",
        )
    return job


def update_job(
    store: RecordStore,
    actor: User | None,
    job_id: str,
    patch: dict[str, Any],
) -> OperationResult[Job]:
    """Edit posting fields.

    Raises:
        ValueError: If ``patch`` names a field outside EDITABLE_FIELDS.
    """
    unknown = set(patch) - EDITABLE_FIELDS
    if unknown:
        msg = f"Cannot edit job fields: {sorted(unknown)}"
        raise ValueError(msg)

    found = _managed_job(store, actor, job_id)
    if isinstance(found, OperationResult):
        return found
    updated = store.update(RecordKind.JOBS, job_id, patch)
    logger.info("Job '%s' updated: %s", job_id, sorted(patch))
    return OperationResult.success(updated)


def set_job_active(store: RecordStore, actor: User | None, job_id: str, active: bool) -> OperationResult[Job]:
    """Publish or hide a posting. Hidden postings stop counting against the plan."""
    return update_job(store, actor, job_id, {"is_active": active})


def toggle_job_active(store: RecordStore, actor: User | None, job_id: str) -> OperationResult[Job]:
    found = _managed_job(store, actor, job_id)
    if isinstance(found, OperationResult):
        return found
    return set_job_active(store, actor, job_id, not found.is_active)


def delete_job(store: RecordStore, actor: User | None, job_id: str) -> OperationResult[None]:
    """Remove a posting. Applications to it are kept with their snapshots."""
    found = _managed_job(store, actor, job_id)
    if isinstance(found, OperationResult):
        return found
    store.delete(RecordKind.JOBS, job_id)
    logger.info("Job '%s' deleted from company '%s'", job_id, found.company_id)
    return OperationResult.success()


def get_job(store: RecordStore, job_id: str) -> Job | None:
    return store.get_by_id(RecordKind.JOBS, job_id)


def get_company_jobs(store: RecordStore, company_id: str) -> list[Job]:
    return store.list_by(RecordKind.JOBS, "company_id", company_id)


def search_jobs(
    store: RecordStore,
    query: str = "",
    location: str = "",
    job_type: JobType | str = ALL_TYPES,
) -> list[Job]:
    """Active postings matching the job-board filters.

    ``query`` matches title or company name, ``location`` is a substring
    match, both case-insensitive. ``job_type`` is exact unless "All".
    """
    q = query.lower().strip()
    loc = location.lower().strip()
    result: list[Job] = []
    for job in store.list_all(RecordKind.JOBS):
        if not job.is_active:
            continue
        if q and q not in job.title.lower() and q not in job.company_name.lower():
            continue
        if loc and loc not in job.location.lower():
            continue
        if job_type != ALL_TYPES and job.type != job_type:
            continue
        result.append(job)
    return result


def count_applicants(store: RecordStore, job_id: str) -> int:
    """Applications referencing the job, counted on demand."""
    apps: list[Application] = store.list_by(RecordKind.APPLICATIONS, "job_id", job_id)
    return len(apps)


def with_applicant_counts(store: RecordStore, jobs: list[Job]) -> list[Job]:
    """Copies of ``jobs`` with applicants_count filled from current applications."""
    counts: dict[str, int] = {}
    for app in store.list_all(RecordKind.APPLICATIONS):
        counts[app.job_id] = counts.get(app.job_id, 0) + 1
    return [j.model_copy(update={"applicants_count": counts.get(j.id, 0)}) for j in jobs]


def _bump(store: RecordStore, job_id: str, counter: str) -> int | None:
    with store.atomic():
        job: Job | None = store.get_by_id(RecordKind.JOBS, job_id)
        if job is None:
            return None
        value = getattr(job, counter) + 1
        store.update(RecordKind.JOBS, job_id, {counter: value})
    return value


def record_view(store: RecordStore, job_id: str) -> int | None:
    """Increment the view counter. Returns the new count, or None for unknown jobs."""
    return _bump(store, job_id, "views")


def record_click(store: RecordStore, job_id: str) -> int | None:
    return _bump(store, job_id, "clicks")
