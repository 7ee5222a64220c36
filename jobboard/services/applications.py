"""Candidate applications and the employer-side applicant list.

Status changes are free-form: any status can follow any other, including
REJECTED back to APPLIED. Employer-side writes (status, internal notes,
rating) are limited to admins and employers of the company that owns the job.
Withdrawal is limited to the applicant.
"""

import logging
from datetime import datetime

from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.results import ErrorKind, OperationResult
from jobboard.core.schemas import Application, ApplicationStatus, Job, User, UserRole, new_id
from jobboard.services.access import check_actor, login_required, not_found
from jobboard.services.jobs import can_manage_job

logger = logging.getLogger(__name__)

CANDIDATES_ONLY = "Only candidates can apply to jobs."
ALREADY_APPLIED = "You have already applied for this position."
EMPLOYERS_ONLY = "Only employers can manage applicants."
NOT_YOUR_APPLICANT = "You can only manage applicants to your own company's jobs."


def find_application(store: RecordStore, user_id: str, job_id: str) -> Application | None:
    """Any application by ``user_id`` to ``job_id``, whatever its status."""
    for app in store.list_by(RecordKind.APPLICATIONS, "user_id", user_id):
        if app.job_id == job_id:
            return app  # type: ignore[no-any-return]
    return None


def apply_to_job(
    store: RecordStore,
    actor: User | None,
    job_id: str,
    now: datetime | None = None,
) -> OperationResult[Application]:
    """Submit an application, snapshotting candidate and job details.

    A previous application to the same job blocks a new one even when it was
    withdrawn.
    """
    if actor is None:
        return login_required()
    if (denied := check_actor(actor, UserRole.CANDIDATE, message=CANDIDATES_ONLY)) is not None:
        return denied

    with store.atomic():
        if find_application(store, actor.id, job_id) is not None:
            logger.info("Duplicate application by '%s' to '%s' refused", actor.id, job_id)
            return OperationResult.failure(ErrorKind.DUPLICATE_APPLICATION, ALREADY_APPLIED)

        job: Job | None = store.get_by_id(RecordKind.JOBS, job_id)
        if job is None:
            return not_found("Job")

        app = Application(
            id=new_id("app_"),
            job_id=job_id,
            user_id=actor.id,
            status=ApplicationStatus.APPLIED,
            applied_at=now or datetime.now(),
            candidate_name=actor.name,
            candidate_email=actor.email,
            job_title=job.title,
            company_name=job.company_name,
        )
        store.create(RecordKind.APPLICATIONS, app)

    logger.info("Application '%s': user '%s' -> job '%s'", app.id, actor.id, job_id)
    return OperationResult.success(app)


def get_candidate_applications(store: RecordStore, user_id: str) -> list[Application]:
    return store.list_by(RecordKind.APPLICATIONS, "user_id", user_id)


def get_employer_applications(store: RecordStore, employer_user_id: str) -> list[Application]:
    """Applications to any job of the employer's company.

    Empty when the user is unknown or has no company.
    """
    user: User | None = store.get_by_id(RecordKind.USERS, employer_user_id)
    if user is None or not user.company_id:
        return []

    job_ids = {j.id for j in store.list_by(RecordKind.JOBS, "company_id", user.company_id)}
    if not job_ids:
        return []
    return [a for a in store.list_all(RecordKind.APPLICATIONS) if a.job_id in job_ids]


def _write_status(store: RecordStore, app_id: str, status: ApplicationStatus) -> OperationResult[Application]:
    updated = store.update(RecordKind.APPLICATIONS, app_id, {"status": status})
    if updated is None:
        return not_found("Application")
    logger.info("Application '%s' status -> %s", app_id, status)
    return OperationResult.success(updated)


def _managed_application(store: RecordStore, actor: User | None, app_id: str) -> Application | OperationResult:
    """The application if ``actor`` may act on it as the hiring side, otherwise the failure."""
    if actor is None:
        return login_required()
    if (denied := check_actor(actor, UserRole.EMPLOYER, UserRole.ADMIN, message=EMPLOYERS_ONLY)) is not None:
        return denied
    app: Application | None = store.get_by_id(RecordKind.APPLICATIONS, app_id)
    if app is None:
        return not_found("Application")
    if actor.role == UserRole.ADMIN:
        return app

    # A deleted job leaves no company to match against.
    job: Job | None = store.get_by_id(RecordKind.JOBS, app.job_id)
    if job is None or not can_manage_job(actor, job):
        logger.info("User '%s' refused access to application '%s'", actor.id, app_id)
        return OperationResult.failure(ErrorKind.ROLE_VIOLATION, NOT_YOUR_APPLICANT)
    return app


def set_application_status(
    store: RecordStore,
    actor: User | None,
    app_id: str,
    status: ApplicationStatus | str,
) -> OperationResult[Application]:
    """Set any status on an application. No transition rules are applied.

    Raises:
        ValueError: If ``status`` is not an ApplicationStatus value.
    """
    status = ApplicationStatus(status)
    found = _managed_application(store, actor, app_id)
    if isinstance(found, OperationResult):
        return found
    return _write_status(store, app_id, status)


def _own_application(store: RecordStore, actor: User | None, app_id: str) -> Application | OperationResult:
    if actor is None:
        return login_required()
    if (denied := check_actor(actor)) is not None:
        return denied
    app: Application | None = store.get_by_id(RecordKind.APPLICATIONS, app_id)
    if app is None:
        return not_found("Application")
    if app.user_id != actor.id:
        return OperationResult.failure(
            ErrorKind.ROLE_VIOLATION, "You can only change your own applications.",
        )
    return app


def withdraw_application(store: RecordStore, actor: User | None, app_id: str) -> OperationResult[Application]:
    """Applicant-only shortcut for setting WITHDRAWN."""
    found = _own_application(store, actor, app_id)
    if isinstance(found, OperationResult):
        return found
    return _write_status(store, app_id, ApplicationStatus.WITHDRAWN)


def update_candidate_notes(
    store: RecordStore,
    actor: User | None,
    app_id: str,
    notes: str,
) -> OperationResult[Application]:
    """Private notes visible only to the applicant."""
    found = _own_application(store, actor, app_id)
    if isinstance(found, OperationResult):
        return found
    return OperationResult.success(
        store.update(RecordKind.APPLICATIONS, app_id, {"candidate_notes": notes}),
    )


def update_employer_notes(
    store: RecordStore,
    actor: User | None,
    app_id: str,
    internal_notes: str | None = None,
    rating: int | None = None,
) -> OperationResult[Application]:
    """Employer-private notes and 1-5 rating. Arguments left as None are unchanged.

    Raises:
        pydantic.ValidationError: If ``rating`` is outside 1-5.
    """
    found = _managed_application(store, actor, app_id)
    if isinstance(found, OperationResult):
        return found

    patch: dict[str, object] = {}
    if internal_notes is not None:
        patch["internal_notes"] = internal_notes
    if rating is not None:
        patch["rating"] = rating
    if not patch:
        return OperationResult.success(found)

    return OperationResult.success(store.update(RecordKind.APPLICATIONS, app_id, patch))
