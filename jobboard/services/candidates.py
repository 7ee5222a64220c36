"""Candidate profile features: saved jobs, alerts, experience, talent search."""

import logging
from datetime import datetime
from typing import Any

from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.results import OperationResult
from jobboard.core.schemas import CandidatePreferences, Experience, JobAlert, SavedJob, User, UserRole
from jobboard.services.access import check_actor, login_required, not_found

logger = logging.getLogger(__name__)

# Profile fields a user may edit on themselves.
PROFILE_FIELDS = frozenset({"name", "bio", "title", "skills", "preferences"})


def _live_user(store: RecordStore, actor: User | None) -> User | OperationResult:
    """Re-read the actor so edits apply to the stored record, not a stale copy."""
    if actor is None:
        return login_required()
    if (denied := check_actor(actor)) is not None:
        return denied
    user: User | None = store.get_by_id(RecordKind.USERS, actor.id)
    if user is None:
        return not_found("User")
    return user


def _save(store: RecordStore, user: User, **changes: Any) -> OperationResult[User]:
    updated = user.model_copy(update=changes)
    store.replace(RecordKind.USERS, updated)
    return OperationResult.success(updated)


def toggle_saved_job(
    store: RecordStore,
    actor: User | None,
    job_id: str,
    now: datetime | None = None,
) -> OperationResult[User]:
    """Remove ``job_id`` from saved jobs if present, otherwise append it."""
    user = _live_user(store, actor)
    if isinstance(user, OperationResult):
        return user

    if user.has_saved(job_id):
        saved = [s for s in user.saved_jobs if s.job_id != job_id]
        logger.debug("User '%s' unsaved job '%s'", user.id, job_id)
    else:
        saved = [*user.saved_jobs, SavedJob(job_id=job_id, saved_at=now or datetime.now())]
        logger.debug("User '%s' saved job '%s'", user.id, job_id)
    return _save(store, user, saved_jobs=saved)


def add_job_alert(store: RecordStore, actor: User | None, alert: JobAlert) -> OperationResult[User]:
    user = _live_user(store, actor)
    if isinstance(user, OperationResult):
        return user
    return _save(store, user, alerts=[*user.alerts, alert])


def remove_job_alert(store: RecordStore, actor: User | None, alert_id: str) -> OperationResult[User]:
    user = _live_user(store, actor)
    if isinstance(user, OperationResult):
        return user
    return _save(store, user, alerts=[a for a in user.alerts if a.id != alert_id])


def add_experience(store: RecordStore, actor: User | None, exp: Experience) -> OperationResult[User]:
    """Append an experience entry; the list stays ordered newest start date first."""
    user = _live_user(store, actor)
    if isinstance(user, OperationResult):
        return user
    experience = sorted([*user.experience, exp], key=lambda e: e.start_date, reverse=True)
    return _save(store, user, experience=experience)


def remove_experience(store: RecordStore, actor: User | None, exp_id: str) -> OperationResult[User]:
    user = _live_user(store, actor)
    if isinstance(user, OperationResult):
        return user
    return _save(store, user, experience=[e for e in user.experience if e.id != exp_id])


def update_profile(store: RecordStore, actor: User | None, patch: dict[str, Any]) -> OperationResult[User]:
    """Edit the actor's own name, bio, title, skills or preferences.

    Raises:
        ValueError: If ``patch`` names any other field.
    """
    unknown = set(patch) - PROFILE_FIELDS
    if unknown:
        msg = f"Cannot edit profile fields: {sorted(unknown)}"
        raise ValueError(msg)
    user = _live_user(store, actor)
    if isinstance(user, OperationResult):
        return user
    return OperationResult.success(store.update(RecordKind.USERS, user.id, patch))


def update_preferences(
    store: RecordStore,
    actor: User | None,
    preferences: CandidatePreferences,
) -> OperationResult[User]:
    """Replace the actor's job-seeking and visibility preferences."""
    return update_profile(store, actor, {"preferences": preferences})


def search_candidates(store: RecordStore, query: str = "") -> list[User]:
    """Open-to-work candidates whose name, title or any skill contains ``query``.

    Case-insensitive. An empty query returns every open-to-work candidate.
    """
    candidates = [
        u for u in store.list_by(RecordKind.USERS, "role", UserRole.CANDIDATE)
        if u.preferences.is_open_to_work
    ]
    q = query.lower().strip()
    if not q:
        return candidates
    return [
        u for u in candidates
        if q in u.name.lower()
        or q in u.title.lower()
        or any(q in s.lower() for s in u.skills)
    ]
