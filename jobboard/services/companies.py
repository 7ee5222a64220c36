"""Company profile, team membership and the gated talent pool."""

import logging
from datetime import datetime
from typing import Any

from jobboard.billing.entitlements import EntitlementEngine
from jobboard.billing.subscriptions import upgrade_subscription
from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.results import ErrorKind, OperationResult
from jobboard.core.schemas import Company, PlanTier, User, UserRole
from jobboard.services.access import check_actor, login_required, not_found
from jobboard.services.candidates import search_candidates

logger = logging.getLogger(__name__)

COMPANY_PROFILE_FIELDS = frozenset({
    "name", "description", "website", "location", "size", "industry", "tech_stack",
})


def get_company(store: RecordStore, company_id: str) -> Company | None:
    return store.get_by_id(RecordKind.COMPANIES, company_id)


def get_team_members(store: RecordStore, company_id: str) -> list[User]:
    """Employer accounts attached to the company."""
    return [
        u for u in store.list_by(RecordKind.USERS, "company_id", company_id)
        if u.role == UserRole.EMPLOYER
    ]


def _employer_company(actor: User | None) -> str | OperationResult:
    """The actor's company id, or the failure to return."""
    if actor is None:
        return login_required()
    if (denied := check_actor(actor, UserRole.EMPLOYER,
                              message="Only employers can do this.")) is not None:
        return denied
    if not actor.company_id:
        return OperationResult.failure(
            ErrorKind.ROLE_VIOLATION, "Employer account is not linked to a company.",
        )
    return actor.company_id


def update_company_profile(
    store: RecordStore,
    actor: User | None,
    patch: dict[str, Any],
) -> OperationResult[Company]:
    """Edit the actor's company profile. Existing job postings keep their old company name.

    Raises:
        ValueError: If ``patch`` touches the subscription, owner or id.
    """
    unknown = set(patch) - COMPANY_PROFILE_FIELDS
    if unknown:
        msg = f"Cannot edit company fields: {sorted(unknown)}"
        raise ValueError(msg)

    company_id = _employer_company(actor)
    if isinstance(company_id, OperationResult):
        return company_id

    updated = store.update(RecordKind.COMPANIES, company_id, patch)
    if updated is None:
        return not_found("Company")
    logger.info("Company '%s' profile updated: %s", company_id, sorted(patch))
    return OperationResult.success(updated)


def search_talent_pool(
    store: RecordStore,
    actor: User | None,
    query: str = "",
    now: datetime | None = None,
) -> OperationResult[list[User]]:
    """Candidate search for employers whose plan still grants talent access."""
    company_id = _employer_company(actor)
    if isinstance(company_id, OperationResult):
        return company_id

    decision = EntitlementEngine(store).can_access_talent(company_id, now=now)
    if not decision.allowed:
        return OperationResult.failure(
            ErrorKind.ENTITLEMENT_DENIED, decision.reason or "Talent Pool access denied.",
        )
    return OperationResult.success(search_candidates(store, query))


def subscribe(
    store: RecordStore,
    actor: User | None,
    plan_id: PlanTier | str,
    now: datetime | None = None,
) -> OperationResult[Company]:
    """Employer checkout: move the actor's own company onto ``plan_id``.

    Payment is not settled here; the caller runs any simulated checkout first.
    """
    company_id = _employer_company(actor)
    if isinstance(company_id, OperationResult):
        return company_id
    return upgrade_subscription(store, company_id, plan_id, now=now)
