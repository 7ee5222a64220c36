"""Entitlement engine: job-posting quota and talent-pool access gates.

Both checks are recomputed from the current Company and Job records on every
call; nothing is cached. A denial is a normal Decision, not an exception.
"""

import logging
from datetime import datetime

from jobboard.billing.plans import UNLIMITED
from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.results import Decision
from jobboard.core.schemas import Company, Job

logger = logging.getLogger(__name__)

COMPANY_NOT_FOUND = "Company not found"
TALENT_EXPIRED = "Talent Pool access has expired."


def plan_limit_reason(active: int, credits: int) -> str:
    return f"Plan limit reached ({active}/{credits}). Upgrade for more."


class EntitlementEngine:
    """Answers "may this company post a job?" and "may it search talent?".

    Usage::

        engine = EntitlementEngine(store)
        decision = engine.can_post_job(company_id)
        if not decision.allowed:
            print(decision.reason)
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def _company(self, company_id: str) -> Company | None:
        return self._store.get_by_id(RecordKind.COMPANIES, company_id)

    def active_job_count(self, company_id: str) -> int:
        jobs: list[Job] = self._store.list_by(RecordKind.JOBS, "company_id", company_id)
        return sum(1 for j in jobs if j.is_active)

    def can_post_job(self, company_id: str) -> Decision:
        """Allowed while active postings are below the plan's job credits."""
        company = self._company(company_id)
        if company is None:
            return Decision.deny(COMPANY_NOT_FOUND)

        credits = company.subscription.job_credits
        if credits == UNLIMITED:
            return Decision.allow()

        active = self.active_job_count(company_id)
        if active < credits:
            return Decision.allow()

        logger.info(
            "Job posting blocked for '%s': %d/%d active jobs",
            company_id, active, credits,
        )
        return Decision.deny(plan_limit_reason(active, credits))

    def can_access_talent(self, company_id: str, now: datetime | None = None) -> Decision:
        """Allowed when no expiry is set, or the expiry is strictly in the future."""
        company = self._company(company_id)
        if company is None:
            return Decision.deny(COMPANY_NOT_FOUND)

        expires_at = company.subscription.talent_access_expires_at
        if expires_at is None:
            return Decision.allow()

        if expires_at > (now or datetime.now()):
            return Decision.allow()

        logger.info("Talent pool access expired for '%s' at %s", company_id, expires_at.isoformat())
        return Decision.deny(TALENT_EXPIRED)
