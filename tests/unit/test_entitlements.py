"""Tests for EntitlementEngine: job-posting quota and talent-pool access."""

from datetime import datetime, timedelta

import pytest

from jobboard.billing.entitlements import COMPANY_NOT_FOUND, TALENT_EXPIRED, EntitlementEngine
from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.schemas import Company, Job, PlanTier, SubscriptionDetails


def _company(
    store: RecordStore,
    now: datetime,
    *,
    credits: int = 1,
    expires_at: datetime | None = None,
    company_id: str = "acme",
) -> Company:
    company = Company(
        id=company_id,
        name="Acme",
        owner_id="owner",
        subscription=SubscriptionDetails(
            plan_id=PlanTier.FREE,
            start_date=now,
            job_credits=credits,
            talent_access_expires_at=expires_at,
        ),
    )
    store.create(RecordKind.COMPANIES, company)
    return company


def _post(store: RecordStore, company_id: str, n: int, active: bool = True) -> None:
    for i in range(n):
        store.create(RecordKind.JOBS, Job(
            title=f"Job {i}", company_id=company_id, company_name="Acme",
            location="Remote", author_id="owner", is_active=active,
        ))


# ---------------------------------------------------------------------------
# can_post_job
# ---------------------------------------------------------------------------


class TestCanPostJob:
    def test_allowed_below_limit(self, store: RecordStore, now: datetime) -> None:
        _company(store, now, credits=3)
        _post(store, "acme", 2)
        assert EntitlementEngine(store).can_post_job("acme").allowed is True

    def test_denied_at_limit(self, store: RecordStore, now: datetime) -> None:
        _company(store, now, credits=1)
        _post(store, "acme", 1)
        decision = EntitlementEngine(store).can_post_job("acme")
        assert decision.allowed is False
        assert decision.reason == "Plan limit reached (1/1). Upgrade for more."

    def test_denied_over_limit_after_downgrade(self, store: RecordStore, now: datetime) -> None:
        _company(store, now, credits=1)
        _post(store, "acme", 3)
        decision = EntitlementEngine(store).can_post_job("acme")
        assert decision.reason == "Plan limit reached (3/1). Upgrade for more."

    def test_inactive_jobs_not_counted(self, store: RecordStore, now: datetime) -> None:
        _company(store, now, credits=1)
        _post(store, "acme", 4, active=False)
        assert EntitlementEngine(store).can_post_job("acme").allowed is True

    def test_other_companies_not_counted(self, store: RecordStore, now: datetime) -> None:
        _company(store, now, credits=1)
        _post(store, "someone-else", 5)
        assert EntitlementEngine(store).can_post_job("acme").allowed is True

    def test_unlimited(self, store: RecordStore, now: datetime) -> None:
        _company(store, now, credits=-1)
        _post(store, "acme", 50)
        assert EntitlementEngine(store).can_post_job("acme").allowed is True

    def test_zero_credits(self, store: RecordStore, now: datetime) -> None:
        _company(store, now, credits=0)
        decision = EntitlementEngine(store).can_post_job("acme")
        assert decision.allowed is False
        assert decision.reason == "Plan limit reached (0/0). Upgrade for more."

    def test_unknown_company(self, store: RecordStore) -> None:
        decision = EntitlementEngine(store).can_post_job("ghost")
        assert decision.allowed is False
        assert decision.reason == COMPANY_NOT_FOUND

    def test_active_job_count(self, store: RecordStore, now: datetime) -> None:
        _company(store, now)
        _post(store, "acme", 2)
        _post(store, "acme", 1, active=False)
        assert EntitlementEngine(store).active_job_count("acme") == 2


# ---------------------------------------------------------------------------
# can_access_talent
# ---------------------------------------------------------------------------


class TestCanAccessTalent:
    def test_no_expiry_is_unlimited(self, store: RecordStore, now: datetime) -> None:
        _company(store, now, expires_at=None)
        assert EntitlementEngine(store).can_access_talent("acme", now=now).allowed is True

    def test_future_expiry(self, store: RecordStore, now: datetime) -> None:
        _company(store, now, expires_at=now + timedelta(days=1))
        assert EntitlementEngine(store).can_access_talent("acme", now=now).allowed is True

    @pytest.mark.parametrize("offset", [timedelta(0), timedelta(seconds=-1), timedelta(days=-30)])
    def test_expired(self, store: RecordStore, now: datetime, offset: timedelta) -> None:
        _company(store, now, expires_at=now + offset)
        decision = EntitlementEngine(store).can_access_talent("acme", now=now)
        assert decision.allowed is False
        assert decision.reason == TALENT_EXPIRED

    def test_unknown_company(self, store: RecordStore, now: datetime) -> None:
        decision = EntitlementEngine(store).can_access_talent("ghost", now=now)
        assert decision.allowed is False
        assert decision.reason == COMPANY_NOT_FOUND

    def test_reads_current_record(self, store: RecordStore, now: datetime) -> None:
        company = _company(store, now, expires_at=now - timedelta(days=1))
        engine = EntitlementEngine(store)
        assert engine.can_access_talent("acme", now=now).allowed is False

        sub = company.subscription.model_copy(update={"talent_access_expires_at": None})
        store.update(RecordKind.COMPANIES, "acme", {"subscription": sub.model_dump()})
        assert engine.can_access_talent("acme", now=now).allowed is True
