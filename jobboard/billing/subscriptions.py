"""Subscription lifecycle: plan changes and the signup trial.

Changing plan replaces the embedded subscription wholesale. There is no
proration and no settlement; checkout is simulated by the caller. A downgrade
can leave a company above its new job limit: existing postings stay active and
the entitlement engine blocks new ones.
"""

import logging
from datetime import datetime, timedelta

from jobboard.billing.plans import PlanConfig, get_plan
from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.results import ErrorKind, OperationResult
from jobboard.core.schemas import Company, PlanTier, SubscriptionDetails, SubscriptionStatus

logger = logging.getLogger(__name__)

RENEWAL_PERIOD = timedelta(days=30)


def talent_expiry(plan: PlanConfig, now: datetime) -> datetime | None:
    """Return now + talent_access_days, or None for unlimited plans."""
    if plan.talent_access_days > 0:
        return now + timedelta(days=plan.talent_access_days)
    return None


def build_subscription(tier: PlanTier | str, now: datetime | None = None) -> SubscriptionDetails:
    """A fresh active subscription for ``tier`` starting at ``now``."""
    plan = get_plan(tier)
    now = now or datetime.now()
    return SubscriptionDetails(
        plan_id=plan.tier,
        status=SubscriptionStatus.ACTIVE,
        start_date=now,
        renews_at=now + RENEWAL_PERIOD,
        job_credits=plan.job_limit,
        talent_access_expires_at=talent_expiry(plan, now),
    )


def trial_subscription(now: datetime | None = None) -> SubscriptionDetails:
    """The FREE plan given to a newly registered employer company.

    Same limits as FREE but with no renewal date.
    """
    plan = get_plan(PlanTier.FREE)
    now = now or datetime.now()
    return SubscriptionDetails(
        plan_id=plan.tier,
        status=SubscriptionStatus.ACTIVE,
        start_date=now,
        job_credits=plan.job_limit,
        talent_access_expires_at=talent_expiry(plan, now),
    )


def upgrade_subscription(
    store: RecordStore,
    company_id: str,
    plan_id: PlanTier | str,
    now: datetime | None = None,
) -> OperationResult[Company]:
    """Move a company onto ``plan_id``, resetting credits and the talent window.

    Raises:
        ValueError: If ``plan_id`` is not a known tier.
    """
    subscription = build_subscription(plan_id, now)

    with store.atomic():
        company: Company | None = store.get_by_id(RecordKind.COMPANIES, company_id)
        if company is None:
            logger.warning("Plan change for unknown company '%s' ignored", company_id)
            return OperationResult.failure(ErrorKind.NOT_FOUND, "Company not found")

        previous = company.subscription.plan_id
        updated = company.model_copy(update={"subscription": subscription})
        store.replace(RecordKind.COMPANIES, updated)

    logger.info("Company '%s' moved from %s to %s", company_id, previous, subscription.plan_id)
    return OperationResult.success(updated)
