"""Fixed plan table: price, job-posting limit and talent-pool window per tier."""

from pydantic import BaseModel, ConfigDict, Field

from jobboard.core.schemas import PlanTier

UNLIMITED = -1


class PlanConfig(BaseModel):
    """Limits for one plan tier. -1 means unlimited."""

    model_config = ConfigDict(frozen=True)

    tier: PlanTier
    name: str
    price: int = Field(ge=0)
    job_limit: int = Field(ge=UNLIMITED)
    talent_access_days: int = Field(ge=UNLIMITED)
    features: tuple[str, ...] = ()

    @property
    def unlimited_jobs(self) -> bool:
        return self.job_limit == UNLIMITED

    @property
    def unlimited_talent(self) -> bool:
        return self.talent_access_days == UNLIMITED


PLANS: dict[PlanTier, PlanConfig] = {
    PlanTier.FREE: PlanConfig(
        tier=PlanTier.FREE,
        name="Free Starter",
        price=0,
        job_limit=1,
        talent_access_days=7,
        features=("1 Active Job Listing", "7-Day Talent Pool Access", "Basic Company Profile"),
    ),
    PlanTier.LITE: PlanConfig(
        tier=PlanTier.LITE,
        name="Lite",
        price=199,
        job_limit=3,
        talent_access_days=30,
        features=("3 Active Job Listings", "30-Day Talent Pool Access", "Standard Support"),
    ),
    PlanTier.PROFESSIONAL: PlanConfig(
        tier=PlanTier.PROFESSIONAL,
        name="Professional",
        price=499,
        job_limit=10,
        talent_access_days=UNLIMITED,
        features=(
            "10 Active Job Listings",
            "Unlimited Talent Pool Access",
            "Priority Support",
            "Featured Listings",
        ),
    ),
    PlanTier.ENTERPRISE: PlanConfig(
        tier=PlanTier.ENTERPRISE,
        name="Enterprise",
        price=999,
        job_limit=UNLIMITED,
        talent_access_days=UNLIMITED,
        features=(
            "Unlimited Job Listings",
            "Unlimited Talent Pool",
            "Dedicated Account Manager",
            "API Access",
            "SSO",
        ),
    ),
}


def get_plan(tier: PlanTier | str) -> PlanConfig:
    """Look up a plan by tier.

    Raises:
        ValueError: If the tier name is unknown.
    """
    try:
        return PLANS[PlanTier(tier)]
    except ValueError:
        valid = ", ".join(t.value for t in PlanTier)
        msg = f"Unknown plan '{tier}'. Available: {valid}"
        raise ValueError(msg) from None
