"""Demo dataset loaded into an empty store.

Dates are relative to ``now`` so plan windows are meaningful whenever the
seed runs. Demo passwords are all "password".
"""

import logging
from datetime import date, datetime, timedelta

from jobboard.billing.subscriptions import trial_subscription
from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.schemas import (
    Application,
    ApplicationStatus,
    CandidatePreferences,
    Company,
    EmployerSubRole,
    Experience,
    Job,
    JobAlert,
    PlanTier,
    SavedJob,
    SubscriptionDetails,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"


def demo_companies(now: datetime) -> list[Company]:
    return [
        Company(
            id="c1",
            name="ScaleUp SaaS",
            description="Leading the way in GTM efficiency for enterprise software.",
            location="San Francisco, CA",
            size="50-200",
            industry="B2B Software",
            tech_stack=["Salesforce", "HubSpot", "Outreach", "Gong"],
            owner_id="2",
            subscription=SubscriptionDetails(
                plan_id=PlanTier.PROFESSIONAL,
                start_date=now - timedelta(days=30),
                renews_at=now + timedelta(days=1),
                job_credits=10,
            ),
        ),
        Company(
            id="c2",
            name="CloudFlow",
            description="Cloud infrastructure automation for the modern web.",
            location="Remote",
            size="200-500",
            industry="DevOps Tools",
            tech_stack=["Salesforce CPQ", "NetSuite", "Marketo"],
            owner_id="99",
            subscription=trial_subscription(now),
        ),
    ]


def demo_users(now: datetime) -> list[User]:
    return [
        User(
            id="1",
            name="Joshua (Admin)",
            email="admin@hirerevops.example",
            password=DEMO_PASSWORD,
            role=UserRole.ADMIN,
        ),
        User(
            id="2",
            name="Sarah Jenkins (Owner)",
            email="sarah@scaleup.com",
            password=DEMO_PASSWORD,
            role=UserRole.EMPLOYER,
            employer_sub_role=EmployerSubRole.OWNER,
            company_id="c1",
        ),
        User(
            id="2b",
            name="Mike Recruiter",
            email="mike@scaleup.com",
            password=DEMO_PASSWORD,
            role=UserRole.EMPLOYER,
            employer_sub_role=EmployerSubRole.RECRUITER,
            company_id="c1",
        ),
        User(
            id="3",
            name="Alex Rivera (Candidate)",
            email="alex@example.com",
            password=DEMO_PASSWORD,
            role=UserRole.CANDIDATE,
            bio=(
                "Certified Salesforce Administrator & GTM Systems Engineer "
                "looking for high-growth opportunities."
            ),
            title="Senior RevOps Analyst",
            skills=["Salesforce", "HubSpot", "SQL", "Apex", "Deal Desk"],
            preferences=CandidatePreferences(is_open_to_work=True),
            experience=[
                Experience(
                    id="exp1",
                    title="RevOps Analyst",
                    company="TechStart Inc.",
                    location="New York, NY",
                    start_date=date(2022, 1, 1),
                    current=True,
                    description="Managed Salesforce automation, implemented CPQ.",
                ),
                Experience(
                    id="exp2",
                    title="Sales Operations Coordinator",
                    company="OldSchool Corp",
                    location="Remote",
                    start_date=date(2020, 5, 1),
                    end_date=date(2021, 12, 31),
                    description="Supported 50+ sales reps with territory planning.",
                ),
            ],
            saved_jobs=[SavedJob(job_id="j3", saved_at=now)],
            alerts=[
                JobAlert(id="al1", query="Salesforce Architect", frequency="weekly"),
                JobAlert(id="al2", query="Remote RevOps", frequency="daily"),
            ],
        ),
        User(
            id="4",
            name="Jordan Lee",
            email="jordan@example.com",
            password=DEMO_PASSWORD,
            role=UserRole.CANDIDATE,
            bio="Marketing Operations Manager specializing in Marketo and attribution models.",
            title="Marketing Ops Manager",
            skills=["Marketo", "Tableau", "Bizible", "Salesforce"],
            preferences=CandidatePreferences(is_open_to_work=True, remote_only=True),
        ),
    ]


def demo_jobs(now: datetime) -> list[Job]:
    # Listed newest first, matching head-insert order.
    return [
        Job(
            id="j1",
            title="Director of Revenue Operations",
            company_id="c1",
            company_name="ScaleUp SaaS",
            location="Remote",
            description="Own the end-to-end revenue process and the GTM tech stack.",
            requirements=["7+ years RevOps experience", "SFDC Architect Cert", "Deal Desk management"],
            salary_range="$160k - $210k",
            posted_at=now - timedelta(days=1),
            author_id="2",
            views=145,
            clicks=42,
        ),
        Job(
            id="j2",
            title="GTM Systems Engineer",
            company_id="c2",
            company_name="CloudFlow",
            location="San Francisco, CA",
            description="Build Apex triggers, CPQ configuration and tool integrations.",
            requirements=["Salesforce CPQ", "Apex/Visualforce", "Python scripting"],
            salary_range="$140k - $170k",
            posted_at=now - timedelta(days=3),
            author_id="99",
            views=89,
            clicks=12,
        ),
        Job(
            id="j3",
            title="Sales Operations Manager",
            company_id="c1",
            company_name="ScaleUp SaaS",
            location="Austin, TX",
            description="Optimize territory planning, compensation analysis and forecasting.",
            requirements=["Excel/SQL wizardry", "Quota planning", "Tableau/Looker"],
            salary_range="$110k - $140k",
            posted_at=now - timedelta(days=5),
            author_id="2",
            views=201,
            clicks=65,
        ),
    ]


def demo_applications(now: datetime) -> list[Application]:
    return [
        Application(
            id="a1",
            user_id="3",
            job_id="j1",
            candidate_name="Alex Rivera",
            candidate_email="alex@example.com",
            job_title="Director of Revenue Operations",
            company_name="ScaleUp SaaS",
            status=ApplicationStatus.INTERVIEW,
            applied_at=now - timedelta(days=3),
            internal_notes="Strong technical background. Scheduled for final round.",
            candidate_notes="First interview went well. They asked about CPQ experience.",
        ),
    ]


def seed_demo_data(store: RecordStore, now: datetime | None = None) -> bool:
    """Load the demo dataset if the store has no users. Returns True if seeded."""
    if store.count(RecordKind.USERS):
        logger.debug("Store already populated - skipping demo seed")
        return False

    now = now or datetime.now()
    with store.atomic():
        for company in demo_companies(now):
            store.create(RecordKind.COMPANIES, company)
        for user in demo_users(now):
            store.create(RecordKind.USERS, user)
        # Head insertion reverses order, so insert oldest first.
        for job in reversed(demo_jobs(now)):
            store.create(RecordKind.JOBS, job)
        for app in demo_applications(now):
            store.create(RecordKind.APPLICATIONS, app)

    logger.info("Seeded demo data")
    return True
