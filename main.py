"""CLI front end for the job board engine."""

import argparse
import logging
import sys
from collections.abc import Callable
from typing import TypeVar

from jobboard.ai.description import DescriptionGenerator, generate_job_description
from jobboard.billing.entitlements import EntitlementEngine
from jobboard.billing.plans import PLANS
from jobboard.core.config import Settings
from jobboard.core.db import RecordStore, open_store
from jobboard.core.results import OperationResult
from jobboard.core.schemas import ApplicationStatus, JobDraft, JobType, User, UserRole
from jobboard.core.seed import seed_demo_data
from jobboard.core.session import SessionHolder
from jobboard.services import admin, applications, auth, candidates, companies, jobs

T = TypeVar("T")


class CommandError(Exception):
    """A command could not complete; the message is shown to the user."""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    parser = argparse.ArgumentParser(
        description="Job board engine - postings, applications and plan entitlements",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", parents=[common], help="Create the store and load demo data")
    sub.add_parser("plans", parents=[common], help="Show the plan table")

    p = sub.add_parser("login", parents=[common], help="Sign in")
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)

    sub.add_parser("logout", parents=[common], help="Sign out")
    sub.add_parser("whoami", parents=[common], help="Show the signed-in user")

    p = sub.add_parser("signup-candidate", parents=[common], help="Register a candidate")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.add_argument("--bio", default="")

    p = sub.add_parser("signup-employer", parents=[common], help="Register a company and its owner")
    p.add_argument("--name", required=True)
    p.add_argument("--company", required=True, help="Company name")
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)

    p = sub.add_parser("can-post", parents=[common], help="Check the job-posting entitlement")
    p.add_argument("--company", help="Company id (default: your company)")

    p = sub.add_parser("talent-access", parents=[common], help="Check the talent-pool entitlement")
    p.add_argument("--company", help="Company id (default: your company)")

    p = sub.add_parser("upgrade", parents=[common], help="Change subscription plan")
    p.add_argument("--plan", required=True, choices=[t.value for t in PLANS])
    p.add_argument("--company", help="Company id (admins only)")

    p = sub.add_parser("post-job", parents=[common], help="Post a job for your company")
    p.add_argument("--title", required=True)
    p.add_argument("--location", required=True)
    p.add_argument("--type", default=JobType.FULL_TIME.value, choices=[t.value for t in JobType])
    p.add_argument("--description", default="")
    p.add_argument(
        "--draft-description",
        action="store_true",
        help="Draft the description with the configured generator when --description is empty",
    )
    p.add_argument("--salary", default="")
    p.add_argument("--company", help="Company id (admins only)")

    p = sub.add_parser("jobs", parents=[common], help="Browse active jobs")
    p.add_argument("--query", default="")
    p.add_argument("--location", default="")
    p.add_argument("--type", default=jobs.ALL_TYPES, choices=[jobs.ALL_TYPES, *(t.value for t in JobType)])

    p = sub.add_parser("apply", parents=[common], help="Apply to a job")
    p.add_argument("--job", required=True)

    p = sub.add_parser("withdraw", parents=[common], help="Withdraw an application")
    p.add_argument("--application", required=True)

    p = sub.add_parser("save-job", parents=[common], help="Save or unsave a job")
    p.add_argument("--job", required=True)

    p = sub.add_parser("set-status", parents=[common], help="Set an application's status")
    p.add_argument("--application", required=True)
    p.add_argument("--status", required=True, choices=[s.value for s in ApplicationStatus])

    sub.add_parser("applications", parents=[common], help="List your applications or applicants")

    p = sub.add_parser("search-candidates", parents=[common], help="Search the talent pool")
    p.add_argument("--query", default="")

    return parser.parse_args(argv)


def setup_logging(verbose: bool, level: str = "INFO") -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _unwrap(result: OperationResult[T]) -> T:
    if not result.ok:
        raise CommandError(result.reason or "operation failed")
    return result.value  # type: ignore[return-value]


def _current_user(session: SessionHolder) -> User:
    user = session.get_session()
    if user is None:
        raise CommandError("Not signed in. Run: python main.py login")
    return user


def _company_id(session: SessionHolder, explicit: str | None) -> str:
    if explicit:
        return explicit
    user = _current_user(session)
    if not user.company_id:
        raise CommandError("No company given and your account has no company.")
    return user.company_id


def _print_user(user: User) -> None:
    print(f"{user.name} <{user.email}> [{user.role}] id={user.id}")
    if user.company_id:
        print(f"  Company: {user.company_id} ({user.employer_sub_role or 'member'})")
    if not user.is_active:
        print("  Status: SUSPENDED")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_init(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    print(f"Store ready ({settings.database.backend}: {settings.database.path})")
    if settings.seed.demo_data and seed_demo_data(store):
        print("Loaded demo data. Demo password for every account: password")


def cmd_plans(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    for plan in PLANS.values():
        jobs_text = "unlimited" if plan.unlimited_jobs else str(plan.job_limit)
        talent_text = "unlimited" if plan.unlimited_talent else f"{plan.talent_access_days} days"
        print(f"{plan.tier:<13} {plan.name:<13} ${plan.price:>4}/mo  jobs: {jobs_text:<9}  talent: {talent_text}")


def cmd_login(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    user = _unwrap(auth.login(store, session, args.email, args.password))
    print(f"Signed in as {user.name}")


def cmd_logout(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    auth.logout(session)
    print("Signed out")


def cmd_whoami(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    _print_user(_current_user(session))


def cmd_signup_candidate(
    settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace,
) -> None:
    user = _unwrap(auth.signup_candidate(
        store, session, name=args.name, email=args.email, password=args.password, bio=args.bio,
    ))
    print(f"Created candidate account {user.id}")


def cmd_signup_employer(
    settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace,
) -> None:
    user = _unwrap(auth.signup_employer(
        store, session, name=args.name, company_name=args.company,
        email=args.email, password=args.password,
    ))
    print(f"Created employer account {user.id} for company {user.company_id} (FREE trial)")


def cmd_can_post(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    decision = EntitlementEngine(store).can_post_job(_company_id(session, args.company))
    print("ALLOWED" if decision.allowed else f"DENIED: {decision.reason}")


def cmd_talent_access(
    settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace,
) -> None:
    decision = EntitlementEngine(store).can_access_talent(_company_id(session, args.company))
    print("ALLOWED" if decision.allowed else f"DENIED: {decision.reason}")


def cmd_upgrade(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    user = _current_user(session)
    if user.role == UserRole.ADMIN:
        if not args.company:
            raise CommandError("--company is required for admins")
        company = _unwrap(admin.change_company_plan(store, user, args.company, args.plan))
    else:
        company = _unwrap(companies.subscribe(store, user, args.plan))
    plan = PLANS[company.subscription.plan_id]
    print(f"{company.name} is now on {plan.name}")


def cmd_post_job(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    user = _current_user(session)
    description = args.description
    if args.draft_description and not description:
        company = companies.get_company(store, _company_id(session, args.company))
        description = generate_job_description(
            args.generator, args.title, company.name if company else "", args.location,
        )

    draft = JobDraft(
        title=args.title,
        location=args.location,
        type=JobType(args.type),
        description=description,
        salary_range=args.salary,
    )
    job = _unwrap(jobs.post_job(store, user, draft, company_id=args.company))
    print(f"Posted job {job.id}: {job.title} at {job.company_name}")


def cmd_jobs(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    found = jobs.search_jobs(store, args.query, args.location, args.type)
    for job in jobs.with_applicant_counts(store, found):
        print(f"{job.id:<16} {job.title} - {job.company_name} ({job.location}, {job.type}) "
              f"{job.applicants_count} applicants")
    print(f"{len(found)} jobs")


def cmd_apply(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    app = _unwrap(applications.apply_to_job(store, _current_user(session), args.job))
    print(f"Application submitted successfully! ({app.id})")


def cmd_withdraw(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    _unwrap(applications.withdraw_application(store, _current_user(session), args.application))
    print(f"Application {args.application} withdrawn")


def cmd_save_job(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    user = _unwrap(candidates.toggle_saved_job(store, _current_user(session), args.job))
    print(("Saved " if user.has_saved(args.job) else "Removed ") + args.job)


def cmd_set_status(settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace) -> None:
    app = _unwrap(applications.set_application_status(
        store, _current_user(session), args.application, args.status,
    ))
    print(f"Application {app.id} is now {app.status}")


def cmd_applications(
    settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace,
) -> None:
    user = _current_user(session)
    if user.role == UserRole.EMPLOYER:
        apps = applications.get_employer_applications(store, user.id)
    else:
        apps = applications.get_candidate_applications(store, user.id)
    for app in apps:
        print(f"{app.id:<16} {app.status:<10} {app.job_title} @ {app.company_name} - {app.candidate_name}")
    print(f"{len(apps)} applications")


def cmd_search_candidates(
    settings: Settings, store: RecordStore, session: SessionHolder, args: argparse.Namespace,
) -> None:
    user = _current_user(session)
    if user.role == UserRole.ADMIN:
        found = candidates.search_candidates(store, args.query)
    else:
        found = _unwrap(companies.search_talent_pool(store, user, args.query))
    for c in found:
        print(f"{c.id:<16} {c.name} - {c.title} [{', '.join(c.skills)}]")
    print(f"{len(found)} candidates")


Command = Callable[[Settings, RecordStore, SessionHolder, argparse.Namespace], None]

COMMANDS: dict[str, Command] = {
    "init": cmd_init,
    "plans": cmd_plans,
    "login": cmd_login,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
    "signup-candidate": cmd_signup_candidate,
    "signup-employer": cmd_signup_employer,
    "can-post": cmd_can_post,
    "talent-access": cmd_talent_access,
    "upgrade": cmd_upgrade,
    "post-job": cmd_post_job,
    "jobs": cmd_jobs,
    "apply": cmd_apply,
    "withdraw": cmd_withdraw,
    "save-job": cmd_save_job,
    "set-status": cmd_set_status,
    "applications": cmd_applications,
    "search-candidates": cmd_search_candidates,
}


def main(argv: list[str] | None = None, generator: DescriptionGenerator | None = None) -> None:
    """Run one CLI command. ``generator`` backs ``post-job --draft-description``."""
    args = parse_args(argv)
    args.generator = generator

    try:
        settings = Settings.from_yaml(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(args.verbose, settings.logging.level)

    store = open_store(settings.database)
    session = SessionHolder(store)
    try:
        COMMANDS[args.command](settings, store, session, args)
    except (CommandError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.close()


if __name__ == "__main__":
    main()
