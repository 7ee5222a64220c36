"""Sign-in, sign-out and self-service registration."""

import logging

from jobboard.billing.subscriptions import trial_subscription
from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.results import ErrorKind, OperationResult
from jobboard.core.schemas import Company, EmployerSubRole, User, UserRole, new_id
from jobboard.core.session import SessionHolder
from jobboard.services.access import SUSPENDED

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."
EMAIL_TAKEN = "An account with this email already exists."


def get_user_by_email(store: RecordStore, email: str) -> User | None:
    matches: list[User] = store.list_by(RecordKind.USERS, "email", email)
    return matches[0] if matches else None


def login(store: RecordStore, session: SessionHolder, email: str, password: str) -> OperationResult[User]:
    """Check credentials and start a session.

    Unknown email and wrong password produce the same failure. A suspended
    account is refused before any session is set.
    """
    user = get_user_by_email(store, email)
    if user is None or user.password is None or user.password != password:
        logger.info("Failed login for '%s'", email)
        return OperationResult.failure(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS)

    if not user.is_active:
        logger.info("Suspended account '%s' refused", user.id)
        return OperationResult.failure(ErrorKind.ACCOUNT_SUSPENDED, SUSPENDED)

    session.set_session(user.id)
    logger.info("User '%s' signed in as %s", user.id, user.role)
    return OperationResult.success(user)


def logout(session: SessionHolder) -> None:
    session.clear_session()


def _email_taken(store: RecordStore, email: str) -> OperationResult | None:
    if get_user_by_email(store, email) is not None:
        return OperationResult.failure(ErrorKind.EMAIL_TAKEN, EMAIL_TAKEN)
    return None


def signup_candidate(
    store: RecordStore,
    session: SessionHolder,
    *,
    name: str,
    email: str,
    password: str,
    bio: str = "",
) -> OperationResult[User]:
    """Register a candidate account and sign it in."""
    user = User(
        id=new_id("user_"),
        name=name,
        email=email,
        password=password,
        role=UserRole.CANDIDATE,
        bio=bio,
    )
    with store.atomic():
        if (taken := _email_taken(store, email)) is not None:
            return taken
        store.create(RecordKind.USERS, user)
    logger.info("Candidate '%s' registered", user.id)
    return login(store, session, email, password)


def signup_employer(
    store: RecordStore,
    session: SessionHolder,
    *,
    name: str,
    company_name: str,
    email: str,
    password: str,
) -> OperationResult[User]:
    """Register a company on the FREE trial plus its owner account, then sign in."""
    user_id = new_id("emp_")
    company = Company(
        id=new_id("co_"),
        name=company_name,
        description="New Company",
        owner_id=user_id,
        subscription=trial_subscription(),
    )
    user = User(
        id=user_id,
        name=name,
        email=email,
        password=password,
        role=UserRole.EMPLOYER,
        company_id=company.id,
        employer_sub_role=EmployerSubRole.OWNER,
    )
    with store.atomic():
        if (taken := _email_taken(store, email)) is not None:
            return taken
        store.create(RecordKind.COMPANIES, company)
        store.create(RecordKind.USERS, user)
    logger.info("Employer '%s' registered company '%s'", user.id, company.id)
    return login(store, session, email, password)
