"""Role guards shared by the domain operations."""

from jobboard.core.results import ErrorKind, OperationResult
from jobboard.core.schemas import User, UserRole

LOGIN_REQUIRED = "Please login to continue."
SUSPENDED = "Your account has been suspended. Please contact support."


def check_actor(
    actor: User | None,
    *roles: UserRole,
    message: str = "You are not allowed to perform this action.",
) -> OperationResult | None:
    """Return a failure result if ``actor`` may not act, else None.

    No roles means any signed-in, active user is accepted.
    """
    if actor is None:
        return login_required()
    if not actor.is_active:
        return OperationResult.failure(ErrorKind.ACCOUNT_SUSPENDED, SUSPENDED)
    if roles and actor.role not in roles:
        return OperationResult.failure(ErrorKind.ROLE_VIOLATION, message)
    return None


def login_required() -> OperationResult:
    return OperationResult.failure(ErrorKind.UNAUTHENTICATED, LOGIN_REQUIRED)


def not_found(what: str) -> OperationResult:
    return OperationResult.failure(ErrorKind.NOT_FOUND, f"{what} not found")
