"""Platform admin console: user management and plan overrides."""

import logging
from datetime import datetime
from typing import Any

from jobboard.billing.subscriptions import upgrade_subscription
from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.results import ErrorKind, OperationResult
from jobboard.core.schemas import Company, PlanTier, User, UserRole
from jobboard.services.access import check_actor, not_found
from jobboard.services.auth import EMAIL_TAKEN, get_user_by_email

logger = logging.getLogger(__name__)

ADMINS_ONLY = "Only platform admins can do this."


def _require_admin(actor: User | None) -> OperationResult | None:
    return check_actor(actor, UserRole.ADMIN, message=ADMINS_ONLY)


def list_users(store: RecordStore, actor: User | None) -> OperationResult[list[User]]:
    if (denied := _require_admin(actor)) is not None:
        return denied
    return OperationResult.success(store.list_all(RecordKind.USERS))


def list_companies(store: RecordStore, actor: User | None) -> OperationResult[list[Company]]:
    if (denied := _require_admin(actor)) is not None:
        return denied
    return OperationResult.success(store.list_all(RecordKind.COMPANIES))


def create_user(store: RecordStore, actor: User | None, user: User) -> OperationResult[User]:
    if (denied := _require_admin(actor)) is not None:
        return denied
    with store.atomic():
        if get_user_by_email(store, user.email) is not None:
            return OperationResult.failure(ErrorKind.EMAIL_TAKEN, EMAIL_TAKEN)
        store.create(RecordKind.USERS, user)
    logger.info("Admin '%s' created user '%s' (%s)", actor.id, user.id, user.role)  # type: ignore[union-attr]
    return OperationResult.success(user)


def update_user(
    store: RecordStore,
    actor: User | None,
    user_id: str,
    patch: dict[str, Any],
) -> OperationResult[User]:
    """Overwrite any user fields except the id. A new email must not belong to another user."""
    if (denied := _require_admin(actor)) is not None:
        return denied
    if "id" in patch:
        msg = "Cannot change a user's id"
        raise ValueError(msg)

    with store.atomic():
        if "email" in patch:
            holder = get_user_by_email(store, patch["email"])
            if holder is not None and holder.id != user_id:
                return OperationResult.failure(ErrorKind.EMAIL_TAKEN, EMAIL_TAKEN)
        updated = store.update(RecordKind.USERS, user_id, patch)
    if updated is None:
        return not_found("User")
    return OperationResult.success(updated)


def toggle_user_active(store: RecordStore, actor: User | None, user_id: str) -> OperationResult[User]:
    """Suspend an active account or reinstate a suspended one."""
    if (denied := _require_admin(actor)) is not None:
        return denied
    user: User | None = store.get_by_id(RecordKind.USERS, user_id)
    if user is None:
        return not_found("User")
    updated = store.update(RecordKind.USERS, user_id, {"is_active": not user.is_active})
    logger.info("User '%s' %s", user_id, "reinstated" if updated.is_active else "suspended")
    return OperationResult.success(updated)


def delete_user(store: RecordStore, actor: User | None, user_id: str) -> OperationResult[None]:
    """Hard-delete an account. Their applications and postings are left in place."""
    if (denied := _require_admin(actor)) is not None:
        return denied
    if not store.delete(RecordKind.USERS, user_id):
        return not_found("User")
    logger.info("User '%s' deleted by admin '%s'", user_id, actor.id)  # type: ignore[union-attr]
    return OperationResult.success()


def change_company_plan(
    store: RecordStore,
    actor: User | None,
    company_id: str,
    plan_id: PlanTier | str,
    now: datetime | None = None,
) -> OperationResult[Company]:
    """Admin override of a company's plan, with the same effect as a purchase."""
    if (denied := _require_admin(actor)) is not None:
        return denied
    return upgrade_subscription(store, company_id, plan_id, now=now)
