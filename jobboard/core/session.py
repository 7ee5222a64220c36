"""Persisted "current user" for the CLI front end.

The session lives in the store's metadata map until explicitly cleared; there
is no expiry. Domain operations never read it: they take the acting user as
an argument, and only the front end resolves the session into that user.
"""

import logging

from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.schemas import User

logger = logging.getLogger(__name__)

SESSION_KEY = "current_user_id"


class SessionHolder:
    """Stores the signed-in user id and resolves it against the store on read."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def set_session(self, user_id: str) -> None:
        self._store.set_meta(SESSION_KEY, user_id)
        logger.debug("Session set for user '%s'", user_id)

    def get_session(self) -> User | None:
        """Return the live User record, or None if unset or the user was deleted.

        A suspended user is still returned; callers check ``is_active``.
        """
        user_id = self._store.get_meta(SESSION_KEY)
        if not user_id:
            return None
        user = self._store.get_by_id(RecordKind.USERS, user_id)
        if user is None:
            logger.debug("Session user '%s' no longer exists", user_id)
        return user

    def clear_session(self) -> None:
        self._store.delete_meta(SESSION_KEY)
        logger.debug("Session cleared")
