"""
User and magic-token repositories.

Encapsulates all Supabase queries and data mapping for the auth tables:
- users
- magic_tokens
"""

from datetime import datetime
from typing import Any, Optional

from supabase import PostgrestAPIError

from shared.repository import BaseRepository
from .models import MagicToken, User

# Postgres SQLSTATE for a unique constraint violation
UNIQUE_VIOLATION = "23505"


class UserRepository(BaseRepository[User]):
    """
    Repository for the users table.

    Rows are only ever created (on first magic-link request) and updated
    (premium flag and Stripe identifiers); nothing here deletes users.
    """

    TABLE = "users"

    # Columns a user row can be addressed by when applying an update
    LOOKUP_COLUMNS = frozenset({"email", "stripe_charge_id", "stripe_payment_intent_id"})

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get a user by exact email.

        Args:
            email: Email as stored (case-sensitive).

        Returns:
            User if found, None otherwise.
        """
        result = self._db.table(self.TABLE).select("*").eq("email", email).execute()
        if not result.data:
            return None
        return User.model_validate(result.data[0])

    def create(self, email: str) -> User:
        """Insert a new non-premium user."""
        result = self._db.table(self.TABLE).insert({"email": email}).execute()
        return User.model_validate(result.data[0])

    def get_or_create(self, email: str) -> User:
        """
        Return the user for an email, creating the row if absent.

        Two first-time requests for one email can race to insert; the loser
        hits the UNIQUE(email) constraint and reads the winner's row instead.
        """
        user = self.get_by_email(email)
        if user is not None:
            return user

        try:
            return self.create(email)
        except PostgrestAPIError as e:
            if e.code != UNIQUE_VIOLATION:
                raise
        user = self.get_by_email(email)
        if user is None:
            raise RuntimeError(f"User row for {email} vanished after duplicate insert")
        return user

    def update_by(self, column: str, value: str, data: dict[str, Any]) -> int:
        """
        Update every user row whose `column` equals `value`.

        Args:
            column: One of LOOKUP_COLUMNS.
            value: Value to match.
            data: Column values to set.

        Returns:
            Number of rows updated.
        """
        if column not in self.LOOKUP_COLUMNS:
            raise ValueError(f"Cannot address users by column: {column}")

        payload = {**data, "updated_at": self._now_iso()}
        result = self._db.table(self.TABLE).update(payload).eq(column, value).execute()
        return len(result.data or [])


class MagicTokenRepository(BaseRepository[MagicToken]):
    """Repository for the magic_tokens table."""

    TABLE = "magic_tokens"

    def create(self, email: str, token: str, expires_at: datetime) -> MagicToken:
        """Persist a freshly issued, unused token."""
        result = self._db.table(self.TABLE).insert({
            "email": email,
            "token": token,
            "expires_at": expires_at.isoformat(),
            "used": False,
        }).execute()
        return MagicToken.model_validate(result.data[0])

    def consume(self, token: str, now: datetime) -> Optional[MagicToken]:
        """
        Mark a token used if it is unused and unexpired.

        This is a single conditional UPDATE (token matches, used = false,
        expires_at > now), so two concurrent redemptions of the same token
        cannot both succeed: the loser updates zero rows.

        Args:
            token: The one-time token from the magic link.
            now: Current time; rows expiring at or before it are not matched.

        Returns:
            The consumed token row, or None if nothing matched.
        """
        result = (
            self._db.table(self.TABLE)
            .update({"used": True})
            .eq("token", token)
            .eq("used", False)
            .gt("expires_at", now.isoformat())
            .execute()
        )
        if not result.data:
            return None
        return MagicToken.model_validate(result.data[0])
