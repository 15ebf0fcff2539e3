"""
Profile repository.

Maps the `profiles` collection (document id = user id) to UserProfile.
"""

from datetime import datetime
from typing import Any, Optional

from shared.documents import DocumentSnapshot, Transaction
from shared.repository import BaseRepository

from .models import ProfileUpdate, UserProfile


class ProfileRepository(BaseRepository[UserProfile]):
    """
    Repository for profile documents.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying the caller.
    """

    collection = "profiles"

    def stage_create(self, tx: Transaction, profile: UserProfile) -> None:
        """Stage a new profile document."""
        tx.set(self.collection, profile.id, self._document_data(profile))

    def stage_update(
        self,
        tx: Transaction,
        user_id: str,
        update: ProfileUpdate,
        now: datetime,
    ) -> None:
        """Stage the fields present in a ProfileUpdate."""
        fields = update.model_dump(mode="json", exclude_unset=True)
        self._stage_fields(tx, user_id, fields, now)

    def stage_match_state(
        self,
        tx: Transaction,
        user_id: str,
        now: datetime,
        *,
        current_match_id: Optional[str] = None,
        is_looking_for_match: Optional[bool] = None,
        clear_match: bool = False,
    ) -> None:
        """
        Stage changes to the matchmaking fields of a profile.

        Args:
            tx: Transaction to stage the write on.
            user_id: Profile to change.
            now: Timestamp for updated_at.
            current_match_id: New match ID to set.
            is_looking_for_match: New looking-for-match flag.
            clear_match: Set current_match_id to null.
        """
        fields: dict[str, Any] = {}
        if current_match_id is not None:
            fields["current_match_id"] = current_match_id
        elif clear_match:
            fields["current_match_id"] = None
        if is_looking_for_match is not None:
            fields["is_looking_for_match"] = is_looking_for_match
        self._stage_fields(tx, user_id, fields, now)

    def _stage_fields(
        self,
        tx: Transaction,
        user_id: str,
        fields: dict[str, Any],
        now: datetime,
    ) -> None:
        tx.update(self.collection, user_id, {**fields, "updated_at": now.isoformat()})

    def _map_to_model(self, snapshot: DocumentSnapshot) -> UserProfile:
        """Map document to UserProfile model."""
        return UserProfile.model_validate({**(snapshot.data or {}), "id": snapshot.id})
