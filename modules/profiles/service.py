"""
Profiles service implementation.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from shared.documents import IDocumentStore, Transaction
from shared.exceptions import ensure_same_user
from shared.models import utc_now

from .interfaces import IProfileService
from .models import ProfileUpdate, UserProfile
from .exceptions import ProfileAlreadyExistsError, ProfileNotFoundError
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileService(IProfileService):
    """
    Profile service on top of the document store.

    Implements IProfileService protocol.
    """

    def __init__(
        self,
        store: IDocumentStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._profiles = ProfileRepository(store)
        self._clock = clock

    async def create_profile(
        self,
        caller_id: str,
        user_id: str,
        email: Optional[str] = None,
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> UserProfile:
        """Create a profile with default matchmaking state."""
        ensure_same_user(caller_id, user_id)

        async def create(tx: Transaction) -> UserProfile:
            if await self._profiles.get(user_id, tx) is not None:
                raise ProfileAlreadyExistsError(user_id)

            now = self._clock()
            profile = UserProfile(
                id=user_id,
                email=email,
                display_name=display_name,
                photo_url=photo_url,
                created_at=now,
                updated_at=now,
            )
            self._profiles.stage_create(tx, profile)
            return profile

        profile = await self._store.run_transaction(create)
        logger.info(f"Created profile for user {user_id}")
        return profile

    async def get_profile(self, caller_id: str, user_id: str) -> UserProfile:
        """Get the caller's profile."""
        ensure_same_user(caller_id, user_id)

        profile = await self._profiles.get(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    async def update_profile(
        self,
        caller_id: str,
        user_id: str,
        update: ProfileUpdate,
    ) -> UserProfile:
        """Apply a partial profile update."""
        ensure_same_user(caller_id, user_id)

        async def apply(tx: Transaction) -> UserProfile:
            profile = await self._profiles.get(user_id, tx)
            if profile is None:
                raise ProfileNotFoundError(user_id)

            now = self._clock()
            self._profiles.stage_update(tx, user_id, update, now)
            changes = update.model_dump(mode="json", exclude_unset=True)
            return UserProfile.model_validate({**profile.model_dump(), **changes, "updated_at": now})

        return await self._store.run_transaction(apply)

