import json
import logging
from typing import Optional

from pydantic import ValidationError

from db.schemas import Session, User, UserProfile
from services.errors import StorageFailureError

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "USER_NAME": "user_name",
    "USER_PASSWORD": "user_password",
    "PROFILE": "user_profile",
    "SESSION": "user_session",
    "HAS_LAUNCHED": "has_launched",
}


class StorageService:
    """
    Account, profile, session and onboarding data for the single local user.

    Password and session live in the secure (encrypted) store; username,
    profile and the first-launch flag live in the general store. Writes raise
    StorageFailureError; reads return None/False when the store fails.
    """

    def __init__(self, store, secure_store):
        self.store = store
        self.secure_store = secure_store

    # User Management - SECURE
    async def save_user(self, username: str, password: str) -> User:
        user = User(username=username, password=password)  # raises ValidationError
        try:
            await self.secure_store.set(STORAGE_KEYS["USER_PASSWORD"], user.password)
            await self.store.set(STORAGE_KEYS["USER_NAME"], user.username)
        except StorageFailureError as e:
            logger.error("Error saving user: %s", e)
            raise StorageFailureError("Failed to save user securely") from e
        return user

    async def get_user(self) -> Optional[User]:
        try:
            username = await self.store.get(STORAGE_KEYS["USER_NAME"])
            password = await self.secure_store.get(STORAGE_KEYS["USER_PASSWORD"])
        except StorageFailureError as e:
            logger.error("Error getting user: %s", e)
            return None
        if username and password:
            return User.model_construct(username=username, password=password)
        return None

    async def validate_credentials(self, username: str, password: str) -> bool:
        user = await self.get_user()
        return user is not None and user.username == username and user.password == password

    # Profile Management - STANDARD
    async def save_profile(self, profile: UserProfile) -> UserProfile:
        try:
            await self.store.set(
                STORAGE_KEYS["PROFILE"],
                profile.model_dump_json(by_alias=True, exclude_none=True),
            )
        except StorageFailureError as e:
            logger.error("Error saving profile: %s", e)
            raise StorageFailureError("Failed to save profile") from e
        return profile

    async def get_profile(self) -> Optional[UserProfile]:
        try:
            data = await self.store.get(STORAGE_KEYS["PROFILE"])
            return UserProfile.model_validate_json(data) if data else None
        except (StorageFailureError, ValidationError) as e:
            logger.error("Error getting profile: %s", e)
            return None

    # Session Management - SECURE
    async def save_session(self, session: Session) -> None:
        try:
            await self.secure_store.set(STORAGE_KEYS["SESSION"], session.model_dump_json(by_alias=True))
        except StorageFailureError as e:
            logger.error("Error saving session: %s", e)
            raise StorageFailureError("Failed to save session") from e

    async def get_session(self) -> Optional[Session]:
        try:
            data = await self.secure_store.get(STORAGE_KEYS["SESSION"])
            return Session.model_validate(json.loads(data)) if data else None
        except (StorageFailureError, ValueError) as e:
            logger.error("Error getting session: %s", e)
            return None

    async def clear_session(self) -> None:
        try:
            await self.secure_store.remove(STORAGE_KEYS["SESSION"])
        except StorageFailureError as e:
            logger.error("Error clearing session: %s", e)

    # Onboarding
    async def check_first_launch(self) -> bool:
        try:
            return await self.store.get(STORAGE_KEYS["HAS_LAUNCHED"]) is None
        except StorageFailureError as e:
            logger.error("Error checking first launch: %s", e)
            return False

    async def set_launched(self) -> None:
        try:
            await self.store.set(STORAGE_KEYS["HAS_LAUNCHED"], "true")
        except StorageFailureError as e:
            logger.error("Error setting launched flag: %s", e)

    async def clear_all(self) -> None:
        """Wipe the general store (history included) and the secure credentials."""
        try:
            await self.store.clear()
            await self.secure_store.remove(STORAGE_KEYS["USER_PASSWORD"])
            await self.secure_store.remove(STORAGE_KEYS["SESSION"])
        except StorageFailureError as e:
            logger.error("Error clearing all data: %s", e)
            raise StorageFailureError("Failed to clear data") from e
