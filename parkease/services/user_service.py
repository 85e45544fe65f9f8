"""Service for reading and updating user profiles."""

from typing import Optional

from parkease.domain.errors import NotFound
from parkease.domain.models.user import User
from parkease.domain.ports.persistence import UserRepository


class UserService:
    """Service for managing the signed-in user's profile."""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def get_profile(self, user_id: int) -> User:
        """
        Get a user's profile.

        Args:
            user_id: User ID

        Returns:
            User

        Raises:
            NotFound: If the user does not exist
        """
        user = self.user_repository.get_user_by_id(user_id)
        if not user:
            raise NotFound("User not found.")
        return user

    def update_profile(
        self,
        user_id: int,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> User:
        """
        Update profile fields. Omitted fields are left unchanged.

        Args:
            user_id: User ID
            first_name: New given name
            last_name: New family name
            phone: New contact number
            avatar: New avatar URL

        Returns:
            Updated User

        Raises:
            ValueError: If a name is set to blank
            NotFound: If the user does not exist
        """
        if first_name is not None and not first_name.strip():
            raise ValueError("First name cannot be empty.")
        if last_name is not None and not last_name.strip():
            raise ValueError("Last name cannot be empty.")

        user = self.user_repository.update_user_profile(
            user_id,
            first_name=first_name.strip() if first_name is not None else None,
            last_name=last_name.strip() if last_name is not None else None,
            phone=phone,
            avatar=avatar,
        )
        if not user:
            raise NotFound("User not found.")
        return user
