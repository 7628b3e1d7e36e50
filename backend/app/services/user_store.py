"""
Direct data-store access for user records.
"""

from datetime import datetime
from typing import Optional

from ..models.user import UserModel, UserCreate, UserRole, UserStatus


class UserStore:
    """Find and persist user documents without going through registration"""

    async def find_by_email(self, email: str) -> Optional[UserModel]:
        return await UserModel.find_one(UserModel.email == email.lower())

    async def create(self, data: UserCreate, hashed_password: str) -> UserModel:
        """Insert a new user with the default role.

        Raises pymongo.errors.DuplicateKeyError if the email is taken.
        """
        user = UserModel(
            full_name=data.full_name,
            email=data.email,
            hashed_password=hashed_password,
            role=UserRole.STANDARD,
            status=UserStatus.ACTIVE,
        )
        await user.insert()
        return user

    async def save(self, user: UserModel) -> UserModel:
        user.updated_at = datetime.utcnow()
        await user.save()
        return user
