# Models package

from .user import UserModel, UserCreate, UserRole, UserStatus

__all__ = [
    "UserModel",
    "UserCreate",
    "UserRole",
    "UserStatus",
]
