"""
User models for the application's account store.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, EmailStr, field_validator
from beanie import Document, Indexed
from passlib.context import CryptContext

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


class UserRole(str, Enum):
    """User role enumeration"""
    STANDARD = "standard"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """User status enumeration"""
    ACTIVE = "active"
    INACTIVE = "inactive"


class UserModel(Document):
    """User model for authentication and authorization"""

    full_name: str
    email: Indexed(EmailStr, unique=True)
    hashed_password: str

    role: UserRole = Field(default=UserRole.STANDARD)
    status: UserStatus = Field(default=UserStatus.ACTIVE)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"
        use_state_management = True

    def verify_password(self, password: str) -> bool:
        """Verify password against stored hash"""
        return pwd_context.verify(password, self.hashed_password)

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password"""
        return pwd_context.hash(password)

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserCreate(BaseModel):
    """Registration input"""
    full_name: str
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full_name must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()
