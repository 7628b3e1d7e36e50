"""
Registration service: validates new accounts, hashes passwords, persists
users and issues JWT access tokens.
"""

import logging
import jwt
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..models.user import UserModel, UserCreate, pwd_context
from .user_store import UserStore

logger = logging.getLogger(__name__)


class RegistrationOutcome(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


@dataclass
class RegistrationResult:
    outcome: RegistrationOutcome
    user: Optional[UserModel] = None
    access_token: Optional[str] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome != RegistrationOutcome.FAILED


def _validation_detail(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        parts.append(f"{field}: {error['msg']}")
    return "; ".join(parts)


class AuthService:
    """Authentication service for registration and JWT tokens"""

    def __init__(
        self,
        store: UserStore,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 30,
    ):
        if not secret_key:
            raise ValueError("secret_key is required")
        self.store = store
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = access_token_expire_minutes

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password using bcrypt"""
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash"""
        return pwd_context.verify(plain_password, hashed_password)

    def create_access_token(self, data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token"""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=self.access_token_expire_minutes)

        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Decode a token; raises jwt.InvalidTokenError on any failure"""
        payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        if payload.get("type") != "access":
            raise jwt.InvalidTokenError("Invalid token type")
        return payload

    async def register_user(self, full_name: str, email: str, password: str) -> RegistrationResult:
        """Register a new user.

        Returns ALREADY_EXISTS (with the stored user) when the email is
        registered, FAILED for invalid input or a failed write, and CREATED
        with an access token otherwise. Unexpected errors propagate.
        """
        try:
            data = UserCreate(full_name=full_name, email=email, password=password)
        except ValidationError as e:
            detail = _validation_detail(e)
            logger.warning("Rejected registration for %s: %s", email, detail)
            return RegistrationResult(RegistrationOutcome.FAILED, detail=detail)

        existing = await self.store.find_by_email(data.email)
        if existing:
            return RegistrationResult(
                RegistrationOutcome.ALREADY_EXISTS,
                user=existing,
                detail="User already exists",
            )

        try:
            user = await self.store.create(data, self.get_password_hash(data.password))
        except DuplicateKeyError:
            # Another writer registered the same email after our lookup
            return RegistrationResult(
                RegistrationOutcome.ALREADY_EXISTS,
                user=await self.store.find_by_email(data.email),
                detail="User already exists",
            )
        except PyMongoError as e:
            logger.error("Failed to persist user %s: %s", data.email, e)
            return RegistrationResult(RegistrationOutcome.FAILED, detail=f"User creation failed: {e}")

        access_token = self.create_access_token(
            data={"sub": str(user.id), "email": user.email, "role": user.role.value}
        )
        logger.info("Registered user %s", user.email)
        return RegistrationResult(RegistrationOutcome.CREATED, user=user, access_token=access_token)
