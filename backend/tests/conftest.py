"""
Test configuration and fixtures.
Unit tests run against in-memory fakes of the user store and the database
connection; integration tests in test_database.py use a real MongoDB.
"""

import os
import itertools
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import pytest
from dotenv import load_dotenv
from pymongo.errors import DuplicateKeyError

from app.core.config import Settings
from app.models.user import UserCreate, UserRole, UserStatus


# Load test environment variables
test_env_path = os.path.join(os.path.dirname(__file__), "test.env")
if os.path.exists(test_env_path):
    load_dotenv(test_env_path)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

_ids = itertools.count(1)


@dataclass
class StoredUser:
    """In-memory stand-in for a UserModel document"""
    full_name: str
    email: str
    hashed_password: str
    role: UserRole = UserRole.STANDARD
    status: UserStatus = UserStatus.ACTIVE
    id: int = field(default_factory=lambda: next(_ids))
    updated_at: datetime = field(default_factory=datetime.utcnow)


class FakeUserStore:
    """User store keyed by email with a unique constraint like the real index"""

    def __init__(self):
        self.users: Dict[str, StoredUser] = {}
        self.saved: List[StoredUser] = []
        self.create_error: Optional[Exception] = None
        self.save_error: Optional[Exception] = None

    def add(self, email: str, role: UserRole = UserRole.STANDARD, full_name: str = "Existing User") -> StoredUser:
        user = StoredUser(full_name=full_name, email=email, hashed_password="not-a-real-hash", role=role)
        self.users[email] = user
        return user

    async def find_by_email(self, email: str) -> Optional[StoredUser]:
        return self.users.get(email.lower())

    async def create(self, data: UserCreate, hashed_password: str) -> StoredUser:
        if self.create_error is not None:
            raise self.create_error
        if data.email in self.users:
            raise DuplicateKeyError("E11000 duplicate key error collection: users index: email_1")
        user = StoredUser(full_name=data.full_name, email=data.email, hashed_password=hashed_password)
        self.users[data.email] = user
        return user

    async def save(self, user: StoredUser) -> StoredUser:
        if self.save_error is not None:
            raise self.save_error
        user.updated_at = datetime.utcnow()
        self.users[user.email] = user
        self.saved.append(user)
        return user


class FakeConnection:
    """Connection factory that records open/close calls"""

    def __init__(self, connect_error: Optional[Exception] = None):
        self.connect_error = connect_error
        self.opened = 0
        self.closed = 0

    @property
    def is_open(self) -> bool:
        return self.opened > self.closed

    def __call__(self, settings: Settings):
        @asynccontextmanager
        async def session():
            if self.connect_error is not None:
                raise self.connect_error
            self.opened += 1
            try:
                yield self
            finally:
                self.closed += 1

        return session()


@pytest.fixture
def settings() -> Settings:
    """Settings built from defaults only, ignoring the local environment and .env"""
    return Settings(
        _env_file=None,
        MONGODB_URL="mongodb://localhost:27017/seed_test",
        SECRET_KEY="test-secret",
        ADMIN_EMAIL="admin@example.com",
        ADMIN_PASSWORD="StrongPass123!",
        ADMIN_FULL_NAME="Super Admin User",
    )


@pytest.fixture
def user_store() -> FakeUserStore:
    return FakeUserStore()


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()
