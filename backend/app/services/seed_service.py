"""
Ensures the configured administrator account exists and holds the admin role.

The account is registered through the normal registration service (so the
password is validated and hashed the same way as any signup) and then
elevated directly in the user store.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncContextManager, Callable, Optional

from ..core.config import Settings
from ..core.database import mongo_session
from ..core.logging_config import seed_context
from ..models.user import UserRole
from .auth_service import AuthService, RegistrationOutcome
from .user_store import UserStore

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[Settings], AsyncContextManager[Any]]


class SeedStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class SeedResult:
    status: SeedStatus
    message: str
    email: str
    created: bool = False

    @property
    def exit_code(self) -> int:
        return 0 if self.status == SeedStatus.SUCCESS else 1


async def _ensure_admin(settings: Settings, store: UserStore, auth_service: AuthService) -> SeedResult:
    email = settings.ADMIN_EMAIL

    # The access token issued on signup is not needed here and is discarded
    registration = await auth_service.register_user(settings.ADMIN_FULL_NAME, email, settings.ADMIN_PASSWORD)
    if registration.outcome == RegistrationOutcome.CREATED:
        logger.info("Super admin user %s created via registration service", email)
    elif registration.outcome == RegistrationOutcome.ALREADY_EXISTS:
        logger.info("Super admin user %s already exists", email)
    else:
        message = f"Registration of {email} failed: {registration.detail}"
        logger.error(message)
        return SeedResult(SeedStatus.FAILURE, message, email)

    created = registration.outcome == RegistrationOutcome.CREATED

    user = await store.find_by_email(email)
    if user is None:
        message = f"User {email} not found after registration; role not updated"
        logger.error(message)
        return SeedResult(SeedStatus.FAILURE, message, email, created=created)

    user.role = UserRole.ADMIN
    await store.save(user)
    logger.info("User %s role updated to admin", email)

    return SeedResult(SeedStatus.SUCCESS, f"Admin user {email} is ready", email, created=created)


async def seed_admin(
    settings: Settings,
    *,
    connection: Optional[ConnectionFactory] = None,
    store: Optional[UserStore] = None,
    auth_service: Optional[AuthService] = None,
) -> SeedResult:
    """Create or reuse the admin account and elevate its role.

    Never raises for failures of the run itself; the connection is released
    on every path and the outcome is reported in the returned SeedResult.
    """
    connection = connection or mongo_session
    store = store or UserStore()

    email = settings.ADMIN_EMAIL
    with seed_context(email):
        try:
            if auth_service is None:
                auth_service = AuthService(
                    store,
                    secret_key=settings.SECRET_KEY,
                    algorithm=settings.ALGORITHM,
                    access_token_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
                )
            async with connection(settings):
                return await _ensure_admin(settings, store, auth_service)
        except Exception as e:
            logger.exception("Error seeding admin %s", email)
            return SeedResult(SeedStatus.FAILURE, f"Error seeding admin: {e}", email)
