from typing import Optional, Union
from beanie import PydanticObjectId
from fastapi import Depends, Request, Response
from fastapi_users import BaseUserManager, FastAPIUsers, models, exceptions
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import BeanieUserDatabase, ObjectIDIDMixin
from storefront.models.userModel import User, get_user_db
from storefront.schemas.userSchema import UserCreate
from storefront.config.settings import settings
from storefront.commonUtils.authEvents import auth_events
from storefront.commonUtils.enumUtils import AuthEvent

import logging

logger = logging.getLogger(__name__)

SECRET = settings.JWT_SECRET_KEY


class UserManager(ObjectIDIDMixin, BaseUserManager[User, PydanticObjectId]):
    reset_password_token_secret = SECRET
    verification_token_secret = SECRET

    async def validate_password(self, password: str, user: Union[UserCreate, User]) -> None:
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            raise exceptions.InvalidPasswordException(
                reason=f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
            )
        if user.email and user.email.lower() in password.lower():
            raise exceptions.InvalidPasswordException(
                reason="Password should not contain your email"
            )

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.id} has registered.")
        await auth_events.publish(AuthEvent.SIGNED_UP, user)

    async def on_after_login(
            self,
            user: User,
            request: Optional[Request] = None,
            response: Optional[Response] = None,
    ):
        logger.info(f"User {user.id} signed in.")
        await auth_events.publish(AuthEvent.SIGNED_IN, user)

    async def on_after_update(self, user: User, update_dict: dict, request: Optional[Request] = None):
        logger.info(f"User {user.id} updated profile fields: {sorted(update_dict)}")
        await auth_events.publish(AuthEvent.USER_UPDATED, user)


async def get_user_manager(user_db: BeanieUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


bearer_transport = BearerTransport(tokenUrl="auth/jwt/login")


def get_jwt_strategy() -> JWTStrategy[models.UP, models.ID]:
    return JWTStrategy(secret=SECRET, lifetime_seconds=settings.JWT_LIFETIME_SECONDS)


auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

fastapi_users = FastAPIUsers[User, PydanticObjectId](get_user_manager, [auth_backend])

current_active_user = fastapi_users.current_user(active=True)
# Checkout and session lookups work for guests too
optional_current_user = fastapi_users.current_user(active=True, optional=True)
