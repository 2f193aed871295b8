from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from storefront.models.userModel import User
from storefront.schemas.userSchema import UserCreate, UserRead, UserUpdate
from storefront.commonUtils.authEvents import auth_events
from storefront.commonUtils.enumUtils import AuthEvent
from storefront.crud.userService import (
    auth_backend,
    current_active_user,
    optional_current_user,
    fastapi_users,
)

router = APIRouter()

router.include_router(
    fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"]
)
router.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix="/auth",
    tags=["auth"],
)
router.include_router(
    fastapi_users.get_reset_password_router(),
    prefix="/auth",
    tags=["auth"],
)
router.include_router(
    fastapi_users.get_users_router(UserRead, UserUpdate),
    prefix="/users",
    tags=["users"],
)


@router.get("/auth/session", response_model=Optional[UserRead], tags=["auth"])
async def get_session(user: Optional[User] = Depends(optional_current_user)):
    """Current signed-in user, or null for guests"""
    return user


@router.post("/auth/sign-out", status_code=status.HTTP_204_NO_CONTENT, tags=["auth"])
async def sign_out(user: User = Depends(current_active_user)):
    """
    Sign out. Bearer tokens are stateless, so the client drops its token;
    listeners are told the session ended.
    """
    await auth_events.publish(AuthEvent.SIGNED_OUT, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
