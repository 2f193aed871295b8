import uuid
from typing import Optional

from fastapi import Depends, Request, Response

from storefront.config.settings import settings
from storefront.crud.sessionService import SessionRegistry, ShopSession, session_registry

SESSION_HEADER = "X-Session-Id"


def get_session_registry() -> SessionRegistry:
    return session_registry


def resolve_session_id(request: Request) -> Optional[str]:
    return request.headers.get(SESSION_HEADER) or request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_shop_session(
        request: Request,
        response: Response,
        registry: SessionRegistry = Depends(get_session_registry),
) -> ShopSession:
    """Resolve the visitor's shop session, issuing a new id when none was sent"""
    session_id = resolve_session_id(request)

    if not session_id:
        session_id = uuid.uuid4().hex
        response.set_cookie(
            settings.SESSION_COOKIE_NAME,
            session_id,
            httponly=True,
            samesite="lax",
            secure=settings.is_production,
        )

    response.headers[SESSION_HEADER] = session_id
    return await registry.get_session(session_id)
