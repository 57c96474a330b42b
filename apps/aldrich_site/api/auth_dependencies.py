"""
Authentication dependencies for FastAPI routes.

The signed-in user is resolved per request into a SessionContext and passed
to handlers through Depends(); nothing about the session is stored globally.
"""

import logging
from dataclasses import dataclass
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from aldrich_site.services import auth_service, user_service
from aldrich_site.database.db import get_db_session

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

SIGN_IN_PATH = "/account"


class SignInRequired(Exception):
    """Raised when a member-only action is attempted without a valid session."""

    def __init__(self, detail: str = "Sign in to continue."):
        super().__init__(detail)
        self.detail = detail


@dataclass(frozen=True)
class SessionContext:
    """The authenticated user for the current request."""

    user_id: int
    email: str
    session_id: str


async def get_session_context(
    session: Optional[AsyncSession] = Depends(get_db_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[SessionContext]:
    """
    Resolve the bearer token into a SessionContext.

    Returns None for anonymous requests, invalid or expired tokens, revoked
    sessions, when the backend is not configured, and when the session lookup
    fails.
    """
    if credentials is None or session is None:
        return None

    payload = auth_service.verify_token(credentials.credentials)
    if payload is None:
        return None

    user_id = payload.get("user_id")
    session_id = payload.get("session_id")
    if user_id is None or session_id is None:
        return None

    try:
        auth_session = await user_service.get_active_auth_session(session, session_id)
        if auth_session is None or auth_session.user_id != user_id:
            return None
        user = await user_service.get_user_by_id(session, user_id)
    except SQLAlchemyError as e:
        # Backend failure: treat the visitor as anonymous
        logger.warning(f"Could not verify session for user {user_id}: {e}")
        return None
    if user is None:
        return None

    return SessionContext(user_id=user.id, email=user.email, session_id=session_id)


async def require_session(
    context: Optional[SessionContext] = Depends(get_session_context),
) -> SessionContext:
    """Require a signed-in user; anonymous requests get the sign-in redirect."""
    if context is None:
        raise SignInRequired()
    return context


async def get_member_context(
    session: Optional[AsyncSession] = Depends(get_db_session),
    context: Optional[SessionContext] = Depends(get_session_context),
) -> Optional[SessionContext]:
    """
    For member pages that have demo content.

    Without a backend there are no accounts, so the page is served with
    fallback data (None is returned). With a backend, a signed-in user is
    required.
    """
    if session is None:
        return None
    if context is None:
        raise SignInRequired()
    return context
