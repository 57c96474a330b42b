"""
User accounts and signed-in sessions.
"""

from datetime import timedelta
from typing import Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from aldrich_site.database.models import AuthSession, User
from aldrich_site.services import auth_service
from aldrich_site.utils.datetime_utils import utcnow
import logging

logger = logging.getLogger(__name__)


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, email: str, password: str) -> User:
    """
    Create a user account.

    Args:
        session: Database session
        email: Email address (normalized to lowercase)
        password: Plain-text password, hashed before storage

    Returns:
        The new User

    Raises:
        ValueError: If the email is invalid, already registered, or the password too short
    """
    email = auth_service.normalize_email(email)
    auth_service.validate_password(password)

    if await get_user_by_email(session, email):
        raise ValueError("An account with this email already exists")

    user = User(email=email, password_hash=auth_service.hash_password(password))
    session.add(user)
    await session.flush()
    await session.refresh(user)
    logger.info(f"Created user {user.id}")
    return user


async def authenticate_user(session: AsyncSession, email: str, password: str) -> Optional[User]:
    """Return the user if the email/password pair is valid, else None."""
    user = await get_user_by_email(session, email or "")
    if user is None or not auth_service.verify_password(password or "", user.password_hash):
        return None
    return user


async def create_auth_session(session: AsyncSession, user_id: int) -> Dict:
    """
    Start a signed-in session and issue its access token.

    Returns:
        Dict with access_token, token_type, expires_at and user_id
    """
    lifetime = timedelta(minutes=auth_service.ACCESS_TOKEN_EXPIRE_MINUTES)
    auth_session = AuthSession(
        user_id=user_id,
        token_id=auth_service.generate_session_token_id(),
        created_at=utcnow(),
        expires_at=utcnow() + lifetime,
    )
    session.add(auth_session)
    await session.flush()

    token = auth_service.create_access_token(
        {"user_id": user_id, "session_id": auth_session.token_id}, expires_delta=lifetime
    )
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_at": auth_session.expires_at.isoformat(),
        "user_id": user_id,
    }


async def get_active_auth_session(session: AsyncSession, token_id: str) -> Optional[AuthSession]:
    """The session row for token_id if it is neither revoked nor expired."""
    result = await session.execute(
        select(AuthSession).where(
            AuthSession.token_id == token_id,
            AuthSession.revoked_at.is_(None),
        )
    )
    auth_session = result.scalar_one_or_none()
    if auth_session is None:
        return None

    expires_at = auth_session.expires_at
    if expires_at.tzinfo is None:
        # SQLite drops the offset; stored values are UTC
        expires_at = expires_at.replace(tzinfo=utcnow().tzinfo)
    if expires_at <= utcnow():
        return None
    return auth_session


async def revoke_auth_session(session: AsyncSession, token_id: str) -> bool:
    """Sign out: mark the session revoked. Returns False if it was already inactive."""
    auth_session = await get_active_auth_session(session, token_id)
    if auth_session is None:
        return False
    auth_session.revoked_at = utcnow()
    await session.flush()
    logger.info(f"Revoked session for user {auth_session.user_id}")
    return True
