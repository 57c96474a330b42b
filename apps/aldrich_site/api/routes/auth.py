"""Authentication route handlers."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from aldrich_site.api.routes import limiter, require_backend, INVALID_CREDENTIALS_RESPONSE
from aldrich_site.database.db import get_db_session
from aldrich_site.services import profile_service, user_service
from aldrich_site.api.auth_dependencies import (
    SessionContext,
    get_session_context,
    require_session,
)
from aldrich_site.models.schemas import (
    SignupRequest,
    SigninRequest,
    AuthResponse,
    SessionResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/auth/signup", response_model=AuthResponse)
@limiter.limit("10/minute")
async def signup(
    request: Request,
    payload: SignupRequest,
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """Create an account with its player profile and sign the user in."""
    require_backend(session)
    try:
        user = await user_service.create_user(session, payload.email, payload.password)
        await profile_service.upsert_profile(
            session,
            user.id,
            {
                "name": payload.name,
                "age": payload.age,
                "positions": payload.positions,
                "sports": payload.sports,
                "skill_level": payload.skill_level,
                "about": payload.about,
            },
        )
        return await user_service.create_auth_session(session, user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error during signup: {e}")
        raise HTTPException(status_code=500, detail="Unable to sign up. Check your inputs.")


@router.post("/api/auth/signin", response_model=AuthResponse)
@limiter.limit("10/minute")
async def signin(
    request: Request,
    payload: SigninRequest,
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """Sign in with email and password."""
    require_backend(session)
    user = await user_service.authenticate_user(session, payload.email, payload.password)
    if user is None:
        raise INVALID_CREDENTIALS_RESPONSE
    return await user_service.create_auth_session(session, user.id)


@router.post("/api/auth/signout")
async def signout(
    context: SessionContext = Depends(require_session),
    session: AsyncSession = Depends(get_db_session),
):
    """Sign out, revoking the current session."""
    await user_service.revoke_auth_session(session, context.session_id)
    return {"status": "success", "message": "Signed out."}


@router.get("/api/auth/session", response_model=SessionResponse)
async def get_session(
    context: Optional[SessionContext] = Depends(get_session_context),
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """Who is signed in, with the name and avatar shown in the header."""
    if context is None:
        return SessionResponse(signed_in=False)

    profile = await profile_service.get_profile_row(session, context.user_id)
    return SessionResponse(
        signed_in=True,
        user_id=context.user_id,
        email=context.email,
        name=profile.name if profile else None,
        avatar_url=profile.avatar_url if profile else None,
    )
