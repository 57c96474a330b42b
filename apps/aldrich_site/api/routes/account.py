"""Member account route handlers: own profile, teams and My Events."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from aldrich_site.database.db import get_db_session
from aldrich_site.services import event_service, profile_service, team_service
from aldrich_site.api.auth_dependencies import (
    SessionContext,
    get_member_context,
    require_session,
)
from aldrich_site.models.schemas import (
    ProfileResponse,
    ProfileUpdate,
    TeamCreate,
    TeamListResponse,
    TeamResponse,
    EventResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/account/profile", response_model=ProfileResponse)
async def get_my_profile(
    context: Optional[SessionContext] = Depends(get_member_context),
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """The signed-in user's profile (demo profile when the backend is unavailable)."""
    return await profile_service.get_profile(session, context.user_id if context else None)


@router.patch("/api/account/profile", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdate,
    context: SessionContext = Depends(require_session),
    session: AsyncSession = Depends(get_db_session),
):
    """Update the signed-in user's own profile."""
    try:
        updated = await profile_service.update_profile(
            session,
            context.user_id,
            context.user_id,
            payload.model_dump(exclude_unset=True),
        )
        return {**updated, "is_fallback": False}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating profile {context.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Could not save your profile.")


@router.get("/api/account/teams", response_model=TeamListResponse)
async def get_my_teams(
    context: Optional[SessionContext] = Depends(get_member_context),
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """The signed-in user's team memberships, newest first."""
    return await team_service.list_teams(session, context.user_id if context else None)


@router.post("/api/account/teams", response_model=TeamResponse)
async def add_my_team(
    payload: TeamCreate,
    context: SessionContext = Depends(require_session),
    session: AsyncSession = Depends(get_db_session),
):
    """Add a team membership for the signed-in user."""
    try:
        return await team_service.add_team(
            session, context.user_id, payload.team_name, payload.role, payload.logo_url
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error adding team for user {context.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Could not add your team.")


@router.get("/api/account/events", response_model=List[EventResponse])
async def get_my_events(
    context: Optional[SessionContext] = Depends(get_member_context),
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """Events the signed-in user has signed up for, soonest first."""
    if context is None:
        return []
    return await event_service.get_user_events(session, context.user_id)
