"""Event listing and sign-up route handlers."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from aldrich_site.api.routes import require_backend
from aldrich_site.database.db import get_db_session
from aldrich_site.services import event_service
from aldrich_site.api.auth_dependencies import (
    SessionContext,
    SignInRequired,
    get_session_context,
)
from aldrich_site.models.schemas import (
    EventListResponse,
    EventResponse,
    EventSignupResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/events", response_model=EventListResponse)
async def list_events(
    context: Optional[SessionContext] = Depends(get_session_context),
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """All events in date order; signed_up is set when a user is signed in."""
    return await event_service.list_events(session, context.user_id if context else None)


@router.get("/api/events/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """One event with its display labels."""
    event = await event_service.get_event(session, event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.post("/api/events/{event_id}/signup", response_model=EventSignupResponse)
async def sign_up_for_event(
    event_id: int,
    context: Optional[SessionContext] = Depends(get_session_context),
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """Add an event to the signed-in user's My Events."""
    require_backend(session)
    if context is None:
        raise SignInRequired("Sign in to join events and track them in My Events.")
    try:
        return await event_service.sign_up_for_event(session, event_id, context.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error saving sign-up for event {event_id}: {e}")
        raise HTTPException(status_code=500, detail="Could not save your sign-up. Please try again.")
