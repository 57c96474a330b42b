"""Friend system route handlers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from aldrich_site.api.routes import limiter
from aldrich_site.database.db import get_db_session
from aldrich_site.services import friend_service
from aldrich_site.api.auth_dependencies import (
    SessionContext,
    get_member_context,
    require_session,
)
from aldrich_site.models.schemas import (
    FriendOverviewResponse,
    FriendRequestCreate,
    FriendRequestRespond,
    FriendRequestResponse,
    ProfileSearchResult,
    SendFriendRequestResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/friends", response_model=FriendOverviewResponse)
async def get_friends(
    context: Optional[SessionContext] = Depends(get_member_context),
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """Friends, incoming requests and outgoing requests for the signed-in user."""
    return await friend_service.get_friend_overview(session, context.user_id if context else None)


@router.post("/api/friends/requests", response_model=SendFriendRequestResponse)
async def send_friend_request(
    payload: FriendRequestCreate,
    context: SessionContext = Depends(require_session),
    session: AsyncSession = Depends(get_db_session),
):
    """Send a friend request. Duplicates return created=false and write nothing."""
    try:
        return await friend_service.send_friend_request(
            session, context.user_id, payload.receiver_id
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error sending friend request: {e}")
        raise HTTPException(status_code=500, detail="Could not send friend request.")


@router.post("/api/friends/requests/{request_id}/respond", response_model=FriendRequestResponse)
async def respond_to_friend_request(
    request_id: int,
    payload: FriendRequestRespond,
    context: SessionContext = Depends(require_session),
    session: AsyncSession = Depends(get_db_session),
):
    """Accept or decline a pending friend request."""
    try:
        return await friend_service.respond_to_friend_request(
            session, request_id, context.user_id, payload.status
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error responding to friend request {request_id}: {e}")
        raise HTTPException(status_code=500, detail="Could not update friend request.")


@router.get("/api/friends/search", response_model=List[ProfileSearchResult])
@limiter.limit("60/minute")
async def search_profiles(
    request: Request,
    q: str = Query("", max_length=100),
    context: SessionContext = Depends(require_session),
    session: AsyncSession = Depends(get_db_session),
):
    """Find players by name, excluding yourself, friends and open requests."""
    try:
        return await friend_service.search_profiles(session, context.user_id, q)
    except Exception as e:
        logger.error(f"Error searching profiles: {e}")
        raise HTTPException(status_code=500, detail="Search is unavailable right now.")
