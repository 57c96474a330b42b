"""Public player profile route handlers."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from aldrich_site.database.db import get_db_session
from aldrich_site.services import profile_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/profiles/{profile_id}")
async def get_public_profile(
    profile_id: int,
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """A player's public profile with team memberships and friends."""
    try:
        profile = await profile_service.get_public_profile(session, profile_id)
    except Exception as e:
        logger.error(f"Error loading public profile {profile_id}: {e}")
        raise HTTPException(status_code=500, detail="Could not load this profile.")
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile
