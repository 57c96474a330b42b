"""
Public API routes. No authentication required.

Read-only content for the informational pages: navigation, home page event
groups, the sports catalog and per-sport pages, and static page copy.
All routes are prefixed with /api/public.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from aldrich_site.database.db import get_db_session
from aldrich_site.services import site_content, sports_service

logger = logging.getLogger(__name__)


async def _cache_public(response: Response):
    """Set Cache-Control headers on all public API responses (5min TTL)."""
    response.headers["Cache-Control"] = "public, max-age=300, s-maxage=300"


public_router = APIRouter(
    prefix="/api/public", tags=["public"], dependencies=[Depends(_cache_public)]
)


@public_router.get("/navigation")
async def get_navigation():
    """Header, account and social links."""
    return site_content.get_navigation()


@public_router.get("/home")
async def get_home(session: Optional[AsyncSession] = Depends(get_db_session)):
    """Home page with official and featured event groups."""
    return await site_content.get_home_page(session)


@public_router.get("/sports")
async def list_sports(
    sport: str = Query(sports_service.ALL_SPORTS, description="Sport slug or 'all'"),
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """Sports catalog, filtered by the sports page dropdown."""
    return await sports_service.list_sports(session, sport)


@public_router.get("/sports/{slug}")
async def get_sport_page(slug: str, session: Optional[AsyncSession] = Depends(get_db_session)):
    """A sport's page: details, events and open registration programs."""
    try:
        page = await sports_service.get_sport_page(session, slug)
    except Exception:
        logger.error(f"Error building sport page {slug}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
    if page is None:
        raise HTTPException(status_code=404, detail="Sport not found")
    return page


@public_router.get("/pages/{name}")
async def get_page(name: str):
    """Copy for community, contact, sponsors, register and leagues pages."""
    page = site_content.get_static_page(name)
    if page is None:
        raise HTTPException(status_code=404, detail="Page not found")
    return page
