"""
Sports catalog, the sports page filter and per-sport pages.
"""

from typing import Dict, List, Mapping, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from aldrich_site.database.fallback_data import (
    ACTIVITY_LABELS,
    DEFAULT_ACTIVITY_LABEL,
    FALLBACK_SPORTS,
    SPORT_IMAGES,
)
from aldrich_site.database.models import RegistrationProgram, Sport
from aldrich_site.services import event_service
from aldrich_site.utils.datetime_utils import format_long_date
from aldrich_site.utils.slugify import slugify, sport_id
import logging

logger = logging.getLogger(__name__)

ALL_SPORTS = "all"


def sport_card(sport: Mapping) -> Dict:
    """Sport row plus its card image and activity line."""
    slug = sport_id(sport)
    title_slug = slugify(sport.get("title") or "")
    return {
        "id": slug,
        "title": sport.get("title"),
        "players_per_team": sport.get("players_per_team"),
        "gender": sport.get("gender"),
        "short_description": sport.get("short_description"),
        "image": sport.get("image_url") or SPORT_IMAGES.get(slug) or SPORT_IMAGES.get(title_slug),
        "activities": (
            sport.get("short_description")
            or ACTIVITY_LABELS.get(slug)
            or ACTIVITY_LABELS.get(title_slug)
            or DEFAULT_ACTIVITY_LABEL
        ),
    }


def filter_sports(sports: Sequence[Mapping], selected: Optional[str] = ALL_SPORTS) -> List[Dict]:
    """Cards matching the dropdown selection ("all" keeps everything)."""
    if not selected or selected == ALL_SPORTS:
        return list(sports)
    return [
        s for s in sports
        if s["id"] == selected or slugify(s.get("title") or "") == selected
    ]


def filter_options(sports: Sequence[Mapping]) -> List[Dict]:
    return [{"value": ALL_SPORTS, "label": "All Sports"}] + [
        {"value": s["id"], "label": s["title"]} for s in sports
    ]


def _sport_to_dict(sport: Sport) -> Dict:
    return {
        "id": sport.id,
        "title": sport.title,
        "players_per_team": sport.players_per_team,
        "gender": sport.gender,
        "short_description": sport.short_description,
        "image_url": sport.image_url,
    }


async def fetch_sports(session: Optional[AsyncSession]) -> Dict:
    """Sport cards ordered by title, or the built-in list if the backend is unavailable."""
    fallback = {"sports": [sport_card(s) for s in FALLBACK_SPORTS], "is_fallback": True}
    if session is None:
        return fallback
    try:
        result = await session.execute(select(Sport).order_by(Sport.title))
        rows = [_sport_to_dict(s) for s in result.scalars().all()]
    except SQLAlchemyError as e:
        logger.error(f"Error loading sports: {e}")
        return fallback
    return {"sports": [sport_card(s) for s in rows], "is_fallback": False}


async def list_sports(session: Optional[AsyncSession], selected: Optional[str] = ALL_SPORTS) -> Dict:
    """Sports page payload: filter options plus the cards for the selection."""
    loaded = await fetch_sports(session)
    sports = loaded["sports"]
    return {
        "selected": selected or ALL_SPORTS,
        "options": filter_options(sports),
        "sports": filter_sports(sports, selected),
        "is_fallback": loaded["is_fallback"],
    }


async def get_sport_page(session: Optional[AsyncSession], slug: str) -> Optional[Dict]:
    """
    Per-sport page: the sport, its events and open registration programs.

    Events fall back to every event when none are tagged with the sport.

    Returns:
        Page dict, or None if the sport doesn't exist
    """
    loaded = await fetch_sports(session)
    sport = next((s for s in loaded["sports"] if s["id"] == slug), None)
    if sport is None:
        return None

    events = await event_service.get_sport_events(session, slug)
    for event in events:
        event["display_date"] = format_long_date(event.get("start_date"))

    programs: List[Dict] = []
    if session is not None:
        try:
            result = await session.execute(
                select(RegistrationProgram.slug, RegistrationProgram.name)
                .where(
                    RegistrationProgram.sport_slug == slug,
                    RegistrationProgram.active.is_(True),
                )
                .order_by(RegistrationProgram.name)
            )
            programs = [{"slug": row.slug, "name": row.name} for row in result.all()]
        except SQLAlchemyError as e:
            logger.warning(f"Could not load registration programs for {slug}: {e}")

    return {
        "sport": sport,
        "events": events,
        "registration_programs": programs,
        "is_fallback": loaded["is_fallback"],
    }
