"""
Team memberships for the account "My Team" page and public profiles.
"""

from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from aldrich_site.database.fallback_data import FALLBACK_TEAMS
from aldrich_site.database.models import TeamMembership
from aldrich_site.utils.datetime_utils import utcnow
import logging

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "Player"


def team_to_dict(team: TeamMembership) -> Dict:
    return {
        "id": team.id,
        "team_name": team.team_name,
        "role": team.role or DEFAULT_ROLE,
        "logo_url": team.logo_url,
    }


async def fetch_teams(session: AsyncSession, user_id: int) -> List[Dict]:
    """A user's team memberships, newest first."""
    result = await session.execute(
        select(TeamMembership)
        .where(TeamMembership.user_id == user_id)
        .order_by(TeamMembership.created_at.desc(), TeamMembership.id.desc())
    )
    return [team_to_dict(t) for t in result.scalars().all()]


async def list_teams(session: Optional[AsyncSession], user_id: Optional[int]) -> Dict:
    """
    Teams for the signed-in user.

    Demo teams are shown when the backend is unconfigured or the query fails.
    """
    if session is None:
        return {"teams": list(FALLBACK_TEAMS), "is_fallback": True}
    try:
        teams = await fetch_teams(session, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Error loading teams for user {user_id}: {e}")
        return {"teams": list(FALLBACK_TEAMS), "is_fallback": True}
    return {"teams": teams, "is_fallback": False}


async def add_team(
    session: AsyncSession,
    user_id: int,
    team_name: str,
    role: Optional[str] = None,
    logo_url: Optional[str] = None,
) -> Dict:
    """
    Add a team membership for a user.

    Raises:
        ValueError: If team_name is blank or the user is already on the team
    """
    team_name = (team_name or "").strip()
    if not team_name:
        raise ValueError("Team name is required")

    result = await session.execute(
        select(TeamMembership.id).where(
            TeamMembership.user_id == user_id, TeamMembership.team_name == team_name
        )
    )
    if result.scalar_one_or_none() is not None:
        raise ValueError("You are already on this team")

    team = TeamMembership(
        user_id=user_id,
        team_name=team_name,
        role=(role or "").strip() or None,
        logo_url=logo_url,
        created_at=utcnow(),
    )
    session.add(team)
    await session.flush()
    await session.refresh(team)
    return team_to_dict(team)
