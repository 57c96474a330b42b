"""
Player profiles: signup profile creation, owner edits and public profile pages.
"""

from typing import Any, Dict, List, Mapping, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from aldrich_site.database.fallback_data import FALLBACK_PROFILE, FALLBACK_PUBLIC_PROFILE
from aldrich_site.database.models import Profile
from aldrich_site.services import friend_service, team_service
import logging

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "name",
    "age",
    "avatar_url",
    "positions",
    "skill_level",
    "sports",
    "about",
    "height_cm",
    "weight_lbs",
)
LIST_FIELDS = ("positions", "sports")
NUMBER_FIELDS = ("age", "skill_level", "height_cm", "weight_lbs")


def parse_csv_list(value: Union[str, List[str], None]) -> List[str]:
    """
    Split a comma-separated form value into trimmed, non-empty items.

    Lists are accepted too (items are trimmed the same way).

    Examples:
        >>> parse_csv_list(" Forward, Wing ,, ")
        ['Forward', 'Wing']
    """
    if value is None:
        return []
    items = value if isinstance(value, list) else str(value).split(",")
    return [str(item).strip() for item in items if str(item).strip()]


def parse_number(value: Any) -> Optional[int]:
    """Whole number from a form value; None for blank, non-numeric or out-of-range input."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return None


def _clean_profile_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize list and number inputs; drop keys that aren't profile columns."""
    cleaned = {}
    for key, value in fields.items():
        if key not in PROFILE_FIELDS:
            continue
        if key in LIST_FIELDS:
            value = parse_csv_list(value)
        elif key in NUMBER_FIELDS:
            value = parse_number(value)
        elif isinstance(value, str):
            value = value.strip()
        cleaned[key] = value

    skill_level = cleaned.get("skill_level")
    if skill_level is not None and not 1 <= skill_level <= 10:
        raise ValueError("Skill level must be between 1 and 10")
    if "name" in cleaned and not cleaned["name"]:
        raise ValueError("Name is required")
    return cleaned


def profile_to_dict(profile: Profile) -> Dict:
    data = {"id": profile.id}
    for field in PROFILE_FIELDS:
        data[field] = getattr(profile, field)
    return data


async def get_profile_row(session: AsyncSession, user_id: int) -> Optional[Profile]:
    result = await session.execute(select(Profile).where(Profile.id == user_id))
    return result.scalar_one_or_none()


async def upsert_profile(session: AsyncSession, user_id: int, fields: Mapping[str, Any]) -> Dict:
    """
    Create the profile for a user, or overwrite the given fields if it exists.

    Called at signup with the signup form values.

    Raises:
        ValueError: If the name is missing or skill level is out of range
    """
    cleaned = _clean_profile_fields(fields)
    profile = await get_profile_row(session, user_id)
    if profile is None:
        if not cleaned.get("name"):
            raise ValueError("Name is required")
        profile = Profile(id=user_id, **cleaned)
        session.add(profile)
    else:
        for key, value in cleaned.items():
            setattr(profile, key, value)
    await session.flush()
    return profile_to_dict(profile)


async def get_profile(session: Optional[AsyncSession], user_id: Optional[int]) -> Dict:
    """
    The signed-in user's own profile.

    The demo profile is returned when the backend is unconfigured, the
    profile row is missing, or the query fails.
    """
    fallback = {**FALLBACK_PROFILE, "is_fallback": True}
    if session is None or user_id is None:
        return fallback
    try:
        profile = await get_profile_row(session, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Error loading profile {user_id}: {e}")
        return fallback
    if profile is None:
        return fallback
    return {**profile_to_dict(profile), "is_fallback": False}


async def update_profile(
    session: AsyncSession, profile_id: int, user_id: int, updates: Mapping[str, Any]
) -> Dict:
    """
    Apply the owner's edits to a profile.

    Args:
        session: Database session
        profile_id: Profile being edited
        user_id: Signed-in user (must own the profile)
        updates: Fields to change; omitted fields are left as-is

    Raises:
        ValueError: If not the owner, the profile doesn't exist, or input is invalid
    """
    if profile_id != user_id:
        raise ValueError("Not authorized to edit this profile")

    profile = await get_profile_row(session, profile_id)
    if profile is None:
        raise ValueError("Profile not found")

    for key, value in _clean_profile_fields(updates).items():
        setattr(profile, key, value)
    await session.flush()
    logger.info(f"Updated profile {profile_id}")
    return profile_to_dict(profile)


async def get_public_profile(session: Optional[AsyncSession], profile_id: int) -> Optional[Dict]:
    """
    Public profile page: profile details, team memberships and accepted friends.

    Returns:
        Profile dict with "teams" and "friends", or None if the profile doesn't exist
    """
    fallback = {**FALLBACK_PUBLIC_PROFILE, "id": profile_id, "teams": [], "friends": [],
                "is_fallback": True}
    if session is None:
        return fallback

    try:
        profile = await get_profile_row(session, profile_id)
    except SQLAlchemyError as e:
        logger.error(f"Error loading public profile {profile_id}: {e}")
        return fallback
    if profile is None:
        return None

    data = profile_to_dict(profile)
    # Height and weight stay on the owner's account page
    data.pop("height_cm", None)
    data.pop("weight_lbs", None)

    try:
        teams = await team_service.fetch_teams(session, profile_id)
    except SQLAlchemyError as e:
        logger.warning(f"Could not load teams for profile {profile_id}: {e}")
        teams = []
    try:
        friends = await friend_service.get_public_friends(session, profile_id)
    except SQLAlchemyError as e:
        logger.warning(f"Could not load friends for profile {profile_id}: {e}")
        friends = []

    return {**data, "teams": teams, "friends": friends, "is_fallback": False}
