"""
Seed the sports catalog and a starter registration program on startup.

Idempotent: only creates rows that don't exist yet. Existing rows are never
overwritten, since admins edit sports and program fields in the backend.
"""

import logging

from sqlalchemy import select

from aldrich_site.database import db
from aldrich_site.database.fallback_data import FALLBACK_SPORTS
from aldrich_site.database.models import RegistrationField, RegistrationProgram, Sport

logger = logging.getLogger(__name__)

STARTER_PROGRAM = {
    "slug": "soccer-summer-league",
    "name": "Summer Soccer League",
    "sport_slug": "soccer",
    "waiver_url": None,
}

STARTER_FIELDS = [
    {"label": "Team name", "name": "team_name", "type": "text", "required": True,
     "placeholder": "e.g. Laurel FC"},
    {"label": "Captain email", "name": "captain_email", "type": "email", "required": True},
    {"label": "Captain phone", "name": "captain_phone", "type": "tel", "required": False},
    {"label": "Division", "name": "division", "type": "select", "required": True,
     "options": ["Open", "Coed", "Over 30"]},
    {"label": "Roster", "name": "roster", "type": "file", "required": False,
     "help": "Upload a roster spreadsheet or PDF."},
    {"label": "How did you hear about us?", "name": "referral_source", "type": "text",
     "required": False},
    {"label": "I accept the league waiver", "name": "waiver_accepted", "type": "checkbox",
     "required": True},
]


async def _seed_sports(session) -> int:
    """Insert any missing sports. Returns count of new rows."""
    result = await session.execute(select(Sport.id))
    existing = set(result.scalars().all())

    created = 0
    for sport in FALLBACK_SPORTS:
        if sport["id"] in existing:
            continue
        session.add(Sport(**sport))
        created += 1

    await session.flush()
    return created


async def _seed_starter_program(session) -> bool:
    """Create the starter program with its fields if its slug is unused."""
    result = await session.execute(
        select(RegistrationProgram.id).where(
            RegistrationProgram.slug == STARTER_PROGRAM["slug"]
        )
    )
    if result.scalar_one_or_none():
        return False

    program = RegistrationProgram(active=True, **STARTER_PROGRAM)
    session.add(program)
    await session.flush()

    for order, field in enumerate(STARTER_FIELDS):
        session.add(RegistrationField(program_id=program.id, sort_order=order, **field))
    await session.flush()
    return True


async def seed_site():
    """Seed sports and the starter registration program."""
    if not db.is_configured():
        logger.info("Backend not configured; skipping seed data")
        return

    async with db.AsyncSessionLocal() as session:
        sports_created = await _seed_sports(session)
        program_created = await _seed_starter_program(session)
        await session.commit()

    logger.info(
        f"Seed complete: {sports_created} new sports, "
        f"starter program {'created' if program_created else 'already present'}"
    )
