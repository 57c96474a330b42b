"""
Event service: display formatting, home-page grouping and event sign-ups.

Formatting functions are pure and work on plain event dicts (dates as
"YYYY-MM-DD" strings or date objects). The async functions load rows from
the backend and return them already formatted.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Set
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from aldrich_site.database.fallback_data import FALLBACK_EVENTS
from aldrich_site.database.models import Event, EventSignup, EventStatus
from aldrich_site.services.event_classifier import BestEffortEventClassifier
from aldrich_site.utils.datetime_utils import format_short_date, parse_date_utc, utcnow
import logging

logger = logging.getLogger(__name__)

DATE_TBD = "Date TBD"
FALLBACK_GROUP_SIZE = 4

STATUS_LABELS = {
    EventStatus.SCHEDULED.value: ("Scheduled", "green"),
    EventStatus.POTENTIAL.value: ("Potential", "amber"),
}
UNKNOWN_STATUS = ("TBD", "muted")

EVENT_COLUMNS = (
    "id",
    "title",
    "start_date",
    "end_date",
    "time_info",
    "location",
    "description",
    "status",
    "host_type",
    "registration_program_slug",
    "image_url",
    "sport_slug",
)


def date_label(start, end=None, empty_label: str = "") -> str:
    """
    Human-readable date range for an event.

    Examples:
        >>> date_label("2024-03-15")
        'Mar 15'
        >>> date_label("2024-03-01", "2024-03-05")
        'Mar 1 – 5'
        >>> date_label("2024-03-28", "2024-04-02")
        'Mar 28 – Apr 2'
    """
    start_date = parse_date_utc(start)
    if start_date is None:
        return empty_label

    start_label = format_short_date(start_date)
    end_date = parse_date_utc(end)
    if end_date is None or end_date == start_date:
        return start_label

    same_month = end_date.year == start_date.year and end_date.month == start_date.month
    return f"{start_label} – {format_short_date(end_date, include_month=not same_month)}"


def _status_entry(status):
    if not status:
        return STATUS_LABELS[EventStatus.SCHEDULED.value]
    return STATUS_LABELS.get(status, UNKNOWN_STATUS)


def status_label(status: Optional[str]) -> str:
    """Badge text for an event status. Missing status reads as Scheduled."""
    return _status_entry(status)[0]


def status_tone(status: Optional[str]) -> str:
    """Badge color for an event status."""
    return _status_entry(status)[1]


def primary_date(event: Mapping) -> str:
    """The line shown under an event title: time info, else date range, else Date TBD."""
    time_info = (event.get("time_info") or "").strip()
    if time_info:
        return time_info
    return date_label(event.get("start_date"), event.get("end_date"), empty_label=DATE_TBD)


def sort_by_start_date(events: Iterable[Mapping]) -> List:
    """Ascending by start date; events without a parseable start go last, order kept."""
    def key(event):
        start = parse_date_utc(event.get("start_date"))
        return (start is None, start.toordinal() if start else 0)

    return sorted(events, key=key)


def categorize(events: Iterable[Mapping], classifier=None) -> Dict[str, List]:
    """
    Split events into the "official" and "featured" home-page groups.

    Events are sorted chronologically first. An empty group falls back to the
    first four events so neither section renders empty.

    Args:
        events: Event dicts
        classifier: Object with is_official(event) and is_featured(event);
            defaults to BestEffortEventClassifier

    Returns:
        Dict with "official", "featured" and "all" (chronological) lists
    """
    classifier = classifier or BestEffortEventClassifier()
    ordered = sort_by_start_date(events)

    official = [e for e in ordered if classifier.is_official(e)]
    featured = [e for e in ordered if classifier.is_featured(e)]

    return {
        "official": official or ordered[:FALLBACK_GROUP_SIZE],
        "featured": featured or ordered[:FALLBACK_GROUP_SIZE],
        "all": ordered,
    }


def format_event(event: Mapping, signed_up: Optional[bool] = None) -> Dict:
    """Event dict with display labels added. signed_up is included when known."""
    formatted = dict(event)
    for field in ("start_date", "end_date"):
        value = formatted.get(field)
        if hasattr(value, "isoformat"):
            formatted[field] = value.isoformat()

    formatted.update(
        date_label=date_label(event.get("start_date"), event.get("end_date"), empty_label=DATE_TBD),
        primary_date=primary_date(event),
        status_label=status_label(event.get("status")),
        status_tone=status_tone(event.get("status")),
    )
    if signed_up is not None:
        formatted["signed_up"] = signed_up
    return formatted


def event_to_dict(event: Event) -> Dict:
    return {column: getattr(event, column) for column in EVENT_COLUMNS}


# ──────────────────────────────────────────────────────────────
# Backend access
# ──────────────────────────────────────────────────────────────


async def fetch_events(session: AsyncSession, sport_slug: Optional[str] = None) -> List[Dict]:
    """Raw event rows, ordered by start date (nulls last), optionally for one sport."""
    query = select(Event).order_by(Event.start_date.is_(None), Event.start_date, Event.id)
    if sport_slug:
        query = query.where(Event.sport_slug == sport_slug)
    result = await session.execute(query)
    return [event_to_dict(e) for e in result.scalars().all()]


async def get_signed_up_event_ids(session: AsyncSession, user_id: int) -> Set[int]:
    """IDs of every event the user has signed up for."""
    result = await session.execute(
        select(EventSignup.event_id).where(EventSignup.user_id == user_id)
    )
    return set(result.scalars().all())


async def list_events(session: Optional[AsyncSession], user_id: Optional[int] = None) -> Dict:
    """
    All events, formatted, with signed_up flags for a signed-in user.

    Returns fallback events when the backend is not configured or the
    query fails (message is set in the failure case).
    """
    if session is None:
        return {
            "events": [format_event(e) for e in sort_by_start_date(FALLBACK_EVENTS)],
            "is_fallback": True,
            "message": None,
        }

    try:
        events = await fetch_events(session)
        signed_up = await get_signed_up_event_ids(session, user_id) if user_id else None
    except SQLAlchemyError as e:
        logger.error(f"Error loading events: {e}")
        return {
            "events": [format_event(e) for e in sort_by_start_date(FALLBACK_EVENTS)],
            "is_fallback": True,
            "message": "Could not load events right now.",
        }

    return {
        "events": [
            format_event(e, signed_up=(e["id"] in signed_up) if signed_up is not None else None)
            for e in events
        ],
        "is_fallback": False,
        "message": None,
    }


def _fallback_event(event_id: int) -> Optional[Dict]:
    match = next((e for e in FALLBACK_EVENTS if e["id"] == event_id), None)
    return format_event(match) if match else None


async def get_event(session: Optional[AsyncSession], event_id: int) -> Optional[Dict]:
    """One formatted event, or None if it doesn't exist. Demo events are used without a backend."""
    if session is None:
        return _fallback_event(event_id)

    try:
        result = await session.execute(select(Event).where(Event.id == event_id))
        event = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Error loading event {event_id}: {e}")
        return _fallback_event(event_id)
    return format_event(event_to_dict(event)) if event else None


async def get_sport_events(session: Optional[AsyncSession], sport_slug: str) -> List[Dict]:
    """
    Events for a sport page.

    When no event is tagged with the sport, every event is returned so the
    page still has something to show.
    """
    if session is None:
        source = FALLBACK_EVENTS
    else:
        try:
            source = await fetch_events(session)
        except SQLAlchemyError as e:
            logger.error(f"Error loading events for sport {sport_slug}: {e}")
            source = FALLBACK_EVENTS

    ordered = sort_by_start_date(source)
    matching = [e for e in ordered if e.get("sport_slug") == sport_slug]
    return [format_event(e) for e in (matching or ordered)]


async def sign_up_for_event(session: AsyncSession, event_id: int, user_id: int) -> Dict:
    """
    Record that a user plans to attend an event.

    Signing up twice is a no-op; there is at most one row per (event, user).

    Raises:
        ValueError: If the event doesn't exist
    """
    result = await session.execute(select(Event.id).where(Event.id == event_id))
    if result.scalar_one_or_none() is None:
        raise ValueError("Event not found")

    result = await session.execute(
        select(EventSignup).where(
            EventSignup.event_id == event_id, EventSignup.user_id == user_id
        )
    )
    existing = result.scalar_one_or_none()
    if existing is None:
        session.add(EventSignup(event_id=event_id, user_id=user_id, created_at=utcnow()))
        await session.flush()
        logger.info(f"User {user_id} signed up for event {event_id}")

    return {"event_id": event_id, "signed_up": True, "message": "Added to My Events."}


async def get_user_events(session: Optional[AsyncSession], user_id: int) -> List[Dict]:
    """Events the user signed up for, soonest first. Empty when the backend is unavailable."""
    if session is None:
        return []

    try:
        result = await session.execute(
            select(Event)
            .join(EventSignup, EventSignup.event_id == Event.id)
            .where(EventSignup.user_id == user_id)
        )
    except SQLAlchemyError as e:
        logger.error(f"Error loading events for user {user_id}: {e}")
        return []
    events = [event_to_dict(e) for e in result.scalars().all()]
    return [format_event(e, signed_up=True) for e in sort_by_start_date(events)]
