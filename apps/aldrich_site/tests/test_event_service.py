"""
Tests for event_service: date labels, status badges, ordering, home-page
grouping and event sign-ups.
"""

from datetime import date

import pytest
from sqlalchemy import func, select

from aldrich_site.database.models import Event, EventSignup
from aldrich_site.services import event_service


# ============================================================================
# date_label / primary_date
# ============================================================================


class TestDateLabel:
    """Tests for date_label()."""

    def test_start_only(self):
        assert event_service.date_label("2024-03-15") == "Mar 15"

    def test_same_day_range_is_single_label(self):
        assert event_service.date_label("2024-03-15", "2024-03-15") == "Mar 15"

    def test_same_month_collapses_end(self):
        assert event_service.date_label("2024-03-01", "2024-03-05") == "Mar 1 – 5"

    def test_crossing_month(self):
        assert event_service.date_label("2024-03-28", "2024-04-02") == "Mar 28 – Apr 2"

    def test_same_month_different_year(self):
        assert event_service.date_label("2023-12-30", "2024-12-02") == "Dec 30 – Dec 2"

    def test_no_start_uses_empty_label(self):
        assert event_service.date_label(None, "2024-03-05") == ""
        assert event_service.date_label("not-a-date", empty_label="Date TBD") == "Date TBD"

    def test_unparseable_end_ignored(self):
        assert event_service.date_label("2024-03-15", "soon") == "Mar 15"

    def test_accepts_date_objects(self):
        assert event_service.date_label(date(2024, 7, 4)) == "Jul 4"

    def test_no_timezone_shift_at_month_boundary(self):
        assert event_service.date_label("2024-03-01") == "Mar 1"


class TestPrimaryDate:
    """Tests for primary_date()."""

    def test_time_info_wins(self):
        event = {"time_info": "  Saturdays 9 AM ", "start_date": "2024-03-15"}
        assert event_service.primary_date(event) == "Saturdays 9 AM"

    def test_blank_time_info_falls_back_to_dates(self):
        event = {"time_info": "   ", "start_date": "2024-03-01", "end_date": "2024-03-05"}
        assert event_service.primary_date(event) == "Mar 1 – 5"

    def test_nothing_known(self):
        assert event_service.primary_date({}) == "Date TBD"


# ============================================================================
# Status badges
# ============================================================================


@pytest.mark.parametrize(
    "status,label,tone",
    [
        ("scheduled", "Scheduled", "green"),
        ("potential", "Potential", "amber"),
        ("tbd", "TBD", "muted"),
        ("cancelled", "TBD", "muted"),
        (None, "Scheduled", "green"),
        ("", "Scheduled", "green"),
    ],
)
def test_status_badges(status, label, tone):
    assert event_service.status_label(status) == label
    assert event_service.status_tone(status) == tone


# ============================================================================
# Ordering and grouping
# ============================================================================


def test_sort_by_start_date_puts_missing_last():
    events = [
        {"id": 1, "start_date": None},
        {"id": 2, "start_date": "2024-05-01"},
        {"id": 3, "start_date": "2024-01-01"},
    ]
    ordered = event_service.sort_by_start_date(events)
    assert [e["start_date"] for e in ordered] == ["2024-01-01", "2024-05-01", None]


def test_sort_is_stable_for_equal_and_missing_dates():
    events = [
        {"id": 1, "start_date": "bad"},
        {"id": 2, "start_date": "2024-02-01"},
        {"id": 3, "start_date": None},
        {"id": 4, "start_date": "2024-02-01"},
    ]
    ordered = event_service.sort_by_start_date(events)
    assert [e["id"] for e in ordered] == [2, 4, 1, 3]


class TestCategorize:
    """Tests for categorize()."""

    def test_host_type_is_authoritative(self):
        events = [
            # Promotional keywords don't matter when host_type is set
            {"id": 1, "title": "Charity Cup", "host_type": "aldrich", "start_date": "2024-01-01"},
            {"id": 2, "title": "League Night", "host_type": "partner", "status": "scheduled",
             "start_date": "2024-01-02"},
            {"id": 3, "title": "Aldrich Open", "host_type": "other", "start_date": "2024-01-03"},
        ]
        groups = event_service.categorize(events)
        assert [e["id"] for e in groups["official"]] == [1]
        assert [e["id"] for e in groups["featured"]] == [2]

    def test_keyword_fallback_without_host_type(self):
        events = [
            {"id": 1, "title": "Summer Fundraiser", "status": "tbd", "start_date": "2024-06-01"},
            {"id": 2, "title": "Pickup", "location": "Aldrich Complex", "status": "tbd",
             "start_date": "2024-05-01"},
        ]
        groups = event_service.categorize(events)
        assert [e["id"] for e in groups["official"]] == [2]
        assert [e["id"] for e in groups["featured"]] == [1]

    def test_status_fallback_without_host_type(self):
        events = [
            {"id": 1, "title": "Clinic", "status": "scheduled", "start_date": "2024-01-01"},
            {"id": 2, "title": "Ladder", "status": "potential", "start_date": "2024-01-02"},
        ]
        groups = event_service.categorize(events)
        assert [e["id"] for e in groups["official"]] == [1]
        assert [e["id"] for e in groups["featured"]] == [2]

    def test_empty_group_falls_back_to_first_four(self):
        events = [
            {"id": i, "title": f"Game {i}", "host_type": "aldrich", "start_date": f"2024-01-0{i}"}
            for i in range(6, 0, -1)
        ]
        groups = event_service.categorize(events)
        assert len(groups["official"]) == 6
        assert [e["id"] for e in groups["featured"]] == [1, 2, 3, 4]

    def test_groups_are_chronological(self):
        events = [
            {"id": 1, "host_type": "aldrich", "start_date": None},
            {"id": 2, "host_type": "aldrich", "start_date": "2024-02-01"},
        ]
        groups = event_service.categorize(events)
        assert [e["id"] for e in groups["official"]] == [2, 1]

    def test_custom_classifier(self):
        class EverythingFeatured:
            def is_official(self, event):
                return False

            def is_featured(self, event):
                return True

        events = [{"id": 1, "start_date": "2024-01-01"}]
        groups = event_service.categorize(events, classifier=EverythingFeatured())
        assert [e["id"] for e in groups["featured"]] == [1]
        # Empty official group falls back
        assert [e["id"] for e in groups["official"]] == [1]

    def test_empty_input(self):
        groups = event_service.categorize([])
        assert groups == {"official": [], "featured": [], "all": []}


def test_format_event_adds_labels():
    formatted = event_service.format_event(
        {"id": 1, "title": "Cup", "start_date": date(2024, 3, 28), "end_date": date(2024, 4, 2),
         "status": "potential", "time_info": None},
        signed_up=True,
    )
    assert formatted["start_date"] == "2024-03-28"
    assert formatted["date_label"] == "Mar 28 – Apr 2"
    assert formatted["primary_date"] == "Mar 28 – Apr 2"
    assert formatted["status_label"] == "Potential"
    assert formatted["status_tone"] == "amber"
    assert formatted["signed_up"] is True


# ============================================================================
# Database operations
# ============================================================================


async def _add_event(session, title, start_date=None, sport_slug=None, **kwargs):
    event = Event(title=title, start_date=start_date, sport_slug=sport_slug, **kwargs)
    session.add(event)
    await session.flush()
    return event.id


async def _count_signups(session):
    result = await session.execute(select(func.count()).select_from(EventSignup))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_sign_up_twice_leaves_one_row(db_session, make_player):
    user = await make_player("Alex")
    event_id = await _add_event(db_session, "Cup", date(2024, 3, 15))

    first = await event_service.sign_up_for_event(db_session, event_id, user)
    second = await event_service.sign_up_for_event(db_session, event_id, user)

    assert first["message"] == "Added to My Events."
    assert second["signed_up"] is True
    assert await _count_signups(db_session) == 1


@pytest.mark.asyncio
async def test_sign_up_unknown_event_raises(db_session, make_player):
    user = await make_player("Alex")
    with pytest.raises(ValueError, match="Event not found"):
        await event_service.sign_up_for_event(db_session, 404, user)


@pytest.mark.asyncio
async def test_list_events_marks_signed_up(db_session, make_player):
    user = await make_player("Alex")
    later = await _add_event(db_session, "Later", date(2024, 5, 1))
    sooner = await _add_event(db_session, "Sooner", date(2024, 1, 1))
    undated = await _add_event(db_session, "Undated")
    await event_service.sign_up_for_event(db_session, later, user)

    result = await event_service.list_events(db_session, user)

    assert result["is_fallback"] is False
    assert [e["id"] for e in result["events"]] == [sooner, later, undated]
    assert {e["id"]: e["signed_up"] for e in result["events"]} == {
        sooner: False, later: True, undated: False,
    }
    assert result["events"][2]["date_label"] == "Date TBD"


@pytest.mark.asyncio
async def test_list_events_anonymous_has_no_flags(db_session):
    await _add_event(db_session, "Cup", date(2024, 3, 15))
    result = await event_service.list_events(db_session)
    assert "signed_up" not in result["events"][0]


@pytest.mark.asyncio
async def test_list_events_without_backend_uses_fallback():
    result = await event_service.list_events(None)
    assert result["is_fallback"] is True
    assert [e["id"] for e in result["events"]] == [1, 2, 3]
    assert result["events"][1]["date_label"] == "Mar 20 – Apr 20"


@pytest.mark.asyncio
async def test_user_events_sorted_by_start(db_session, make_player):
    user = await make_player("Alex")
    other = await make_player("Sam")
    a = await _add_event(db_session, "A", date(2024, 9, 1))
    b = await _add_event(db_session, "B", date(2024, 2, 1))
    c = await _add_event(db_session, "C", date(2024, 4, 1))
    for event_id in (a, b):
        await event_service.sign_up_for_event(db_session, event_id, user)
    await event_service.sign_up_for_event(db_session, c, other)

    events = await event_service.get_user_events(db_session, user)

    assert [e["id"] for e in events] == [b, a]


@pytest.mark.asyncio
async def test_sport_events_filter_and_fallback(db_session):
    soccer = await _add_event(db_session, "Cup", date(2024, 3, 1), sport_slug="soccer")
    golf = await _add_event(db_session, "Scramble", date(2024, 2, 1), sport_slug="golf")

    assert [e["id"] for e in await event_service.get_sport_events(db_session, "soccer")] == [soccer]
    # No events for the sport: every event is shown
    assert [e["id"] for e in await event_service.get_sport_events(db_session, "esports")] == [
        golf, soccer,
    ]


@pytest.mark.asyncio
async def test_get_event(db_session):
    event_id = await _add_event(db_session, "Cup", date(2024, 3, 15), status="potential")
    event = await event_service.get_event(db_session, event_id)
    assert event["status_label"] == "Potential"
    assert await event_service.get_event(db_session, event_id + 100) is None


@pytest.mark.asyncio
async def test_get_event_falls_back_when_backend_fails(broken_session):
    event = await event_service.get_event(broken_session, 1)
    assert event["title"] == "3v3 Basketball Tournament"
    assert await event_service.get_event(broken_session, 999) is None


@pytest.mark.asyncio
async def test_user_events_empty_when_backend_fails(broken_session):
    assert await event_service.get_user_events(broken_session, 1) == []


@pytest.mark.asyncio
async def test_list_events_falls_back_when_backend_fails(broken_session):
    result = await event_service.list_events(broken_session, 1)
    assert result["is_fallback"] is True
    assert result["message"] == "Could not load events right now."
