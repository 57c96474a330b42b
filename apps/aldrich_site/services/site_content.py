"""
Static site content: navigation, page copy and the home page event groups.
"""

from typing import Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from aldrich_site.services import event_service

NAVIGATION = [
    {"href": "/", "label": "Home"},
    {"href": "/events", "label": "Events"},
    {"href": "/leagues", "label": "Leagues"},
    {"href": "/community", "label": "Community"},
    {"href": "/sponsors", "label": "Sponsors"},
    {"href": "/contact", "label": "Contact"},
    {"href": "/register", "label": "Register"},
]

ACCOUNT_NAVIGATION = [
    {"href": "/account#profile", "label": "Profile"},
    {"href": "/account/events", "label": "My Events"},
    {"href": "/account/team", "label": "My Team"},
    {"href": "/account/friends", "label": "My Friends"},
    {"href": "/events", "label": "Browse Events"},
    {"href": "/register", "label": "Register a Team"},
]

SOCIAL_LINKS = [
    {"href": "https://www.instagram.com/aldrichsportsleague/", "label": "Instagram"},
    {"href": "https://www.facebook.com/profile.php?id=61558144266881", "label": "Facebook"},
]

CONTACT_INFO = {
    "email": "joeandfrancismail@gmail.com",
    "phone": "(631) 644-0871",
    "location": "350 Aldrich Ln, Laurel, NY 11948",
}

COMMUNITY_ARTICLES = [
    {
        "title": "Aldrich Sports League Helps Raise Over $2000 For The American Amputee Soccer Association",
        "blurb": "Fundraiser highlights: $2,124 raised and huge community turnout for the national amputee team.",
        "href": "https://www.usampsoccer.org/post/aldrich-sports-league-helps-raise-over-2000-for-the-american-amputee-soccer-association",
        "date": "Aug 5, 2024",
    },
    {
        "title": "Have a jolly old time at Aldrich Sports League's inaugural Christmas Pickleball Tournament",
        "blurb": "Dec. 20 tournament at Box Pickleball brings holiday spirit, raffles, and community brackets.",
        "href": "https://riverheadnewsreview.timesreview.com/2025/11/130112/have-a-jolly-old-time-at-aldrich-sports-leagues-inaugural-christmas-pickleball-tournament/",
        "date": "Nov 18, 2025",
    },
    {
        "title": "Aldrich Sports League hosts full day of champions",
        "blurb": "Summer Sunday soccer playoffs plus amputee team exhibition raise funds for AASA in Laurel.",
        "href": "https://suffolktimes.timesreview.com/2025/08/aldrich-sports-league-hosts-full-day-of-champions/",
        "date": "Aug 4, 2025",
    },
    {
        "title": "Aldrich Sports League hosts second full-day fundraiser for amputee team",
        "blurb": "Aug. 3 fundraiser returns with soccer playoffs, exhibition match, raffles, and local sponsors.",
        "href": "https://suffolktimes.timesreview.com/2025/07/aldrich-sports-league-to-host-full-day-of-sports-fundraiser/",
        "date": "Jul 21, 2025",
    },
    {
        "title": "Local ballers bring the heat to Laurel in new charity tournament",
        "blurb": "Community Kids Basketball Tournament mixes local talent and fundraises for youth sports scholarships.",
        "href": "https://suffolktimes.timesreview.com/2025/06/local-ballers-bring-the-heat-to-laurel-in-new-charity-tournament/",
        "date": "Jun 3, 2025",
    },
]

STATIC_PAGES = {
    "community": {
        "eyebrow": "Community",
        "title": "Community hub",
        "description": "A note from ownership.",
        "articles": COMMUNITY_ARTICLES,
    },
    "contact": {
        "eyebrow": "Contact",
        "title": "Contact Us",
        "description": "Have questions? Get in touch with ALDRICH SPORTS.",
        "contact": CONTACT_INFO,
        "social": SOCIAL_LINKS,
    },
    "sponsors": {
        "eyebrow": "Sponsors",
        "title": "Our sponsors",
        "description": "Feature partners, sponsorship packages, and how to support the league.",
    },
    "register": {
        "eyebrow": "Register",
        "title": "Register a team",
        "description": "Sign up your team for leagues and events.",
        "cta": {"href": "/contact", "label": "Contact us"},
    },
    "leagues": {
        "eyebrow": "Leagues",
        "title": "League info",
        "description": "Standings, divisions, and schedules.",
    },
}


def get_navigation() -> Dict:
    return {"main": NAVIGATION, "account": ACCOUNT_NAVIGATION, "social": SOCIAL_LINKS}


def get_static_page(name: str) -> Optional[Dict]:
    """Copy for an informational page, or None for an unknown page."""
    page = STATIC_PAGES.get(name)
    return {"name": name, **page} if page else None


async def get_home_page(session: Optional[AsyncSession]) -> Dict:
    """Home page: official and featured event groups plus navigation."""
    loaded = await event_service.list_events(session)
    groups = event_service.categorize(loaded["events"])
    return {
        "navigation": NAVIGATION,
        "official_events": groups["official"],
        "featured_events": groups["featured"],
        "is_fallback": loaded["is_fallback"],
    }
