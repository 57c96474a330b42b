"""
Best-effort event classifier for the home page groupings.

host_type is the authoritative field. Keyword matching only runs for events
that have no host_type and can misclassify. Pass a different classifier to
event_service.categorize() to change the grouping.
"""

import re
from typing import Mapping

from aldrich_site.database.models import EventStatus, HostType

ORGANIZATION_KEYWORDS = ("aldrich",)
PROMOTIONAL_KEYWORDS = ("charity", "fundraiser", "partner", "vs")

OFFICIAL_HOST_TYPES = {HostType.ALDRICH.value}
FEATURED_HOST_TYPES = {HostType.FEATURED.value, HostType.PARTNER.value}


def _mentions(text, keywords) -> bool:
    """Whole-word, case-insensitive keyword match ("vs" must not match "canvas")."""
    if not text:
        return False
    lowered = text.lower()
    return any(re.search(rf"\b{re.escape(k)}\b", lowered) for k in keywords)


class BestEffortEventClassifier:
    """Decides whether an event belongs to the official and/or featured groups."""

    def __init__(self, organization_keywords=ORGANIZATION_KEYWORDS,
                 promotional_keywords=PROMOTIONAL_KEYWORDS):
        self.organization_keywords = tuple(organization_keywords)
        self.promotional_keywords = tuple(promotional_keywords)

    def is_official(self, event: Mapping) -> bool:
        host_type = event.get("host_type")
        if host_type:
            return host_type in OFFICIAL_HOST_TYPES
        return (
            _mentions(event.get("title"), self.organization_keywords)
            or _mentions(event.get("location"), self.organization_keywords)
            or event.get("status") == EventStatus.SCHEDULED.value
        )

    def is_featured(self, event: Mapping) -> bool:
        host_type = event.get("host_type")
        if host_type:
            return host_type in FEATURED_HOST_TYPES
        return (
            _mentions(event.get("title"), self.promotional_keywords)
            or _mentions(event.get("description"), self.promotional_keywords)
            or event.get("status") == EventStatus.POTENTIAL.value
        )
