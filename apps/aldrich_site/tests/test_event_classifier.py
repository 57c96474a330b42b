"""
Tests for the best-effort event classifier.
"""

import pytest

from aldrich_site.services.event_classifier import BestEffortEventClassifier


@pytest.fixture
def classifier():
    return BestEffortEventClassifier()


@pytest.mark.parametrize(
    "host_type,official,featured",
    [
        ("aldrich", True, False),
        ("featured", False, True),
        ("partner", False, True),
        ("other", False, False),
    ],
)
def test_host_type_decides(classifier, host_type, official, featured):
    # Title and status would point the other way if host_type were missing
    event = {"title": "Aldrich Charity Fundraiser", "status": "potential", "host_type": host_type}
    assert classifier.is_official(event) is official
    assert classifier.is_featured(event) is featured


def test_organization_mention_in_title(classifier):
    assert classifier.is_official({"title": "ALDRICH Summer Classic", "status": "tbd"})


def test_promotional_keyword_in_description(classifier):
    event = {"title": "Exhibition", "description": "Proceeds go to charity.", "status": "tbd"}
    assert classifier.is_featured(event)
    assert not classifier.is_official(event)


def test_vs_matches_whole_word_only(classifier):
    assert classifier.is_featured({"title": "Laurel vs Riverhead", "status": "tbd"})
    assert not classifier.is_featured({"title": "Canvas Painting Night", "status": "tbd"})


def test_no_signals(classifier):
    event = {"title": "Pickup", "status": "tbd"}
    assert not classifier.is_official(event)
    assert not classifier.is_featured(event)


def test_custom_keywords():
    classifier = BestEffortEventClassifier(
        organization_keywords=("asl",), promotional_keywords=("gala",)
    )
    assert classifier.is_official({"title": "ASL Finals", "status": "tbd"})
    assert classifier.is_featured({"title": "Winter Gala", "status": "tbd"})
    assert not classifier.is_featured({"title": "Charity Cup", "status": "tbd"})
