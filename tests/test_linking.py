"""Tests for scholarseo.services.linking."""

import pytest

from scholarseo.config import COLLEGE_TABS, EXAM_SILOS
from scholarseo.models.linking import LinkCandidate
from scholarseo.services.linking import (
    college_hub_spoke_links,
    college_relevance,
    cross_entity_links,
    exam_hub_spoke_links,
    find_related_colleges,
    rank_related,
    related_suggestions,
)

IIT_DELHI = LinkCandidate(
    id=1,
    name="IIT Delhi",
    slug="iit-delhi",
    city="New Delhi",
    state="Delhi",
    streams=["Engineering", "Science", "Management"],
)
JEE_MAIN = LinkCandidate(id=5, name="JEE Main", slug="jee-main", streams=["Engineering"])


def _college(id, **fields):
    return LinkCandidate(id=id, name=f"College {id}", slug=f"college-{id}", **fields)


# ---------------------------------------------------------------------------
# Hub and spoke
# ---------------------------------------------------------------------------

class TestCollegeHubSpoke:
    def test_hub(self):
        hub = college_hub_spoke_links(IIT_DELHI).hub_page
        assert (hub.label, hub.href, hub.priority) == ("All Colleges", "/colleges", 0.9)

    def test_child_pages_limited_to_available_tabs(self):
        links = college_hub_spoke_links(IIT_DELHI, "cutoffs", available_tabs=["info", "cutoffs", "fees", "news"])
        assert [(p.label, p.href) for p in links.child_pages] == [
            ("Info", "/colleges/iit-delhi-1"),
            ("News", "/colleges/iit-delhi-1/news"),
            ("Fees", "/colleges/iit-delhi-1/fees"),
        ]

    def test_every_other_tab_when_availability_unknown(self):
        links = college_hub_spoke_links(IIT_DELHI, "fees")
        assert len(links.child_pages) == len(COLLEGE_TABS) - 1
        assert "/colleges/iit-delhi-1/fees" not in [p.href for p in links.child_pages]
        priorities = [p.priority for p in links.child_pages]
        assert priorities == sorted(priorities, reverse=True)

    def test_cross_links(self):
        links = college_hub_spoke_links(IIT_DELHI)
        assert [(c.label, c.href, c.priority) for c in links.cross_links] == [
            ("Engineering Colleges", "/colleges/stream-engineering", 0.7),
            ("Science Colleges", "/colleges/stream-science", 0.7),
            ("Colleges in New Delhi", "/colleges/city-new-delhi", 0.7),
            ("Colleges in Delhi", "/colleges/state-delhi", 0.6),
        ]

    def test_related_entities_use_canonical_paths(self):
        related = [LinkCandidate(id=7, name="NIT Trichy", city="Tiruchirappalli")]
        entity = college_hub_spoke_links(IIT_DELHI, related=related).related_entities[0]
        assert entity.href == "/colleges/nit-trichy-7"
        assert entity.location == "Tiruchirappalli"


class TestExamHubSpoke:
    def test_default_silo_never_a_child(self):
        links = exam_hub_spoke_links(JEE_MAIN)
        assert len(links.child_pages) == len(EXAM_SILOS) - 1
        assert links.child_pages[0].href == "/exams/jee-main-5/news"
        assert "/exams/jee-main-5" not in [p.href for p in links.child_pages]

    def test_current_silo_excluded(self):
        links = exam_hub_spoke_links(JEE_MAIN, "news")
        assert links.child_pages[0].label == "Cutoff"
        assert len(links.child_pages) == len(EXAM_SILOS) - 2

    def test_cross_links(self):
        links = exam_hub_spoke_links(JEE_MAIN)
        assert links.hub_page.href == "/exams"
        assert [(c.label, c.href) for c in links.cross_links] == [
            ("Engineering Exams", "/exams/stream-engineering"),
            ("Engineering Colleges", "/colleges/stream-engineering"),
        ]


class TestCrossEntityLinks:
    def test_college_links_to_exams(self):
        links = cross_entity_links("college", ["Engineering", "Law", "Medical", "Arts"])
        assert len(links) == 3
        assert (links[0].label, links[0].href, links[0].type) == (
            "Engineering Entrance Exams",
            "/exams/stream-engineering",
            "exam",
        )

    def test_exam_links_to_colleges(self):
        assert [link.href for link in cross_entity_links("exam", ["Law"])] == ["/colleges/stream-law"]

    def test_unsluggable_stream_skipped(self):
        assert cross_entity_links("college", ["!!!"]) == []


# ---------------------------------------------------------------------------
# Related content
# ---------------------------------------------------------------------------

class TestSuggestions:
    def test_scored_by_city_and_streams(self):
        current = _college(1, city="Pune", streams=["Engineering", "Management"])
        candidates = [
            _college(2, city="Pune"),
            _college(3, city="Mumbai", streams=["Engineering", "Management"]),
            current,
            _college(4),
        ]
        links = related_suggestions("college", current, candidates, limit=2)
        assert [link.id for link in links] == [3, 2]
        assert links[0].href == "/colleges/college-3"


def test_college_relevance():
    current = _college(1, city="Pune", state="Maharashtra", streams=["Engineering"], college_type="Private")
    other = _college(2, city="Pune", state="Maharashtra", streams=["Engineering"], college_type="Private", ranking=20)
    assert college_relevance(current, other) == 15.0


class TestRankRelated:
    def test_exams(self):
        current = LinkCandidate(id=1, name="JEE Main", streams=["Engineering"], exam_level="National", conducting_body="NTA")
        candidates = [
            LinkCandidate(id=2, name="CUET", conducting_body="NTA"),
            LinkCandidate(id=3, name="BITSAT", streams=["Engineering"], exam_level="National"),
            LinkCandidate(id=4, name="CLAT"),
        ]
        ranked = rank_related("exam", current, candidates)
        assert [(item.id, item.relevance_score) for item in ranked] == [(3, 5.0), (2, 2.0), (4, 0.0)]
        assert ranked[0].href == "/exams/bitsat-3"
        assert ranked[0].stream == "Engineering"

    def test_articles(self):
        current = LinkCandidate(id=1, name="a", category="Admissions", tags=["jee", "cutoff"])
        candidates = [
            LinkCandidate(id=2, name="b", tags=["jee", "cutoff"]),
            LinkCandidate(id=3, name="c", category="Admissions", tags=["jee"]),
        ]
        assert [item.id for item in rank_related("article", current, candidates)] == [3, 2]

    def test_limit(self):
        candidates = [LinkCandidate(id=i, name=f"n{i}") for i in range(2, 10)]
        assert len(rank_related("article", LinkCandidate(id=1, name="a"), candidates, limit=3)) == 3

    def test_unknown_entity_type(self):
        with pytest.raises(ValueError):
            rank_related("author", LinkCandidate(id=1, name="a"), [])


class TestRelatedColleges:
    def test_groups(self):
        current = _college(1, city="Pune", streams=["Engineering"], college_type="Private")
        candidates = [
            _college(2, city="Pune", streams=["Engineering"], ranking=10),
            _college(3, city="Mumbai", streams=["Engineering"], college_type="Private"),
            _college(4, city="Pune", streams=["Law"], ranking=60),
        ]
        result = find_related_colleges(current, candidates)
        assert [item.id for item in result.same_stream] == [2, 3]
        assert [item.id for item in result.same_location] == [2, 4]
        assert [item.id for item in result.same_type] == [3]
        assert [(item.id, item.relevance_score) for item in result.trending] == [(2, 90.0)]

    def test_state_used_without_city(self):
        current = _college(1, state="Kerala")
        result = find_related_colleges(current, [_college(2, state="Kerala"), _college(3, state="Goa")])
        assert [item.id for item in result.same_location] == [2]
        assert result.same_stream == []
        assert result.same_type == []
