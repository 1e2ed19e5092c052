"""Tests for scholarseo.services.sitemap."""

from datetime import date, datetime

import pytest
from lxml import etree

from scholarseo.config import BASE_URL
from scholarseo.models.sitemap import PriorityFactors, SitemapUrl
from scholarseo.services.sitemap import (
    SITEMAP_NAMESPACE,
    build_article_sitemap_entry,
    build_college_sitemap_entry,
    build_exam_sitemap_entry,
    calculate_chunk_count,
    calculate_dynamic_priority,
    chunk_sitemap,
    format_lastmod,
    generate_sitemap_index_xml,
    generate_sitemap_xml,
    get_chunk_page,
    group_by_priority_tier,
    is_valid_sitemap_url,
    needs_chunking,
    optimal_sitemap_order,
    rank_urls_by_priority,
    sitemap_chunk_filename,
    static_sitemap_entries,
    suggest_change_freq,
)

NS = {"sm": SITEMAP_NAMESPACE}


def _urls(count):
    return [SitemapUrl(url=f"{BASE_URL}/p{i}", priority=0.5) for i in range(count)]


def _parse(xml: str):
    return etree.fromstring(xml.encode("utf-8"))


# ---------------------------------------------------------------------------
# Priority
# ---------------------------------------------------------------------------

class TestDynamicPriority:
    @pytest.mark.parametrize(
        "entity_type, expected",
        [("static", 0.8), ("college", 0.7), ("exam", 0.7), ("article", 0.6), ("filter", 0.5), ("author", 0.4)],
    )
    def test_base_priority(self, entity_type, expected):
        assert calculate_dynamic_priority(PriorityFactors(entity_type=entity_type)) == expected

    def test_capped_at_one(self):
        factors = PriorityFactors(entity_type="college", ranking=5, page_views=20000)
        assert calculate_dynamic_priority(factors) == 1.0

    @pytest.mark.parametrize("ranking, expected", [(10, 0.9), (50, 0.8), (500, 0.7)])
    def test_ranking_boost(self, ranking, expected):
        assert calculate_dynamic_priority(PriorityFactors(entity_type="college", ranking=ranking)) == expected

    def test_content_signals(self):
        factors = PriorityFactors(entity_type="article", has_rich_content=True, has_images=True, has_faqs=True)
        assert calculate_dynamic_priority(factors) == 0.7

    def test_main_page_floor(self):
        assert calculate_dynamic_priority(PriorityFactors(entity_type="exam", is_main_page=True)) == 0.8

    def test_averaged_with_tab_priority(self):
        assert calculate_dynamic_priority(PriorityFactors(entity_type="college", tab="news")) == 0.8

    def test_unknown_tab_averages_with_default(self):
        assert calculate_dynamic_priority(PriorityFactors(entity_type="college", tab="campus-life")) == 0.6

    def test_averaged_with_silo_priority(self):
        assert calculate_dynamic_priority(PriorityFactors(entity_type="exam", silo="news")) == 0.8


class TestChangeFreq:
    @pytest.mark.parametrize(
        "fields, expected",
        [
            ({"entity_type": "static", "is_time_sensitive": True}, "daily"),
            ({"entity_type": "college", "has_news": True}, "daily"),
            ({"entity_type": "article", "is_recent": True}, "weekly"),
            ({"entity_type": "static"}, "monthly"),
            ({"entity_type": "author"}, "monthly"),
            ({"entity_type": "filter"}, "weekly"),
            ({"entity_type": "exam"}, "weekly"),
        ],
    )
    def test_suggestion(self, fields, expected):
        assert suggest_change_freq(PriorityFactors(**fields)) == expected


class TestOrdering:
    def test_rank_defaults_missing_priority(self):
        urls = [SitemapUrl(url="/low", priority=0.3), SitemapUrl(url="/none"), SitemapUrl(url="/high", priority=0.9)]
        assert [u.url for u in rank_urls_by_priority(urls)] == ["/high", "/none", "/low"]

    def test_tiers(self):
        urls = [SitemapUrl(url="/a", priority=0.8), SitemapUrl(url="/b", priority=0.5), SitemapUrl(url="/c", priority=0.4)]
        tiers = group_by_priority_tier(urls)
        assert [u.url for u in tiers["high"]] == ["/a"]
        assert [u.url for u in tiers["medium"]] == ["/b"]
        assert [u.url for u in tiers["low"]] == ["/c"]

    def test_ties_ordered_by_url(self):
        urls = [SitemapUrl(url="/b", priority=0.5), SitemapUrl(url="/a", priority=0.5), SitemapUrl(url="/c", priority=1.0)]
        assert [u.url for u in optimal_sitemap_order(urls)] == ["/c", "/a", "/b"]


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------

class TestLastmod:
    def test_iso_timestamp(self):
        assert format_lastmod("2025-03-04T10:20:30Z") == "2025-03-04"

    def test_date_and_datetime(self):
        assert format_lastmod(date(2025, 1, 2)) == "2025-01-02"
        assert format_lastmod(datetime(2025, 1, 2, 23, 59)) == "2025-01-02"

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_falls_back_to_today(self, value):
        assert format_lastmod(value) == date.today().isoformat()


@pytest.mark.parametrize(
    "url, valid",
    [
        (f"{BASE_URL}/colleges", True),
        ("/colleges/iit-delhi-1", True),
        ("", False),
        (f"{BASE_URL}/colleges?a=1&b=2", False),
        ("ftp://files.truescholar.in/a", False),
        ("//cdn.truescholar.in/a", False),
        ("https://", False),
    ],
)
def test_is_valid_sitemap_url(url, valid):
    assert is_valid_sitemap_url(url) is valid


class TestEntityEntries:
    def test_college_root(self):
        entry = build_college_sitemap_entry("iit-delhi", 1, updated_at="2025-05-06T00:00:00Z")
        assert entry.url == f"{BASE_URL}/colleges/iit-delhi-1"
        assert entry.lastmod == "2025-05-06"
        assert entry.changefreq == "weekly"
        assert entry.priority == 1.0

    @pytest.mark.parametrize(
        "tab, ranking, expected",
        [("info", None, 1.0), ("news", None, 0.8), ("cutoffs", None, 0.7), ("cutoffs", 20, 0.8), ("fees", None, 0.6), (None, 20, 1.0)],
    )
    def test_college_tab_priority(self, tab, ranking, expected):
        assert build_college_sitemap_entry("iit-delhi", 1, ranking=ranking, tab=tab).priority == expected

    def test_college_tab_path(self):
        assert build_college_sitemap_entry("iit-delhi", 1, tab="cutoffs").url == f"{BASE_URL}/colleges/iit-delhi-1/cutoffs"

    @pytest.mark.parametrize(
        "silo, expected, changefreq",
        [
            (None, 0.8, "weekly"),
            ("news", 0.9, "daily"),
            ("exam-result", 0.8, "weekly"),
            ("exam-syllabus", 0.7, "weekly"),
            ("admit-card", 0.6, "weekly"),
        ],
    )
    def test_exam_silo(self, silo, expected, changefreq):
        entry = build_exam_sitemap_entry("jee-main", 5, silo=silo)
        assert entry.priority == expected
        assert entry.changefreq == changefreq

    def test_exam_silo_path(self):
        assert build_exam_sitemap_entry("jee-main", 5, silo="news").url == f"{BASE_URL}/exams/jee-main-5/news"

    def test_article(self):
        assert build_article_sitemap_entry("cutoff-trends", 9, is_featured=True).priority == 0.8
        entry = build_article_sitemap_entry("cutoff-trends", 9)
        assert entry.url == f"{BASE_URL}/articles/cutoff-trends-9"
        assert (entry.priority, entry.changefreq) == (0.6, "monthly")

    def test_static_entries(self):
        entries = static_sitemap_entries()
        assert entries[0].url == BASE_URL
        assert entries[0].priority == 1.0
        by_url = {e.url: e for e in entries}
        assert by_url[f"{BASE_URL}/privacy-policy"].changefreq == "yearly"
        assert all(is_valid_sitemap_url(e.url) for e in entries)


# ---------------------------------------------------------------------------
# XML
# ---------------------------------------------------------------------------

class TestXml:
    def test_urlset(self):
        xml = generate_sitemap_xml([
            SitemapUrl(url=f"{BASE_URL}/colleges", lastmod="2025-01-01", changefreq="daily", priority=0.9),
            SitemapUrl(url=f"{BASE_URL}/about-us"),
        ])
        assert xml.startswith("<?xml")
        root = _parse(xml)
        assert root.tag == f"{{{SITEMAP_NAMESPACE}}}urlset"
        first, second = root.findall("sm:url", NS)
        assert first.findtext("sm:loc", namespaces=NS) == f"{BASE_URL}/colleges"
        assert first.findtext("sm:priority", namespaces=NS) == "0.9"
        assert first.findtext("sm:changefreq", namespaces=NS) == "daily"
        assert second.find("sm:lastmod", NS) is None

    def test_whole_priority_keeps_one_decimal(self):
        root = _parse(generate_sitemap_xml([SitemapUrl(url="/a", priority=1.0)]))
        assert root.findtext("sm:url/sm:priority", namespaces=NS) == "1.0"

    def test_lastmod_can_be_omitted(self):
        xml = generate_sitemap_xml([SitemapUrl(url="/a", lastmod="2025-01-01")], include_lastmod=False)
        assert "lastmod" not in xml

    def test_special_characters_escaped(self):
        xml = generate_sitemap_xml([SitemapUrl(url="/a?x=1&y=2")])
        assert "&amp;" in xml
        assert _parse(xml).findtext("sm:url/sm:loc", namespaces=NS) == "/a?x=1&y=2"

    def test_index(self):
        root = _parse(generate_sitemap_index_xml([SitemapUrl(url=f"{BASE_URL}/colleges-1.xml", lastmod="2025-01-01")]))
        assert root.tag == f"{{{SITEMAP_NAMESPACE}}}sitemapindex"
        assert root.findtext("sm:sitemap/sm:loc", namespaces=NS) == f"{BASE_URL}/colleges-1.xml"


# ---------------------------------------------------------------------------
# Chunking
# ---------------------------------------------------------------------------

class TestChunking:
    def test_thresholds(self):
        assert not needs_chunking(45000)
        assert needs_chunking(45001)
        assert calculate_chunk_count(90001) == 3

    @pytest.mark.parametrize(
        "number, total, expected",
        [(1, 1, "colleges.xml"), (2, 3, "colleges-2.xml")],
    )
    def test_filename(self, number, total, expected):
        assert sitemap_chunk_filename("colleges", number, total) == expected

    def test_chunk_page(self):
        urls = _urls(5)
        last = get_chunk_page(urls, 3, max_urls=2)
        assert [u.url for u in last.urls] == [f"{BASE_URL}/p4"]
        assert last.total_pages == 3
        assert not last.has_more
        assert get_chunk_page(urls, 1, max_urls=2).has_more

    def test_single_chunk_keeps_name(self):
        result = chunk_sitemap(_urls(2), "colleges")
        assert [c.name for c in result.chunks] == ["colleges"]
        assert result.chunks[0].url_count == 2
        assert f"{BASE_URL}/colleges.xml" in result.index

    def test_split_into_numbered_chunks(self):
        result = chunk_sitemap(_urls(5), "colleges", max_urls=2)
        assert [c.name for c in result.chunks] == ["colleges-1", "colleges-2", "colleges-3"]
        assert [c.url_count for c in result.chunks] == [2, 2, 1]
        locs = [e.text for e in _parse(result.index).findall("sm:sitemap/sm:loc", NS)]
        assert locs == [f"{BASE_URL}/colleges-{n}.xml" for n in (1, 2, 3)]
        assert len(_parse(result.chunks[2].xml).findall("sm:url", NS)) == 1

    def test_empty(self):
        assert chunk_sitemap([], "colleges").chunks == []
