"""Sitemap generation: priorities, change frequencies, XML and chunking.

Search engines accept at most 50,000 URLs per sitemap file.  Lists longer
than ``MAX_URLS_PER_SITEMAP`` are split into numbered chunks that a sitemap
index ties together.
"""

import logging
import math
from datetime import date, datetime
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Union
from urllib.parse import urlparse

from lxml import etree

from scholarseo.config import (
    BASE_URL,
    COLLEGE_TABS,
    EXAM_SILOS,
    build_canonical_url,
    resolve_college_tab,
    resolve_exam_silo,
)
from scholarseo.models.sitemap import (
    ChangeFreq,
    ChunkedSitemap,
    PriorityFactors,
    SitemapChunk,
    SitemapUrl,
)
from scholarseo.services.slug_codec import build_article_path, build_college_path, build_exam_path

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
# Below the 50,000 hard limit
MAX_URLS_PER_SITEMAP = 45000
DEFAULT_PRIORITY = 0.5

_BASE_PRIORITIES: Dict[str, float] = {
    "static": 0.8,
    "college": 0.7,
    "exam": 0.7,
    "article": 0.6,
    "filter": 0.5,
    "author": 0.4,
}

_CHANGE_FREQS: Dict[str, ChangeFreq] = {
    "static": "monthly",
    "college": "weekly",
    "exam": "weekly",
    "article": "monthly",
    "author": "monthly",
    "filter": "weekly",
}

_UNSAFE_URL_CHARS = frozenset("&<>\"'")


class ChunkPage(NamedTuple):
    urls: List[SitemapUrl]
    total_pages: int
    has_more: bool


def _round_tenth(value: float) -> float:
    # Half-up, so 0.85 becomes 0.9
    return math.floor(value * 10 + 0.5) / 10


def _priority_of(url: SitemapUrl) -> float:
    return DEFAULT_PRIORITY if url.priority is None else url.priority


# ---------------------------------------------------------------------------
# Priority and change frequency
# ---------------------------------------------------------------------------

def _ranking_boost(ranking: int) -> float:
    if ranking <= 10:
        return 0.2
    if ranking <= 50:
        return 0.1
    if ranking <= 100:
        return 0.05
    return 0.0


def _traffic_boost(page_views: int) -> float:
    if page_views > 10000:
        return 0.15
    if page_views > 1000:
        return 0.1
    if page_views > 100:
        return 0.05
    return 0.0


def _section_priority(table, key: str) -> float:
    config = table.get(key)
    return config.priority if config is not None else DEFAULT_PRIORITY


def calculate_dynamic_priority(factors: PriorityFactors) -> float:
    """Sitemap priority in ``[0.1, 1.0]``, rounded to one decimal.

    Starts from the entity type's base priority, adds ranking, traffic,
    content and freshness boosts, then averages with the tab or silo priority
    when one is given.
    """
    priority = _BASE_PRIORITIES[factors.entity_type]

    if factors.ranking is not None:
        priority += _ranking_boost(factors.ranking)
    if factors.page_views is not None:
        priority += _traffic_boost(factors.page_views)

    if factors.has_rich_content:
        priority += 0.05
    if factors.has_images:
        priority += 0.02
    if factors.has_faqs:
        priority += 0.03
    if factors.has_news:
        priority += 0.05

    if factors.is_recent:
        priority += 0.05
    if factors.is_time_sensitive:
        priority += 0.1

    if factors.is_main_page:
        priority = max(priority, 0.8)

    if factors.tab:
        priority = (priority + _section_priority(COLLEGE_TABS, factors.tab)) / 2
    if factors.silo:
        priority = (priority + _section_priority(EXAM_SILOS, factors.silo)) / 2

    return min(1.0, max(0.1, _round_tenth(priority)))


def suggest_change_freq(factors: PriorityFactors) -> ChangeFreq:
    if factors.is_time_sensitive or factors.has_news:
        return "daily"
    if factors.is_recent:
        return "weekly"
    return _CHANGE_FREQS.get(factors.entity_type, "weekly")


def rank_urls_by_priority(urls: Iterable[SitemapUrl]) -> List[SitemapUrl]:
    return sorted(urls, key=_priority_of, reverse=True)


def group_by_priority_tier(urls: Iterable[SitemapUrl]) -> Dict[str, List[SitemapUrl]]:
    """Split into ``high`` (>= 0.8), ``medium`` (0.5 to 0.8) and ``low`` (< 0.5)."""
    tiers: Dict[str, List[SitemapUrl]] = {"high": [], "medium": [], "low": []}
    for url in urls:
        priority = _priority_of(url)
        if priority >= 0.8:
            tiers["high"].append(url)
        elif priority >= 0.5:
            tiers["medium"].append(url)
        else:
            tiers["low"].append(url)
    return tiers


def optimal_sitemap_order(urls: Iterable[SitemapUrl]) -> List[SitemapUrl]:
    """Highest priority first; ties ordered by URL."""
    return sorted(urls, key=lambda u: (-_priority_of(u), u.url))


# ---------------------------------------------------------------------------
# URL entries
# ---------------------------------------------------------------------------

def format_lastmod(value: Union[str, date, datetime, None] = None) -> str:
    """``YYYY-MM-DD`` for *value*; today when it is missing or unparseable."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
        except ValueError:
            logger.debug("Unparseable lastmod %r, using today", value)
    return date.today().isoformat()


def is_valid_sitemap_url(url: str) -> bool:
    """Absolute http(s) URLs and root-relative paths free of XML-special characters."""
    if not url or _UNSAFE_URL_CHARS.intersection(url):
        return False
    if url.startswith("/") and not url.startswith("//"):
        return True
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and "." in parsed.netloc


def build_college_sitemap_entry(
    slug: Optional[str],
    college_id: int,
    updated_at: Optional[str] = None,
    ranking: Optional[int] = None,
    tab: Optional[str] = None,
) -> SitemapUrl:
    section = resolve_college_tab(tab)
    path = build_college_path(slug, college_id) + (section.path if section else "")

    if section is None:
        priority = 1.0
    elif tab in ("admission-process", "news"):
        priority = 0.8
    elif tab in ("cutoffs", "scholarship"):
        priority = 0.7
    else:
        priority = 0.6
    if ranking is not None and ranking <= 50:
        priority = min(1.0, _round_tenth(priority + 0.1))

    return SitemapUrl(
        url=build_canonical_url(path),
        lastmod=format_lastmod(updated_at),
        changefreq="weekly",
        priority=priority,
    )


def build_exam_sitemap_entry(
    slug: Optional[str],
    exam_id: int,
    updated_at: Optional[str] = None,
    silo: Optional[str] = None,
) -> SitemapUrl:
    section = resolve_exam_silo(silo)
    path = build_exam_path(slug, exam_id) + (section.path if section else "")

    changefreq: ChangeFreq = "weekly"
    if section is None or silo in ("exam-cutoff", "exam-result"):
        priority = 0.8
    elif silo == "news":
        priority, changefreq = 0.9, "daily"
    elif silo in ("exam-syllabus", "exam-pattern"):
        priority = 0.7
    else:
        priority = 0.6

    return SitemapUrl(
        url=build_canonical_url(path),
        lastmod=format_lastmod(updated_at),
        changefreq=changefreq,
        priority=priority,
    )


def build_article_sitemap_entry(
    slug: Optional[str],
    article_id: int,
    updated_at: Optional[str] = None,
    is_featured: bool = False,
) -> SitemapUrl:
    return SitemapUrl(
        url=build_canonical_url(build_article_path(slug, article_id)),
        lastmod=format_lastmod(updated_at),
        changefreq="monthly",
        priority=0.8 if is_featured else 0.6,
    )


# (path, priority, changefreq)
_STATIC_PAGES = (
    ("", 1.0, "daily"),
    ("/colleges", 0.9, "daily"),
    ("/exams", 0.9, "daily"),
    ("/articles", 0.8, "daily"),
    ("/compare-colleges", 0.7, "weekly"),
    ("/about-us", 0.5, "monthly"),
    ("/contact-us", 0.5, "monthly"),
    ("/privacy-policy", 0.3, "yearly"),
    ("/terms-and-conditions", 0.3, "yearly"),
)


def static_sitemap_entries() -> List[SitemapUrl]:
    today = format_lastmod()
    return [
        SitemapUrl(url=f"{BASE_URL}{path}", lastmod=today, changefreq=changefreq, priority=priority)
        for path, priority, changefreq in _STATIC_PAGES
    ]


# ---------------------------------------------------------------------------
# XML
# ---------------------------------------------------------------------------

def _tag(name: str) -> str:
    return f"{{{SITEMAP_NAMESPACE}}}{name}"


def _serialize(root) -> str:
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True).decode("utf-8")


def generate_sitemap_xml(urls: Iterable[SitemapUrl], include_lastmod: bool = True) -> str:
    """``<urlset>`` document; optional fields are only written when set."""
    root = etree.Element(_tag("urlset"), nsmap={None: SITEMAP_NAMESPACE})
    for entry in urls:
        node = etree.SubElement(root, _tag("url"))
        etree.SubElement(node, _tag("loc")).text = entry.url
        if include_lastmod and entry.lastmod:
            etree.SubElement(node, _tag("lastmod")).text = entry.lastmod
        if entry.changefreq:
            etree.SubElement(node, _tag("changefreq")).text = entry.changefreq
        if entry.priority is not None:
            etree.SubElement(node, _tag("priority")).text = f"{entry.priority:.1f}"
    return _serialize(root)


def generate_sitemap_index_xml(sitemaps: Iterable[SitemapUrl]) -> str:
    root = etree.Element(_tag("sitemapindex"), nsmap={None: SITEMAP_NAMESPACE})
    for entry in sitemaps:
        node = etree.SubElement(root, _tag("sitemap"))
        etree.SubElement(node, _tag("loc")).text = entry.url
        if entry.lastmod:
            etree.SubElement(node, _tag("lastmod")).text = entry.lastmod
    return _serialize(root)


# ---------------------------------------------------------------------------
# Chunking
# ---------------------------------------------------------------------------

def needs_chunking(url_count: int, max_urls: int = MAX_URLS_PER_SITEMAP) -> bool:
    return url_count > max_urls


def calculate_chunk_count(url_count: int, max_urls: int = MAX_URLS_PER_SITEMAP) -> int:
    return math.ceil(url_count / max_urls)


def sitemap_chunk_filename(base_name: str, chunk_number: int, total_chunks: int) -> str:
    if total_chunks == 1:
        return f"{base_name}.xml"
    return f"{base_name}-{chunk_number}.xml"


def get_chunk_page(
    urls: Sequence[SitemapUrl],
    page: int,
    max_urls: int = MAX_URLS_PER_SITEMAP,
) -> ChunkPage:
    """The 1-based *page* of *urls*, *max_urls* at a time."""
    total_pages = calculate_chunk_count(len(urls), max_urls)
    start = (page - 1) * max_urls
    return ChunkPage(
        urls=list(urls[start:start + max_urls]),
        total_pages=total_pages,
        has_more=page < total_pages,
    )


def chunk_sitemap(
    urls: Sequence[SitemapUrl],
    sitemap_name: str,
    max_urls: int = MAX_URLS_PER_SITEMAP,
) -> ChunkedSitemap:
    """Split *urls* into sitemap files plus an index pointing at each of them.

    A list that fits in one file keeps *sitemap_name*; otherwise chunks are
    named ``<sitemap_name>-1``, ``<sitemap_name>-2`` and so on.
    """
    split = needs_chunking(len(urls), max_urls)
    chunks: List[SitemapChunk] = []
    for number, start in enumerate(range(0, len(urls), max_urls), start=1):
        chunk_urls = urls[start:start + max_urls]
        chunks.append(
            SitemapChunk(
                name=f"{sitemap_name}-{number}" if split else sitemap_name,
                xml=generate_sitemap_xml(chunk_urls),
                url_count=len(chunk_urls),
            )
        )

    if split:
        logger.info("Sitemap split into chunks", extra={"sitemap": sitemap_name, "chunks": len(chunks)})

    today = format_lastmod()
    index = generate_sitemap_index_xml(
        SitemapUrl(url=f"{BASE_URL}/{chunk.name}.xml", lastmod=today) for chunk in chunks
    )
    return ChunkedSitemap(index=index, chunks=chunks)
