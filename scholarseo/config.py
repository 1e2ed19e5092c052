"""Site-wide SEO constants, tab/silo lookup tables and small text helpers."""

import os
import re
from datetime import date
from types import MappingProxyType
from typing import List, NamedTuple, Optional

SITE_NAME = "TrueScholar"
SITE_TAGLINE = "Find Your Perfect College & Scholarships in India"
SITE_DESCRIPTION = (
    "TrueScholar helps students discover the best colleges, programs, and scholarships "
    "in India. Compare courses, check eligibility, and plan your academic future with ease."
)
BASE_URL = os.environ.get("SCHOLARSEO_BASE_URL", "https://www.truescholar.in").rstrip("/")
LOGO_URL = f"{BASE_URL}/logo.webp"
DEFAULT_OG_IMAGE = f"{BASE_URL}/og-image.png"
TWITTER_HANDLE = "@truescholar"
LOCALE = "en_IN"
COUNTRY_CODE = "IN"
SCHEMA_CONTEXT = "https://schema.org"

SOCIAL_LINKS = (
    "https://www.facebook.com/profile.php?id=61578705477317",
    "https://www.instagram.com/truescholar_india/",
    "https://www.linkedin.com/in/truescholar-pvt-25b1a7376/",
    "https://twitter.com/truescholar",
)

CONTACT_EMAIL = "support@truescholar.in"
CONTACT_TYPE = "customer service"
CONTACT_LANGUAGES = ("English", "Hindi")

PUBLISHER_LOGO_WIDTH = 600
PUBLISHER_LOGO_HEIGHT = 100
OG_IMAGE_WIDTH = 1200
OG_IMAGE_HEIGHT = 630

TITLE_SUFFIX = f" | {SITE_NAME}"
TITLE_MAX_LENGTH = 60
# Templated titles may run past the SERP limit before the suffix is added
TEMPLATE_TITLE_MAX_LENGTH = TITLE_MAX_LENGTH + 15
DESCRIPTION_MAX_LENGTH = 160
DESCRIPTION_MIN_LENGTH = 50
KEYWORDS_MAX_COUNT = 10
BREADCRUMB_NAME_MAX_LENGTH = 40

# Content quality thresholds used by the validators
MIN_WORD_COUNT = 300
MIN_FAQ_COUNT = 3
MIN_FILTER_RESULTS = 3


class SectionConfig(NamedTuple):
    """One row of a tab/silo lookup table."""

    label: str
    path: str
    priority: float = 0.5  # sitemap priority


# The default section collapses onto the entity root: no extra path, no extra breadcrumb.
DEFAULT_SECTION = "info"
FALLBACK_SECTION_LABEL = "Information"

COLLEGE_TABS = MappingProxyType(
    {
        "info": SectionConfig("Info", "", 1.0),
        "admission-process": SectionConfig("Admission Process", "/admission-process", 0.8),
        "courses": SectionConfig("Courses", "/courses", 0.8),
        "cutoffs": SectionConfig("Cutoffs", "/cutoffs", 0.7),
        "eligibility": SectionConfig("Eligibility", "/eligibility", 0.6),
        "facilities": SectionConfig("Facilities", "/facilities", 0.6),
        "faq": SectionConfig("FAQ", "/faq", 0.6),
        "fees": SectionConfig("Fees", "/fees", 0.7),
        "highlights": SectionConfig("Highlights", "/highlights", 0.6),
        "news": SectionConfig("News", "/news", 0.9),
        "others": SectionConfig("Others", "/others", 0.5),
        "placements": SectionConfig("Placements", "/placements", 0.8),
        "rankings": SectionConfig("Rankings", "/rankings", 0.7),
        "results": SectionConfig("Results", "/results", 0.6),
        "reviews": SectionConfig("Reviews", "/reviews", 0.6),
        "scholarship": SectionConfig("Scholarship", "/scholarship", 0.7),
    }
)

EXAM_SILOS = MappingProxyType(
    {
        "info": SectionConfig("Info", "", 0.8),
        "exam-syllabus": SectionConfig("Syllabus", "/exam-syllabus", 0.7),
        "exam-pattern": SectionConfig("Pattern", "/exam-pattern", 0.7),
        "exam-cutoff": SectionConfig("Cutoff", "/exam-cutoff", 0.8),
        "exam-result": SectionConfig("Result", "/exam-result", 0.8),
        "admit-card": SectionConfig("Admit Card", "/admit-card", 0.7),
        "exam-dates": SectionConfig("Dates", "/exam-dates", 0.7),
        "exam-eligibility": SectionConfig("Eligibility", "/exam-eligibility", 0.6),
        "exam-registration": SectionConfig("Registration", "/exam-registration", 0.7),
        "news": SectionConfig("News", "/news", 0.9),
    }
)

_PATH_UNSAFE_RE = re.compile(r"[^a-z0-9]+")


def _resolve_section(table, key: Optional[str]) -> Optional[SectionConfig]:
    if not key or key == DEFAULT_SECTION:
        return None
    config = table.get(key)
    if config is not None:
        return config
    path_part = _PATH_UNSAFE_RE.sub("-", key.lower()).strip("-") or DEFAULT_SECTION
    return SectionConfig(FALLBACK_SECTION_LABEL, f"/{path_part}")


def resolve_college_tab(tab: Optional[str]) -> Optional[SectionConfig]:
    """Return the tab row for *tab*, or *None* for the default (collapsed) tab.

    Unmapped tab keys get the generic "Information" label and a ``/<tab>`` path.
    """
    return _resolve_section(COLLEGE_TABS, tab)


def resolve_exam_silo(silo: Optional[str]) -> Optional[SectionConfig]:
    """Exam-silo counterpart of :func:`resolve_college_tab`."""
    return _resolve_section(EXAM_SILOS, silo)


def build_canonical_url(path: str) -> str:
    """Prefix *path* with the site base URL."""
    clean_path = path if path.startswith("/") else f"/{path}"
    return f"{BASE_URL}{clean_path}"


def current_year() -> int:
    return date.today().year


def format_title_with_suffix(title: str, include_suffix: bool = True) -> str:
    if not include_suffix or SITE_NAME in title:
        return title
    return f"{title}{TITLE_SUFFIX}"


def truncate_text(text: str, max_length: int) -> str:
    """Cut *text* to *max_length* characters, ending with ``...`` when shortened."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3].strip() + "..."


def sanitize_for_meta(text: str) -> str:
    """Collapse whitespace and strip angle brackets so *text* is safe in a meta tag."""
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"[<>]", "", text)
    return text.strip()


def generate_college_keywords(
    college_name: str,
    city: Optional[str] = None,
    state: Optional[str] = None,
    streams: Optional[List[str]] = None,
) -> List[str]:
    keywords = [
        college_name,
        f"{college_name} admission",
        f"{college_name} courses",
        f"{college_name} fees",
        f"{college_name} placements",
    ]
    if city:
        keywords += [f"colleges in {city}", f"{college_name} {city}"]
    if state:
        keywords.append(f"colleges in {state}")
    for stream in streams or []:
        keywords += [f"{stream} colleges", f"{college_name} {stream}"]
    return keywords[:KEYWORDS_MAX_COUNT]


def generate_exam_keywords(
    exam_name: str,
    exam_full_name: Optional[str] = None,
    streams: Optional[List[str]] = None,
) -> List[str]:
    year = current_year()
    keywords = [
        exam_name,
        f"{exam_name} exam",
        f"{exam_name} {year}",
        f"{exam_name} syllabus",
        f"{exam_name} pattern",
        f"{exam_name} cutoff",
        f"{exam_name} result",
    ]
    if exam_full_name and exam_full_name != exam_name:
        keywords.insert(0, exam_full_name)
    for stream in streams or []:
        keywords.append(f"{stream} entrance exams")
    return keywords[:KEYWORDS_MAX_COUNT]
