"""Title/description/keyword templates per page type.

Wording lives in data tables keyed by tab or silo; a page whose section has no
dedicated wording falls back to the generic row, which interpolates the
section's label.  Every template honours the editor's :class:`SeoOverride`
first and only fills in what the editor left blank.
"""

from types import MappingProxyType
from typing import Dict, List, NamedTuple, Optional, Tuple

from scholarseo.config import (
    DEFAULT_OG_IMAGE,
    DESCRIPTION_MAX_LENGTH,
    KEYWORDS_MAX_COUNT,
    SITE_NAME,
    TEMPLATE_TITLE_MAX_LENGTH,
    current_year,
    generate_college_keywords,
    generate_exam_keywords,
    resolve_college_tab,
    resolve_exam_silo,
    sanitize_for_meta,
    truncate_text,
)
from scholarseo.models.entities import (
    ArticleData,
    AuthorData,
    CollegeData,
    ExamData,
    FilterPageData,
    SeoOverride,
    StaticPageData,
)
from scholarseo.services.cannibalization import filter_state_for, generate_unique_filter_keywords
from scholarseo.services.normalizer import NormalizedEntity
from scholarseo.services.slug_codec import (
    build_article_path,
    build_author_path,
    build_college_path,
    build_exam_path,
    build_listing_path,
)


class MetadataTemplate(NamedTuple):
    title: str
    description: str
    keywords: List[str]
    canonical_path: str
    og_image: Optional[str] = None


class Wording(NamedTuple):
    """``str.format`` patterns for one template row."""

    title: str
    description: str
    keywords: Tuple[str, ...] = ()


# Placeholders: {name} {display_name} {year} {location_in} {location_dash} {label} {label_lower}
COLLEGE_INFO_WORDING = Wording(
    "{name} - Courses, Fees, Admission {year}",
    "Explore {name}{location_in}. Check courses, fees, eligibility, placements, "
    "rankings, and admission process for {year}.",
)

COLLEGE_TAB_WORDING = MappingProxyType(
    {
        "cutoffs": Wording(
            "{name} Cutoffs {year}{location_dash}",
            "Check {name} cutoffs {year} for various courses including JEE Main, NEET, "
            "and other entrance exams. Get detailed cutoff trends, opening and closing "
            "ranks, category-wise cutoffs.",
            (
                "{name} cutoffs",
                "{name} JEE cutoff",
                "{name} NEET cutoff",
                "{name} entrance exam cutoff",
                "college cutoffs {year}",
            ),
        ),
        "courses": Wording(
            "{name} Courses & Fees {year}",
            "Explore all courses offered at {name}{location_in}. Check course fees, "
            "duration, eligibility, and specializations for {year} admission.",
            (
                "{name} courses",
                "{name} fees",
                "{name} programs",
                "courses offered at {name}",
            ),
        ),
        "fees": Wording(
            "{name} Fees Structure {year}",
            "Complete fee structure for {name}. Check tuition fees, hostel fees, and "
            "other charges for all courses. Scholarship and financial aid information.",
            (
                "{name} fees",
                "{name} fee structure",
                "{name} tuition fees",
                "{name} hostel fees",
            ),
        ),
        "placements": Wording(
            "{name} Placements {year} - Packages, Recruiters",
            "{name} placement statistics for {year}. Check average and highest "
            "packages, top recruiters, placement percentage, and career opportunities.",
            (
                "{name} placements",
                "{name} placement {year}",
                "{name} average package",
                "{name} recruiters",
            ),
        ),
        "admission-process": Wording(
            "{name} Admission {year} - Process, Dates, Eligibility",
            "Complete admission guide for {name} {year}. Check admission process, "
            "important dates, eligibility criteria, required documents, and how to apply.",
            (
                "{name} admission",
                "{name} admission {year}",
                "how to apply {name}",
                "{name} admission process",
            ),
        ),
        "faq": Wording(
            "{name} FAQ {year} - Admission, Courses, Fees",
            "Get answers to frequently asked questions about {name}{location_in}. "
            "FAQs about admission, courses, fees, placements, and campus life.",
            ("{name} FAQ", "{name} questions", "{name} admission FAQ"),
        ),
        "rankings": Wording(
            "{name} Rankings {year} - NIRF, QS, Times",
            "{name} rankings in NIRF, QS World Rankings, Times Higher Education, and "
            "other ranking bodies. Compare rankings across years.",
            ("{name} ranking", "{name} NIRF ranking", "{name} QS ranking"),
        ),
        "scholarship": Wording(
            "{name} Scholarships {year} - Eligibility, Amount",
            "Scholarships available at {name} for {year}. Check scholarship types, "
            "eligibility criteria, application process, and amount details.",
            (
                "{name} scholarship",
                "{name} financial aid",
                "scholarships for {name}",
            ),
        ),
    }
)

COLLEGE_GENERIC_WORDING = Wording(
    "{name} {label} {year}",
    "Explore {label_lower} information for {name}. Get comprehensive details and "
    "latest updates for {year}.",
    ("{name} {label_lower}", "{name}"),
)

EXAM_INFO_WORDING = Wording(
    "{name} {year} - Dates, Eligibility, Syllabus, Pattern",
    "Complete guide to {name} {year}. Check exam dates, eligibility criteria, "
    "syllabus, exam pattern, application process, and important updates.",
)

# Silo titles lead with the full exam name ({display_name}); keywords keep the short one.
EXAM_SILO_WORDING = MappingProxyType(
    {
        "exam-syllabus": Wording(
            "{display_name} Syllabus {year} - Subject-wise Topics, Weightage",
            "Complete {display_name} syllabus for {year}. Subject-wise topics, "
            "weightage, important chapters, and preparation tips.",
            (
                "{name} syllabus",
                "{name} syllabus {year}",
                "{name} topics",
                "{name} chapters",
            ),
        ),
        "exam-pattern": Wording(
            "{display_name} Exam Pattern {year} - Marking Scheme, Duration",
            "{name} exam pattern {year}. Check total marks, number of questions, "
            "section-wise distribution, marking scheme, and time duration.",
            ("{name} exam pattern", "{name} marking scheme", "{name} paper pattern"),
        ),
        "exam-cutoff": Wording(
            "{display_name} Cutoff {year} - Category-wise, Previous Years",
            "{name} cutoff {year}. Check expected cutoff, previous year cutoffs, "
            "category-wise cutoff marks, and cutoff trends.",
            (
                "{name} cutoff",
                "{name} cutoff {year}",
                "{name} expected cutoff",
                "{name} category cutoff",
            ),
        ),
        "exam-result": Wording(
            "{display_name} Result {year} - Date, How to Check, Scorecard",
            "{name} result {year}. Check result date, how to download scorecard, "
            "rank list, and result statistics.",
            (
                "{name} result",
                "{name} result {year}",
                "{name} scorecard",
                "{name} rank list",
            ),
        ),
    }
)

EXAM_GENERIC_WORDING = Wording(
    "{display_name} {label} {year}",
    "Get complete {label_lower} information for {name} {year}. Latest updates and "
    "comprehensive guide.",
    ("{name} {label_lower}", "{name}"),
)


def parse_keywords(seo_param: Optional[str]) -> Optional[List[str]]:
    """Split an editor's comma-separated keyword string; *None* when empty."""
    if not seo_param:
        return None
    keywords = [k.strip() for k in seo_param.split(",") if k.strip()]
    return keywords[:KEYWORDS_MAX_COUNT] or None


def _context(
    name: str,
    location: Optional[str] = None,
    label: str = "",
    display_name: Optional[str] = None,
) -> Dict[str, object]:
    return {
        "name": name,
        "display_name": display_name or name,
        "year": current_year(),
        "location_in": f" in {location}" if location else "",
        "location_dash": f" - {location}" if location else "",
        "label": label,
        "label_lower": label.lower(),
    }


def _override_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def fit_title(title: str, name: Optional[str]) -> str:
    """Shorten *title* to the template limit without cutting into *name*.

    Only the wording after the name is dropped; a name that is longer than
    the limit on its own is kept whole.
    """
    if len(title) <= TEMPLATE_TITLE_MAX_LENGTH:
        return title
    name = sanitize_for_meta(name) if name else ""
    end = title.find(name) + len(name) if name and name in title else 0
    if end > TEMPLATE_TITLE_MAX_LENGTH - 3:
        return title[:end]
    return truncate_text(title, TEMPLATE_TITLE_MAX_LENGTH)


def _finish(
    title: str,
    description: str,
    keywords: List[str],
    canonical_path: str,
    og_image: Optional[str],
    name: Optional[str] = None,
) -> MetadataTemplate:
    return MetadataTemplate(
        title=fit_title(sanitize_for_meta(title), name),
        description=truncate_text(sanitize_for_meta(description), DESCRIPTION_MAX_LENGTH),
        keywords=keywords[:KEYWORDS_MAX_COUNT],
        canonical_path=canonical_path,
        og_image=og_image or DEFAULT_OG_IMAGE,
    )


def _render(
    wording: Wording,
    context: Dict[str, object],
    override: Optional[SeoOverride],
    canonical_path: str,
    og_image: Optional[str],
    default_keywords: Optional[List[str]] = None,
) -> MetadataTemplate:
    override = override or SeoOverride()
    title = _override_text(override.title) or wording.title.format(**context)
    description = _override_text(override.meta_desc) or wording.description.format(**context)
    keywords = (
        parse_keywords(override.seo_param)
        or default_keywords
        or [k.format(**context) for k in wording.keywords]
    )
    return _finish(title, description, keywords, canonical_path, og_image, str(context["display_name"]))


# ---------------------------------------------------------------------------
# Entity templates
# ---------------------------------------------------------------------------

def college_template(entity: NormalizedEntity, data: CollegeData) -> MetadataTemplate:
    """Profile or tab template for a resolved college."""
    path = build_college_path(entity.slug, entity.entity_id)
    section = resolve_college_tab(entity.section)

    if section is None:
        keywords = generate_college_keywords(entity.name, entity.city, entity.state, data.streams)
        return _render(
            COLLEGE_INFO_WORDING,
            _context(entity.name, entity.location),
            data.seo,
            path,
            entity.image,
            keywords,
        )

    wording = COLLEGE_TAB_WORDING.get(entity.section, COLLEGE_GENERIC_WORDING)
    return _render(
        wording,
        _context(entity.name, entity.location, label=section.label),
        getattr(data, "tab_content", None),
        path + section.path,
        entity.image,
    )


def exam_template(entity: NormalizedEntity, data: ExamData) -> MetadataTemplate:
    """Profile or silo template for a resolved exam."""
    path = build_exam_path(entity.slug, entity.entity_id)
    section = resolve_exam_silo(entity.section)

    if section is None:
        keywords = generate_exam_keywords(entity.name, data.exam_full_name, data.streams)
        return _render(
            EXAM_INFO_WORDING,
            _context(entity.display_name),
            data.seo,
            path,
            entity.image,
            keywords,
        )

    wording = EXAM_SILO_WORDING.get(entity.section, EXAM_GENERIC_WORDING)
    return _render(
        wording,
        _context(entity.name, label=section.label, display_name=entity.display_name),
        getattr(data, "silo_content", None),
        path + section.path,
        entity.image,
    )


def article_template(entity: NormalizedEntity, data: ArticleData) -> MetadataTemplate:
    description = _override_text(data.meta_desc) or (
        f"Read {entity.name} on {SITE_NAME}. Get expert insights and comprehensive information."
    )
    keywords = [data.category or "education", SITE_NAME, "India"]
    return _finish(
        entity.name,
        description,
        keywords,
        build_article_path(entity.slug, entity.entity_id),
        entity.image,
        entity.name,
    )


def author_template(entity: NormalizedEntity, data: AuthorData) -> MetadataTemplate:
    count = entity.count or 0
    published = f" {count} articles published." if count > 0 else ""
    description = _override_text(data.bio) or (
        f"Read articles by {entity.name} on {SITE_NAME}.{published} "
        "Expert insights on education in India."
    )
    return _finish(
        f"{entity.name} - Author at {SITE_NAME}",
        description,
        [entity.name, "author", SITE_NAME, "education expert"],
        build_author_path(entity.name, entity.entity_id),
        entity.image,
        entity.name,
    )


def static_template(entity: NormalizedEntity, data: StaticPageData) -> MetadataTemplate:
    return _finish(
        data.title,
        data.description,
        list(data.keywords),
        data.canonical_path,
        entity.image,
        entity.name,
    )


# ---------------------------------------------------------------------------
# Filtered listings
# ---------------------------------------------------------------------------

def college_filter_template(entity: NormalizedEntity, data: FilterPageData) -> MetadataTemplate:
    year = current_year()
    stream = data.stream.name if data.stream else None
    place = entity.city or entity.state or "India"

    heading = f"{stream} Colleges" if stream else "Colleges"
    title = f"Top {heading} in {place} {year}"

    stream_desc = f"{stream.lower()} " if stream else ""
    count = f"{entity.count} " if entity.count else ""
    description = (
        f"Find the best {stream_desc}colleges in {place}. Compare {count}colleges by "
        f"ranking, fees, placements, and admission criteria for {year}."
    )
    return _finish(
        title,
        description,
        generate_unique_filter_keywords(data) + [f"top colleges {year}"],
        build_listing_path("colleges", filter_state_for(data)),
        None,
        entity.name,
    )


def exam_filter_template(entity: NormalizedEntity, data: FilterPageData) -> MetadataTemplate:
    year = current_year()
    stream = data.stream.name if data.stream else None

    if stream:
        title = f"{stream} Entrance Exams {year} - Complete List"
        description = (
            f"Complete list of {stream.lower()} entrance exams in India for {year}. "
            "Check exam dates, eligibility, syllabus, and application process."
        )
        keywords = generate_unique_filter_keywords(data) + [
            f"{stream} entrance exams",
            f"entrance exams {year}",
            "competitive exams India",
        ]
    else:
        title = f"Top Entrance Exams in India {year}"
        description = (
            f"Complete list of entrance exams in India for {year}. "
            "Engineering, Medical, Management, and more."
        )
        keywords = generate_unique_filter_keywords(data) + [
            f"entrance exams {year}",
            "competitive exams India",
            "entrance exams",
        ]

    return _finish(
        title,
        description,
        keywords,
        build_listing_path("exams", filter_state_for(data)),
        None,
        entity.name,
    )


def filter_template(entity: NormalizedEntity, data: FilterPageData) -> MetadataTemplate:
    if data.entity_type == "exam":
        return exam_filter_template(entity, data)
    return college_filter_template(entity, data)
