"""Advisory content-quality checks.

Scores start at 100 and lose points per issue.  The result recommends whether
a page should be indexed but never changes the metadata generator's robots
rule on its own.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup

from scholarseo.config import (
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    MIN_FAQ_COUNT,
    MIN_FILTER_RESULTS,
    MIN_WORD_COUNT,
    TITLE_MAX_LENGTH,
)
from scholarseo.models.entities import FAQItem
from scholarseo.models.validation import ContentIssue, ContentValidation

_WHITESPACE_RE = re.compile(r"\s+")

TITLE_MIN_LENGTH = 30
# Lengths beyond the SERP limits that are tolerated before flagging
_TITLE_SLACK = 10
_DESCRIPTION_SLACK = 20
_MIN_FAQ_ANSWER_LENGTH = 50
_MIN_FAQ_QUESTION_LENGTH = 10


def extract_text_from_html(html: Optional[str]) -> str:
    """Visible text of *html* with script/style removed and whitespace collapsed."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return _WHITESPACE_RE.sub(" ", soup.get_text(" ")).strip()


def count_words(html: Optional[str]) -> int:
    text = extract_text_from_html(html)
    return len(text.split()) if text else 0


def _clamp(score: int) -> int:
    return max(0, min(100, score))


def validate_content(
    title: Optional[str] = None,
    description: Optional[str] = None,
    content: Optional[str] = None,
    h1: Optional[str] = None,
    faqs: Optional[List[FAQItem]] = None,
    word_count: Optional[int] = None,
) -> ContentValidation:
    """Score a page's title, description, body, heading and FAQs.

    *h1* and *faqs* are only checked when supplied (``None`` means the page
    does not have that element to check).  *word_count* overrides counting
    the words of *content*.
    """
    issues: List[ContentIssue] = []
    recommendations: List[str] = []
    score = 100

    if not title or not title.strip():
        issues.append(ContentIssue(type="missing_title", severity="error",
                                   message="Page is missing a title tag", field="title"))
        score -= 25
    else:
        length = len(title)
        if length < TITLE_MIN_LENGTH:
            issues.append(ContentIssue(
                type="short_title",
                severity="warning",
                message=f"Title is too short ({length} chars). Aim for 50-60 characters.",
                field="title",
            ))
            score -= 10
            recommendations.append("Expand title to include more descriptive keywords")
        if length > TITLE_MAX_LENGTH + _TITLE_SLACK:
            issues.append(ContentIssue(
                type="long_title",
                severity="warning",
                message=f"Title is too long ({length} chars). May be truncated in SERPs.",
                field="title",
            ))
            score -= 5
            recommendations.append(f"Shorten title to under {TITLE_MAX_LENGTH} characters")

    if not description or not description.strip():
        issues.append(ContentIssue(type="missing_description", severity="error",
                                   message="Page is missing a meta description", field="description"))
        score -= 20
        recommendations.append("Add a compelling meta description")
    else:
        length = len(description)
        if length < DESCRIPTION_MIN_LENGTH:
            issues.append(ContentIssue(
                type="short_description",
                severity="warning",
                message=f"Description is too short ({length} chars). Aim for 120-160 characters.",
                field="description",
            ))
            score -= 10
            recommendations.append("Expand description to provide more context for searchers")
        if length > DESCRIPTION_MAX_LENGTH + _DESCRIPTION_SLACK:
            issues.append(ContentIssue(
                type="long_description",
                severity="info",
                message=f"Description is long ({length} chars). May be truncated in SERPs.",
                field="description",
            ))
            score -= 3

    words = word_count if word_count else count_words(content)
    if words < MIN_WORD_COUNT:
        issues.append(ContentIssue(
            type="thin_content",
            severity="error",
            message=f"Content is thin ({words} words). Minimum recommended: {MIN_WORD_COUNT} words.",
            field="content",
        ))
        score -= 30
        recommendations.append(
            f"Add more unique, valuable content. Current: {words} words, Target: {MIN_WORD_COUNT}+ words"
        )

    if h1 is not None and not h1.strip():
        issues.append(ContentIssue(type="missing_h1", severity="warning",
                                   message="Page is missing an H1 heading", field="h1"))
        score -= 10
        recommendations.append("Add a clear H1 heading that includes target keywords")

    if faqs is not None:
        if not faqs:
            issues.append(ContentIssue(type="missing_faq", severity="error",
                                       message="FAQ page has no FAQ items", field="faqs"))
            score -= 25
        elif len(faqs) < MIN_FAQ_COUNT:
            issues.append(ContentIssue(
                type="insufficient_faq",
                severity="warning",
                message=f"FAQ page has only {len(faqs)} items. Recommend at least {MIN_FAQ_COUNT}.",
                field="faqs",
            ))
            score -= 10
            recommendations.append(f"Add more FAQ items. Current: {len(faqs)}, Target: {MIN_FAQ_COUNT}+")

        short = [
            faq for faq in faqs
            if len(faq.answer) < _MIN_FAQ_ANSWER_LENGTH or len(faq.question) < _MIN_FAQ_QUESTION_LENGTH
        ]
        if short:
            issues.append(ContentIssue(
                type="thin_content",
                severity="warning",
                message=f"{len(short)} FAQ items have very short answers",
                field="faqs",
            ))
            score -= 5 * len(short)

    score = _clamp(score)
    blocking = any(
        issue.severity == "error" and issue.type in ("thin_content", "missing_content")
        for issue in issues
    )
    return ContentValidation(
        is_valid=score >= 50,
        score=score,
        issues=issues,
        recommendations=recommendations,
        should_index=not blocking and score >= 40,
        should_nofollow=score < 30,
    )


def validate_filter_page(entity_count: int, has_description: bool, has_content: bool) -> ContentValidation:
    """Flag filter combinations too thin to deserve indexing."""
    issues: List[ContentIssue] = []
    recommendations: List[str] = []
    score = 100

    if entity_count == 0:
        issues.append(ContentIssue(type="missing_content", severity="error",
                                   message="Filter page has no results"))
        score -= 50
        recommendations.append("Consider noindexing empty filter pages")
    elif entity_count < MIN_FILTER_RESULTS:
        issues.append(ContentIssue(type="thin_content", severity="warning",
                                   message=f"Filter page has only {entity_count} results"))
        score -= 20
        recommendations.append("Consider consolidating with parent filter or adding more content")

    if not has_description:
        issues.append(ContentIssue(type="missing_description", severity="warning",
                                   message="Filter page lacks a unique description"))
        score -= 15

    if not has_content:
        issues.append(ContentIssue(type="thin_content", severity="warning",
                                   message="Filter page has no descriptive content"))
        score -= 15
        recommendations.append("Add introductory content explaining the filter criteria")

    score = _clamp(score)
    return ContentValidation(
        is_valid=score >= 50,
        score=score,
        issues=issues,
        recommendations=recommendations,
        should_index=entity_count >= MIN_FILTER_RESULTS and score >= 40,
        should_nofollow=entity_count < MIN_FILTER_RESULTS or score < 30,
    )


def get_robots_directive(validation: ContentValidation) -> str:
    """``robots`` meta content recommended by *validation*."""
    if validation.should_index:
        return "index, follow"
    return "noindex, nofollow" if validation.should_nofollow else "noindex, follow"
