"""FAQ helpers: extraction from page HTML and the FAQPage eligibility check."""

import re
from typing import List

from bs4 import BeautifulSoup, Tag

from scholarseo.models.entities import FAQItem

_WHITESPACE_RE = re.compile(r"\s+")

# Headings that read like a question even without a trailing "?"
_QUESTION_START_RE = re.compile(r"^(what|how|when|where|why|can|is|do)\b", re.IGNORECASE)
_SCHEMA_QUESTION_START_RE = re.compile(
    r"^(what|how|when|where|why|can|is|do|does|will|should|are|has|have)\b",
    re.IGNORECASE,
)

_MIN_QUESTION_LENGTH = 5
_MIN_ANSWER_LENGTH = 10
_MIN_SCHEMA_QUESTION_LENGTH = 10
_MIN_SCHEMA_ANSWER_LENGTH = 20


def sanitize_faq_text(text: str) -> str:
    """Collapse tabs, newlines and runs of spaces into single spaces."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def _text(node: Tag) -> str:
    return sanitize_faq_text(node.get_text(" ", strip=True))


def _is_substantial(question: str, answer: str) -> bool:
    return len(question) > _MIN_QUESTION_LENGTH and len(answer) > _MIN_ANSWER_LENGTH


def _looks_like_question(text: str) -> bool:
    return "?" in text or bool(_QUESTION_START_RE.match(text))


def parse_faqs_from_html(html: str) -> List[FAQItem]:
    """Extract question/answer pairs from rendered FAQ markup.

    Two layouts are recognised: an ``<h3>``/``<h4>`` question directly followed
    by a ``<p>`` answer, and ``<dt>``/``<dd>`` pairs in a definition list.
    Headings only count when they read like a question.
    """
    if not html:
        return []

    soup = BeautifulSoup(html, "lxml")
    for tag in soup(["script", "style"]):
        tag.decompose()

    faqs: List[FAQItem] = []

    for heading in soup.find_all(["h3", "h4"]):
        answer_node = heading.find_next_sibling()
        if answer_node is None or answer_node.name != "p":
            continue
        question, answer = _text(heading), _text(answer_node)
        if _is_substantial(question, answer) and _looks_like_question(question):
            faqs.append(FAQItem(question=question, answer=answer))

    for term in soup.find_all("dt"):
        definition = term.find_next_sibling()
        if definition is None or definition.name != "dd":
            continue
        question, answer = _text(term), _text(definition)
        if _is_substantial(question, answer):
            faqs.append(FAQItem(question=question, answer=answer))

    return faqs


def validate_faq_for_schema(faq: FAQItem) -> bool:
    """Whether *faq* is good enough to appear in ``FAQPage`` markup."""
    if len(faq.question) < _MIN_SCHEMA_QUESTION_LENGTH:
        return False
    if len(faq.answer) < _MIN_SCHEMA_ANSWER_LENGTH:
        return False
    return "?" in faq.question or bool(_SCHEMA_QUESTION_START_RE.match(faq.question))
