"""JSON-LD ``@graph`` generation per page variant."""

import json
import logging
from typing import Any, Callable, Dict, List, Mapping

from scholarseo.config import SCHEMA_CONTEXT, build_canonical_url
from scholarseo.models.entities import CourseData, FAQItem
from scholarseo.services.breadcrumbs import build_breadcrumbs
from scholarseo.services.faq import parse_faqs_from_html, validate_faq_for_schema
from scholarseo.services.normalizer import NormalizedEntity, normalize
from scholarseo.services.schema_nodes import (
    Node,
    build_article_node,
    build_breadcrumb_list_node,
    build_college_date_nodes,
    build_college_node,
    build_course_node,
    build_exam_date_nodes,
    build_exam_event_node,
    build_faq_node,
    build_organization_node,
    build_profile_page_node,
    build_program_node,
    build_webpage_node,
    build_website_node,
)
from scholarseo.services.slug_codec import (
    build_article_path,
    build_author_path,
    build_college_path,
    build_exam_path,
)

logger = logging.getLogger(__name__)

SchemaDocument = Dict[str, Any]

# Escapes that keep a JSON body from closing its <script> element
_SCRIPT_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}


def _document(nodes: List[Node]) -> SchemaDocument:
    return {"@context": SCHEMA_CONTEXT, "@graph": nodes}


def _page_faqs(page) -> List[FAQItem]:
    """Explicit FAQs, else the schema-worthy ones found in the page body."""
    if page.faqs:
        return page.faqs
    return [faq for faq in parse_faqs_from_html(page.content) if validate_faq_for_schema(faq)]


def _college_nodes(page, entity: NormalizedEntity) -> List[Node]:
    data = page.data
    url = build_canonical_url(build_college_path(entity.slug, entity.entity_id))
    nodes = [
        build_college_node(
            entity.name,
            url,
            logo=entity.image,
            city=entity.city,
            state=entity.state,
            location=entity.location,
            phone=data.college_phone,
            email=data.college_email,
            website=data.college_website,
            established_year=data.established_year,
            rating=data.rating,
        ),
        build_breadcrumb_list_node(build_breadcrumbs(page)),
    ]
    faq = build_faq_node(_page_faqs(page))
    if faq is not None:
        nodes.append(faq)
    nodes.extend(build_college_date_nodes(entity.name, page.dates, url))
    return nodes


def _exam_nodes(page, entity: NormalizedEntity) -> List[Node]:
    data = page.data
    url = build_canonical_url(build_exam_path(entity.slug, entity.entity_id))
    nodes: List[Node] = []

    event = build_exam_event_node(
        entity.display_name,
        url,
        exam_date=data.exam_date,
        application_start_date=data.application_start_date,
        description=data.exam_description,
        exam_mode=data.exam_mode,
        conducting_body=data.conducting_body,
        logo=entity.image,
    )
    if event is not None:
        nodes.append(event)

    nodes.append(build_breadcrumb_list_node(build_breadcrumbs(page)))
    nodes.extend(
        build_exam_date_nodes(
            entity.name,
            url,
            data.exam_dates,
            application_start_date=data.application_start_date,
            application_end_date=data.application_end_date,
            conducting_body=data.conducting_body,
        )
    )

    faq = build_faq_node(_page_faqs(page))
    if faq is not None:
        nodes.append(faq)
    return nodes


def _article_nodes(page, entity: NormalizedEntity) -> List[Node]:
    data = page.data
    url = build_canonical_url(build_article_path(entity.slug, entity.entity_id))

    author_url = None
    if data.author and data.author.author_id is not None and entity.author_name:
        author_url = build_canonical_url(build_author_path(entity.author_name, data.author.author_id))

    return [
        build_article_node(
            entity.name,
            url,
            description=data.meta_desc,
            published_at=entity.published_at,
            modified_at=entity.modified_at,
            author_name=entity.author_name,
            author_url=author_url,
            author_image=data.author.image_url if data.author else None,
            image=entity.image,
            category=data.category,
            tags=data.tags,
            word_count=data.word_count,
        ),
        build_webpage_node(
            entity.name,
            url,
            page_type="ItemPage",
            description=data.meta_desc,
            published_at=entity.published_at,
            modified_at=entity.modified_at,
        ),
        build_breadcrumb_list_node(build_breadcrumbs(page)),
    ]


def _author_nodes(page, entity: NormalizedEntity) -> List[Node]:
    url = build_canonical_url(build_author_path(entity.name, entity.entity_id))
    return [
        build_profile_page_node(entity.name, url, bio=page.data.bio, image=entity.image),
        build_breadcrumb_list_node(build_breadcrumbs(page)),
    ]


def _filter_nodes(page, entity: NormalizedEntity) -> List[Node]:
    return [build_breadcrumb_list_node(build_breadcrumbs(page))]


def _static_nodes(page, entity: NormalizedEntity) -> List[Node]:
    nodes = [
        build_webpage_node(
            entity.name,
            page.data.canonical_path,
            description=page.data.description,
        )
    ]
    if page.breadcrumbs:
        nodes.append(build_breadcrumb_list_node(build_breadcrumbs(page)))
    return nodes


_BUILDERS: Dict[str, Callable[[Any, NormalizedEntity], List[Node]]] = {
    "college": _college_nodes,
    "college-tab": _college_nodes,
    "exam": _exam_nodes,
    "exam-silo": _exam_nodes,
    "article": _article_nodes,
    "author": _author_nodes,
    "filter": _filter_nodes,
    "static": _static_nodes,
}


def generate_page_schema(page) -> SchemaDocument:
    """Return the ``{"@context", "@graph"}`` document for *page*.

    Error pages and unresolved entities get an empty graph.

    Raises:
        ValueError: if *page* is not a known page variant.
    """
    entity = normalize(page)
    if not entity.resolved:
        if page.type != "error":
            logger.warning("Emitting empty schema graph for unresolved %s page", page.type)
        return _document([])
    return _document(_BUILDERS[page.type](page, entity))


def generate_global_schema() -> SchemaDocument:
    """Organization and WebSite nodes shared by every page."""
    return _document([build_organization_node(), build_website_node()])


def generate_course_schema(course: CourseData) -> SchemaDocument:
    """Course and EducationalOccupationalProgram nodes for *course*."""
    provider_url = None
    if course.college:
        provider_url = build_canonical_url(build_college_path(course.college.slug, course.college.college_id))
    return _document([build_course_node(course, provider_url), build_program_node(course, provider_url)])


def merge_schemas(*schemas: Mapping[str, Any]) -> SchemaDocument:
    """Flatten documents into one ``@graph`` in argument order.

    A ``@graph`` may be a list or a tuple.  A mapping without one is a bare
    node and is appended only when it carries a ``@type``; documents with a
    ``@context`` but no usable graph, and other typeless mappings, are
    skipped.
    """
    graph: List[Node] = []
    for schema in schemas:
        nodes = schema.get("@graph")
        if isinstance(nodes, (list, tuple)):
            graph.extend(nodes)
        elif "@context" not in schema and "@type" in schema:
            graph.append(dict(schema))
        else:
            logger.warning("Skipping schema without a @graph or @type: %s", sorted(schema))
    return _document(graph)


def add_to_schema(document: Mapping[str, Any], *nodes: Node) -> SchemaDocument:
    return merge_schemas(document, _document(list(nodes)))


def render_json_ld(document: Mapping[str, Any]) -> str:
    """Serialise *document* for a ``<script type="application/ld+json">`` body."""
    body = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
    for char, escape in _SCRIPT_ESCAPES.items():
        body = body.replace(char, escape)
    return body
