"""Tests for scholarseo.services.schema and scholarseo.services.schema_nodes."""

import json

import pytest

from scholarseo.config import BASE_URL, SCHEMA_CONTEXT
from scholarseo.models.breadcrumb import BreadcrumbItem
from scholarseo.models.entities import (
    ArticleAuthor,
    ArticleData,
    AuthorData,
    CollegeData,
    CourseCollege,
    CourseData,
    DateItem,
    ErrorPageData,
    ExamData,
    FacetRef,
    FAQItem,
    FilterPageData,
    StaticPageData,
)
from scholarseo.models.page import (
    ArticlePage,
    AuthorPage,
    CollegePage,
    ErrorPage,
    ExamPage,
    FilterPage,
    StaticPage,
)
from scholarseo.services.schema import (
    add_to_schema,
    generate_course_schema,
    generate_global_schema,
    generate_page_schema,
    merge_schemas,
    render_json_ld,
)
from scholarseo.services.schema_nodes import (
    EVENT_POSTPONED,
    EVENT_SCHEDULED,
    OFFLINE_ATTENDANCE,
    ONLINE_ATTENDANCE,
    build_breadcrumb_list_node,
    ORGANIZATION_ID,
    build_college_node,
    build_course_node,
    build_faq_node,
    build_program_node,
    credential_for,
    detect_event_type,
    program_type_for,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

FAQS = [
    FAQItem(question="What is the fee structure?", answer="The annual tuition fee is two lakh rupees."),
    FAQItem(question="Is hostel available?", answer="Yes, hostels are available for all students."),
]


def _types(document):
    return [node["@type"] for node in document["@graph"]]


def _nodes_of(document, node_type):
    return [node for node in document["@graph"] if node["@type"] == node_type]


def _college_page(**page_fields) -> CollegePage:
    data = CollegeData(
        college_id=123,
        college_name="IIT Delhi",
        slug="iit-delhi",
        city="New Delhi",
        state="Delhi",
        rating=4.5,
        established_year=1961,
    )
    return CollegePage(data=data, **page_fields)


# ---------------------------------------------------------------------------
# Page graphs
# ---------------------------------------------------------------------------

class TestCollegeSchema:
    def test_graph_types(self):
        page = _college_page(
            faqs=FAQS,
            dates=[
                DateItem(event="Application", start_date="2026-01-01", end_date="2026-02-01"),
                DateItem(event="Counselling"),
            ],
        )
        document = generate_page_schema(page)
        assert document["@context"] == SCHEMA_CONTEXT
        assert _types(document) == ["CollegeOrUniversity", "BreadcrumbList", "FAQPage", "Event"]

    def test_college_node(self):
        college = _nodes_of(generate_page_schema(_college_page()), "CollegeOrUniversity")[0]
        assert college["name"] == "IIT Delhi"
        assert college["url"] == f"{BASE_URL}/colleges/iit-delhi-123"
        assert college["address"]["addressLocality"] == "New Delhi"
        assert college["address"]["addressCountry"] == "IN"
        assert college["foundingDate"] == "1961"
        assert college["aggregateRating"]["ratingValue"] == 4.5

    def test_no_faqs_no_faq_node(self):
        assert "FAQPage" not in _types(generate_page_schema(_college_page()))

    def test_faqs_parsed_from_content(self):
        content = (
            "<h3>What is the fee structure?</h3>"
            "<p>The annual tuition fee is two lakh rupees.</p>"
        )
        faq = _nodes_of(generate_page_schema(_college_page(content=content)), "FAQPage")[0]
        assert faq["mainEntity"][0]["name"] == "What is the fee structure?"

    def test_nodes_carry_no_context(self):
        document = generate_page_schema(_college_page(faqs=FAQS))
        assert all("@context" not in node for node in document["@graph"])

    def test_breadcrumb_positions_and_absolute_items(self):
        crumbs = _nodes_of(generate_page_schema(_college_page()), "BreadcrumbList")[0]
        elements = crumbs["itemListElement"]
        assert [e["position"] for e in elements] == list(range(1, len(elements) + 1))
        assert all(e["item"].startswith(BASE_URL) for e in elements)

    def test_unresolved_college_has_empty_graph(self):
        page = CollegePage(data=CollegeData(college_name="No Id"))
        assert generate_page_schema(page) == {"@context": SCHEMA_CONTEXT, "@graph": []}


class TestExamSchema:
    def test_no_date_no_event(self):
        page = ExamPage(data=ExamData(exam_id=4, exam_name="JEE Main", slug="jee-main"))
        assert _types(generate_page_schema(page)) == ["BreadcrumbList"]

    def test_exam_date_adds_event(self):
        page = ExamPage(data=ExamData(
            exam_id=4, exam_name="JEE Main", exam_full_name="Joint Entrance Examination Main",
            slug="jee-main", exam_date="2026-04-01", conducting_body="NTA",
        ))
        document = generate_page_schema(page)
        assert _types(document) == ["Event", "BreadcrumbList"]
        event = document["@graph"][0]
        assert event["name"].startswith("Joint Entrance Examination Main")
        assert event["startDate"] == "2026-04-01"
        assert event["organizer"]["name"] == "NTA"
        assert event["location"]["@type"] == "Place"

    def test_online_exam_has_virtual_location(self):
        page = ExamPage(data=ExamData(exam_id=4, exam_name="GATE", exam_date="2026-02-01", exam_mode="Online"))
        event = generate_page_schema(page)["@graph"][0]
        assert event["eventAttendanceMode"] == ONLINE_ATTENDANCE
        assert event["location"]["@type"] == "VirtualLocation"

    def test_application_window_fallback(self):
        page = ExamPage(data=ExamData(
            exam_id=4, exam_name="GATE",
            application_start_date="2025-08-01", application_end_date="2025-09-01",
        ))
        document = generate_page_schema(page)
        assert _types(document) == ["Event", "BreadcrumbList", "Event"]
        window = document["@graph"][2]
        assert window["name"] == "GATE Application Start"
        assert window["endDate"] == "2025-09-01"

    def test_calendar_rows_without_dates_skipped(self):
        page = ExamPage(
            data=ExamData(
                exam_id=4, exam_name="GATE",
                exam_dates=[
                    DateItem(event="Exam Day", start_date="2026-02-01", is_confirmed=True),
                    DateItem(event="Result"),
                ],
            ),
            faqs=FAQS,
        )
        document = generate_page_schema(page)
        assert _types(document) == ["BreadcrumbList", "Event", "FAQPage"]
        assert document["@graph"][1]["eventStatus"] == EVENT_SCHEDULED


class TestOtherSchemas:
    def test_article(self):
        page = ArticlePage(data=ArticleData(
            article_id=8, title="JEE tips", slug="jee-tips",
            author=ArticleAuthor(author_id=3, author_name="Jane Doe"),
            created_at="2025-01-01", tags=["jee", "tips"],
        ))
        document = generate_page_schema(page)
        assert _types(document) == ["BlogPosting", "ItemPage", "BreadcrumbList"]
        article = document["@graph"][0]
        assert article["headline"] == "JEE tips"
        assert article["author"] == {"@type": "Person", "name": "Jane Doe", "url": f"{BASE_URL}/authors/jane-doe-3"}
        assert article["datePublished"] == "2025-01-01"
        assert article["dateModified"] == "2025-01-01"
        assert article["keywords"] == "jee, tips"
        assert article["publisher"]["logo"]["@type"] == "ImageObject"

    def test_author(self):
        page = AuthorPage(data=AuthorData(author_id=3, author_name="Jane Doe", bio="Writes about exams."))
        document = generate_page_schema(page)
        assert _types(document) == ["ProfilePage", "BreadcrumbList"]
        profile = document["@graph"][0]
        assert profile["mainEntity"]["@type"] == "Person"
        assert profile["mainEntity"]["description"] == "Writes about exams."

    def test_filter(self):
        page = FilterPage(data=FilterPageData(entity_type="college", stream=FacetRef(name="Law")))
        assert _types(generate_page_schema(page)) == ["BreadcrumbList"]

    def test_static(self):
        page = StaticPage(data=StaticPageData(title="About Us", description="Who we are.", canonical_path="/about"))
        document = generate_page_schema(page)
        assert _types(document) == ["WebPage"]
        assert document["@graph"][0]["url"] == f"{BASE_URL}/about"

    def test_static_with_explicit_breadcrumbs(self):
        page = StaticPage(
            data=StaticPageData(title="About Us", description="d", canonical_path="/about"),
            breadcrumbs=[BreadcrumbItem(name="Home", href="/"), BreadcrumbItem(name="About", href="/about", current=True)],
        )
        assert _types(generate_page_schema(page)) == ["WebPage", "BreadcrumbList"]

    def test_static_explicit_breadcrumbs_are_normalized(self):
        page = StaticPage(
            data=StaticPageData(title="About Us", description="d", canonical_path="/about"),
            breadcrumbs=[BreadcrumbItem(name="About", href="/about")],
        )
        crumbs = _nodes_of(generate_page_schema(page), "BreadcrumbList")[0]
        assert [e["name"] for e in crumbs["itemListElement"]] == ["Home", "About"]
        assert [e["position"] for e in crumbs["itemListElement"]] == [1, 2]

    def test_error_page_has_empty_graph(self):
        assert generate_page_schema(ErrorPage(data=ErrorPageData(kind="error")))["@graph"] == []


# ---------------------------------------------------------------------------
# Node builders
# ---------------------------------------------------------------------------

class TestNodes:
    def test_faq_node_drops_blank_items(self):
        node = build_faq_node([FAQItem(question=" ", answer="x"), FAQItem(question="Q\n\tone?", answer="A  1")])
        assert len(node["mainEntity"]) == 1
        assert node["mainEntity"][0]["name"] == "Q one?"
        assert node["mainEntity"][0]["acceptedAnswer"]["text"] == "A 1"

    def test_faq_node_none_when_empty(self):
        assert build_faq_node([]) is None

    def test_college_node_minimal(self):
        assert build_college_node("X", "https://x.example") == {
            "@type": "CollegeOrUniversity",
            "name": "X",
            "url": "https://x.example",
        }

    def test_breadcrumb_list_keeps_absolute_items(self):
        node = build_breadcrumb_list_node([BreadcrumbItem(name="P", href="https://p.example/a", current=True)])
        assert node["itemListElement"][0]["item"] == "https://p.example/a"

    def test_detect_event_type(self):
        assert detect_event_type("Application Form") == "admission"
        assert detect_event_type("Exam Day") == "exam"
        assert detect_event_type("Result Declaration") == "result"
        assert detect_event_type("Counselling Round 1") == "counseling"
        assert detect_event_type("Orientation") == "general"

    def test_college_date_events(self):
        page = _college_page(dates=[
            DateItem(event="Application", start_date="2026-01-01"),
            DateItem(event="Result Declaration", start_date="2026-06-01", is_confirmed=True),
        ])
        application, result = _nodes_of(generate_page_schema(page), "Event")
        assert application["name"] == "IIT Delhi - Application"
        assert application["eventStatus"] == EVENT_POSTPONED
        assert application["eventAttendanceMode"] == OFFLINE_ATTENDANCE
        assert result["eventStatus"] == EVENT_SCHEDULED
        assert result["location"]["@type"] == "VirtualLocation"


# ---------------------------------------------------------------------------
# Global schema, merging, rendering
# ---------------------------------------------------------------------------

class TestGlobalSchema:
    def test_organization_and_website(self):
        document = generate_global_schema()
        assert _types(document) == ["Organization", "WebSite"]
        website = document["@graph"][1]
        assert website["potentialAction"]["@type"] == "SearchAction"
        assert "{search_term_string}" in website["potentialAction"]["target"]["urlTemplate"]


class TestMergeSchemas:
    def test_concatenates_in_order(self):
        a = generate_global_schema()
        b = generate_page_schema(_college_page())
        merged = merge_schemas(a, b)
        assert merged["@context"] == SCHEMA_CONTEXT
        assert merged["@graph"] == a["@graph"] + b["@graph"]

    def test_associative(self):
        a = generate_global_schema()
        b = generate_page_schema(_college_page())
        c = {"@type": "Thing", "name": "extra"}
        assert merge_schemas(merge_schemas(a, b), c) == merge_schemas(a, merge_schemas(b, c))

    def test_bare_node_appended(self):
        merged = merge_schemas({"@type": "Thing", "name": "x"})
        assert merged["@graph"] == [{"@type": "Thing", "name": "x"}]

    def test_empty(self):
        assert merge_schemas() == {"@context": SCHEMA_CONTEXT, "@graph": []}

    def test_tuple_graph_flattened(self):
        merged = merge_schemas({"@context": SCHEMA_CONTEXT, "@graph": ({"@type": "Thing"}, {"@type": "Place"})})
        assert _types(merged) == ["Thing", "Place"]

    def test_document_without_graph_skipped(self):
        merged = merge_schemas(
            generate_global_schema(),
            {"@context": SCHEMA_CONTEXT},
            {"@context": SCHEMA_CONTEXT, "@graph": "not-a-list"},
        )
        assert _types(merged) == ["Organization", "WebSite"]

    def test_typeless_mapping_skipped(self):
        assert merge_schemas({"name": "orphan"})["@graph"] == []

    def test_add_to_schema(self):
        document = add_to_schema(generate_global_schema(), {"@type": "Thing"})
        assert _types(document) == ["Organization", "WebSite", "Thing"]


class TestRenderJsonLd:
    def test_script_breaking_characters_escaped(self):
        document = {"@context": SCHEMA_CONTEXT, "@graph": [{"@type": "Thing", "name": "</script><b>&"}]}
        body = render_json_ld(document)
        assert "<" not in body
        assert ">" not in body
        assert "&" not in body
        assert "\\u003c/script\\u003e" in body

    def test_parses_back_to_document(self):
        document = {"@context": SCHEMA_CONTEXT, "@graph": [{"@type": "Thing", "name": "a < b & café"}]}
        assert json.loads(render_json_ld(document)) == document

    def test_non_ascii_kept(self):
        body = render_json_ld({"name": "café"})
        assert "café" in body


# ---------------------------------------------------------------------------
# Course schema
# ---------------------------------------------------------------------------

IIT = CourseCollege(college_id=123, college_name="IIT Delhi", slug="iit-delhi")


class TestCourseSchema:
    def test_course_at_college(self):
        course = CourseData(
            course_name="B.Tech CSE",
            course_full_name="B.Tech Computer Science and Engineering",
            duration="4 years",
            duration_years=4,
            fee_min=200000,
            fee_max=250000,
            mode="full-time",
            college=IIT,
        )
        node = build_course_node(course, f"{BASE_URL}/colleges/iit-delhi-123")
        assert node["name"] == "B.Tech Computer Science and Engineering"
        assert node["description"] == "B.Tech Computer Science and Engineering at IIT Delhi. Duration: 4 years"
        assert node["provider"] == {
            "@type": "CollegeOrUniversity",
            "name": "IIT Delhi",
            "url": f"{BASE_URL}/colleges/iit-delhi-123",
        }
        assert node["timeRequired"] == "P4Y"
        assert node["hasCourseInstance"]["courseMode"] == "Full-time"
        assert node["offers"]["priceSpecification"]["minPrice"] == 200000
        assert node["offers"]["priceSpecification"]["maxPrice"] == 250000
        assert node["offers"]["priceCurrency"] == "INR"
        assert node["educationalCredentialAwarded"] == "Bachelor of Technology"

    def test_site_wide_course(self):
        node = build_course_node(CourseData(course_name="MBA", duration="2 years", fee_min=900000, mode="Weekend"))
        assert node["description"] == "MBA. Duration: 2 years"
        assert node["provider"]["@id"] == ORGANIZATION_ID
        assert node["timeRequired"] == "2 years"
        assert node["hasCourseInstance"]["courseMode"] == "Weekend"
        assert node["offers"] == {"@type": "Offer", "priceCurrency": "INR", "price": 900000}

    def test_optional_properties_omitted(self):
        node = build_course_node(CourseData(course_name="Yoga Studies"))
        assert set(node) == {"@type", "name", "description", "provider"}

    def test_program(self):
        node = build_program_node(CourseData(course_name="M.Tech VLSI", duration_years=2, college=IIT))
        assert node["@type"] == "EducationalOccupationalProgram"
        assert node["description"] == "M.Tech VLSI program offered by IIT Delhi"
        assert node["programType"] == "Master's degree"
        assert node["timeToComplete"] == "P2Y"
        assert node["educationalCredentialAwarded"] == "Master of Technology"

    def test_program_without_college_has_no_provider(self):
        assert "provider" not in build_program_node(CourseData(course_name="Diploma in Pharmacy"))

    def test_generate_course_schema(self):
        document = generate_course_schema(CourseData(course_name="BBA", college=IIT))
        assert document["@context"] == SCHEMA_CONTEXT
        assert _types(document) == ["Course", "EducationalOccupationalProgram"]
        assert document["@graph"][0]["provider"]["url"] == f"{BASE_URL}/colleges/iit-delhi-123"

    @pytest.mark.parametrize(
        "name, credential",
        [
            ("B.Tech", "Bachelor of Technology"),
            ("Executive MBA", "Master of Business Administration"),
            ("B.A. English", "Bachelor of Arts"),
            ("B.Arch", None),
            ("LLM Corporate Law", "Master of Laws"),
            ("Fine Arts", None),
        ],
    )
    def test_credential(self, name, credential):
        assert credential_for(name) == credential

    @pytest.mark.parametrize(
        "name, program_type",
        [
            ("B.Sc Physics", "Bachelor's degree"),
            ("Bachelor of Design", "Bachelor's degree"),
            ("MBA", "Master's degree"),
            ("Mechanical Engineering", "Degree"),
            ("PhD Chemistry", "Doctoral degree"),
            ("PG Diploma in Management", "Diploma"),
            ("MBBS", "Degree"),
        ],
    )
    def test_program_type(self, name, program_type):
        assert program_type_for(name) == program_type
