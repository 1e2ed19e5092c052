"""Builders for individual schema.org nodes.

Nodes are plain dicts placed inside a shared ``@graph``, so none of them
carries its own ``@context``.  Optional properties are only set when the
source value is present.
"""

import re
from typing import Any, Dict, List, Optional, Sequence

from scholarseo.config import (
    BASE_URL,
    CONTACT_EMAIL,
    CONTACT_LANGUAGES,
    CONTACT_TYPE,
    COUNTRY_CODE,
    LOGO_URL,
    OG_IMAGE_HEIGHT,
    OG_IMAGE_WIDTH,
    PUBLISHER_LOGO_HEIGHT,
    PUBLISHER_LOGO_WIDTH,
    SCHEMA_CONTEXT,
    SITE_DESCRIPTION,
    SITE_NAME,
    SOCIAL_LINKS,
    build_canonical_url,
    current_year,
)
from scholarseo.models.breadcrumb import BreadcrumbItem
from scholarseo.models.entities import CourseData, DateItem, FAQItem
from scholarseo.services.faq import sanitize_faq_text

Node = Dict[str, Any]

ORGANIZATION_ID = f"{BASE_URL}/#organization"
WEBSITE_ID = f"{BASE_URL}/#website"

EVENT_SCHEDULED = f"{SCHEMA_CONTEXT}/EventScheduled"
EVENT_POSTPONED = f"{SCHEMA_CONTEXT}/EventPostponed"
OFFLINE_ATTENDANCE = f"{SCHEMA_CONTEXT}/OfflineEventAttendanceMode"
ONLINE_ATTENDANCE = f"{SCHEMA_CONTEXT}/OnlineEventAttendanceMode"
MIXED_ATTENDANCE = f"{SCHEMA_CONTEXT}/MixedEventAttendanceMode"

# (event type, keywords in the event name) checked in order
_EVENT_KEYWORDS = (
    ("admission", ("admission", "application")),
    ("exam", ("exam", "test")),
    ("result", ("result", "declaration")),
    ("counseling", ("counseling", "counselling")),
)
_ATTENDANCE_BY_EVENT_TYPE = {
    "exam": MIXED_ATTENDANCE,
    "result": ONLINE_ATTENDANCE,
    "counseling": ONLINE_ATTENDANCE,
}


def _absolute(url: str) -> str:
    return url if url.startswith("http") else build_canonical_url(url)


def _postal_address(**parts: Optional[str]) -> Node:
    address: Node = {"@type": "PostalAddress", "addressCountry": COUNTRY_CODE}
    address.update({key: value for key, value in parts.items() if value})
    return address


# ---------------------------------------------------------------------------
# Site-wide nodes
# ---------------------------------------------------------------------------

def build_organization_node() -> Node:
    return {
        "@type": "Organization",
        "@id": ORGANIZATION_ID,
        "name": SITE_NAME,
        "url": BASE_URL,
        "logo": LOGO_URL,
        "description": SITE_DESCRIPTION,
        "sameAs": list(SOCIAL_LINKS),
        "contactPoint": {
            "@type": "ContactPoint",
            "contactType": CONTACT_TYPE,
            "availableLanguage": list(CONTACT_LANGUAGES),
            "email": CONTACT_EMAIL,
        },
    }


def build_website_node(include_search_action: bool = True) -> Node:
    node: Node = {
        "@type": "WebSite",
        "@id": WEBSITE_ID,
        "name": SITE_NAME,
        "url": BASE_URL,
        "description": SITE_DESCRIPTION,
    }
    if include_search_action:
        node["potentialAction"] = {
            "@type": "SearchAction",
            "target": {
                "@type": "EntryPoint",
                "urlTemplate": f"{BASE_URL}/search?q={{search_term_string}}",
            },
            "query-input": "required name=search_term_string",
        }
    return node


def build_publisher_node() -> Node:
    return {
        "@type": "Organization",
        "@id": ORGANIZATION_ID,
        "name": SITE_NAME,
        "logo": {
            "@type": "ImageObject",
            "url": LOGO_URL,
            "width": PUBLISHER_LOGO_WIDTH,
            "height": PUBLISHER_LOGO_HEIGHT,
        },
    }


# ---------------------------------------------------------------------------
# Page nodes
# ---------------------------------------------------------------------------

def build_breadcrumb_list_node(crumbs: Sequence[BreadcrumbItem]) -> Node:
    """``BreadcrumbList`` with 1-based positions and absolute item URLs."""
    return {
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": index,
                "name": crumb.name,
                "item": _absolute(crumb.href),
            }
            for index, crumb in enumerate(crumbs, start=1)
        ],
    }


def build_college_node(
    name: str,
    url: str,
    *,
    logo: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    location: Optional[str] = None,
    phone: Optional[str] = None,
    email: Optional[str] = None,
    website: Optional[str] = None,
    established_year: Optional[int] = None,
    rating: Optional[float] = None,
) -> Node:
    node: Node = {"@type": "CollegeOrUniversity", "name": name, "url": url}
    if logo:
        node["logo"] = logo
        node["image"] = logo
    if city or state or location:
        node["address"] = _postal_address(
            addressLocality=city,
            addressRegion=state,
            streetAddress=location,
        )
    if phone:
        node["telephone"] = phone
    if email:
        node["email"] = email
    if website:
        node["sameAs"] = website
    if established_year:
        node["foundingDate"] = str(established_year)
    if rating and rating > 0:
        node["aggregateRating"] = {
            "@type": "AggregateRating",
            "ratingValue": rating,
            "bestRating": 5,
            "worstRating": 1,
        }
    return node


def build_faq_node(faqs: Sequence[FAQItem]) -> Optional[Node]:
    """``FAQPage`` for the non-blank items, or *None* when none remain."""
    valid = [faq for faq in faqs if faq.question.strip() and faq.answer.strip()]
    if not valid:
        return None
    return {
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": sanitize_faq_text(faq.question),
                "acceptedAnswer": {"@type": "Answer", "text": sanitize_faq_text(faq.answer)},
            }
            for faq in valid
        ],
    }


def detect_event_type(event_name: str) -> str:
    name = event_name.lower()
    for event_type, keywords in _EVENT_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return event_type
    return "general"


def build_event_node(
    name: str,
    *,
    description: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    is_confirmed: bool = False,
    event_type: str = "general",
    organizer_name: Optional[str] = None,
    organizer_url: Optional[str] = None,
    url: Optional[str] = None,
) -> Node:
    """Generic ``Event``; result and counseling events are held online."""
    node: Node = {
        "@type": "Event",
        "name": name,
        "eventStatus": EVENT_SCHEDULED if is_confirmed else EVENT_POSTPONED,
        "eventAttendanceMode": _ATTENDANCE_BY_EVENT_TYPE.get(event_type, OFFLINE_ATTENDANCE),
    }
    if description:
        node["description"] = description
    if start_date:
        node["startDate"] = start_date
    if end_date:
        node["endDate"] = end_date
    if event_type in ("result", "counseling"):
        node["location"] = {"@type": "VirtualLocation", "name": "Online"}
    if organizer_name:
        node["organizer"] = {
            "@type": "Organization",
            "name": organizer_name,
            "url": organizer_url or BASE_URL,
        }
    if url:
        node["url"] = url
    return node


def build_college_date_nodes(college_name: str, dates: Sequence[DateItem], college_url: str) -> List[Node]:
    """One ``Event`` per calendar row that has a start or end date."""
    return [
        build_event_node(
            f"{college_name} - {item.event}",
            description=f"{item.event} at {college_name}",
            start_date=item.start_date,
            end_date=item.end_date,
            is_confirmed=item.is_confirmed,
            event_type=detect_event_type(item.event),
            organizer_name=college_name,
            organizer_url=college_url,
            url=college_url,
        )
        for item in dates
        if item.start_date or item.end_date
    ]


def build_exam_event_node(
    display_name: str,
    url: str,
    *,
    exam_date: Optional[str] = None,
    application_start_date: Optional[str] = None,
    description: Optional[str] = None,
    exam_mode: Optional[str] = None,
    conducting_body: Optional[str] = None,
    logo: Optional[str] = None,
) -> Optional[Node]:
    """The exam itself as an ``Event``; *None* when no date is known."""
    start_date = exam_date or application_start_date
    if not start_date:
        return None

    year = current_year()
    online = (exam_mode or "").lower() == "online"
    node: Node = {
        "@type": "Event",
        "name": f"{display_name} {year}",
        "description": description or f"{display_name} entrance examination for {year}",
        "url": url,
        "startDate": start_date,
        "eventStatus": EVENT_SCHEDULED,
        "eventAttendanceMode": ONLINE_ATTENDANCE if online else OFFLINE_ATTENDANCE,
        "organizer": {
            "@type": "Organization",
            "name": conducting_body or SITE_NAME,
            "url": url,
        },
    }
    if online:
        node["location"] = {"@type": "VirtualLocation", "name": "Online Examination", "url": url}
    else:
        node["location"] = {
            "@type": "Place",
            "name": "Examination Centers across India",
            "address": _postal_address(),
        }
    if logo:
        node["image"] = logo
    return node


def build_exam_date_nodes(
    exam_name: str,
    url: str,
    dates: Sequence[DateItem],
    *,
    application_start_date: Optional[str] = None,
    application_end_date: Optional[str] = None,
    conducting_body: Optional[str] = None,
) -> List[Node]:
    """Calendar events for an exam.

    Without a calendar, the application window (when known) becomes the only
    event.
    """
    organizer = {
        "@type": "Organization",
        "name": conducting_body or SITE_NAME,
        "url": BASE_URL,
    }

    if not dates:
        if not application_start_date:
            return []
        node: Node = {
            "@type": "Event",
            "name": f"{exam_name} Application Start",
            "description": f"Application window opens for {exam_name}",
            "url": url,
            "startDate": application_start_date,
            "eventStatus": EVENT_SCHEDULED,
            "eventAttendanceMode": ONLINE_ATTENDANCE,
            "location": {"@type": "VirtualLocation", "name": "Online Application Portal"},
            "organizer": organizer,
        }
        if application_end_date:
            node["endDate"] = application_end_date
        return [node]

    nodes = []
    for item in dates:
        if not (item.start_date or item.end_date):
            continue
        node = {
            "@type": "Event",
            "name": f"{exam_name} - {item.event}",
            "description": f"{item.event} for {exam_name}",
            "url": url,
            "eventStatus": EVENT_SCHEDULED if item.is_confirmed else EVENT_POSTPONED,
            "eventAttendanceMode": MIXED_ATTENDANCE,
            "organizer": organizer,
        }
        if item.start_date:
            node["startDate"] = item.start_date
        if item.end_date:
            node["endDate"] = item.end_date
        nodes.append(node)
    return nodes


def build_article_node(
    headline: str,
    url: str,
    *,
    description: Optional[str] = None,
    published_at: Optional[str] = None,
    modified_at: Optional[str] = None,
    author_name: Optional[str] = None,
    author_url: Optional[str] = None,
    author_image: Optional[str] = None,
    image: Optional[str] = None,
    category: Optional[str] = None,
    tags: Sequence[str] = (),
    word_count: Optional[int] = None,
    article_type: str = "BlogPosting",
) -> Node:
    author: Node = {"@type": "Person", "name": author_name or SITE_NAME}
    if author_url:
        author["url"] = author_url
    if author_image:
        author["image"] = author_image

    node: Node = {
        "@type": article_type,
        "headline": headline,
        "description": description or f"Read {headline} on {SITE_NAME}",
        "url": url,
        "author": author,
        "publisher": build_publisher_node(),
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
    }
    if published_at:
        node["datePublished"] = published_at
    if modified_at or published_at:
        node["dateModified"] = modified_at or published_at
    if image:
        node["image"] = {
            "@type": "ImageObject",
            "url": image,
            "width": OG_IMAGE_WIDTH,
            "height": OG_IMAGE_HEIGHT,
        }
    if category:
        node["articleSection"] = category
    if tags:
        node["keywords"] = ", ".join(tags)
    if word_count:
        node["wordCount"] = word_count
    return node


def build_webpage_node(
    name: str,
    url: str,
    *,
    page_type: str = "WebPage",
    description: Optional[str] = None,
    published_at: Optional[str] = None,
    modified_at: Optional[str] = None,
    image: Optional[str] = None,
) -> Node:
    node: Node = {
        "@type": page_type,
        "name": name,
        "url": _absolute(url),
        "isPartOf": {
            "@type": "WebSite",
            "@id": WEBSITE_ID,
            "name": SITE_NAME,
            "url": BASE_URL,
        },
    }
    if description:
        node["description"] = description
    if published_at:
        node["datePublished"] = published_at
    if modified_at:
        node["dateModified"] = modified_at
    if image:
        node["primaryImageOfPage"] = {"@type": "ImageObject", "url": image}
    return node


def build_profile_page_node(
    name: str,
    url: str,
    *,
    bio: Optional[str] = None,
    image: Optional[str] = None,
) -> Node:
    """``ProfilePage`` whose main entity is the author as a ``Person``."""
    person: Node = {"@type": "Person", "name": name, "url": url}
    if bio:
        person["description"] = bio
    if image:
        person["image"] = image
    node = build_webpage_node(name, url, page_type="ProfilePage", description=bio)
    node["mainEntity"] = person
    return node


# ---------------------------------------------------------------------------
# Course nodes
# ---------------------------------------------------------------------------

_COURSE_MODES = {
    "full-time": "Full-time",
    "fulltime": "Full-time",
    "part-time": "Part-time",
    "parttime": "Part-time",
    "online": "Online",
    "distance": "Distance Learning",
    "hybrid": "Blended",
}

# First abbreviation found as a whole token wins
_CREDENTIALS = tuple(
    (re.compile(rf"(?<![\w.]){re.escape(abbreviation)}(?!\w)"), credential)
    for abbreviation, credential in (
        ("B.Tech", "Bachelor of Technology"),
        ("BTech", "Bachelor of Technology"),
        ("MBA", "Master of Business Administration"),
        ("MBBS", "Bachelor of Medicine and Bachelor of Surgery"),
        ("M.Tech", "Master of Technology"),
        ("MTech", "Master of Technology"),
        ("BBA", "Bachelor of Business Administration"),
        ("BCA", "Bachelor of Computer Applications"),
        ("MCA", "Master of Computer Applications"),
        ("B.Sc", "Bachelor of Science"),
        ("M.Sc", "Master of Science"),
        ("B.Com", "Bachelor of Commerce"),
        ("M.Com", "Master of Commerce"),
        ("B.A", "Bachelor of Arts"),
        ("M.A", "Master of Arts"),
        ("LLB", "Bachelor of Laws"),
        ("LLM", "Master of Laws"),
    )
)

_PROGRAM_TYPES = (
    (re.compile(r"^(?:B\.|Bachelor|BTech|BBA|BCA|BE\b)", re.IGNORECASE), "Bachelor's degree"),
    (re.compile(r"^(?:M\.|Master|MTech|MBA|MCA|ME\b|MS\b)", re.IGNORECASE), "Master's degree"),
    (re.compile(r"^(?:Ph\.?D|Doctor)", re.IGNORECASE), "Doctoral degree"),
    (re.compile(r"^(?:PG )?Diploma", re.IGNORECASE), "Diploma"),
)


def credential_for(course_name: str) -> Optional[str]:
    for pattern, credential in _CREDENTIALS:
        if pattern.search(course_name):
            return credential
    return None


def program_type_for(course_name: str) -> str:
    for pattern, program_type in _PROGRAM_TYPES:
        if pattern.match(course_name):
            return program_type
    return "Degree"


def _course_provider(course: CourseData, provider_url: Optional[str]) -> Node:
    if course.college is None:
        return {"@type": "Organization", "@id": ORGANIZATION_ID, "name": SITE_NAME, "url": BASE_URL}
    provider: Node = {"@type": "CollegeOrUniversity", "name": course.college.college_name}
    if provider_url:
        provider["url"] = provider_url
    return provider


def build_course_node(course: CourseData, provider_url: Optional[str] = None) -> Node:
    """``Course`` node; the provider is the college, or the site itself.

    A fee range becomes a ``PriceSpecification`` with min and max prices, a
    single fee a plain ``Offer`` price.
    """
    name = course.display_name
    description = name
    if course.college:
        description += f" at {course.college.college_name}"
    if course.duration:
        description += f". Duration: {course.duration}"

    node: Node = {
        "@type": "Course",
        "name": name,
        "description": description,
        "provider": _course_provider(course, provider_url),
    }
    if course.duration_years:
        node["timeRequired"] = f"P{course.duration_years}Y"
    elif course.duration:
        node["timeRequired"] = course.duration
    if course.mode:
        node["hasCourseInstance"] = {
            "@type": "CourseInstance",
            "courseMode": _COURSE_MODES.get(course.mode.lower(), course.mode),
        }
    if course.fee_min or course.fee_max:
        offer: Node = {"@type": "Offer", "priceCurrency": course.fee_currency}
        if course.fee_min and course.fee_max and course.fee_min != course.fee_max:
            offer["priceSpecification"] = {
                "@type": "PriceSpecification",
                "minPrice": min(course.fee_min, course.fee_max),
                "maxPrice": max(course.fee_min, course.fee_max),
                "priceCurrency": course.fee_currency,
            }
        else:
            offer["price"] = course.fee_max or course.fee_min
        node["offers"] = offer
    if course.eligibility:
        node["coursePrerequisites"] = course.eligibility
    credential = credential_for(name)
    if credential:
        node["educationalCredentialAwarded"] = credential
    return node


def build_program_node(course: CourseData, provider_url: Optional[str] = None) -> Node:
    name = course.display_name
    description = f"{name} program"
    if course.college:
        description += f" offered by {course.college.college_name}"

    node: Node = {
        "@type": "EducationalOccupationalProgram",
        "name": name,
        "description": description,
        "programType": program_type_for(name),
    }
    if course.college:
        node["provider"] = _course_provider(course, provider_url)
    if course.duration_years:
        node["timeToComplete"] = f"P{course.duration_years}Y"
    credential = credential_for(name)
    if credential:
        node["educationalCredentialAwarded"] = credential
    return node
