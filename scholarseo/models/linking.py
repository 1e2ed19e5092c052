from typing import List, Literal, Optional

from pydantic import BaseModel, Field

LinkEntityType = Literal["college", "exam", "article"]


class LinkCandidate(BaseModel):
    """An entity that may be linked to, with the attributes used to score it.

    Colleges use the location, stream, type and ranking fields; exams the
    streams, level and conducting body; articles the category and tags.
    """

    id: int
    name: str
    slug: str = ""
    city: Optional[str] = None
    state: Optional[str] = None
    streams: List[str] = []
    college_type: Optional[str] = None
    ranking: Optional[int] = Field(default=None, ge=1)
    exam_level: Optional[str] = None
    conducting_body: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = []


class HubLink(BaseModel):
    label: str
    href: str
    priority: float
    description: Optional[str] = None


class SpokeLink(BaseModel):
    label: str
    href: str
    priority: float


class EntityLink(BaseModel):
    id: int
    name: str
    href: str
    location: Optional[str] = None


class HubSpokeLinks(BaseModel):
    hub_page: HubLink
    child_pages: List[SpokeLink]
    related_entities: List[EntityLink]
    cross_links: List[HubLink]


class RelatedItem(BaseModel):
    id: int
    type: LinkEntityType
    name: str
    href: str
    relevance_score: float
    city: Optional[str] = None
    state: Optional[str] = None
    stream: Optional[str] = None
    category: Optional[str] = None


class RelatedColleges(BaseModel):
    same_stream: List[RelatedItem] = []
    same_location: List[RelatedItem] = []
    same_type: List[RelatedItem] = []
    trending: List[RelatedItem] = []


class CrossEntityLink(BaseModel):
    label: str
    href: str
    type: Literal["college", "exam"]


class CollegeLinksRequest(BaseModel):
    college: LinkCandidate
    tab: str = "info"
    # None means every tab has content
    available_tabs: Optional[List[str]] = None
    related: List[LinkCandidate] = []


class ExamLinksRequest(BaseModel):
    exam: LinkCandidate
    silo: str = "info"
    available_silos: Optional[List[str]] = None
    related: List[LinkCandidate] = []


class RelatedRequest(BaseModel):
    entity_type: LinkEntityType
    current: LinkCandidate
    candidates: List[LinkCandidate]
    limit: int = Field(default=5, ge=1, le=50)
