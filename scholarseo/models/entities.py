"""Entity payloads as supplied by the data-fetching layer.

Field names follow the backend API.  Every field the generators can live
without is optional so that incomplete payloads degrade instead of failing
validation.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class SeoOverride(BaseModel):
    """Editor-supplied SEO fields that replace the templated output."""

    title: Optional[str] = None
    meta_desc: Optional[str] = None
    seo_param: Optional[str] = None  # comma-separated keywords


class FAQItem(BaseModel):
    question: str
    answer: str


class DateItem(BaseModel):
    """One row of an admission/exam calendar."""

    event: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_confirmed: bool = False


class CollegeData(BaseModel):
    college_id: Optional[int] = None
    college_name: str = ""
    slug: str = ""
    city: Optional[str] = None
    state: Optional[str] = None
    location: Optional[str] = None
    logo_img: Optional[str] = None
    streams: List[str] = []
    college_website: Optional[str] = None
    college_email: Optional[str] = None
    college_phone: Optional[str] = None
    established_year: Optional[int] = None
    rating: Optional[float] = None
    seo: Optional[SeoOverride] = None


class CollegeTabData(CollegeData):
    tab: str = "info"
    tab_content: Optional[SeoOverride] = None


class ExamData(BaseModel):
    exam_id: Optional[int] = None
    exam_name: str = ""
    exam_full_name: Optional[str] = None
    slug: str = ""
    exam_description: Optional[str] = None
    logo_img: Optional[str] = None
    conducting_body: Optional[str] = None
    exam_mode: Optional[str] = None
    streams: List[str] = []
    exam_dates: List[DateItem] = []
    application_start_date: Optional[str] = None
    application_end_date: Optional[str] = None
    exam_date: Optional[str] = None
    seo: Optional[SeoOverride] = None


class ExamSiloData(ExamData):
    silo: str = "info"
    silo_content: Optional[SeoOverride] = None


class ArticleAuthor(BaseModel):
    author_id: Optional[int] = None
    author_name: str = ""
    image_url: Optional[str] = None


class ArticleData(BaseModel):
    article_id: Optional[int] = None
    title: str = ""
    slug: str = ""
    meta_desc: Optional[str] = None
    author: Optional[ArticleAuthor] = None
    category: Optional[str] = None
    tags: List[str] = []
    img1_url: Optional[str] = None
    img2_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    word_count: Optional[int] = None


class AuthorData(BaseModel):
    author_id: Optional[int] = None
    author_name: str = ""
    view_name: Optional[str] = None
    bio: Optional[str] = None
    image_url: Optional[str] = None
    article_count: int = 0


class FacetRef(BaseModel):
    """A selected facet value; *slug* is derived from *name* when omitted."""

    name: str
    slug: Optional[str] = None
    id: Optional[int] = None


class FilterPageData(BaseModel):
    entity_type: Literal["college", "exam"] = "college"
    stream: Optional[FacetRef] = None
    city: Optional[FacetRef] = None
    state: Optional[FacetRef] = None
    result_count: Optional[int] = None


class StaticPageData(BaseModel):
    title: str
    description: str
    canonical_path: str
    keywords: List[str] = []
    og_image: Optional[str] = None
    no_index: bool = False


class ErrorPageData(BaseModel):
    kind: Literal["not-found", "error"] = "not-found"
    entity_type: Optional[str] = None


class CourseCollege(BaseModel):
    college_id: int
    college_name: str
    slug: str = ""


class CourseData(BaseModel):
    """A course offered by a college, or site-wide when *college* is absent."""

    course_id: Optional[int] = None
    course_name: str = Field(..., min_length=1)
    course_full_name: Optional[str] = None
    duration: Optional[str] = None  # free text, e.g. "4 years"
    duration_years: Optional[int] = Field(default=None, ge=1)
    fee_min: Optional[int] = Field(default=None, ge=0)
    fee_max: Optional[int] = Field(default=None, ge=0)
    fee_currency: str = "INR"
    eligibility: Optional[str] = None
    mode: Optional[str] = None
    college: Optional[CourseCollege] = None
    specializations: List[str] = []

    @property
    def display_name(self) -> str:
        return self.course_full_name or self.course_name
