"""The closed set of page variants the generators understand."""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from scholarseo.models.breadcrumb import BreadcrumbItem
from scholarseo.models.entities import (
    ArticleData,
    AuthorData,
    CollegeData,
    CollegeTabData,
    DateItem,
    ErrorPageData,
    ExamData,
    ExamSiloData,
    FAQItem,
    FilterPageData,
    StaticPageData,
)


class _PageBase(BaseModel):
    breadcrumbs: Optional[List[BreadcrumbItem]] = None
    """Explicit trail; replaces the generated one in breadcrumbs and schema."""

    content: Optional[str] = None
    """Rendered body HTML; FAQ markup in it backs ``FAQPage`` when no faqs are given."""


class CollegePage(_PageBase):
    type: Literal["college"] = "college"
    data: CollegeData
    faqs: List[FAQItem] = []
    dates: List[DateItem] = []


class CollegeTabPage(_PageBase):
    type: Literal["college-tab"] = "college-tab"
    data: CollegeTabData
    faqs: List[FAQItem] = []
    dates: List[DateItem] = []


class ExamPage(_PageBase):
    type: Literal["exam"] = "exam"
    data: ExamData
    faqs: List[FAQItem] = []


class ExamSiloPage(_PageBase):
    type: Literal["exam-silo"] = "exam-silo"
    data: ExamSiloData
    faqs: List[FAQItem] = []


class ArticlePage(_PageBase):
    type: Literal["article"] = "article"
    data: ArticleData


class AuthorPage(_PageBase):
    type: Literal["author"] = "author"
    data: AuthorData


class FilterPage(_PageBase):
    type: Literal["filter"] = "filter"
    data: FilterPageData


class StaticPage(_PageBase):
    type: Literal["static"] = "static"
    data: StaticPageData


class ErrorPage(_PageBase):
    type: Literal["error"] = "error"
    data: ErrorPageData = ErrorPageData()


PageVariant = Annotated[
    Union[
        CollegePage,
        CollegeTabPage,
        ExamPage,
        ExamSiloPage,
        ArticlePage,
        AuthorPage,
        FilterPage,
        StaticPage,
        ErrorPage,
    ],
    Field(discriminator="type"),
]
