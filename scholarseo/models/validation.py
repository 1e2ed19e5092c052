from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from scholarseo.models.entities import FAQItem

IssueType = Literal[
    "thin_content",
    "missing_title",
    "missing_description",
    "short_title",
    "short_description",
    "long_title",
    "long_description",
    "missing_h1",
    "missing_content",
    "missing_faq",
    "insufficient_faq",
]


class ContentIssue(BaseModel):
    type: IssueType
    severity: Literal["error", "warning", "info"]
    message: str
    field: Optional[str] = None


class ContentValidation(BaseModel):
    is_valid: bool
    score: int
    issues: List[ContentIssue]
    recommendations: List[str]
    should_index: bool
    should_nofollow: bool


class ValidateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    h1: Optional[str] = None
    faqs: Optional[List[FAQItem]] = None
    word_count: Optional[int] = Field(default=None, ge=0)
