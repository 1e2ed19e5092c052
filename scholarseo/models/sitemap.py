from typing import List, Literal, Optional

from pydantic import BaseModel, Field

ChangeFreq = Literal["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]
SitemapEntityType = Literal["college", "exam", "article", "author", "filter", "static"]


class SitemapUrl(BaseModel):
    url: str
    lastmod: Optional[str] = None  # YYYY-MM-DD
    changefreq: Optional[ChangeFreq] = None
    priority: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class PriorityFactors(BaseModel):
    """Signals that raise or lower a URL's sitemap priority."""

    entity_type: SitemapEntityType
    ranking: Optional[int] = Field(default=None, ge=1)
    page_views: Optional[int] = Field(default=None, ge=0)
    has_rich_content: bool = False
    has_images: bool = False
    has_faqs: bool = False
    has_news: bool = False
    # Updated within the last 30 days
    is_recent: bool = False
    # Exam dates, admission deadlines
    is_time_sensitive: bool = False
    is_main_page: bool = False
    tab: Optional[str] = None
    silo: Optional[str] = None


class PriorityResult(BaseModel):
    priority: float
    changefreq: ChangeFreq


class SitemapChunk(BaseModel):
    name: str
    xml: str
    url_count: int


class ChunkedSitemap(BaseModel):
    index: str
    chunks: List[SitemapChunk]


class SitemapRequest(BaseModel):
    urls: List[SitemapUrl]
    name: str = Field(default="sitemap", pattern=r"^[a-z0-9][a-z0-9-]*$")
