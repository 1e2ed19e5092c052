from typing import List, Literal, Optional

from pydantic import BaseModel


class Robots(BaseModel):
    index: bool = True
    follow: bool = True


class Alternates(BaseModel):
    canonical: str


class OpenGraphImage(BaseModel):
    url: str
    width: int
    height: int
    alt: str


class OpenGraph(BaseModel):
    title: str
    description: str
    url: Optional[str] = None
    site_name: str
    type: Literal["website", "article", "profile"] = "website"
    locale: str
    images: List[OpenGraphImage] = []
    # Article pages only
    published_time: Optional[str] = None
    modified_time: Optional[str] = None
    authors: List[str] = []


class TwitterCard(BaseModel):
    card: str = "summary_large_image"
    title: str
    description: str
    images: List[str] = []
    creator: Optional[str] = None


class MetadataResult(BaseModel):
    """Everything a page needs for its ``<head>``."""

    title: str
    description: str
    keywords: List[str] = []
    robots: Robots
    alternates: Optional[Alternates] = None
    open_graph: OpenGraph
    twitter: TwitterCard
