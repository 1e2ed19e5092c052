from typing import Literal, Optional

from pydantic import BaseModel


class ErrorMetadataRequest(BaseModel):
    kind: Literal["not-found", "error"] = "not-found"
    entity_type: Optional[str] = None


class ListingFacets(BaseModel):
    """Display names of the selected listing facets."""

    stream: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


class ListingMetadataRequest(BaseModel):
    entity_type: Literal["colleges", "exams", "articles"]
    facets: Optional[ListingFacets] = None


class EncodeResponse(BaseModel):
    slug: str
    path: str


class SlugIdResponse(BaseModel):
    slug: str
    id: int
