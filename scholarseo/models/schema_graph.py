from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from scholarseo.config import SCHEMA_CONTEXT


class SchemaGraph(BaseModel):
    """JSON-LD document with a shared ``@context`` and a flat ``@graph``."""

    model_config = ConfigDict(populate_by_name=True)

    context: str = Field(default=SCHEMA_CONTEXT, alias="@context")
    graph: List[Dict[str, Any]] = Field(default_factory=list, alias="@graph")


class MergeRequest(BaseModel):
    schemas: List[Dict[str, Any]] = Field(
        ...,
        min_length=1,
        description="Graphs ({'@context', '@graph'}) or bare schema.org nodes, merged in order.",
    )
