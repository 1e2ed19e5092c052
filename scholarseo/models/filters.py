from typing import List, Optional

from pydantic import BaseModel


class FilterState(BaseModel):
    """Listing-page filter selection.

    Single-valued facets hold one slug; multi-valued facets hold a list whose
    order is not significant (the slug codec canonicalizes it).
    """

    stream: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    course_group: Optional[str] = None
    type_of_institute: List[str] = []
    fee_range: List[str] = []

    def is_empty(self) -> bool:
        return not any(
            (
                self.stream,
                self.city,
                self.state,
                self.course_group,
                self.type_of_institute,
                self.fee_range,
            )
        )
