from pydantic import BaseModel


class BreadcrumbItem(BaseModel):
    name: str
    href: str  # relative ("/colleges") or absolute
    current: bool = False
