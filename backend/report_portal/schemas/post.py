from typing import List, Optional

from report_portal.schemas.report import CamelModel


class PostSave(CamelModel):
    title: str
    content: str


class PostUpdate(CamelModel):
    """Partial edit; omitted fields keep their stored value"""
    title: Optional[str] = None
    content: Optional[str] = None


class PostRecord(CamelModel):
    post_id: str
    title: str
    content: str
    author: str
    author_id: str
    created_at: str
    updated_at: str


class PostListResponse(CamelModel):
    items: List[PostRecord]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool
