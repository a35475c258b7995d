"""
Notice board endpoints: list, read, write, edit, delete and Word export.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from report_portal.core.config import settings
from report_portal.core.database import get_db
from report_portal.models.user import User
from report_portal.modules.auth.dependencies import get_current_user
from report_portal.modules.export import word_exporter
from report_portal.schemas.post import PostListResponse, PostRecord, PostSave, PostUpdate
from report_portal.services.post_service import PostService, post_to_html, to_post_record
from report_portal.utils.filenames import docx_filename
from report_portal.utils.pagination import paginate
from report_portal.api.v1.endpoints.reports import DOCX_MEDIA_TYPE, file_response

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get("", response_model=PostListResponse)
async def list_posts(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """All posts, newest first"""
    result = await paginate(db, PostService(db).list_posts_query(), page, page_size)
    result["items"] = [to_post_record(p) for p in result["items"]]
    return result


@router.get("/{post_id}", response_model=PostRecord)
async def get_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return to_post_record(await PostService(db).get_post(post_id))


@router.post("", response_model=PostRecord, status_code=201)
async def create_post(
    payload: PostSave,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    post = await PostService(db).create_post(payload, current_user)
    return to_post_record(post)


@router.patch("/{post_id}", response_model=PostRecord)
async def update_post(
    post_id: str,
    payload: PostUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Edit one of your own posts"""
    post = await PostService(db).update_post(post_id, payload, current_user)
    return to_post_record(post)


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await PostService(db).delete_post(post_id, current_user)
    return {"success": True, "post_id": post_id}


@router.post("/{post_id}/export/docx")
async def export_post_docx(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Download a post as a Word document, one paragraph per line"""
    post = await PostService(db).get_post(post_id)
    title, author, content = post.title, post.author, post.content

    data = await word_exporter.export(title, author, html_content=post_to_html(content))
    return file_response(data, docx_filename(f"[Post]_{title}", title), DOCX_MEDIA_TYPE)
