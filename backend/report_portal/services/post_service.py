"""
Post Service - the free-form notice board

Posts are plain text. Only the author edits a post; the author or an
administrator may delete it.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.sql import Select
from html import escape
from typing import Optional

from report_portal.core.exceptions import AuthorizationError, PostNotFoundError, ValidationError
from report_portal.core.logging_config import logger
from report_portal.core.types import utc_now_iso
from report_portal.models.post import Post
from report_portal.models.user import User
from report_portal.schemas.post import PostRecord, PostSave, PostUpdate


def to_post_record(post: Post) -> PostRecord:
    return PostRecord.model_validate(post)


def post_to_html(content: str) -> str:
    """Plain text -> one escaped <p> per line, for the Word exporter"""
    return "".join(f"<p>{escape(line)}</p>" for line in (content or "").split("\n"))


def _required(value: Optional[str], message: str, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(message, field=field)
    return text


class PostService:

    def __init__(self, db: AsyncSession):
        self.db = db

    def list_posts_query(self) -> Select:
        """Newest first (feed to ``paginate``)"""
        return select(Post).order_by(Post.created_at.desc(), Post.post_id)

    async def get_post(self, post_id: str) -> Post:
        post = await self.db.get(Post, post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    async def create_post(self, payload: PostSave, actor: User) -> Post:
        title = _required(payload.title, "Enter a title.", "title")
        content = _required(payload.content, "Enter some content.", "content")

        now = utc_now_iso()
        post = Post(
            title=title,
            content=content,
            author_id=actor.id,
            author=actor.name,
            created_at=now,
            updated_at=now,
        )
        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)

        logger.info(f"[PostService] Created post {post.post_id} by {actor.name}")
        return post

    async def update_post(self, post_id: str, payload: PostUpdate, actor: User) -> Post:
        """Apply a partial edit; blank values are rejected, omitted ones are kept"""
        post = await self.get_post(post_id)
        if post.author_id != actor.id:
            raise AuthorizationError("Only the author can edit this post")

        if payload.title is not None:
            post.title = _required(payload.title, "Enter a title.", "title")
        if payload.content is not None:
            post.content = _required(payload.content, "Enter some content.", "content")
        post.updated_at = utc_now_iso()

        await self.db.commit()
        await self.db.refresh(post)
        logger.info(f"[PostService] Updated post {post_id}")
        return post

    async def delete_post(self, post_id: str, actor: User) -> None:
        post = await self.get_post(post_id)
        if post.author_id != actor.id and not actor.is_admin:
            raise AuthorizationError("Only the author or an administrator can delete this post")

        await self.db.delete(post)
        await self.db.commit()
        logger.info(f"[PostService] Deleted post {post_id} (by {actor.id})")
