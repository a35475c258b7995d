from sqlalchemy import Column, String, Text

from report_portal.core.database import Base
from report_portal.core.types import generate_uuid


class Post(Base):
    """Free-form notice board post; ``content`` is plain text with newlines"""
    __tablename__ = "posts"

    post_id = Column(String(128), primary_key=True, default=generate_uuid)

    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)

    author_id = Column(String(128), index=True, nullable=False)
    author = Column(String(255), nullable=False)

    created_at = Column(String(40), index=True, nullable=False)
    updated_at = Column(String(40), nullable=False)

    def __repr__(self):
        return f"<Post {self.post_id} by {self.author}>"
