from sqlalchemy import Column, String, Boolean, DateTime, JSON, Text
from datetime import datetime

from report_portal.core.database import Base
from report_portal.core.types import generate_uuid


class Report(Base):
    """
    Submitted work report.

    Author fields are a snapshot taken at submission and are not linked to the
    author's live profile. ``created_at`` is an ISO-8601 string and never changes
    after creation.
    """
    __tablename__ = "reports"

    report_id = Column(String(128), primary_key=True, default=generate_uuid)

    author_id = Column(String(128), index=True, nullable=False)
    author_name = Column(String(255), nullable=False)
    department = Column(String(100), index=True, nullable=False, default="")
    team_id = Column(String(100), index=True, nullable=False, default="")

    title = Column(Text, nullable=False)
    content = Column(JSON, nullable=False, default=lambda: {"blocks": []})  # {"blocks": [ReportBlock, ...]}

    created_at = Column(String(40), index=True, nullable=False)
    status = Column(String(20), default="submitted", nullable=False)

    is_dummy = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Report {self.report_id} by {self.author_name}>"
