# Re-export all models for convenient imports
from report_portal.models.user import User, UserLevel, UserStatus
from report_portal.models.report import Report
from report_portal.models.post import Post

__all__ = [
    "User",
    "UserLevel",
    "UserStatus",
    "Report",
    "Post",
]
