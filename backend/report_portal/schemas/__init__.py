# Pydantic schemas
from report_portal.schemas.report import (
    BlockType,
    ReportBlock,
    ReportContent,
    ReportRecord,
    ReportSave,
    ReportListResponse,
    InfoHeader,
)
from report_portal.schemas.user import (
    UserResponse,
    UsersResponse,
    UserStatusUpdate,
    ProfileUpdate,
    DummyUsersRequest,
    DummyReportsRequest,
    DummyResult,
)
from report_portal.schemas.post import (
    PostSave,
    PostUpdate,
    PostRecord,
    PostListResponse,
)
