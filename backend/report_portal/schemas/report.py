from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal, Any
import enum


class BlockType(str, enum.Enum):
    TEXT = "text"
    IMAGE_GALLERY = "image_gallery"
    INFO_HEADER = "info_header"


ReportStatus = Literal["submitted", "draft"]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ReportBlock(CamelModel):
    id: str
    # Kept as a plain string so unknown block types survive validation and can be dropped later
    type: str
    content: str = ""
    images: Optional[List[str]] = None
    image_captions: Optional[List[Optional[str]]] = None

    def caption_at(self, index: int) -> str:
        """Caption for images[index]; empty when captions lag behind images"""
        captions = self.image_captions or []
        if 0 <= index < len(captions):
            return captions[index] or ""
        return ""


class ReportContent(CamelModel):
    blocks: List[ReportBlock] = Field(default_factory=list)


class ReportRecord(CamelModel):
    """A stored report as exchanged with clients and fed to the aggregator"""
    report_id: str
    author_id: str
    author_name: str
    department: str = ""
    team_id: str = ""
    title: str
    content: ReportContent = Field(default_factory=ReportContent)
    created_at: str
    status: ReportStatus = "submitted"


class ReportSave(CamelModel):
    """Create (no report_id) or edit (existing report_id) payload"""
    report_id: Optional[str] = None
    title: str
    content: ReportContent = Field(default_factory=ReportContent)
    status: ReportStatus = "submitted"
    created_at: Optional[str] = None


class ReportListResponse(CamelModel):
    items: List[ReportRecord]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class InfoHeader(BaseModel):
    """Parsed content of an info_header block"""
    writer: str = ""
    team: str = ""
    date: str = ""

    @field_validator("writer", "team", "date", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)
