"""Download file names for exported documents"""
from datetime import datetime
from typing import Optional
from urllib.parse import quote
import re

_FORBIDDEN = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
_CONTROL = re.compile(r"[\x00-\x1f\x7f]")


def docx_filename(file_name: Optional[str], title: str) -> str:
    """Sanitized ``{name}.docx``; forbidden path characters are removed"""
    base = (file_name or title or "report").strip()
    if base.lower().endswith(".docx"):
        base = base[:-5]
    base = _FORBIDDEN.sub("", base).strip() or "report"
    return f"{base}.docx"


def pptx_filename(title: str, today: Optional[datetime] = None) -> str:
    """``{title}_{YYYY-MM-DD}.pptx`` with forbidden path characters replaced by ``_``"""
    today = today or datetime.now()
    base = _FORBIDDEN.sub("_", (title or "presentation").strip()) or "presentation"
    return f"{base}_{today.strftime('%Y-%m-%d')}.pptx"


def content_disposition(filename: str) -> str:
    """Attachment header value; non-ASCII names go in the RFC 5987 filename* parameter"""
    filename = _CONTROL.sub("", filename)
    fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_").replace('"', "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
