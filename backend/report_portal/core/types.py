"""Id helpers shared by models and services"""
from datetime import datetime, timezone
import uuid


def generate_uuid():
    """Generate a UUID string"""
    return str(uuid.uuid4())


def short_uid() -> str:
    """Random 8-char suffix for derived block ids"""
    return uuid.uuid4().hex[:8]


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a Z suffix, e.g. 2025-01-14T09:30:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
