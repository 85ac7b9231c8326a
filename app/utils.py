"""
Small shared helpers.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string, the format stored on documents."""
    return datetime.now(timezone.utc).isoformat()


def normalize_email(email: Optional[str]) -> str:
    """Emails are matched case-insensitively; store and query them lower-cased."""
    return (email or "").lower()
