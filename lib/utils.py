# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import time
from urllib.parse import urlsplit, urlunsplit
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        idea_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        idea_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def same_user(left: str | UUID | None, right: str | UUID | None) -> bool:
    """Compare two user ids; None never matches anything."""
    if left is None or right is None:
        return False
    return normalize_uuid(left).lower() == normalize_uuid(right).lower()


# =============================================================================
# Time Utilities
# =============================================================================

def now_millis() -> int:
    """Current wall-clock time in milliseconds (used to disambiguate names)."""
    return int(time.time() * 1000)


# =============================================================================
# Logging Utilities
# =============================================================================

def redact_url(url: str | None) -> str:
    """
    Strip the query string (and fragment) from a URL before logging it.

    Signed URLs carry live credentials in their query string; only the
    scheme, host and path are safe to write to logs.

    Example:
        redact_url("https://b.s3.amazonaws.com/idea-files/a.png?X-Amz-Signature=...")
        # "https://b.s3.amazonaws.com/idea-files/a.png"
    """
    if not url:
        return ""
    parts = urlsplit(url)
    if not parts.scheme and not parts.netloc:
        return url.split("?", 1)[0].split("#", 1)[0]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
