# =============================================================================
# core/services/paths.py - Storage Path Builder & Validator
# =============================================================================
# Every object lives under one key layout:
#
#   idea-files/{idea_id}-{sanitized idea name}/{category | images}/{file name}
#
# Documents are disambiguated as {stem}_{millis}.{ext}, images as
# {millis}-{name}. Keys are built here and checked here; nothing else in the
# app concatenates storage paths.
# =============================================================================

import logging
import re
from urllib.parse import unquote, urlsplit

from core.models.storage import IMAGES_FOLDER, FileCategory
from lib.utils import now_millis
from app.exceptions import PathValidationError

logger = logging.getLogger(__name__)

ROOT_PREFIX = "idea-files/"
MAX_IDEA_NAME_LENGTH = 50
UNTITLED = "untitled"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-zA-Z0-9\-_]")
_DISAMBIGUATION_SUFFIX = re.compile(r"^(?P<stem>.+)_\d+(?P<ext>\.[^.]*)?$")

CONTENT_TYPES: dict[str, str] = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}


# =============================================================================
# Names
# =============================================================================

def sanitize_idea_name(idea_name: str | None) -> str:
    """
    Turn an idea title into a path-safe slug.

    Whitespace runs become "-", anything outside [A-Za-z0-9-_] is dropped,
    the result is cut to 50 characters and lower-cased.

    Example:
        sanitize_idea_name("My Awesome Idea!")  # "my-awesome-idea"
        sanitize_idea_name("!!!")               # "untitled"
    """
    slug = _WHITESPACE.sub("-", idea_name or "")
    slug = _DISALLOWED.sub("", slug)
    slug = slug[:MAX_IDEA_NAME_LENGTH].lower()
    return slug or UNTITLED


def clean_file_name(file_name: str) -> str:
    """Drop any directory components a client sent along with a file name."""
    name = re.split(r"[\\/]", file_name or "")[-1].strip()
    return name or "file"


def split_file_name(file_name: str) -> tuple[str, str]:
    """
    Split a file name into (stem, extension) on the last dot.

    A leading dot is part of the stem, so ".env" has no extension.
    """
    stem, dot, ext = file_name.rpartition(".")
    if not dot or not stem:
        return file_name, ""
    return stem, ext


def format_display_file_name(stored_name: str) -> str:
    """
    Recover the uploaded name from a disambiguated document name.

    Example:
        format_display_file_name("report_1712345678901.pdf")  # "report.pdf"
        format_display_file_name("report.pdf")                # "report.pdf"
    """
    match = _DISAMBIGUATION_SUFFIX.match(stored_name or "")
    if not match:
        return stored_name
    return match.group("stem") + (match.group("ext") or "")


def content_type_for_extension(ext: str | None) -> str:
    """Content type for a file extension, octet-stream when unknown."""
    return CONTENT_TYPES.get((ext or "").lower().lstrip("."), DEFAULT_CONTENT_TYPE)


def content_type_for_file_name(file_name: str) -> str:
    return content_type_for_extension(split_file_name(file_name)[1])


# =============================================================================
# Paths
# =============================================================================

def build_base_path(idea_id: str, idea_name: str | None) -> str:
    """Folder holding everything stored for one idea."""
    return f"{ROOT_PREFIX}{idea_id}-{sanitize_idea_name(idea_name)}"


def build_document_path(
    base_path: str,
    category: FileCategory | str,
    original_file_name: str,
    timestamp_ms: int | None = None,
) -> str:
    """
    Key for a document: {base}/{category}/{stem}_{millis}.{ext}

    Raises:
        ValueError: If category is not a FileCategory value
    """
    category = FileCategory(category)
    stem, ext = split_file_name(clean_file_name(original_file_name))
    ts = timestamp_ms if timestamp_ms is not None else now_millis()
    file_name = f"{stem}_{ts}.{ext}" if ext else f"{stem}_{ts}"
    return f"{base_path}/{category.value}/{file_name}"


def build_image_path(
    base_path: str,
    original_file_name: str,
    timestamp_ms: int | None = None,
) -> str:
    """Key for a gallery image: {base}/images/{millis}-{name}"""
    ts = timestamp_ms if timestamp_ms is not None else now_millis()
    name = _WHITESPACE.sub("-", clean_file_name(original_file_name))
    return f"{base_path}/{IMAGES_FOLDER}/{ts}-{name}"


def build_object_path(
    base_path: str,
    category: FileCategory | str,
    original_file_name: str,
    timestamp_ms: int | None = None,
) -> str:
    """Key for any object; category "images" selects the gallery layout."""
    if category == IMAGES_FOLDER:
        return build_image_path(base_path, original_file_name, timestamp_ms)
    return build_document_path(base_path, category, original_file_name, timestamp_ms)


def file_name_from_path(path: str) -> str:
    return path.rsplit("/", 1)[-1]


# =============================================================================
# Validation
# =============================================================================

def is_valid_path(path: str | None) -> bool:
    """A storage path must start with idea-files/ and never contain '..'."""
    if not path:
        return False
    return ".." not in path and path.startswith(ROOT_PREFIX)


def ensure_safe_path(path: str | None) -> str:
    """
    Reject an empty path or one that climbs out of its folder.

    Used for reads, where legacy keys outside idea-files/ are still served.

    Raises:
        PathValidationError: If the path is empty or contains '..'
    """
    if not path:
        raise PathValidationError(path, "path is required")
    if ".." in path:
        raise PathValidationError(path, "path must not contain '..'")
    return path


def ensure_valid_path(path: str | None) -> str:
    """
    Reject a malformed path before it reaches the storage backend.

    Returns:
        The path, unchanged

    Raises:
        PathValidationError: If the path is empty, escapes the root or has
            the wrong prefix
    """
    ensure_safe_path(path)
    if not path.startswith(ROOT_PREFIX):
        raise PathValidationError(path, f"path must start with '{ROOT_PREFIX}'")
    return path


# =============================================================================
# URL <-> Key
# =============================================================================

def extract_storage_key(url: str, bucket: str | None = None) -> str:
    """
    Get the storage key out of a stored object URL.

    Handles virtual-hosted URLs (everything after ".amazonaws.com/"),
    path-style URLs (bucket prefix removed) and bare keys. Legacy keys
    outside idea-files/ are returned as-is with a warning.

    Example:
        extract_storage_key("https://b.s3.us-east-1.amazonaws.com/idea-files/x/a.pdf")
        # "idea-files/x/a.pdf"
    """
    if ".amazonaws.com/" in url:
        key = url.split(".amazonaws.com/", 1)[1]
        key = key.split("?", 1)[0].split("#", 1)[0]
    else:
        parts = urlsplit(url)
        if parts.scheme and parts.netloc:
            key = parts.path.lstrip("/")
        else:
            key = url.split("?", 1)[0]

    key = unquote(key)
    if bucket and key.startswith(f"{bucket}/"):
        key = key[len(bucket) + 1:]

    if not key.startswith(ROOT_PREFIX):
        logger.warning(f"Legacy storage path outside {ROOT_PREFIX}: key={key}")

    return key


_IDEA_FOLDER = re.compile(
    r"^idea-files/(?P<idea_id>[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})-"
)


def idea_id_from_path(path: str) -> str:
    """
    Read the idea id out of a storage path.

    Raises:
        PathValidationError: If the path is invalid or has no idea folder
    """
    ensure_valid_path(path)
    match = _IDEA_FOLDER.match(path)
    if not match:
        raise PathValidationError(path, "path does not name an idea folder")
    return match.group("idea_id").lower()
