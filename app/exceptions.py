# =============================================================================
# app/exceptions.py - Custom Exceptions & Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells HOW to fix it, not just WHAT failed.
#
# Storage pipeline taxonomy:
#   PathValidationError  - malformed storage path, never reaches the network
#   SigningError         - backend refused to mint a signed URL
#   UploadError          - PUT against a signed URL failed
#   PersistenceError     - metadata write failed (bytes may be orphaned)
#   RetrievalError       - object could not be resolved even after one retry
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class FundYourIdeaException(Exception):
    """
    Base exception for the FundYourIdea API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "FUNDYOURIDEA_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(FundYourIdeaException):
    """Raised at startup when a client cannot be built from settings."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            status_code=500,
            suggestion="Check the storage and Supabase variables in your .env file",
        )


# =============================================================================
# Lookup & Permission Exceptions
# =============================================================================

class IdeaNotFoundError(FundYourIdeaException):
    """Raised when an idea ID doesn't exist."""

    def __init__(self, idea_id: str):
        super().__init__(
            message=f"Idea not found: {idea_id}",
            code="IDEA_NOT_FOUND",
            status_code=404,
            suggestion="Check that the idea_id is correct",
            details={"idea_id": idea_id}
        )


class StoredObjectNotFoundError(FundYourIdeaException):
    """Raised when a file or image record doesn't exist."""

    def __init__(self, kind: str, object_id: str):
        super().__init__(
            message=f"{kind.capitalize()} not found: {object_id}",
            code=f"{kind.upper()}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {kind} id is correct and has not been deleted",
            details={f"{kind}_id": object_id}
        )


class PermissionDeniedError(FundYourIdeaException):
    """Raised when a viewer may not perform an action on an idea's objects."""

    def __init__(self, action: str, idea_id: str | None = None):
        details = {"action": action}
        if idea_id:
            details["idea_id"] = idea_id
        super().__init__(
            message=f"Permission denied: only the creator of this idea can {action}",
            code="PERMISSION_DENIED",
            status_code=403,
            suggestion="Sign in as the idea's creator",
            details=details
        )


# =============================================================================
# Upload Input Exceptions
# =============================================================================

class FileTooLargeError(FundYourIdeaException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: float):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb:.0f}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb:.0f}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb}
        )


class EmptyFileError(FundYourIdeaException):
    """Raised when an upload carries no bytes."""

    def __init__(self, filename: str):
        super().__init__(
            message=f"File is empty: {filename}",
            code="EMPTY_FILE",
            status_code=400,
            suggestion="Select a file that has content",
            details={"filename": filename}
        )


# =============================================================================
# Storage Pipeline Exceptions
# =============================================================================

class PathValidationError(FundYourIdeaException):
    """Raised when a storage path is malformed or attempts traversal."""

    def __init__(self, path: str | None, reason: str):
        super().__init__(
            message=f"Invalid file path: {reason}",
            code="INVALID_PATH",
            status_code=400,
            suggestion="Paths must start with 'idea-files/' and must not contain '..'",
            details={"path": path, "reason": reason}
        )


class SigningError(FundYourIdeaException):
    """Raised when the storage backend cannot mint a signed URL."""

    def __init__(
        self,
        path: str,
        error: str,
        code: str = "SIGNING_ERROR",
        status_code: int = 502,
    ):
        super().__init__(
            message=f"Failed to generate signed URL: {error}",
            code=code,
            status_code=status_code,
            suggestion="Check the storage credentials and bucket name",
            details={"path": path, "error": error}
        )


class ObjectNotFoundError(SigningError):
    """Raised when a download URL is requested for a key that doesn't exist."""

    def __init__(self, path: str):
        super().__init__(
            path=path,
            error="object does not exist",
            code="OBJECT_NOT_FOUND",
            status_code=404,
        )
        self.suggestion = "The file may have been removed from storage; upload it again"


class UploadError(FundYourIdeaException):
    """Raised when the PUT against a signed upload URL fails."""

    def __init__(self, error: str, status: int | None = None, body: str | None = None):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="UPLOAD_ERROR",
            status_code=502,
            suggestion="Select the file again to retry the upload",
            details={"status": status, "body": body}
        )
        self.status = status
        self.body = body


class PersistenceError(FundYourIdeaException):
    """
    Raised when a metadata read/write fails.

    After a successful upload this leaves orphaned bytes in storage; the
    storage path is kept in details so operators can reconcile.
    """

    def __init__(self, operation: str, error: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=f"Failed to {operation}: {error}",
            code="PERSISTENCE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation, "error": error, **(details or {})}
        )


class RetrievalError(FundYourIdeaException):
    """Raised when an object cannot be resolved to a usable URL."""

    def __init__(self, path: str, error: str, attempts: int = 0):
        super().__init__(
            message=f"Failed to retrieve file: {error}",
            code="RETRIEVAL_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"path": path, "error": error, "attempts": attempts}
        )


# =============================================================================
# Idea Validation Exceptions
# =============================================================================

class ValidationFailedError(FundYourIdeaException):
    """Raised when the AI validation report cannot be produced."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_FAILED",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=502,
            suggestion=suggestion or "Run the validation again in a moment",
            details=details
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def fundyouridea_exception_handler(
    request: Request,
    exc: FundYourIdeaException
) -> JSONResponse:
    """
    Convert FundYourIdeaException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
