# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .signing_service import SignedUrlIssuer
from .upload_service import UploadExecutor
from .metadata_repository import DocumentRepository, ImageRepository
from .privacy import PrivacyGate
from .retrieval_service import RetrievalOrchestrator
from .idea_service import IdeaService
from .file_service import FileService
from .image_service import ImageService
from .validation_service import ValidationService

__all__ = [
    "SignedUrlIssuer",
    "UploadExecutor",
    "DocumentRepository",
    "ImageRepository",
    "PrivacyGate",
    "RetrievalOrchestrator",
    "IdeaService",
    "FileService",
    "ImageService",
    "ValidationService",
]
