# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - storage.py: Stored documents/images, signed URL results, display states
# - idea.py: Idea rows and AI validation reports
#
# Database rows are parsed into these models at the repository boundary.
# =============================================================================

# -----------------------------------------------------------------------------
# Storage Models - Documents, images and retrieval
# -----------------------------------------------------------------------------
from .storage import (
    CATEGORY_LABELS,
    IMAGES_FOLDER,
    AspectRatio,
    DisplayResolution,
    DisplayState,
    FileCategory,
    FileGroup,
    FileListing,
    Gallery,
    GalleryImage,
    StorageProvider,
    StoredDocument,
    StoredImage,
    StoredObject,
    UploadUrls,
)

# -----------------------------------------------------------------------------
# Idea Models - Idea rows and validation reports
# -----------------------------------------------------------------------------
from .idea import (
    Competitor,
    Idea,
    IdeaStage,
    IdeaValidation,
    IdeaValidationResult,
    MarketAnalysis,
    SWOTAnalysis,
    UserPersona,
    ValidationStatus,
)

__all__ = [
    # Storage
    "CATEGORY_LABELS",
    "IMAGES_FOLDER",
    "AspectRatio",
    "DisplayResolution",
    "DisplayState",
    "FileCategory",
    "FileGroup",
    "FileListing",
    "Gallery",
    "GalleryImage",
    "StorageProvider",
    "StoredDocument",
    "StoredImage",
    "StoredObject",
    "UploadUrls",
    # Idea
    "Competitor",
    "Idea",
    "IdeaStage",
    "IdeaValidation",
    "IdeaValidationResult",
    "MarketAnalysis",
    "SWOTAnalysis",
    "UserPersona",
    "ValidationStatus",
]
