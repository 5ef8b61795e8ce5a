# =============================================================================
# core/models/storage.py - Stored Object Schemas
# =============================================================================
# These models define the records of the storage pipeline:
# - FileCategory: Closed set of logical document categories
# - StoredDocument: One row of the idea_files table
# - StoredImage: One row of the idea_images table
# - UploadUrls: Signed write URL + the object's unsigned URL
# - DisplayState / DisplayResolution: Outcome of resolving an object for display
#
# Rows are parsed into these models at the repository boundary. A row that
# doesn't fit (unknown category, missing id, ...) is rejected there instead
# of travelling through the app as a loose dict.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


IMAGES_FOLDER = "images"


class FileCategory(str, Enum):
    """
    Logical category of an idea document.

    Decides the folder the document is stored under and the group it is
    listed in.
    """
    VALIDATION_REPORT = "validation_report"
    PITCH_DECK = "pitch_deck"
    VIDEO = "video"
    AI_IMAGE = "ai_image"
    MARKET_RESEARCH = "market_research"
    USER_UPLOAD = "user_upload"

    @property
    def label(self) -> str:
        """Group heading shown by the file manager."""
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[FileCategory, str] = {
    FileCategory.VALIDATION_REPORT: "Validation Reports",
    FileCategory.PITCH_DECK: "Pitch Decks",
    FileCategory.VIDEO: "Videos",
    FileCategory.AI_IMAGE: "AI Images",
    FileCategory.MARKET_RESEARCH: "Market Research",
    FileCategory.USER_UPLOAD: "Other Uploads",
}


class AspectRatio(str, Enum):
    """Display hint stored with each image."""
    SQUARE = "square"
    WIDE = "16:9"
    STANDARD = "4:3"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    DEFAULT = "default"


class StorageProvider(str, Enum):
    """Value written to the storage_provider column."""
    # Documents and images were historically tagged differently
    AWS = "aws"
    AWS_S3 = "aws_s3"


# =============================================================================
# Stored Objects
# =============================================================================

class StoredDocument(BaseModel):
    """
    A document attached to an idea (table idea_files).

    file_name is the disambiguated name written to storage
    (e.g. "report_1712345678901.pdf"); display_name recovers the name the
    creator uploaded.
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=False)

    id: str = Field(..., min_length=1, description="Record id")
    idea_id: str = Field(..., min_length=1, description="Owning idea")
    file_url: str = Field(..., min_length=1, description="Unsigned object URL")
    file_type: FileCategory = Field(..., description="Logical category")
    storage_provider: str = Field(default=StorageProvider.AWS.value)
    file_name: str = Field(..., min_length=1, description="Disambiguated file name")
    is_private: bool = Field(default=False)
    uploaded_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @computed_field
    @property
    def display_name(self) -> str:
        from core.services.paths import format_display_file_name

        return format_display_file_name(self.file_name)


class StoredImage(BaseModel):
    """
    An image in an idea's gallery (table idea_images).

    file_name keeps the original upload name; the storage key embeds a
    timestamp prefix instead.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    idea_id: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1)
    content_type: str = Field(default="application/octet-stream")
    size_in_bytes: int = Field(default=0, ge=0)
    is_private: bool = Field(default=False)
    caption: str = Field(default="")
    aspect_ratio: AspectRatio = Field(default=AspectRatio.DEFAULT)
    storage_provider: str = Field(default=StorageProvider.AWS_S3.value)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("caption", mode="before")
    @classmethod
    def _null_caption(cls, v):
        return v or ""

    @computed_field
    @property
    def display_name(self) -> str:
        return self.file_name


StoredObject = StoredDocument | StoredImage


# =============================================================================
# Signing & Retrieval
# =============================================================================

class UploadUrls(BaseModel):
    """
    Result of minting an upload URL.

    upload_url carries credentials and must only be handed to the uploader;
    object_url is the permanent, unsigned location stored as metadata.
    """
    upload_url: str
    object_url: str
    path: str


class DisplayState(str, Enum):
    """
    Lifecycle of one displayed object.

    State machine:
        unloaded -> loading -> loaded
                           \\-> error_once_retrying -> loaded
                                                   \\-> error_final

    loaded and error_final are terminal; error_final shows the fallback asset.
    """
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR_ONCE_RETRYING = "error_once_retrying"
    ERROR_FINAL = "error_final"


class DisplayResolution(BaseModel):
    """Outcome of resolving a stored URL into something a viewer can load."""
    url: str
    state: DisplayState
    attempts: int = Field(default=0, ge=0, le=2)
    signed: bool = False
    error: str | None = None
    history: list[DisplayState] = Field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return self.state == DisplayState.ERROR_FINAL


# =============================================================================
# Presentation
# =============================================================================

class FileGroup(BaseModel):
    """Documents of one category as shown to a particular viewer."""
    category: FileCategory
    label: str
    files: list[StoredDocument] = Field(default_factory=list)
    hidden_private_count: int = Field(default=0, ge=0)


class FileListing(BaseModel):
    """Everything the file manager needs for one idea and one viewer."""
    idea_id: str
    is_creator: bool
    groups: list[FileGroup]


class GalleryImage(BaseModel):
    """A visible image together with the URL to render it with."""
    image: StoredImage
    display: DisplayResolution


class Gallery(BaseModel):
    """Images of one idea as shown to a particular viewer."""
    idea_id: str
    is_creator: bool
    images: list[GalleryImage] = Field(default_factory=list)
    hidden_private_count: int = Field(default=0, ge=0)
