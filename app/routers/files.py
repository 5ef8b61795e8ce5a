# =============================================================================
# app/routers/files.py - Idea Document Endpoints
# =============================================================================
# The file manager's API:
#   GET   /ideas/{idea_id}/files     grouped listing for the caller
#   POST  /ideas/{idea_id}/files     upload (creator only)
#   PATCH /files/{file_id}/privacy   hide/show (creator only)
#   GET   /files/{file_id}/url       signed download URL (privacy checked)
#
# Handlers are plain `def`: the services block on supabase/boto3/httpx, so
# FastAPI runs them in its threadpool.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Path, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field

from app.dependencies import ContextDep, UserDep, ViewerDep, actor_id
from core.models.storage import DisplayResolution, FileCategory, FileListing, StoredDocument
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

router = APIRouter()


class PrivacyUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_private: bool = Field(..., alias="isPrivate")


@router.get("/ideas/{idea_id}/files", response_model=FileListing)
def list_files(
    idea_id: Annotated[UUID, Path(description="Idea UUID")],
    context: ContextDep,
    viewer: ViewerDep,
):
    """
    Documents of an idea grouped by category.

    Anonymous callers and investors see public files plus a count of hidden
    private ones; the creator sees everything.
    """
    return context.files.list_files(normalize_uuid(idea_id), actor_id(viewer))


@router.post(
    "/ideas/{idea_id}/files",
    response_model=StoredDocument,
    status_code=status.HTTP_201_CREATED,
)
def upload_file(
    idea_id: Annotated[UUID, Path(description="Idea UUID")],
    file: Annotated[UploadFile, File(description="Document to upload")],
    category: Annotated[FileCategory, Form(description="Logical category")],
    context: ContextDep,
    user: UserDep,
):
    """
    Upload a document to an idea.

    1. Build and validate the storage path
    2. Mint a signed upload URL
    3. PUT the bytes
    4. Record the metadata (documents start public)
    """
    content = file.file.read()
    logger.info(
        f"Upload requested: idea_id={idea_id} file_name={file.filename} "
        f"category={category.value} bytes={len(content)}"
    )
    return context.files.upload_document(
        normalize_uuid(idea_id),
        actor_id(user),
        category,
        file.filename or "file",
        content,
        content_type=file.content_type,
    )


@router.patch("/files/{file_id}/privacy", response_model=StoredDocument)
def set_file_privacy(
    file_id: Annotated[UUID, Path(description="File record id")],
    body: PrivacyUpdate,
    context: ContextDep,
    user: UserDep,
):
    """Mark a document private or public."""
    return context.files.set_privacy(normalize_uuid(file_id), body.is_private, actor_id(user))


@router.get("/files/{file_id}/url", response_model=DisplayResolution)
def get_file_url(
    file_id: Annotated[UUID, Path(description="File record id")],
    context: ContextDep,
    viewer: ViewerDep,
):
    """
    Signed download URL for a document.

    403 for private files unless the caller created the idea.
    """
    return context.files.open_file(normalize_uuid(file_id), actor_id(viewer))
