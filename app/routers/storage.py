# =============================================================================
# app/routers/storage.py - Raw Signed URL Endpoints
# =============================================================================
# Signs caller-built storage paths for the idea's creator:
#   POST /storage/upload-url  {filePath, contentType} -> {uploadUrl, fileUrl}
#   POST /storage/signed-url  {filePath}              -> {signedUrl}
#
# Paths are validated before any storage call (400 on a bad path).
# =============================================================================

import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from app.dependencies import ContextDep, UserDep, actor_id

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request / Response Models
# =============================================================================

class UploadUrlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(..., alias="filePath", description="Storage key under idea-files/")
    content_type: str = Field(..., alias="contentType", min_length=1)


class UploadUrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(..., alias="uploadUrl")
    file_url: str = Field(..., alias="fileUrl")


class SignedUrlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(..., alias="filePath")


class SignedUrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    signed_url: str = Field(..., alias="signedUrl")


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/upload-url", response_model=UploadUrlResponse, response_model_by_alias=True)
def create_upload_url(body: UploadUrlRequest, context: ContextDep, user: UserDep):
    """
    Presigned PUT URL for a path in one of the caller's ideas.

    The returned fileUrl is the unsigned location to store as metadata.
    """
    urls = context.files.sign_upload(body.file_path, body.content_type, actor_id(user))
    return UploadUrlResponse(upload_url=urls.upload_url, file_url=urls.object_url)


@router.post("/signed-url", response_model=SignedUrlResponse, response_model_by_alias=True)
def create_signed_url(body: SignedUrlRequest, context: ContextDep, user: UserDep):
    """
    Presigned GET URL for an existing object in one of the caller's ideas.

    404 when nothing is stored at the path.
    """
    url = context.files.sign_download(body.file_path, actor_id(user))
    return SignedUrlResponse(signed_url=url)
