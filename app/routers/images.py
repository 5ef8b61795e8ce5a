# =============================================================================
# app/routers/images.py - Idea Gallery Endpoints
# =============================================================================
#   GET    /ideas/{idea_id}/images         visible images with display URLs
#   POST   /ideas/{idea_id}/images         upload (creator only)
#   POST   /images/{image_id}/privacy/toggle
#   PATCH  /images/{image_id}              caption / aspect ratio
#   DELETE /images/{image_id}              metadata only, bytes stay
#   GET    /images/{image_id}/url          display URL for one image
# =============================================================================

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, File, Form, Path, Response, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field

from app.dependencies import ContextDep, UserDep, ViewerDep, actor_id
from core.models.storage import AspectRatio, DisplayResolution, Gallery, StoredImage
from lib.utils import normalize_uuid

router = APIRouter()


class ImageDetailsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    caption: Optional[str] = Field(default=None, max_length=500)
    aspect_ratio: Optional[AspectRatio] = Field(default=None, alias="aspectRatio")


@router.get("/ideas/{idea_id}/images", response_model=Gallery)
def list_images(
    idea_id: Annotated[UUID, Path(description="Idea UUID")],
    context: ContextDep,
    viewer: ViewerDep,
):
    """
    Gallery of an idea.

    Every image carries its own display resolution; an image that can't be
    loaded comes back with the placeholder URL instead of failing the list.
    """
    return context.images.list_images(normalize_uuid(idea_id), actor_id(viewer))


@router.post(
    "/ideas/{idea_id}/images",
    response_model=StoredImage,
    status_code=status.HTTP_201_CREATED,
)
def upload_image(
    idea_id: Annotated[UUID, Path(description="Idea UUID")],
    file: Annotated[UploadFile, File(description="Image to upload")],
    context: ContextDep,
    user: UserDep,
    is_private: Annotated[bool, Form(alias="isPrivate")] = False,
    caption: Annotated[Optional[str], Form()] = None,
    aspect_ratio: Annotated[AspectRatio, Form(alias="aspectRatio")] = AspectRatio.DEFAULT,
):
    """Upload an image to an idea's gallery. The caption defaults to the file name."""
    return context.images.upload_image(
        normalize_uuid(idea_id),
        actor_id(user),
        file.filename or "image",
        file.file.read(),
        content_type=file.content_type,
        is_private=is_private,
        caption=caption,
        aspect_ratio=aspect_ratio,
    )


@router.post("/images/{image_id}/privacy/toggle", response_model=StoredImage)
def toggle_image_privacy(
    image_id: Annotated[UUID, Path(description="Image record id")],
    context: ContextDep,
    user: UserDep,
):
    """Flip an image between private and public."""
    return context.images.toggle_privacy(normalize_uuid(image_id), actor_id(user))


@router.patch("/images/{image_id}", response_model=StoredImage)
def update_image(
    image_id: Annotated[UUID, Path(description="Image record id")],
    body: ImageDetailsUpdate,
    context: ContextDep,
    user: UserDep,
):
    """Edit an image's caption and/or aspect ratio."""
    return context.images.update_details(
        normalize_uuid(image_id),
        actor_id(user),
        caption=body.caption,
        aspect_ratio=body.aspect_ratio,
    )


@router.delete("/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_image(
    image_id: Annotated[UUID, Path(description="Image record id")],
    context: ContextDep,
    user: UserDep,
):
    """Remove an image from the gallery."""
    context.images.delete_image(normalize_uuid(image_id), actor_id(user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/images/{image_id}/url", response_model=DisplayResolution)
def get_image_url(
    image_id: Annotated[UUID, Path(description="Image record id")],
    context: ContextDep,
    viewer: ViewerDep,
):
    """Display URL for one image (placeholder when it can't be loaded)."""
    return context.images.resolve(normalize_uuid(image_id), actor_id(viewer))
