# =============================================================================
# core/services/image_service.py - Idea Image Gallery
# =============================================================================
# Business logic behind the gallery. Same pipeline as documents, with a
# different key layout (images/{millis}-{name}) and per-image caption and
# aspect ratio.
#
# Gallery reads never fail because one image can't be loaded: each image
# carries its own DisplayResolution, fallback included.
# =============================================================================

import logging

from app.exceptions import PermissionDeniedError, PersistenceError, StoredObjectNotFoundError
from core.models.storage import (
    AspectRatio,
    DisplayResolution,
    Gallery,
    GalleryImage,
    StoredImage,
)
from core.services.file_service import BYTES_PER_MB, check_upload_size
from core.services.idea_service import IdeaService
from core.services.metadata_repository import ImageRepository
from core.services.paths import (
    build_base_path,
    build_image_path,
    clean_file_name,
    content_type_for_file_name,
)
from core.services.privacy import PrivacyGate
from core.services.retrieval_service import RetrievalOrchestrator
from core.services.signing_service import SignedUrlIssuer
from core.services.upload_service import UploadExecutor

logger = logging.getLogger(__name__)


class ImageService:
    """Images attached to an idea."""

    def __init__(
        self,
        ideas: IdeaService,
        images: ImageRepository,
        issuer: SignedUrlIssuer,
        executor: UploadExecutor,
        retrieval: RetrievalOrchestrator,
        max_file_size: int = 10 * BYTES_PER_MB,
    ):
        self.ideas = ideas
        self.images = images
        self.issuer = issuer
        self.executor = executor
        self.retrieval = retrieval
        self.max_file_size = max_file_size

    def upload_image(
        self,
        idea_id: str,
        actor_id: str | None,
        file_name: str,
        content: bytes,
        content_type: str | None = None,
        is_private: bool = False,
        caption: str | None = None,
        aspect_ratio: AspectRatio | str = AspectRatio.DEFAULT,
    ) -> StoredImage:
        """
        Store an image for an idea and record it.

        The caption defaults to the file name.

        Raises:
            IdeaNotFoundError: Unknown idea
            PermissionDeniedError: Actor is not the creator
            EmptyFileError / FileTooLargeError: Rejected payload
            PathValidationError / SigningError: Upload URL could not be issued
            UploadError: PUT failed, nothing was recorded
            PersistenceError: Bytes were stored but the metadata write failed
        """
        aspect_ratio = AspectRatio(aspect_ratio)
        idea = self.ideas.get_idea(idea_id)
        PrivacyGate.require_creator(actor_id, idea.creator_id, "upload images", idea.id)

        original_name = clean_file_name(file_name)
        check_upload_size(original_name, content, self.max_file_size)
        content_type = content_type or content_type_for_file_name(original_name)

        path = build_image_path(build_base_path(idea.id, idea.title), original_name)

        urls = self.issuer.issue_upload_url(path, content_type)
        self.executor.put_object(urls.upload_url, content, content_type)

        try:
            image = self.images.insert(
                idea_id=idea.id,
                image_url=urls.object_url,
                file_name=original_name,
                content_type=content_type,
                size_in_bytes=len(content),
                is_private=is_private,
                caption=original_name if caption is None else caption,
                aspect_ratio=aspect_ratio,
            )
        except PersistenceError as e:
            logger.error(f"Orphaned upload, metadata not recorded: idea_id={idea.id} path={path}")
            e.details["orphaned_path"] = path
            raise

        logger.info(
            f"Image uploaded: idea_id={idea.id} image_id={image.id} "
            f"file_name={image.file_name} is_private={image.is_private}"
        )
        return image

    def list_images(self, idea_id: str, viewer_id: str | None) -> Gallery:
        """Visible images of an idea, newest first, each with its display URL."""
        idea = self.ideas.get_idea(idea_id)
        visible, hidden = PrivacyGate.partition(
            self.images.list_by_idea(idea.id), viewer_id, idea.creator_id
        )

        return Gallery(
            idea_id=idea.id,
            is_creator=PrivacyGate.is_creator(viewer_id, idea.creator_id),
            images=[
                GalleryImage(image=image, display=self.retrieval.resolve(image))
                for image in visible
            ],
            hidden_private_count=hidden,
        )

    def resolve(self, image_id: str, viewer_id: str | None) -> DisplayResolution:
        """
        Display URL for one image.

        Raises:
            StoredObjectNotFoundError: Unknown image
            PermissionDeniedError: The image is private and the viewer isn't the creator
        """
        image = self._get_image(image_id)
        idea = self.ideas.get_idea(image.idea_id)

        if not PrivacyGate.can_view(viewer_id, image, idea.creator_id):
            raise PermissionDeniedError("view this private image", idea_id=idea.id)

        return self.retrieval.resolve(image)

    def toggle_privacy(self, image_id: str, actor_id: str | None) -> StoredImage:
        """Flip is_private. Creator only."""
        image = self._owned_image(image_id, actor_id, "change image privacy")
        updated = self.images.update_privacy(image.id, not image.is_private)
        logger.info(f"Image privacy changed: image_id={image.id} is_private={updated.is_private}")
        return updated

    def update_details(
        self,
        image_id: str,
        actor_id: str | None,
        caption: str | None = None,
        aspect_ratio: AspectRatio | str | None = None,
    ) -> StoredImage:
        """Change caption and/or aspect ratio. Creator only."""
        image = self._owned_image(image_id, actor_id, "edit images")
        return self.images.update_details(
            image.id,
            caption=caption,
            aspect_ratio=AspectRatio(aspect_ratio) if aspect_ratio is not None else None,
        )

    def delete_image(self, image_id: str, actor_id: str | None) -> None:
        """Remove the image's metadata. The stored bytes stay. Creator only."""
        image = self._owned_image(image_id, actor_id, "delete images")
        self.images.delete(image.id)
        logger.info(f"Image deleted: image_id={image.id} idea_id={image.idea_id}")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_image(self, image_id: str) -> StoredImage:
        image = self.images.get(image_id)
        if image is None:
            raise StoredObjectNotFoundError("image", str(image_id))
        return image

    def _owned_image(self, image_id: str, actor_id: str | None, action: str) -> StoredImage:
        image = self._get_image(image_id)
        idea = self.ideas.get_idea(image.idea_id)
        PrivacyGate.require_creator(actor_id, idea.creator_id, action, idea.id)
        return image
