# =============================================================================
# core/services/file_service.py - Idea Documents
# =============================================================================
# Business logic behind the file manager:
# - Upload: build path -> validate -> sign -> PUT -> record metadata
# - List: group by category, hide private files from non-creators
# - Privacy: creator-only toggle
# - Open: privacy check first, then signed URL retrieval
#
# The upload sequence is not transactional. Whatever step fails first is the
# error the caller sees; nothing already written is rolled back.
# =============================================================================

import logging

from app.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    PermissionDeniedError,
    PersistenceError,
    RetrievalError,
    StoredObjectNotFoundError,
)
from core.models.storage import (
    DisplayResolution,
    DisplayState,
    FileCategory,
    FileGroup,
    FileListing,
    StoredDocument,
    UploadUrls,
)
from core.services.idea_service import IdeaService
from core.services.metadata_repository import DocumentRepository
from core.services.paths import (
    build_base_path,
    build_document_path,
    clean_file_name,
    content_type_for_file_name,
    extract_storage_key,
    file_name_from_path,
    idea_id_from_path,
)
from core.services.privacy import PrivacyGate
from core.services.retrieval_service import RetrievalOrchestrator
from core.services.signing_service import SignedUrlIssuer
from core.services.upload_service import UploadExecutor

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


def check_upload_size(file_name: str, content: bytes, max_file_size: int) -> None:
    """
    Raises:
        EmptyFileError: If there are no bytes
        FileTooLargeError: If the payload exceeds max_file_size
    """
    if not content:
        raise EmptyFileError(file_name)
    if len(content) > max_file_size:
        raise FileTooLargeError(len(content) / BYTES_PER_MB, max_file_size / BYTES_PER_MB)


class FileService:
    """
    Documents attached to an idea.

    Every mutation requires the acting user's id and is refused unless that
    user created the idea.
    """

    def __init__(
        self,
        ideas: IdeaService,
        documents: DocumentRepository,
        issuer: SignedUrlIssuer,
        executor: UploadExecutor,
        retrieval: RetrievalOrchestrator,
        max_file_size: int = 10 * BYTES_PER_MB,
    ):
        self.ideas = ideas
        self.documents = documents
        self.issuer = issuer
        self.executor = executor
        self.retrieval = retrieval
        self.max_file_size = max_file_size

    def upload_document(
        self,
        idea_id: str,
        actor_id: str | None,
        category: FileCategory | str,
        file_name: str,
        content: bytes,
        content_type: str | None = None,
    ) -> StoredDocument:
        """
        Store a document for an idea and record it.

        Args:
            idea_id: Target idea
            actor_id: User performing the upload (must be the creator)
            category: Logical category, decides the folder
            file_name: Name the file was selected with
            content: File bytes
            content_type: Declared type; derived from the extension if absent

        Returns:
            The new StoredDocument (always public at creation)

        Raises:
            IdeaNotFoundError: Unknown idea
            PermissionDeniedError: Actor is not the creator
            EmptyFileError / FileTooLargeError: Rejected payload
            PathValidationError / SigningError: Upload URL could not be issued
            UploadError: PUT failed, nothing was recorded
            PersistenceError: Bytes were stored but the metadata write failed
        """
        category = FileCategory(category)
        idea = self.ideas.get_idea(idea_id)
        PrivacyGate.require_creator(actor_id, idea.creator_id, "upload files", idea.id)

        original_name = clean_file_name(file_name)
        check_upload_size(original_name, content, self.max_file_size)
        content_type = content_type or content_type_for_file_name(original_name)

        base_path = build_base_path(idea.id, idea.title)
        path = build_document_path(base_path, category, original_name)

        urls = self.issuer.issue_upload_url(path, content_type)
        self.executor.put_object(urls.upload_url, content, content_type)

        try:
            document = self.documents.insert(
                idea_id=idea.id,
                file_url=urls.object_url,
                category=category,
                file_name=file_name_from_path(path),
            )
        except PersistenceError as e:
            logger.error(f"Orphaned upload, metadata not recorded: idea_id={idea.id} path={path}")
            e.details["orphaned_path"] = path
            raise

        logger.info(
            f"Document uploaded: idea_id={idea.id} file_id={document.id} "
            f"category={category.value} file_name={document.file_name}"
        )
        return document

    def list_files(self, idea_id: str, viewer_id: str | None) -> FileListing:
        """
        Documents of an idea grouped by category, as this viewer may see them.

        Groups come in a fixed order and are present even when empty;
        private documents count towards hidden_private_count for non-creators.
        """
        idea = self.ideas.get_idea(idea_id)
        documents = self.documents.list_by_idea(idea.id)

        groups = []
        for category in FileCategory:
            in_category = [doc for doc in documents if doc.file_type == category]
            visible, hidden = PrivacyGate.partition(in_category, viewer_id, idea.creator_id)
            groups.append(FileGroup(
                category=category,
                label=category.label,
                files=visible,
                hidden_private_count=hidden,
            ))

        return FileListing(
            idea_id=idea.id,
            is_creator=PrivacyGate.is_creator(viewer_id, idea.creator_id),
            groups=groups,
        )

    def set_privacy(self, file_id: str, is_private: bool, actor_id: str | None) -> StoredDocument:
        """
        Raises:
            StoredObjectNotFoundError: Unknown file
            PermissionDeniedError: Actor is not the creator
        """
        document = self._get_document(file_id)
        idea = self.ideas.get_idea(document.idea_id)
        PrivacyGate.require_creator(actor_id, idea.creator_id, "change file privacy", idea.id)

        updated = self.documents.update_privacy(document.id, is_private)
        logger.info(f"File privacy changed: file_id={document.id} is_private={is_private}")
        return updated

    def open_file(self, file_id: str, viewer_id: str | None) -> DisplayResolution:
        """
        Resolve a document to a signed download URL for this viewer.

        Raises:
            StoredObjectNotFoundError: Unknown file
            PermissionDeniedError: The file is private and the viewer isn't the creator
            RetrievalError: No usable URL even after the retry
        """
        document = self._get_document(file_id)
        idea = self.ideas.get_idea(document.idea_id)

        if not PrivacyGate.can_view(viewer_id, document, idea.creator_id):
            logger.info(f"Private file withheld: file_id={document.id} idea_id={idea.id}")
            raise PermissionDeniedError("view this private file", idea_id=idea.id)

        resolution = self.retrieval.resolve(document)
        if resolution.state == DisplayState.ERROR_FINAL:
            raise RetrievalError(
                extract_storage_key(document.file_url, self.issuer.bucket),
                resolution.error or "unknown error",
                attempts=resolution.attempts,
            )
        return resolution

    # -------------------------------------------------------------------------
    # Raw path signing (creator tools)
    # -------------------------------------------------------------------------

    def sign_upload(self, path: str, content_type: str, actor_id: str | None) -> UploadUrls:
        """
        Upload URL for a caller-built path inside one of the actor's ideas.

        Raises:
            PathValidationError: Malformed path, or no idea folder in it
            IdeaNotFoundError: The folder's idea doesn't exist
            PermissionDeniedError: Actor is not the creator
            SigningError: Backend refused to sign
        """
        idea = self.ideas.get_idea(idea_id_from_path(path))
        PrivacyGate.require_creator(actor_id, idea.creator_id, "upload files", idea.id)
        return self.issuer.issue_upload_url(path, content_type)

    def sign_download(self, path: str, actor_id: str | None) -> str:
        """
        Download URL for a path inside one of the actor's ideas.

        Viewers other than the creator go through open_file, which applies
        the privacy check to the stored record.

        Raises:
            PathValidationError: Malformed path, or no idea folder in it
            IdeaNotFoundError: The folder's idea doesn't exist
            PermissionDeniedError: Actor is not the creator
            ObjectNotFoundError: Nothing stored at the path
            SigningError: Backend refused to sign
        """
        idea = self.ideas.get_idea(idea_id_from_path(path))
        PrivacyGate.require_creator(actor_id, idea.creator_id, "sign storage paths", idea.id)
        return self.issuer.issue_download_url(path)

    def _get_document(self, file_id: str) -> StoredDocument:
        document = self.documents.get(file_id)
        if document is None:
            raise StoredObjectNotFoundError("file", str(file_id))
        return document
