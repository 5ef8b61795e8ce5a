# =============================================================================
# core/context.py - Application Context
# =============================================================================
# One object that owns every client and service of a running app.
#
# Built once at startup from Settings, stored on app.state.context, handed to
# routes through Depends(get_context), and closed at shutdown. Tests build
# their own context from fakes with the plain constructor.
#
# Usage:
#   context = AppContext.build(settings)
#   context.files.list_files(idea_id, viewer_id)
#   context.close()
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any

from supabase import Client

from agents.idea_validator import IdeaValidatorAgent
from app.config import Settings
from app.exceptions import ConfigurationError
from core.services import (
    DocumentRepository,
    FileService,
    IdeaService,
    ImageRepository,
    ImageService,
    RetrievalOrchestrator,
    SignedUrlIssuer,
    UploadExecutor,
    ValidationService,
)
from lib.s3_client import create_s3_client
from lib.supabase_client import SupabaseClientError, create_supabase_client

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Clients and services shared by every request of one app instance."""

    settings: Settings
    supabase: Client
    s3: Any
    issuer: SignedUrlIssuer
    executor: UploadExecutor
    retrieval: RetrievalOrchestrator
    ideas: IdeaService
    documents: DocumentRepository
    images_repo: ImageRepository
    files: FileService
    images: ImageService
    validations: ValidationService

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        """
        Wire every client and service from settings.

        Raises:
            ConfigurationError: If a client can't be created
        """
        try:
            supabase = create_supabase_client(settings)
        except SupabaseClientError as e:
            raise ConfigurationError(str(e)) from e

        try:
            s3 = create_s3_client(settings)
        except Exception as e:
            raise ConfigurationError(f"Failed to create S3 client: {e}") from e

        return cls.from_clients(settings, supabase, s3)

    @classmethod
    def from_clients(
        cls,
        settings: Settings,
        supabase: Client,
        s3: Any,
        executor: UploadExecutor | None = None,
        agent: IdeaValidatorAgent | None = None,
    ) -> "AppContext":
        """Wire services around already-created clients."""
        issuer = SignedUrlIssuer.from_settings(s3, settings)
        executor = executor or UploadExecutor.with_timeout(settings.HTTP_TIMEOUT_SECONDS)
        retrieval = RetrievalOrchestrator.from_settings(issuer, executor, settings)
        ideas = IdeaService(supabase)
        documents = DocumentRepository(supabase)
        images_repo = ImageRepository(supabase)

        context = cls(
            settings=settings,
            supabase=supabase,
            s3=s3,
            issuer=issuer,
            executor=executor,
            retrieval=retrieval,
            ideas=ideas,
            documents=documents,
            images_repo=images_repo,
            files=FileService(
                ideas, documents, issuer, executor, retrieval,
                max_file_size=settings.MAX_FILE_SIZE,
            ),
            images=ImageService(
                ideas, images_repo, issuer, executor, retrieval,
                max_file_size=settings.MAX_FILE_SIZE,
            ),
            validations=ValidationService(
                supabase, ideas, agent or IdeaValidatorAgent.from_settings(settings)
            ),
        )
        logger.info(f"Application context ready: bucket={settings.AWS_S3_BUCKET}")
        return context

    def close(self) -> None:
        self.executor.close()
        logger.info("Application context closed")
