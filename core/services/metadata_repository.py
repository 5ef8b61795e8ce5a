# =============================================================================
# core/services/metadata_repository.py - Stored Object Metadata
# =============================================================================
# CRUD over the idea_files and idea_images tables.
#
# Every row coming back from Supabase is parsed into a StoredDocument /
# StoredImage; a row that doesn't parse raises PersistenceError.
#
# These repositories trust their caller. Creator checks happen in
# FileService / ImageService before any mutation reaches this layer.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError
from supabase import Client

from app.exceptions import PersistenceError
from core.models.storage import (
    AspectRatio,
    FileCategory,
    StorageProvider,
    StoredDocument,
    StoredImage,
)
from lib.supabase_client import is_no_rows_error
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class _MetadataRepository(Generic[RecordT]):
    """Shared query plumbing for one metadata table."""

    table: str = ""
    order_column: str = "created_at"
    record_type: type[BaseModel] = BaseModel

    def __init__(self, client: Client):
        self.client = client

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def _parse(self, row: dict[str, Any]) -> RecordT:
        try:
            return self.record_type.model_validate(row)
        except ValidationError as e:
            logger.error(f"Malformed {self.table} row: id={row.get('id')} error={e}")
            raise PersistenceError(
                f"read {self.table}",
                "row does not match the expected schema",
                details={"row_id": row.get("id")},
            ) from e

    def _first(self, response: Any, operation: str) -> RecordT:
        if not response.data:
            raise PersistenceError(operation, "no row returned")
        return self._parse(response.data[0])

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _insert(self, data: dict[str, Any]) -> RecordT:
        operation = f"insert into {self.table}"
        try:
            response = self.client.table(self.table).insert(data).execute()
        except Exception as e:
            logger.error(f"Insert failed: table={self.table} idea_id={data.get('idea_id')} error={e}")
            raise PersistenceError(operation, str(e)) from e

        record = self._first(response, operation)
        logger.info(f"Inserted {self.table} row: id={record.id} idea_id={record.idea_id}")
        return record

    def list_by_idea(self, idea_id: str) -> list[RecordT]:
        """All records of an idea, newest first."""
        idea_id = normalize_uuid(idea_id)
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("idea_id", idea_id)
                .order(self.order_column, desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"List failed: table={self.table} idea_id={idea_id} error={e}")
            raise PersistenceError(f"list {self.table}", str(e)) from e

        return [self._parse(row) for row in response.data or []]

    def get(self, record_id: str) -> RecordT | None:
        """One record by id, None if it doesn't exist."""
        record_id = normalize_uuid(record_id)
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("id", record_id)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                return None
            logger.error(f"Fetch failed: table={self.table} id={record_id} error={e}")
            raise PersistenceError(f"read {self.table}", str(e)) from e

        if not response.data:
            return None
        return self._parse(response.data)

    def _update(self, record_id: str, data: dict[str, Any]) -> RecordT:
        record_id = normalize_uuid(record_id)
        operation = f"update {self.table}"
        data = {**data, "updated_at": datetime.now(timezone.utc).isoformat()}
        try:
            response = (
                self.client.table(self.table)
                .update(data)
                .eq("id", record_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Update failed: table={self.table} id={record_id} error={e}")
            raise PersistenceError(operation, str(e)) from e

        record = self._first(response, operation)
        logger.info(f"Updated {self.table} row: id={record_id} fields={sorted(data)}")
        return record

    def update_privacy(self, record_id: str, is_private: bool) -> RecordT:
        return self._update(record_id, {"is_private": is_private})


class DocumentRepository(_MetadataRepository[StoredDocument]):
    """idea_files: documents grouped by category."""

    table = "idea_files"
    order_column = "uploaded_at"
    record_type = StoredDocument

    def insert(
        self,
        *,
        idea_id: str,
        file_url: str,
        category: FileCategory,
        file_name: str,
    ) -> StoredDocument:
        """
        Record an uploaded document. Documents always start public.

        Raises:
            PersistenceError: If the write is rejected or returns nothing
        """
        return self._insert({
            "idea_id": normalize_uuid(idea_id),
            "file_url": file_url,
            "file_type": FileCategory(category).value,
            "storage_provider": StorageProvider.AWS.value,
            "file_name": file_name,
            "uploaded_at": datetime.now(timezone.utc).isoformat(),
            "is_private": False,
        })


class ImageRepository(_MetadataRepository[StoredImage]):
    """idea_images: the idea's gallery."""

    table = "idea_images"
    order_column = "created_at"
    record_type = StoredImage

    def insert(
        self,
        *,
        idea_id: str,
        image_url: str,
        file_name: str,
        content_type: str,
        size_in_bytes: int,
        is_private: bool = False,
        caption: str = "",
        aspect_ratio: AspectRatio = AspectRatio.DEFAULT,
    ) -> StoredImage:
        """
        Record an uploaded image.

        Raises:
            PersistenceError: If the write is rejected or returns nothing
        """
        return self._insert({
            "idea_id": normalize_uuid(idea_id),
            "image_url": image_url,
            "file_name": file_name,
            "content_type": content_type,
            "size_in_bytes": size_in_bytes,
            "is_private": is_private,
            "caption": caption,
            "aspect_ratio": AspectRatio(aspect_ratio).value,
            "storage_provider": StorageProvider.AWS_S3.value,
        })

    def update_details(
        self,
        record_id: str,
        caption: str | None = None,
        aspect_ratio: AspectRatio | None = None,
    ) -> StoredImage:
        """Change caption and/or aspect ratio; other columns are immutable."""
        data: dict[str, Any] = {}
        if caption is not None:
            data["caption"] = caption
        if aspect_ratio is not None:
            data["aspect_ratio"] = AspectRatio(aspect_ratio).value

        if not data:
            existing = self.get(record_id)
            if existing is None:
                raise PersistenceError(f"update {self.table}", "no row returned")
            return existing

        return self._update(record_id, data)

    def delete(self, record_id: str) -> None:
        """Delete the metadata row. The stored bytes are left in place."""
        record_id = normalize_uuid(record_id)
        try:
            self.client.table(self.table).delete().eq("id", record_id).execute()
        except Exception as e:
            logger.error(f"Delete failed: table={self.table} id={record_id} error={e}")
            raise PersistenceError(f"delete from {self.table}", str(e)) from e

        logger.info(f"Deleted {self.table} row: id={record_id}")
