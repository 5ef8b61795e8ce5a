# =============================================================================
# core/services/signing_service.py - Signed URL Issuer
# =============================================================================
# Mints short-lived S3 URLs:
# - Upload URLs: presigned PUT, private ACL, default 1 hour
# - Download URLs: presigned GET after an existence check, default 5 minutes
#
# Issuing a URL mints credentials, it never touches application state, so
# every method here is safe to call repeatedly.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import parse_qs, quote, urlsplit

from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.exceptions import ObjectNotFoundError, SigningError
from core.models.storage import UploadUrls
from core.services.paths import ROOT_PREFIX, ensure_safe_path, ensure_valid_path

logger = logging.getLogger(__name__)

SIGNATURE_PARAMS = ("X-Amz-Signature", "Signature")
_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


class SignedUrlIssuer:
    """
    Issues presigned upload and download URLs for one bucket.

    Paths are validated before any call to the backend; a malformed path
    raises PathValidationError without a network round trip.
    """

    def __init__(
        self,
        s3_client: Any,
        bucket: str,
        region: str,
        endpoint_url: str | None = None,
        upload_expiry: int = 3600,
        download_expiry: int = 300,
    ):
        self.s3 = s3_client
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self.upload_expiry = upload_expiry
        self.download_expiry = download_expiry

    @classmethod
    def from_settings(cls, s3_client: Any, settings: Settings) -> "SignedUrlIssuer":
        return cls(
            s3_client,
            bucket=settings.AWS_S3_BUCKET,
            region=settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
            upload_expiry=settings.UPLOAD_URL_EXPIRY,
            download_expiry=settings.DOWNLOAD_URL_EXPIRY,
        )

    # -------------------------------------------------------------------------
    # URLs
    # -------------------------------------------------------------------------

    def object_url(self, path: str) -> str:
        """Permanent, unsigned URL of an object (what gets stored as metadata)."""
        key = quote(path, safe="/")
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def issue_upload_url(self, path: str, content_type: str) -> UploadUrls:
        """
        Mint a presigned PUT URL for a path.

        The object is written with a private ACL, so it can only ever be read
        back through a signed download URL.

        Args:
            path: Storage key (must start with idea-files/)
            content_type: Content type the uploader will send

        Returns:
            UploadUrls with the signed upload URL and the unsigned object URL

        Raises:
            PathValidationError: If the path is malformed
            SigningError: If the backend refuses to sign
        """
        ensure_valid_path(path)

        params = {
            "Bucket": self.bucket,
            "Key": path,
            "ContentType": content_type,
            "ACL": "private",
            "Metadata": {"uploaded-at": datetime.now(timezone.utc).isoformat()},
        }

        try:
            upload_url = self.s3.generate_presigned_url(
                "put_object",
                Params=params,
                ExpiresIn=self.upload_expiry,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Upload URL signing failed: path={path} error={e}")
            raise SigningError(path, str(e)) from e

        logger.info(f"Issued upload URL: path={path} expires_in={self.upload_expiry}s")
        return UploadUrls(upload_url=upload_url, object_url=self.object_url(path), path=path)

    def issue_download_url(self, path: str) -> str:
        """
        Mint a presigned GET URL for an existing object.

        Keys outside idea-files/ predate the current layout; they are still
        signed, with a warning.

        Args:
            path: Storage key (must not contain '..')

        Returns:
            Signed download URL

        Raises:
            PathValidationError: If the path is malformed
            ObjectNotFoundError: If no object exists at the path
            SigningError: If the existence check or signing fails
        """
        ensure_safe_path(path)
        if not path.startswith(ROOT_PREFIX):
            logger.warning(f"Signing legacy storage path: path={path}")

        if not self.object_exists(path):
            logger.warning(f"Download URL requested for missing object: path={path}")
            raise ObjectNotFoundError(path)

        try:
            url = self.s3.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": path},
                ExpiresIn=self.download_expiry,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Download URL signing failed: path={path} error={e}")
            raise SigningError(path, str(e)) from e

        logger.debug(f"Issued download URL: path={path} expires_in={self.download_expiry}s")
        return url

    # -------------------------------------------------------------------------
    # Backend checks
    # -------------------------------------------------------------------------

    def object_exists(self, path: str) -> bool:
        """
        HEAD the object.

        Raises:
            SigningError: For any failure other than "not found"
        """
        try:
            self.s3.head_object(Bucket=self.bucket, Key=path)
            return True
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_CODES:
                return False
            logger.error(f"Object check failed: path={path} code={code} error={e}")
            raise SigningError(path, str(e)) from e
        except BotoCoreError as e:
            logger.error(f"Object check failed: path={path} error={e}")
            raise SigningError(path, str(e)) from e

    def check_bucket(self) -> None:
        """HEAD the bucket; raises botocore errors as-is (used by readiness)."""
        self.s3.head_bucket(Bucket=self.bucket)

    @staticmethod
    def is_signed_url(url: str | None) -> bool:
        """True if the URL already carries a signature query parameter."""
        if not url:
            return False
        query = parse_qs(urlsplit(url).query)
        return any(param in query for param in SIGNATURE_PARAMS)
