# =============================================================================
# core/services/upload_service.py - Upload Executor
# =============================================================================
# Sends bytes to a presigned upload URL and checks presigned download URLs.
# One request per call; retry policy belongs to the caller.
# =============================================================================

import logging

import httpx

from app.exceptions import UploadError
from lib.utils import redact_url

logger = logging.getLogger(__name__)

# Enough of a failed response body to see the backend's error code
MAX_ERROR_BODY = 1000


class UploadExecutor:
    """
    Thin wrapper around an httpx.Client for signed URL traffic.

    The client is owned by the application context and closed at shutdown.
    """

    def __init__(self, http_client: httpx.Client):
        self.http = http_client

    @classmethod
    def with_timeout(cls, timeout_seconds: float) -> "UploadExecutor":
        return cls(httpx.Client(timeout=timeout_seconds))

    def put_object(self, upload_url: str, content: bytes, content_type: str) -> None:
        """
        PUT the full payload to a signed upload URL.

        Args:
            upload_url: Presigned PUT URL
            content: File bytes
            content_type: Must match the content type the URL was signed with

        Raises:
            UploadError: On any non-2xx response or transport failure
        """
        target = redact_url(upload_url)

        try:
            response = self.http.put(
                upload_url,
                content=content,
                headers={"Content-Type": content_type},
            )
        except httpx.HTTPError as e:
            logger.error(f"Upload request failed: url={target} error={e}")
            raise UploadError(str(e)) from e

        if not response.is_success:
            body = response.text[:MAX_ERROR_BODY]
            logger.error(
                f"Upload rejected: url={target} status={response.status_code} body={body}"
            )
            raise UploadError(
                f"storage returned HTTP {response.status_code}",
                status=response.status_code,
                body=body,
            )

        logger.info(f"Uploaded object: url={target} bytes={len(content)}")

    def probe(self, url: str) -> bool:
        """
        Check that a download URL actually serves bytes.

        Fetches a single byte so large videos aren't downloaded.
        """
        try:
            response = self.http.get(url, headers={"Range": "bytes=0-0"})
        except httpx.HTTPError as e:
            logger.warning(f"Probe failed: url={redact_url(url)} error={e}")
            return False

        if response.status_code in (200, 206):
            return True

        logger.warning(f"Probe failed: url={redact_url(url)} status={response.status_code}")
        return False

    def close(self) -> None:
        self.http.close()
