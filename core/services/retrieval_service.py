# =============================================================================
# core/services/retrieval_service.py - Retrieval Orchestrator
# =============================================================================
# Turns a stored object URL into a URL a viewer can actually load. The privacy
# gate decides whether a record needs signing at all.
#
# State machine for one displayed object:
#
#   unloaded -> loading -> loaded
#                      \-> error_once_retrying -> loaded
#                                              \-> error_final (fallback asset)
#
# At most one retry, no backoff. A terminal failure never raises: the caller
# gets the fallback asset and the error text.
# =============================================================================

import logging

from app.config import Settings
from app.exceptions import PathValidationError, RetrievalError, SigningError
from core.models.storage import DisplayResolution, DisplayState, StoredDocument, StoredObject
from core.services.paths import extract_storage_key
from core.services.privacy import PrivacyGate
from core.services.signing_service import SignedUrlIssuer
from core.services.upload_service import UploadExecutor
from lib.utils import redact_url

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


class _LoadFailed(Exception):
    """A signed URL was minted but didn't serve bytes."""


class RetrievalOrchestrator:
    """
    Resolves stored URLs for display with a single bounded retry.

    When verify_load is on, each freshly signed URL is probed before being
    handed out, so a broken object counts as a failed load (and is retried)
    instead of showing up as a broken image later.
    """

    def __init__(
        self,
        issuer: SignedUrlIssuer,
        executor: UploadExecutor | None = None,
        fallback_url: str = "/images/image-placeholder.jpg",
        verify_load: bool = False,
        gate: PrivacyGate | None = None,
    ):
        self.issuer = issuer
        self.gate = gate or PrivacyGate()
        self.executor = executor
        self.fallback_url = fallback_url
        self.verify_load = verify_load and executor is not None

    @classmethod
    def from_settings(
        cls,
        issuer: SignedUrlIssuer,
        executor: UploadExecutor,
        settings: Settings,
    ) -> "RetrievalOrchestrator":
        return cls(
            issuer,
            executor,
            fallback_url=settings.FALLBACK_IMAGE_PATH,
            verify_load=settings.RETRIEVAL_VERIFY_LOAD,
        )

    def resolve(self, obj: StoredObject) -> DisplayResolution:
        """
        Resolve a stored document or image for display.

        The privacy gate decides whether the object needs a signed URL; when
        it doesn't, the stored URL is handed out unchanged.
        """
        stored_url = obj.file_url if isinstance(obj, StoredDocument) else obj.image_url

        if not self.gate.must_sign(obj):
            logger.debug(f"Serving unsigned URL: object_id={obj.id} url={redact_url(stored_url)}")
            return DisplayResolution(
                url=stored_url,
                state=DisplayState.LOADED,
                attempts=1,
                signed=False,
                history=[DisplayState.UNLOADED, DisplayState.LOADING, DisplayState.LOADED],
            )

        return self.resolve_display_url(stored_url)

    def resolve_display_url(self, stored_url: str) -> DisplayResolution:
        """
        Resolve a stored object URL into a displayable one.

        Args:
            stored_url: The file_url / image_url column value (or a bare key)

        Returns:
            DisplayResolution in state loaded or error_final
        """
        history = [DisplayState.UNLOADED, DisplayState.LOADING]

        if self.issuer.is_signed_url(stored_url):
            return self._resolve_signed(stored_url, history)

        path = extract_storage_key(stored_url, self.issuer.bucket)
        last_error = ""

        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                url = self.issuer.issue_download_url(path)
                self._verify(url)
            except PathValidationError as e:
                # Retrying an invalid key gives the same answer
                last_error = e.message
                return self._fail(path, last_error, attempt, history)
            except (SigningError, _LoadFailed) as e:
                last_error = e.message if isinstance(e, SigningError) else str(e)
                if attempt < MAX_ATTEMPTS:
                    logger.info(f"Retrieval failed, retrying once: path={path} error={last_error}")
                    history.append(DisplayState.ERROR_ONCE_RETRYING)
                continue

            history.append(DisplayState.LOADED)
            return DisplayResolution(
                url=url,
                state=DisplayState.LOADED,
                attempts=attempt,
                signed=True,
                history=history,
            )

        return self._fail(path, last_error, MAX_ATTEMPTS, history)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _resolve_signed(self, url: str, history: list[DisplayState]) -> DisplayResolution:
        # An already-signed URL is never re-signed, so a failed load is final
        try:
            self._verify(url)
        except _LoadFailed as e:
            return self._fail(redact_url(url), str(e), 1, history)

        history.append(DisplayState.LOADED)
        return DisplayResolution(
            url=url,
            state=DisplayState.LOADED,
            attempts=1,
            signed=True,
            history=history,
        )

    def _verify(self, url: str) -> None:
        if self.verify_load and not self.executor.probe(url):
            raise _LoadFailed("signed URL did not serve the object")

    def _fail(
        self,
        path: str,
        error: str,
        attempts: int,
        history: list[DisplayState],
    ) -> DisplayResolution:
        failure = RetrievalError(path, error, attempts=attempts)
        logger.warning(f"Retrieval gave up, showing fallback: path={path} attempts={attempts} error={error}")
        history.append(DisplayState.ERROR_FINAL)
        return DisplayResolution(
            url=self.fallback_url,
            state=DisplayState.ERROR_FINAL,
            attempts=attempts,
            signed=False,
            error=failure.message,
            history=history,
        )
