# =============================================================================
# tests/test_file_service.py - File Service Tests
# =============================================================================
# End-to-end document flows against the in-memory Supabase table fake, a
# mocked S3 signer and the httpx storage fake:
# - Upload round trip (path, PUT, metadata, display name)
# - Failures at each upload step
# - Privacy toggling and private file access
# - Grouped listings per viewer
# - Raw path signing for creators
# =============================================================================

import re

import pytest
from botocore.exceptions import ClientError

from app.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    IdeaNotFoundError,
    PathValidationError,
    PermissionDeniedError,
    PersistenceError,
    RetrievalError,
    SigningError,
    StoredObjectNotFoundError,
    UploadError,
)
from core.models.storage import DisplayState, FileCategory

from tests.conftest import BUCKET, CREATOR_ID, IDEA_ID, INVESTOR_ID

DOCUMENT_KEY = re.compile(
    rf"^idea-files/{IDEA_ID}-my-awesome-idea/pitch_deck/report_\d+\.pdf$"
)


@pytest.fixture
def files(context):
    return context.files


def upload(files, name="report.pdf", category=FileCategory.PITCH_DECK, content=b"%PDF-1.7"):
    return files.upload_document(IDEA_ID, CREATOR_ID, category, name, content)


# =============================================================================
# Upload
# =============================================================================

class TestUploadDocument:
    """Test the upload pipeline."""

    def test_round_trip(self, files, storage, s3):
        document = upload(files)

        assert document.display_name == "report.pdf"
        assert re.match(r"^report_\d+\.pdf$", document.file_name)
        assert document.is_private is False
        assert document.file_type == FileCategory.PITCH_DECK

        key = document.file_url.split(".amazonaws.com/", 1)[1]
        assert DOCUMENT_KEY.match(key)
        assert document.file_url.startswith(f"https://{BUCKET}.s3.us-east-1.amazonaws.com/")
        assert storage.objects[key] == b"%PDF-1.7"

        _, kwargs = s3.generate_presigned_url.call_args
        assert kwargs["Params"]["ContentType"] == "application/pdf"

    def test_uploaded_file_can_be_opened(self, files):
        document = upload(files)

        resolution = files.open_file(document.id, INVESTOR_ID)

        assert resolution.state == DisplayState.LOADED
        assert "X-Amz-Signature=sig-get_object" in resolution.url

    def test_rejected_put_records_nothing(self, files, storage, supabase):
        storage.put_status = 403

        with pytest.raises(UploadError) as exc_info:
            upload(files)

        assert exc_info.value.status == 403
        assert supabase.rows("idea_files") == []

    def test_signing_failure_sends_nothing(self, files, s3, storage, supabase):
        s3.generate_presigned_url.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        with pytest.raises(SigningError) as exc_info:
            upload(files)

        assert exc_info.value.code == "SIGNING_ERROR"
        assert storage.requests == []
        assert supabase.rows("idea_files") == []

    def test_failed_metadata_write_reports_orphan(self, files, storage, supabase):
        supabase.fail("idea_files", "insert")

        with pytest.raises(PersistenceError) as exc_info:
            upload(files)

        orphan = exc_info.value.details["orphaned_path"]
        assert DOCUMENT_KEY.match(orphan)
        assert orphan in storage.objects

    def test_non_creator_cannot_upload(self, files, storage):
        with pytest.raises(PermissionDeniedError):
            files.upload_document(IDEA_ID, INVESTOR_ID, "video", "demo.mp4", b"x")

        assert storage.requests == []

    def test_anonymous_cannot_upload(self, files):
        with pytest.raises(PermissionDeniedError):
            files.upload_document(IDEA_ID, None, "video", "demo.mp4", b"x")

    def test_unknown_idea(self, files):
        with pytest.raises(IdeaNotFoundError):
            files.upload_document(
                "00000000-0000-4000-8000-000000000000", CREATOR_ID, "video", "demo.mp4", b"x"
            )

    def test_empty_file_rejected(self, files):
        with pytest.raises(EmptyFileError):
            upload(files, content=b"")

    def test_oversized_file_rejected(self, files, storage):
        files.max_file_size = 4

        with pytest.raises(FileTooLargeError) as exc_info:
            upload(files, content=b"12345")

        assert exc_info.value.status_code == 413
        assert storage.requests == []

    def test_unknown_category_rejected(self, files):
        with pytest.raises(ValueError):
            files.upload_document(IDEA_ID, CREATOR_ID, "spreadsheets", "a.csv", b"x")

    def test_same_name_twice_gives_two_records(self, files, supabase):
        first = upload(files)
        second = upload(files)

        assert first.id != second.id
        assert len(supabase.rows("idea_files")) == 2


# =============================================================================
# Privacy
# =============================================================================

class TestPrivacy:
    """Test privacy toggling and enforcement."""

    def test_private_file_hidden_from_investor(self, files, s3):
        document = upload(files, name="financials.pdf")
        files.set_privacy(document.id, True, CREATOR_ID)

        with pytest.raises(PermissionDeniedError):
            files.open_file(document.id, INVESTOR_ID)

        with pytest.raises(PermissionDeniedError):
            files.open_file(document.id, None)

        s3.head_object.assert_not_called()
        s3.generate_presigned_url.assert_called_once()

    def test_creator_still_opens_private_file(self, files):
        document = upload(files)
        files.set_privacy(document.id, True, CREATOR_ID)

        resolution = files.open_file(document.id, CREATOR_ID)

        assert resolution.state == DisplayState.LOADED

    def test_only_creator_changes_privacy(self, files, supabase):
        document = upload(files)

        with pytest.raises(PermissionDeniedError):
            files.set_privacy(document.id, True, INVESTOR_ID)

        assert supabase.rows("idea_files")[0]["is_private"] is False

    def test_privacy_round_trip(self, files):
        document = upload(files)

        assert files.set_privacy(document.id, True, CREATOR_ID).is_private is True
        assert files.set_privacy(document.id, False, CREATOR_ID).is_private is False

    def test_unknown_file(self, files):
        with pytest.raises(StoredObjectNotFoundError) as exc_info:
            files.set_privacy("missing", True, CREATOR_ID)

        assert exc_info.value.code == "FILE_NOT_FOUND"

    def test_open_missing_object_raises_retrieval_error(self, files, s3):
        document = upload(files)
        s3.head_object.side_effect = ClientError(
            {"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject"
        )

        with pytest.raises(RetrievalError) as exc_info:
            files.open_file(document.id, CREATOR_ID)

        assert exc_info.value.details["attempts"] == 2


# =============================================================================
# Listing
# =============================================================================

class TestListFiles:
    """Test grouped listings."""

    def test_groups_in_fixed_order_even_when_empty(self, files):
        listing = files.list_files(IDEA_ID, CREATOR_ID)

        assert [g.category for g in listing.groups] == list(FileCategory)
        assert all(g.files == [] for g in listing.groups)
        assert listing.is_creator is True

    def test_investor_sees_public_and_hidden_count(self, files):
        public = upload(files, name="deck.pdf")
        private = upload(files, name="cap-table.pdf")
        upload(files, name="demo.mp4", category=FileCategory.VIDEO)
        files.set_privacy(private.id, True, CREATOR_ID)

        listing = files.list_files(IDEA_ID, INVESTOR_ID)
        groups = {g.category: g for g in listing.groups}

        assert listing.is_creator is False
        assert [d.id for d in groups[FileCategory.PITCH_DECK].files] == [public.id]
        assert groups[FileCategory.PITCH_DECK].hidden_private_count == 1
        assert groups[FileCategory.PITCH_DECK].label == "Pitch Decks"
        assert len(groups[FileCategory.VIDEO].files) == 1

    def test_creator_sees_everything(self, files):
        private = upload(files, name="cap-table.pdf")
        files.set_privacy(private.id, True, CREATOR_ID)

        listing = files.list_files(IDEA_ID, CREATOR_ID)
        group = next(g for g in listing.groups if g.category == FileCategory.PITCH_DECK)

        assert [d.id for d in group.files] == [private.id]
        assert group.hidden_private_count == 0


# =============================================================================
# Raw Path Signing
# =============================================================================

class TestRawSigning:
    """Test creator-only signing of caller-built paths."""

    PATH = f"idea-files/{IDEA_ID}-my-awesome-idea/user_upload/notes_1.txt"

    def test_creator_gets_upload_url(self, files):
        urls = files.sign_upload(self.PATH, "text/plain", CREATOR_ID)

        assert urls.path == self.PATH
        assert "sig-put_object" in urls.upload_url

    def test_investor_denied(self, files):
        with pytest.raises(PermissionDeniedError):
            files.sign_upload(self.PATH, "text/plain", INVESTOR_ID)

        with pytest.raises(PermissionDeniedError):
            files.sign_download(self.PATH, INVESTOR_ID)

    def test_creator_gets_download_url(self, files):
        url = files.sign_download(self.PATH, CREATOR_ID)

        assert "sig-get_object" in url

    def test_path_without_idea_folder(self, files, s3):
        with pytest.raises(PathValidationError):
            files.sign_upload("idea-files/legacy/notes.txt", "text/plain", CREATOR_ID)

        s3.generate_presigned_url.assert_not_called()

    def test_traversal_rejected(self, files):
        with pytest.raises(PathValidationError):
            files.sign_download(f"idea-files/{IDEA_ID}-x/../../secrets", CREATOR_ID)
