# =============================================================================
# tests/test_metadata_repository.py - Metadata Repository Tests
# =============================================================================
# Runs the repositories against the in-memory Supabase fake from conftest.
# =============================================================================

import pytest

from app.exceptions import PersistenceError
from core.models.storage import AspectRatio, FileCategory, StoredDocument, StoredImage
from core.services.metadata_repository import DocumentRepository, ImageRepository

from tests.conftest import IDEA_ID

OTHER_IDEA = "11111111-2222-4333-8444-555555555555"


@pytest.fixture
def documents(supabase):
    return DocumentRepository(supabase)


@pytest.fixture
def images(supabase):
    return ImageRepository(supabase)


def add_image(images, name, is_private=False, idea_id=IDEA_ID):
    return images.insert(
        idea_id=idea_id,
        image_url=f"https://b.s3.us-east-1.amazonaws.com/idea-files/x/images/1-{name}",
        file_name=name,
        content_type="image/png",
        size_in_bytes=10,
        is_private=is_private,
    )


class TestDocumentRepository:
    """Test idea_files access."""

    def test_insert_returns_parsed_record(self, documents, supabase):
        doc = documents.insert(
            idea_id=IDEA_ID,
            file_url="https://b.s3.us-east-1.amazonaws.com/idea-files/x/pitch_deck/deck_1.pdf",
            category=FileCategory.PITCH_DECK,
            file_name="deck_1.pdf",
        )

        assert isinstance(doc, StoredDocument)
        assert doc.is_private is False
        assert doc.file_type == FileCategory.PITCH_DECK
        assert doc.display_name == "deck.pdf"
        assert supabase.rows("idea_files")[0]["storage_provider"] == "aws"

    def test_list_is_newest_first_by_upload_time(self, documents, supabase):
        supabase.tables["idea_files"] = [
            {"id": "old", "idea_id": IDEA_ID, "file_url": "u1", "file_type": "video",
             "file_name": "a_1.mp4", "uploaded_at": "2024-01-01T00:00:00+00:00"},
            {"id": "new", "idea_id": IDEA_ID, "file_url": "u2", "file_type": "video",
             "file_name": "b_2.mp4", "uploaded_at": "2024-03-01T00:00:00+00:00"},
            {"id": "other", "idea_id": OTHER_IDEA, "file_url": "u3", "file_type": "video",
             "file_name": "c_3.mp4", "uploaded_at": "2024-02-01T00:00:00+00:00"},
        ]

        listed = documents.list_by_idea(IDEA_ID)

        assert [d.id for d in listed] == ["new", "old"]

    def test_get_missing_returns_none(self, documents):
        assert documents.get("does-not-exist") is None

    def test_update_privacy(self, documents):
        doc = documents.insert(
            idea_id=IDEA_ID, file_url="u", category="video", file_name="a_1.mp4"
        )

        updated = documents.update_privacy(doc.id, True)

        assert updated.is_private is True
        assert documents.get(doc.id).is_private is True

    def test_rejected_insert_raises_persistence_error(self, documents, supabase):
        supabase.fail("idea_files", "insert")

        with pytest.raises(PersistenceError) as exc_info:
            documents.insert(idea_id=IDEA_ID, file_url="u", category="video", file_name="a_1.mp4")

        assert exc_info.value.code == "PERSISTENCE_ERROR"

    def test_malformed_row_rejected(self, documents, supabase):
        supabase.tables["idea_files"] = [
            {"id": "bad", "idea_id": IDEA_ID, "file_url": "u", "file_type": "spreadsheet",
             "file_name": "a.csv"},
        ]

        with pytest.raises(PersistenceError) as exc_info:
            documents.list_by_idea(IDEA_ID)

        assert exc_info.value.details["row_id"] == "bad"


class TestImageRepository:
    """Test idea_images access."""

    def test_insert_keeps_requested_privacy(self, images, supabase):
        image = add_image(images, "cover.png", is_private=True)

        assert isinstance(image, StoredImage)
        assert image.is_private is True
        assert image.aspect_ratio == AspectRatio.DEFAULT
        assert supabase.rows("idea_images")[0]["storage_provider"] == "aws_s3"

    def test_list_newest_first(self, images):
        add_image(images, "first.png")
        add_image(images, "second.png")
        add_image(images, "elsewhere.png", idea_id=OTHER_IDEA)

        listed = images.list_by_idea(IDEA_ID)

        assert [i.file_name for i in listed] == ["second.png", "first.png"]

    def test_update_details_only_touches_given_fields(self, images):
        image = add_image(images, "cover.png")

        updated = images.update_details(image.id, aspect_ratio=AspectRatio.WIDE)

        assert updated.aspect_ratio == AspectRatio.WIDE
        assert updated.caption == ""
        assert updated.image_url == image.image_url

    def test_delete_removes_row(self, images):
        image = add_image(images, "cover.png")

        images.delete(image.id)

        assert images.get(image.id) is None

    def test_failed_update_raises(self, images, supabase):
        image = add_image(images, "cover.png")
        supabase.fail("idea_images", "update")

        with pytest.raises(PersistenceError):
            images.update_privacy(image.id, True)

    def test_update_of_missing_row_raises(self, images):
        with pytest.raises(PersistenceError):
            images.update_privacy("gone", True)
