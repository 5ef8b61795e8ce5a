# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the Pydantic models to ensure:
# - Database rows are parsed correctly (aliases, text lists, timestamps)
# - Invalid data raises ValidationError
# - Models serialize to JSON properly
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import datetime

import pytest
from pydantic import ValidationError

from core.models import (
    AspectRatio,
    DisplayResolution,
    DisplayState,
    FileCategory,
    Idea,
    IdeaStage,
    IdeaValidationResult,
    StoredDocument,
    StoredImage,
    UserPersona,
)

from tests.conftest import CREATOR_ID, IDEA_ID


# =============================================================================
# Storage Model Tests
# =============================================================================

class TestFileCategory:
    """Test the closed category set."""

    def test_values(self):
        assert [c.value for c in FileCategory] == [
            "validation_report",
            "pitch_deck",
            "video",
            "ai_image",
            "market_research",
            "user_upload",
        ]

    def test_every_category_has_a_label(self):
        assert all(category.label for category in FileCategory)

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            FileCategory("spreadsheet")


class TestStoredDocument:
    """Test idea_files row parsing."""

    def row(self, **overrides):
        row = {
            "id": "doc-1",
            "idea_id": IDEA_ID,
            "file_url": "https://b.s3.us-east-1.amazonaws.com/idea-files/x/video/demo_1712345678901.mp4",
            "file_type": "video",
            "storage_provider": "aws",
            "file_name": "demo_1712345678901.mp4",
            "uploaded_at": "2024-04-05T10:00:00Z",
        }
        row.update(overrides)
        return row

    def test_valid_row(self):
        doc = StoredDocument.model_validate(self.row())

        assert doc.file_type == FileCategory.VIDEO
        assert doc.is_private is False
        assert isinstance(doc.uploaded_at, datetime)
        assert doc.display_name == "demo.mp4"

    def test_display_name_serialized(self):
        data = StoredDocument.model_validate(self.row()).model_dump(mode="json")

        assert data["display_name"] == "demo.mp4"
        assert data["file_type"] == "video"

    def test_unknown_columns_ignored(self):
        doc = StoredDocument.model_validate(self.row(legacy_column="x"))

        assert not hasattr(doc, "legacy_column")

    def test_missing_url_rejected(self):
        row = self.row()
        del row["file_url"]

        with pytest.raises(ValidationError):
            StoredDocument.model_validate(row)

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            StoredDocument.model_validate(self.row(file_type="spreadsheet"))


class TestStoredImage:
    """Test idea_images row parsing."""

    def test_defaults(self):
        image = StoredImage(id="img-1", idea_id=IDEA_ID, image_url="u", file_name="cover.png")

        assert image.aspect_ratio == AspectRatio.DEFAULT
        assert image.caption == ""
        assert image.storage_provider == "aws_s3"
        assert image.display_name == "cover.png"

    def test_aspect_ratio_values(self):
        image = StoredImage(
            id="img-1", idea_id=IDEA_ID, image_url="u", file_name="a.png", aspect_ratio="4:3"
        )

        assert image.aspect_ratio == AspectRatio.STANDARD

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            StoredImage(id="i", idea_id=IDEA_ID, image_url="u", file_name="a.png", size_in_bytes=-1)


class TestDisplayResolution:
    """Test the retrieval outcome model."""

    def test_fallback_flag(self):
        loaded = DisplayResolution(url="https://x", state=DisplayState.LOADED, attempts=1)
        failed = DisplayResolution(url="/placeholder.jpg", state=DisplayState.ERROR_FINAL, attempts=2)

        assert loaded.is_fallback is False
        assert failed.is_fallback is True

    def test_attempts_capped_at_two(self):
        with pytest.raises(ValidationError):
            DisplayResolution(url="u", state=DisplayState.LOADED, attempts=3)


# =============================================================================
# Idea Model Tests
# =============================================================================

class TestIdea:
    """Test ideas row parsing."""

    def test_camel_case_columns(self, idea_row):
        idea = Idea.model_validate(idea_row)

        assert idea.creator_id == CREATOR_ID
        assert idea.funding_goal == 50000
        assert idea.stage == IdeaStage.PROTOTYPE

    def test_snake_case_columns(self):
        idea = Idea.model_validate({"id": IDEA_ID, "creator_id": CREATOR_ID, "funding_goal": 10})

        assert idea.creator_id == CREATOR_ID
        assert idea.funding_goal == 10

    def test_text_lists_split(self):
        idea = Idea.model_validate({
            "id": IDEA_ID,
            "creatorId": CREATOR_ID,
            "key_features": "Fast,  Cheap ,",
            "tags": None,
        })

        assert idea.key_features == ["Fast", "Cheap"]
        assert idea.tags == []

    def test_null_title_becomes_empty(self):
        idea = Idea.model_validate({"id": IDEA_ID, "creatorId": CREATOR_ID, "title": None})

        assert idea.title == ""

    def test_missing_creator_rejected(self):
        with pytest.raises(ValidationError):
            Idea.model_validate({"id": IDEA_ID, "title": "Orphan"})


class TestIdeaValidationResult:
    """Test the AI report schema."""

    def test_valid_report(self, sample_validation_dict):
        result = IdeaValidationResult.model_validate(sample_validation_dict)

        assert result.swot_analysis.strengths == ["Low running costs"]
        assert result.user_personas[0].name == "Maya"

    @pytest.mark.parametrize("score", [-1, 100.5])
    def test_score_bounds(self, sample_validation_dict, score):
        sample_validation_dict["investor_readiness_score"] = score

        with pytest.raises(ValidationError):
            IdeaValidationResult.model_validate(sample_validation_dict)

    def test_persona_age_coerced_to_text(self):
        persona = UserPersona(
            name="Sam", age=42, occupation="Teacher", goals=[], pain_points=[], motivations=[]
        )

        assert persona.age == "42"
