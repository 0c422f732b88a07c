"""Tests for behavioral settings."""

import pytest
from pydantic import ValidationError

from philorag.settings import Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.chunk_size == 1500
        assert settings.chunk_overlap == 200
        assert settings.min_chunk_size == 200
        assert settings.questions_per_chunk == 5
        assert settings.question_temperature == 0.7
        assert settings.question_top_p == 0.9
        assert settings.upsert_batch_size == 50
        assert settings.default_limit == 10
        assert settings.min_relevance_score == 0.3
        assert settings.adjacent_chunk_window == 1
        assert settings.context_expansion_threshold == 0.6
        assert settings.num_retries == 3

    def test_override(self):
        settings = Settings(questions_per_chunk=3, min_relevance_score=0.5)

        assert settings.questions_per_chunk == 3
        assert settings.min_relevance_score == 0.5

    def test_overlap_at_most_half(self):
        with pytest.raises(ValidationError, match="chunk_overlap"):
            Settings(chunk_size=1000, chunk_overlap=600)

    def test_min_chunk_below_size(self):
        with pytest.raises(ValidationError, match="min_chunk_size"):
            Settings(chunk_size=500, chunk_overlap=100, min_chunk_size=500)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("questions_per_chunk", 0),
            ("min_relevance_score", 1.5),
            ("default_limit", 0),
            ("upsert_batch_size", 0),
            ("context_expansion_threshold", -0.1),
        ],
    )
    def test_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})
