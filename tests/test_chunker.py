"""Tests for paragraph-aware segmentation."""

import pytest

from philorag.chunker import (
    Chunker,
    chunk_stats,
    estimate_tokens,
    merge_paragraphs,
    segment,
    split_paragraphs,
)


def paragraphs_text(lengths: list[int]) -> str:
    """Text made of distinct paragraphs with the given lengths."""
    paragraphs = []
    for i, length in enumerate(lengths):
        letter = chr(ord("a") + i)
        paragraphs.append(letter * length)
    return "\n\n".join(paragraphs)


class TestSplitParagraphs:
    def test_splits_on_blank_lines(self):
        assert split_paragraphs("one\n\ntwo\n\n\n\nthree") == ["one", "two", "three"]

    def test_single_newlines_stay_inside_paragraph(self):
        assert split_paragraphs("line one\nline two") == ["line one\nline two"]

    def test_drops_whitespace_only_paragraphs(self):
        assert split_paragraphs("one\n\n   \n\ntwo") == ["one", "two"]

    def test_empty_text(self):
        assert split_paragraphs("") == []


class TestMergeParagraphs:
    def test_small_paragraph_absorbs_followers(self):
        merged = merge_paragraphs(["a" * 100, "b" * 1400, "c" * 300], min_size=200)
        assert [len(m) for m in merged] == [1502, 300]

    def test_large_paragraphs_untouched(self):
        merged = merge_paragraphs(["a" * 300, "b" * 300], min_size=200)
        assert merged == ["a" * 300, "b" * 300]

    def test_trailing_small_paragraph_kept(self):
        merged = merge_paragraphs(["a" * 300, "b" * 50], min_size=200)
        assert merged == ["a" * 300, "b" * 50]


class TestSegment:
    def test_merge_example(self):
        """The 100-char opening paragraph is merged before packing begins."""
        text = paragraphs_text([100, 1400, 100, 1400, 100])

        passages = segment(text, target_size=1500, overlap=200, min_size=200)

        assert [len(p) for p in passages] == [1502, 1502, 100]
        assert passages[0].startswith("a" * 100 + "\n\n" + "b")
        assert passages[1].startswith("c" * 100 + "\n\n" + "d")

    def test_deterministic(self):
        text = paragraphs_text([250, 400, 320, 600, 210, 380, 450])
        assert segment(text) == segment(text)

    def test_passages_respect_size_unless_single_unit(self):
        text = paragraphs_text([250, 400, 320, 600, 210, 380, 450, 2000, 300])
        chunker = Chunker(chunk_size=800, chunk_overlap=200, min_chunk_size=200)

        for passage in chunker.segment(text):
            units = merge_paragraphs(split_paragraphs(passage), 200)
            assert len(passage) <= 800 or len(units) == 1

    def test_oversized_paragraph_not_truncated(self):
        text = paragraphs_text([300, 5000, 300])
        passages = segment(text, target_size=1500, overlap=200, min_size=200)

        assert "b" * 5000 in passages

    def test_overlap_is_whole_paragraphs(self):
        text = paragraphs_text([300, 300, 150, 300, 300])
        chunker = Chunker(chunk_size=800, chunk_overlap=200, min_chunk_size=100)

        passages = chunker.segment(text)

        assert len(passages) == 2
        previous_units = split_paragraphs(passages[0])
        next_units = split_paragraphs(passages[1])
        # The 150-char paragraph ending the first passage opens the second one
        assert previous_units[-1] == "c" * 150
        assert next_units[0] == "c" * 150
        for unit in next_units:
            assert len(unit) in (150, 300)

    def test_overlap_dropped_when_it_would_overflow(self):
        text = paragraphs_text([150, 600, 150, 700])
        chunker = Chunker(chunk_size=800, chunk_overlap=200, min_chunk_size=100)

        passages = chunker.segment(text)

        assert passages[-1] == "d" * 700

    def test_zero_overlap(self):
        text = paragraphs_text([300, 300, 300, 300])
        passages = segment(text, target_size=700, overlap=0, min_size=100)

        assert passages == ["a" * 300 + "\n\n" + "b" * 300, "c" * 300 + "\n\n" + "d" * 300]

    def test_empty_text(self):
        assert segment("") == []


class TestChunkerValidation:
    def test_overlap_larger_than_half(self):
        with pytest.raises(ValueError, match="chunk_overlap"):
            Chunker(chunk_size=1000, chunk_overlap=501)

    def test_negative_overlap(self):
        with pytest.raises(ValueError):
            Chunker(chunk_size=1000, chunk_overlap=-1)

    def test_min_not_below_size(self):
        with pytest.raises(ValueError, match="min_chunk_size"):
            Chunker(chunk_size=500, chunk_overlap=100, min_chunk_size=500)

    def test_non_positive_size(self):
        with pytest.raises(ValueError):
            Chunker(chunk_size=0, chunk_overlap=0, min_chunk_size=0)


class TestChunk:
    def test_dense_indices_and_metadata(self, sample_source):
        text = paragraphs_text([250, 400, 320, 600, 210, 380, 450])
        chunks = Chunker(chunk_size=800, chunk_overlap=200).chunk(text, sample_source)

        assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
        for c in chunks:
            assert c.id == f"{sample_source.id}-chunk-{c.chunk_index}"
            assert c.metadata.total_chunks == len(chunks)
            assert c.metadata.philosopher == "aristotle"
            assert c.metadata.title == "Nicomachean Ethics"
            assert c.metadata.start_char < c.metadata.end_char
            assert c.questions == []

    def test_offsets_point_into_source(self, sample_source):
        text = paragraphs_text([250, 400, 320, 600, 210, 380, 450])
        chunks = Chunker(chunk_size=800, chunk_overlap=200).chunk(text, sample_source)

        for c in chunks:
            start = c.metadata.start_char
            assert text[start : start + 100] == c.content[:100]

    def test_offsets_never_move_backwards(self, sample_source):
        text = paragraphs_text([250, 400, 320, 600, 210, 380, 450])
        chunks = Chunker(chunk_size=800, chunk_overlap=200).chunk(text, sample_source)

        starts = [c.metadata.start_char for c in chunks]
        assert starts == sorted(starts)

    def test_empty_text_yields_no_chunks(self, sample_source):
        assert Chunker().chunk("", sample_source) == []


class TestStats:
    def test_estimate_tokens(self):
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2
        assert estimate_tokens("") == 0

    def test_chunk_stats(self):
        stats = chunk_stats(["a" * 100, "b" * 300])

        assert stats.count == 2
        assert stats.avg_length == 200
        assert stats.min_length == 100
        assert stats.max_length == 300
        assert stats.total_chars == 400
        assert stats.estimated_tokens == 100

    def test_chunk_stats_empty(self):
        assert chunk_stats([]).count == 0
