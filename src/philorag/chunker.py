"""Paragraph-aware segmentation of source texts into overlapping passages."""

import math
import re
from dataclasses import dataclass

from philorag.models import ChunkMetadata, TextChunk, TextSource, chunk_id

DEFAULT_CHUNK_SIZE = 1500
DEFAULT_CHUNK_OVERLAP = 200
DEFAULT_MIN_CHUNK_SIZE = 200

SEPARATOR = "\n\n"
PARAGRAPH_BREAK = re.compile(r"\n\n+")

# Length of the passage prefix searched for when locating a passage in the source
POSITION_PROBE_LENGTH = 100


@dataclass
class ChunkStats:
    """Size statistics for a segmented text."""

    count: int
    avg_length: int
    min_length: int
    max_length: int
    total_chars: int
    estimated_tokens: int


def estimate_tokens(text: str) -> int:
    """Rough token count (about 4 characters per token)."""
    return math.ceil(len(text) / 4)


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines, dropping empty paragraphs."""
    return [p.strip() for p in PARAGRAPH_BREAK.split(text) if p.strip()]


def merge_paragraphs(paragraphs: list[str], min_size: int) -> list[str]:
    """Join each undersized paragraph with the ones that follow it.

    A group keeps absorbing paragraphs until it reaches min_size. Only the
    last group may end up shorter than min_size.
    """
    merged: list[str] = []
    current = ""

    for para in paragraphs:
        if not current:
            current = para
        elif len(current) >= min_size:
            merged.append(current)
            current = para
        else:
            current = current + SEPARATOR + para

    if current:
        merged.append(current)

    return merged


def _joined_length(parts: list[str]) -> int:
    if not parts:
        return 0
    return sum(len(p) for p in parts) + len(SEPARATOR) * (len(parts) - 1)


def _overlap_tail(parts: list[str], overlap: int) -> list[str]:
    """Whole trailing parts whose joined length fits within overlap."""
    tail: list[str] = []
    for part in reversed(parts):
        if _joined_length([part, *tail]) > overlap:
            break
        tail.insert(0, part)
    return tail


class Chunker:
    """Split source texts into overlapping, paragraph-aligned passages.

    Paragraphs (blank-line separated) are never cut. Undersized paragraphs
    are merged forward, merged units are packed greedily up to chunk_size,
    and each new passage starts with whole units copied from the tail of the
    previous one. A single unit larger than chunk_size becomes its own
    passage rather than being truncated.

    Example:
        chunker = Chunker(chunk_size=1500, chunk_overlap=200)
        chunks = chunker.chunk(text, source)
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        min_chunk_size: int = DEFAULT_MIN_CHUNK_SIZE,
    ) -> None:
        """Initialize the chunker.

        Args:
            chunk_size: Target maximum characters per passage
            chunk_overlap: Maximum characters repeated from the previous passage
            min_chunk_size: Paragraphs shorter than this are merged forward

        Raises:
            ValueError: If the sizes are inconsistent
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0 or chunk_overlap > chunk_size // 2:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be between 0 and half of "
                f"chunk_size ({chunk_size})"
            )
        if min_chunk_size < 0 or min_chunk_size >= chunk_size:
            raise ValueError(
                f"min_chunk_size ({min_chunk_size}) must be less than chunk_size ({chunk_size})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.min_chunk_size = min_chunk_size

    def segment(self, text: str) -> list[str]:
        """Split text into passage strings. Deterministic for a given input."""
        units = merge_paragraphs(split_paragraphs(text), self.min_chunk_size)

        passages: list[str] = []
        current: list[str] = []

        for unit in units:
            if current and _joined_length([*current, unit]) > self.chunk_size:
                passages.append(SEPARATOR.join(current))
                seed = _overlap_tail(current, self.chunk_overlap)
                # Drop the oldest overlap units until the new passage fits
                while seed and _joined_length([*seed, unit]) > self.chunk_size:
                    seed.pop(0)
                current = [*seed, unit]
            else:
                current.append(unit)

        if current:
            passages.append(SEPARATOR.join(current))

        return passages

    def chunk(self, text: str, source: TextSource) -> list[TextChunk]:
        """Segment text and attach metadata for the given source.

        Character offsets are best effort: each passage is located by
        searching for its first characters from a cursor that only moves
        forward. When the probe is not found the cursor position is used.
        """
        passages = self.segment(text)
        total = len(passages)

        chunks = []
        cursor = 0
        for index, content in enumerate(passages):
            start = text.find(content[:POSITION_PROBE_LENGTH], cursor)
            if start == -1:
                start = cursor
            end = start + len(content)
            cursor = start + len(content) // 2

            chunks.append(
                TextChunk(
                    id=chunk_id(source.id, index),
                    content=content,
                    metadata=ChunkMetadata(
                        philosopher=source.philosopher,
                        source_id=source.id,
                        title=source.title,
                        author=source.author,
                        chunk_index=index,
                        total_chunks=total,
                        start_char=start,
                        end_char=end,
                    ),
                )
            )

        return chunks


def segment(
    text: str,
    target_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
    min_size: int = DEFAULT_MIN_CHUNK_SIZE,
) -> list[str]:
    """Split text into overlapping passages. See Chunker."""
    return Chunker(target_size, overlap, min_size).segment(text)


def chunk_stats(passages: list[str]) -> ChunkStats:
    """Summarize passage sizes."""
    if not passages:
        return ChunkStats(0, 0, 0, 0, 0, 0)

    lengths = [len(p) for p in passages]
    total = sum(lengths)
    return ChunkStats(
        count=len(passages),
        avg_length=round(total / len(passages)),
        min_length=min(lengths),
        max_length=max(lengths),
        total_chars=total,
        estimated_tokens=sum(estimate_tokens(p) for p in passages),
    )
