"""Tolerant parsing of model output into hypothetical questions.

Models rarely follow formatting instructions exactly, so parsing never
raises. It returns either ParsedQuestions, tagged with the strategy that
produced them, or a ParseFailure carrying the raw text.
"""

import re
from dataclasses import dataclass
from typing import Literal

# Fragments of the prompt that models tend to echo back
ECHOED_PROMPT = re.compile(r"Text:|Questions?:|Generate \d+ questions", re.IGNORECASE)
NUMBERED_LINE = re.compile(r"^\d+[.):\-\s]+(.+)")

# Candidates this short are almost always list debris, not questions
MIN_QUESTION_LENGTH = 11


@dataclass(frozen=True)
class ParsedQuestions:
    """Questions extracted from a model response."""

    questions: list[str]
    strategy: Literal["lines", "question_marks"]


@dataclass(frozen=True)
class ParseFailure:
    """No usable question could be extracted."""

    raw: str
    reason: str


ParseResult = ParsedQuestions | ParseFailure


def _from_lines(text: str) -> list[str]:
    questions = []
    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue
        match = NUMBERED_LINE.match(line)
        if match:
            candidate = match.group(1).strip()
            if len(candidate) >= MIN_QUESTION_LENGTH:
                questions.append(candidate)
        elif line.endswith("?") and len(line) >= MIN_QUESTION_LENGTH:
            questions.append(line)
    return questions


def _from_question_marks(text: str) -> list[str]:
    pieces = [piece.strip() for piece in text.split("?")]
    return [f"{piece}?" for piece in pieces if len(piece) >= MIN_QUESTION_LENGTH]


def parse_questions(text: str, max_questions: int) -> ParseResult:
    """Extract at most max_questions questions from a model response.

    Numbered lines ("1. ...", "2) ...") and bare lines ending in "?" are
    accepted first. If none survive, the text is split on question marks.
    """
    cleaned = ECHOED_PROMPT.sub("", text).strip()
    if not cleaned:
        return ParseFailure(raw=text, reason="empty response")

    questions = _from_lines(cleaned)
    if questions:
        return ParsedQuestions(questions=questions[:max_questions], strategy="lines")

    questions = _from_question_marks(cleaned)
    if questions:
        return ParsedQuestions(questions=questions[:max_questions], strategy="question_marks")

    return ParseFailure(raw=text, reason="no question-like text found")
