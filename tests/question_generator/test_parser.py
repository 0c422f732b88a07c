"""Tests for tolerant question parsing."""

from philorag.question_generator import ParsedQuestions, ParseFailure, parse_questions


class TestParseQuestions:
    def test_numbered_lines(self):
        text = (
            "1. What is virtue according to Aristotle?\n"
            "2) How is habit formed?\n"
            "3 - Why does friendship matter?"
        )

        result = parse_questions(text, max_questions=5)

        assert isinstance(result, ParsedQuestions)
        assert result.strategy == "lines"
        assert result.questions == [
            "What is virtue according to Aristotle?",
            "How is habit formed?",
            "Why does friendship matter?",
        ]

    def test_truncated_to_max(self):
        text = "\n".join(f"{i}. What is question number {i}?" for i in range(1, 8))

        result = parse_questions(text, max_questions=3)

        assert len(result.questions) == 3

    def test_bare_question_lines(self):
        text = "Here are some questions\nWhat is justice in the city?\nnot a question"

        result = parse_questions(text, max_questions=5)

        assert result.questions == ["What is justice in the city?"]

    def test_echoed_prompt_removed(self):
        result = parse_questions("Questions:\n1. What is the good life?", max_questions=5)

        assert result.questions == ["What is the good life?"]

    def test_question_mark_fallback(self):
        text = "What is virtue and why does it matter? How is it acquired by habit? ok"

        result = parse_questions(text, max_questions=5)

        assert result.strategy == "question_marks"
        assert result.questions == [
            "What is virtue and why does it matter?",
            "How is it acquired by habit?",
        ]

    def test_text_without_question_marks_becomes_question(self):
        result = parse_questions("The text discusses the nature of virtue", max_questions=5)

        assert isinstance(result, ParsedQuestions)
        assert result.strategy == "question_marks"
        assert result.questions == ["The text discusses the nature of virtue?"]

    def test_trailing_piece_kept_when_long_enough(self):
        text = "What is virtue? It concerns the mean between extremes"

        result = parse_questions(text, max_questions=5)

        assert result.questions == [
            "What is virtue?",
            "It concerns the mean between extremes?",
        ]

    def test_short_debris_dropped(self):
        result = parse_questions("1. Why?\n2. How?", max_questions=5)

        assert isinstance(result, ParseFailure)

    def test_empty_response(self):
        result = parse_questions("   ", max_questions=5)

        assert isinstance(result, ParseFailure)
        assert result.reason == "empty response"
        assert result.raw == "   "

    def test_no_questions(self):
        result = parse_questions("No. Sorry.", max_questions=5)

        assert isinstance(result, ParseFailure)
