"""Tests for downloading and caching source texts."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from philorag.exceptions import FetchError
from philorag.fetcher import (
    USER_AGENT,
    TextFetcher,
    clean_gutenberg_text,
    clean_pdf_text,
    extract_html_text,
    normalize_text,
)
from philorag.models import TextSource

GUTENBERG_TEXT = (
    "The Project Gutenberg eBook of Ethics\r\n"
    "*** START OF THE PROJECT GUTENBERG EBOOK ETHICS ***\r\n"
    "Every art and every inquiry aims at some good.\r\n\r\n"
    "The good is that at which all things aim.\r\n"
    "*** END OF THE PROJECT GUTENBERG EBOOK ETHICS ***\r\n"
    "Licence text"
)


def response(text: str = "", content: bytes = b"") -> MagicMock:
    resp = MagicMock()
    resp.text = text
    resp.content = content
    return resp


@pytest.fixture
def session():
    session = MagicMock()
    session.get.return_value = response(GUTENBERG_TEXT)
    return session


@pytest.fixture
def web_fetcher(temp_dir, session):
    return TextFetcher(f"{temp_dir}/texts", session=session, timeout=5.0)


class TestCleaning:
    def test_gutenberg_markers_stripped(self):
        assert clean_gutenberg_text(GUTENBERG_TEXT) == (
            "Every art and every inquiry aims at some good.\n\n"
            "The good is that at which all things aim."
        )

    def test_gutenberg_without_markers(self):
        assert clean_gutenberg_text("  Plain text.  ") == "Plain text."

    def test_normalize_caps_blank_lines(self):
        assert normalize_text("a\r\nb\n\n\n\n\n\nc") == "a\nb\n\n\nc"

    def test_pdf_page_furniture(self):
        text = (
            "Page 1 of 3\n"
            "The good is that at which\n"
            "all things aim.\n\n"
            "12\n\n"
            "Vir-\n"
            "tue is a mean ."
        )

        assert clean_pdf_text(text) == (
            "The good is that at which all things aim.\n\nVirtue is a mean."
        )

    def test_html_extraction(self):
        pytest.importorskip("bs4")
        pytest.importorskip("markdownify")
        html = (
            "<html><head><style>p {}</style></head><body>"
            "<nav>Home | About</nav><h1>Meditations</h1>"
            "<p>Begin the morning by saying to thyself.</p>"
            "<script>track()</script></body></html>"
        )

        text = extract_html_text(html)

        assert "# Meditations" in text
        assert "Begin the morning by saying to thyself." in text
        assert "Home" not in text
        assert "track" not in text


class TestTextFetcher:
    def test_sets_user_agent(self, web_fetcher, session):
        session.headers.update.assert_called_once_with({"User-Agent": USER_AGENT})

    def test_fetch_downloads_and_caches(self, web_fetcher, session, sample_source):
        path = web_fetcher.fetch(sample_source)

        assert path == web_fetcher.path_for(sample_source.id)
        assert path.name == "aristotle-nicomachean-ethics.txt"
        assert path.read_text(encoding="utf-8").startswith("Every art and every inquiry")
        assert not path.with_suffix(".txt.part").exists()
        session.get.assert_called_once_with(sample_source.url, timeout=5.0)

    def test_cached_source_not_downloaded_again(self, web_fetcher, session, sample_source):
        web_fetcher.fetch(sample_source)
        web_fetcher.fetch(sample_source)

        assert session.get.call_count == 1
        assert web_fetcher.is_cached(sample_source.id)

    def test_fetch_text(self, web_fetcher, sample_source):
        text = web_fetcher.fetch_text(sample_source)

        assert text.endswith("The good is that at which all things aim.")

    def test_read_missing(self, web_fetcher):
        assert web_fetcher.read("unknown") is None

    def test_network_error(self, web_fetcher, session, sample_source):
        session.get.side_effect = requests.ConnectionError("offline")

        with pytest.raises(FetchError) as exc_info:
            web_fetcher.fetch(sample_source)

        assert exc_info.value.source_id == sample_source.id
        assert not web_fetcher.is_cached(sample_source.id)

    def test_http_error(self, web_fetcher, session, sample_source):
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")

        with pytest.raises(FetchError, match="404"):
            web_fetcher.fetch(sample_source)

    def test_empty_document(self, web_fetcher, session, sample_source):
        session.get.return_value = response("   ")

        with pytest.raises(FetchError, match="No text extracted"):
            web_fetcher.fetch(sample_source)

    def test_non_gutenberg_text_is_normalized(self, web_fetcher, session):
        session.get.return_value = response("Line one\r\nLine two\r\n")
        source = TextSource(
            id="seneca-letters",
            title="Letters",
            author="Seneca",
            philosopher="seneca",
            url="https://example.org/letters.txt",
        )

        assert web_fetcher.fetch_text(source) == "Line one\nLine two"

    def test_extraction_failure(self, web_fetcher, session):
        session.get.return_value = response(content=b"not a pdf")
        source = TextSource(
            id="aquinas-notes",
            title="Notes",
            author="Thomas Aquinas",
            philosopher="thomasAquinas",
            url="https://example.org/notes.pdf",
            format="pdf",
        )

        with patch("philorag.fetcher.extract_pdf_text", side_effect=ValueError("bad xref")):
            with pytest.raises(FetchError, match="Failed to extract"):
                web_fetcher.fetch(source)


class TestFetchAll:
    def test_continues_after_failure(self, web_fetcher, session, sample_source, other_source):
        session.get.side_effect = [requests.ConnectionError("offline"), response(GUTENBERG_TEXT)]

        summary = web_fetcher.fetch_all([sample_source, other_source], delay=0)

        assert summary.downloaded == 1
        assert summary.failed == 1
        assert summary.errors[0][0] == sample_source.id

    def test_delay_between_downloads(self, web_fetcher, sample_source, other_source):
        with patch("philorag.fetcher.time.sleep") as sleep:
            web_fetcher.fetch_all([sample_source, other_source], delay=0.5)

        sleep.assert_called_once_with(0.5)

    def test_no_delay_for_cached_sources(
        self, web_fetcher, seed_cache, sample_source, other_source
    ):
        seed_cache(sample_source, "cached")
        with patch("philorag.fetcher.time.sleep") as sleep:
            web_fetcher.fetch_all([sample_source, other_source], delay=0.5)

        sleep.assert_not_called()
