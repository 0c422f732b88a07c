"""Download, clean and cache source texts.

Each source is stored once as plain text under ``{cache_dir}/{source_id}.txt``.
Fetching a source that is already cached never touches the network.
"""

import io
import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path

import requests

from philorag.exceptions import FetchError
from philorag.models import TextSource

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; PhilosopherRAG/1.0; Educational)"
DEFAULT_DOWNLOAD_DELAY = 0.5

GUTENBERG_START_MARKERS = (
    "*** START OF THE PROJECT GUTENBERG EBOOK",
    "*** START OF THIS PROJECT GUTENBERG EBOOK",
    "*END*THE SMALL PRINT",
    "***START OF THE PROJECT GUTENBERG EBOOK",
)
GUTENBERG_END_MARKERS = (
    "*** END OF THE PROJECT GUTENBERG EBOOK",
    "*** END OF THIS PROJECT GUTENBERG EBOOK",
    "***END OF THE PROJECT GUTENBERG EBOOK",
    "End of the Project Gutenberg EBook",
    "End of Project Gutenberg",
)

# Tags to remove entirely (including their content) from HTML sources
REMOVE_TAGS = ["script", "style", "nav", "footer", "header", "aside", "noscript"]


def normalize_text(text: str) -> str:
    """Normalize line endings and cap runs of blank lines."""
    text = text.replace("\r\n", "\n")
    return re.sub(r"\n{4,}", "\n\n\n", text).strip()


def clean_gutenberg_text(text: str) -> str:
    """Strip the Project Gutenberg licence header and footer."""
    text = text.replace("\r\n", "\n")

    for marker in GUTENBERG_START_MARKERS:
        start = text.find(marker)
        if start != -1:
            line_end = text.find("\n", start)
            if line_end != -1:
                text = text[line_end + 1 :]
            break

    for marker in GUTENBERG_END_MARKERS:
        end = text.find(marker)
        if end != -1:
            text = text[:end]
            break

    return normalize_text(text)


def clean_pdf_text(text: str) -> str:
    """Remove page furniture from extracted PDF text and rebuild paragraphs.

    Drops page numbers, rule lines and bracketed running headers, rejoins
    words hyphenated across lines, and collapses wrapped lines so that
    paragraphs are separated by exactly one blank line.
    """
    text = text.replace("\r\n", "\n")

    text = re.sub(r"\bPage\s+\d+\s+of\s+\d+\b", "", text, flags=re.IGNORECASE)
    text = re.sub(r"^\s*\d+\s*$", "", text, flags=re.MULTILINE)
    text = re.sub(r"^[-_=]+$", "", text, flags=re.MULTILINE)
    text = re.sub(r"^\s*\[.*?\]\s*$", "", text, flags=re.MULTILINE)

    text = re.sub(r"(\w+)-[ \t]*\n(?!\n)(\w+)", r"\1\2", text)
    text = re.sub(r"[ \t]+", " ", text)

    paragraphs = []
    for block in re.split(r"\n\s*\n", text):
        lines = [line.strip() for line in block.split("\n") if line.strip()]
        if lines:
            paragraphs.append(" ".join(lines))

    text = "\n\n".join(paragraphs)
    text = re.sub(r" +([.,;:!?])", r"\1", text)
    return text.strip()


def extract_html_text(html: str) -> str:
    """Convert an HTML page to markdown-flavoured plain text.

    Raises:
        ImportError: If beautifulsoup4 or markdownify is not installed
    """
    try:
        from bs4 import BeautifulSoup
    except ImportError:
        raise ImportError(
            "beautifulsoup4 is required for HTML sources. "
            "Install with: pip install philorag[html]"
        ) from None

    try:
        from markdownify import markdownify
    except ImportError:
        raise ImportError(
            "markdownify is required for HTML sources. Install with: pip install philorag[html]"
        ) from None

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(REMOVE_TAGS):
        tag.decompose()

    return normalize_text(markdownify(str(soup), heading_style="ATX"))


def extract_pdf_text(data: bytes) -> str:
    """Extract and clean the text of a PDF document.

    Raises:
        ImportError: If pypdf is not installed
    """
    try:
        from pypdf import PdfReader
    except ImportError:
        raise ImportError(
            "pypdf is required for PDF sources. Install with: pip install philorag[pdf]"
        ) from None

    reader = PdfReader(io.BytesIO(data))
    pages = [page.extract_text() or "" for page in reader.pages]
    return clean_pdf_text("\n\n".join(pages))


@dataclass
class FetchSummary:
    """Outcome of fetching several sources."""

    downloaded: int = 0
    failed: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)


class TextFetcher:
    """Fetch source texts over HTTP and cache them on disk.

    Example:
        fetcher = TextFetcher("./philorag_data/texts")
        path = fetcher.fetch(source)
        text = fetcher.read(source.id)
    """

    def __init__(
        self,
        cache_dir: str | Path,
        session: requests.Session | None = None,
        timeout: float | None = None,
        user_agent: str = USER_AGENT,
    ) -> None:
        """Initialize the fetcher.

        Args:
            cache_dir: Directory holding one text file per source
            session: Optional requests session (a new one is created if None)
            timeout: Optional HTTP timeout in seconds
            user_agent: User-Agent header sent with every request
        """
        self.cache_dir = Path(cache_dir)
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    def path_for(self, source_id: str) -> Path:
        return self.cache_dir / f"{source_id}.txt"

    def is_cached(self, source_id: str) -> bool:
        return self.path_for(source_id).exists()

    def read(self, source_id: str) -> str | None:
        """Return cached text for a source, or None if not fetched yet."""
        path = self.path_for(source_id)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _download(self, source: TextSource) -> requests.Response:
        try:
            response = self._session.get(source.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"Failed to download {source.title}: {e}", source_id=source.id) from e
        return response

    def _extract(self, source: TextSource, response: requests.Response) -> str:
        try:
            if source.format == "pdf":
                text = extract_pdf_text(response.content)
            elif source.format == "html":
                text = extract_html_text(response.text)
            else:
                text = response.text
        except Exception as e:
            raise FetchError(
                f"Failed to extract text from {source.title}: {e}", source_id=source.id
            ) from e

        if "gutenberg.org" in source.url:
            return clean_gutenberg_text(text)
        return normalize_text(text)

    def fetch(self, source: TextSource) -> Path:
        """Make sure the source text is cached and return its path.

        Raises:
            FetchError: If the download fails or yields no text
        """
        path = self.path_for(source.id)
        if path.exists():
            logger.debug("Already downloaded: %s", source.title)
            return path

        logger.info("Downloading %s from %s", source.title, source.url)
        text = self._extract(source, self._download(source))
        if not text:
            raise FetchError(f"No text extracted from {source.title}", source_id=source.id)

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        partial = path.with_suffix(".txt.part")
        partial.write_text(text, encoding="utf-8")
        partial.replace(path)

        logger.info("Downloaded %s (%d chars)", source.title, len(text))
        return path

    def fetch_text(self, source: TextSource) -> str:
        """Fetch if needed, then return the cached text."""
        return self.fetch(source).read_text(encoding="utf-8")

    def fetch_all(
        self, sources: list[TextSource], delay: float = DEFAULT_DOWNLOAD_DELAY
    ) -> FetchSummary:
        """Fetch several sources in sequence, pausing between downloads."""
        summary = FetchSummary()
        for i, source in enumerate(sources):
            cached = self.is_cached(source.id)
            try:
                self.fetch(source)
                summary.downloaded += 1
            except FetchError as e:
                logger.error("%s", e)
                summary.failed += 1
                summary.errors.append((source.id, str(e)))
            if not cached and delay > 0 and i < len(sources) - 1:
                time.sleep(delay)
        return summary
