"""Web page loader — download a URL and reduce it to clean plain text."""

from __future__ import annotations

import asyncio
import logging
import re
import unicodedata
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from langchain_core.documents import Document

from pg_rag.errors import FetchError

logger = logging.getLogger(__name__)

BOILERPLATE_TAGS = ["script", "style", "nav", "footer", "header", "aside", "noscript", "iframe"]
HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


def normalise_text(text: str) -> str:
    """Unicode NFC, collapse whitespace, strip control chars."""
    text = unicodedata.normalize("NFC", text)
    text = re.sub(r"[^\S\n]+", " ", text)  # collapse spaces (keep \n)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)  # max two consecutive newlines
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f]", "", text)
    return text.strip()


def _single_line(text: str) -> str:
    return normalise_text(" ".join(text.split()))


def _extract_title(soup: BeautifulSoup) -> str:
    """Best-effort title from HTML, flattened to one clean line."""
    if soup.title and soup.title.string:
        return _single_line(soup.title.string)
    h1 = soup.find("h1")
    if h1:
        return _single_line(h1.get_text(" ", strip=True))
    return ""


def html_to_text(markup: str | bytes, from_encoding: str | None = None) -> tuple[str, str]:
    """Return ``(title, text)`` for an HTML document with boiler-plate removed.

    Pass raw bytes so BeautifulSoup can honour the page's own
    ``<meta charset>``; *from_encoding* overrides that with the charset
    sent in the HTTP header.
    """
    soup = BeautifulSoup(markup, "html.parser", from_encoding=from_encoding)
    title = _extract_title(soup)
    for tag in soup(BOILERPLATE_TAGS):
        tag.decompose()
    return title, normalise_text(soup.get_text(separator="\n", strip=True))


class WebPageLoader:
    """Fetch a single URL and turn it into a LangChain ``Document``.

    Parameters
    ----------
    timeout:
        Per-request timeout in seconds.
    user_agent:
        Value of the ``User-Agent`` header.
    """

    def __init__(
        self,
        *,
        timeout: float = 30,
        user_agent: str = "pg-rag/0.1",
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent

    def load(self, url: str) -> list[Document]:
        """Download *url* and return its text as one ``Document``.

        Raises
        ------
        FetchError
            On an unsupported scheme, a network error, an HTTP error status,
            or a non-text content type.
        """
        scheme = urlparse(url).scheme
        if scheme not in ("http", "https"):
            raise FetchError(f"Unsupported URL scheme {scheme!r} in {url!r}")

        try:
            resp = requests.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}") from exc

        raw_ctype = resp.headers.get("content-type", "")
        ctype = raw_ctype.split(";")[0].strip().lower()
        header_charset = "charset=" in raw_ctype.lower()
        if ctype in HTML_CONTENT_TYPES or not ctype:
            title, text = html_to_text(resp.content, resp.encoding if header_charset else None)
            content_type = "text/html"
        elif ctype.startswith("text/"):
            if not header_charset:
                # requests assumes ISO-8859-1 for text/* without a charset.
                resp.encoding = resp.apparent_encoding
            title, text = "", normalise_text(resp.text)
            content_type = ctype
        else:
            raise FetchError(f"Unsupported content type {ctype!r} for {url}")

        logger.info("Fetched %s (%d chars, %s)", url, len(text), content_type)
        return [
            Document(
                page_content=text,
                metadata={"source": url, "title": title, "content_type": content_type},
            )
        ]

    async def aload(self, url: str) -> list[Document]:
        """Async variant of :meth:`load`; the blocking request runs in a worker thread."""
        return await asyncio.to_thread(self.load, url)
