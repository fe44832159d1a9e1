"""
Markpad Backend — Page Metadata Fetcher
=========================================

What:  Best-effort title lookup for a bookmark URL.
Who:   Called by BookmarkService.create() when the client sent no title.
When:  Once per bookmark creation, before the record is persisted.

Flow:
    GET url, streamed (redirects followed, browser-like User-Agent)
    → reject non-2xx and non-HTML responses
    → read at most settings.metadata_max_bytes of the body
    → parse it in a worker thread and pick the first non-empty candidate:
        1. <meta property="og:title" content="...">
        2. <meta name="twitter:title" content="...">
        3. <title>...</title>
        4. first <h1>...</h1> (nested text included)
    → collapse whitespace runs to one space, trim

Failure policy:
    Timeouts, network errors, bad statuses, non-HTML bodies and parse
    problems all end in `None`, logged at WARNING. Nothing is raised to the
    caller, which falls back to using the URL itself as the title.

    The whole invocation, parse included, is bounded by
    settings.metadata_fetch_timeout (5 seconds by default). Parsing runs off
    the event loop so a slow page never stalls other requests. There are no
    retries.
"""

import asyncio
import logging
import time
import uuid
from html.parser import HTMLParser
from typing import List, Optional, Tuple

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


def clean_title(raw: Optional[str]) -> str:
    """Collapse internal whitespace runs and trim."""
    if not raw:
        return ""
    return " ".join(raw.split())


class _TitleCandidateParser(HTMLParser):
    """
    Collects the four title candidates in a single pass over the document.

    Only the first occurrence of each candidate is kept.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.og_title: Optional[str] = None
        self.twitter_title: Optional[str] = None
        self._title_parts: List[str] = []
        self._h1_parts: List[str] = []
        self._in_title = False
        self._title_seen = False
        self._h1_depth = 0
        self._h1_seen = False

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag == "meta":
            attributes = dict(attrs)
            content = attributes.get("content") or ""
            if attributes.get("property") == "og:title" and self.og_title is None:
                self.og_title = content
            elif attributes.get("name") == "twitter:title" and self.twitter_title is None:
                self.twitter_title = content
        elif tag == "title" and not self._title_seen:
            self._in_title = True
        elif tag == "h1" and not self._h1_seen:
            self._h1_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag == "title" and self._in_title:
            self._in_title = False
            self._title_seen = True
        elif tag == "h1" and self._h1_depth:
            self._h1_depth -= 1
            if not self._h1_depth:
                self._h1_seen = True

    def handle_data(self, data: str) -> None:
        if self._in_title:
            self._title_parts.append(data)
        if self._h1_depth:
            self._h1_parts.append(data)

    def candidates(self) -> List[Optional[str]]:
        return [
            self.og_title,
            self.twitter_title,
            "".join(self._title_parts),
            "".join(self._h1_parts),
        ]


def extract_title(html: str) -> Optional[str]:
    """
    Pick the best title from an HTML document.

    Returns:
        The first non-empty cleaned candidate, or None.
    """
    parser = _TitleCandidateParser()
    parser.feed(html)
    parser.close()
    for candidate in parser.candidates():
        title = clean_title(candidate)
        if title:
            return title
    return None


class MetadataFetcher:
    """
    Fetches a page and extracts its title.

    Args:
        timeout:    Hard bound in seconds for one fetch_title() call.
        user_agent: User-Agent header sent with the request. Some sites
                    serve bots an empty shell page, so it looks like a browser.
        transport:  Optional httpx transport (tests pass httpx.MockTransport).
        max_bytes:  Body bytes read before the download is cut off.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_bytes: Optional[int] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.metadata_fetch_timeout
        self.user_agent = user_agent or settings.metadata_user_agent
        self._transport = transport
        self.max_bytes = max_bytes or settings.metadata_max_bytes

    async def fetch_title(self, url: str) -> Optional[str]:
        """
        Return the page title for `url`, or None when it cannot be determined.

        Never raises.
        """
        fetch_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        try:
            title = await asyncio.wait_for(self._fetch_and_extract(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "[%s] Metadata fetch timed out after %.1fs: %s", fetch_id, self.timeout, url
            )
            return None
        except Exception as e:
            logger.warning(
                "[%s] Metadata fetch failed for %s: %s: %s",
                fetch_id,
                url,
                type(e).__name__,
                str(e),
            )
            return None

        duration_ms = (time.perf_counter() - start_time) * 1000
        if title:
            logger.info("[%s] Metadata fetched in %.0fms: %r", fetch_id, duration_ms, title)
        else:
            logger.info("[%s] No title found at %s (%.0fms)", fetch_id, url, duration_ms)
        return title

    async def _fetch_and_extract(self, url: str) -> Optional[str]:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        ) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()

                content_type = response.headers.get("content-type", "")
                if content_type and "html" not in content_type.lower():
                    logger.warning("Skipping non-HTML response (%s) from %s", content_type, url)
                    return None

                body = await self._read_head(response)
                encoding = response.charset_encoding or "utf-8"

        html = body.decode(encoding, errors="replace")
        return await asyncio.to_thread(extract_title, html)

    async def _read_head(self, response: httpx.Response) -> bytes:
        """Read the body up to max_bytes, then stop downloading."""
        chunks: List[bytes] = []
        received = 0
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            received += len(chunk)
            if received >= self.max_bytes:
                logger.info("Body of %s cut at %d bytes", response.url, self.max_bytes)
                break
        return b"".join(chunks)[: self.max_bytes]


metadata_fetcher = MetadataFetcher()
