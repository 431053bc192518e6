"""
BS4DirectoryScraper - Implements IDirectoryScraper.
Fetches public staff-directory pages with httpx, parses them with
BeautifulSoup and hands each page to the configured extraction strategy.
Follows same-path pagination links up to a hard page cap.
"""

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Set
from urllib.parse import urldefrag, urlencode, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from ..domain.errors import UpstreamFetchError
from ..domain.interfaces.i_scraper_gateway import DirectoryScrapeResult, IDirectoryScraper
from ..domain.name_classifier import looks_like_person_name
from .extraction import AutoExtraction, ExtractionStrategy

logger = logging.getLogger(__name__)

TIMEOUT_SECONDS = 10
MAX_PAGES = 10
USER_AGENT = (
    "Mozilla/5.0 (compatible; RollCall/1.0; staff-directory roster sync)"
)
REQUEST_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

DEFAULT_DIRECTORY_BASE = "https://skyline.isd411.org/staff"
DEFAULT_DIRECTORY_PARAMS = {
    "utf8": "✓",
    "const_search_group_ids": "289",
    "const_search_role_ids": "1",
    "const_search_keyword": "",
    "const_search_first_name": "",
    "const_search_last_name": "a",  # An empty last name returns no listing
}


def build_directory_url(
    base: str = DEFAULT_DIRECTORY_BASE,
    params: Optional[Dict[str, str]] = None,
) -> str:
    """Build a directory search URL from a base path and query parameters."""
    params = DEFAULT_DIRECTORY_PARAMS if params is None else params
    if not params:
        return base
    return f"{base}?{urlencode(params)}"


def canonical_url(href: str, base_url: str) -> str:
    """Absolute URL with the fragment dropped."""
    absolute, _fragment = urldefrag(urljoin(base_url, href))
    return absolute


class BS4DirectoryScraper(IDirectoryScraper):
    """
    Directory scraper using BeautifulSoup.
    Strategy:
    1. Fetch the start page; failure here fails the whole scrape.
    2. Extract names with the configured strategy (selectors or text patterns).
    3. Queue links that point back at the same results path, breadth-first.
    4. Stop at max_pages. A failed later page is skipped, not fatal.
    """

    def __init__(
        self,
        strategy: Optional[ExtractionStrategy] = None,
        accept: Callable[[str], bool] = looks_like_person_name,
        timeout: float = TIMEOUT_SECONDS,
        max_pages: int = MAX_PAGES,
    ):
        self.strategy = strategy or AutoExtraction()
        self.accept = accept
        self.timeout = timeout
        self.max_pages = max(1, max_pages)

    async def scrape(
        self, source_url: str, follow_pagination: bool = True
    ) -> DirectoryScrapeResult:
        start_url = canonical_url(source_url, source_url)
        names: Set[str] = set()
        visited: Set[str] = set()
        queue: Deque[str] = deque([start_url])
        pages_visited = 0

        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers=REQUEST_HEADERS,
            follow_redirects=True,
        ) as client:
            # The cap counts fetch attempts, failed ones included
            while queue and len(visited) < self.max_pages:
                url = queue.popleft()
                if url in visited:
                    continue
                visited.add(url)

                try:
                    html = await self._fetch(client, url)
                except UpstreamFetchError as e:
                    if pages_visited == 0:
                        raise
                    logger.warning(f"[Scraper] Skipping page {url}: {e.message}")
                    continue

                pages_visited += 1
                soup = BeautifulSoup(html, "html.parser")
                page_names = self.strategy.extract(soup, self.accept)
                names.update(page_names)
                logger.info(
                    f"[Scraper] Page {pages_visited}/{self.max_pages} {url} → "
                    f"{len(page_names)} names ({self.strategy.name})"
                )

                if not follow_pagination:
                    break

                for link in self._pagination_links(soup, url, start_url):
                    if link not in visited and link not in queue:
                        queue.append(link)

        if queue and len(visited) >= self.max_pages:
            logger.warning(
                f"[Scraper] Page cap {self.max_pages} reached; "
                f"{len(queue)} queued page(s) not visited"
            )

        return DirectoryScrapeResult(
            source_url=start_url,
            names=sorted(names),
            pages_visited=pages_visited,
        )

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> str:
        try:
            response = await client.get(url)
        except httpx.TimeoutException:
            raise UpstreamFetchError(f"Directory fetch timed out ({url})")
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Directory fetch failed ({url}): {e}")

        if not 200 <= response.status_code < 300:
            raise UpstreamFetchError(f"Directory fetch failed ({response.status_code})")
        return response.text

    def _pagination_links(
        self, soup: BeautifulSoup, page_url: str, start_url: str
    ) -> List[str]:
        """Links on this page that lead to another page of the same results."""
        start = urlparse(start_url)
        links: List[str] = []
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href or href.startswith(("javascript:", "mailto:", "tel:", "#")):
                continue
            url = canonical_url(href, page_url)
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https"):
                continue
            if parsed.netloc != start.netloc or parsed.path.rstrip("/") != start.path.rstrip("/"):
                continue
            if url not in links:
                links.append(url)
        return links

