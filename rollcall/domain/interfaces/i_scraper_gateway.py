"""
IDirectoryScraper - Port: staff-directory scraping.
Implementations fetch public directory pages and return candidate names.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List


@dataclass
class DirectoryScrapeResult:
    source_url: str
    names: List[str] = field(default_factory=list)
    pages_visited: int = 0

    @property
    def found(self) -> int:
        return len(self.names)


class IDirectoryScraper(ABC):
    """Port for turning a directory listing into a set of names."""

    @abstractmethod
    async def scrape(
        self, source_url: str, follow_pagination: bool = True
    ) -> DirectoryScrapeResult:
        """
        Fetch the listing (and, optionally, its pagination) and return
        deduplicated candidate names.
        Raises UpstreamFetchError when the first page cannot be fetched.
        """
        pass
