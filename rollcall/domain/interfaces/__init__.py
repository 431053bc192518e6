from .i_data_repository import IDataRepository
from .i_scraper_gateway import IDirectoryScraper, DirectoryScrapeResult

__all__ = [
    "IDataRepository",
    "IDirectoryScraper",
    "DirectoryScrapeResult",
]
