"""
Dependency Injection Container.
Builds the Supabase store, the directory scraper and the name classifier
from Config, then hands them to the five use cases. Nothing outside this
module names a concrete adapter.
"""

from typing import Optional

from .config import Config
from ..adapters.supabase_adapter import SupabaseAdapter
from ..adapters.bs4_scraper_adapter import BS4DirectoryScraper
from ..adapters.extraction import build_strategy
from ..domain.interfaces.i_data_repository import IDataRepository
from ..domain.interfaces.i_scraper_gateway import IDirectoryScraper
from ..domain.name_classifier import NameClassifier
from ..use_cases.browse_teachers import BrowseTeachersUseCase
from ..use_cases.moderate_reviews import ModerateReviewsUseCase
from ..use_cases.reconcile_roster import ReconcileRosterUseCase
from ..use_cases.scrape_directory import ScrapeDirectoryUseCase
from ..use_cases.submit_review import SubmitReviewUseCase


class Container:
    """
    Composes the full application object graph.
    Swap any adapter by changing a single line here, or pass one in.
    """

    def __init__(
        self,
        config: Config,
        repository: Optional[IDataRepository] = None,
        scraper: Optional[IDirectoryScraper] = None,
    ):
        self.config = config

        # ── Adapters (Ports & Adapters layer) ─────────────────────────────
        self.classifier = NameClassifier(config.name_denylist_extra)
        self.repository = repository or SupabaseAdapter(
            url=config.supabase_url,
            key=config.supabase_service_key,
        )
        self.scraper = scraper or BS4DirectoryScraper(
            strategy=build_strategy(config.scrape_strategy, config.name_selectors),
            accept=self.classifier,
            timeout=config.scrape_timeout_seconds,
            max_pages=config.scrape_max_pages,
        )

        # ── Use Cases (Application layer) ──────────────────────────────────
        self.reconcile_use_case = ReconcileRosterUseCase(
            repository=self.repository,
            accept=self.classifier,
        )
        self.scrape_use_case = ScrapeDirectoryUseCase(
            scraper=self.scraper,
            reconcile=self.reconcile_use_case,
            directory_url=config.directory_url,
            school=config.directory_school,
            deadline_seconds=config.scrape_deadline_seconds,
        )
        self.submit_review_use_case = SubmitReviewUseCase(repository=self.repository)
        self.moderation_use_case = ModerateReviewsUseCase(
            repository=self.repository,
            admin_token=config.admin_token,
        )
        self.browse_use_case = BrowseTeachersUseCase(repository=self.repository)
