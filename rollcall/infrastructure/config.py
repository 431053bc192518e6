"""
Configuration - Supabase credentials, the admin secret and scrape tuning,
all from environment variables. A local .env is loaded with python-dotenv.
"""

import os
from dataclasses import dataclass, field
from typing import Tuple

from dotenv import load_dotenv

from ..adapters.bs4_scraper_adapter import build_directory_url

load_dotenv()


def _csv(value: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Config:
    # Supabase
    supabase_url: str
    supabase_service_key: str  # Service role key (backend only, never exposed to frontend)

    # Moderation
    admin_token: str = ""  # Unset → every admin call fails as misconfigured

    # Directory scrape
    directory_url: str = field(default_factory=build_directory_url)
    directory_school: str = "Skyline High School"
    scrape_strategy: str = "auto"
    name_selectors: Tuple[str, ...] = ()
    name_denylist_extra: Tuple[str, ...] = ()
    scrape_max_pages: int = 10
    scrape_timeout_seconds: float = 10.0
    scrape_deadline_seconds: float = 120.0
    scrape_interval_minutes: int = 0  # 0 disables the scheduler

    @classmethod
    def from_env(cls) -> "Config":
        missing = []
        required = [
            "SUPABASE_URL",
            "SUPABASE_SERVICE_KEY",
        ]
        for key in required:
            if not os.getenv(key):
                missing.append(key)

        if missing:
            raise EnvironmentError(
                f"Missing required environment variables: {', '.join(missing)}\n"
                f"Copy .env.example to .env and fill in the values."
            )

        return cls(
            supabase_url=os.environ["SUPABASE_URL"],
            supabase_service_key=os.environ["SUPABASE_SERVICE_KEY"],
            admin_token=os.getenv("ADMIN_TOKEN", ""),
            directory_url=os.getenv("DIRECTORY_URL") or build_directory_url(),
            directory_school=os.getenv("DIRECTORY_SCHOOL", "Skyline High School"),
            scrape_strategy=os.getenv("SCRAPE_STRATEGY", "auto"),
            name_selectors=_csv(os.getenv("NAME_SELECTORS", "")),
            name_denylist_extra=_csv(os.getenv("NAME_DENYLIST_EXTRA", "")),
            scrape_max_pages=int(os.getenv("SCRAPE_MAX_PAGES", "10")),
            scrape_timeout_seconds=float(os.getenv("SCRAPE_TIMEOUT_SECONDS", "10")),
            scrape_deadline_seconds=float(os.getenv("SCRAPE_DEADLINE_SECONDS", "120")),
            scrape_interval_minutes=int(os.getenv("SCRAPE_INTERVAL_MINUTES", "0")),
        )
