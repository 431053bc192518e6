"""
Name classifier - decides whether a scraped text fragment is plausibly a
person's full name.

This is the only filter between a staff-directory page and the roster, so
it is conservative: a real name occasionally rejected is fine, a heading
or phone line accepted is not.
"""

import re
from typing import Iterable, Optional

MIN_NAME_LENGTH = 5
MAX_NAME_LENGTH = 40
MIN_TOKENS = 2
MAX_TOKENS = 3

# Institutional / navigational words seen around directory listings
DEFAULT_DENYLIST = (
    "Skyline",
    "High",
    "School",
    "Staff",
    "Directory",
    "Search",
    "Phone",
    "Email",
    "Locations",
    "Titles",
    "Home",
    "Issaquah",
    "District",
    "Washington",
)

_WHITESPACE = re.compile(r"\s+")
_ALLOWED = re.compile(r"^[A-Za-z .'-]+$")
_SHOUTING = re.compile(r"[A-Z]{4,}")


def normalize_name(text: Optional[str]) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return _WHITESPACE.sub(" ", text or "").strip()


def looks_like_person_name(
    text: Optional[str],
    denylist: Iterable[str] = DEFAULT_DENYLIST,
) -> bool:
    name = normalize_name(text)
    if not name:
        return False

    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        return False

    if not _ALLOWED.match(name):
        return False

    tokens = [t for t in name.split(" ") if t]
    if not MIN_TOKENS <= len(tokens) <= MAX_TOKENS:
        return False

    lower = name.lower()
    for word in denylist:
        if word and word.lower() in lower:
            return False

    # All-caps headings ("STAFF LIST", "SCIENCE DEPT")
    if _SHOUTING.search(name):
        return False

    return True


class NameClassifier:
    """
    Bound form of looks_like_person_name, carrying a configured denylist.
    Shared by the scraper and the roster reconciler.
    """

    def __init__(self, extra_denylist: Iterable[str] = ()):
        self.denylist = tuple(DEFAULT_DENYLIST) + tuple(w for w in extra_denylist if w)

    def __call__(self, text: Optional[str]) -> bool:
        return looks_like_person_name(text, self.denylist)
