"""
Name extraction strategies for directory pages.

Directory sites differ: some wrap each person in a recognisable element,
others only render prose. The scraper takes one strategy, chosen by config:

  selector: one candidate per element matching a CSS selector
  text:     regex over the page's visible text ("Last, First" and "First Last")
  auto:     selector first, text when selectors find nothing
"""

import re
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Set

from bs4 import BeautifulSoup

from ..domain.name_classifier import looks_like_person_name, normalize_name

NameFilter = Callable[[str], bool]

DEFAULT_NAME_SELECTORS = (
    ".fsConstituentItem .fsFullName",
    ".fsConstituentItem h3",
    ".staff-name",
    ".directory-name",
)

# Directory cards print "<name> Titles: <job titles>"
TITLES_LABEL = "Titles:"

_NAME_TOKEN = r"[A-Z][A-Za-z'\-]+"
_MIDDLE_INITIAL = r"(?:[ \t]+[A-Z]\.)?"

# A whole line reading "Smith, John" / "Smith, John Q."
LAST_FIRST = re.compile(
    rf"(?P<last>{_NAME_TOKEN}),[ \t]+(?P<first>{_NAME_TOKEN}{_MIDDLE_INITIAL})"
)
# A whole line reading "John Smith" / "John Q. Smith"
FIRST_LAST = re.compile(rf"{_NAME_TOKEN}{_MIDDLE_INITIAL}[ \t]+{_NAME_TOKEN}")


def strip_to_text(soup: BeautifulSoup) -> str:
    """Visible text, one line per block, with scripts and styles removed."""
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    return soup.get_text(separator="\n")


class ExtractionStrategy(ABC):
    """Turns a parsed page into a set of normalized candidate names."""

    name = "base"

    @abstractmethod
    def extract(self, soup: BeautifulSoup, accept: NameFilter = looks_like_person_name) -> Set[str]:
        pass


class SelectorExtraction(ExtractionStrategy):
    name = "selector"

    def __init__(self, selectors: Optional[Iterable[str]] = None):
        self.selectors: List[str] = [s for s in (selectors or DEFAULT_NAME_SELECTORS) if s]

    def extract(self, soup: BeautifulSoup, accept: NameFilter = looks_like_person_name) -> Set[str]:
        names: Set[str] = set()
        for selector in self.selectors:
            for element in soup.select(selector):
                text = normalize_name(element.get_text(" ", strip=True))
                cut = text.find(TITLES_LABEL)
                if cut != -1:
                    text = normalize_name(text[:cut])
                if accept(text):
                    names.add(text)
        return names


class TextPatternExtraction(ExtractionStrategy):
    """
    Regex fallback over plain text.
    A pattern must fill its whole line; inside prose both pick up too many
    capitalised word pairs ("Contact Mary", "Teacher, Science").
    """

    name = "text"

    def extract(self, soup: BeautifulSoup, accept: NameFilter = looks_like_person_name) -> Set[str]:
        names: Set[str] = set()
        for raw_line in strip_to_text(soup).splitlines():
            line = normalize_name(raw_line)
            if not line:
                continue

            match = LAST_FIRST.fullmatch(line)
            if match:
                candidate = f"{match.group('first')} {match.group('last')}"
                if accept(candidate):
                    names.add(candidate)
            elif FIRST_LAST.fullmatch(line) and accept(line):
                names.add(line)
        return names


class AutoExtraction(ExtractionStrategy):
    name = "auto"

    def __init__(self, selectors: Optional[Iterable[str]] = None):
        self.structural = SelectorExtraction(selectors)
        self.textual = TextPatternExtraction()

    def extract(self, soup: BeautifulSoup, accept: NameFilter = looks_like_person_name) -> Set[str]:
        names = self.structural.extract(soup, accept)
        if names:
            return names
        return self.textual.extract(soup, accept)


def build_strategy(kind: str, selectors: Optional[Iterable[str]] = None) -> ExtractionStrategy:
    kind = (kind or "auto").strip().lower()
    if kind == "selector":
        return SelectorExtraction(selectors)
    if kind == "text":
        return TextPatternExtraction()
    if kind == "auto":
        return AutoExtraction(selectors)
    raise ValueError(f"Unknown extraction strategy: {kind!r} (expected auto, selector or text)")
