"""
Tests for the name extraction strategies.
Pure functions over parsed HTML: no I/O.
"""

import pytest
from bs4 import BeautifulSoup

from rollcall.adapters.extraction import (
    AutoExtraction,
    SelectorExtraction,
    TextPatternExtraction,
    build_strategy,
    strip_to_text,
)
from rollcall.domain.name_classifier import NameClassifier


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


CARD_PAGE = """
<html><body>
  <h1>Staff Directory</h1>
  <div class="fsConstituentItem">
    <h3 class="fsFullName">Jane   Smith</h3>
    <div class="fsTitles">Titles: Math Teacher</div>
  </div>
  <div class="fsConstituentItem">
    <h3 class="fsFullName">John Q. Smith</h3>
  </div>
  <div class="fsConstituentItem">
    <h3 class="fsFullName">STAFF LIST</h3>
  </div>
</body></html>
"""

TEXT_PAGE = """
<html><head><style>.x { color: red }</style></head><body>
  <p>Smith, John</p>
  <p>Lopez, Ana M.</p>
  <p>Mary O'Neil</p>
  <p>Phone: 555-0100</p>
  <p>Contact Mary for details about the science program</p>
  <script>var teacher = "Bob Jones";</script>
</body></html>
"""


class TestStripToText:
    def test_drops_scripts_and_styles(self):
        text = strip_to_text(soup(TEXT_PAGE))
        assert "Bob Jones" not in text
        assert "color" not in text
        assert "Smith, John" in text


class TestSelectorExtraction:
    def test_extracts_card_names(self):
        names = SelectorExtraction().extract(soup(CARD_PAGE))
        assert names == {"Jane Smith", "John Q. Smith"}

    def test_cuts_text_at_titles_label(self):
        page = '<div class="staff-name">Ana Lopez Titles: Counselor, Coach</div>'
        assert SelectorExtraction().extract(soup(page)) == {"Ana Lopez"}

    def test_custom_selectors_replace_defaults(self):
        page = '<span class="person">Ana Lopez</span><h3 class="staff-name">Jane Smith</h3>'
        names = SelectorExtraction([".person"]).extract(soup(page))
        assert names == {"Ana Lopez"}

    def test_applies_supplied_filter(self):
        names = SelectorExtraction().extract(soup(CARD_PAGE), NameClassifier(["John"]))
        assert names == {"Jane Smith"}

    def test_nothing_matches(self):
        assert SelectorExtraction().extract(soup(TEXT_PAGE)) == set()


class TestTextPatternExtraction:
    def test_extracts_both_orders(self):
        names = TextPatternExtraction().extract(soup(TEXT_PAGE))
        assert "John Smith" in names
        assert "Ana M. Lopez" in names
        assert "Mary O'Neil" in names

    def test_ignores_prose_and_scripts(self):
        names = TextPatternExtraction().extract(soup(TEXT_PAGE))
        assert "Bob Jones" not in names
        assert not any("Contact" in n for n in names)
        assert not any("Phone" in n for n in names)


class TestAutoExtraction:
    def test_prefers_selectors(self):
        page = CARD_PAGE.replace("</body>", "<p>Lopez, Ana</p></body>")
        names = AutoExtraction().extract(soup(page))
        assert names == {"Jane Smith", "John Q. Smith"}

    def test_falls_back_to_text(self):
        names = AutoExtraction().extract(soup(TEXT_PAGE))
        assert "John Smith" in names


class TestBuildStrategy:
    @pytest.mark.parametrize("kind,expected", [
        ("selector", SelectorExtraction),
        ("text", TextPatternExtraction),
        ("auto", AutoExtraction),
        (" AUTO ", AutoExtraction),
        ("", AutoExtraction),
        (None, AutoExtraction),
    ])
    def test_known_kinds(self, kind, expected):
        assert isinstance(build_strategy(kind), expected)

    def test_selectors_passed_through(self):
        strategy = build_strategy("selector", [".person"])
        assert strategy.selectors == [".person"]

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError, match="Unknown extraction strategy"):
            build_strategy("xpath")
