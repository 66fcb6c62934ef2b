"""
Tests for emmetls/engine/extract.py

Covers where an abbreviation starts, how brackets and quotes are scanned
and the positions where there is nothing to extract.
"""
from __future__ import annotations

import pytest

from emmetls.engine.config import MARKUP, STYLESHEET
from emmetls.engine.extract import ExtractedAbbreviation, extract


class TestMarkupExtraction:
    """Backward scanning with the markup grammar."""

    def test_indented_abbreviation(self):
        """Leading whitespace is not part of the abbreviation."""
        found = extract("  ul>li*2", 9)

        assert found == ExtractedAbbreviation("ul>li*2", 2, 9)

    def test_defaults_to_end_of_line(self):
        found = extract("div.box")

        assert found is not None
        assert found.abbreviation == "div.box"
        assert (found.start, found.end) == (0, 7)

    def test_cursor_in_the_middle(self):
        """Only the text before the cursor is considered."""
        found = extract("ul>li tail", 5)

        assert found is not None
        assert found.abbreviation == "ul>li"
        assert found.end == 5

    def test_span_matches_abbreviation(self):
        line = "text before a.link"
        found = extract(line)

        assert found is not None
        assert line[found.start:found.end] == found.abbreviation

    def test_stops_at_closing_html_tag(self):
        """A '>' that ends a tag is not the child operator."""
        found = extract('<div class="x">p.note')

        assert found is not None
        assert found.abbreviation == "p.note"
        assert found.start == 15

    def test_child_operator_is_kept(self):
        found = extract("nav>ul>li")

        assert found is not None
        assert found.abbreviation == "nav>ul>li"

    def test_stops_at_tag_opening(self):
        found = extract("<span>b")

        assert found is not None
        assert found.abbreviation == "b"

    def test_attribute_set_with_spaces(self):
        """Spaces inside [...] do not end the abbreviation."""
        found = extract('x a[title="Hello world" target=_blank]')

        assert found is not None
        assert found.abbreviation == 'a[title="Hello world" target=_blank]'

    def test_text_with_spaces_and_quotes(self):
        """Text keeps everything up to its opening brace, apostrophes included."""
        found = extract("say p{don't stop}")

        assert found is not None
        assert found.abbreviation == "p{don't stop}"

    def test_quoted_value_with_bracket(self):
        found = extract('a[title="a]b"]')

        assert found is not None
        assert found.abbreviation == 'a[title="a]b"]'

    def test_group_with_repeat(self):
        found = extract("  (li>a)*3")

        assert found is not None
        assert found.abbreviation == "(li>a)*3"
        assert found.start == 2

    def test_leading_operators_are_stripped(self):
        found = extract(">+div")

        assert found is not None
        assert found.abbreviation == "div"
        assert found.start == 2

    def test_unmatched_closing_bracket(self):
        """A closing bracket with no opener gives nothing to extract."""
        assert extract("x div]") is None

    def test_unterminated_group_is_best_effort(self):
        """The span is still returned; the parser rejects it later."""
        found = extract("(li")

        assert found is not None
        assert found.abbreviation == "(li"

    def test_stray_quote_ends_scan(self):
        found = extract('const s = "div')

        assert found is not None
        assert found.abbreviation == "div"

    @pytest.mark.parametrize(
        "line,pos",
        [
            ("", 0),
            ("   ", 3),
            ("div ", 4),
            ("<div>", 5),
            (">>", 2),
        ],
    )
    def test_nothing_to_extract(self, line, pos):
        assert extract(line, pos) is None

    def test_same_input_same_span(self):
        line = "  nav>ul>li.item$*3"

        assert extract(line, 12) == extract(line, 12)

    def test_cursor_is_clamped(self):
        found = extract("div", 99)

        assert found is not None
        assert found.end == 3

        assert extract("div", -4) is None


class TestStylesheetExtraction:
    """Backward scanning with the stylesheet grammar."""

    def test_after_brace(self):
        found = extract("a {m10", type=STYLESHEET)

        assert found is not None
        assert found.abbreviation == "m10"
        assert found.start == 3

    def test_after_semicolon(self):
        found = extract("color: red;p10-20!", type=STYLESHEET)

        assert found is not None
        assert found.abbreviation == "p10-20!"

    def test_plus_chain(self):
        found = extract("\tm10+p5", type=STYLESHEET)

        assert found is not None
        assert found.abbreviation == "m10+p5"
        assert found.start == 1

    def test_braces_are_stop_chars(self):
        assert extract("a {", type=STYLESHEET) is None

    def test_brace_does_not_stop_markup_scan(self):
        found = extract("a {m10", type=MARKUP)

        assert found is not None
        assert found.abbreviation == "{m10"
