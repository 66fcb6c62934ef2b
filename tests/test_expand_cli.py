import pytest

from emmetls.expand_cli import main, parse_option


def test_expands_markup(capsys):
    """Test that the last abbreviation on the line is expanded."""
    assert main(["text ul>li*2"]) == 0

    out = capsys.readouterr().out
    assert out == "<ul>\n\t<li></li>\n\t<li></li>\n</ul>\n"


def test_expands_stylesheet(capsys):
    assert main(["m10+p5", "--stylesheet"]) == 0

    assert capsys.readouterr().out == "margin: 10px;\npadding: 5px;\n"


def test_column_limits_abbreviation(capsys):
    assert main(["div.a span", "--column", "5"]) == 0

    assert capsys.readouterr().out == '<div class="a"></div>\n'


def test_options_are_applied(capsys):
    assert main(["ul>li", "--option", 'output.indent="  "']) == 0

    assert capsys.readouterr().out == "<ul>\n  <li></li>\n</ul>\n"


def test_invalid_option_is_reported(capsys):
    assert main(["br", "--option", "output.selfClosingStyle=sgml"]) == 0

    captured = capsys.readouterr()
    assert captured.out == "<br>\n"
    assert "Ignoring invalid option: output.selfClosingStyle" in captured.err


def test_no_abbreviation(capsys):
    assert main(["   "]) == 1

    assert "No abbreviation found" in capsys.readouterr().err


def test_parse_error(capsys):
    assert main(["ul>"]) == 1

    assert capsys.readouterr().err.startswith("Error: Operator '>'")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("output.inlineBreak=0", ("output.inlineBreak", 0)),
        ("output.indent=  ", ("output.indent", "  ")),
        ('stylesheet.unitless=["width"]', ("stylesheet.unitless", ["width"])),
    ],
)
def test_parse_option(text, expected):
    assert parse_option(text) == expected


def test_parse_option_requires_name():
    import argparse

    with pytest.raises(argparse.ArgumentTypeError):
        parse_option("=1")
