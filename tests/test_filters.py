import pytest

from tickr.filters import FilterError, compile_filter

from conftest import quote

AAPL = quote("AAPL", 190.0, 1.5, 0.8, 50_000_000)
IBM = quote("IBM", 140.0, -2.0, -1.4, 3_000_000)


@pytest.mark.parametrize("text, aapl, ibm", [
    ("last > 150", True, False),
    ("change < 0", False, True),
    ("change_pct >= 0.8 and volume > 1000000", True, False),
    ("change_pct > 1 || volume < 5000000", False, True),
    ("last > 100 && change > 0", True, False),
    ("!(change > 0)", False, True),
    ("not change > 0", False, True),
    ("last != 140", True, False),
    ("ticker == 'IBM'", False, True),
    ("100 < last < 180", False, True),
    ("last - change > 185", True, False),
    ("volume / 1000000 >= 50", True, False),
])
def test_matches(text, aapl, ibm):
    expression = compile_filter(text)
    assert expression.matches(AAPL) is aapl
    assert expression.matches(IBM) is ibm


def test_missing_value_excludes_row():
    expression = compile_filter("volume > 0")
    assert expression.matches(quote("XYZ", 10.0)) is False


def test_division_by_zero_excludes_row():
    expression = compile_filter("last / change > 1")
    assert expression.matches(quote("XYZ", 10.0, 0.0)) is False


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "last >",
    "price > 1",
    "__import__('os').system('true')",
    "last.real > 1",
    "[x for x in ()]",
    "last ** 2 > 1",
    "last in (1, 2)",
    "True",
])
def test_rejects_invalid_expressions(text):
    with pytest.raises(FilterError):
        compile_filter(text)


def test_keeps_original_text():
    assert compile_filter("  last > 1 && change > 0 ").text == "last > 1 && change > 0"
