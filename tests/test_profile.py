import json

import pytest

from tickr.constants import DEFAULT_TICKERS
from tickr.filters import FilterError
from tickr.profile import Profile, ProfileError


def test_missing_file_creates_default(tmp_path):
    path = tmp_path / ".tickrrc"
    profile = Profile(str(path))
    assert profile.tickers == DEFAULT_TICKERS
    assert json.loads(path.read_text())["tickers"] == DEFAULT_TICKERS


def test_loads_saved_settings(tmp_path):
    path = tmp_path / ".tickrrc"
    path.write_text(json.dumps({
        "tickers": ["msft", " nflx ", "MSFT"],
        "grouping": True,
        "sort_column": "change_pct",
        "ascending": False,
        "filter": "last > 10",
    }))
    profile = Profile(str(path))
    assert profile.tickers == ["MSFT", "NFLX"]
    assert profile.grouping is True
    assert profile.sort_column == "change_pct"
    assert profile.ascending is False
    assert profile.filter_expression is not None


@pytest.mark.parametrize("content", [
    "{not json",
    "[1, 2]",
    json.dumps({"tickers": "AAPL"}),
    json.dumps({"sort_column": "nope"}),
    json.dumps({"filter": "last >"}),
])
def test_corrupt_profile_raises(tmp_path, content):
    path = tmp_path / ".tickrrc"
    path.write_text(content)
    with pytest.raises(ProfileError):
        Profile(str(path))
    assert path.read_text() == content


def test_add_and_remove_tickers(profile, tmp_path):
    assert profile.add_tickers(["msft", "AAPL", "msft"]) == 1
    assert profile.tickers == ["AAPL", "IBM", "KO", "MSFT"]
    assert profile.remove_tickers(["ibm", "zzz"]) == 1
    assert profile.tickers == ["AAPL", "KO", "MSFT"]

    saved = json.loads((tmp_path / "profile.json").read_text())
    assert saved["tickers"] == ["AAPL", "KO", "MSFT"]


def test_invalid_filter_leaves_previous_filter(profile):
    profile.set_filter("last > 1")
    with pytest.raises(FilterError):
        profile.set_filter("last >>> 2")
    assert profile.filter == "last > 1"


def test_empty_filter_clears(profile):
    profile.set_filter("last > 1")
    profile.set_filter("  ")
    assert profile.filter == ""
    assert profile.filter_expression is None


def test_regroup_toggles(profile):
    profile.regroup()
    assert profile.grouping is True
    profile.regroup()
    assert profile.grouping is False


def test_reorder_selects_then_flips(profile):
    profile.reorder("last")
    assert (profile.sort_column, profile.ascending) == ("last", True)
    profile.reorder("last")
    assert (profile.sort_column, profile.ascending) == ("last", False)
    profile.reorder("volume")
    assert (profile.sort_column, profile.ascending) == ("volume", True)
    with pytest.raises(ProfileError):
        profile.reorder("nope")


def test_failed_save_rolls_back(profile, tmp_path):
    profile.path = str(tmp_path / "missing-dir" / "profile.json")
    with pytest.raises(ProfileError):
        profile.regroup()
    assert profile.grouping is False
    with pytest.raises(ProfileError):
        profile.reorder("last")
    assert profile.sort_column == "ticker"


def test_init_default_profile_resets(profile):
    profile.set_filter("last > 1")
    profile.regroup()
    profile.init_default_profile()
    assert profile.tickers == DEFAULT_TICKERS
    assert profile.filter == ""
    assert profile.grouping is False
