import time
from typing import Any, Dict, List, Optional

from tickr.profile import Profile


def describe_error(e: Exception) -> str:
    err_str = str(e)
    if "429" in err_str or "rate" in err_str.lower():
        return "Rate limited"
    return err_str[:80] or type(e).__name__


def _sort_key(column: str):
    def key(row: Dict[str, Any]):
        val = row.get(column)
        if isinstance(val, str):
            return val.upper()
        return val
    return key


def sort_rows(rows: List[Dict[str, Any]], column: str, ascending: bool) -> List[Dict[str, Any]]:
    """Sort by column; rows with no value for it always go last."""
    present = [r for r in rows if r.get(column) is not None]
    missing = [r for r in rows if r.get(column) is None]
    present.sort(key=_sort_key(column), reverse=not ascending)
    return present + missing


class Quotes:
    """Latest quotes for the profile's tickers."""

    def __init__(self, provider, profile: Profile):
        self.provider = provider
        self.profile = profile
        self.stocks: List[Dict[str, Any]] = []
        self.updated: Optional[float] = None
        self.stale = False
        self.error = ""

    def fetch(self):
        """Refresh from the provider; on failure keep the previous quotes and record the error."""
        try:
            snaps = self.provider.fetch_snapshots(list(self.profile.tickers))
        except Exception as e:
            self.error = describe_error(e)
            self.stale = True
            return
        by_ticker = {d["ticker"]: d for d in snaps}
        self.stocks = [by_ticker[t] for t in self.profile.tickers if t in by_ticker]
        self.updated = time.time()
        self.stale = False
        self.error = ""

    def add_tickers(self, tickers: List[str]) -> int:
        added = self.profile.add_tickers(tickers)
        if added:
            self.fetch()
        return added

    def remove_tickers(self, tickers: List[str]) -> int:
        removed = self.profile.remove_tickers(tickers)
        if removed:
            listed = set(self.profile.tickers)
            self.stocks = [s for s in self.stocks if s["ticker"] in listed]
        return removed

    def rows(self) -> List[Dict[str, Any]]:
        """Quotes as displayed: filtered, sorted, and grouped when the profile asks for it."""
        expression = self.profile.filter_expression
        rows = [s for s in self.stocks if expression is None or expression.matches(s)]
        column, ascending = self.profile.sort_column, self.profile.ascending
        if not self.profile.grouping:
            return sort_rows(rows, column, ascending)
        advancing = [r for r in rows if (r.get("change") or 0) >= 0]
        declining = [r for r in rows if (r.get("change") or 0) < 0]
        return sort_rows(advancing, column, ascending) + sort_rows(declining, column, ascending)
