import json
import os
from typing import Any, Dict, Iterable, List, Optional

from tickr.constants import COLUMNS, DEFAULT_TICKERS
from tickr.filters import FilterExpression, compile_filter


class ProfileError(Exception):
    """The profile file could not be read, parsed or written."""


def _normalize_tickers(tickers: Iterable[str]) -> List[str]:
    result: List[str] = []
    for t in tickers:
        t = t.strip().upper()
        if t and t not in result:
            result.append(t)
    return result


class Profile:
    """Persisted watch-list and display settings, stored as JSON."""

    def __init__(self, path: str, load: bool = True):
        self.path = path
        self.tickers: List[str] = list(DEFAULT_TICKERS)
        self.grouping = False
        self.sort_column = "ticker"
        self.ascending = True
        self.filter = ""
        self.filter_expression: Optional[FilterExpression] = None
        if load:
            self._load()

    def _load(self):
        if not os.path.exists(self.path):
            self.init_default_profile()
            return
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ProfileError(str(e)) from e
        if not isinstance(data, dict):
            raise ProfileError("profile must be a JSON object")
        self._apply(data)

    def _apply(self, data: Dict[str, Any]):
        tickers = data.get("tickers", DEFAULT_TICKERS)
        if not isinstance(tickers, list) or not all(isinstance(t, str) for t in tickers):
            raise ProfileError("'tickers' must be a list of strings")
        sort_column = data.get("sort_column", "ticker")
        if sort_column not in COLUMNS:
            raise ProfileError(f"unknown sort column {sort_column!r}")
        text = data.get("filter", "") or ""
        try:
            expression = compile_filter(text) if text else None
        except ValueError as e:
            raise ProfileError(f"bad filter: {e}") from e

        self.tickers = _normalize_tickers(tickers)
        self.grouping = bool(data.get("grouping", False))
        self.sort_column = sort_column
        self.ascending = bool(data.get("ascending", True))
        self.filter = text
        self.filter_expression = expression

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tickers": self.tickers,
            "grouping": self.grouping,
            "sort_column": self.sort_column,
            "ascending": self.ascending,
            "filter": self.filter,
        }

    def init_default_profile(self):
        """Reset every setting to its default and write the profile out."""
        self.tickers = list(DEFAULT_TICKERS)
        self.grouping = False
        self.sort_column = "ticker"
        self.ascending = True
        self.filter = ""
        self.filter_expression = None
        self.save()

    def save(self):
        try:
            with open(self.path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            raise ProfileError(f"cannot write {self.path}: {e}") from e

    # -- Mutations -------------------------------------------------------

    def add_tickers(self, tickers: Iterable[str]) -> int:
        """Append new tickers, skipping ones already listed. Returns how many were added."""
        new = [t for t in _normalize_tickers(tickers) if t not in self.tickers]
        if new:
            self.tickers.extend(new)
            self.save()
        return len(new)

    def remove_tickers(self, tickers: Iterable[str]) -> int:
        gone = set(_normalize_tickers(tickers))
        before = len(self.tickers)
        self.tickers = [t for t in self.tickers if t not in gone]
        removed = before - len(self.tickers)
        if removed:
            self.save()
        return removed

    def set_filter(self, text: str):
        """Set (or with empty text, clear) the filter. Raises FilterError if it doesn't parse."""
        text = text.strip()
        expression = compile_filter(text) if text else None
        self.filter = text
        self.filter_expression = expression
        self.save()

    def regroup(self):
        """Toggle grouping by advancing/declining issues.

        If the profile can't be saved the setting is rolled back and
        ProfileError is raised.
        """
        self.grouping = not self.grouping
        try:
            self.save()
        except ProfileError:
            self.grouping = not self.grouping
            raise

    def reorder(self, column: str):
        """Sort by ``column``; selecting the current sort column flips the direction."""
        if column not in COLUMNS:
            raise ProfileError(f"no such column: {column}")
        previous = (self.sort_column, self.ascending)
        if column == self.sort_column:
            self.ascending = not self.ascending
        else:
            self.sort_column = column
            self.ascending = True
        try:
            self.save()
        except ProfileError:
            self.sort_column, self.ascending = previous
            raise
