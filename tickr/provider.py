"""Massive API provider. Nothing else in tickr imports from massive."""

from typing import Any, Dict, List, Optional

from massive import RESTClient


class MassiveProvider:
    """Wraps the Massive SDK so no other module needs to import from massive."""

    def __init__(self, api_key: str):
        self._client = RESTClient(api_key=api_key)

    # -- Snapshots -------------------------------------------------------

    def fetch_snapshots(self, tickers: List[str]) -> List[Dict[str, Any]]:
        """Fetch universal snapshots, return normalised dicts."""
        if not tickers:
            return []
        raw = list(self._client.list_universal_snapshots(ticker_any_of=tickers))
        results = []
        for snap in raw:
            t = getattr(snap, "ticker", None)
            if not t or getattr(snap, "error", None):
                continue
            results.append(self._normalize_snapshot(snap, t))
        return results

    # -- Market status ---------------------------------------------------

    def fetch_market_status(self) -> Dict[str, Any]:
        """Return whether US equities are open, plus the raw session label."""
        ms = self._client.get_market_status()
        market = getattr(ms, "market", "") or ""
        return {
            "market_is_open": market == "open",
            "market": market,
            "after_hours": bool(getattr(ms, "after_hours", False)),
            "early_hours": bool(getattr(ms, "early_hours", False)),
            "server_time": getattr(ms, "server_time", None),
        }

    # -- Internal helpers ------------------------------------------------

    # quote field -> snapshot session attribute
    _SESSION_FIELDS = {
        "open": "open",
        "high": "high",
        "low": "low",
        "volume": "volume",
        "change": "change",
        "change_pct": "change_percent",
        "prev_close": "previous_close",
    }

    @classmethod
    def _normalize_snapshot(cls, snap: Any, ticker: str) -> Dict[str, Any]:
        """Flatten an API snapshot into a quote row.

        Stocks carry their numbers on ``snap.session``; index snapshots carry
        them on the snapshot itself and have no previous close.
        """
        d: Dict[str, Any] = {"ticker": ticker}
        session = getattr(snap, "session", None)
        source = session or snap

        for key, attr in cls._SESSION_FIELDS.items():
            d[key] = getattr(source, attr, None)

        if session:
            d["last"] = getattr(session, "close", None) or getattr(session, "price", None)
            if d["prev_close"] is None and d["last"] is not None and d["change"] is not None:
                d["prev_close"] = d["last"] - d["change"]
        else:
            d["last"] = getattr(snap, "value", None) or getattr(snap, "price", None)
            d["prev_close"] = None

        if d["last"] is None:
            d["last"] = _last_from_trade_or_quote(snap)
        return d


def _last_from_trade_or_quote(snap: Any) -> Optional[float]:
    lt = getattr(snap, "last_trade", None)
    if lt and getattr(lt, "price", None) is not None:
        return lt.price
    lq = getattr(snap, "last_quote", None)
    if lq:
        ask = getattr(lq, "ask", None)
        bid = getattr(lq, "bid", None)
        if ask and bid:
            return (ask + bid) / 2
    return None
