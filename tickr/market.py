import time
from typing import Any, Dict, List, Optional

from tickr.quotes import describe_error


class Market:
    """US market session status and the headline indices."""

    def __init__(self, provider, indices: List[str]):
        self.provider = provider
        self.index_tickers = list(indices)
        self.indices: Dict[str, Dict[str, Any]] = {}
        self.is_open = False
        self.session = ""
        self.updated: Optional[float] = None
        self.error = ""

    def fetch(self):
        """Refresh status and index values, keeping previous values on failure."""
        try:
            status = self.provider.fetch_market_status()
            snaps = self.provider.fetch_snapshots(self.index_tickers)
        except Exception as e:
            self.error = describe_error(e)
            return
        self.is_open = status.get("market_is_open", False)
        if status.get("early_hours"):
            self.session = "pre-market"
        elif status.get("after_hours"):
            self.session = "after hours"
        else:
            self.session = "open" if self.is_open else "closed"
        for d in snaps:
            self.indices[d["ticker"]] = d
        self.updated = time.time()
        self.error = ""
