from types import SimpleNamespace

import pytest

from tickr import provider as provider_mod
from tickr.provider import MassiveProvider


class StubClient:
    def __init__(self, snapshots=None, status=None):
        self.snapshots = snapshots or []
        self.status = status
        self.requested = []

    def list_universal_snapshots(self, ticker_any_of):
        self.requested.append(ticker_any_of)
        return iter(self.snapshots)

    def get_market_status(self):
        return self.status


@pytest.fixture
def make_provider(monkeypatch):
    def make(client):
        monkeypatch.setattr(provider_mod, "RESTClient", lambda api_key: client)
        return MassiveProvider("key")
    return make


def test_stock_snapshot_derives_prev_close(make_provider):
    session = SimpleNamespace(close=101.0, open=99.0, high=102.0, low=98.5, volume=1200,
                              change=1.0, change_percent=1.0)
    client = StubClient([SimpleNamespace(ticker="AAPL", session=session)])
    rows = make_provider(client).fetch_snapshots(["AAPL"])
    assert rows == [{"ticker": "AAPL", "last": 101.0, "open": 99.0, "high": 102.0, "low": 98.5,
                     "volume": 1200, "change": 1.0, "change_pct": 1.0, "prev_close": 100.0}]


def test_index_snapshot_and_errors_skipped(make_provider):
    client = StubClient([
        SimpleNamespace(ticker="I:SPX", session=None, value=5000.0, change=-10.0, change_percent=-0.2),
        SimpleNamespace(ticker="BOGUS", error="NOT_FOUND"),
        SimpleNamespace(ticker=None),
    ])
    rows = make_provider(client).fetch_snapshots(["I:SPX", "BOGUS"])
    assert len(rows) == 1
    assert rows[0]["last"] == 5000.0
    assert rows[0]["change_pct"] == -0.2
    assert rows[0]["prev_close"] is None


def test_last_falls_back_to_quote_midpoint(make_provider):
    snap = SimpleNamespace(ticker="KO", session=None, last_quote=SimpleNamespace(ask=60.2, bid=60.0))
    rows = make_provider(StubClient([snap])).fetch_snapshots(["KO"])
    assert rows[0]["last"] == pytest.approx(60.1)


def test_empty_ticker_list_skips_request(make_provider):
    client = StubClient()
    assert make_provider(client).fetch_snapshots([]) == []
    assert client.requested == []


def test_market_status(make_provider):
    status = SimpleNamespace(market="extended-hours", after_hours=True, early_hours=False, server_time="t")
    result = make_provider(StubClient(status=status)).fetch_market_status()
    assert result["market_is_open"] is False
    assert result["after_hours"] is True
