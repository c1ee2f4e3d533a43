import pytest

from tickr.config import Config
from tickr.market import Market
from tickr.profile import Profile
from tickr.quotes import Quotes
from tickr.scheduler import RefreshScheduler
from tickr.state import SessionState

DRAWS = ("time", "market", "quotes", "normal", "help")


class FakeClock:
    def __init__(self, t: float = 0.0):
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float):
        self.t += seconds


class FakeScreen:
    """Records what the session asks the screen to do."""

    def __init__(self, visible_rows: int = 10):
        self.visible_rows = visible_rows
        self.config = Config()
        self.calls = []
        self.paused = False
        self.prompt = None
        self.selected_column = None

    def clear(self):
        self.calls.append(("clear",))
        return self

    def pause(self, paused):
        self.paused = paused
        self.calls.append(("pause", paused))
        return self

    def draw_time(self, now):
        self.calls.append(("time", self.paused))

    def draw_market(self, market):
        self.calls.append(("market",))

    def draw_quotes(self, quotes):
        self.calls.append(("quotes",))

    def draw_normal(self, market, quotes):
        self.calls.append(("normal",))

    def draw_help(self, text):
        self.calls.append(("help",))

    def draw_prompt(self, prompt):
        self.prompt = prompt
        self.calls.append(("prompt",))

    def draws(self):
        return [c[0] for c in self.calls if c[0] in DRAWS]


class FakeProvider:
    def __init__(self, data=None):
        self.data = data or {}
        self.snapshot_calls = []
        self.status_calls = 0
        self.fail = None

    def fetch_snapshots(self, tickers):
        self.snapshot_calls.append(list(tickers))
        if self.fail:
            raise self.fail
        return [dict(self.data[t]) for t in tickers if t in self.data]

    def fetch_market_status(self):
        self.status_calls += 1
        if self.fail:
            raise self.fail
        return {"market_is_open": True, "market": "open"}


def quote(ticker, last=None, change=None, change_pct=None, volume=None):
    return {"ticker": ticker, "last": last, "change": change, "change_pct": change_pct,
            "open": None, "low": None, "high": None, "prev_close": None, "volume": volume}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return FakeProvider({
        "AAPL": quote("AAPL", 190.0, 1.5, 0.8, 50_000_000),
        "IBM": quote("IBM", 140.0, -2.0, -1.4, 3_000_000),
        "KO": quote("KO", 60.0, 0.1, 0.2, 10_000_000),
        "MSFT": quote("MSFT", 410.0, 3.0, 0.7, 20_000_000),
        "I:DJI": quote("I:DJI", 38000.0, 120.0, 0.3),
    })


@pytest.fixture
def profile(tmp_path):
    p = Profile(str(tmp_path / "profile.json"), load=False)
    p.tickers = ["AAPL", "IBM", "KO"]
    p.save()
    return p


@pytest.fixture
def quotes(provider, profile):
    return Quotes(provider, profile)


@pytest.fixture
def market(provider):
    return Market(provider, ["I:DJI"])


@pytest.fixture
def screen():
    return FakeScreen()


@pytest.fixture
def state():
    return SessionState()


@pytest.fixture
def scheduler(clock):
    return RefreshScheduler(clock)
