import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from tickr.constants import CLOCK_INTERVAL, MARKET_INTERVAL, QUOTES_INTERVAL

CLOCK = "clock"
QUOTES = "quotes"
MARKET = "market"


@dataclass(frozen=True)
class Tick:
    name: str


class Ticker:
    """A periodic trigger with its own phase.

    A ticker that falls behind fires once and skips the periods it missed,
    so a slow consumer never sees a burst of stale ticks.
    """

    def __init__(self, name: str, interval: float, clock: Callable[[], float] = time.monotonic):
        self.name = name
        self.interval = interval
        self._clock = clock
        self.next_fire = clock() + interval

    def remaining(self) -> float:
        return max(0.0, self.next_fire - self._clock())

    def due(self) -> bool:
        return self._clock() >= self.next_fire

    def consume(self) -> Tick:
        now = self._clock()
        while self.next_fire <= now:
            self.next_fire += self.interval
        return Tick(self.name)


class RefreshScheduler:
    """The clock, quotes and market tickers, each on an independent cadence."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.tickers: List[Ticker] = [
            Ticker(CLOCK, CLOCK_INTERVAL, clock),
            Ticker(QUOTES, QUOTES_INTERVAL, clock),
            Ticker(MARKET, MARKET_INTERVAL, clock),
        ]

    def pop_due(self) -> Optional[Tick]:
        """Return the tick of the most overdue ticker, or None if none is due."""
        due = [t for t in self.tickers if t.due()]
        if not due:
            return None
        return min(due, key=lambda t: t.next_fire).consume()

    def timeout(self) -> float:
        """Seconds until the earliest ticker fires."""
        return min(t.remaining() for t in self.tickers)
