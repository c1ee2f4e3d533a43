from datetime import datetime
from typing import Any, List, Optional

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tickr.config import Config
from tickr.constants import COLUMNS, RESERVED_ROWS
from tickr.formatting import display_name, fmt_cell, fmt_change, fmt_pct, fmt_price
from tickr.market import Market
from tickr.profile import Profile
from tickr.quotes import Quotes
from tickr.scroll import max_offset
from tickr.state import SessionState


def make_header(now: datetime, paused_at: Optional[datetime], errors: List[str]) -> Panel:
    left = Text()
    if paused_at is not None:
        left.append(f"paused at {paused_at.strftime('%H:%M:%S')}", style="bold yellow")
    else:
        left.append(now.strftime("%H:%M:%S"), style="bold cyan")
    for err in errors:
        left.append("  ")
        left.append(f"⚠ {err}", style="bold yellow")

    right = Text("[?] Help  [q] Quit", style="dim")

    header_table = Table(expand=True, box=None, show_header=False, padding=0)
    header_table.add_column("left")
    header_table.add_column("right", justify="right")
    header_table.add_row(left, right)

    return Panel(header_table, title="[bold grey70]TICKR[/bold grey70]", border_style="grey70")


def build_market_panel(market: Optional[Market]) -> Panel:
    line = Text()
    if market is None or not market.indices:
        line.append("loading...", style="dim")
    else:
        for ticker in market.index_tickers:
            item = market.indices.get(ticker)
            if item is None:
                continue
            line.append(display_name(ticker), style="bold white")
            line.append(" ")
            line.append_text(fmt_price(item.get("last"), large=True))
            line.append(" ")
            line.append_text(fmt_change(item.get("change"), large=True))
            line.append(" (")
            line.append_text(fmt_pct(item.get("change_pct")))
            line.append(")   ")

    subtitle = ""
    if market is not None and market.session:
        subtitle = f"U.S. markets {market.session}"
    return Panel(line, title="[bold grey70]MARKET[/bold grey70]", subtitle=f"[grey46]{subtitle}[/grey46]",
                 subtitle_align="right", border_style="grey70")


def _quotes_subtitle(quotes: Quotes, shown: int, total: int) -> str:
    parts = []
    if quotes.profile.filter:
        parts.append(f"filter: {quotes.profile.filter}")
    if quotes.profile.grouping:
        parts.append("grouped")
    if shown < total:
        parts.append(f"{shown} of {total}")
    if quotes.stale:
        parts.append("stale")
    return ", ".join(parts)


def build_quotes_panel(quotes: Optional[Quotes], columns: List[str], offset: int,
                       visible_rows: int, selected_column: Optional[str] = None) -> Panel:
    """Build the quote table showing ``visible_rows`` rows starting at ``offset``."""
    table = Table(expand=True, box=None, padding=(0, 1))
    profile = quotes.profile if quotes is not None else None

    for key in columns:
        label, justify, min_width = COLUMNS[key]
        if profile is not None and key == profile.sort_column:
            label += " ▲" if profile.ascending else " ▼"
        header_style = "reverse bold" if key == selected_column else "bold"
        table.add_column(label, justify=justify, min_width=min_width, header_style=header_style)

    subtitle = ""
    if quotes is None or not quotes.stocks:
        table.add_row(*["—"] * len(columns))
    else:
        rows = quotes.rows()
        # The list may have shrunk (removed tickers, filter) since the offset was set
        start = min(offset, max_offset(len(rows), visible_rows))
        window = rows[start:start + visible_rows]
        for row in window:
            table.add_row(*[fmt_cell(k, row) for k in columns])
        subtitle = _quotes_subtitle(quotes, len(window), len(rows))

    return Panel(table, title="[bold grey70]QUOTES[/bold grey70]", subtitle=f"[grey46]{subtitle}[/grey46]",
                 subtitle_align="right", border_style="grey70")


class Screen:
    """Full-screen view built with rich.

    Nothing is repainted unless one of the draw methods is called; the
    session decides when that happens.
    """

    def __init__(self, profile: Profile, state: SessionState, config: Config,
                 console: Optional[Console] = None):
        self.profile = profile
        self.state = state
        self.config = config
        self.console = console or Console()
        self.live: Optional[Live] = None

        self.now = datetime.now()
        self.paused_at: Optional[datetime] = None
        self.market: Optional[Market] = None
        self.quotes: Optional[Quotes] = None
        self.help_text: Optional[str] = None
        # Owned by the active editor
        self.prompt: Optional[Text] = None
        self.selected_column: Optional[str] = None

    @property
    def visible_rows(self) -> int:
        return max(1, self.console.size.height - RESERVED_ROWS)

    def open(self):
        self.live = Live(self.render(), console=self.console, screen=True, auto_refresh=False)
        self.live.start()

    def close(self):
        if self.live is not None:
            self.live.stop()
            self.live = None

    def clear(self) -> "Screen":
        self.help_text = None
        return self

    def pause(self, paused: bool) -> "Screen":
        self.paused_at = datetime.now() if paused else None
        return self

    def draw_time(self, now: datetime):
        self.now = now
        self.refresh()

    def draw_market(self, market: Market):
        self.market = market
        self.refresh()

    def draw_quotes(self, quotes: Quotes):
        self.quotes = quotes
        self.refresh()

    def draw_normal(self, market: Market, quotes: Quotes):
        self.market = market
        self.quotes = quotes
        self.refresh()

    def draw_help(self, text: str):
        self.help_text = text
        self.refresh()

    def draw_prompt(self, prompt: Optional[Text]):
        self.prompt = prompt
        self.refresh()

    def render(self) -> Any:
        if self.help_text is not None:
            return Panel(Text.from_markup(self.help_text), border_style="grey70")

        errors = [e for e in (getattr(self.market, "error", ""), getattr(self.quotes, "error", "")) if e]
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="market", size=3),
            Layout(name="quotes", ratio=1),
            Layout(name="prompt", size=1),
        )
        layout["header"].update(make_header(self.now, self.paused_at, errors))
        layout["market"].update(build_market_panel(self.market))
        layout["quotes"].update(build_quotes_panel(
            self.quotes, self.config.columns, self.state.offset, self.visible_rows, self.selected_column))
        layout["prompt"].update(self.prompt if self.prompt is not None else Text(""))
        return layout

    def refresh(self):
        if self.live is not None:
            self.live.update(self.render(), refresh=True)
