from typing import Any, Optional

from rich.text import Text

from tickr.constants import DISPLAY_NAMES


def fmt_price(val: Optional[float], large: bool = False, style: str = "cyan") -> Text:
    if val is None:
        return Text("—", style="dim")
    if large:
        return Text(f"{val:,.2f}", style=style)
    return Text(f"{val:.2f}", style=style)


def fmt_change(val: Optional[float], large: bool = False) -> Text:
    if val is None:
        return Text("—", style="dim")
    sign = "+" if val >= 0 else ""
    s = f"{sign}{val:,.2f}" if large else f"{sign}{val:.2f}"
    style = "green" if val >= 0 else "red"
    return Text(s, style=style)


def fmt_pct(val: Optional[float]) -> Text:
    if val is None:
        return Text("—", style="dim")
    sign = "+" if val >= 0 else ""
    s = f"{sign}{val:.2f}%"
    style = "green" if val >= 0 else "red"
    return Text(s, style=style)


def fmt_volume(val: Optional[float]) -> Text:
    if val is None:
        return Text("—", style="dim")
    if val >= 1_000_000_000:
        s = f"{val / 1_000_000_000:.1f}B"
    elif val >= 1_000_000:
        s = f"{val / 1_000_000:.1f}M"
    elif val >= 1_000:
        s = f"{val / 1_000:.1f}K"
    else:
        s = str(int(val))
    return Text(s, style="cyan")


def fmt_cell(key: str, row: dict) -> Any:
    """Format one quote cell by column key."""
    val = row.get(key)
    if key == "ticker":
        return Text(str(val), style="bold white")
    if key == "change":
        return fmt_change(val)
    if key == "change_pct":
        return fmt_pct(val)
    if key == "volume":
        return fmt_volume(val)
    if key == "last":
        chg = row.get("change")
        style = "green" if chg is not None and chg >= 0 else "red" if chg is not None else "cyan"
        return fmt_price(val, style=style)
    return fmt_price(val)


def display_name(ticker: str) -> str:
    return DISPLAY_NAMES.get(ticker, ticker)
