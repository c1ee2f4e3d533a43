import os

# Project root: parent of the tickr/ package directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.ini")
ENV_PATH = os.path.join(PROJECT_ROOT, ".env")

# File name in the user's home directory where the profile is kept
DEFAULT_PROFILE = ".tickrrc"

# Refresh cadences in seconds. Fixed, not read from config.
CLOCK_INTERVAL = 1
QUOTES_INTERVAL = 5
MARKET_INTERVAL = 12

PAGE_LINES = 10

DEFAULT_TICKERS = ["AAPL", "C", "GOOG", "IBM", "KO", "ORCL", "V"]

DISPLAY_NAMES = {
    "I:DJI": "Dow",
    "I:SPX": "S&P 500",
    "I:COMP": "NASDAQ",
    "I:NDX": "Nasdaq 100",
    "I:RUT": "Russell 2000",
    "I:VIX": "VIX",
}

DEFAULT_INDICES = ["I:DJI", "I:SPX", "I:COMP"]

# Quote columns: key -> (header_label, justify, min_width)
COLUMNS = {
    "ticker":     ("Ticker", "left", 8),
    "last":       ("Last", "right", 10),
    "change":     ("Change", "right", 10),
    "change_pct": ("Change%", "right", 9),
    "open":       ("Open", "right", 10),
    "low":        ("Low", "right", 10),
    "high":       ("High", "right", 10),
    "prev_close": ("PrevClose", "right", 10),
    "volume":     ("Volume", "right", 8),
}

DEFAULT_COLUMNS = list(COLUMNS)

# Rows taken by everything above the quote rows: header panel (3),
# market panel (3), quotes panel border (2), quotes header row (1), prompt (1)
RESERVED_ROWS = 10

HELP_TEXT = """[bold]tickr[/bold] -- terminal market dashboard

[underline]Command[/underline]    [underline]Description                                [/underline]
   +       Add stocks to the list.
   -       Remove stocks from the list.
   ?       Display this help screen.
   f       Set filtering expression.
   F       Unset filtering expression.
   g       Group stocks by advancing/declining issues.
   o       Change column sort order.
   p       Pause market data and stock updates.
   PgDn    Scroll down, down arrow key also works.
   PgUp    Scroll up, up arrow key also works.
   q       Quit tickr.
  esc      Ditto.

Enter comma-delimited list of stock tickers when prompted.
Filter example: [cyan]change_pct > 1 && volume > 1000000[/cyan]

[reverse] Press any key to continue [/reverse]
"""
