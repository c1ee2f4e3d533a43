import re
from typing import List, Optional

from rich.text import Text

from tickr.filters import FilterError
from tickr.keyboard import EventType, Key, KeyEvent
from tickr.profile import ProfileError

PROMPTS = {
    "+": "Add tickers: ",
    "-": "Remove tickers: ",
    "f": "Set filter: ",
}


def split_tickers(text: str) -> List[str]:
    return [t for t in re.split(r"[,\s]+", text) if t]


class LineEditor:
    """One-line prompt for adding/removing tickers or setting the filter.

    ``handle()`` returns True once the prompt is finished (executed or
    cancelled) and the session should take input back.
    """

    def __init__(self, screen, quotes):
        self.screen = screen
        self.quotes = quotes
        self.command = ""
        self.buffer = ""
        self.cursor = 0
        self.message = ""

    def prompt(self, command: str):
        if command not in PROMPTS:
            raise ValueError(f"no prompt for {command!r}")
        self.command = command
        self.buffer = self.quotes.profile.filter if command == "f" else ""
        self.cursor = len(self.buffer)
        self._draw()

    def handle(self, event: KeyEvent) -> bool:
        if event.type is not EventType.KEY:
            return False
        self.message = ""
        key = event.key

        if key is Key.ESC:
            return self._done()
        if key is Key.ENTER:
            return self._execute()
        if key is Key.BACKSPACE:
            if self.cursor > 0:
                self.buffer = self.buffer[:self.cursor - 1] + self.buffer[self.cursor:]
                self.cursor -= 1
        elif key is Key.DELETE:
            self.buffer = self.buffer[:self.cursor] + self.buffer[self.cursor + 1:]
        elif key is Key.ARROW_LEFT:
            self.cursor = max(0, self.cursor - 1)
        elif key is Key.ARROW_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
        elif key is Key.HOME:
            self.cursor = 0
        elif key is Key.END:
            self.cursor = len(self.buffer)
        elif event.ch:
            self.buffer = self.buffer[:self.cursor] + event.ch + self.buffer[self.cursor:]
            self.cursor += 1
        self._draw()
        return False

    def _execute(self) -> bool:
        try:
            if self.command == "+":
                self.quotes.add_tickers(split_tickers(self.buffer))
            elif self.command == "-":
                self.quotes.remove_tickers(split_tickers(self.buffer))
            else:
                self.quotes.profile.set_filter(self.buffer)
        except FilterError as e:
            # Keep the prompt open so the expression can be fixed
            self.message = str(e)
            self._draw()
            return False
        except ProfileError as e:
            self.quotes.error = str(e)
        return self._done()

    def _done(self) -> bool:
        self.screen.prompt = None
        self.screen.draw_quotes(self.quotes)
        return True

    def _draw(self):
        line = Text(PROMPTS[self.command], style="bold")
        line.append(self.buffer[:self.cursor])
        line.append(self.buffer[self.cursor:self.cursor + 1] or " ", style="reverse")
        line.append(self.buffer[self.cursor + 1:])
        if self.message:
            line.append(f"  {self.message}", style="bold red")
        self.screen.draw_prompt(line)


class ColumnEditor:
    """Picks the sort column: left/right to move, Enter to sort, Esc to finish."""

    def __init__(self, screen, quotes, columns: Optional[List[str]] = None):
        self.screen = screen
        self.quotes = quotes
        self.columns = list(columns if columns is not None else screen.config.columns)
        sort_column = quotes.profile.sort_column
        self.selected = self.columns.index(sort_column) if sort_column in self.columns else 0
        self.screen.prompt = Text("Sort by: ←/→ select column, Enter to sort, Esc when done", style="bold")
        self._draw()

    @property
    def column(self) -> str:
        return self.columns[self.selected]

    def handle(self, event: KeyEvent) -> bool:
        if event.type is not EventType.KEY:
            return False
        key = event.key
        if key is Key.ESC:
            self.screen.selected_column = None
            self.screen.prompt = None
            self.screen.draw_quotes(self.quotes)
            return True
        if key is Key.ENTER:
            try:
                self.quotes.profile.reorder(self.column)
            except ProfileError as e:
                self.quotes.error = str(e)
        elif key is Key.ARROW_LEFT:
            self.selected = (self.selected - 1) % len(self.columns)
        elif key is Key.ARROW_RIGHT:
            self.selected = (self.selected + 1) % len(self.columns)
        self._draw()
        return False

    def _draw(self):
        self.screen.selected_column = self.column
        self.screen.draw_quotes(self.quotes)
