"""The session loop.

One thread owns everything here. ``select()`` is the only place the loop
waits: it returns either a due timer tick or the next keyboard event, and
that event is handled to completion before the next wait.

Input ownership is exclusive. In Normal mode key presses are commands; in
LineEdit/ColumnEdit every key goes to the active editor; in Help any key
dismisses the overlay.
"""

import queue
from datetime import datetime
from typing import Callable, Optional, Union

from tickr import scroll
from tickr.constants import HELP_TEXT, PAGE_LINES
from tickr.editors import ColumnEditor, LineEditor
from tickr.keyboard import Command, EventType, KeyEvent, classify
from tickr.profile import ProfileError
from tickr.scheduler import CLOCK, MARKET, QUOTES, RefreshScheduler, Tick
from tickr.state import Mode, SessionState


class Session:
    def __init__(self, state: SessionState, screen, profile, market, quotes,
                 events: Optional["queue.Queue[KeyEvent]"] = None,
                 scheduler: Optional[RefreshScheduler] = None,
                 line_editor=LineEditor, column_editor=ColumnEditor,
                 now: Callable[[], datetime] = datetime.now,
                 page_lines: int = PAGE_LINES):
        self.state = state
        self.screen = screen
        self.profile = profile
        self.market = market
        self.quotes = quotes
        self.events = events if events is not None else queue.Queue()
        self.scheduler = scheduler if scheduler is not None else RefreshScheduler()
        self._line_editor = line_editor
        self._column_editor = column_editor
        self._now = now
        self.page_lines = page_lines

    # -- Loop ------------------------------------------------------------

    def run(self):
        """Draw the initial view, then handle events until the user quits."""
        self.market.fetch()
        self.quotes.fetch()
        self.screen.draw_normal(self.market, self.quotes)
        while True:
            event = self.select()
            if isinstance(event, Tick):
                self.handle_tick(event)
            elif not self.dispatch(event):
                return

    def select(self) -> Union[Tick, KeyEvent]:
        """Block until a timer tick or keyboard event is ready and return it."""
        while True:
            tick = self.scheduler.pop_due()
            if tick is not None:
                return tick
            try:
                return self.events.get(timeout=self.scheduler.timeout())
            except queue.Empty:
                continue

    def dispatch(self, event: KeyEvent) -> bool:
        """Handle one keyboard or resize event. Returns False when the session should end."""
        if event.type is EventType.RESIZE:
            self.handle_resize()
            return True
        return self.handle_key(event)

    # -- Timers ----------------------------------------------------------

    def handle_tick(self, tick: Tick) -> bool:
        """Apply a timer tick; dropped while help is up or updates are paused."""
        if self.state.showing_help or self.state.paused:
            return False
        if tick.name == CLOCK:
            self.screen.draw_time(self._now())
        elif tick.name == QUOTES:
            self.quotes.fetch()
            self.screen.draw_quotes(self.quotes)
        elif tick.name == MARKET:
            self.market.fetch()
            self.screen.draw_market(self.market)
        return True

    # -- Keyboard --------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> bool:
        mode = self.state.mode
        if mode is Mode.NORMAL:
            return self.execute(classify(event), event)
        if mode in (Mode.LINE_EDIT, Mode.COLUMN_EDIT):
            if self.state.editor.handle(event):
                self.state.release_editor()
                self.clamp_offset()
        elif mode is Mode.HELP:
            self.state.mode = Mode.NORMAL
            self.screen.clear().draw_normal(self.market, self.quotes)
        return True

    def handle_resize(self):
        self.clamp_offset()
        if self.state.showing_help:
            self.screen.draw_help(HELP_TEXT)
        else:
            self.screen.draw_normal(self.market, self.quotes)

    def clamp_offset(self):
        """Pull the offset back under the bound after the list or screen changed."""
        self.state.offset = scroll.clamp(self.state.offset, len(self.profile.tickers), self.screen.visible_rows)

    def execute(self, command: Command, event: KeyEvent) -> bool:
        """Run a Normal-mode command. Returns False for quit."""
        if command is Command.QUIT:
            return False

        if command in (Command.ADD_REMOVE, Command.FILTER):
            editor = self._line_editor(self.screen, self.quotes)
            self.state.enter_editor(Mode.LINE_EDIT, editor)
            editor.prompt(event.ch)
        elif command is Command.CLEAR_FILTER:
            try:
                self.profile.set_filter("")
            except ProfileError as e:
                self.quotes.error = str(e)
        elif command is Command.COLUMNS:
            self.state.enter_editor(Mode.COLUMN_EDIT, self._column_editor(self.screen, self.quotes))
        elif command is Command.REGROUP:
            try:
                self.profile.regroup()
            except ProfileError:
                return True
            self.screen.draw_quotes(self.quotes)
        elif command is Command.PAUSE:
            self.state.paused = not self.state.paused
            self.screen.pause(self.state.paused).draw_time(self._now())
        elif command is Command.HELP:
            self.state.mode = Mode.HELP
            self.screen.clear().draw_help(HELP_TEXT)
        elif command is Command.SCROLL_DOWN:
            self.state.offset = scroll.increase(
                self.state.offset, self.page_lines, len(self.profile.tickers), self.screen.visible_rows)
            self.screen.clear().draw_normal(self.market, self.quotes)
        elif command is Command.SCROLL_UP:
            self.state.offset = scroll.decrease(
                self.state.offset, self.page_lines, len(self.profile.tickers), self.screen.visible_rows)
            self.screen.clear().draw_normal(self.market, self.quotes)
        return True
