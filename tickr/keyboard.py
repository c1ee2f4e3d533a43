import os
import queue
import select
import shutil
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

ESC_SEQUENCE_TIMEOUT = 0.05
POLL_INTERVAL = 0.25
QUEUE_SIZE = 64


class EventType(Enum):
    KEY = "key"
    RESIZE = "resize"


class Key(Enum):
    ESC = "esc"
    ENTER = "enter"
    BACKSPACE = "backspace"
    DELETE = "delete"
    TAB = "tab"
    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ARROW_LEFT = "left"
    ARROW_RIGHT = "right"
    PGUP = "pgup"
    PGDN = "pgdn"
    HOME = "home"
    END = "end"


@dataclass(frozen=True)
class KeyEvent:
    """A keyboard or resize event.

    Key events carry either a printable character in ``ch`` or a special key
    in ``key``; terminals differ in which channel they use for some keys.
    """
    type: EventType = EventType.KEY
    key: Optional[Key] = None
    ch: str = ""


RESIZE_EVENT = KeyEvent(type=EventType.RESIZE)


class Command(Enum):
    NONE = "none"
    QUIT = "quit"
    ADD_REMOVE = "add_remove"
    FILTER = "filter"
    CLEAR_FILTER = "clear_filter"
    COLUMNS = "columns"
    REGROUP = "regroup"
    PAUSE = "pause"
    HELP = "help"
    SCROLL_DOWN = "scroll_down"
    SCROLL_UP = "scroll_up"


_CHAR_COMMANDS = {
    "+": Command.ADD_REMOVE,
    "-": Command.ADD_REMOVE,
    "f": Command.FILTER,
    "F": Command.CLEAR_FILTER,
    "o": Command.COLUMNS,
    "O": Command.COLUMNS,
    "g": Command.REGROUP,
    "G": Command.REGROUP,
    "p": Command.PAUSE,
    "P": Command.PAUSE,
    "?": Command.HELP,
    "h": Command.HELP,
    "H": Command.HELP,
}

_KEY_COMMANDS = {
    Key.PGDN: Command.SCROLL_DOWN,
    Key.ARROW_DOWN: Command.SCROLL_DOWN,
    Key.PGUP: Command.SCROLL_UP,
    Key.ARROW_UP: Command.SCROLL_UP,
}


def classify(event: KeyEvent) -> Command:
    """Map a Normal-mode key event to the command it triggers."""
    if event.type is not EventType.KEY:
        return Command.NONE
    if event.key is Key.ESC or event.ch in ("q", "Q"):
        return Command.QUIT
    if event.ch in _CHAR_COMMANDS:
        return _CHAR_COMMANDS[event.ch]
    # A character with no command still lets the key channel through
    return _KEY_COMMANDS.get(event.key, Command.NONE)


# -- Decoding ----------------------------------------------------------

_ESC_SEQUENCES = {
    "[A": Key.ARROW_UP, "OA": Key.ARROW_UP,
    "[B": Key.ARROW_DOWN, "OB": Key.ARROW_DOWN,
    "[C": Key.ARROW_RIGHT, "OC": Key.ARROW_RIGHT,
    "[D": Key.ARROW_LEFT, "OD": Key.ARROW_LEFT,
    "[H": Key.HOME, "OH": Key.HOME, "[1~": Key.HOME, "[7~": Key.HOME,
    "[F": Key.END, "OF": Key.END, "[4~": Key.END, "[8~": Key.END,
    "[3~": Key.DELETE,
    "[5~": Key.PGUP,
    "[6~": Key.PGDN,
}

_CONTROL_KEYS = {
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
    "\t": Key.TAB,
}


def _read_escape(data: str, i: int) -> Tuple[Optional[Key], int]:
    """Decode the escape sequence starting at data[i] (the ESC byte).

    Returns the key (None for unrecognised sequences) and the index after it.
    """
    if i + 1 >= len(data):
        return Key.ESC, i + 1
    intro = data[i + 1]
    if intro == "O" and i + 2 < len(data):
        return _ESC_SEQUENCES.get(data[i + 1:i + 3]), i + 3
    if intro != "[":
        # ESC followed by an ordinary key: a lone escape, the key is decoded next
        return Key.ESC, i + 1
    j = i + 2
    # CSI: parameter bytes then one final byte in @..~
    while j < len(data) and not ("@" <= data[j] <= "~"):
        j += 1
    seq = data[i + 1:j + 1]
    return _ESC_SEQUENCES.get(seq), j + 1


def decode(data: str) -> List[KeyEvent]:
    """Split a chunk of raw terminal input into key events."""
    events: List[KeyEvent] = []
    i = 0
    while i < len(data):
        c = data[i]
        if c == "\x1b":
            key, i = _read_escape(data, i)
            if key is not None:
                events.append(KeyEvent(key=key))
            continue
        if c in _CONTROL_KEYS:
            events.append(KeyEvent(key=_CONTROL_KEYS[c]))
        elif c.isprintable():
            events.append(KeyEvent(ch=c))
        i += 1
    return events


# -- Terminal helpers --------------------------------------------------

@contextmanager
def cbreak_terminal(fd: Optional[int] = None):
    """Put the terminal in cbreak mode, restoring the original settings on exit."""
    import termios
    import tty

    if fd is None:
        fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield fd
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def get_single_key() -> str:
    """Block until a single key press and return its character."""
    with cbreak_terminal() as fd:
        return os.read(fd, 1).decode("utf-8", errors="ignore")


# -- Producer ----------------------------------------------------------

class KeyboardPoller:
    """Background thread turning terminal input into events on a queue.

    Also watches the terminal size and emits a resize event when it changes.
    It never touches session state; the session loop is the only consumer.
    """

    def __init__(self, events: "queue.Queue[KeyEvent]", fd: Optional[int] = None,
                 get_size: Callable[[], os.terminal_size] = shutil.get_terminal_size):
        self.events = events
        self._fd = sys.stdin.fileno() if fd is None else fd
        self._get_size = get_size
        self._size: Optional[os.terminal_size] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self):
        self._size = self._get_size()
        self._thread = threading.Thread(target=self._run, name="tickr-keyboard", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(POLL_INTERVAL * 2)

    def _read(self) -> str:
        data = os.read(self._fd, 64)
        if not data:
            raise EOFError
        # A trailing ESC may be the start of a sequence split across reads
        while data.endswith(b"\x1b"):
            ready, _, _ = select.select([self._fd], [], [], ESC_SEQUENCE_TIMEOUT)
            if not ready:
                break
            more = os.read(self._fd, 64)
            if not more:
                break
            data += more
        return data.decode("utf-8", errors="ignore")

    def _run(self):
        while not self._stop.is_set():
            try:
                ready, _, _ = select.select([self._fd], [], [], POLL_INTERVAL)
                chunk = self._read() if ready else ""
            except (OSError, ValueError, EOFError):
                return
            for event in decode(chunk):
                self.events.put(event)
            new_size = self._get_size()
            if new_size != self._size:
                self._size = new_size
                self.events.put(RESIZE_EVENT)
