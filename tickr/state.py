from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Mode(Enum):
    NORMAL = "normal"
    HELP = "help"
    LINE_EDIT = "line_edit"
    COLUMN_EDIT = "column_edit"


EDITOR_MODES = (Mode.LINE_EDIT, Mode.COLUMN_EDIT)


@dataclass
class SessionState:
    mode: Mode = Mode.NORMAL
    paused: bool = False
    offset: int = 0
    # Active LineEditor or ColumnEditor; set iff mode is one of EDITOR_MODES
    editor: Optional[Any] = None

    @property
    def showing_help(self) -> bool:
        return self.mode is Mode.HELP

    def enter_editor(self, mode: Mode, editor: Any):
        if mode not in EDITOR_MODES:
            raise ValueError(f"{mode} is not an editor mode")
        self.mode = mode
        self.editor = editor

    def release_editor(self):
        self.editor = None
        self.mode = Mode.NORMAL
