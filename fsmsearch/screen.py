"""A small full-screen terminal view redrawn from lines of text."""

from __future__ import annotations

import queue
import shutil
import threading
import time
from collections.abc import Mapping
from typing import Any, Callable, Optional, TextIO, Union

__all__ = [
    "CLEAR_LINE",
    "CLEAR_REST_OF_SCREEN",
    "CLEAR_SCREEN",
    "DOWN",
    "HIDE_CURSOR",
    "LEFT",
    "RIGHT",
    "Screen",
    "UP",
]

UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"

HIDE_CURSOR = "\033[?25l"
CLEAR_LINE = "\u001b[0K"
CLEAR_REST_OF_SCREEN = "\u001b[0J"
CLEAR_SCREEN = "\033[H\033[2J"
_HOME = "\033[1;0H"

_BACKSPACE = 127
_ENTER = 13
_ESCAPE = 27
_BRACKET = 91
_ARROWS = {65: UP, 66: DOWN, 67: RIGHT, 68: LEFT}

_READ_INTERVAL = 0.01
_REFRESH_INTERVAL = 0.05

Template = Union[str, Callable[[Any], str]]


class Screen:
    """Keeps typed input, sends it to ``output`` and redraws changed lines.

    ``output`` receives the current input text after every edit, or one of
    ``UP``, ``DOWN``, ``LEFT`` and ``RIGHT`` for the arrow keys.
    """

    def __init__(
        self,
        writer: TextIO,
        output: Callable[[str], Any],
        width: Optional[int] = None,
    ) -> None:
        self.writer = writer
        self.output = output
        self.width = width
        self.input = ""
        self.current_lines: list[str] = []
        self.next_lines: list[str] = []
        self.changed = True
        self._escape = False
        self._bracket = False
        self._template: Optional[Template] = None
        self._lock = threading.RLock()
        self._keys: queue.Queue[str] = queue.Queue()
        self._stopped = threading.Event()
        self._threads: list[threading.Thread] = []
        self._restore_terminal: Optional[Callable[[], None]] = None

    def set_template(self, template: Template) -> None:
        """Set how a state is rendered: a callable, or a ``str.format`` pattern."""
        self._template = template

    def set_state(self, state: Any) -> None:
        """Render ``state`` with the template and show the resulting lines."""
        template = self._template
        if template is None:
            raise RuntimeError("no template has been set")
        if callable(template):
            text = template(state)
        else:
            fields = state if isinstance(state, Mapping) else vars(state)
            text = template.format_map(fields)
        self.set_lines(text.split("\n"))

    def set_lines(self, lines: list[str]) -> None:
        with self._lock:
            self.next_lines = list(lines)
            self.changed = True

    def handle_key(self, char: str) -> Optional[str]:
        """Process one key; return what was sent to ``output``, if anything."""
        code = ord(char)
        emitted: Optional[str] = None
        with self._lock:
            if code == _BACKSPACE:
                if self.input:
                    self.input = self.input[:-1]
                    emitted = self.input
            elif code == _ENTER:
                self.input = ""
                emitted = self.input
            else:
                if code == _ESCAPE:
                    self._escape = True
                if self._escape and code == _BRACKET:
                    self._bracket = True
                elif self._escape and self._bracket and code in _ARROWS:
                    emitted = _ARROWS[code]
                    self._escape = False
                    self._bracket = False
                elif 32 <= code <= 127:
                    self.input += char
                    self.changed = False
                    emitted = self.input
        if emitted is not None:
            self.output(emitted)
        return emitted

    def refresh(self) -> bool:
        """Redraw if the lines changed since the last redraw; report whether it did."""
        with self._lock:
            drawn = self.changed
            if drawn:
                self._swap_out(self.current_lines, self.next_lines)
                self.current_lines = self.next_lines
            self.changed = False
        return drawn

    def run(self, stream: TextIO, on_exit: Callable[[], Any]) -> None:
        """Start reading keys from ``stream`` and redrawing in the background.

        Typing ``Q`` calls ``on_exit``.
        """
        self._write(HIDE_CURSOR)
        self._make_raw(stream)
        self._stopped.clear()
        self._threads = [
            threading.Thread(target=self._read_input, args=(stream, on_exit), daemon=True),
            threading.Thread(target=self._update, daemon=True),
        ]
        for thread in self._threads:
            thread.start()

    def stop(self) -> None:
        """Stop the background work and restore the terminal."""
        self._stopped.set()
        for thread in self._threads:
            thread.join(timeout=_REFRESH_INTERVAL * 4)
        self._threads = []
        if self._restore_terminal is not None:
            self._restore_terminal()
            self._restore_terminal = None

    def _read_input(self, stream: TextIO, on_exit: Callable[[], Any]) -> None:
        while not self._stopped.is_set():
            char = stream.read(1)
            if not char:
                return
            if char == "Q":
                on_exit()
                return
            self._keys.put(char)
            time.sleep(_READ_INTERVAL)

    def _update(self) -> None:
        self._write(CLEAR_SCREEN)
        next_tick = time.monotonic() + _REFRESH_INTERVAL
        while not self._stopped.is_set():
            timeout = max(0.0, next_tick - time.monotonic())
            try:
                self.handle_key(self._keys.get(timeout=timeout))
            except queue.Empty:
                pass
            if time.monotonic() >= next_tick:
                self.refresh()
                next_tick += _REFRESH_INTERVAL

    def _swap_out(self, current: list[str], following: list[str]) -> None:
        out = [_HOME]
        width: Optional[int] = None
        row_changed = False
        for i, line in enumerate(following):
            if i >= len(current):
                out += [line, CLEAR_LINE, "\n\r"]
                continue
            if width is None:
                width = self.width or shutil.get_terminal_size().columns
            # Lines wider than the terminal wrap and shift every row below them.
            if len(line) // width > 0:
                row_changed = True
            if not row_changed and current[i] == line:
                out.append("\r\n")
                continue
            out += [line, CLEAR_LINE, "\n\r"]
        out.append(CLEAR_REST_OF_SCREEN)
        self._write("".join(out))

    def _write(self, text: str) -> None:
        self.writer.write(text)
        flush = getattr(self.writer, "flush", None)
        if flush is not None:
            flush()

    def _make_raw(self, stream: TextIO) -> None:
        try:
            import termios
            import tty
        except ImportError:
            return
        try:
            fd = stream.fileno()
        except (AttributeError, OSError, ValueError):
            return
        if not hasattr(stream, "isatty") or not stream.isatty():
            return
        saved = termios.tcgetattr(fd)
        tty.setraw(fd)
        self._restore_terminal = lambda: termios.tcsetattr(fd, termios.TCSADRAIN, saved)