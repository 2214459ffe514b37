"""
Keystroke readers for interactive prompts.

A keyboard is a context manager with a read() method:

    with keyboard() as keys:
        key = keys.read()

- Entering puts the terminal in single-keystroke, no-echo mode (where the
  reader supports it); leaving always restores the previous mode.
- read() blocks and returns a Key member for special keys, a one-character
  string for printable keys, or None once input is exhausted.
- Ctrl-C raises KeyboardInterrupt; Ctrl-D reads as end of input.

Readers
- TerminalKeyboard: POSIX terminals (termios), reads escape sequences for arrows.
- ConsoleKeyboard: Windows consoles (msvcrt).
- LineKeyboard: any text stream, line-buffered; each line is delivered key by
  key followed by Enter. Used when raw capture is unavailable.
- ScriptedKeyboard: a fixed sequence of keys (tests, non-interactive runs).

keyboard(stream) picks the best reader for a stream.
"""
import enum
import logging
import os
import select
import sys
from collections import deque

from .utils import Unset, coalesce

try:
    import termios
except ImportError:  # Windows
    termios = None

try:
    import msvcrt
except ImportError:  # POSIX
    msvcrt = None

logger = logging.getLogger(__name__)


class Key(enum.Enum):
    ENTER = "enter"
    BACKSPACE = "backspace"
    TAB = "tab"
    ESCAPE = "escape"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    UNKNOWN = "unknown"


_CONTROLS = {
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "\t": Key.TAB,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
}

_SEQUENCES = {
    "[A": Key.UP,
    "[B": Key.DOWN,
    "[C": Key.RIGHT,
    "[D": Key.LEFT,
    "OA": Key.UP,
    "OB": Key.DOWN,
    "OC": Key.RIGHT,
    "OD": Key.LEFT,
}

_SCANCODES = {
    "H": Key.UP,
    "P": Key.DOWN,
    "K": Key.LEFT,
    "M": Key.RIGHT,
}


class Keyboard:
    """
    Base reader: subclasses provide _getch() (one character, "" at end of
    input) and _pending() (whether another character is immediately available).
    """

    def __enter__(self):
        return self

    def __exit__(self, *exception):
        return False

    def _getch(self):
        raise NotImplementedError

    def _pending(self):
        return False

    def _escape(self):
        # ESC [ X, ESC O X, or ESC [ 3 ~ style sequences
        if not self._pending():
            return Key.ESCAPE
        if (sequence := self._getch()) not in ("[", "O"):
            return Key.UNKNOWN
        while self._pending() and len(sequence) < 6:
            sequence += (char := self._getch())
            if not char or char.isalpha() or char == "~":
                break
        return _SEQUENCES.get(sequence, Key.UNKNOWN)

    def _decode(self, char):
        if not char:
            return None
        if char == "\x03":
            raise KeyboardInterrupt
        if char == "\x04":
            return None
        if char == "\x1b":
            return self._escape()
        if char in _CONTROLS:
            return _CONTROLS[char]
        if not char.isprintable():
            return Key.UNKNOWN
        return char

    def read(self):
        return self._decode(self._getch())


class TerminalKeyboard(Keyboard):
    def __init__(self, stream=Unset, /, *, timeout=0.05):
        self._stream = coalesce(stream, sys.stdin)
        self._fd = self._stream.fileno()
        self._timeout = timeout
        self._saved = None

    def __enter__(self):
        self._saved = termios.tcgetattr(self._fd)
        mode = termios.tcgetattr(self._fd)
        mode[3] &= ~(termios.ICANON | termios.ECHO)
        mode[6][termios.VMIN] = 1
        mode[6][termios.VTIME] = 0
        termios.tcsetattr(self._fd, termios.TCSANOW, mode)
        logger.debug("terminal %d switched to raw input", self._fd)
        return self

    def __exit__(self, *exception):
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None
            logger.debug("terminal %d restored", self._fd)
        return False

    def _getch(self):
        data = os.read(self._fd, 1)
        if not data:
            return ""
        # collect the rest of a multibyte UTF-8 character
        while True:
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError:
                if len(data) >= 4:
                    return data.decode("utf-8", "replace")
                data += os.read(self._fd, 1)

    def _pending(self):
        return bool(select.select([self._fd], [], [], self._timeout)[0])


class ConsoleKeyboard(Keyboard):
    def _getch(self):
        return msvcrt.getwch()

    def _pending(self):
        return msvcrt.kbhit()

    def read(self):
        char = self._getch()
        if char in ("\x00", "\xe0"):
            return _SCANCODES.get(self._getch(), Key.UNKNOWN)
        return self._decode(char)


class LineKeyboard(Keyboard):
    def __init__(self, stream=Unset, /):
        self._stream = coalesce(stream, sys.stdin)
        self._buffer = deque()
        self._exhausted = False

    def _fill(self):
        if self._buffer or self._exhausted:
            return
        line = self._stream.readline()
        if not line:
            self._exhausted = True
            return
        self._buffer.extend(line.rstrip("\r\n"))
        self._buffer.append("\n")

    def _getch(self):
        self._fill()
        return self._buffer.popleft() if self._buffer else ""

    def _pending(self):
        return bool(self._buffer) and self._buffer[0] != "\n"


class ScriptedKeyboard(Keyboard):
    """
    Replays keys: Key members are returned as-is, strings are decoded character
    by character exactly like terminal input ("y", "abc", "\\x1b[B", "\\r").
    """

    def __init__(self, keys, /):
        if isinstance(keys, str | Key):
            keys = [keys]
        self._queue = deque()
        for key in keys:
            if isinstance(key, Key):
                self._queue.append(key)
            elif isinstance(key, str):
                self._queue.extend(key)
            else:
                raise TypeError("scripted keys must be strings or Key members")
        self.entered = 0
        self.exited = 0

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, *exception):
        self.exited += 1
        return False

    def _getch(self):
        if not self._queue or isinstance(self._queue[0], Key):
            return ""
        return self._queue.popleft()

    def _pending(self):
        return bool(self._queue) and isinstance(self._queue[0], str)

    def read(self):
        if self._queue and isinstance(self._queue[0], Key):
            return self._queue.popleft()
        return super().read()


def keyboard(stream=Unset, /):
    """
    best reader for the stream: raw terminal, Windows console, or line-buffered.
    """
    stream = coalesce(stream, sys.stdin)
    try:
        interactive = stream.isatty()
    except (AttributeError, ValueError):
        interactive = False

    if interactive and msvcrt is not None and stream is sys.stdin:
        return ConsoleKeyboard()
    if interactive and termios is not None:
        try:
            stream.fileno()
            return TerminalKeyboard(stream)
        except (AttributeError, OSError, ValueError):
            pass
    logger.debug("raw key capture unavailable, reading lines")
    return LineKeyboard(stream)


__all__ = (
    "Key",
    "Keyboard",
    "TerminalKeyboard",
    "ConsoleKeyboard",
    "LineKeyboard",
    "ScriptedKeyboard",
    "keyboard",
)
