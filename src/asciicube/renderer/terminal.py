"""Small helper for driving an ANSI terminal as the render surface."""

from __future__ import annotations

import fcntl
import os
import select
import shutil
import struct
import sys
import termios
import tty
from typing import List, Optional, TextIO, Tuple

TermiosAttr = List[int | List[bytes | int]]

FALLBACK_CELL_SIZE = (10, 20)


class SurfaceUnavailableError(RuntimeError):
    """Raised at start-up when there is no terminal to draw into."""


def measure_cell_size(fd: Optional[int] = None) -> Tuple[int, int]:
    """Return the pixel size of one character cell as ``(width, height)``.

    Uses the pixel fields of ``TIOCGWINSZ``; many terminals leave them at zero,
    in which case a typical 1:2 monospace cell is assumed.
    """
    if fd is None:
        try:
            fd = sys.stdout.fileno()
        except (AttributeError, OSError, ValueError):
            return FALLBACK_CELL_SIZE

    try:
        packed = fcntl.ioctl(fd, termios.TIOCGWINSZ, b"\0" * 8)
    except OSError:
        return FALLBACK_CELL_SIZE

    rows, cols, x_pixels, y_pixels = struct.unpack("HHHH", packed)
    if rows == 0 or cols == 0 or x_pixels == 0 or y_pixels == 0:
        return FALLBACK_CELL_SIZE
    return max(1, x_pixels // cols), max(1, y_pixels // rows)


class TerminalController:
    """Context manager that prepares the terminal for smooth animations."""

    def __init__(self, *, clear: bool = True, stream: Optional[TextIO] = None) -> None:
        self._clear = clear
        self._stream = stream if stream is not None else sys.stdout
        self._cursor_hidden = False
        self._stdin_fd: Optional[int] = None
        self._termios_before: Optional[TermiosAttr] = None
        self._input_enabled = False

    def __enter__(self) -> "TerminalController":
        if not self._stream.isatty():
            raise SurfaceUnavailableError("stdout is not a terminal; use --once to print a single frame")

        if self._clear:
            self._stream.write("\033[2J")
        self._stream.write("\033[H")
        self._stream.write("\033[?25l")
        self._stream.flush()
        self._cursor_hidden = True

        if sys.stdin.isatty():
            fd = sys.stdin.fileno()
            self._stdin_fd = fd
            try:
                self._termios_before = termios.tcgetattr(fd)
                tty.setcbreak(fd)
                self._input_enabled = True
            except termios.error:
                self._termios_before = None
                self._stdin_fd = None
                self._input_enabled = False
        else:
            self._stdin_fd = None
            self._termios_before = None
            self._input_enabled = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        if self._cursor_hidden:
            self._stream.write("\033[0m")
            self._stream.write("\033[?25h")
            self._stream.write("\n")
            self._stream.flush()
            self._cursor_hidden = False

        if self._input_enabled and self._stdin_fd is not None and self._termios_before is not None:
            try:
                termios.tcsetattr(self._stdin_fd, termios.TCSADRAIN, self._termios_before)
            except termios.error:
                pass
        self._input_enabled = False
        self._stdin_fd = None
        self._termios_before = None

    def draw(self, frame: str) -> None:
        """Paint ``frame`` from the home position, cropped to the visible cells.

        A grid held at its minimum size can be wider than the terminal; cropping
        keeps rows from wrapping and the bottom line free.
        """
        columns, lines = self.size_tuple()
        rows = frame.split("\n")[: max(1, lines - 1)]
        self._stream.write("\033[H")
        self._stream.write("\n".join(row[:columns] for row in rows))
        self._stream.flush()

    def clear(self) -> None:
        self._stream.write("\033[2J")
        self._stream.flush()

    def get_size(self) -> os.terminal_size:
        return shutil.get_terminal_size(fallback=(80, 24))

    def size_tuple(self) -> Tuple[int, int]:
        size = self.get_size()
        return size.columns, size.lines

    def surface_pixels(self) -> Tuple[int, int, int, int]:
        """Return ``(width_px, height_px, cell_width, cell_height)`` for the drawable area.

        The bottom line is left free so writing the last row never scrolls.
        """
        columns, lines = self.size_tuple()
        cell_width, cell_height = measure_cell_size(self._fileno())
        return columns * cell_width, max(1, lines - 1) * cell_height, cell_width, cell_height

    def poll_keys(self) -> List[str]:
        if not self._input_enabled or self._stdin_fd is None:
            return []

        keys: List[str] = []
        try:
            while True:
                readable, _, _ = select.select([sys.stdin], [], [], 0)
                if not readable:
                    break

                data = os.read(self._stdin_fd, 1)
                if not data:
                    break

                char = data.decode("utf-8", errors="ignore")
                if not char:
                    continue

                if char == "\x03":
                    raise KeyboardInterrupt

                if char == "\x1b":
                    self._drain_escape_sequence()
                    continue

                keys.append(char)
        except OSError:
            return keys

        return keys

    def _fileno(self) -> Optional[int]:
        try:
            return self._stream.fileno()
        except (AttributeError, OSError, ValueError):
            return None

    def _drain_escape_sequence(self) -> None:
        # Arrow keys and friends arrive as ESC [ ... <letter>; none of them are bound.
        if self._stdin_fd is None:
            return

        while True:
            readable, _, _ = select.select([sys.stdin], [], [], 0)
            if not readable:
                break
            data = os.read(self._stdin_fd, 1)
            if not data:
                break
            char = data.decode("utf-8", errors="ignore")
            if char.isalpha() or char == "~":
                break
