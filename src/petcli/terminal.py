"""Terminal mode switching for the full-screen UI."""

import sys
import termios
import tty
from collections.abc import Iterator
from contextlib import contextmanager


@contextmanager
def raw_input_mode(fd: int | None = None) -> Iterator[None]:
    """Put stdin in raw mode for key-by-key reads, keeping output post-processing.

    tty.setraw also turns off OPOST, which would stop "\\n" from returning the
    cursor to column 0 and wreck Rich's screen output, so it is switched back on.
    """
    fd = sys.stdin.fileno() if fd is None else fd
    original = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        attrs = termios.tcgetattr(fd)
        attrs[1] |= termios.OPOST | termios.ONLCR
        termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, original)
