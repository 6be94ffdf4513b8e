"""Raw terminal input decoding."""

import enum
from dataclasses import dataclass


class KeyKind(enum.Enum):
    CHAR = "char"
    ENTER = "enter"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    ESC = "esc"
    CTRL_C = "ctrl_c"
    CTRL_U = "ctrl_u"
    RESIZE = "resize"


@dataclass(frozen=True)
class Key:
    kind: KeyKind
    char: str = ""


# CSI sequences we act on; anything else is dropped
_CSI: dict[bytes, KeyKind] = {
    b"A": KeyKind.UP,
    b"B": KeyKind.DOWN,
    b"5~": KeyKind.PAGE_UP,
    b"6~": KeyKind.PAGE_DOWN,
}


def decode_keys(data: bytes) -> list[Key]:
    """Turn one read() worth of raw-mode stdin bytes into key events.

    A lone ESC byte (not followed by '[' or 'O') is the Esc key.
    """
    keys: list[Key] = []
    text = data.decode("utf-8", errors="replace")
    i = 0
    while i < len(text):
        ch = text[i]
        i += 1

        if ch == "\x1b":
            if i < len(text) and text[i] in "[O":
                # CSI / SS3: parameters then a final byte in @..~
                j = i + 1
                while j < len(text) and not ("@" <= text[j] <= "~"):
                    j += 1
                seq = text[i + 1 : j + 1].encode()
                i = j + 1
                kind = _CSI.get(seq)
                if kind is not None:
                    keys.append(Key(kind))
            else:
                keys.append(Key(KeyKind.ESC))
        elif ch in "\r\n":
            keys.append(Key(KeyKind.ENTER))
        elif ch in "\x7f\x08":
            keys.append(Key(KeyKind.BACKSPACE))
        elif ch == "\x03":
            keys.append(Key(KeyKind.CTRL_C))
        elif ch == "\x15":
            keys.append(Key(KeyKind.CTRL_U))
        elif ch >= " ":
            keys.append(Key(KeyKind.CHAR, ch))
        # Other control characters are ignored

    return keys
