"""Key identifier normalization for typing sessions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class KeyKind(str, Enum):
    """Kind of key a session reacts to."""

    CHARACTER = "character"
    BACKSPACE = "backspace"
    TAB = "tab"
    ENTER = "enter"


@dataclass(frozen=True)
class KeyEvent:
    """A single key press relevant to typing.

    ``char`` is the character the key produces (`' '` for Space, `'\\n'` for
    Enter, `'\\t'` for Tab) and empty for Backspace.
    """

    kind: KeyKind
    char: str = ""

    @property
    def label(self) -> str:
        """Human-readable key name for the recent keys display."""
        if self.kind == KeyKind.CHARACTER:
            return "Space" if self.char == " " else self.char
        return self.kind.value.capitalize()


NAMED_KEYS = {
    "backspace": KeyEvent(KeyKind.BACKSPACE),
    "tab": KeyEvent(KeyKind.TAB, "\t"),
    "enter": KeyEvent(KeyKind.ENTER, "\n"),
    "return": KeyEvent(KeyKind.ENTER, "\n"),
    "space": KeyEvent(KeyKind.CHARACTER, " "),
}

CONTROL_CHARS = {
    "\b": NAMED_KEYS["backspace"],
    "\t": NAMED_KEYS["tab"],
    "\n": NAMED_KEYS["enter"],
    "\r": NAMED_KEYS["enter"],
}


def parse_key(key: str) -> Optional[KeyEvent]:
    """Turn a raw key identifier into a KeyEvent.

    Accepts a single printable character, a control character for
    Backspace/Tab/Enter, or a key name (``Backspace``, ``Tab``, ``Enter``,
    ``Space``, in any case, e.g. ``BACKSPACE``).

    Args:
        key: Raw key identifier

    Returns:
        KeyEvent, or None for keys that do not take part in typing
        (modifiers, function keys, navigation)
    """
    if not key:
        return None

    if len(key) == 1:
        if key in CONTROL_CHARS:
            return CONTROL_CHARS[key]
        if not key.isprintable():
            return None
        return KeyEvent(KeyKind.CHARACTER, key)

    return NAMED_KEYS.get(key.lower())


def is_typing_key(key: str) -> bool:
    """Check whether a raw key identifier is handled by typing sessions."""
    return parse_key(key) is not None
