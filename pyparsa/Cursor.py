from dataclasses import dataclass
from typing import Optional, Union

from .Errors import CursorError


@dataclass(frozen=True)
class SourcePos:
    """A human-readable position in the input, computed on demand for diagnostics."""
    line: int = 1
    column: int = 1
    name: str = ""

    def __str__(self) -> str:
        return f"{self.name} line {self.line}, column {self.column}".lstrip()


@dataclass(frozen=True)
class Mark:
    """An opaque checkpoint returned by `Cursor.mark()`."""
    offset: int


class Cursor:
    """
    A shrinking read window over an immutable string.

    The text is never copied or modified; consuming input only advances the
    offset, so everything already read stays reachable for a rewind. Offsets
    count code points, which are exactly Unicode scalar values in a Python
    `str`, so every offset in `0..len(text)` lies on a scalar boundary.

    >>> c = Cursor("abc123")
    >>> c.take(3)
    'abc'
    >>> c.remaining()
    '123'
    """
    __slots__ = ('_text', '_offset', 'name', '_unchecked')

    def __init__(self, text: str, name: str = ""):
        if not isinstance(text, str):
            raise TypeError(f"Cursor input must be str, not {type(text).__name__}")
        self._text = text
        self._offset = 0
        self.name = name
        self._unchecked = UncheckedCursor(self)

    @property
    def text(self) -> str:
        """The full input, including what has already been consumed."""
        return self._text

    @property
    def offset(self) -> int:
        return self._offset

    # --- Checked operations ---

    def take(self, n: int) -> str:
        """
        Consume the next `n` characters and return them.

        Raises `CursorError` if fewer than `n` remain. Callers must check
        `remaining_len()` first; ordinary parsers should use `try_take`.
        """
        if n < 0:
            raise CursorError(f"take({n}): count must be non-negative")
        if n > self.remaining_len():
            raise CursorError(f"take({n}): insufficient input, only {self.remaining_len()} remaining")
        start = self._offset
        self._offset += n
        return self._text[start:self._offset]

    def try_take(self, n: int) -> Optional[str]:
        """Consume and return the next `n` characters, or return None (without moving) if fewer remain."""
        if n < 0 or n > self.remaining_len():
            return None
        start = self._offset
        self._offset += n
        return self._text[start:self._offset]

    def peek(self, n: int = 1) -> str:
        """Return up to `n` upcoming characters without consuming them."""
        return self._text[self._offset:self._offset + n]

    def remaining(self) -> str:
        return self._text[self._offset:]

    def remaining_len(self) -> int:
        return len(self._text) - self._offset

    def consumed(self) -> str:
        return self._text[:self._offset]

    def at_end(self) -> bool:
        return self._offset >= len(self._text)

    def mark(self) -> Mark:
        """Checkpoint the current offset for a later `unchecked.set_offset`."""
        return Mark(self._offset)

    def position(self) -> SourcePos:
        """Line and column of the current offset. O(offset), meant for error reporting."""
        line = self._text.count('\n', 0, self._offset) + 1
        last_nl = self._text.rfind('\n', 0, self._offset)
        return SourcePos(line, self._offset - last_nl, self.name)

    @property
    def unchecked(self) -> 'UncheckedCursor':
        """Access to the caller-audited operations `give_back` and `set_offset`."""
        return self._unchecked

    def __len__(self) -> int:
        return self.remaining_len()

    def __str__(self) -> str:
        return self.remaining()

    def __repr__(self) -> str:
        rest = self.remaining()
        preview = rest[:30] + ('...' if len(rest) > 30 else '')
        return f"Cursor({preview!r}, offset={self._offset})"


class UncheckedCursor:
    """
    The rewind operations of a `Cursor` whose correctness the caller must audit.

    A parser may only give back what it has itself taken from this cursor since
    it was entered, and may only restore marks it recorded itself. Breaking that
    rule never corrupts the text, but it makes parse results silently wrong.
    Only offsets outside the input are detected, and they raise `CursorError`.
    """
    __slots__ = ('_cursor',)

    def __init__(self, cursor: Cursor):
        self._cursor = cursor

    def give_back(self, n: int) -> None:
        """Move the offset back by `n` characters."""
        c = self._cursor
        if n < 0 or n > c._offset:
            raise CursorError(f"give_back({n}): only {c._offset} characters have been consumed")
        c._offset -= n

    def set_offset(self, value: Union[Mark, int]) -> None:
        """Jump to a recorded `Mark` (or raw offset)."""
        c = self._cursor
        offset = value.offset if isinstance(value, Mark) else value
        if not 0 <= offset <= len(c._text):
            raise CursorError(f"set_offset({offset}): outside input of length {len(c._text)}")
        c._offset = offset
