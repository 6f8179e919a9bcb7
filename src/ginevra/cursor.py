"""
Character Cursor
================

A forward-only character source for the scanner. The cursor reads one
character at a time from a text stream and offers exactly one slot of
lookahead, used both for peeking one character ahead and for pushing back
a character that ended an identifier.

Because the slot is the only buffer, the cursor works over any readable
text stream, seekable or not (files, pipes, io.StringIO).

Position Tracking
-----------------
``line`` and ``column`` always describe the character that the next
``read()`` will deliver. Pushing a character back restores the position
it was read from.
"""

import io
from typing import Optional, TextIO, Union

from ginevra.errors import ScannerError, SourceLocation


class CharCursor:
    """
    Single-slot lookahead cursor over a text stream.

    Usage:
        cursor = CharCursor("ab")
        cursor.read()    # 'a'
        cursor.peek()    # 'b'
        cursor.read()    # 'b'
        cursor.read()    # '' (end of input)

    Attributes:
        filename: Name of the source (for error locations)
        line: Line of the next character (1-indexed)
        column: Column of the next character (1-indexed)
    """

    def __init__(
        self,
        source: Union[str, TextIO],
        filename: str = "<input>",
    ):
        if isinstance(source, str):
            source = io.StringIO(source)
        self._stream = source
        self.filename = filename

        # The single lookahead/pushback slot. None means empty; "" means
        # end of input has been peeked.
        self._slot: Optional[str] = None

        self.line = 1
        self.column = 1
        self._previous = (1, 1)

        # Text of the current line read so far, for error context
        self._line_text: list[str] = []
        self._last_line: list[str] = []

    # =========================================================================
    # Character Access
    # =========================================================================

    def read(self) -> str:
        """
        Consume and return the next character, or "" at end of input.
        """
        if self._slot is not None:
            char = self._slot
            self._slot = None
        else:
            char = self._stream.read(1)

        if not char:
            return ""

        self._previous = (self.line, self.column)
        if char == "\n":
            self.line += 1
            self.column = 1
            self._last_line = self._line_text
            self._line_text = []
        else:
            self.column += 1
            self._line_text.append(char)
        return char

    def peek(self) -> str:
        """
        Return the next character without consuming it ("" at end of input).
        """
        if self._slot is None:
            self._slot = self._stream.read(1)
        return self._slot

    def unread(self, char: str) -> None:
        """
        Push back the character most recently returned by read().

        Raises:
            ScannerError: If the slot already holds a character
        """
        if not char:
            return
        if self._slot is not None:
            raise ScannerError(
                "cannot push back more than one character",
                self.location,
            )
        self._slot = char
        self.line, self.column = self._previous
        if char == "\n":
            self._line_text = self._last_line
        elif self._line_text:
            self._line_text.pop()

    def rest_of_line(self) -> str:
        """
        Read verbatim up to the next newline and return the text without it.

        The newline itself is consumed. At end of input, whatever remains
        is returned.
        """
        chars = []
        while True:
            char = self.read()
            if char == "" or char == "\n":
                break
            chars.append(char)
        return "".join(chars)

    # =========================================================================
    # Position Helpers
    # =========================================================================

    @property
    def location(self) -> SourceLocation:
        """Location of the next character to be read."""
        return SourceLocation(self.filename, self.line, self.column)

    def current_line_text(self) -> str:
        """Text of the current line consumed so far, for error context."""
        return "".join(self._line_text)
