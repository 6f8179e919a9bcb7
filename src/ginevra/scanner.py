"""
Ginevra Scanner (Tokenizer)
===========================

This module implements the character-level finite-state tokenizer that
feeds the directive processor. It classifies runs of input into
identifiers, quoted strings and single-character punctuation, skips
blanks and comments, and reports malformed string literals.

Token Categories
----------------
- IDENTIFIER: letters, digits, '_' and '.', starting with a letter, '_'
  or the directive marker '#' (so "#define" is one identifier)
- QUOTED_STRING: '...' or "..." including both delimiters
- OTHER: any other single character; a newline is always its own token
- MALFORMED: a quoted string cut off by a bare newline
- END_OF_INPUT: returned once input is exhausted, and on every call after
- COMMENT: /* ... */, consumed internally and never returned

State Machine
-------------
Each call to next_token() starts in START and runs until a transition
emits a token kind:

    START ──letter/_/#──> IN_IDENTIFIER ──other char (pushed back)──> emit
      │ ──'──> IN_SINGLE_QUOTE ──'──> emit
      │ ──"──> IN_DOUBLE_QUOTE ──"──> emit
      │ ──/*──> IN_COMMENT ──*/──> AFTER_COMMENT ──> START
      └ ──anything else──> emit OTHER

The transition table is the pure function transition(); the Scanner
class only drives it against a CharCursor and assembles tokens.

Escapes Inside Quotes
---------------------
\\' (in '...') or \\" (in "...")   the quote is kept, backslash dropped
\\<newline>                       line continuation, contributes nothing
\\<any other>                     both characters kept verbatim

Example Usage
-------------
>>> from ginevra.scanner import Scanner
>>> for token in Scanner("x = 'it\\\\'s'\\n").tokens():
...     print(token)
Token(IDENTIFIER, 'x', 1:1)
Token(OTHER, '=', 1:3)
Token(QUOTED_STRING, "'it's'", 1:5)
Token(OTHER, '\\n', 1:12)
Token(END_OF_INPUT, '', 2:1)
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, TextIO, Union

from ginevra.cursor import CharCursor
from ginevra.errors import (
    SourceLocation,
    UnterminatedCommentError,
    UnterminatedStringError,
)

logger = logging.getLogger(__name__)


# The character that starts a directive such as #define
DIRECTIVE_MARKER = "#"

# Characters skipped between tokens
BLANKS = " \t"


# =============================================================================
# Token Kinds and Token Data Class
# =============================================================================

class TokenKind(Enum):
    """Classification of a scanned lexeme."""
    IDENTIFIER = auto()
    QUOTED_STRING = auto()
    COMMENT = auto()        # never returned by the scanner
    END_OF_INPUT = auto()
    MALFORMED = auto()
    OTHER = auto()


@dataclass(frozen=True)
class Token:
    """
    A single token and where it came from.

    Attributes:
        kind: The TokenKind classification
        text: The exact lexeme (quotes included, escapes resolved)
        line: Line of the first character (1-indexed)
        column: Column of the first character (1-indexed)
        filename: Name of the source file
        spaced: True when blanks, a comment or a line continuation
            separated this token from the previous one
    """
    kind: TokenKind
    text: str
    line: int
    column: int
    filename: str = "<input>"
    spaced: bool = False

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_newline(self) -> bool:
        return self.kind is TokenKind.OTHER and self.text == "\n"


# =============================================================================
# Transition Table
# =============================================================================

class ScanState(Enum):
    """States of the tokenizer within a single next_token() call."""
    START = auto()
    IN_IDENTIFIER = auto()
    IN_SINGLE_QUOTE = auto()
    IN_DOUBLE_QUOTE = auto()
    IN_COMMENT = auto()
    AFTER_COMMENT = auto()


# Closing delimiter for each quote state
QUOTE_CHARS = {
    ScanState.IN_SINGLE_QUOTE: "'",
    ScanState.IN_DOUBLE_QUOTE: '"',
}

# Characters that need one character of lookahead, per state. Lookahead is
# only taken for these so that the single cursor slot stays free for the
# pushback that ends an identifier or a malformed string.
LOOKAHEAD_TRIGGERS = {
    ScanState.START: "/\\",
    ScanState.IN_SINGLE_QUOTE: "\\",
    ScanState.IN_DOUBLE_QUOTE: "\\",
    ScanState.IN_COMMENT: "*",
}


@dataclass(frozen=True)
class Transition:
    """
    Result of feeding one character to the state machine.

    Attributes:
        state: State for the next character
        text: Text appended to the token being built
        take_lookahead: The lookahead character is consumed as well
        pushback: The current character is returned to the cursor
        emit: When set, the token is complete with this kind
    """
    state: ScanState
    text: str = ""
    take_lookahead: bool = False
    pushback: bool = False
    emit: Optional[TokenKind] = None


def needs_lookahead(state: ScanState, char: str) -> bool:
    """True if the transition for (state, char) depends on the next character."""
    return bool(char) and char in LOOKAHEAD_TRIGGERS.get(state, "")


def is_identifier_start(char: str) -> bool:
    return bool(char) and (char.isalpha() or char == "_" or char == DIRECTIVE_MARKER)


def is_identifier_char(char: str) -> bool:
    return bool(char) and (char.isalnum() or char in "_.")


def transition(state: ScanState, char: str, lookahead: str = "") -> Transition:
    """
    Compute the next step of the tokenizer.

    Args:
        state: Current state
        char: Character just read ("" at end of input)
        lookahead: The following character, when needs_lookahead() said so

    Returns:
        The Transition to apply
    """
    if state is ScanState.START:
        return _start_transition(char, lookahead)

    if state is ScanState.IN_IDENTIFIER:
        if is_identifier_char(char):
            return Transition(state, char)
        return Transition(ScanState.START, pushback=True, emit=TokenKind.IDENTIFIER)

    if state in QUOTE_CHARS:
        return _quote_transition(state, QUOTE_CHARS[state], char, lookahead)

    if state is ScanState.IN_COMMENT:
        if char == "":
            return Transition(state, emit=TokenKind.END_OF_INPUT)
        if char == "*" and lookahead == "/":
            return Transition(ScanState.AFTER_COMMENT, take_lookahead=True)
        return Transition(state)

    if state is ScanState.AFTER_COMMENT:
        # A newline directly after */ belongs to the comment
        if char == "\n":
            return Transition(ScanState.START)
        return Transition(ScanState.START, pushback=True)

    raise ValueError(f"unknown scanner state {state!r}")


def _start_transition(char: str, lookahead: str) -> Transition:
    if char == "":
        return Transition(ScanState.START, emit=TokenKind.END_OF_INPUT)
    if char in BLANKS:
        return Transition(ScanState.START)
    if char == "\\" and lookahead == "\n":
        return Transition(ScanState.START, take_lookahead=True)
    if is_identifier_start(char):
        return Transition(ScanState.IN_IDENTIFIER, char)
    if char == "'":
        return Transition(ScanState.IN_SINGLE_QUOTE, char)
    if char == '"':
        return Transition(ScanState.IN_DOUBLE_QUOTE, char)
    if char == "/" and lookahead == "*":
        return Transition(ScanState.IN_COMMENT, take_lookahead=True)
    # Newline and punctuation: one character per token
    return Transition(ScanState.START, char, emit=TokenKind.OTHER)


def _quote_transition(
    state: ScanState,
    quote: str,
    char: str,
    lookahead: str,
) -> Transition:
    if char == "":
        return Transition(state, emit=TokenKind.END_OF_INPUT)
    if char == quote:
        return Transition(ScanState.START, char, emit=TokenKind.QUOTED_STRING)
    if char == "\\":
        if lookahead == quote:
            return Transition(state, quote, take_lookahead=True)
        if lookahead == "\n":
            return Transition(state, take_lookahead=True)
        if lookahead:
            return Transition(state, char + lookahead, take_lookahead=True)
        return Transition(state, char)
    if char == "\n":
        # Leave the newline for the next token so the line still ends
        return Transition(ScanState.START, pushback=True, emit=TokenKind.MALFORMED)
    return Transition(state, char)


# =============================================================================
# Scanner
# =============================================================================

class Scanner:
    """
    Produces one classified token per call from a character cursor.

    Usage:
        scanner = Scanner(source_text, "macros.h")
        token = scanner.next_token()
        while token.kind is not TokenKind.END_OF_INPUT:
            ...
            token = scanner.next_token()

    A MALFORMED token is returned, not raised, so the caller decides how
    to report it. End of input inside a quote or a comment is fatal.
    """

    def __init__(
        self,
        source: Union[str, TextIO, CharCursor],
        filename: str = "<input>",
    ):
        """
        Initialize the scanner.

        Args:
            source: Source text, a readable text stream, or a CharCursor
            filename: Name of the source file (for error messages)
        """
        if isinstance(source, CharCursor):
            self._cursor = source
        else:
            self._cursor = CharCursor(source, filename)
        self.filename = self._cursor.filename
        self._end_token: Optional[Token] = None

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Raises:
            UnterminatedStringError: If input ends inside a quote
            UnterminatedCommentError: If input ends inside a comment
        """
        if self._end_token is not None:
            return self._end_token

        state = ScanState.START
        chars: list[str] = []
        spaced = False
        start = self._cursor.location
        comment_start = start

        while True:
            if state is ScanState.START:
                start = self._cursor.location

            char = self._cursor.read()
            lookahead = self._cursor.peek() if needs_lookahead(state, char) else ""
            step = transition(state, char, lookahead)

            if step.take_lookahead:
                self._cursor.read()
            if step.pushback:
                self._cursor.unread(char)

            if state is ScanState.START and step.emit is None and not step.text:
                # Blanks, a line continuation or a comment opener
                spaced = True
                if step.state is ScanState.IN_COMMENT:
                    comment_start = start

            chars.append(step.text)
            if step.emit is not None:
                break
            state = step.state

        text = "".join(chars)
        kind = step.emit

        if kind is TokenKind.END_OF_INPUT:
            if state in QUOTE_CHARS:
                raise UnterminatedStringError(
                    QUOTE_CHARS[state],
                    SourceLocation(self.filename, start.line, start.column),
                    self._cursor.current_line_text(),
                )
            if state is ScanState.IN_COMMENT:
                raise UnterminatedCommentError(comment_start)
            self._end_token = Token(
                kind, "", start.line, start.column, self.filename, spaced
            )
            logger.debug("end of input at %s", start)
            return self._end_token

        if kind is TokenKind.MALFORMED:
            logger.debug("malformed token %r at %s", text, start)

        return Token(kind, text, start.line, start.column, self.filename, spaced)

    def tokens(self) -> Iterator[Token]:
        """
        Generate tokens up to and including END_OF_INPUT.
        """
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.END_OF_INPUT:
                return

    def rest_of_line(self) -> str:
        """Read the remainder of the current physical line verbatim."""
        return self._cursor.rest_of_line()

    def current_line_text(self) -> str:
        """Source text of the current line consumed so far."""
        return self._cursor.current_line_text()


def tokenize(source: Union[str, TextIO], filename: str = "<input>") -> list[Token]:
    """
    Tokenize source text completely.

    Returns:
        All tokens, ending with the END_OF_INPUT token
    """
    return list(Scanner(source, filename).tokens())
