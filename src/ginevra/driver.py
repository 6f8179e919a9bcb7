"""
Ginevra Directive Processor
===========================

The Driver pulls tokens from a Scanner, records ``#define NAME value``
directives in a SymbolTable and writes the substituted text.

Processing Rules
----------------
- ``#define NAME rest-of-line`` binds NAME to the rest of the physical
  line (blanks trimmed). The directive line produces no output.
- An identifier that names a macro is replaced by its value; any other
  identifier is written as is. Either way one space follows it.
- Quoted strings and punctuation are written verbatim. A token that was
  separated from the previous one by blanks gets a single space in front
  of it, unless the output is at the start of a line or already ends in a
  blank.
- Comments never reach the driver; the scanner drops them.

Only one substitution pass is made: replacement text is not rescanned.
With ``expand_definitions`` enabled, identifiers inside a new value are
looked up once, at definition time.

Diagnostics
-----------
Recoverable problems go to a Diagnostics collector and processing
continues:

    macros.h:4:1: error: expected identifier after #define
    macros.h:7:9: warning: symbol 'X' redefined (previous definition at macros.h:2:9)

Fatal problems (end of input in a quote, a comment or a #define) raise a
ScannerError subclass out of run().

Example
-------
>>> from ginevra.driver import preprocess
>>> preprocess("#define APPLE 8\\nAPPLE + APPLE\\n")
'8 + 8 \\n'
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, TextIO, Union

from ginevra.errors import (
    Diagnostics,
    DirectiveError,
    PrematureEndOfInputError,
    ScannerError,
)
from ginevra.scanner import BLANKS, DIRECTIVE_MARKER, Scanner, Token, TokenKind
from ginevra.symbols import SymbolTable

logger = logging.getLogger(__name__)


DEFINE_DIRECTIVE = DIRECTIVE_MARKER + "define"


@dataclass
class DriverOptions:
    """
    Preprocessing options.

    Attributes:
        directive_column_one: Only recognize #define when it starts in
            column 1; elsewhere it is passed through with a warning
        expand_definitions: Look up identifiers inside a value once, when
            the macro is defined
        predefined: Bindings installed before scanning starts
        max_errors: Recoverable errors allowed before giving up
    """
    directive_column_one: bool = False
    expand_definitions: bool = False
    predefined: dict[str, str] = None
    max_errors: int = 100

    def __post_init__(self):
        if self.predefined is None:
            self.predefined = {}


class Driver:
    """
    Applies #define substitutions to a token stream.

    Usage:
        driver = Driver(Scanner(source, "macros.h"))
        driver.run(sys.stdout.write)

    Attributes:
        symbols: The SymbolTable filled by this run
        diagnostics: Collected recoverable errors and warnings
    """

    def __init__(
        self,
        scanner: Scanner,
        options: Optional[DriverOptions] = None,
        symbols: Optional[SymbolTable] = None,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.options = options or DriverOptions()
        self.scanner = scanner
        self.symbols = symbols if symbols is not None else SymbolTable()
        if diagnostics is None:
            diagnostics = Diagnostics(max_errors=self.options.max_errors)
        self.diagnostics = diagnostics

        for name, value in self.options.predefined.items():
            self.symbols.define(name, value)

        self._write: Callable[[str], None] = lambda text: None
        # Last character written; a newline means "at line start"
        self._last = "\n"

    # =========================================================================
    # Main Loop
    # =========================================================================

    def run(self, write: Callable[[str], None]) -> None:
        """
        Process every token, passing output text to write as it is produced.

        Raises:
            ScannerError: On fatal errors (unterminated string or comment,
                end of input inside #define, too many errors)
        """
        self._write = write
        self._last = "\n"

        token = self.scanner.next_token()
        while token.kind is not TokenKind.END_OF_INPUT:
            self._handle(token)
            token = self.scanner.next_token()

        logger.debug(
            "%s: %d macros defined, %s",
            self.scanner.filename,
            len(self.symbols),
            self.diagnostics.summary(),
        )

    def process(self) -> str:
        """Run and return the complete output as a string."""
        chunks: list[str] = []
        self.run(chunks.append)
        return "".join(chunks)

    def _handle(self, token: Token) -> None:
        if token.kind is TokenKind.IDENTIFIER:
            if token.text.startswith(DIRECTIVE_MARKER) and len(token.text) > 1:
                self._handle_directive(token)
            else:
                self._emit_identifier(token)
        elif token.kind is TokenKind.MALFORMED:
            self._report_malformed(token)
        else:
            self._emit_other(token)

    def _report_malformed(self, token: Token) -> None:
        self.diagnostics.add(ScannerError(
            "malformed string literal",
            token.location,
            hint="a string cannot span lines without a trailing backslash",
            source_line=self.scanner.current_line_text(),
        ))

    # =========================================================================
    # Directives
    # =========================================================================

    def _handle_directive(self, token: Token) -> None:
        if token.text != DEFINE_DIRECTIVE:
            self.diagnostics.add_warning(
                f"unsupported directive '{token.text}' passed through",
                token.location,
            )
            self._emit_word(token, token.text)
            return

        if self.options.directive_column_one and token.column != 1:
            self.diagnostics.add_warning(
                f"{DEFINE_DIRECTIVE} not in column 1 passed through",
                token.location,
            )
            self._emit_word(token, token.text)
            return

        self._define(token)

    def _define(self, directive: Token) -> None:
        """
        Handle the tokens following #define.

        Raises:
            PrematureEndOfInputError: If input ends before the name
        """
        name = self.scanner.next_token()

        if name.kind is TokenKind.END_OF_INPUT:
            raise PrematureEndOfInputError(name.location)

        if name.is_newline:
            self.diagnostics.add(DirectiveError(
                f"expected identifier after {DEFINE_DIRECTIVE}",
                directive.location,
                hint="premature end of #define",
            ))
            self._separate(directive)
            self._emit(DEFINE_DIRECTIVE)
            self._emit("\n")
            return

        if name.kind is not TokenKind.IDENTIFIER:
            if name.kind is TokenKind.MALFORMED:
                self._report_malformed(name)
            rest = self.scanner.rest_of_line().strip(BLANKS)
            self.diagnostics.add(DirectiveError(
                f"expected identifier after {DEFINE_DIRECTIVE}, found {name.text!r}",
                name.location,
            ))
            # Echo the directive so no source text is lost
            self._separate(directive)
            self._emit(f"{DEFINE_DIRECTIVE} {name.text}")
            if rest:
                self._emit(f" {rest}")
            self._emit("\n")
            return

        value = self.scanner.rest_of_line().strip(BLANKS)
        if self.options.expand_definitions:
            value = self._expand_value(name, value)

        previous = self.symbols.define(name.text, value, name.location)
        if previous is not None:
            message = f"symbol '{name.text}' redefined"
            if previous.location is not None:
                message += f" (previous definition at {previous.location})"
            self.diagnostics.add_warning(message, name.location)

    def _expand_value(self, name: Token, value: str) -> str:
        """
        Replace known macro names inside value, one level deep.
        """
        parts: list[str] = []
        try:
            for token in Scanner(value, self.scanner.filename).tokens():
                if token.kind is TokenKind.END_OF_INPUT:
                    break
                if token.spaced and parts:
                    parts.append(" ")
                if token.kind is TokenKind.IDENTIFIER:
                    replacement = self.symbols.lookup(token.text)
                    parts.append(token.text if replacement is None else replacement)
                else:
                    parts.append(token.text)
        except ScannerError as e:
            self.diagnostics.add_warning(
                f"value of '{name.text}' kept verbatim: {e.message}",
                name.location,
            )
            return value
        return "".join(parts)

    # =========================================================================
    # Output
    # =========================================================================

    def _emit(self, text: str) -> None:
        if text:
            self._write(text)
            self._last = text[-1]

    def _separate(self, token: Token) -> None:
        """Write one space if the source had blanks before token."""
        if token.spaced and self._last not in " \t\n":
            self._emit(" ")

    def _emit_word(self, token: Token, text: str) -> None:
        self._separate(token)
        self._emit(text)
        self._emit(" ")

    def _emit_identifier(self, token: Token) -> None:
        replacement = self.symbols.lookup(token.text)
        self._emit_word(token, token.text if replacement is None else replacement)

    def _emit_other(self, token: Token) -> None:
        if not token.is_newline:
            self._separate(token)
        self._emit(token.text)


# =============================================================================
# Convenience Function
# =============================================================================

def preprocess(
    source: Union[str, TextIO],
    filename: str = "<input>",
    options: Optional[DriverOptions] = None,
) -> str:
    """
    Preprocess source text and return the output.

    Args:
        source: Source text or a readable text stream
        filename: Name used in diagnostics
        options: Driver options (defaults if None)

    Returns:
        The substituted text
    """
    driver = Driver(Scanner(source, filename), options)
    return driver.process()
