"""
Ginevra Error Hierarchy
=======================

This module defines the exception hierarchy for the ginevra macro
preprocessor. All exceptions inherit from GinevraError, allowing callers
to catch every preprocessor failure with a single except clause.

Exception Hierarchy
-------------------
GinevraError (base)
├── InputFileError - bad extension, missing or unreadable input
└── ScannerError - errors tied to a position in the source
    ├── UnterminatedStringError - end of input inside a quote
    ├── UnterminatedCommentError - end of input inside /* ... */
    ├── DirectiveError - malformed #define (recoverable)
    ├── PrematureEndOfInputError - input ended mid-directive
    └── TooManyErrors - recoverable error limit reached

Error Message Format
--------------------
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing

Recoverable problems (a malformed string literal on one line, a bad
directive, a redefinition) are not raised. They are recorded in a
Diagnostics collector which forwards them to a listener as they occur.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class GinevraError(Exception):
    """
    Base exception for all ginevra errors.

        try:
            preprocess(source)
        except GinevraError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in the input text.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Input Errors
# =============================================================================

class InputFileError(GinevraError):
    """
    The input path cannot be used.

    Raised when:
        - The path does not end in .h or .cpp
        - The file does not exist
        - The file cannot be read
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


# =============================================================================
# Scanner and Directive Errors
# =============================================================================

class ScannerError(GinevraError):
    """
    Error at a known position in the source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The source text of the offending line
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            macros.h:3:9: error: unterminated string literal
                char *s = "abc
                          ^
            hint: add closing '"' to complete the string
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class UnterminatedStringError(ScannerError):
    """
    End of input reached inside a quoted string.

    A bare newline inside a quote is recoverable and surfaces as a
    MALFORMED token instead; only end of input is fatal.
    """

    def __init__(
        self,
        quote: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.quote = quote
        super().__init__(
            "unterminated string literal",
            location=location,
            hint=f"add closing {quote} to complete the string",
            source_line=source_line,
        )


class UnterminatedCommentError(ScannerError):
    """End of input reached inside a /* ... */ comment."""

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(
            "unterminated comment",
            location=location,
            hint="add closing */ to terminate the comment",
        )


class DirectiveError(ScannerError):
    """
    A #define whose name is not an identifier.

    Recorded as a recoverable error; the directive text is echoed to the
    output so that no source text is silently lost.
    """
    pass


class PrematureEndOfInputError(ScannerError):
    """Input ended while a #define was still expecting its name."""

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(
            "premature end of file in #define",
            location=location,
            hint="#define must be followed by a name",
        )


class TooManyErrors(ScannerError):
    """Raised when the recoverable error limit has been reached."""

    def __init__(self, message: str = "too many errors"):
        super().__init__(message)


# =============================================================================
# Diagnostics Collection
# =============================================================================

class Diagnostics:
    """
    Collects recoverable errors and warnings.

    Each entry is formatted once and handed to the optional listener right
    away, so a command-line caller can stream diagnostics to stderr while
    output is still being produced.

    Example:
        diagnostics = Diagnostics(listener=lambda msg: print(msg, file=sys.stderr))
        diagnostics.add_warning("symbol 'X' redefined", location)
    """

    def __init__(
        self,
        listener: Optional[Callable[[str], None]] = None,
        max_errors: int = 100,
    ):
        """
        Initialize the collector.

        Args:
            listener: Called with every formatted diagnostic
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: List[ScannerError] = []
        self.warnings: List[str] = []
        self.listener = listener
        self.max_errors = max_errors

    def add(self, error: ScannerError) -> None:
        """
        Record a recoverable error.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        self._notify(str(error))
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"too many errors ({self.max_errors}), stopping")

    def add_warning(self, message: str, location: Optional[SourceLocation] = None) -> None:
        """Record a warning message."""
        if location:
            text = f"{location}: warning: {message}"
        else:
            text = f"warning: {message}"
        self.warnings.append(text)
        self._notify(text)

    def _notify(self, text: str) -> None:
        if self.listener is not None:
            self.listener(text)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        return len(self.errors)

    def warning_count(self) -> int:
        return len(self.warnings)

    def summary(self) -> str:
        """One-line count of collected errors and warnings."""
        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        return f"{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
