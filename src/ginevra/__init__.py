"""
Ginevra - Single-Pass #define Substitution
==========================================

A very small C-style preprocessor. It reads a .h or .cpp file, records
``#define NAME value`` directives and replaces every later occurrence of
NAME with value, passing all other text through with comments removed
and blanks collapsed.

It is modelled on the "ginevra" preprocessor from Arthur Pyster's
*Compiler Design and Construction* (1988).

Main Components
---------------
- **scanner**: character-level finite-state tokenizer
- **cursor**: forward-only character source with one slot of lookahead
- **symbols**: macro name to replacement text table
- **driver**: directive processor and output writer
- **cli**: the ``ginevra`` command

Quick Start
-----------
    >>> from ginevra import preprocess
    >>> preprocess("#define APPLE 8\\nAPPLE + APPLE\\n")
    '8 + 8 \\n'

Or from the command line:
    $ ginevra fruit.h

Not supported: function-like macros, recursive expansion, #if/#ifdef
and #include.
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from ginevra.cursor import CharCursor
from ginevra.driver import Driver, DriverOptions, preprocess
from ginevra.errors import (
    Diagnostics,
    DirectiveError,
    GinevraError,
    InputFileError,
    PrematureEndOfInputError,
    ScannerError,
    SourceLocation,
    TooManyErrors,
    UnterminatedCommentError,
    UnterminatedStringError,
)
from ginevra.scanner import ScanState, Scanner, Token, TokenKind, tokenize, transition
from ginevra.symbols import Macro, SymbolTable

__all__ = [
    "__version__",
    # Scanning
    "CharCursor",
    "Scanner",
    "ScanState",
    "Token",
    "TokenKind",
    "tokenize",
    "transition",
    # Substitution
    "Driver",
    "DriverOptions",
    "Macro",
    "SymbolTable",
    "preprocess",
    # Errors
    "Diagnostics",
    "DirectiveError",
    "GinevraError",
    "InputFileError",
    "PrematureEndOfInputError",
    "ScannerError",
    "SourceLocation",
    "TooManyErrors",
    "UnterminatedCommentError",
    "UnterminatedStringError",
]
