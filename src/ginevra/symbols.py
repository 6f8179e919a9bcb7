"""
Macro Symbol Table
==================

Maps macro names to their replacement text. A table lives for exactly one
preprocessing run and is owned by the Driver that fills it; there is no
module-level table.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ginevra.errors import SourceLocation

logger = logging.getLogger(__name__)


@dataclass
class Macro:
    """
    A name bound to replacement text by #define.

    Attributes:
        name: Macro name
        value: Replacement text (rest of the defining line, trimmed)
        location: Where the macro was defined (None for predefined macros)
    """
    name: str
    value: str
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Macro name to Macro mapping.

    Names are unique; defining an existing name replaces the old binding
    and hands it back so the caller can warn about the redefinition.
    """

    def __init__(self) -> None:
        self._macros: dict[str, Macro] = {}

    def define(
        self,
        name: str,
        value: str,
        location: Optional[SourceLocation] = None,
    ) -> Optional[Macro]:
        """
        Bind name to value.

        Returns:
            The previous Macro if name was already defined, else None
        """
        previous = self._macros.get(name)
        self._macros[name] = Macro(name, value, location)
        logger.debug("defined %s = %r", name, value)
        return previous

    def lookup(self, name: str) -> Optional[str]:
        """Return the replacement text for name, or None."""
        macro = self._macros.get(name)
        if macro is None:
            return None
        return macro.value

    def __contains__(self, name: object) -> bool:
        return name in self._macros

    def __len__(self) -> int:
        return len(self._macros)
