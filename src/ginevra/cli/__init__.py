"""
Ginevra Command-Line Interface
==============================

- **ginevra**: run #define substitution over a .h or .cpp file and print
  the result

Implemented as a Click application.
"""

__all__ = ["ginevra"]
