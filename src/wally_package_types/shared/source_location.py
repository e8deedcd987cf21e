"""
Source Location (Span)

Where a token or syntax node sits in a Luau source file.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location (span).

    - File, line, column (1-based, as reported by the lexer)
    - start/end are character offsets into the source text
    - Code snippets are extracted from source files when needed (not stored here)
    - Immutable (frozen) for hashability
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
