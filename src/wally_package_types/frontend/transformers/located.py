"""
Location handling shared by the Luau transformers.

Lark propagates positions onto every rule's ``meta`` (whitespace and comments
excluded), so a node's span can be sliced straight out of the source.
"""

from typing import Optional

from lark import Transformer

from ...shared.source_location import SourceLocation


class LocatedTransformer(Transformer):
    """
    Base for the Luau transformers: holds the file being transformed and
    turns Lark positions into SourceLocations.

    The parser sets ``current_file`` and ``source`` before each transform.
    """

    def __init__(self) -> None:
        super().__init__()
        self.current_file: Optional[str] = None
        self.source: str = ""

    def __default__(self, data, children, meta):
        # Every rule of luau.lark has a method; reaching this is a grammar/transformer mismatch
        raise RuntimeError(f"Missing transformer method for grammar rule '{data}'")

    def _extract_location(self, meta) -> SourceLocation:
        """Extract location from Lark meta object"""
        if not self.current_file:
            raise RuntimeError(
                "Parser bug: current_file not set. "
                "Parser must set current_file before transforming."
            )
        if getattr(meta, 'empty', True):
            return SourceLocation(file=self.current_file, line=1, column=1)
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            start=meta.start_pos,
            end=meta.end_pos,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )
