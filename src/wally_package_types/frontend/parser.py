"""
Luau Parser

Lark LALR parser over luau.lark, with LuauTransformer building the syntax
nodes. Positions are propagated onto every rule, so each node can hand back
its exact source text, and the whitespace and comments around the chunk's
statements can be sliced back out of the source.
"""

import logging
from pathlib import Path

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError

from .transformers import LuauTransformer
from .transformers.literals import LONG_BRACKET_OPEN
from ..shared.nodes import Chunk
from ..shared.source_location import SourceLocation
from ..shared.errors import ParseError

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "luau.lark"

_STRING_OPENERS = ('"', "'", "`")


class Parser:
    """
    Luau parser.

    Returns a ``Chunk`` over the input text. Lexing and syntax failures raise
    ``ParseError`` with the offending location and the source attached.
    """

    def __init__(self):
        self.parser = Lark.open(
            str(GRAMMAR_PATH),
            start='chunk',
            parser='lalr',
            lexer='contextual',
            propagate_positions=True,
            maybe_placeholders=False,
        )
        self.transformer = LuauTransformer()

    def parse(self, source: str, source_file: str = "<source>") -> Chunk:
        try:
            tree = self.parser.parse(source)
        except UnexpectedInput as e:
            raise self._syntax_error(e, source, source_file) from e

        self.transformer.current_file = source_file
        self.transformer.source = source
        try:
            chunk = self.transformer.transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, ParseError):
                raise e.orig_exc from None
            raise
        logger.debug(f"Parsed {source_file}: {len(chunk.statements)} statements")
        return chunk

    def _syntax_error(self, error: UnexpectedInput, source: str, source_file: str) -> ParseError:
        if isinstance(error, UnexpectedToken) and error.token.type == '$END':
            location = _end_of_file(source, source_file)
            return ParseError("unexpected end of file", source_file, location, source_code=source)

        if isinstance(error, UnexpectedToken):
            token = error.token
            location = SourceLocation(
                file=source_file,
                line=token.line,
                column=token.column,
                start=token.start_pos,
                end=token.end_pos,
                end_line=token.end_line,
                end_column=token.end_column,
            )
            if _opens_string(source, token.start_pos):
                return ParseError("unterminated string", source_file, location, source_code=source)
            return ParseError(f"unexpected '{token}'", source_file, location, source_code=source)

        position = error.pos_in_stream or 0
        location = SourceLocation(file=source_file, line=error.line, column=error.column,
                                  start=position, end=position + 1)
        if isinstance(error, UnexpectedCharacters):
            if _opens_string(source, position):
                return ParseError("unterminated string", source_file, location, source_code=source)
            return ParseError(f"unexpected character {source[position]!r}", source_file, location,
                              source_code=source)
        return ParseError("syntax error", source_file, location, source_code=source)


def _opens_string(source: str, position: int) -> bool:
    """True if a string literal (quoted, interpolated or long-bracket) starts at position."""
    if source.startswith(_STRING_OPENERS, position):
        return True
    return LONG_BRACKET_OPEN.match(source, position) is not None


def _end_of_file(source: str, source_file: str) -> SourceLocation:
    # Lark reports $END at the last token, so the position is computed from the text
    line = source.count("\n") + 1
    column = len(source) - (source.rfind("\n") + 1) + 1
    return SourceLocation(file=source_file, line=line, column=column,
                          start=len(source), end=len(source),
                          end_line=line, end_column=column)
