"""
Link Rewrite Driver

Runs one link file through parse -> resolve -> rewrite:

    START -> PARSED -> ANCHOR_RESOLVED -> MODULE_LOCATED -> TYPES_EXTRACTED
          -> REWRITTEN | UNCHANGED            (FAILED from any state)

A link file is either fresh from Wally:

    return require(script.Parent._Index["owner_pkg@1.0.0"]["pkg"])

or already rewritten by this tool:

    local REQUIRED_MODULE = require(script.Parent._Index["owner_pkg@1.0.0"]["pkg"])
    export type Thing<T> = REQUIRED_MODULE.Thing<T>
    return REQUIRED_MODULE

Both forms regenerate the same text, so re-runs leave files untouched.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ..frontend.parser import Parser
from ..analysis.require_matcher import match_require
from ..codegen.type_forwarding import extract_declarations, forward_declarations, render_link_source
from ..sourcemap.tree import SourcemapNode
from ..sourcemap.path_resolver import PathResolver, select_module_file
from ..shared.nodes import (
    Chunk, Expression, NameExpr, CallExpr, MethodCallExpr, LocalAssignment, TypeDeclaration,
)
from ..shared.errors import LinkError, MalformedLinkError, TypeExtractionError, ParseError
from ..shared.source_location import SourceLocation
from ..utils.config import REQUIRED_MODULE_BINDING, COMPONENT_SEPARATOR
from ..utils.io_utils import read_source_file, write_source_file, detect_newline

logger = logging.getLogger(__name__)


class LinkState(Enum):
    """Progress of a single link file through the rewrite"""
    START = "start"
    PARSED = "parsed"
    ANCHOR_RESOLVED = "anchor_resolved"
    MODULE_LOCATED = "module_located"
    TYPES_EXTRACTED = "types_extracted"
    REWRITTEN = "rewritten"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class OutcomeKind(Enum):
    """RewriteOutcome discriminant"""
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    FAILED = "failed"


@dataclass
class RewriteOutcome:
    """Unchanged | Changed(new_source) | Failed(error), for one link file"""
    kind: OutcomeKind
    link_path: Path
    new_source: Optional[str] = None
    error: Optional[LinkError] = None

    @classmethod
    def unchanged(cls, link_path: Path) -> 'RewriteOutcome':
        return cls(OutcomeKind.UNCHANGED, link_path)

    @classmethod
    def changed(cls, link_path: Path, new_source: str) -> 'RewriteOutcome':
        return cls(OutcomeKind.CHANGED, link_path, new_source=new_source)

    @classmethod
    def failed(cls, link_path: Path, error: LinkError) -> 'RewriteOutcome':
        return cls(OutcomeKind.FAILED, link_path, error=error)

    def is_unchanged(self) -> bool:
        return self.kind == OutcomeKind.UNCHANGED

    def is_changed(self) -> bool:
        return self.kind == OutcomeKind.CHANGED

    def is_failed(self) -> bool:
        return self.kind == OutcomeKind.FAILED


class LinkRewriter:
    """
    Rewrites link files so they forward their module's exported types.

    One instance serves a whole batch: it holds only the (immutable)
    sourcemap, a parser and the dry-run flag. Per-file progress lives in
    local variables of ``rewrite_source``.
    """

    def __init__(self, sourcemap: SourcemapNode, parser: Optional[Parser] = None, dry_run: bool = False):
        self.resolver = PathResolver(sourcemap)
        self.parser = parser or Parser()
        self.dry_run = dry_run

    def process(self, link_path: Path) -> RewriteOutcome:
        """Rewrite one link file on disk (unless dry-run) and report what happened."""
        link_path = Path(link_path).resolve()
        logger.info(f"Mutating {link_path}")
        try:
            source = read_source_file(link_path)
        except (OSError, UnicodeDecodeError) as e:
            error = MalformedLinkError(f"could not read link file `{link_path}`: {e}")
            logger.error(error.message)
            return RewriteOutcome.failed(link_path, error)

        outcome = self.rewrite_source(link_path, source)
        if outcome.is_changed():
            if self.dry_run:
                logger.info(f"Would rewrite {link_path} (dry run)")
            else:
                try:
                    write_source_file(link_path, outcome.new_source)
                except OSError as e:
                    error = LinkError(f"could not write link file `{link_path}`: {e}")
                    logger.error(error.message)
                    return RewriteOutcome.failed(link_path, error)
        return outcome

    def rewrite_source(self, link_path: Path, source: str) -> RewriteOutcome:
        """
        Compute the outcome for a link file's text without touching disk.

        ``link_path`` must be canonical: it is looked up in the sourcemap to
        anchor `script`-relative requires.
        """
        state = LinkState.START
        require_expression: Optional[Expression] = None
        try:
            chunk = self._parse_link(link_path, source)
            require_expression = self._find_require(chunk)
            state = self._advance(link_path, state, LinkState.PARSED)

            components = match_require(require_expression)
            logger.info(f"Found require in format {COMPONENT_SEPARATOR.join(components)}")
            node = self.resolver.resolve(link_path, components)
            state = self._advance(link_path, state, LinkState.ANCHOR_RESOLVED)

            module_path = select_module_file(node)
            logger.info(f"Required file is {node.name} [{node.class_name}], located at {module_path}")
            state = self._advance(link_path, state, LinkState.MODULE_LOCATED)

            try:
                module_source = read_source_file(module_path)
            except (OSError, UnicodeDecodeError) as e:
                raise TypeExtractionError(f"could not read module `{module_path}`: {e}") from e
            declarations = extract_declarations(module_source, str(module_path), self.parser)
            state = self._advance(link_path, state, LinkState.TYPES_EXTRACTED)

            if not declarations:
                logger.info(f"{module_path} exports no types; leaving link untouched")
                self._advance(link_path, state, LinkState.UNCHANGED)
                return RewriteOutcome.unchanged(link_path)

            newline = detect_newline(source)
            new_source = render_link_source(
                chunk.leading_trivia(),
                require_expression.text(),
                forward_declarations(declarations),
                chunk.trailing_trivia() or newline,
                newline,
            )
            if new_source == source:
                self._advance(link_path, state, LinkState.UNCHANGED)
                return RewriteOutcome.unchanged(link_path)
            self._advance(link_path, state, LinkState.REWRITTEN)
            return RewriteOutcome.changed(link_path, new_source)

        except LinkError as e:
            location = require_expression.location if require_expression is not None else None
            e.attach_source(location or SourceLocation(file=str(link_path), line=1, column=1), source)
            self._advance(link_path, state, LinkState.FAILED)
            logger.error(f"{link_path}: {e.message}")
            return RewriteOutcome.failed(link_path, e)

    # ------------------------------------------------------------------
    # Link file shape
    # ------------------------------------------------------------------

    def _parse_link(self, link_path: Path, source: str) -> Chunk:
        try:
            return self.parser.parse(source, str(link_path))
        except ParseError as e:
            raise MalformedLinkError(
                f"link file is not valid Luau: {e.message}",
                location=e.location,
                source_code=e.source_code,
            ) from e

    def _find_require(self, chunk: Chunk) -> Expression:
        """The require expression of a fresh or previously rewritten link."""
        last = chunk.last_statement
        if last is None:
            raise MalformedLinkError("link file does not end with a `return` statement")
        if len(last.expressions) != 1:
            raise MalformedLinkError(
                f"link file must return exactly one value, found {len(last.expressions)}",
                location=last.location,
            )
        returned = last.expressions[0]

        if isinstance(returned, NameExpr) and returned.name == REQUIRED_MODULE_BINDING:
            binding: Optional[Expression] = None
            for statement in chunk.statements:
                if binding is None and isinstance(statement, LocalAssignment) \
                        and statement.names == (REQUIRED_MODULE_BINDING,) \
                        and len(statement.expressions) == 1:
                    binding = statement.expressions[0]
                elif not (isinstance(statement, TypeDeclaration) and statement.exported):
                    raise self._unexpected_statement(statement)
            if binding is None:
                raise MalformedLinkError(
                    f"`return {REQUIRED_MODULE_BINDING}` without a `local {REQUIRED_MODULE_BINDING} = require(...)`",
                    location=returned.location,
                )
            returned = binding
        elif chunk.statements:
            raise self._unexpected_statement(chunk.statements[0])

        if not isinstance(returned, (CallExpr, MethodCallExpr)):
            raise MalformedLinkError(
                f"link file returns `{returned.text()}` instead of a require call",
                location=returned.location,
            )
        return returned

    @staticmethod
    def _unexpected_statement(statement) -> MalformedLinkError:
        return MalformedLinkError(
            f"unexpected statement in link file: `{statement.text().splitlines()[0]}`",
            location=statement.location,
        )

    @staticmethod
    def _advance(link_path: Path, current: LinkState, target: LinkState) -> LinkState:
        logger.debug(f"{link_path}: {current.value} -> {target.value}")
        return target
