"""
Type Forwarding

Extracts a module's exported type aliases and generates the declarations a
link file needs to re-export them:

    export type Signal<T, U = Connection> = ...      (in the package module)
    export type Signal<T, U = Connection> = REQUIRED_MODULE.Signal<T, U>
                                                      (in the link file)

A generic default is copied only when every type it names is also visible
from the link file. Otherwise the default is dropped and the parameter kept.
"""

import logging
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ..frontend.parser import Parser
from ..shared.nodes import (
    NodeType, TypeNode, TypeReference, GenericPackReference, FunctionType, TypeDeclaration,
)
from ..shared.errors import ParseError, TypeExtractionError
from ..utils.config import REQUIRED_MODULE_BINDING, BUILTIN_TYPE_NAMES, BOOLEAN_LITERAL_TYPES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenericParameter:
    name: str
    is_variadic: bool = False
    default_type: Optional[TypeNode] = None

    def render(self) -> str:
        text = f"{self.name}..." if self.is_variadic else self.name
        if self.default_type is not None:
            text += f" = {self.default_type.text()}"
        return text


@dataclass(frozen=True)
class ExportedTypeDeclaration:
    """An `export type` alias; ``body`` is the aliased type's source text."""
    name: str
    generics: Optional[Tuple[GenericParameter, ...]]
    body: str


# ============================================================================
# Extraction
# ============================================================================

def extract_declarations(module_source: str, source_file: str = "<module>",
                         parser: Optional[Parser] = None) -> List[ExportedTypeDeclaration]:
    """Every top-level `export type` alias of the module, in source order."""
    parser = parser or Parser()
    try:
        chunk = parser.parse(module_source, source_file)
    except ParseError as e:
        raise TypeExtractionError(
            f"could not parse `{source_file}`: {e.message}",
            location=e.location,
            source_code=e.source_code,
        ) from e

    declarations = [
        from_syntax(statement) for statement in chunk.statements
        if isinstance(statement, TypeDeclaration) and statement.exported
    ]
    logger.debug(f"Extracted {len(declarations)} exported types from {source_file}")
    return declarations


def from_syntax(statement: TypeDeclaration) -> ExportedTypeDeclaration:
    generics = None
    if statement.generics is not None:
        generics = tuple(
            GenericParameter(param.name, param.is_variadic, param.default)
            for param in statement.generics
        )
    return ExportedTypeDeclaration(statement.name, generics, statement.body.text())


# ============================================================================
# Default resolvability
# ============================================================================

def build_resolvable_set(declarations_so_far: Iterable[ExportedTypeDeclaration],
                         declaration: ExportedTypeDeclaration) -> FrozenSet[str]:
    """
    Type names a default of ``declaration`` may reference from the link file:
    built-ins, `true`/`false`, declarations forwarded up to and including
    this one, and this declaration's own generic parameters.
    """
    names = set(BUILTIN_TYPE_NAMES) | set(BOOLEAN_LITERAL_TYPES)
    names.update(previous.name for previous in declarations_so_far)
    names.add(declaration.name)
    names.update(param.name for param in declaration.generics or ())
    return frozenset(names)


def is_resolvable(node: TypeNode, resolvable: FrozenSet[str]) -> bool:
    """True if every type name referenced by ``node`` is in ``resolvable``."""
    if isinstance(node, TypeReference):
        # `Module.T` needs a require the link file does not have
        if node.module is not None or node.name not in resolvable:
            return False
        return all(is_resolvable(argument, resolvable) for argument in node.arguments)
    if isinstance(node, GenericPackReference):
        return node.name in resolvable
    if node.node_type == NodeType.TYPEOF:
        # The expression is evaluated in the module's scope, not the link's
        return False
    if isinstance(node, FunctionType):
        inner = resolvable | frozenset(node.generics)
        return all(is_resolvable(part, inner) for part in node.parts)
    return all(is_resolvable(part, resolvable) for part in node.parts)


# ============================================================================
# Forwarding
# ============================================================================

def forward(declaration: ExportedTypeDeclaration, resolvable: FrozenSet[str]) -> ExportedTypeDeclaration:
    body = f"{REQUIRED_MODULE_BINDING}.{declaration.name}"
    if declaration.generics is None:
        return ExportedTypeDeclaration(declaration.name, None, body)

    generics: List[GenericParameter] = []
    for param in declaration.generics:
        if param.default_type is not None and not is_resolvable(param.default_type, resolvable):
            logger.debug(
                f"Dropping default `{param.default_type.text()}` of "
                f"{declaration.name}<{param.name}>: not visible from the link file"
            )
            param = replace(param, default_type=None)
        generics.append(param)

    if generics:
        applied = ", ".join(f"{p.name}..." if p.is_variadic else p.name for p in generics)
        body = f"{body}<{applied}>"
    return ExportedTypeDeclaration(declaration.name, tuple(generics), body)


def forward_declarations(declarations: Sequence[ExportedTypeDeclaration]) -> List[ExportedTypeDeclaration]:
    forwarded = []
    for index, declaration in enumerate(declarations):
        resolvable = build_resolvable_set(declarations[:index], declaration)
        forwarded.append(forward(declaration, resolvable))
    return forwarded


# ============================================================================
# Rendering
# ============================================================================

def render_declaration(declaration: ExportedTypeDeclaration) -> str:
    head = f"export type {declaration.name}"
    if declaration.generics:
        head += "<" + ", ".join(param.render() for param in declaration.generics) + ">"
    return f"{head} = {declaration.body}"


def render_link_source(header: str, require_text: str,
                       declarations: Sequence[ExportedTypeDeclaration], trailer: str,
                       newline: str = "\n") -> str:
    """
    Full text of a rewritten link file. ``header`` is whatever preceded the
    original first statement, ``trailer`` whatever followed the last one.
    Generated lines are joined with ``newline``, the link file's own line ending.
    """
    lines = [f"local {REQUIRED_MODULE_BINDING} = {require_text}"]
    lines.extend(render_declaration(declaration) for declaration in declarations)
    lines.append(f"return {REQUIRED_MODULE_BINDING}")
    return header + newline.join(lines) + trailer
