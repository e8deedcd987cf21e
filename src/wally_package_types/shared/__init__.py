"""
Shared components: source locations, diagnostics and the syntax tree.
"""

from .source_location import SourceLocation
from .errors import (
    Error, ErrorReporter, ParseError,
    PackageTypesError, FatalError, LinkError,
    SourcemapLoadError, PathCanonicalizationError, PackagesFolderError,
    MalformedLinkError, UnsupportedRequireShape, UnsupportedAnchorError,
    BrokenPathError, UnresolvedChildError, FileNotInSourcemapError,
    NoModuleFileError, TypeExtractionError,
)
from .nodes import (
    NodeType, SyntaxNode,
    Chunk, Statement, LocalAssignment, TypeDeclaration, GenericParameter, ReturnStatement,
    Expression, NameExpr, StringExpr, ParenExpr, IndexExpr, CallExpr, MethodCallExpr,
    TypeNode, TypeReference, GenericPackReference, TypeofType, FunctionType,
)
