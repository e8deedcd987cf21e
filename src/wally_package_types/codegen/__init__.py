"""
Code generation for rewritten link files.
"""

from .type_forwarding import (
    GenericParameter, ExportedTypeDeclaration,
    extract_declarations, build_resolvable_set, is_resolvable,
    forward, forward_declarations, render_declaration, render_link_source,
)

__all__ = [
    'GenericParameter', 'ExportedTypeDeclaration',
    'extract_declarations', 'build_resolvable_set', 'is_resolvable',
    'forward', 'forward_declarations', 'render_declaration', 'render_link_source',
]
