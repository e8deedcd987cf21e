"""
Sourcemap loading and instance path resolution.
"""

from .tree import (
    SourcemapNode, AncestorChain, load_sourcemap, canonicalize, locate_owner, format_chain,
)
from .path_resolver import PathResolver, resolve, select_module_file

__all__ = [
    'SourcemapNode', 'AncestorChain', 'load_sourcemap', 'canonicalize', 'locate_owner',
    'format_chain', 'PathResolver', 'resolve', 'select_module_file',
]
