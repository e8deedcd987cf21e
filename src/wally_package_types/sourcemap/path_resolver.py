"""
Instance Path Resolution

Resolves a require path (`script.Parent._Index["pkg"]["pkg"]`, already split
into components) to the sourcemap node it names.

This class is stateless and can be shared/reused.
"""

import logging
from pathlib import Path
from typing import List

from .tree import SourcemapNode, AncestorChain, locate_owner, format_chain
from ..shared.errors import (
    BrokenPathError, UnresolvedChildError, FileNotInSourcemapError,
    UnsupportedAnchorError, NoModuleFileError,
)
from ..utils.config import SCRIPT_ANCHOR, GAME_ANCHOR, PARENT_COMPONENT
from ..utils.io_utils import is_module_file

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Walks require path components over a canonicalized sourcemap.

    - `script` anchors at the requesting file's own node
    - `game` anchors at the root
    - `Parent` steps up one level; stepping above the root is an error
    - any other component selects the first child with that name
    """

    def __init__(self, tree: SourcemapNode):
        self.tree = tree

    def anchor(self, requesting_path: Path, components: List[str]) -> AncestorChain:
        """The chain the walk starts from, chosen by the first component."""
        if not components:
            raise UnsupportedAnchorError("require path is empty")
        head = components[0]
        if head == SCRIPT_ANCHOR:
            chain = locate_owner(self.tree, requesting_path)
            if chain is None:
                raise FileNotInSourcemapError(
                    f"`{requesting_path}` is not in the sourcemap, so `script` cannot be resolved"
                )
            return chain
        if head == GAME_ANCHOR:
            return [self.tree]
        raise UnsupportedAnchorError(
            f"require path starts with `{head}`; expected `{SCRIPT_ANCHOR}` or `{GAME_ANCHOR}`"
        )

    def resolve(self, requesting_path: Path, components: List[str]) -> SourcemapNode:
        chain = self.anchor(requesting_path, components)
        for component in components[1:]:
            if component == PARENT_COMPONENT:
                if len(chain) == 1:
                    raise BrokenPathError(
                        f"`{PARENT_COMPONENT}` of `{format_chain(chain)}` is above the sourcemap root"
                    )
                chain.pop()
                continue
            child = chain[-1].find_child(component)
            if child is None:
                raise UnresolvedChildError(
                    f"`{component}` is not a child of `{format_chain(chain)}`"
                )
            chain.append(child)
        logger.debug(f"Resolved {components} to {format_chain(chain)}")
        return chain[-1]


def resolve(tree: SourcemapNode, requesting_path: Path, components: List[str]) -> SourcemapNode:
    """Convenience wrapper around ``PathResolver(tree).resolve``."""
    return PathResolver(tree).resolve(requesting_path, components)


def select_module_file(node: SourcemapNode) -> Path:
    """First .lua/.luau file backing the node, in sourcemap order."""
    for path in node.file_paths:
        if is_module_file(path):
            return path
    raise NoModuleFileError(
        f"`{node.name}` [{node.class_name}] has no .lua or .luau file in the sourcemap"
    )
