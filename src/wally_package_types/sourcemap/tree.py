"""
Sourcemap Tree

The sourcemap is a JSON document produced by Rojo describing the instance
tree a project builds into: every node has a name, a class name, the files
that back it and ordered children.

Nodes are immutable once loaded. Parent links are never stored; lookups that
need ancestry return a fresh root-to-node chain instead.
"""

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from typing_extensions import TypeAlias

from ..shared.errors import SourcemapLoadError, PathCanonicalizationError
from ..utils.config import CHAIN_SEPARATOR, DEFAULT_FILE_ENCODING

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourcemapNode:
    """One instance in the sourcemap. Child names are not unique; the first match wins."""
    name: str
    class_name: str
    file_paths: Tuple[Path, ...] = ()
    children: Tuple["SourcemapNode", ...] = ()

    def find_child(self, name: str) -> Optional["SourcemapNode"]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    @classmethod
    def from_dict(cls, data: Any, where: str = "root") -> "SourcemapNode":
        """Build a node (and its subtree) from decoded JSON, validating field types."""
        if not isinstance(data, dict):
            raise SourcemapLoadError(f"sourcemap node at {where} is not an object")

        name = data.get("name")
        if not isinstance(name, str):
            raise SourcemapLoadError(f"sourcemap node at {where} has no string `name`")
        class_name = data.get("className")
        if not isinstance(class_name, str):
            raise SourcemapLoadError(f"sourcemap node `{name}` at {where} has no string `className`")

        raw_paths = data.get("filePaths", [])
        if not isinstance(raw_paths, list) or not all(isinstance(p, str) for p in raw_paths):
            raise SourcemapLoadError(f"sourcemap node `{name}` has a malformed `filePaths` list")

        raw_children = data.get("children", [])
        if not isinstance(raw_children, list):
            raise SourcemapLoadError(f"sourcemap node `{name}` has a malformed `children` list")

        child_where = name if where == "root" else f"{where}{CHAIN_SEPARATOR}{name}"
        return cls(
            name=name,
            class_name=class_name,
            file_paths=tuple(Path(p) for p in raw_paths),
            children=tuple(cls.from_dict(child, child_where) for child in raw_children),
        )


AncestorChain: TypeAlias = List[SourcemapNode]


def load_sourcemap(path: Union[Path, str]) -> SourcemapNode:
    """Read and validate a sourcemap JSON file."""
    path = Path(path)
    try:
        text = path.read_text(encoding=DEFAULT_FILE_ENCODING)
    except OSError as e:
        raise SourcemapLoadError(f"could not read sourcemap `{path}`: {e.strerror or e}") from e
    try:
        data: Dict[str, Any] = json.loads(text)
    except json.JSONDecodeError as e:
        raise SourcemapLoadError(
            f"sourcemap `{path}` is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        ) from e
    tree = SourcemapNode.from_dict(data)
    logger.debug(f"Loaded sourcemap {path} (root `{tree.name}`)")
    return tree


def canonicalize(tree: SourcemapNode, base_dir: Optional[Path] = None) -> SourcemapNode:
    """
    Return a copy of ``tree`` with every file path made canonical and absolute.

    Relative paths are resolved against ``base_dir`` (the working directory by
    default, which is where Rojo writes them relative to). A path that does
    not exist raises ``PathCanonicalizationError``.
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()

    def canonical(path: Path) -> Path:
        candidate = path if path.is_absolute() else base / path
        try:
            return candidate.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise PathCanonicalizationError(
                f"sourcemap path `{path}` could not be canonicalized: {e}"
            ) from e

    def visit(node: SourcemapNode) -> SourcemapNode:
        return replace(
            node,
            file_paths=tuple(canonical(p) for p in node.file_paths),
            children=tuple(visit(child) for child in node.children),
        )

    return visit(tree)


def locate_owner(tree: SourcemapNode, canonical_path: Path) -> Optional[AncestorChain]:
    """
    Find the first node (pre-order, left to right) whose file paths contain
    ``canonical_path`` and return the chain from the root to it.
    """
    # Each stack entry carries the chain that leads to its node
    stack: List[AncestorChain] = [[tree]]
    while stack:
        chain = stack.pop()
        node = chain[-1]
        if canonical_path in node.file_paths:
            return chain
        for child in reversed(node.children):
            stack.append(chain + [child])
    return None


def format_chain(chain: AncestorChain) -> str:
    """`game.ReplicatedStorage.Packages` style rendering of a chain."""
    return CHAIN_SEPARATOR.join(node.name for node in chain)
