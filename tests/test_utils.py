"""
Test utilities for the wally-package-types test suite.

Builds Wally-shaped projects on disk together with the Rojo sourcemap that
describes them:

    <root>/Packages/<Link>.lua
    <root>/Packages/_Index/<scope>_<name>@<version>/<name>/init.lua
    <root>/Packages/_Index/<scope>_<name>@<version>/<DependencyLink>.lua
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from wally_package_types.sourcemap import SourcemapNode, load_sourcemap, canonicalize
from wally_package_types.utils.config import INDEX_FOLDER_NAME

LINK_TEMPLATE = 'return require(script.Parent._Index["{folder}"]["{name}"])\n'


def package_folder(scope: str, name: str, version: str) -> str:
    """Folder name Wally gives an installed package, e.g. `evaera_promise@4.0.0`."""
    return f"{scope}_{name}@{version}"


def write_file(path: Path, text: str) -> Path:
    """Write text exactly (no newline translation), creating parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path


def read_file(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


class WallyProject:
    """A Packages folder plus the sourcemap nodes describing it."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.packages = self.root / "Packages"
        self.index = self.packages / INDEX_FOLDER_NAME
        self.packages.mkdir(parents=True, exist_ok=True)
        self._links: List[Path] = []
        self._index: Dict[str, List[Path]] = {}

    def add_package(self, link_name: str, scope: str, name: str, version: str,
                    module_source: str, link_source: Optional[str] = None,
                    module_file: str = "init.lua") -> Path:
        """Install a package module and its top-level link; returns the link path."""
        folder = package_folder(scope, name, version)
        module_path = write_file(self.index / folder / name / module_file, module_source)
        self._index.setdefault(folder, []).append(module_path)
        if link_source is None:
            link_source = LINK_TEMPLATE.format(folder=folder, name=name)
        return self.add_link(link_name, link_source)

    def add_link(self, link_name: str, source: str, folder: Optional[str] = None) -> Path:
        """A link at the top level, or inside `_Index/<folder>/` for links between dependencies."""
        if folder is None:
            path = write_file(self.packages / f"{link_name}.lua", source)
            self._links.append(path)
        else:
            path = write_file(self.index / folder / f"{link_name}.lua", source)
            self._index.setdefault(folder, []).append(path)
        return path

    def module_path(self, scope: str, name: str, version: str, module_file: str = "init.lua") -> Path:
        return self.index / package_folder(scope, name, version) / name / module_file

    # ------------------------------------------------------------------
    # Sourcemap
    # ------------------------------------------------------------------

    def _script_node(self, path: Path, relative: bool) -> Dict[str, Any]:
        # init.lua is the folder's own script, named after the folder
        name = path.parent.name if path.stem == "init" else path.stem
        file_path = path.relative_to(self.root) if relative else path
        return {"name": name, "className": "ModuleScript", "filePaths": [str(file_path)]}

    def sourcemap_dict(self, relative: bool = False) -> Dict[str, Any]:
        index_children = [
            {
                "name": folder,
                "className": "Folder",
                "children": [self._script_node(p, relative) for p in paths],
            }
            for folder, paths in sorted(self._index.items())
        ]
        packages_children = [self._script_node(p, relative) for p in self._links]
        packages_children.append({"name": INDEX_FOLDER_NAME, "className": "Folder", "children": index_children})
        return {
            "name": "Project",
            "className": "DataModel",
            "children": [{
                "name": "ReplicatedStorage",
                "className": "ReplicatedStorage",
                "children": [{"name": "Packages", "className": "Folder", "children": packages_children}],
            }],
        }

    def write_sourcemap(self, relative: bool = False) -> Path:
        path = self.root / "sourcemap.json"
        path.write_text(json.dumps(self.sourcemap_dict(relative), indent=2), encoding="utf-8")
        return path

    def load_tree(self) -> SourcemapNode:
        return canonicalize(load_sourcemap(self.write_sourcemap()))
