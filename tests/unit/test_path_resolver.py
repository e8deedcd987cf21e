"""
Path resolver tests: anchors, Parent walking, child lookup and module files.
"""

from pathlib import Path

import pytest

from wally_package_types.sourcemap import SourcemapNode, PathResolver, resolve, select_module_file
from wally_package_types.shared import (
    BrokenPathError, UnresolvedChildError, FileNotInSourcemapError,
    UnsupportedAnchorError, NoModuleFileError,
)


def node(name, *children, paths=(), class_name="Folder"):
    return SourcemapNode(name, class_name, tuple(Path(p) for p in paths), tuple(children))


LINK = Path("/project/Packages/Link.lua")

SIBLING = node("Sibling", paths=["/project/Sibling.lua"], class_name="ModuleScript")
FIRST_DUPLICATE = node("Dup", paths=["/project/first.lua"], class_name="ModuleScript")
TREE = node(
    "Root",
    node("Packages", node("Link", paths=[str(LINK)], class_name="ModuleScript")),
    SIBLING,
    FIRST_DUPLICATE,
    node("Dup", paths=["/project/second.lua"], class_name="ModuleScript"),
    class_name="DataModel",
)


class TestResolve:
    def test_script_parent_parent_sibling(self):
        assert resolve(TREE, LINK, ["script", "Parent", "Parent", "Sibling"]) is SIBLING

    def test_game_anchor_starts_at_root(self):
        assert resolve(TREE, LINK, ["game", "Sibling"]) is SIBLING

    def test_script_alone_is_the_file_itself(self):
        assert resolve(TREE, LINK, ["script"]).name == "Link"

    def test_first_matching_child_wins(self):
        assert resolve(TREE, LINK, ["game", "Dup"]) is FIRST_DUPLICATE

    def test_parent_past_root_is_an_error(self):
        with pytest.raises(BrokenPathError):
            resolve(TREE, LINK, ["script", "Parent", "Parent", "Parent"])
        with pytest.raises(BrokenPathError):
            resolve(TREE, LINK, ["game", "Parent"])

    def test_missing_child_names_the_chain(self):
        with pytest.raises(UnresolvedChildError) as exc_info:
            resolve(TREE, LINK, ["script", "Parent", "Missing"])
        assert "`Missing`" in exc_info.value.message
        assert "Root.Packages" in exc_info.value.message

    def test_requesting_file_not_in_sourcemap(self):
        with pytest.raises(FileNotInSourcemapError):
            resolve(TREE, Path("/elsewhere/Other.lua"), ["script", "Parent"])

    @pytest.mark.parametrize("components", [[], ["workspace", "Foo"], ["Parent"]])
    def test_unsupported_anchor(self, components):
        with pytest.raises(UnsupportedAnchorError):
            resolve(TREE, LINK, components)

    def test_resolver_is_reusable(self):
        resolver = PathResolver(TREE)
        assert resolver.resolve(LINK, ["script", "Parent", "Parent", "Sibling"]) is SIBLING
        assert resolver.resolve(LINK, ["script", "Parent", "Parent", "Sibling"]) is SIBLING


class TestSelectModuleFile:
    def test_first_script_in_list_order(self):
        target = node("Pkg", paths=["/p/default.project.json", "/p/init.luau", "/p/init.lua"])
        assert select_module_file(target) == Path("/p/init.luau")

    def test_no_script_file(self):
        with pytest.raises(NoModuleFileError) as exc_info:
            select_module_file(node("Assets", paths=["/p/assets.json"]))
        assert "Assets" in exc_info.value.message
