"""
Re-running the tool converges: the second run changes nothing.
"""

import pytest

from wally_package_types.rewriter import BatchDriver, LinkRewriter
from test_utils import read_file


MODULE = '''--!strict
type Private = { secret: number }
export type Options = { timeout: number? }
export type Client<T = Options, U = Private, V... = ...string> = {
    request: (self: any, T) -> V...,
}
export type Handler = <A>(A) -> A
return {}
'''


def run_twice(project, session_parser):
    tree = project.load_tree()
    first = BatchDriver(LinkRewriter(tree, parser=session_parser)).run(project.packages)
    snapshot = {p: read_file(p) for p in project.packages.glob("*.lua")}
    second = BatchDriver(LinkRewriter(tree, parser=session_parser)).run(project.packages)
    return first, second, snapshot


@pytest.mark.parametrize("link_source", [
    'return require(script.Parent._Index["acme_client@2.1.0"]["client"])\n',
    'return require(script.Parent._Index["acme_client@2.1.0"]["client"])',
    '--!strict\n-- link\nreturn require(script.Parent._Index["acme_client@2.1.0"]["client"])\r\n',
    'return require(script.Parent._Index["acme_client@2.1.0"]["client"]);\n\n',
])
def test_second_run_is_unchanged(project, session_parser, link_source):
    project.add_package("Client", "acme", "client", "2.1.0", MODULE, link_source=link_source)

    first, second, snapshot = run_twice(project, session_parser)

    assert [o.kind.value for o in first.outcomes] == ["changed"]
    assert [o.kind.value for o in second.outcomes] == ["unchanged"]
    assert {p: read_file(p) for p in project.packages.glob("*.lua")} == snapshot


def test_rewritten_content(project, session_parser):
    link = project.add_package("Client", "acme", "client", "2.1.0", MODULE)
    run_twice(project, session_parser)
    assert read_file(link) == (
        'local REQUIRED_MODULE = require(script.Parent._Index["acme_client@2.1.0"]["client"])\n'
        'export type Options = REQUIRED_MODULE.Options\n'
        'export type Client<T = Options, U, V... = ...string> = REQUIRED_MODULE.Client<T, U, V...>\n'
        'export type Handler = REQUIRED_MODULE.Handler\n'
        'return REQUIRED_MODULE\n'
    )


def test_module_gaining_types_updates_link(project, session_parser):
    link = project.add_package("Client", "acme", "client", "2.1.0", MODULE)
    tree = project.load_tree()
    BatchDriver(LinkRewriter(tree, parser=session_parser)).run(project.packages)

    module = project.module_path("acme", "client", "2.1.0")
    module.write_text(MODULE.replace("return {}", "export type Extra = string\nreturn {}"), encoding="utf-8")
    result = BatchDriver(LinkRewriter(tree, parser=session_parser)).run(project.packages)

    assert [o.kind.value for o in result.outcomes] == ["changed"]
    assert "export type Extra = REQUIRED_MODULE.Extra\nreturn REQUIRED_MODULE\n" in read_file(link)
