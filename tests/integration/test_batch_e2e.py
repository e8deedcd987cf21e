"""
End-to-end batch tests: discovery, aggregation and per-file isolation.
"""

import pytest

from wally_package_types.rewriter import BatchDriver, LinkRewriter, discover_link_files
from wally_package_types.shared import PackagesFolderError, UnsupportedRequireShape
from test_utils import read_file, write_file


SIGNAL_MODULE = "export type Signal<T...> = { Fire: (self: any, T...) -> () }\nreturn {}\n"
PROMISE_MODULE = "export type Promise<T = any> = { andThen: (self: any, (T) -> ()) -> () }\nreturn {}\n"


@pytest.fixture
def populated(project):
    """Three packages (one broken link) plus a link between dependencies."""
    project.add_package("Promise", "evaera", "promise", "4.0.0", PROMISE_MODULE)
    project.add_package("Signal", "sleitnick", "signal", "1.5.0", SIGNAL_MODULE)
    project.add_package("Util", "owner", "util", "0.1.0", "return {}\n")
    project.add_link("Broken", 'return require("Promise")\n')
    project.add_link(
        "Signal",
        'return require(script.Parent.Parent["sleitnick_signal@1.5.0"]["signal"])\n',
        folder="evaera_promise@4.0.0",
    )
    return project


def run_batch(project, session_parser, dry_run=False):
    rewriter = LinkRewriter(project.load_tree(), parser=session_parser, dry_run=dry_run)
    return BatchDriver(rewriter).run(project.packages)


class TestDiscovery:
    def test_order_and_depth(self, populated):
        names = [p.relative_to(populated.packages).as_posix() for p in discover_link_files(populated.packages)]
        assert names == [
            "Broken.lua",
            "Promise.lua",
            "Signal.lua",
            "Util.lua",
            "_Index/evaera_promise@4.0.0/Signal.lua",
        ]

    def test_ignores_non_scripts(self, project):
        write_file(project.packages / "README.md", "# hi\n")
        write_file(project.packages / "Thing.luau", "return nil\n")
        assert [p.name for p in discover_link_files(project.packages)] == ["Thing.luau"]

    def test_missing_folder_is_fatal(self, tmp_path):
        with pytest.raises(PackagesFolderError):
            discover_link_files(tmp_path / "Packages")


class TestBatch:
    def test_aggregates_outcomes(self, populated, session_parser):
        result = run_batch(populated, session_parser)

        assert not result.success
        assert len(result.outcomes) == 5
        assert [o.link_path.name for o in result.changed] == ["Promise.lua", "Signal.lua", "Signal.lua"]
        assert [o.link_path.name for o in result.unchanged] == ["Util.lua"]
        (failure,) = result.failed
        assert failure.link_path.name == "Broken.lua"
        assert isinstance(failure.error, UnsupportedRequireShape)
        assert len(result.reporter.errors) == 1

    def test_failures_do_not_stop_other_writes(self, populated, session_parser):
        run_batch(populated, session_parser)

        assert read_file(populated.packages / "Broken.lua") == 'return require("Promise")\n'
        assert read_file(populated.packages / "Promise.lua") == (
            'local REQUIRED_MODULE = require(script.Parent._Index["evaera_promise@4.0.0"]["promise"])\n'
            'export type Promise<T = any> = REQUIRED_MODULE.Promise<T>\n'
            'return REQUIRED_MODULE\n'
        )
        assert read_file(populated.index / "evaera_promise@4.0.0" / "Signal.lua") == (
            'local REQUIRED_MODULE = require(script.Parent.Parent["sleitnick_signal@1.5.0"]["signal"])\n'
            'export type Signal<T...> = REQUIRED_MODULE.Signal<T...>\n'
            'return REQUIRED_MODULE\n'
        )

    def test_package_sources_are_not_walked(self, populated, session_parser):
        module = populated.module_path("evaera", "promise", "4.0.0")
        run_batch(populated, session_parser)
        assert read_file(module) == PROMISE_MODULE

    def test_dry_run_writes_nothing(self, populated, session_parser):
        before = read_file(populated.packages / "Promise.lua")
        result = run_batch(populated, session_parser, dry_run=True)
        assert len(result.changed) == 3
        assert read_file(populated.packages / "Promise.lua") == before

    def test_all_good_is_success(self, project, session_parser):
        project.add_package("Promise", "evaera", "promise", "4.0.0", PROMISE_MODULE)
        result = run_batch(project, session_parser)
        assert result.success
        assert not result.reporter.has_errors()
