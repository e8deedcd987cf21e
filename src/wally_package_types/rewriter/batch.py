"""
Batch Driver

Discovers the link files of a Wally packages folder and runs each through the
LinkRewriter. A failing file never stops the batch; the result aggregates
every outcome and collects failures for reporting.

    Packages/
        Promise.lua                 <- top-level links
        _Index/
            evaera_promise@4.0.0/
                Promise.lua         <- links between dependencies
                promise/            <- package sources (not walked)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from .driver import LinkRewriter, RewriteOutcome
from ..shared.errors import ErrorReporter, PackagesFolderError
from ..utils.config import INDEX_FOLDER_NAME
from ..utils.io_utils import is_module_file

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcomes of one batch run, in processing order"""
    outcomes: List[RewriteOutcome] = field(default_factory=list)
    reporter: ErrorReporter = field(default_factory=ErrorReporter)

    @property
    def changed(self) -> List[RewriteOutcome]:
        return [o for o in self.outcomes if o.is_changed()]

    @property
    def unchanged(self) -> List[RewriteOutcome]:
        return [o for o in self.outcomes if o.is_unchanged()]

    @property
    def failed(self) -> List[RewriteOutcome]:
        return [o for o in self.outcomes if o.is_failed()]

    @property
    def success(self) -> bool:
        return not self.failed


def discover_link_files(packages_folder: Path) -> List[Path]:
    """Top-level link files, then each `_Index/<dependency>/` folder's link files."""
    if not packages_folder.is_dir():
        raise PackagesFolderError(f"packages folder `{packages_folder}` does not exist or is not a directory")

    def link_files(folder: Path) -> List[Path]:
        return sorted(
            (p for p in folder.iterdir() if p.is_file() and is_module_file(p)),
            key=lambda p: p.name,
        )

    try:
        files = link_files(packages_folder)
        index = packages_folder / INDEX_FOLDER_NAME
        if index.is_dir():
            for dependency in sorted(index.iterdir(), key=lambda p: p.name):
                if dependency.is_dir():
                    files.extend(link_files(dependency))
    except OSError as e:
        raise PackagesFolderError(f"could not list packages folder `{packages_folder}`: {e}") from e
    return files


class BatchDriver:
    def __init__(self, rewriter: LinkRewriter):
        self.rewriter = rewriter

    def run(self, packages_folder: Union[Path, str]) -> BatchResult:
        result = BatchResult()
        for link_path in discover_link_files(Path(packages_folder)):
            outcome = self.rewriter.process(link_path)
            result.outcomes.append(outcome)
            if outcome.is_failed():
                result.reporter.report_exception(outcome.error)

        logger.info(
            f"Processed {len(result.outcomes)} link files: {len(result.changed)} changed, "
            f"{len(result.unchanged)} unchanged, {len(result.failed)} failed"
        )
        return result
