"""CLI entry point: run `wally-package-types -s sourcemap.json Packages` or `python -m wally_package_types ...`."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .shared.errors import FatalError
from .utils.config import REMEDIATION_HINT

PROG = "wally-package-types"


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .rewriter.batch import BatchDriver
    from .rewriter.driver import LinkRewriter
    from .sourcemap.tree import load_sourcemap, canonicalize

    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Re-export the exported types of Wally packages from their link files.",
    )
    parser.add_argument("packages_folder", type=Path, help="Folder holding the link files (e.g. Packages)")
    parser.add_argument("-s", "--sourcemap", type=Path, required=True,
                        help="Rojo sourcemap of the project (e.g. sourcemap.json)")
    parser.add_argument("--dry-run", action="store_true", help="Report what would change without writing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every step of every file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        tree = canonicalize(load_sourcemap(args.sourcemap))
        rewriter = LinkRewriter(tree, dry_run=args.dry_run)
        result = BatchDriver(rewriter).run(args.packages_folder)
    except FatalError as e:
        sys.stderr.write(f"{PROG}: error: {e.message}\n")
        if e.help_text:
            sys.stderr.write(f"{PROG}: help: {e.help_text}\n")
        return 1

    if not result.success:
        result.reporter.print_errors()
        sys.stderr.write(f"{PROG}: {REMEDIATION_HINT}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
