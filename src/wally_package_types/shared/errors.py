"""
Error Reporting

Rustc-style diagnostics for link files, modules and the sourcemap, plus the
exception taxonomy used across the tool.

Fatal errors abort a run before any link file is touched; link errors are
caught per file by the rewriter and aggregated by the batch driver.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, List, Dict

from .source_location import SourceLocation
from ..utils.config import COLOR_ENV_VAR


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set or not a TTY)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get(COLOR_ENV_VAR, "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return sys.stderr.isatty()

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Error dataclass
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """A single rendered-on-demand diagnostic."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _format_diagnostic(
    error: Error,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a single diagnostic in rustc style.

    Example output (plain, no color)::

        error[E0102]: unsupported require expression `require("Promise")`
         --> Packages/Promise.lua:1:8
          |
        1 | return require("Promise")
          |        ^^^^^^^^^^^^^^^^^^ string paths cannot be resolved statically
          |
          = help: require the module through `script` or `game` instance paths
    """
    out: List[str] = []

    # ---- header -----------------------------------------------------------
    code_str = f"[{error.code}]" if error.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    )

    # ---- location arrow ---------------------------------------------------
    if error.location is None:
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    loc = error.location

    # ---- source snippet ---------------------------------------------------
    source = source_files.get(loc.file)
    if source is None:
        out.append(
            _style(" --> ", _BOLD, _BLUE, color=color)
            + f"{loc.file}:{loc.line}:{loc.column}"
        )
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    src_lines = source.split("\n")

    err_line = loc.line
    err_col = max(loc.column, 1)
    # Multi-line spans are underlined on their first line only
    if loc.end_line == err_line and loc.end_column > err_col:
        err_end_col = loc.end_column
    else:
        err_end_col = 0

    gw = max(len(str(err_line)), 1)

    def arrow_line() -> str:
        prefix = " " * gw + "--> "
        return _style(prefix, _BOLD, _BLUE, color=color) + f"{loc.file}:{loc.line}:{loc.column}"

    def empty_gutter() -> str:
        return _style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color)

    def code_gutter(num: int) -> str:
        return _style(str(num).rjust(gw) + " | ", _BOLD, _BLUE, color=color)

    def underline_gutter() -> str:
        return _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)

    out.append(arrow_line())
    out.append(empty_gutter())

    idx = err_line - 1
    code_line = src_lines[idx].rstrip("\r") if 0 <= idx < len(src_lines) else ""
    out.append(f"{code_gutter(err_line)}{code_line}")

    col_start = err_col - 1
    if err_end_col > err_col:
        span_len = err_end_col - err_col
    else:
        span_len = _guess_span(code_line, col_start)
    span_len = max(1, span_len)
    carets = " " * col_start + "^" * span_len
    label_suffix = f" {error.label}" if error.label else ""
    out.append(f"{underline_gutter()}{_style(carets + label_suffix, _BOLD, _RED, color=color)}")

    _append_annotations(out, error, gw, color)

    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess token length when end_column is unavailable."""
    if col_start >= len(code_line):
        return 1
    rest = code_line[col_start:]
    length = 0
    for ch in rest:
        if ch in (" ", "\t", ";", ",", ")", "]", "}"):
            break
        length += 1
    return max(1, length)


def _append_annotations(
    out: List[str],
    error: Error,
    gw: int,
    color: bool,
) -> None:
    has_ann = error.help or error.note
    if not has_ann:
        return
    if error.location is not None:
        out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    pad = " " * (gw + 1)
    if error.help:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("help: ", _BOLD, color=color)
            + error.help
        )
    if error.note:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("note: ", _BOLD, color=color)
            + error.note
        )


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """
    Collects diagnostics for a batch run and renders them together.
    """

    def __init__(self, source_files: Optional[Dict[str, str]] = None):
        self.source_files: Dict[str, str] = dict(source_files or {})
        self.errors: List[Error] = []

    def report_exception(self, exc: "PackageTypesError") -> None:
        """Record a raised error, keeping its source for snippet rendering."""
        if exc.location is not None and exc.source_code is not None:
            self.source_files[exc.location.file] = exc.source_code
        self.errors.append(exc.to_diagnostic())

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def summary(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        count = len(self.errors)
        text = f"{count} link file{'s' if count != 1 else ''} could not be rewritten"
        return (
            _style("error", _BOLD, _RED, color=use_color)
            + _style(f": {text}", _BOLD, color=use_color)
        )

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        parts = [self.format_error(e, color=color) for e in self.errors]
        parts.append(self.summary(color=color))
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def print_errors(self) -> None:
        if self.errors:
            print(self.format_all_errors(color=_use_color()), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class PackageTypesError(Exception):
    """
    Base exception for all wally-package-types errors.

    Subclasses pick an error code and, where one exists, a default
    remediation hint. ``location`` and ``source_code`` may be attached after
    the fact (the rewriter does this for errors raised away from the link
    file's syntax tree).
    """
    error_code = "E0000"
    default_help: Optional[str] = None

    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 source_code: Optional[str] = None,
                 help: Optional[str] = None,
                 note: Optional[str] = None,
                 label: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.location = location
        self.source_code = source_code
        self.help_text = help if help is not None else self.default_help
        self.note_text = note
        self.label_text = label

    def attach_source(self, location: Optional[SourceLocation], source_code: Optional[str]) -> "PackageTypesError":
        """Fill in a location/source pair if the raiser did not know them."""
        if self.location is None:
            self.location = location
            self.source_code = source_code
        elif self.source_code is None and location is not None and self.location.file == location.file:
            self.source_code = source_code
        return self

    def to_diagnostic(self) -> Error:
        return Error(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
            note=self.note_text,
            label=self.label_text,
        )

    def render(self, color: bool = False) -> str:
        source_files: Dict[str, str] = {}
        if self.source_code is not None and self.location is not None:
            source_files[self.location.file] = self.source_code
        return _format_diagnostic(self.to_diagnostic(), source_files, color=color)

    def __str__(self):
        return self.render(color=_use_color())


class ParseError(PackageTypesError):
    """Luau source that could not be lexed or parsed."""
    error_code = "E0010"

    def __init__(self, message: str, source_file: str,
                 location: Optional[SourceLocation] = None,
                 source_code: Optional[str] = None):
        super().__init__(message, location, source_code=source_code)
        self.source_file = source_file


# ---------------------------------------------------------------------------
# Fatal: abort the run before any link file is processed
# ---------------------------------------------------------------------------

class FatalError(PackageTypesError):
    """An error that invalidates the whole run."""
    error_code = "E0001"


class SourcemapLoadError(FatalError):
    """The sourcemap could not be read or is not shaped like a sourcemap."""
    error_code = "E0002"
    default_help = "regenerate the sourcemap (e.g. `rojo sourcemap -o sourcemap.json`)"


class PathCanonicalizationError(FatalError):
    """A sourcemap file path does not exist on disk."""
    error_code = "E0003"
    default_help = "the sourcemap is stale; regenerate it after installing packages"


class PackagesFolderError(FatalError):
    """The packages folder is missing or cannot be listed."""
    error_code = "E0004"
    default_help = "run `wally install` first, or pass the folder that holds the link files"


# ---------------------------------------------------------------------------
# Per-file: recorded by the batch driver, never stop the batch
# ---------------------------------------------------------------------------

class LinkError(PackageTypesError):
    """An error confined to a single link file."""
    error_code = "E0100"


class MalformedLinkError(LinkError):
    """The link file is not a single `return require(...)` (or its rewritten form)."""
    error_code = "E0101"
    default_help = "regenerate link files upstream (e.g. re-run `wally install`)"


class UnsupportedRequireShape(LinkError):
    """The require expression cannot be resolved statically."""
    error_code = "E0102"
    default_help = (
        "link requires must look like `require(script.Parent.Name)` "
        "or `require(script.Parent['Name'])`"
    )


class UnsupportedAnchorError(LinkError):
    """The require path does not start at `script` or `game`."""
    error_code = "E0103"
    default_help = "require paths must start with `script` or `game`"


class BrokenPathError(LinkError):
    """`Parent` was used on the sourcemap root."""
    error_code = "E0104"
    default_help = "the link walks above the sourcemap root; check the sourcemap's project root"


class UnresolvedChildError(LinkError):
    """A path component names a child that is not in the sourcemap."""
    error_code = "E0105"
    default_help = "regenerate the sourcemap so it includes the installed packages"


class FileNotInSourcemapError(LinkError):
    """A `script`-anchored link is not itself present in the sourcemap."""
    error_code = "E0106"
    default_help = "regenerate the sourcemap so it includes the packages folder"


class NoModuleFileError(LinkError):
    """The resolved sourcemap node has no .lua/.luau file backing it."""
    error_code = "E0107"


class TypeExtractionError(LinkError):
    """The required module could not be read or parsed."""
    error_code = "E0108"
