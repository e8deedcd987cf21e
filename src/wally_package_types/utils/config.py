"""
Configuration constants to replace magic strings throughout wally-package-types
"""

# Synthetic local that captures the original require in a rewritten link
REQUIRED_MODULE_BINDING = "REQUIRED_MODULE"

# Require path constants
SCRIPT_ANCHOR = "script"
GAME_ANCHOR = "game"
PARENT_COMPONENT = "Parent"
REQUIRE_FUNCTION = "require"
CHAIN_SEPARATOR = "."  # Used when displaying ancestor chains (Roblox full-name style)
COMPONENT_SEPARATOR = "/"  # Used when logging require paths

# Module file constants
MODULE_FILE_EXTENSIONS = (".lua", ".luau")
INDEX_FOLDER_NAME = "_Index"

# Types that are always in scope, wherever a declaration is forwarded to
BUILTIN_TYPE_NAMES = frozenset({
    "any",
    "boolean",
    "buffer",
    "never",
    "nil",
    "number",
    "string",
    "thread",
    "unknown",
    "userdata",
    "vector",
})
BOOLEAN_LITERAL_TYPES = frozenset({"true", "false"})

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Diagnostics
COLOR_ENV_VAR = "WALLY_PACKAGE_TYPES_COLOR"
REMEDIATION_HINT = (
    "regenerate the link files upstream (e.g. re-run `wally install`) "
    "and the sourcemap (e.g. `rojo sourcemap`), then run this tool again"
)
