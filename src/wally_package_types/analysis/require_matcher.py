"""
Require Expression Matching

Turns the expression a link file returns into static path components:

    require(script.Parent._Index["sleitnick_signal@2.0.1"]["signal"])
        -> ["script", "Parent", "_Index", "sleitnick_signal@2.0.1", "signal"]

Only identifiers, `.name` and `["literal"]` indexing are accepted. Anything
that would need evaluation is rejected with the offending sub-expression.
"""

import logging
from typing import List

from ..shared.nodes import Expression, NameExpr, IndexExpr, CallExpr, StringExpr
from ..shared.errors import UnsupportedRequireShape
from ..utils.config import REQUIRE_FUNCTION

logger = logging.getLogger(__name__)


def _unsupported(expression: Expression, reason: str) -> UnsupportedRequireShape:
    return UnsupportedRequireShape(
        f"unsupported require expression `{expression.text()}`: {reason}",
        location=expression.location,
        label=reason,
    )


def match_require(expression: Expression) -> List[str]:
    """Path components of `require(<path>)`; the first is always the leading identifier."""
    if not isinstance(expression, CallExpr):
        raise _unsupported(expression, "expected a call to `require`")
    callee = expression.callee
    if not isinstance(callee, NameExpr) or callee.name != REQUIRE_FUNCTION:
        raise _unsupported(callee, "expected the callee to be `require`")
    if expression.args_style != 'parens':
        raise _unsupported(expression, "require must be called with parentheses")
    if len(expression.arguments) != 1:
        raise _unsupported(expression, f"require takes one argument, found {len(expression.arguments)}")
    return path_components(expression.arguments[0])


def path_components(expression: Expression) -> List[str]:
    """Flatten `a.b["c"]` into ["a", "b", "c"]."""
    if isinstance(expression, NameExpr):
        return [expression.name]
    if isinstance(expression, IndexExpr):
        components = path_components(expression.base)
        if expression.is_dot:
            components.append(expression.name)
            return components
        if isinstance(expression.key, StringExpr):
            components.append(expression.key.value.strip())
            return components
        raise _unsupported(expression.key, "only string literals can be used as index keys")
    raise _unsupported(expression, "not a static instance path")
