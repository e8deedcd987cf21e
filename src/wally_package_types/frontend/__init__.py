"""
Luau frontend: Lark grammar, parse-tree transformers and the parser.
"""

from .parser import Parser
from .transformers import LuauTransformer, string_value

__all__ = ['Parser', 'LuauTransformer', 'string_value']
