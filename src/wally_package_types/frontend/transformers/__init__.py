"""
Lark transformers building Luau syntax nodes from luau.lark parse trees.
"""

from .base import LuauTransformer
from .literals import string_value

__all__ = ['LuauTransformer', 'string_value']
