"""
Static analysis of link file expressions.
"""

from .require_matcher import match_require, path_components

__all__ = ['match_require', 'path_components']
