"""
Link file rewriting: the per-file driver and the batch driver.
"""

from .driver import LinkRewriter, LinkState, OutcomeKind, RewriteOutcome
from .batch import BatchDriver, BatchResult, discover_link_files

__all__ = [
    'LinkRewriter', 'LinkState', 'OutcomeKind', 'RewriteOutcome',
    'BatchDriver', 'BatchResult', 'discover_link_files',
]
