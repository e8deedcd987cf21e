"""
wally-package-types

Rewrites Wally link files so they re-export the exported type declarations
of the modules they point to.
"""

__version__ = "1.0.0"
