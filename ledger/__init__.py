"""
Personal Ledger - Source Package

The core of a personal transaction ledger: dated, categorized spending
entries, searched, sorted and summarized in a display currency against
an optional spending cap.

DESIGN PRINCIPLES:
1. Validate at the boundary, trust inside the stores
2. Fail open on search, fail loudly on writes
3. No silent corrections to stored data beyond dropping invalid entries
4. Every mutation is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
