"""
Wedding Ledger - Source Package

Contribution ledger and free-text reconciliation engine for tracking
wedding finances: budget, pledges, cash ledger and vendor contracts.

DESIGN PRINCIPLES:
1. One derivation rule for every money-tracking entity
2. Pledge payments reach the cash ledger only as positive deltas
3. Bulk imports favour partial progress over all-or-nothing
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Wedding Ledger Team"
