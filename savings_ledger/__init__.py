"""
Savings Ledger - Source Package

Contribution accounting for shared saving rooms: who owes what, who has
paid what, and how far along the current period is.

DESIGN PRINCIPLES:
1. Accounting is pure: snapshot in, numbers out
2. Money is Decimal, rounded to the cent at every step
3. Fail early, fail visibly
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Savings Ledger Team"
