"""
UPI Budget Tracker - Source Package

Tracks personal spending against a monthly budget while payments are made
in an external UPI app that this process launches but cannot observe.

DESIGN PRINCIPLES:
1. Scan → Draft → Launch → Human confirms → Ledger updates
2. Unknown merchant parameters are passed through untouched
3. Nothing reaches the ledger without explicit confirmation
4. Every step is auditable
5. Storage and launcher are swappable collaborators
"""

__version__ = "1.0.0"
__author__ = "UPI Tracker Team"
