"""
Bill Tracker - Source Package

A personal bill tracker for recurring and one-off household bills.

DESIGN PRINCIPLES:
1. One owner for the bill collection (the BillStore)
2. Views and reminders are pure functions of (bills, today)
3. Paying a recurring bill rolls it to the next cycle in one step
4. Storage and notification failures never block bill management
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Bill Tracker Team"
