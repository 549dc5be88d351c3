"""
Finance Tracker - Source Package

Personal finance tracking for a single user: income, expenses,
recurring payments and savings bucketed by calendar month.

DESIGN PRINCIPLES:
1. The record store is the single source of truth
2. Totals are derived, never stored
3. Input is validated before it reaches the store
4. Nothing in the core is fatal: bad data degrades to empty containers
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
