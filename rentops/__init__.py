"""
rentops

Maintenance scripts for the rental back office: storage reconciliation
against the payments table, folder pruning and audit rule seeding.
"""

__version__ = "0.1.0"
