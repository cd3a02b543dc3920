"""
Hub Kernel - shared persistence and infrastructure for hub reporting

Provides:
- Read-only ORM models for orders, line items and adjustments
- Selectors for ledger amount queries
- Structured logging and typed exceptions
"""

__version__ = "0.1.0"
