"""
Invoicing service: customers, invoices with line items, and payments
applied against live invoice balances.
"""

__version__ = "1.0.0"
