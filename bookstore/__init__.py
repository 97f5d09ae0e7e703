"""
Bookstore API

Online bookstore backend: accounts, catalog, orders and payment.
"""

__version__ = "1.0.0"
