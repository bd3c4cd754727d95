"""
Orderdesk Modules
=================

Flask blueprint modules for the orders admin.
"""

__all__ = ['dashboard', 'orders', 'ops']
