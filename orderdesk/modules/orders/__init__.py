"""
Orders Admin Module
===================

Admin page for order documents kept in the Sanity document store.

Provides:
- Order listing as cards, with refresh
- Create and edit form (cart items as comma-separated text)
- Delete with confirmation
"""

from flask import Blueprint

orders_bp = Blueprint(
    'orders_admin',
    __name__,
    url_prefix='/admin/orders-manager',
    template_folder='templates',
    static_folder='static',
    static_url_path='/static'
)

from . import routes

__all__ = ['orders_bp']
