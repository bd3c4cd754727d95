"""
Dashboard Module
================

Admin login for Orderdesk.

Provides:
- Admin authentication (login/logout) against a configured password
- The /admin landing route, which forwards to the orders page
"""

from flask import Blueprint

# Blueprint name is 'admin' so other modules can redirect to admin.login
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates'
)

# Import routes after blueprint is created
from . import routes

__all__ = ['dashboard_bp']
