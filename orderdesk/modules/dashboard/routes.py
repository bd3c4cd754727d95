"""
Admin Dashboard Routes
======================

Login/logout for the admin area. A single admin password comes from
configuration (ADMIN_PASSWORD); with none configured the admin pages are open,
which is only meant for local development.
"""

import hashlib
import hmac
from functools import wraps

from flask import current_app, flash, jsonify, redirect, render_template, request, session, url_for

from orderdesk.core.config import get_config_value
from orderdesk.core.logging_service import LoggingService
from . import dashboard_bp


def hash_password(password):
    """Simple password hashing"""
    return hashlib.sha256(password.encode()).hexdigest()


def login_enabled():
    return bool(get_config_value('ADMIN_PASSWORD'))


def check_password(password):
    expected = get_config_value('ADMIN_PASSWORD')
    if not expected or not password:
        return False
    return hmac.compare_digest(hash_password(password), hash_password(expected))


def is_logged_in():
    return not login_enabled() or 'admin_id' in session


def admin_required(f):
    """Decorator to require admin login"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_logged_in():
            return redirect(url_for('admin.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def api_admin_required(f):
    """Decorator for JSON routes: 401 instead of a redirect"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_logged_in():
            return jsonify({'success': False, 'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function


def _safe_next(next_page):
    # Only follow local paths after login
    if next_page and next_page.startswith('/') and not next_page.startswith('//'):
        return next_page
    return None


@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if not login_enabled():
        return redirect(url_for('orders_admin.orders_manager'))

    if request.method == 'POST':
        password = request.form.get('password', '')

        if not password:
            flash('Please enter the admin password', 'error')
            return render_template('dashboard/login.html')

        if check_password(password):
            session['admin_id'] = 'admin'
            LoggingService.log_user_action('auth', 'admin login', user_id='admin')
            flash('Login successful', 'success')
            next_page = _safe_next(request.args.get('next'))
            return redirect(next_page or url_for('orders_admin.orders_manager'))

        LoggingService.warning('auth', 'Failed admin login attempt')
        flash('Invalid password', 'error')

    return render_template('dashboard/login.html')


@dashboard_bp.route('/logout')
def logout():
    """Admin logout route"""
    session.pop('admin_id', None)

    # Drop this session's orders view state
    token = session.pop('orders_view', None)
    desk = current_app.extensions.get('orderdesk')
    if token and desk is not None:
        desk.registry.discard(token)

    flash('You have been logged out', 'info')
    return redirect(url_for('admin.login'))


@dashboard_bp.route('/')
@admin_required
def dashboard():
    """Admin landing page - the orders page is the whole admin"""
    return redirect(url_for('orders_admin.orders_manager'))
