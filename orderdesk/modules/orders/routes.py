"""
Orders Admin Routes
===================

Server-rendered orders page. Every button posts to a small action route that
runs one view operation, stores the new view state for the session and
redirects back to the page.
"""

from datetime import datetime

from flask import current_app, flash, jsonify, redirect, render_template, request, session, url_for

from orderdesk.modules.dashboard.routes import admin_required, api_admin_required
from . import orders_bp
from .models import FORM_FIELDS, PaymentMethod, PaymentStatus

SESSION_KEY = 'orders_view'

CONFIRM_VALUES = ('yes', 'true', '1', 'on')

PAYMENT_METHOD_LABELS = [
    (PaymentMethod.CREDIT_CARD.value, 'Credit Card'),
    (PaymentMethod.CASH.value, 'Cash on Delivery'),
]

PAYMENT_STATUS_LABELS = [
    (PaymentStatus.PAID.value, 'Paid'),
    (PaymentStatus.CASH_ON_DELIVERY.value, 'Cash on Delivery'),
]

# Input types as rendered by the form; only checkbox changes how a value is stored
FIELD_INPUT_TYPES = {
    'email': 'email',
    'amount': 'number',
    'createdAt': 'datetime-local',
    'paymentMethod': 'select-one',
    'paymentStatus': 'select-one',
}


# ===== Session state helpers =====

def _get_desk():
    desk = current_app.extensions.get('orderdesk')
    if desk is None:
        raise RuntimeError("OrderDesk(app) must be initialised before using the orders blueprint")
    return desk


def _session_token():
    token = session.get(SESSION_KEY)
    if not token:
        token = _get_desk().registry.new_token()
        session[SESSION_KEY] = token
    return token


def _load_state():
    return _get_desk().registry.get(_session_token())


def _run(operation, *args, **kwargs):
    """Run one view operation on this session's state and flash its alert, if any.

    The session's lock is held from the read to the write.
    """
    outcome = _get_desk().registry.update(
        _session_token(), lambda state: operation(state, *args, **kwargs)
    )
    if outcome.alert:
        flash(outcome.alert, 'error')
    return outcome.state


def _back_to_page():
    return redirect(url_for('orders_admin.orders_manager'))


# ===== Template filters =====

def format_timestamp(value):
    """Readable date and time for an ISO-8601 string; unparseable values pass through"""
    if not value:
        return ''
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return value
    return parsed.strftime('%d/%m/%Y, %H:%M:%S')


def datetime_local(value):
    """Value for a datetime-local input (YYYY-MM-DDTHH:MM)"""
    return str(value)[:16] if value else ''


@orders_bp.app_template_filter('format_timestamp')
def format_timestamp_filter(value):
    return format_timestamp(value)


@orders_bp.app_template_filter('datetime_local')
def datetime_local_filter(value):
    return datetime_local(value)


# ===== Page routes =====

@orders_bp.route('/')
@admin_required
def orders_manager():
    """Orders dashboard page; the first visit of a session fetches the orders"""
    state = _run(_get_desk().view.ensure_loaded)

    return render_template(
        'orders/orders_manager.html',
        state=state,
        draft=state.draft,
        payment_methods=PAYMENT_METHOD_LABELS,
        payment_statuses=PAYMENT_STATUS_LABELS,
    )


@orders_bp.route('/refresh', methods=['POST'])
@admin_required
def refresh_orders():
    _run(_get_desk().view.refresh)
    return _back_to_page()


@orders_bp.route('/new', methods=['POST'])
@admin_required
def new_order():
    _run(_get_desk().view.begin_create)
    return _back_to_page()


@orders_bp.route('/edit/<order_id>', methods=['POST'])
@admin_required
def edit_order(order_id):
    _run(_get_desk().view.select_for_edit, order_id)
    return _back_to_page()


@orders_bp.route('/cancel', methods=['POST'])
@admin_required
def cancel_form():
    _run(_get_desk().view.cancel)
    return _back_to_page()


@orders_bp.route('/submit', methods=['POST'])
@admin_required
def submit_order():
    """Copy the posted form into the draft, then create or update"""
    view = _get_desk().view
    posted = [(name, request.form[name]) for name in FORM_FIELDS if name in request.form]

    def fill_and_submit(state):
        for name, value in posted:
            state = view.change_field(state, name, value, FIELD_INPUT_TYPES.get(name, 'text')).state
        return view.submit(state)

    _run(fill_and_submit)
    return _back_to_page()


@orders_bp.route('/delete/<order_id>', methods=['POST'])
@admin_required
def delete_order(order_id):
    confirmed = request.form.get('confirmed', '').strip().lower() in CONFIRM_VALUES
    _run(_get_desk().view.delete, order_id, confirmed=confirmed)
    return _back_to_page()


# ===== JSON routes =====

@orders_bp.route('/api/orders')
@api_admin_required
def api_orders():
    """Current view state for this session"""
    state = _load_state()
    return jsonify({
        'success': True,
        'orders': [order.to_dict() for order in state.orders],
        'mode': state.to_dict()['mode'],
        'draft': state.draft.to_dict(),
    })


@orders_bp.route('/api/field', methods=['POST'])
@api_admin_required
def api_change_field():
    """Record a single form field edit in the session draft"""
    data = request.get_json(silent=True) or {}
    name = data.get('name')

    if not name:
        return jsonify({'success': False, 'error': 'Field name required'}), 400

    state = _run(_get_desk().view.change_field, name, data.get('value'), data.get('type') or 'text')

    return jsonify({
        'success': True,
        'draft': state.draft.to_dict()
    })
