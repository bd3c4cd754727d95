"""
Orders Admin View
=================

Runs the page's operations against the document store and folds the results
into a ViewState. Store failures never escape: fetch failures are only
logged, mutation failures are logged and reported as a fixed alert message.
"""

from collections import namedtuple
from datetime import datetime, timezone

from orderdesk.core.logging_service import LoggingService
from . import state as transitions
from .models import ORDER_TYPE, Order
from .state import Creating, Editing

ORDERS_QUERY = '''
    *[_type == $type]{
        _id,
        fullName,
        email,
        phone,
        address,
        city,
        postalCode,
        country,
        paymentMethod,
        paymentStatus,
        amount,
        createdAt,
        cartItems
    }
'''

CREATE_FAILED = 'Failed to create order'
UPDATE_FAILED = 'Failed to update order'
DELETE_FAILED = 'Failed to delete order'

Outcome = namedtuple('Outcome', ['state', 'alert'])


class OrdersAdminView:
    """Orders page operations over a document-store client.

    The store needs fetch(query, params), create(document),
    patch(id).set(fields).commit() and delete(id).
    """

    source = 'orders'

    def __init__(self, store, logger=LoggingService, order_type=ORDER_TYPE):
        self.store = store
        self.logger = logger
        self.order_type = order_type

    def refresh(self, state):
        """Fetch every order and replace the list; keep the old list on failure"""
        try:
            documents = self.store.fetch(ORDERS_QUERY, {'type': self.order_type}) or []
            orders = [Order.from_document(doc) for doc in documents]
        except Exception as e:
            self.logger.log_error_with_traceback(self.source, e, {'operation': 'fetch'})
            return Outcome(state, None)

        return Outcome(transitions.orders_loaded(state, orders), None)

    def ensure_loaded(self, state):
        """Fetch only when this session has not loaded the list yet"""
        if state.loaded:
            return Outcome(state, None)
        return self.refresh(state)

    def begin_create(self, state):
        return Outcome(transitions.begin_create(state), None)

    def select_for_edit(self, state, order_id):
        order = state.find(order_id)
        if order is None:
            return Outcome(state, None)
        return Outcome(transitions.select_for_edit(state, order), None)

    def cancel(self, state):
        return Outcome(transitions.cancel(state), None)

    def change_field(self, state, name, value, input_type='text'):
        return Outcome(transitions.change_field(state, name, value, input_type), None)

    def submit(self, state, now=None):
        """Create or update depending on the form mode"""
        if isinstance(state.mode, Editing):
            return self.update(state)
        if isinstance(state.mode, Creating):
            return self.create(state, now=now)
        return Outcome(state, None)

    def create(self, state, now=None):
        try:
            document = state.draft.to_document(now=now or datetime.now(timezone.utc), for_create=True)
            document['_type'] = self.order_type
            created = self.store.create(document)
            order = Order.from_document(created)
        except Exception as e:
            self.logger.log_error_with_traceback(self.source, e, {'operation': 'create'})
            return Outcome(state, CREATE_FAILED)

        self.logger.log_user_action(self.source, 'order created', details={'order_id': order.id})
        return Outcome(transitions.order_created(state, order), None)

    def update(self, state):
        order_id = state.editing_id
        if not order_id:
            return Outcome(state, None)

        try:
            fields = state.draft.to_document()
            updated = self.store.patch(order_id).set(fields).commit()
            order = Order.from_document(updated)
        except Exception as e:
            self.logger.log_error_with_traceback(self.source, e, {'operation': 'update', 'order_id': order_id})
            return Outcome(state, UPDATE_FAILED)

        self.logger.log_user_action(self.source, 'order updated', details={'order_id': order_id})
        return Outcome(transitions.order_updated(state, order_id, order), None)

    def delete(self, state, order_id, confirmed=False):
        """Delete an order once the admin has confirmed; declining is a no-op"""
        if not confirmed:
            return Outcome(state, None)

        try:
            self.store.delete(order_id)
        except Exception as e:
            self.logger.log_error_with_traceback(self.source, e, {'operation': 'delete', 'order_id': order_id})
            return Outcome(state, DELETE_FAILED)

        self.logger.log_user_action(self.source, 'order deleted', details={'order_id': order_id})
        return Outcome(transitions.order_deleted(state, order_id), None)
