"""
Orders View State
=================

Everything the orders page shows, as one immutable value. Each transition
takes a state and returns a new one; none of them touch the network.

The form mode is a single tagged value: Viewing (form hidden), Creating, or
Editing a specific order id. Entering one mode leaves the others by
construction.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from .models import Order, OrderDraft


@dataclass(frozen=True)
class Viewing:
    kind = 'viewing'


@dataclass(frozen=True)
class Creating:
    kind = 'creating'


@dataclass(frozen=True)
class Editing:
    order_id: str
    kind = 'editing'


def mode_to_dict(mode) -> Dict[str, Any]:
    if isinstance(mode, Editing):
        return {'kind': mode.kind, 'order_id': mode.order_id}
    return {'kind': mode.kind}


def mode_from_dict(data: Optional[Dict[str, Any]]):
    kind = (data or {}).get('kind')
    if kind == Creating.kind:
        return Creating()
    if kind == Editing.kind and data.get('order_id'):
        return Editing(data['order_id'])
    return Viewing()


@dataclass(frozen=True)
class ViewState:
    orders: Tuple[Order, ...] = ()
    mode: Any = field(default_factory=Viewing)
    draft: OrderDraft = field(default_factory=OrderDraft.empty)
    loaded: bool = False

    @property
    def is_form_open(self) -> bool:
        return not isinstance(self.mode, Viewing)

    @property
    def is_editing(self) -> bool:
        return isinstance(self.mode, Editing)

    @property
    def editing_id(self) -> Optional[str]:
        return self.mode.order_id if isinstance(self.mode, Editing) else None

    def find(self, order_id: str) -> Optional[Order]:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'orders': [order.to_dict() for order in self.orders],
            'mode': mode_to_dict(self.mode),
            'draft': self.draft.to_dict(),
            'loaded': self.loaded,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ViewState':
        return cls(
            orders=tuple(Order.from_document(doc) for doc in data.get('orders') or []),
            mode=mode_from_dict(data.get('mode')),
            draft=OrderDraft.from_dict(data.get('draft') or {}),
            loaded=bool(data.get('loaded')),
        )


def begin_create(state: ViewState) -> ViewState:
    """Open an empty form in create mode"""
    return replace(state, mode=Creating(), draft=OrderDraft.empty())


def select_for_edit(state: ViewState, order: Order) -> ViewState:
    """Open the form pre-filled from an order"""
    return replace(state, mode=Editing(order.id), draft=OrderDraft.from_order(order))


def cancel(state: ViewState) -> ViewState:
    """Close the form and drop the draft"""
    return replace(state, mode=Viewing(), draft=OrderDraft.empty())


def change_field(state: ViewState, name: str, value: Any, input_type: str = 'text') -> ViewState:
    return replace(state, draft=state.draft.with_field(name, value, input_type))


def orders_loaded(state: ViewState, orders) -> ViewState:
    """Replace the list wholesale with a fresh fetch"""
    return replace(state, orders=tuple(orders), loaded=True)


def order_created(state: ViewState, order: Order) -> ViewState:
    return cancel(replace(state, orders=state.orders + (order,)))


def order_updated(state: ViewState, order_id: str, order: Order) -> ViewState:
    """Swap in the updated order for the entry with order_id and close the form"""
    orders = tuple(order if existing.id == order_id else existing for existing in state.orders)
    return cancel(replace(state, orders=orders))


def order_deleted(state: ViewState, order_id: str) -> ViewState:
    orders = tuple(existing for existing in state.orders if existing.id != order_id)
    return replace(state, orders=orders)
