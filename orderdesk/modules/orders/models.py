"""
Orders Models
=============

Order documents as stored in Sanity, and the draft the admin form edits.

Documents use camelCase field names and carry `_id`/`_type`; the Python side
uses snake_case attributes. Cart items live as a list on the order and as a
single comma-separated string on the draft.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

ORDER_TYPE = 'order'
CART_ITEMS_SEPARATOR = ', '


class PaymentMethod(str, Enum):
    CREDIT_CARD = 'creditCard'
    CASH = 'cash'


class PaymentStatus(str, Enum):
    PAID = 'paid'
    CASH_ON_DELIVERY = 'cash on delivery'


# (attribute, document field) for the plain text fields, in form order
TEXT_FIELDS = [
    ('full_name', 'fullName'),
    ('email', 'email'),
    ('phone', 'phone'),
    ('address', 'address'),
    ('city', 'city'),
    ('postal_code', 'postalCode'),
    ('country', 'country'),
]

# document field -> draft attribute, for every field the form can edit
FORM_FIELDS = dict((doc_name, attr) for attr, doc_name in TEXT_FIELDS)
FORM_FIELDS.update({
    'paymentMethod': 'payment_method',
    'paymentStatus': 'payment_status',
    'amount': 'amount',
    'createdAt': 'created_at',
    'cartItems': 'cart_items_text',
})

CHECKBOX_TRUE_VALUES = ('on', 'true', '1', 'yes')


def parse_cart_items(text: Any) -> List[str]:
    """Split the comma-separated form text into items, trimming each one.

    An empty or missing value gives an empty list; order is preserved and
    duplicates are kept. Non-string values are read as their text.
    """
    if text is None or text == '':
        return []
    return [item.strip() for item in str(text).split(',')]


def join_cart_items(items: Optional[List[str]]) -> str:
    return CART_ITEMS_SEPARATOR.join(items or [])


def utc_now_iso(now: Optional[datetime] = None) -> str:
    """Current time as ISO-8601 UTC with milliseconds, e.g. 2024-05-01T09:30:00.000Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def coerce_amount(value: Any) -> Any:
    """Turn a form amount into a number when it reads as one; otherwise pass it through"""
    if value is None or isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return value
    return int(number) if number.is_integer() else number


@dataclass(frozen=True)
class Order:
    """An order document as confirmed by the store"""
    id: str
    full_name: str = ''
    email: str = ''
    phone: str = ''
    address: str = ''
    city: str = ''
    postal_code: str = ''
    country: str = ''
    payment_method: str = PaymentMethod.CREDIT_CARD.value
    payment_status: str = PaymentStatus.PAID.value
    amount: Any = 0
    created_at: str = ''
    cart_items: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'Order':
        values = dict((attr, doc.get(doc_name) or '') for attr, doc_name in TEXT_FIELDS)
        return cls(
            id=doc.get('_id') or doc.get('id') or '',
            payment_method=doc.get('paymentMethod') or PaymentMethod.CREDIT_CARD.value,
            payment_status=doc.get('paymentStatus') or PaymentStatus.PAID.value,
            amount=doc.get('amount') if doc.get('amount') is not None else 0,
            created_at=doc.get('createdAt') or '',
            cart_items=list(doc.get('cartItems') or []),
            **values
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {'_id': self.id}
        for attr, doc_name in TEXT_FIELDS:
            data[doc_name] = getattr(self, attr)
        data.update({
            'paymentMethod': self.payment_method,
            'paymentStatus': self.payment_status,
            'amount': self.amount,
            'createdAt': self.created_at,
            'cartItems': list(self.cart_items),
        })
        return data


@dataclass(frozen=True)
class OrderDraft:
    """Form state for creating or editing an order.

    Attributes left as None were never touched and are not sent to the
    store. Fields the form posts that are not part of an order are kept in
    `extra` and sent along unchanged.
    """
    id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    payment_method: Optional[str] = None
    payment_status: Optional[str] = None
    amount: Any = None
    created_at: Optional[str] = None
    cart_items_text: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> 'OrderDraft':
        return cls()

    @classmethod
    def from_order(cls, order: Order) -> 'OrderDraft':
        values = dict((attr, getattr(order, attr)) for attr, _ in TEXT_FIELDS)
        return cls(
            id=order.id,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            amount=order.amount,
            created_at=order.created_at,
            cart_items_text=join_cart_items(order.cart_items),
            **values
        )

    def with_field(self, name: str, value: Any, input_type: str = 'text') -> 'OrderDraft':
        """Return a copy with one form field set to its raw value.

        Checkbox inputs store a boolean; everything else is stored as given.
        """
        if input_type == 'checkbox':
            if not isinstance(value, bool):
                value = str(value).strip().lower() in CHECKBOX_TRUE_VALUES

        attr = FORM_FIELDS.get(name)
        if attr is None:
            if name in ('_id', 'id'):
                return self
            extra = dict(self.extra)
            extra[name] = value
            return replace(self, extra=extra)
        return replace(self, **{attr: value})

    def display_value(self, name: str, default: Any = '') -> Any:
        """Value for a form input, by document field name"""
        attr = FORM_FIELDS.get(name)
        value = getattr(self, attr) if attr else self.extra.get(name)
        return default if value is None or value == '' else value

    def to_document(self, now: Optional[datetime] = None, for_create: bool = False) -> Dict[str, Any]:
        """Build the store payload from the draft.

        Cart items are always sent as a list. For a create the document gets
        its `_type` tag and `createdAt` defaults to the current time.
        """
        doc: Dict[str, Any] = {}
        if for_create:
            doc['_type'] = ORDER_TYPE
        doc.update(self.extra)

        for attr, doc_name in TEXT_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                doc[doc_name] = value
        if self.payment_method is not None:
            doc['paymentMethod'] = self.payment_method
        if self.payment_status is not None:
            doc['paymentStatus'] = self.payment_status
        if self.amount is not None:
            doc['amount'] = coerce_amount(self.amount)
        if self.created_at:
            doc['createdAt'] = self.created_at
        elif for_create:
            doc['createdAt'] = utc_now_iso(now)

        doc['cartItems'] = parse_cart_items(self.cart_items_text)
        return doc

    def to_dict(self) -> Dict[str, Any]:
        data = {'_id': self.id}
        for doc_name, attr in FORM_FIELDS.items():
            data[doc_name] = getattr(self, attr)
        data['extra'] = dict(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderDraft':
        values = dict((attr, data.get(doc_name)) for doc_name, attr in FORM_FIELDS.items())
        return cls(id=data.get('_id'), extra=dict(data.get('extra') or {}), **values)
