"""
Route tests for the orders page, driven through the Flask test client
against the fake store.
"""

import pytest

from conftest import build_app

PAGE = '/admin/orders-manager/'


def form_values(**overrides):
    values = {
        'fullName': 'New Customer',
        'email': 'new@example.com',
        'phone': '555',
        'address': '2 Main St',
        'city': 'Leeds',
        'postalCode': 'LS1',
        'country': 'UK',
        'paymentMethod': 'cash',
        'paymentStatus': 'cash on delivery',
        'amount': '19.5',
        'createdAt': '',
        'cartItems': 'Tea, Cake',
    }
    values.update(overrides)
    return values


def test_first_visit_fetches_and_renders_cards(client, store):
    response = client.get(PAGE)

    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert 'Orders Dashboard' in html
    assert 'Ada Lovelace' in html
    assert 'Grace Hopper' in html
    assert 'Created At: 01/05/2024, 09:30:00' in html
    assert store.operations() == ['fetch']


def test_second_visit_uses_session_state(client, store):
    client.get(PAGE)
    client.get(PAGE)
    assert store.operations() == ['fetch']


def test_refresh_refetches(client, store):
    client.get(PAGE)
    response = client.post('/admin/orders-manager/refresh')

    assert response.status_code == 302
    assert store.operations() == ['fetch', 'fetch']


def test_form_hidden_until_add_clicked(client):
    html = client.get(PAGE).get_data(as_text=True)
    assert 'id="order-form"' not in html

    client.post('/admin/orders-manager/new')
    html = client.get(PAGE).get_data(as_text=True)
    assert 'id="order-form"' in html
    assert '>Create</button>' in html


def test_create_flow(client, store):
    client.get(PAGE)
    client.post('/admin/orders-manager/new')
    response = client.post('/admin/orders-manager/submit', data=form_values())

    assert response.status_code == 302
    created = store.calls[-1][1]
    assert created['_type'] == 'order'
    assert created['cartItems'] == ['Tea', 'Cake']
    assert created['amount'] == 19.5
    assert created['paymentStatus'] == 'cash on delivery'
    assert created['createdAt'].endswith('Z')

    html = client.get(PAGE).get_data(as_text=True)
    assert 'New Customer' in html
    assert 'id="order-form"' not in html


def test_edit_prefills_form(client):
    client.get(PAGE)
    client.post('/admin/orders-manager/edit/order-1')
    html = client.get(PAGE).get_data(as_text=True)

    assert 'Edit Order' in html
    assert 'value="A, B, C"' in html
    assert 'value="2024-05-01T09:30"' in html
    assert '>Update</button>' in html


def test_update_flow(client, store):
    client.get(PAGE)
    client.post('/admin/orders-manager/edit/order-2')
    client.post('/admin/orders-manager/submit', data=form_values(fullName='Grace M. Hopper', cartItems='X'))

    operation, order_id, fields = store.calls[-1]
    assert (operation, order_id) == ('patch', 'order-2')
    assert fields['fullName'] == 'Grace M. Hopper'
    assert fields['cartItems'] == ['X']

    html = client.get(PAGE).get_data(as_text=True)
    assert 'Grace M. Hopper' in html
    assert 'Ada Lovelace' in html


def test_failed_update_alerts_and_keeps_form(client, store):
    client.get(PAGE)
    client.post('/admin/orders-manager/edit/order-1')
    store.failing.add('patch')
    client.post('/admin/orders-manager/submit', data=form_values(fullName='Unsaved Name'))

    html = client.get(PAGE).get_data(as_text=True)
    assert 'Failed to update order' in html
    assert 'Edit Order' in html
    assert 'value="Unsaved Name"' in html
    assert 'Ada Lovelace' in html


def test_cancel_closes_form(client):
    client.get(PAGE)
    client.post('/admin/orders-manager/new')
    client.post('/admin/orders-manager/cancel')

    html = client.get(PAGE).get_data(as_text=True)
    assert 'id="order-form"' not in html


def test_delete_without_confirmation_does_nothing(client, store):
    client.get(PAGE)
    client.post('/admin/orders-manager/delete/order-1', data={'confirmed': 'no'})

    assert 'delete' not in store.operations()
    assert 'Ada Lovelace' in client.get(PAGE).get_data(as_text=True)


def test_delete_with_confirmation(client, store):
    client.get(PAGE)
    client.post('/admin/orders-manager/delete/order-1', data={'confirmed': 'yes'})

    assert store.calls[-1] == ('delete', 'order-1')
    html = client.get(PAGE).get_data(as_text=True)
    assert 'Ada Lovelace' not in html
    assert 'Grace Hopper' in html


def test_failed_delete_alerts(client, store):
    client.get(PAGE)
    store.failing.add('delete')
    client.post('/admin/orders-manager/delete/order-1', data={'confirmed': 'yes'})

    html = client.get(PAGE).get_data(as_text=True)
    assert 'Failed to delete order' in html
    assert 'Ada Lovelace' in html


def test_failed_fetch_renders_page_without_alert(client, store):
    store.failing.add('fetch')
    response = client.get(PAGE)

    assert response.status_code == 200
    assert 'alert(' not in response.get_data(as_text=True)


def test_api_orders_returns_session_state(client):
    client.get(PAGE)
    data = client.get('/admin/orders-manager/api/orders').get_json()

    assert data['success'] is True
    assert [o['_id'] for o in data['orders']] == ['order-1', 'order-2', 'order-3']
    assert data['mode'] == {'kind': 'viewing'}


def test_api_field_change_updates_draft(client):
    client.get(PAGE)
    client.post('/admin/orders-manager/new')
    response = client.post('/admin/orders-manager/api/field',
                           json={'name': 'fullName', 'value': 'Typed', 'type': 'text'})

    assert response.status_code == 200
    assert response.get_json()['draft']['fullName'] == 'Typed'
    assert 'value="Typed"' in client.get(PAGE).get_data(as_text=True)


def test_api_field_change_checkbox(client):
    response = client.post('/admin/orders-manager/api/field',
                           json={'name': 'giftWrap', 'value': True, 'type': 'checkbox'})
    assert response.get_json()['draft']['extra'] == {'giftWrap': True}


def test_api_field_change_requires_name(client):
    response = client.post('/admin/orders-manager/api/field', json={'value': 'x'})
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_sessions_do_not_share_state(app, store):
    first = app.test_client()
    second = app.test_client()

    first.get(PAGE)
    first.post('/admin/orders-manager/new')

    html = second.get(PAGE).get_data(as_text=True)
    assert 'id="order-form"' not in html


@pytest.fixture
def locked_app(tmp_db_dir, store):
    return build_app(tmp_db_dir, store, admin_password='s3cret')


def test_page_requires_login_when_password_set(locked_app, store):
    client = locked_app.test_client()
    response = client.get(PAGE, follow_redirects=False)

    assert response.status_code == 302
    assert '/admin/login' in response.headers['Location']
    assert store.calls == []


def test_api_requires_login_when_password_set(locked_app):
    response = locked_app.test_client().get('/admin/orders-manager/api/orders')
    assert response.status_code == 401


def test_login_with_wrong_password(locked_app):
    client = locked_app.test_client()
    response = client.post('/admin/login', data={'password': 'nope'})

    assert response.status_code == 200
    assert 'Invalid password' in response.get_data(as_text=True)


def test_login_then_logout(locked_app):
    client = locked_app.test_client()
    response = client.post('/admin/login?next=/admin/orders-manager/', data={'password': 's3cret'})

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/admin/orders-manager/')
    assert client.get(PAGE).status_code == 200

    client.get('/admin/logout')
    assert client.get(PAGE).status_code == 302


def test_login_ignores_external_next(locked_app):
    client = locked_app.test_client()
    response = client.post('/admin/login?next=//evil.example.com/', data={'password': 's3cret'})
    assert 'evil.example.com' not in response.headers['Location']


def test_logout_drops_view_state(locked_app, store):
    client = locked_app.test_client()
    client.post('/admin/login', data={'password': 's3cret'})
    client.get(PAGE)
    client.get('/admin/logout')
    client.post('/admin/login', data={'password': 's3cret'})
    client.get(PAGE)

    assert store.operations() == ['fetch', 'fetch']


def test_non_text_cart_items_value_does_not_break_submit(client, store):
    client.get(PAGE)
    client.post('/admin/orders-manager/new')
    client.post('/admin/orders-manager/api/field',
                json={'name': 'cartItems', 'value': True, 'type': 'checkbox'})

    values = form_values()
    del values['cartItems']
    response = client.post('/admin/orders-manager/submit', data=values)

    assert response.status_code == 302
    assert store.calls[-1][0] == 'create'
    assert store.calls[-1][1]['cartItems'] == ['True']


def test_field_change_after_submit_keeps_created_order(client, store):
    client.get(PAGE)
    client.post('/admin/orders-manager/new')
    client.post('/admin/orders-manager/submit', data=form_values())
    client.post('/admin/orders-manager/api/field',
                json={'name': 'city', 'value': 'York', 'type': 'text'})

    html = client.get(PAGE).get_data(as_text=True)
    assert 'New Customer' in html
    assert 'id="order-form"' not in html


def test_cards_carry_their_edit_form(client):
    html = client.get(PAGE).get_data(as_text=True)

    assert html.count('class="edit-form"') == 3
    assert "card.querySelector('.edit-form').submit()" in html


def test_registry_keeps_one_entry_per_session(app):
    desk = app.extensions['orderdesk']
    for _ in range(3):
        app.test_client().get(PAGE)

    assert len(desk.registry) == 3
