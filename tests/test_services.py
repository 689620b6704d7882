import io
from decimal import Decimal

import pytest
from werkzeug.datastructures import FileStorage

from storefront.models import Area, CustomerLocation, DriverApplication
from storefront.repositories import (
    AccountRepository,
    CartRepository,
    DeliveryLocationRepository,
    LocationRepository,
    OrderRepository,
)
from storefront.repositories.errors import (
    ApiError,
    BackendUnavailable,
    NotFound,
    Unauthorized,
    ValidationFailed,
)
from storefront.services import (
    AuthService,
    CartService,
    DashboardService,
    DeliveryLocationService,
    OrderService,
    ProfileService,
    areas_for_governorate,
    avatar_url,
    driver_status_view,
    initials,
    status_meta,
    validate_location_form,
)
from storefront.services.dashboard_service import DRIVER_APPLY_URL, DRIVER_DASHBOARD_URL

from conftest import FakeApiClient


@pytest.fixture
def fake():
    return FakeApiClient()


# ==============================================================================
# CART
# ==============================================================================

def test_add_rejects_quantity_below_one_without_request(fake):
    service = CartService(CartRepository(fake))
    assert service.add_item(5, 0)['error'] == 'invalid_quantity'
    assert service.add_item(5, -2)['error'] == 'invalid_quantity'
    assert service.add_item('abc', 1)['error'] == 'invalid_product'
    assert fake.calls == []


def test_add_defaults_to_one(fake):
    result = CartService(CartRepository(fake)).add_item('5', '')
    assert result['ok']
    assert fake.called('POST', '/cart/add')[0]['json'] == {'product_id': 5, 'quantity': 1}


@pytest.mark.parametrize('quantity', ['0', '-1'])
def test_zero_or_negative_quantity_removes(fake, quantity):
    result = CartService(CartRepository(fake)).set_quantity('5', quantity)
    assert result == {'ok': True, 'action': 'remove'}
    assert fake.called('DELETE', '/cart/remove/5')
    assert not fake.called('PUT', '/cart/update')


def test_positive_quantity_updates(fake):
    result = CartService(CartRepository(fake)).set_quantity(5, 3)
    assert result['action'] == 'update'
    assert fake.called('PUT', '/cart/update')[0]['json'] == {'product_id': 5, 'quantity': 3}
    assert not fake.called('DELETE', '/cart/remove/5')


def test_backend_error_is_reported_not_raised(fake):
    fake.on('PUT', '/cart/update', ApiError('Out of stock', 400))
    result = CartService(CartRepository(fake)).set_quantity(5, 30)
    assert result['ok'] is False
    assert result['error'] == 'Out of stock'


def test_expired_session_propagates(fake):
    fake.on('DELETE', '/cart/clear', Unauthorized('Unauthenticated.', 401))
    with pytest.raises(Unauthorized):
        CartService(CartRepository(fake)).clear()


# ==============================================================================
# DELIVERY LOCATIONS
# ==============================================================================

VALID_LOCATION = {
    'label': 'Home',
    'address': 'Mezzeh, building 4',
    'latitude': '33.5138004',
    'longitude': '36.2765',
}


def test_blank_address_never_reaches_backend(fake):
    result = DeliveryLocationService(DeliveryLocationRepository(fake)).create(
        dict(VALID_LOCATION, address='   ')
    )
    assert result['ok'] is False
    assert result['errors'] == {'address': 'field_required'}
    assert fake.calls == []


def test_location_limits_and_coordinates():
    form = dict(VALID_LOCATION, label='x' * 101, notes='n' * 256, latitude='91', longitude='abc')
    _, errors = validate_location_form(form, has_locations=True)
    assert errors == {
        'label': 'field_too_long',
        'notes': 'field_too_long',
        'latitude': 'invalid_latitude',
        'longitude': 'invalid_longitude',
    }


def test_coordinates_rounded_to_six_decimals():
    payload, errors = validate_location_form(VALID_LOCATION, has_locations=True)
    assert not errors
    assert payload['latitude'] == '33.513800'
    assert payload['is_default'] is False


def test_first_location_becomes_default(fake):
    fake.on('GET', '/delivery-locations', {'success': True, 'data': []})
    result = DeliveryLocationService(DeliveryLocationRepository(fake)).create(VALID_LOCATION)
    assert result['ok']
    assert fake.called('POST', '/delivery-locations')[0]['json']['is_default'] is True


def test_backend_field_errors_are_returned(fake):
    fake.on('POST', '/delivery-locations', ValidationFailed('Invalid', 422, {'label': 'taken'}))
    result = DeliveryLocationService(DeliveryLocationRepository(fake)).create(
        dict(VALID_LOCATION, is_default='1')
    )
    assert result['errors'] == {'label': 'taken'}


def test_default_location_prefers_flagged_one():
    first = CustomerLocation(1, 'Work', 'A', Decimal('1'), Decimal('1'))
    second = CustomerLocation(2, 'Home', 'B', Decimal('1'), Decimal('1'), is_default=True)
    assert DeliveryLocationService.default_location([first, second]) is second
    assert DeliveryLocationService.default_location([first]) is first
    assert DeliveryLocationService.default_location([]) is None


# ==============================================================================
# ORDERS
# ==============================================================================

def test_place_order_requires_saved_location(fake):
    result = OrderService(OrderRepository(fake)).place_order({'delivery_location_id': '9'}, [])
    assert result['errors'] == {'delivery_location_id': 'delivery_location_required'}
    assert fake.calls == []


def test_place_order_sends_location_fields(fake):
    fake.on('POST', '/orders', {'success': True, 'data': [{'id': 3, 'order_number': 'ORD-3'}, {'id': 4}]})
    home = CustomerLocation(2, 'Home', 'Mezzeh', Decimal('33.5'), Decimal('36.2'))
    result = OrderService(OrderRepository(fake)).place_order(
        {'delivery_location_id': '2', 'notes': ' ring twice '}, [home]
    )
    assert result['ok']
    assert [o.id for o in result['orders']] == [3, 4]
    sent = fake.called('POST', '/orders')[0]['json']
    assert sent['delivery_address'] == 'Mezzeh'
    assert sent['delivery_latitude'] == '33.5'
    assert sent['notes'] == 'ring twice'


def test_status_meta_falls_back_to_pending():
    assert status_meta('on_delivery')['badge'] == 'badge-indigo'
    assert status_meta('lost') == status_meta('pending')
    assert status_meta(None)['label'] == 'status_pending'


# ==============================================================================
# DASHBOARD
# ==============================================================================

def test_rejected_application_shows_notes():
    view = driver_status_view(DriverApplication('rejected', notes='Licence photo unreadable'))
    assert view['badge'] == 'badge-rose'
    assert view['hint'] == 'Licence photo unreadable'
    assert view['cta'] == 'resubmit_driver_application'
    assert view['cta_url'] == DRIVER_APPLY_URL


def test_rejected_without_notes_uses_hint():
    view = driver_status_view(DriverApplication('rejected'))
    assert view['hint'] == 'driver_application_rejected_hint'


def test_approved_and_missing_application():
    approved = driver_status_view(DriverApplication('approved'))
    assert approved['badge'] == 'badge-emerald'
    assert approved['cta_url'] == DRIVER_DASHBOARD_URL

    for application in (None, DriverApplication('weird')):
        view = driver_status_view(application)
        assert view['badge'] is None
        assert view['status'] is None
        assert view['cta'] == 'upgrade_to_driver'


def test_driver_upgrade_redirects_without_request(fake):
    result = DashboardService(AccountRepository(fake)).request_upgrade('driver')
    assert result == {'ok': True, 'redirect': DRIVER_APPLY_URL}
    assert fake.calls == []


def test_store_owner_upgrade_is_posted(fake):
    result = DashboardService(AccountRepository(fake)).request_upgrade('store_owner', ' I sell fruit ')
    assert result['ok']
    assert fake.called('POST', '/user/upgrade-role')[0]['json'] == {
        'target_role': 'store_owner',
        'reason': 'I sell fruit',
    }


def test_unknown_role_rejected(fake):
    assert DashboardService(AccountRepository(fake)).request_upgrade('admin')['error'] == 'invalid_target_role'
    assert fake.calls == []


def test_missing_driver_application_is_none(fake):
    fake.on('GET', '/driver-application', NotFound('No application', 404))
    assert DashboardService(AccountRepository(fake)).driver_application() is None


# ==============================================================================
# PROFILE
# ==============================================================================

def test_avatar_url_rules():
    assert avatar_url('https://cdn.test/a.png') == 'https://cdn.test/a.png'
    assert avatar_url('/img/a.png') == '/img/a.png'
    assert avatar_url('avatars/a.png') == '/storage/avatars/a.png'
    assert avatar_url(None) is None


def test_initials():
    assert initials('sara haddad khoury') == 'SH'
    assert initials('Omar') == 'O'
    assert initials('') == ''


def test_areas_filtered_by_governorate():
    areas = [Area(1, 'Mezzeh', governorate_id=1), Area(2, 'Jaramana', governorate_id=2), Area(3, 'Old')]
    assert [a.id for a in areas_for_governorate(areas, 1)] == [1, 3]
    assert [a.id for a in areas_for_governorate(areas, None)] == [1, 2, 3]


def _profile_form(**overrides):
    form = {'name': 'Sara', 'phone': '0999', 'address': '', 'governorate_id': '1', 'area_id': '3'}
    form.update(overrides)
    return form


def test_profile_rejects_bad_avatar_type(fake):
    avatar = FileStorage(stream=io.BytesIO(b'MZ'), filename='tool.exe', content_type='application/octet-stream')
    result = ProfileService(AccountRepository(fake), LocationRepository(fake)).update(_profile_form(), avatar)
    assert result['errors'] == {'avatar': 'avatar_invalid_type'}
    assert fake.calls == []


def test_profile_rejects_large_avatar(fake):
    avatar = FileStorage(stream=io.BytesIO(b'0' * (3 * 1024 * 1024)), filename='me.png', content_type='image/png')
    result = ProfileService(AccountRepository(fake), LocationRepository(fake)).update(_profile_form(), avatar)
    assert result['errors'] == {'avatar': 'avatar_too_large'}


def test_profile_required_fields(fake):
    result = ProfileService(AccountRepository(fake), LocationRepository(fake)).update(
        _profile_form(name=' ', area_id='')
    )
    assert result['errors'] == {'name': 'field_required', 'area_id': 'field_required'}


def test_profile_sent_as_multipart(fake):
    fake.on('POST', '/user/profile', {'success': True, 'data': {'user': {'id': 7, 'name': 'Sara H'}}})
    avatar = FileStorage(stream=io.BytesIO(b'\x89PNG'), filename='me.png', content_type='image/png')
    result = ProfileService(AccountRepository(fake), LocationRepository(fake)).update(_profile_form(), avatar)
    assert result['ok']
    assert result['customer'].name == 'Sara H'
    call = fake.called('POST', '/user/profile')[0]
    assert call['data']['governorate_id'] == 1
    assert call['files']['avatar'][0] == 'me.png'


# ==============================================================================
# AUTH
# ==============================================================================

def test_login_requires_both_fields(fake):
    result = AuthService(AccountRepository(fake)).login('', '')
    assert result['errors'] == {'phone': 'field_required', 'password': 'field_required'}
    assert fake.calls == []


def test_login_wrong_credentials(fake):
    fake.on('POST', '/login', Unauthorized('Invalid credentials', 401))
    result = AuthService(AccountRepository(fake)).login('0999', 'bad')
    assert result == {'ok': False, 'error': 'Invalid credentials', 'errors': {}}


def test_login_enveloped_token(fake):
    fake.on('POST', '/login', {'success': True, 'data': {'token': 'abc', 'user': {'id': 7, 'name': 'Sara'}}})
    result = AuthService(AccountRepository(fake)).login('0999', 'secret')
    assert result['token'] == 'abc'
    assert result['customer'].id == 7


def test_login_backend_down_propagates(fake):
    fake.on('POST', '/login', BackendUnavailable('down'))
    with pytest.raises(BackendUnavailable):
        AuthService(AccountRepository(fake)).login('0999', 'secret')
