import json

import pytest
import requests

from storefront.repositories.base import ApiClient, BaseApiRepository
from storefront.repositories.errors import (
    ApiError,
    BackendUnavailable,
    NotFound,
    Unauthorized,
    ValidationFailed,
)


def make_response(status, body=None):
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps(body).encode() if body is not None else b''
    return response


class RecordingSession(requests.Session):
    """requests.Session answering with a prepared response or exception."""

    def __init__(self, outcome):
        super().__init__()
        self.outcome = outcome
        self.last = None

    def request(self, method, url, **kwargs):
        self.last = dict(kwargs, method=method, url=url)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def client_for(outcome, token=None, locale='ar'):
    session = RecordingSession(outcome)
    client = ApiClient(
        'http://api.test/api/v1/',
        timeout=5,
        token_provider=lambda: token,
        locale_provider=lambda: locale,
        session=session,
    )
    return client, session


def test_success_returns_body_and_sends_headers():
    client, session = client_for(make_response(200, {'data': [1]}), token='tok')
    assert client.get('/products', params={'search': 'tea', 'category': '', 'city_id': None}) == {'data': [1]}
    assert session.last['url'] == 'http://api.test/api/v1/products'
    assert session.last['params'] == {'search': 'tea'}
    assert session.last['headers']['Authorization'] == 'Bearer tok'
    assert session.last['headers']['Accept-Language'] == 'ar'
    assert session.last['timeout'] == 5


def test_anonymous_call_has_no_authorization():
    client, session = client_for(make_response(204))
    assert client.delete('/cart/clear') == {}
    assert 'Authorization' not in session.last['headers']


def test_validation_errors_are_collapsed_per_field():
    body = {'message': 'The given data was invalid.', 'errors': {'address': ['The address field is required.']}}
    client, _ = client_for(make_response(422, body))
    with pytest.raises(ValidationFailed) as exc:
        client.post('/delivery-locations', json={})
    assert exc.value.errors == {'address': 'The address field is required.'}
    assert exc.value.status == 422


@pytest.mark.parametrize('status,error', [
    (401, Unauthorized),
    (404, NotFound),
    (500, ApiError),
])
def test_error_statuses(status, error):
    client, _ = client_for(make_response(status, {'message': 'nope'}))
    with pytest.raises(error) as exc:
        client.get('/user')
    assert exc.value.message == 'nope'


def test_non_json_error_body_gets_generic_message():
    response = make_response(502)
    response._content = b'<html>Bad gateway</html>'
    client, _ = client_for(response)
    with pytest.raises(ApiError) as exc:
        client.get('/home')
    assert exc.value.message == 'Backend error 502'


def test_connection_failure_is_backend_unavailable():
    client, _ = client_for(requests.ConnectionError('refused'))
    with pytest.raises(BackendUnavailable):
        client.get('/home')


def test_unwrap_envelope():
    assert BaseApiRepository.unwrap({'success': True, 'data': {'id': 1}}) == {'id': 1}
    assert BaseApiRepository.unwrap([1, 2]) == [1, 2]
    assert BaseApiRepository.unwrap(None, []) == []
    with pytest.raises(ApiError):
        BaseApiRepository.unwrap({'success': False, 'message': 'Cart is empty'})
