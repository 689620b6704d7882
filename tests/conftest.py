import os
import re
import sys

import pytest

# ensure project root is on sys.path when running from tests/ folder
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# no profiling logs while testing
os.environ['STOREFRONT_ENABLE_PROFILING'] = '0'

from storefront.app_container import AppContainer, get_container
from storefront.main import app
from storefront.repositories.errors import ApiError


CSRF_RE = re.compile(r'name="csrf_token" value="([0-9a-f]+)"')

CUSTOMER = {
    'id': 7,
    'name': 'Sara Haddad',
    'phone': '0999000111',
    'avatar': None,
    'governorate_id': 1,
    'city_id': 11,
    'area_id': 3,
    'user_type': 'customer',
}


class FakeApiClient:
    """
    Stands in for ApiClient: canned bodies per (METHOD, path), every call
    recorded. Unknown paths answer {}. A canned ApiError is raised instead
    of returned.
    """

    def __init__(self):
        self.responses = {}
        self.calls = []

    def on(self, method, path, body):
        self.responses[(method.upper(), path)] = body
        return self

    def request(self, method, path, params=None, json=None, data=None, files=None):
        method = method.upper()
        self.calls.append({
            'method': method,
            'path': path,
            'params': params,
            'json': json,
            'data': data,
            'files': files,
        })
        body = self.responses.get((method, path), {})
        if isinstance(body, ApiError):
            raise body
        if callable(body):
            return body(params=params, json=json, data=data, files=files)
        return body

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None, data=None, files=None):
        return self.request('POST', path, json=json, data=data, files=files)

    def put(self, path, json=None):
        return self.request('PUT', path, json=json)

    def delete(self, path):
        return self.request('DELETE', path)

    def called(self, method, path):
        return [c for c in self.calls if c['method'] == method.upper() and c['path'] == path]


@pytest.fixture
def api():
    fake = FakeApiClient()
    fake.on('POST', '/login', {'token': 'test-token', 'user': dict(CUSTOMER)})
    return fake


@pytest.fixture
def client(api):
    app.config['TESTING'] = True
    AppContainer.reset_instance()
    get_container(api_client=api)
    with app.test_client() as c:
        yield c
    AppContainer.reset_instance()


def csrf_from(html):
    m = CSRF_RE.search(html)
    return m.group(1) if m else None


def login_customer(client):
    getr = client.get('/login')
    assert getr.status_code == 200
    token = csrf_from(getr.get_data(as_text=True))
    assert token, 'no csrf token in login page'
    r = client.post('/login', data={'phone': CUSTOMER['phone'], 'password': 'secret', 'csrf_token': token})
    assert r.status_code == 302
    return token
