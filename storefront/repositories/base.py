# ==============================================================================
# BASE REPOSITORY - shared access to the marketplace JSON API
# ==============================================================================
# ApiClient wraps a requests.Session: base URL, bearer token, locale header
# and timeout. Repositories only describe endpoints and payloads.
# ==============================================================================

from typing import Any, Dict, Optional

import requests

from storefront.performance_logger import profile_function
from storefront.repositories.errors import (
    ApiError,
    BackendUnavailable,
    NotFound,
    Unauthorized,
    ValidationFailed,
    normalize_field_errors,
)


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drop unset query values so the backend sees only active filters."""
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None and v != ''}


class ApiClient:
    """
    HTTP client for the backend API.

    The token and locale are resolved per call through callables, so the
    same client can be shared by every request thread while still speaking
    for the customer of the current request.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 10,
        token_provider=None,
        locale_provider=None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: Backend root, e.g. http://localhost:8000/api/v1
            timeout: Seconds per request
            token_provider: Callable returning the bearer token or None
            locale_provider: Callable returning 'ar' / 'en'
            session: Pre-built requests.Session (tests, connection pooling)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.token_provider = token_provider or (lambda: None)
        self.locale_provider = locale_provider or (lambda: None)
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

    def _headers(self) -> Dict[str, str]:
        headers = {}
        token = self.token_provider()
        if token:
            headers['Authorization'] = f'Bearer {token}'
        locale = self.locale_provider()
        if locale:
            headers['Accept-Language'] = locale
        return headers

    @profile_function(name='Backend API call')
    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform a call and return the decoded JSON body.

        Raises:
            ValidationFailed: 422 with field errors
            Unauthorized: 401
            NotFound: 404
            ApiError: any other error status
            BackendUnavailable: no response (connection error, timeout)
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(
                method,
                url,
                params=clean_params(params),
                json=json,
                data=data,
                files=files,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise BackendUnavailable(f'Backend unreachable: {e}') from e

        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}

        if response.status_code < 400:
            return body

        message = body.get('message') if isinstance(body, dict) else None
        message = message or f'Backend error {response.status_code}'
        status = response.status_code

        if status == 422:
            raise ValidationFailed(message, status, normalize_field_errors(body.get('errors')))
        if status == 401:
            raise Unauthorized(message, status)
        if status == 404:
            raise NotFound(message, status)
        raise ApiError(message, status)

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None, data=None, files=None):
        return self.request('POST', path, json=json, data=data, files=files)

    def put(self, path, json=None):
        return self.request('PUT', path, json=json)

    def delete(self, path):
        return self.request('DELETE', path)


class BaseApiRepository:
    """
    Base class for every repository.

    Provides the client and helpers to unwrap the `{success, data}` envelope
    some endpoints use.
    """

    def __init__(self, client: ApiClient):
        self.client = client

    @staticmethod
    def unwrap(body: Any, default: Any = None) -> Any:
        """
        Return `data` from a `{success, data}` envelope, or the body itself.

        Raises:
            ApiError: the envelope reports success = false
        """
        if isinstance(body, dict) and 'success' in body:
            if not body.get('success'):
                raise ApiError(body.get('message') or 'Request failed')
            return body.get('data', default)
        if body is None:
            return default
        return body
