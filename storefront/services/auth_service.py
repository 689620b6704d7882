# ==============================================================================
# AUTH SERVICE
# ==============================================================================
# Bridges the storefront session with the backend token authentication.
# The token and a compact copy of the customer live in the Flask session.
# ==============================================================================

from typing import Any, Dict

from storefront.models import Customer
from storefront.repositories.errors import ApiError, BackendUnavailable, Unauthorized, ValidationFailed
from storefront.repositories.interfaces import IAccountRepository


class AuthService:
    """
    Service for login and logout.

    Responsibilities:
    - Exchange phone + password for a backend token
    - Refresh the customer copy kept in the session
    - Revoke the token on logout
    """

    def __init__(self, account_repo: IAccountRepository):
        self.account_repo = account_repo

    def login(self, phone: str, password: str) -> Dict[str, Any]:
        """
        Log a customer in.

        Returns:
            Dict with ok, token and customer, or error / errors
        """
        phone = (phone or '').strip()
        if not phone or not password:
            errors = {}
            if not phone:
                errors['phone'] = 'field_required'
            if not password:
                errors['password'] = 'field_required'
            return {'ok': False, 'errors': errors}

        try:
            data = self.account_repo.login(phone, password)
        except BackendUnavailable:
            raise
        except (ValidationFailed, Unauthorized) as e:
            return {'ok': False, 'error': e.message, 'errors': e.errors}
        except ApiError as e:
            return {'ok': False, 'error': e.message}

        if not data.get('token'):
            return {'ok': False, 'error': 'request_failed'}
        return {
            'ok': True,
            'token': data['token'],
            'customer': Customer.from_dict(data.get('user') or {}),
        }

    def logout(self) -> None:
        """Revoke the backend token. An already expired token is not an error."""
        try:
            self.account_repo.logout()
        except Unauthorized:
            pass

    def refresh_customer(self) -> Customer:
        return Customer.from_dict(self.account_repo.current_user())
