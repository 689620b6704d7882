# ==============================================================================
# ACCOUNT REPOSITORY
# ==============================================================================
# Authentication, the customer profile, the role upgrade request and the
# driver application lookup.
# ==============================================================================

from typing import Any, Dict, Optional

from .base import BaseApiRepository
from .errors import NotFound


class AccountRepository(BaseApiRepository):
    """
    Endpoints:
        POST /login, /logout
        GET  /user
        POST /user/profile          multipart (avatar optional)
        GET  /user/dashboard
        POST /user/upgrade-role     {target_role, reason}
        GET  /driver-application
    """

    # =========================================================================
    # AUTH
    # =========================================================================

    def login(self, phone: str, password: str) -> Dict[str, Any]:
        """
        Exchange credentials for an API token.

        Returns:
            {'token': str, 'user': {...}}
        """
        body = self.client.post('/login', json={'phone': phone, 'password': password}) or {}
        data = self.unwrap(body, {}) or {}
        return {
            'token': data.get('token') or body.get('token'),
            'user': data.get('user') or body.get('user') or {},
        }

    def logout(self) -> Any:
        return self.client.post('/logout', json={})

    def current_user(self) -> Dict[str, Any]:
        return self.unwrap(self.client.get('/user'), {}) or {}

    # =========================================================================
    # PROFILE
    # =========================================================================

    def update_profile(self, fields: Dict[str, Any], avatar=None) -> Dict[str, Any]:
        """
        Send the profile form as multipart.

        Args:
            fields: name, phone, address, governorate_id, area_id
            avatar: werkzeug FileStorage or None
        """
        files = None
        if avatar is not None:
            files = {'avatar': (avatar.filename, avatar.stream, avatar.mimetype)}
        body = self.client.post('/user/profile', data=fields, files=files)
        return self.unwrap(body, {}) or {}

    def dashboard(self) -> Dict[str, Any]:
        """Summary counters and recent orders for the customer dashboard."""
        return self.unwrap(self.client.get('/user/dashboard'), {}) or {}

    def upgrade_role(self, target_role: str, reason: str = '') -> Any:
        return self.client.post('/user/upgrade-role', json={'target_role': target_role, 'reason': reason})

    def driver_application(self) -> Optional[Dict[str, Any]]:
        """The current driver application, or None if the customer never applied."""
        try:
            data = self.unwrap(self.client.get('/driver-application'), None)
        except NotFound:
            return None
        return data or None
