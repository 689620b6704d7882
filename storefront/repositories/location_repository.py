# ==============================================================================
# LOCATION REPOSITORY - governorates, cities, areas
# ==============================================================================

from typing import Any, Dict, List

from .base import BaseApiRepository


class LocationRepository(BaseApiRepository):
    """
    Administrative location lookups.

    /governorates and /cities answer with {success: bool, data: [...]}.
    """

    def governorates(self) -> List[Dict[str, Any]]:
        return self.unwrap(self.client.get('/governorates'), []) or []

    def cities(self, governorate_id: int) -> List[Dict[str, Any]]:
        """
        Cities of one governorate.

        Raises:
            ApiError: the envelope reported success = false
        """
        body = self.client.get('/cities', params={'governorate_id': governorate_id})
        return self.unwrap(body, []) or []

    def areas(self) -> List[Dict[str, Any]]:
        return self.unwrap(self.client.get('/areas'), []) or []
