# ==============================================================================
# SETTINGS REPOSITORY
# ==============================================================================
# General marketplace settings (site name, currency, formats, maintenance)
# and backend translation overrides.
# ==============================================================================

from typing import Any, Dict

from .base import BaseApiRepository


class SettingsRepository(BaseApiRepository):
    """
    Endpoints:
        GET /settings
        GET /translations?locale=
    """

    def general(self) -> Dict[str, Any]:
        return self.unwrap(self.client.get('/settings'), {}) or {}

    def translations(self, locale: str) -> Dict[str, str]:
        """
        Translation overrides for a locale.

        Returns:
            Flat {key: text} mapping (empty when the backend has none)
        """
        data = self.unwrap(self.client.get('/translations', params={'locale': locale}), {}) or {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}
