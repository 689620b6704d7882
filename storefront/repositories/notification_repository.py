# ==============================================================================
# NOTIFICATION REPOSITORY
# ==============================================================================

from typing import Any, Dict

from .base import BaseApiRepository


class NotificationRepository(BaseApiRepository):
    """
    Endpoints:
        GET  /notifications?limit=
        POST /notifications/{id}/read
        POST /notifications/read-all
    """

    def summary(self, limit: int = 10) -> Dict[str, Any]:
        """
        Unread count and the most recent notifications.

        Returns:
            {'unread_count': int, 'recent': [...]}
        """
        body = self.client.get('/notifications', params={'limit': limit}) or {}
        data = self.unwrap(body, {}) or {}
        if isinstance(data, list):
            return {'unread_count': body.get('unread_count', 0), 'recent': data[:limit]}
        return {
            'unread_count': data.get('unread_count', 0),
            'recent': (data.get('recent') or data.get('notifications') or [])[:limit],
        }

    def mark_read(self, notification_id: str) -> Any:
        return self.client.post(f'/notifications/{notification_id}/read', json={})

    def mark_all_read(self) -> Any:
        return self.client.post('/notifications/read-all', json={})
