# ==============================================================================
# DASHBOARD SERVICE
# ==============================================================================
# Customer dashboard overview, role upgrade requests and the display of the
# driver application status. The status itself is owned by the backend; this
# module only maps it to a badge, a hint and a call to action.
# ==============================================================================

from typing import Any, Dict, Optional

from storefront import config
from storefront.models import (
    DriverApplication,
    DriverApplicationStatus,
    Order,
    UPGRADE_TARGET_ROLES,
    to_int,
)
from storefront.repositories.errors import ApiError, BackendUnavailable, Unauthorized
from storefront.repositories.interfaces import IAccountRepository


# Driver pages live in the backend web app
DRIVER_APPLY_URL = f'{config.BACKEND_WEB_URL}/dashboard/driver/apply'
DRIVER_DASHBOARD_URL = f'{config.BACKEND_WEB_URL}/dashboard/driver'

# badge: CSS class, hint: translation key, cta: translation key
DRIVER_STATUS_META = {
    DriverApplicationStatus.PENDING.value: {
        'badge': 'badge-amber',
        'hint': 'driver_application_pending_hint',
        'cta': 'view_driver_application',
        'cta_url': DRIVER_APPLY_URL,
    },
    DriverApplicationStatus.REJECTED.value: {
        'badge': 'badge-rose',
        'hint': 'driver_application_rejected_hint',
        'cta': 'resubmit_driver_application',
        'cta_url': DRIVER_APPLY_URL,
    },
    DriverApplicationStatus.APPROVED.value: {
        'badge': 'badge-emerald',
        'hint': 'driver_application_approved_hint',
        'cta': 'go_to_driver_dashboard',
        'cta_url': DRIVER_DASHBOARD_URL,
    },
}

NO_APPLICATION = {
    'badge': None,
    'hint': 'upgrade_to_driver_hint',
    'cta': 'upgrade_to_driver',
    'cta_url': None,
}


def driver_status_view(application: Optional[DriverApplication], translate=None) -> Dict[str, Any]:
    """
    Badge, hint and call to action for the driver application card.

    Args:
        application: Current application or None
        translate: Callable used to resolve translation keys

    Returns:
        Dict with status, badge, hint, cta, cta_url. A rejected application
        with notes shows the notes as hint.
    """
    translate = translate or (lambda key: key)
    status = application.status if application else None
    meta = DRIVER_STATUS_META.get(status or '', NO_APPLICATION)

    if status == DriverApplicationStatus.REJECTED.value and application.notes:
        hint = application.notes
    else:
        hint = translate(meta['hint'])

    return {
        'status': status if status in DRIVER_STATUS_META else None,
        'badge': meta['badge'],
        'hint': hint,
        'cta': translate(meta['cta']),
        'cta_url': meta['cta_url'],
    }


class DashboardService:
    """
    Service for the customer dashboard.

    Responsibilities:
    - Overview counters and recent orders
    - Driver application status card
    - Role upgrade requests
    """

    def __init__(self, account_repo: IAccountRepository):
        self.account_repo = account_repo

    def overview(self) -> Dict[str, Any]:
        data = self.account_repo.dashboard()
        stats = data.get('stats') or {}
        return {
            'stats': {
                'total_orders': to_int(stats.get('total_orders'), 0),
                'pending_orders': to_int(stats.get('pending_orders'), 0),
                'completed_orders': to_int(stats.get('completed_orders'), 0),
                'favorites_count': to_int(stats.get('favorites_count'), 0),
            },
            'recent_orders': [Order.from_dict(o) for o in data.get('recent_orders') or []],
        }

    def driver_application(self) -> Optional[DriverApplication]:
        return DriverApplication.from_dict(self.account_repo.driver_application())

    def request_upgrade(self, target_role: Any, reason: str = '') -> Dict[str, Any]:
        """
        Ask for an extra role.

        A driver upgrade is an application filled on its own page, so it is
        answered with a redirect instead of a request.

        Returns:
            Dict with ok and either redirect or error
        """
        target_role = (target_role or '').strip()
        if target_role not in UPGRADE_TARGET_ROLES:
            return {'ok': False, 'error': 'invalid_target_role'}

        if target_role == 'driver':
            return {'ok': True, 'redirect': DRIVER_APPLY_URL}

        try:
            self.account_repo.upgrade_role(target_role, (reason or '').strip())
        except (Unauthorized, BackendUnavailable):
            raise
        except ApiError as e:
            return {'ok': False, 'error': e.message, 'errors': e.errors}
        return {'ok': True, 'redirect': None}
