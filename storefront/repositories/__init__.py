# ==============================================================================
# REPOSITORY LAYER - access to the marketplace backend
# ==============================================================================
# Every repository speaks to the backend JSON API through a shared ApiClient.
# Services depend on the protocols in interfaces.py, not on HTTP.
#
# LAYOUT:
# ├── interfaces.py                   → Protocols the services rely on
# ├── errors.py                       → ApiError and its subclasses
# ├── base.py                         → ApiClient, BaseApiRepository
# ├── catalog_repository.py           → products, categories, stores
# ├── location_repository.py          → governorates, cities, areas
# ├── cart_repository.py              → backend cart
# ├── order_repository.py             → orders
# ├── delivery_location_repository.py → saved delivery addresses
# ├── account_repository.py           → auth, profile, role upgrade
# ├── favorite_repository.py          → favorites
# ├── notification_repository.py      → notifications
# └── settings_repository.py          → general settings, translations
# ==============================================================================

from .interfaces import (
    ICatalogRepository,
    ILocationRepository,
    ICartRepository,
    IOrderRepository,
    IDeliveryLocationRepository,
    IAccountRepository,
    IFavoriteRepository,
    INotificationRepository,
    ISettingsRepository,
)

from .errors import ApiError, ValidationFailed, NotFound, Unauthorized, BackendUnavailable
from .base import ApiClient, BaseApiRepository, clean_params
from .catalog_repository import CatalogRepository
from .location_repository import LocationRepository
from .cart_repository import CartRepository
from .order_repository import OrderRepository
from .delivery_location_repository import DeliveryLocationRepository
from .account_repository import AccountRepository
from .favorite_repository import FavoriteRepository
from .notification_repository import NotificationRepository
from .settings_repository import SettingsRepository

__all__ = [
    # Interfaces
    'ICatalogRepository',
    'ILocationRepository',
    'ICartRepository',
    'IOrderRepository',
    'IDeliveryLocationRepository',
    'IAccountRepository',
    'IFavoriteRepository',
    'INotificationRepository',
    'ISettingsRepository',

    # Errors
    'ApiError',
    'ValidationFailed',
    'NotFound',
    'Unauthorized',
    'BackendUnavailable',

    # Base
    'ApiClient',
    'BaseApiRepository',
    'clean_params',

    # Implementations
    'CatalogRepository',
    'LocationRepository',
    'CartRepository',
    'OrderRepository',
    'DeliveryLocationRepository',
    'AccountRepository',
    'FavoriteRepository',
    'NotificationRepository',
    'SettingsRepository',
]
