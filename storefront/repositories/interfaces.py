# ==============================================================================
# REPOSITORY INTERFACES
# ==============================================================================
#
# Contracts the services depend on. The concrete classes talk to the backend
# JSON API over HTTP; tests can hand the services any object that satisfies
# these protocols.
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


# ==============================================================================
# CATALOG
# ==============================================================================

@runtime_checkable
class ICatalogRepository(Protocol):
    """Products, categories and stores."""

    def home(self) -> Dict[str, Any]:
        ...

    def list_products(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...

    def get_product(self, product_id: int) -> Dict[str, Any]:
        ...

    def list_categories(self) -> List[Dict[str, Any]]:
        ...

    def get_category(self, category_id: int, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...

    def list_stores(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...

    def list_store_types(self) -> List[Dict[str, Any]]:
        ...

    def get_store(self, store_id: int, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...


@runtime_checkable
class ILocationRepository(Protocol):
    """Governorates, cities and areas."""

    def governorates(self) -> List[Dict[str, Any]]:
        ...

    def cities(self, governorate_id: int) -> List[Dict[str, Any]]:
        ...

    def areas(self) -> List[Dict[str, Any]]:
        ...


# ==============================================================================
# CUSTOMER
# ==============================================================================

@runtime_checkable
class ICartRepository(Protocol):

    def get_cart(self) -> Dict[str, Any]:
        ...

    def add(self, product_id: int, quantity: int) -> Any:
        ...

    def update(self, product_id: int, quantity: int) -> Any:
        ...

    def remove(self, product_id: int) -> Any:
        ...

    def clear(self) -> Any:
        ...


@runtime_checkable
class IOrderRepository(Protocol):

    def list_orders(self, page: Optional[int] = None) -> Dict[str, Any]:
        ...

    def get_order(self, order_id: int) -> Dict[str, Any]:
        ...

    def place_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def cancel(self, order_id: int) -> Any:
        ...


@runtime_checkable
class IDeliveryLocationRepository(Protocol):

    def list_locations(self) -> List[Dict[str, Any]]:
        ...

    def create(self, payload: Dict[str, Any]) -> Any:
        ...

    def delete(self, location_id: int) -> Any:
        ...

    def set_default(self, location_id: int) -> Any:
        ...


@runtime_checkable
class IAccountRepository(Protocol):
    """Auth, profile, dashboard, role upgrade and driver application."""

    def login(self, phone: str, password: str) -> Dict[str, Any]:
        ...

    def logout(self) -> Any:
        ...

    def current_user(self) -> Dict[str, Any]:
        ...

    def update_profile(self, fields: Dict[str, Any], avatar=None) -> Dict[str, Any]:
        ...

    def dashboard(self) -> Dict[str, Any]:
        ...

    def upgrade_role(self, target_role: str, reason: str = '') -> Any:
        ...

    def driver_application(self) -> Optional[Dict[str, Any]]:
        ...


@runtime_checkable
class IFavoriteRepository(Protocol):

    def list_favorites(self) -> List[Dict[str, Any]]:
        ...

    def add(self, product_id: int) -> Any:
        ...

    def remove(self, product_id: int) -> Any:
        ...


# ==============================================================================
# SITE
# ==============================================================================

@runtime_checkable
class INotificationRepository(Protocol):

    def summary(self, limit: int = 10) -> Dict[str, Any]:
        ...

    def mark_read(self, notification_id: str) -> Any:
        ...

    def mark_all_read(self) -> Any:
        ...


@runtime_checkable
class ISettingsRepository(Protocol):

    def general(self) -> Dict[str, Any]:
        ...

    def translations(self, locale: str) -> Dict[str, str]:
        ...
