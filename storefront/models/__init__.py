# ==============================================================================
# MODEL LAYER - view models of the marketplace API
# ==============================================================================
# Dataclasses built from backend JSON with `from_dict`. They carry display
# helpers only; business rules stay on the server.
# ==============================================================================

from .entities import (
    # Enumerations
    OrderStatus,
    DriverApplicationStatus,
    UserType,
    UPGRADE_TARGET_ROLES,

    # Helpers
    to_decimal,
    to_int,
    localized,

    # Locations
    Governorate,
    City,
    Area,

    # Catalog
    Category,
    Store,
    Product,

    # Pagination
    PageLink,
    Paginated,

    # Cart & orders
    CartItem,
    Cart,
    OrderItem,
    Order,

    # Customer
    CustomerLocation,
    Customer,
    DriverApplication,
    Notification,

    # Settings
    GeneralSettings,
)

__all__ = [
    'OrderStatus',
    'DriverApplicationStatus',
    'UserType',
    'UPGRADE_TARGET_ROLES',
    'to_decimal',
    'to_int',
    'localized',
    'Governorate',
    'City',
    'Area',
    'Category',
    'Store',
    'Product',
    'PageLink',
    'Paginated',
    'CartItem',
    'Cart',
    'OrderItem',
    'Order',
    'CustomerLocation',
    'Customer',
    'DriverApplication',
    'Notification',
    'GeneralSettings',
]
