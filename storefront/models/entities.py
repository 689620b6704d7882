# ==============================================================================
# DOMAIN ENTITIES - view models received from the marketplace API
# ==============================================================================
# Every entity is built from the JSON the backend returns. Nothing here is
# persisted or mutated locally: the storefront only displays these values
# and submits requests back to the API.
# ==============================================================================

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum
from decimal import Decimal, InvalidOperation
import html


# ==============================================================================
# ENUMERATIONS
# ==============================================================================

class OrderStatus(str, Enum):
    """Order lifecycle states reported by the backend."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    ON_DELIVERY = "on_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DriverApplicationStatus(str, Enum):
    """Review states of a driver application."""
    PENDING = "pending"
    REJECTED = "rejected"
    APPROVED = "approved"


class UserType(str, Enum):
    CUSTOMER = "customer"
    STORE_OWNER = "store_owner"
    DRIVER = "driver"
    ADMIN = "admin"


# Roles a customer may request from the dashboard
UPGRADE_TARGET_ROLES = frozenset(['store_owner', 'driver'])


# ==============================================================================
# HELPERS
# ==============================================================================

def to_decimal(value: Any, default: str = '0') -> Decimal:
    """Parse a money/coordinate value that may arrive as str, int or float."""
    if value is None or value == '':
        return Decimal(default)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal(default)


def to_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def localized(data: Dict[str, Any], key: str, locale: str) -> str:
    """
    Pick the locale specific variant of a field.

    The API sends either a single already-localized `name` or the pair
    `name_ar` / `name_en`.
    """
    if not data:
        return ''
    value = data.get(f'{key}_{locale}')
    if value:
        return value
    return data.get(key) or data.get(f'{key}_en') or data.get(f'{key}_ar') or ''


# ==============================================================================
# LOCATION HIERARCHY
# ==============================================================================

@dataclass
class Governorate:
    id: int
    name: str
    name_ar: str = ''
    name_en: str = ''

    def display_name(self, locale: str) -> str:
        if locale == 'ar' and self.name_ar:
            return self.name_ar
        if locale == 'en' and self.name_en:
            return self.name_en
        return self.name or self.name_en or self.name_ar

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Governorate':
        return cls(
            id=to_int(data.get('id'), 0),
            name=data.get('name') or '',
            name_ar=data.get('name_ar') or '',
            name_en=data.get('name_en') or '',
        )


@dataclass
class City(Governorate):
    governorate_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'City':
        return cls(
            id=to_int(data.get('id'), 0),
            name=data.get('name') or '',
            name_ar=data.get('name_ar') or '',
            name_en=data.get('name_en') or '',
            governorate_id=to_int(data.get('governorate_id')),
        )


@dataclass
class Area:
    """
    Delivery area used by the customer profile.

    The API labels the parent of an area `city`; when it also sends
    `governorate_id` that value is used for filtering.
    """
    id: int
    name: str
    city: str = ''
    governorate_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Area':
        return cls(
            id=to_int(data.get('id'), 0),
            name=data.get('name') or '',
            city=str(data.get('city') or ''),
            governorate_id=to_int(data.get('governorate_id')),
        )


# ==============================================================================
# CATALOG
# ==============================================================================

@dataclass
class Category:
    """
    Product category.

    Attributes:
        slug: Stable key used to look up the shared icon
        products_count: Number of products listed under the category
    """
    id: int
    name: str
    slug: str = ''
    description: str = ''
    icon: str = ''
    image: Optional[str] = None
    products_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Category':
        return cls(
            id=to_int(data.get('id'), 0),
            name=data.get('name') or '',
            slug=data.get('slug') or data.get('key') or '',
            description=data.get('description') or '',
            icon=data.get('icon') or '',
            image=data.get('image'),
            products_count=to_int(data.get('products_count'), 0),
        )


@dataclass
class Store:
    """
    Vendor selling products on the marketplace.

    Attributes:
        store_type_label: Human readable type, falls back to the raw type
        governorate / city: Location pair, both optional
    """
    id: int
    name: str
    store_type: str = ''
    store_type_label: str = ''
    address: str = ''
    phone: str = ''
    governorate: Optional[Governorate] = None
    city: Optional[City] = None
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    products_count: int = 0
    orders_count: int = 0

    @property
    def type_label(self) -> str:
        return self.store_type_label or self.store_type

    def location_label(self, locale: str) -> str:
        """'City, Governorate' in the reading order of the locale."""
        if not (self.governorate and self.city):
            return ''
        separator = '، ' if locale == 'ar' else ', '
        return f"{self.city.display_name(locale)}{separator}{self.governorate.display_name(locale)}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Store':
        gov = data.get('governorate')
        city = data.get('city')
        return cls(
            id=to_int(data.get('id'), 0),
            name=data.get('name') or '',
            store_type=data.get('store_type') or data.get('type') or '',
            store_type_label=data.get('store_type_label') or '',
            address=data.get('address') or '',
            phone=data.get('phone') or '',
            governorate=Governorate.from_dict(gov) if isinstance(gov, dict) else None,
            city=City.from_dict(city) if isinstance(city, dict) else None,
            opening_time=data.get('opening_time'),
            closing_time=data.get('closing_time'),
            products_count=to_int(data.get('products_count'), 0),
            orders_count=to_int(data.get('orders_count'), 0),
        )


@dataclass
class Product:
    """
    Sellable product of a store.

    Attributes:
        price: Unit price as Decimal (never float)
        unit: Selling unit label ("kg", "piece", ...)
        is_featured: Shows the featured badge on cards
    """
    id: int
    name: str
    description: str = ''
    price: Decimal = field(default_factory=lambda: Decimal('0'))
    unit: str = ''
    image: Optional[str] = None
    is_featured: bool = False
    store: Optional[Store] = None
    category: Optional[Category] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        store = data.get('store')
        category = data.get('category')
        return cls(
            id=to_int(data.get('id'), 0),
            name=data.get('name') or '',
            description=data.get('description') or '',
            price=to_decimal(data.get('price')),
            unit=data.get('unit') or '',
            image=data.get('image'),
            is_featured=bool(data.get('is_featured')),
            store=Store.from_dict(store) if isinstance(store, dict) else None,
            category=Category.from_dict(category) if isinstance(category, dict) else None,
        )


# ==============================================================================
# PAGINATION
# ==============================================================================

@dataclass
class PageLink:
    """One pagination link as produced by the backend paginator."""
    url: Optional[str]
    label: str
    active: bool = False

    @property
    def disabled(self) -> bool:
        return not self.url

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PageLink':
        return cls(
            url=data.get('url') or None,
            # Paginator labels carry HTML entities (&laquo; Previous)
            label=html.unescape(str(data.get('label') or '')),
            active=bool(data.get('active')),
        )


@dataclass
class Paginated:
    """
    Paginated collection: `data`, `total` and navigation `links`.

    `data` holds already converted entities.
    """
    data: List[Any] = field(default_factory=list)
    total: int = 0
    links: List[PageLink] = field(default_factory=list)
    current_page: int = 1
    last_page: int = 1

    # Paginators always send prev, one page and next; more means several pages
    MIN_LINKS_FOR_CONTROLS = 3

    @property
    def is_empty(self) -> bool:
        return not self.data

    @property
    def shows_pagination(self) -> bool:
        return len(self.links) > self.MIN_LINKS_FOR_CONTROLS

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]], item_factory) -> 'Paginated':
        payload = payload or {}
        meta = payload.get('meta') or {}
        links = payload.get('links')
        # Laravel resources put the numbered links under meta.links
        if not isinstance(links, list):
            links = meta.get('links') or []
        items = [item_factory(item) for item in (payload.get('data') or [])]
        return cls(
            data=items,
            total=to_int(payload.get('total', meta.get('total')), len(items)),
            links=[PageLink.from_dict(link) for link in links if isinstance(link, dict)],
            current_page=to_int(payload.get('current_page', meta.get('current_page')), 1),
            last_page=to_int(payload.get('last_page', meta.get('last_page')), 1),
        )


# ==============================================================================
# CART & ORDERS
# ==============================================================================

@dataclass
class CartItem:
    product: Product
    quantity: int
    subtotal: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartItem':
        product = Product.from_dict(data.get('product') or {'id': data.get('product_id')})
        quantity = to_int(data.get('quantity'), 0)
        subtotal = data.get('subtotal')
        return cls(
            product=product,
            quantity=quantity,
            subtotal=to_decimal(subtotal) if subtotal is not None else product.price * quantity,
        )


@dataclass
class Cart:
    items: List[CartItem] = field(default_factory=list)
    total: Decimal = field(default_factory=lambda: Decimal('0'))

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self.items)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Cart':
        data = data or {}
        items = [CartItem.from_dict(i) for i in (data.get('items') or data.get('cartItems') or [])]
        total = data.get('total')
        return cls(
            items=items,
            total=to_decimal(total) if total is not None else sum((i.subtotal for i in items), Decimal('0')),
        )


@dataclass
class OrderItem:
    product_id: Optional[int]
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderItem':
        product = data.get('product') or {}
        quantity = to_int(data.get('quantity'), 0)
        unit_price = to_decimal(data.get('unit_price', data.get('price')))
        total = data.get('total_price')
        return cls(
            product_id=to_int(data.get('product_id', product.get('id'))),
            product_name=data.get('product_name') or product.get('name') or '',
            quantity=quantity,
            unit_price=unit_price,
            total_price=to_decimal(total) if total is not None else unit_price * quantity,
        )


@dataclass
class Order:
    """
    Customer order.

    Attributes:
        order_number: Human readable number shown to the customer
        status: Raw status string (see OrderStatus)
        estimated_delivery_time: Minutes, when the backend provides it
    """
    id: int
    order_number: str
    status: str = OrderStatus.PENDING.value
    items: List[OrderItem] = field(default_factory=list)
    store: Optional[Store] = None
    delivery_address: str = ''
    delivery_latitude: Optional[Decimal] = None
    delivery_longitude: Optional[Decimal] = None
    total_amount: Decimal = field(default_factory=lambda: Decimal('0'))
    estimated_delivery_time: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_cancellable(self) -> bool:
        return self.status == OrderStatus.PENDING.value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        store = data.get('store')
        lat = data.get('delivery_latitude')
        lng = data.get('delivery_longitude')
        items = data.get('order_items') or data.get('items') or []
        return cls(
            id=to_int(data.get('id'), 0),
            order_number=str(data.get('order_number') or data.get('id') or ''),
            status=data.get('status') or OrderStatus.PENDING.value,
            items=[OrderItem.from_dict(i) for i in items],
            store=Store.from_dict(store) if isinstance(store, dict) else None,
            delivery_address=data.get('delivery_address') or '',
            delivery_latitude=to_decimal(lat) if lat not in (None, '') else None,
            delivery_longitude=to_decimal(lng) if lng not in (None, '') else None,
            total_amount=to_decimal(data.get('total_amount')),
            estimated_delivery_time=to_int(data.get('estimated_delivery_time')),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )


# ==============================================================================
# CUSTOMER
# ==============================================================================

@dataclass
class CustomerLocation:
    """Saved delivery address of the customer."""
    id: int
    label: str
    address: str
    latitude: Decimal
    longitude: Decimal
    notes: Optional[str] = None
    is_default: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CustomerLocation':
        return cls(
            id=to_int(data.get('id'), 0),
            label=data.get('label') or '',
            address=data.get('address') or '',
            latitude=to_decimal(data.get('latitude')),
            longitude=to_decimal(data.get('longitude')),
            notes=data.get('notes') or None,
            is_default=bool(data.get('is_default')),
        )


@dataclass
class Customer:
    id: int
    name: str
    phone: str = ''
    avatar: Optional[str] = None
    address: str = ''
    user_type: str = UserType.CUSTOMER.value
    governorate_id: Optional[int] = None
    city_id: Optional[int] = None
    area_id: Optional[int] = None
    is_verified: bool = False

    @property
    def is_customer(self) -> bool:
        return self.user_type == UserType.CUSTOMER.value

    def to_session(self) -> Dict[str, Any]:
        """Compact form kept in the Flask session cookie."""
        return {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'avatar': self.avatar,
            'address': self.address,
            'user_type': self.user_type,
            'governorate_id': self.governorate_id,
            'city_id': self.city_id,
            'area_id': self.area_id,
            'is_verified': self.is_verified,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Customer':
        return cls(
            id=to_int(data.get('id'), 0),
            name=data.get('name') or '',
            phone=data.get('phone') or '',
            avatar=data.get('avatar') or None,
            address=data.get('address') or '',
            user_type=data.get('user_type') or UserType.CUSTOMER.value,
            governorate_id=to_int(data.get('governorate_id')),
            city_id=to_int(data.get('city_id')),
            area_id=to_int(data.get('area_id')),
            is_verified=bool(data.get('is_verified')),
        )


@dataclass
class DriverApplication:
    status: str
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['DriverApplication']:
        if not data:
            return None
        return cls(status=data.get('status') or '', notes=data.get('notes') or None)


@dataclass
class Notification:
    id: Any
    title: str
    message: str = ''
    type: str = ''
    is_read: bool = False
    action_url: Optional[str] = None
    icon: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Notification':
        return cls(
            id=data.get('id'),
            title=data.get('title') or '',
            message=data.get('message') or '',
            type=data.get('type') or '',
            is_read=bool(data.get('is_read')),
            action_url=data.get('action_url'),
            icon=data.get('icon'),
            created_at=data.get('created_at'),
        )


# ==============================================================================
# SETTINGS
# ==============================================================================

@dataclass
class GeneralSettings:
    """Display settings shared with every page."""
    site_name: str = 'DeliGo'
    site_description: str = ''
    default_language: str = 'ar'
    default_currency: str = 'SYP'
    date_format: str = 'Y-m-d'
    time_format: str = 'H:i'
    maintenance_mode: bool = False
    maintenance_message: str = ''
    default_estimated_delivery_time: int = 15

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'GeneralSettings':
        data = data or {}
        defaults = cls()
        maintenance = data.get('maintenance_mode', False)
        return cls(
            site_name=data.get('site_name') or defaults.site_name,
            site_description=data.get('site_description') or '',
            default_language=data.get('default_language') or defaults.default_language,
            default_currency=data.get('default_currency') or defaults.default_currency,
            date_format=data.get('date_format') or defaults.date_format,
            time_format=data.get('time_format') or defaults.time_format,
            maintenance_mode=maintenance in (True, 1, '1', 'true'),
            maintenance_message=data.get('maintenance_message') or '',
            default_estimated_delivery_time=to_int(
                data.get('default_estimated_delivery_time'),
                defaults.default_estimated_delivery_time,
            ),
        )
