# ==============================================================================
# TRANSLATIONS
# ==============================================================================
# Built-in Arabic / English strings of the storefront. The backend may send
# overrides per locale; a key missing everywhere is shown as the key itself.
# Placeholders use {name} and are filled by Translator.__call__.
# ==============================================================================

from typing import Dict, Optional

from storefront import config


CATALOGUE: Dict[str, Dict[str, str]] = {
    'en': {
        # Layout
        'home': 'Home',
        'products': 'Products',
        'categories': 'Categories',
        'stores': 'Stores',
        'cart': 'Cart',
        'orders': 'Orders',
        'my_orders': 'My orders',
        'favorites': 'Favorites',
        'dashboard': 'Dashboard',
        'profile': 'Profile',
        'locations': 'Delivery locations',
        'notifications': 'Notifications',
        'mark_all_read': 'Mark all as read',
        'mark_read': 'Mark as read',
        'no_notifications': 'No notifications yet',
        'login': 'Log in',
        'logout': 'Log out',
        'language': 'Language',
        'arabic': 'العربية',
        'english': 'English',
        'all_rights_reserved': 'All rights reserved',

        # Filters
        'search': 'Search',
        'search_placeholder': 'Search...',
        'all_categories': 'All categories',
        'all_types': 'All types',
        'all_governorates': 'All governorates',
        'all_cities': 'All cities',
        'governorate': 'Governorate',
        'city': 'City',
        'category': 'Category',
        'store_type': 'Store type',
        'sort_by': 'Sort by',
        'default_sort': 'Default',
        'sort_by_name': 'Name',
        'sort_by_price': 'Price',
        'apply_filters': 'Apply',
        'clear_filters': 'Clear filters',
        'results_count': '{count} results',

        # Cards
        'add_to_cart': 'Add to cart',
        'featured': 'Featured',
        'view_store': 'View store',
        'view_details': 'View details',
        'products_count': '{count} products',
        'add_favorite': 'Add to favorites',
        'favorite_added': 'Added to favorites',
        'favorite_removed': 'Removed from favorites',
        'remove_favorite': 'Remove from favorites',
        'opening_hours': 'Opening hours',
        'previous': 'Previous',
        'next': 'Next',

        # Empty states
        'no_products': 'No products found',
        'no_stores': 'No stores found',
        'no_orders': 'You have no orders yet',
        'no_orders_hint': 'Browse the products and place your first order.',
        'browse_products': 'Browse products',
        'no_favorites': 'You have no favorite products yet',
        'no_locations': 'You have no saved delivery locations',
        'cart_empty': 'Your cart is empty',

        # Cart
        'quantity': 'Quantity',
        'remove': 'Remove',
        'update': 'Update',
        'clear_cart': 'Clear cart',
        'total': 'Total',
        'subtotal': 'Subtotal',
        'checkout': 'Checkout',
        'delivery_location': 'Delivery location',
        'delivery_location_required': 'Choose a delivery location',
        'order_notes': 'Notes for the order',
        'place_order': 'Place order',
        'add_location_first': 'Add a delivery location before ordering.',
        'cart_added': 'Product added to cart',
        'cart_updated': 'Cart updated',
        'cart_removed': 'Product removed from cart',
        'cart_cleared': 'Cart cleared',
        'cart_error': 'The cart could not be updated',
        'invalid_quantity': 'Quantity must be at least 1',
        'invalid_product': 'Invalid product',

        # Orders
        'order_number': 'Order #{number}',
        'order_date': 'Date',
        'order_total': 'Total',
        'order_status': 'Status',
        'order_items': 'Items',
        'order_details': 'Order details',
        'cancel_order': 'Cancel order',
        'order_cancelled': 'Order cancelled',
        'order_placed': 'Order placed',
        'delivery_address': 'Delivery address',
        'store': 'Store',
        'unit_price': 'Unit price',
        'estimated_delivery': 'Estimated delivery: {minutes} min',
        'back_to_orders': 'Back to orders',
        'status_pending': 'Pending',
        'status_confirmed': 'Confirmed',
        'status_preparing': 'Preparing',
        'status_on_delivery': 'Out for delivery',
        'status_delivered': 'Delivered',
        'status_cancelled': 'Cancelled',

        # Dashboard
        'welcome': 'Welcome, {name}',
        'total_orders': 'Total orders',
        'pending_orders': 'Pending orders',
        'completed_orders': 'Completed orders',
        'favorites_count': 'Favorites',
        'recent_orders': 'Recent orders',
        'view_all': 'View all',
        'upgrade_account': 'Upgrade your account',
        'upgrade_to_store_owner': 'Become a store owner',
        'upgrade_to_store_owner_hint': 'Sell your products on the marketplace.',
        'upgrade_to_driver': 'Become a driver',
        'upgrade_to_driver_hint': 'Deliver orders and earn money.',
        'upgrade_reason': 'Why do you want to upgrade?',
        'upgrade_requested': 'Your upgrade request was sent',
        'invalid_target_role': 'Unknown account type',
        'driver_application': 'Driver application',
        'driver_application_pending_hint': 'Your application is under review.',
        'driver_application_rejected_hint': 'Your application was rejected. You can submit it again.',
        'driver_application_approved_hint': 'Your application was approved.',
        'view_driver_application': 'View application',
        'resubmit_driver_application': 'Resubmit application',
        'go_to_driver_dashboard': 'Go to driver dashboard',
        'driver_status_pending': 'Under review',
        'driver_status_rejected': 'Rejected',
        'driver_status_approved': 'Approved',

        # Locations
        'add_location': 'Add location',
        'location_label': 'Label',
        'address': 'Address',
        'latitude': 'Latitude',
        'longitude': 'Longitude',
        'notes': 'Notes',
        'set_as_default': 'Set as default',
        'default': 'Default',
        'delete': 'Delete',
        'save': 'Save',
        'location_saved': 'Location saved',
        'location_deleted': 'Location deleted',
        'location_default_set': 'Default location updated',
        'use_my_location': 'Use my location',
        'locating': 'Locating...',
        'location_found': 'Location found',
        'location_error': 'Could not get your location',
        'location_denied': 'Location permission denied',
        'geolocation_unsupported': 'Your browser does not support geolocation',
        'pick_on_map': 'Pick the point on the map or use your location',

        # Profile
        'name': 'Name',
        'phone': 'Phone',
        'avatar': 'Avatar',
        'change_avatar': 'Change avatar',
        'area': 'Area',
        'select_area': 'Select area',
        'select_governorate': 'Select governorate',
        'profile_updated': 'Profile updated',
        'save_changes': 'Save changes',
        'avatar_invalid_type': 'The avatar must be a jpeg, jpg, png or gif image',
        'avatar_too_large': 'The avatar may not be larger than {mb} MB',

        # Validation
        'field_required': 'This field is required',
        'field_too_long': 'This value is too long',
        'invalid_latitude': 'Latitude must be between -90 and 90',
        'invalid_longitude': 'Longitude must be between -180 and 180',

        # Auth
        'password': 'Password',
        'login_title': 'Log in to your account',
        'login_required': 'Please log in to continue',
        'logged_out': 'You have been logged out',
        'session_expired': 'Your session expired, please log in again',

        # Errors
        'page_not_found': 'Page not found',
        'service_unavailable': 'Service temporarily unavailable',
        'service_unavailable_hint': 'Please try again in a moment.',
        'backend_error': 'Something went wrong',
        'backend_error_hint': 'The page could not be loaded. Please try again.',
        'maintenance_title': 'Under maintenance',
        'maintenance_hint': 'We will be back shortly.',
        'csrf_invalid': 'Your form expired, please try again',
        'back_home': 'Back to home',
        'request_failed': 'The request failed',

        # Catalog
        'related_products': 'Related products',
        'unit': 'Unit',
        'price': 'Price',
        'featured_products': 'Featured products',
        'featured_stores': 'Featured stores',
        'shop_by_category': 'Shop by category',
        'store_products': 'Products of this store',
        'all': 'All',
        'welcome_hero': 'Groceries delivered to your door',
    },
    'ar': {
        # Layout
        'home': 'الرئيسية',
        'products': 'المنتجات',
        'categories': 'الفئات',
        'stores': 'المتاجر',
        'cart': 'السلة',
        'orders': 'الطلبات',
        'my_orders': 'طلباتي',
        'favorites': 'المفضلة',
        'dashboard': 'لوحة التحكم',
        'profile': 'الملف الشخصي',
        'locations': 'مواقع التوصيل',
        'notifications': 'الإشعارات',
        'mark_all_read': 'تحديد الكل كمقروء',
        'mark_read': 'تحديد كمقروء',
        'no_notifications': 'لا توجد إشعارات',
        'login': 'تسجيل الدخول',
        'logout': 'تسجيل الخروج',
        'language': 'اللغة',
        'arabic': 'العربية',
        'english': 'English',
        'all_rights_reserved': 'جميع الحقوق محفوظة',

        # Filters
        'search': 'بحث',
        'search_placeholder': 'ابحث...',
        'all_categories': 'جميع الفئات',
        'all_types': 'جميع الأنواع',
        'all_governorates': 'جميع المحافظات',
        'all_cities': 'جميع المدن',
        'governorate': 'المحافظة',
        'city': 'المدينة',
        'category': 'الفئة',
        'store_type': 'نوع المتجر',
        'sort_by': 'ترتيب حسب',
        'default_sort': 'الافتراضي',
        'sort_by_name': 'حسب الاسم',
        'sort_by_price': 'حسب السعر',
        'apply_filters': 'تطبيق',
        'clear_filters': 'مسح الفلاتر',
        'results_count': '{count} نتيجة',

        # Cards
        'add_to_cart': 'أضف إلى السلة',
        'featured': 'مميز',
        'view_store': 'عرض المتجر',
        'view_details': 'عرض التفاصيل',
        'products_count': '{count} منتج',
        'add_favorite': 'أضف إلى المفضلة',
        'favorite_added': 'تمت الإضافة إلى المفضلة',
        'favorite_removed': 'تمت الإزالة من المفضلة',
        'remove_favorite': 'إزالة من المفضلة',
        'opening_hours': 'ساعات العمل',
        'previous': 'السابق',
        'next': 'التالي',

        # Empty states
        'no_products': 'لا توجد منتجات',
        'no_stores': 'لا توجد متاجر',
        'no_orders': 'لا توجد طلبات بعد',
        'no_orders_hint': 'تصفح المنتجات وقم بطلبك الأول.',
        'browse_products': 'تصفح المنتجات',
        'no_favorites': 'لا توجد منتجات مفضلة بعد',
        'no_locations': 'لا توجد مواقع توصيل محفوظة',
        'cart_empty': 'سلتك فارغة',

        # Cart
        'quantity': 'الكمية',
        'remove': 'إزالة',
        'update': 'تحديث',
        'clear_cart': 'إفراغ السلة',
        'total': 'المجموع',
        'subtotal': 'المجموع الفرعي',
        'checkout': 'إتمام الطلب',
        'delivery_location': 'موقع التوصيل',
        'delivery_location_required': 'اختر موقع التوصيل',
        'order_notes': 'ملاحظات الطلب',
        'place_order': 'تأكيد الطلب',
        'add_location_first': 'أضف موقع توصيل قبل الطلب.',
        'cart_added': 'تمت إضافة المنتج إلى السلة',
        'cart_updated': 'تم تحديث السلة',
        'cart_removed': 'تمت إزالة المنتج من السلة',
        'cart_cleared': 'تم إفراغ السلة',
        'cart_error': 'تعذر تحديث السلة',
        'invalid_quantity': 'يجب أن تكون الكمية 1 على الأقل',
        'invalid_product': 'منتج غير صالح',

        # Orders
        'order_number': 'طلب رقم {number}',
        'order_date': 'التاريخ',
        'order_total': 'المجموع',
        'order_status': 'الحالة',
        'order_items': 'المنتجات',
        'order_details': 'تفاصيل الطلب',
        'cancel_order': 'إلغاء الطلب',
        'order_cancelled': 'تم إلغاء الطلب',
        'order_placed': 'تم إرسال الطلب',
        'delivery_address': 'عنوان التوصيل',
        'store': 'المتجر',
        'unit_price': 'سعر الوحدة',
        'estimated_delivery': 'وقت التوصيل المتوقع: {minutes} دقيقة',
        'back_to_orders': 'العودة إلى الطلبات',
        'status_pending': 'قيد الانتظار',
        'status_confirmed': 'مؤكد',
        'status_preparing': 'قيد التحضير',
        'status_on_delivery': 'في الطريق',
        'status_delivered': 'تم التوصيل',
        'status_cancelled': 'ملغي',

        # Dashboard
        'welcome': 'مرحباً، {name}',
        'total_orders': 'إجمالي الطلبات',
        'pending_orders': 'الطلبات المعلقة',
        'completed_orders': 'الطلبات المكتملة',
        'favorites_count': 'المفضلة',
        'recent_orders': 'أحدث الطلبات',
        'view_all': 'عرض الكل',
        'upgrade_account': 'ترقية حسابك',
        'upgrade_to_store_owner': 'كن صاحب متجر',
        'upgrade_to_store_owner_hint': 'بع منتجاتك في السوق.',
        'upgrade_to_driver': 'كن سائق توصيل',
        'upgrade_to_driver_hint': 'وصّل الطلبات واكسب المال.',
        'upgrade_reason': 'لماذا تريد الترقية؟',
        'upgrade_requested': 'تم إرسال طلب الترقية',
        'invalid_target_role': 'نوع حساب غير معروف',
        'driver_application': 'طلب السائق',
        'driver_application_pending_hint': 'طلبك قيد المراجعة.',
        'driver_application_rejected_hint': 'تم رفض طلبك. يمكنك إعادة تقديمه.',
        'driver_application_approved_hint': 'تمت الموافقة على طلبك.',
        'view_driver_application': 'عرض الطلب',
        'resubmit_driver_application': 'إعادة تقديم الطلب',
        'go_to_driver_dashboard': 'الذهاب إلى لوحة السائق',
        'driver_status_pending': 'قيد المراجعة',
        'driver_status_rejected': 'مرفوض',
        'driver_status_approved': 'مقبول',

        # Locations
        'add_location': 'إضافة موقع',
        'location_label': 'الاسم',
        'address': 'العنوان',
        'latitude': 'خط العرض',
        'longitude': 'خط الطول',
        'notes': 'ملاحظات',
        'set_as_default': 'تعيين كافتراضي',
        'default': 'افتراضي',
        'delete': 'حذف',
        'save': 'حفظ',
        'location_saved': 'تم حفظ الموقع',
        'location_deleted': 'تم حذف الموقع',
        'location_default_set': 'تم تحديث الموقع الافتراضي',
        'use_my_location': 'استخدم موقعي',
        'locating': 'جاري تحديد الموقع...',
        'location_found': 'تم تحديد الموقع',
        'location_error': 'تعذر تحديد موقعك',
        'location_denied': 'تم رفض إذن الموقع',
        'geolocation_unsupported': 'متصفحك لا يدعم تحديد الموقع',
        'pick_on_map': 'اختر النقطة على الخريطة أو استخدم موقعك',

        # Profile
        'name': 'الاسم',
        'phone': 'الهاتف',
        'avatar': 'الصورة الشخصية',
        'change_avatar': 'تغيير الصورة',
        'area': 'المنطقة',
        'select_area': 'اختر المنطقة',
        'select_governorate': 'اختر المحافظة',
        'profile_updated': 'تم تحديث الملف الشخصي',
        'save_changes': 'حفظ التغييرات',
        'avatar_invalid_type': 'يجب أن تكون الصورة من نوع jpeg أو jpg أو png أو gif',
        'avatar_too_large': 'يجب ألا يتجاوز حجم الصورة {mb} ميغابايت',

        # Validation
        'field_required': 'هذا الحقل مطلوب',
        'field_too_long': 'القيمة طويلة جداً',
        'invalid_latitude': 'يجب أن يكون خط العرض بين -90 و 90',
        'invalid_longitude': 'يجب أن يكون خط الطول بين -180 و 180',

        # Auth
        'password': 'كلمة المرور',
        'login_title': 'تسجيل الدخول إلى حسابك',
        'login_required': 'يرجى تسجيل الدخول للمتابعة',
        'logged_out': 'تم تسجيل الخروج',
        'session_expired': 'انتهت الجلسة، يرجى تسجيل الدخول مجدداً',

        # Errors
        'page_not_found': 'الصفحة غير موجودة',
        'service_unavailable': 'الخدمة غير متاحة مؤقتاً',
        'service_unavailable_hint': 'يرجى المحاولة بعد قليل.',
        'backend_error': 'حدث خطأ ما',
        'backend_error_hint': 'تعذر تحميل الصفحة. يرجى المحاولة مجدداً.',
        'maintenance_title': 'الموقع تحت الصيانة',
        'maintenance_hint': 'سنعود قريباً.',
        'csrf_invalid': 'انتهت صلاحية النموذج، حاول مجدداً',
        'back_home': 'العودة إلى الرئيسية',
        'request_failed': 'فشل الطلب',

        # Catalog
        'related_products': 'منتجات ذات صلة',
        'unit': 'الوحدة',
        'price': 'السعر',
        'featured_products': 'منتجات مميزة',
        'featured_stores': 'متاجر مميزة',
        'shop_by_category': 'تسوق حسب الفئة',
        'store_products': 'منتجات المتجر',
        'all': 'الكل',
        'welcome_hero': 'البقالة حتى باب منزلك',
    },
}


class Translator:
    """
    Callable translation lookup for one locale.

    Lookup order: backend overrides, built-in catalogue, then the key.
    """

    def __init__(self, locale: str, overrides: Optional[Dict[str, str]] = None):
        if locale not in CATALOGUE:
            locale = config.DEFAULT_LOCALE
        self.locale = locale
        self.overrides = overrides or {}

    def get(self, key: str) -> str:
        if key in self.overrides:
            return self.overrides[key]
        return CATALOGUE[self.locale].get(key, key)

    def __call__(self, key: str, **params) -> str:
        text = self.get(key)
        for name, value in params.items():
            text = text.replace('{' + name + '}', str(value))
        return text
