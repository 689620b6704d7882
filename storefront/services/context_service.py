# ==============================================================================
# PAGE CONTEXT SERVICE
# ==============================================================================
# Assembles the request-scoped context every page renders with: the customer,
# notification summary, locale and direction, display settings, translations
# and favorite product ids. Routes build it once per request and hand it to
# the templates explicitly.
# ==============================================================================

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Set

from flask import current_app

from storefront import config
from storefront.models import Customer, GeneralSettings, Notification, to_decimal
from storefront.repositories.errors import ApiError, Unauthorized
from storefront.repositories.interfaces import INotificationRepository, ISettingsRepository
from storefront.services.favorite_service import FavoriteService
from storefront.translations import Translator


RECENT_NOTIFICATIONS = 10

# PHP style tokens sent by the backend → strftime
_DATE_TOKENS = {
    'Y': '%Y', 'y': '%y', 'm': '%m', 'n': '%m', 'd': '%d', 'j': '%d',
    'H': '%H', 'G': '%H', 'h': '%I', 'g': '%I', 'i': '%M', 's': '%S',
    'A': '%p', 'a': '%p', 'M': '%b', 'F': '%B', 'D': '%a', 'l': '%A',
}


def php_to_strftime(fmt: str) -> str:
    return ''.join(_DATE_TOKENS.get(ch, ch) for ch in fmt or '')


@dataclass
class PageContext:
    """
    Everything shared by the pages of one request.

    Attributes:
        user: Logged-in customer or None
        unread_count / notifications: Notification summary
        locale / direction: 'ar' renders right-to-left
        favorite_product_ids: Ids shown as favorited on product cards
    """
    user: Optional[Customer] = None
    locale: str = config.DEFAULT_LOCALE
    settings: GeneralSettings = field(default_factory=GeneralSettings)
    translator: Translator = None
    unread_count: int = 0
    notifications: List[Notification] = field(default_factory=list)
    favorite_product_ids: Set[int] = field(default_factory=set)

    def __post_init__(self):
        if self.translator is None:
            self.translator = Translator(self.locale)

    @property
    def direction(self) -> str:
        return 'rtl' if self.locale in config.RTL_LOCALES else 'ltr'

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def t(self, key: str, **params) -> str:
        return self.translator(key, **params)

    def is_favorite(self, product_id: int) -> bool:
        return product_id in self.favorite_product_ids

    # =========================================================================
    # FORMATTING
    # =========================================================================

    def format_currency(self, amount: Any) -> str:
        value = to_decimal(amount).quantize(Decimal('0.01'))
        text = f'{value:,.2f}'
        if text.endswith('.00'):
            text = text[:-3]
        return f'{text} {self.settings.default_currency}'

    def format_datetime(self, value: Any, with_time: bool = True) -> str:
        if not value:
            return ''
        if isinstance(value, datetime):
            moment = value
        else:
            try:
                moment = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
            except ValueError:
                return str(value)
        fmt = php_to_strftime(self.settings.date_format)
        if with_time:
            fmt += ' ' + php_to_strftime(self.settings.time_format)
        return moment.strftime(fmt)


class ContextService:
    """
    Builds PageContext objects.

    Settings and translation overrides are optional: when the backend cannot
    provide them the built-in defaults are used and a warning is logged.
    """

    def __init__(
        self,
        settings_repo: ISettingsRepository,
        notification_repo: INotificationRepository,
        favorite_service: FavoriteService,
    ):
        self.settings_repo = settings_repo
        self.notification_repo = notification_repo
        self.favorite_service = favorite_service

    def general_settings(self) -> GeneralSettings:
        try:
            return GeneralSettings.from_dict(self.settings_repo.general())
        except ApiError as e:
            current_app.logger.warning('General settings unavailable: %s', e.message)
            return GeneralSettings()

    def translator(self, locale: str) -> Translator:
        try:
            overrides = self.settings_repo.translations(locale)
        except ApiError as e:
            current_app.logger.warning('Translation overrides unavailable: %s', e.message)
            overrides = {}
        return Translator(locale, overrides)

    def build(
        self,
        user: Optional[Dict[str, Any]],
        locale: str,
        settings: Optional[GeneralSettings] = None,
    ) -> PageContext:
        """
        Build the context of the current request.

        Args:
            user: Customer dict kept in the session, or None
            locale: Selected locale
            settings: Already loaded settings (the maintenance check loads them first)

        Raises:
            Unauthorized: the session token was rejected
        """
        if locale not in config.SUPPORTED_LOCALES:
            locale = config.DEFAULT_LOCALE

        ctx = PageContext(
            user=Customer.from_dict(user) if user else None,
            locale=locale,
            settings=settings or self.general_settings(),
            translator=self.translator(locale),
        )
        if ctx.user is None:
            return ctx

        try:
            summary = self.notification_repo.summary(RECENT_NOTIFICATIONS)
            ctx.unread_count = int(summary.get('unread_count') or 0)
            ctx.notifications = [Notification.from_dict(n) for n in summary.get('recent') or []]
            ctx.favorite_product_ids = self.favorite_service.product_ids()
        except Unauthorized:
            raise
        except ApiError as e:
            current_app.logger.warning('Customer context incomplete: %s', e.message)
        return ctx

    # =========================================================================
    # NOTIFICATIONS
    # =========================================================================

    def mark_notification_read(self, notification_id: str) -> None:
        self.notification_repo.mark_read(notification_id)

    def mark_all_notifications_read(self) -> None:
        self.notification_repo.mark_all_read()
