# ==============================================================================
# CATEGORY ICONS
# ==============================================================================
# One mapping from category slug to icon, shared by every page that shows
# categories (home, product filters, category pages, cards).
# ==============================================================================

from typing import Any, Dict

# slug: (icon name, glyph)
CATEGORY_ICONS: Dict[str, tuple] = {
    'grocery': ('package', '📦'),
    'fruits_vegetables': ('apple', '🍎'),
    'meat_fish': ('utensils', '🍖'),
    'dairy': ('milk', '🥛'),
    'beverages': ('coffee', '☕'),
    'sweets': ('cookie', '🍪'),
    'cleaning': ('sparkles', '✨'),
    'personal_care': ('heart', '💗'),
    'baby_supplies': ('baby', '🍼'),
    'clothing': ('shirt', '👕'),
    'home_garden': ('home', '🏡'),
    'alcohol': ('wine', '🍷'),
}

DEFAULT_ICON = ('package', '📦')


def _slug_of(category: Any) -> str:
    if category is None:
        return ''
    if isinstance(category, str):
        return category
    if isinstance(category, dict):
        return category.get('slug') or category.get('name') or ''
    return getattr(category, 'slug', '') or getattr(category, 'name', '') or ''


def category_icon(category: Any) -> Dict[str, str]:
    """
    Icon of a category.

    Args:
        category: Category entity, dict or slug

    Returns:
        {'name': icon name, 'glyph': fallback glyph}
    """
    slug = _slug_of(category).strip().lower().replace('-', '_').replace(' ', '_')
    name, glyph = CATEGORY_ICONS.get(slug, DEFAULT_ICON)
    return {'name': name, 'glyph': glyph}
