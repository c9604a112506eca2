import re
from typing import Optional

_NON_SLUG = re.compile(r"[^a-z0-9-]+")
_DASHES = re.compile(r"-{2,}")


def slugify(value: str) -> str:
    """'Summer Linen  Shirt!' -> 'summer-linen-shirt'"""
    slug = re.sub(r"\s+", "-", value.strip().lower())
    slug = _NON_SLUG.sub("", slug)
    return _DASHES.sub("-", slug).strip("-")


def discount_percentage(price: int, original_price: Optional[int]) -> int:
    """Rounded percentage saved against original_price; 0 when there is no markdown"""
    if not original_price or original_price <= price:
        return 0
    return round((original_price - price) / original_price * 100)
