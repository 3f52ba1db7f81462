"""
Product listing query specification.

Raw query-string values are parsed into a ProductQuery; once the catalog names
have been resolved to ids the criteria are turned into SQLAlchemy predicates
through FILTER_SPEC, a plain table of `criterion -> predicate builder`. Only
criteria that were supplied contribute a predicate.
"""
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy import asc, desc

from shared.api import InvalidParameterError
from shared.config.settings import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from .models import Product

SORTABLE_FIELDS = {
    "name": Product.name,
    "finalPrice": Product.final_price,
    "basePrice": Product.base_price,
    "quantity": Product.quantity,
    "size": Product.size,
    "color": Product.color,
    "createdAt": Product.created_at,
}


def price_range(bounds: Tuple[Optional[float], Optional[float]]):
    """Inclusive bounds on finalPrice folded into one predicate."""
    low, high = bounds
    if low is not None and high is not None:
        return Product.final_price.between(low, high)
    if low is not None:
        return Product.final_price >= low
    return Product.final_price <= high


FILTER_SPEC: Dict[str, Callable[[Any], Any]] = {
    "category_id": lambda value: Product.category_id == value,
    "sub_category_id": lambda value: Product.sub_category_id == value,
    "brand_id": lambda value: Product.brand_id == value,
    "size": lambda value: Product.size == value,
    "price_range": price_range,
}


def build_filters(criteria: Dict[str, Any]) -> List[Any]:
    return [
        FILTER_SPEC[name](value)
        for name, value in criteria.items()
        if name in FILTER_SPEC and value is not None
    ]


def _positive_int(raw, message: str, default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidParameterError(message)
    if not math.isfinite(value) or value <= 0 or value != int(value):
        raise InvalidParameterError(message)
    return int(value)


def _optional_price(raw) -> Optional[float]:
    # Non-numeric bounds are ignored rather than rejected
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


@dataclass
class ProductQuery:
    category: Optional[str] = None
    sub_category: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort_by: Optional[str] = None
    sort_order: str = "asc"
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT

    @classmethod
    def from_params(
        cls,
        category: Optional[str] = None,
        sub_category: Optional[str] = None,
        brand: Optional[str] = None,
        size: Optional[str] = None,
        min_price=None,
        max_price=None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        page=None,
        limit=None,
    ) -> "ProductQuery":
        if sort_by and sort_by not in SORTABLE_FIELDS:
            raise InvalidParameterError(f"Cannot sort by '{sort_by}'")
        return cls(
            category=category or None,
            sub_category=sub_category or None,
            brand=brand or None,
            size=size or None,
            min_price=_optional_price(min_price),
            max_price=_optional_price(max_price),
            sort_by=sort_by or None,
            sort_order="desc" if sort_order == "desc" else "asc",
            page=_positive_int(page, "Invalid Page Number", 1),
            # oversized pages are served at the cap
            limit=min(_positive_int(limit, "Invalid Limit Number", DEFAULT_PAGE_LIMIT), MAX_PAGE_LIMIT),
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def price_bounds(self) -> Optional[Tuple[Optional[float], Optional[float]]]:
        if self.min_price is None and self.max_price is None:
            return None
        return (self.min_price, self.max_price)

    def criteria(self, category_id=None, sub_category_id=None, brand_id=None) -> Dict[str, Any]:
        return {
            "category_id": category_id,
            "sub_category_id": sub_category_id,
            "brand_id": brand_id,
            "size": self.size,
            "price_range": self.price_bounds,
        }

    def order_by(self) -> list:
        clauses = []
        if self.sort_by:
            column = SORTABLE_FIELDS[self.sort_by]
            clauses.append(desc(column) if self.sort_order == "desc" else asc(column))
        # stable paging
        clauses.append(asc(Product.id))
        return clauses
