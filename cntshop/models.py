"""Data types for products, stores, flyers and search parameters."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from urllib.parse import unquote_to_bytes


class SortRule(Enum):
    """Sort orders accepted by the search endpoint."""

    RELEVANCE = "Continente"
    PRICE_LOW_TO_HIGH = "price-low-to-high"
    PRICE_HIGH_TO_LOW = "price-high-to-low"
    UNIT_PRICE = "price-per-capacity-ascending"
    NAME_ASC = "product-name-ascending"
    NAME_DESC = "product-name-descending"

    def as_str(self) -> str:
        """The value sent as the ``srule`` query parameter."""
        return self.value


@dataclass
class SearchParams:
    """Paging, sorting and filtering options for search and browse."""

    start: int = 0
    size: int = 24
    sort: Optional[SortRule] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    brand: Optional[str] = None
    filters: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class SearchProduct:
    id: str
    name: str
    price: float
    brand: str
    category: str
    variant: str = ""
    channel: str = ""
    image_url: Optional[str] = None
    unit_price: Optional[str] = None


@dataclass
class SearchResponse:
    products: list[SearchProduct]
    total: int
    query: str


@dataclass
class PriceInfo:
    sales_value: float
    sales_formatted: str
    list_value: Optional[float]
    currency: str
    promotion_end: Optional[str]


@dataclass
class PricePerUnit:
    primary_value: float
    primary_unit: str
    secondary_formatted: Optional[str]
    secondary_unit: Optional[str]


@dataclass
class CategoryInfo:
    id: str
    name: str
    top_level_id: str
    top_level_name: str
    gtm_path: str


@dataclass
class BadgeInfo:
    general_title: Optional[str] = None
    promo_title: Optional[str] = None


@dataclass
class ProductImages:
    tile: Optional[str] = None
    quick_view: list[str] = field(default_factory=list)
    full: list[str] = field(default_factory=list)


@dataclass
class ProductDetail:
    id: str
    name: str
    brand: str
    product_type: str
    short_description: Optional[str]
    rating: Optional[float]
    available: bool
    online: bool
    product_url: str
    price: PriceInfo
    price_per_unit: Optional[PricePerUnit]
    measurement_note: Optional[str]
    min_order_quantity: int
    max_order_quantity: int
    category: CategoryInfo
    badge_info: BadgeInfo
    images: ProductImages
    nutritional_info_url: Optional[str]
    ean: Optional[str]
    supplier_id: Optional[str]


@dataclass
class CategorySuggestion:
    name: str
    url: str


@dataclass
class SuggestionResult:
    products: list[SearchProduct] = field(default_factory=list)
    categories: list[CategorySuggestion] = field(default_factory=list)
    popular_terms: list[str] = field(default_factory=list)


@dataclass
class Store:
    id: str
    name: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    phone: Optional[str] = None
    store_hours: Optional[str] = None
    is_pickup_store: bool = False
    is_galp_store: bool = False


@dataclass
class Nutrient:
    name: str
    value: float
    unit: str


@dataclass
class NutritionalInfo:
    regulated_name: Optional[str] = None
    ingredients: Optional[str] = None
    allergens: Optional[str] = None
    country_of_origin: Optional[str] = None
    storage_instructions: Optional[str] = None
    net_content: Optional[str] = None
    net_content_uom: Optional[str] = None
    net_weight: Optional[str] = None
    producer_name: Optional[str] = None
    producer_address: Optional[str] = None
    preparation_instructions: Optional[str] = None
    daily_value_intake_reference: Optional[str] = None
    serving_size: Optional[str] = None
    serving_size_uom: Optional[str] = None
    nutrients: list[Nutrient] = field(default_factory=list)


@dataclass
class Flyer:
    title: str
    description: str
    url: str
    image_url: Optional[str]
    slug: str


# --- JSON field readers -------------------------------------------------------

_MISSING = object()


def _lookup(data: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return _MISSING


def _str(data: dict, *keys: str, default: Any = None, required: bool = False) -> Any:
    value = _lookup(data, keys)
    if value is _MISSING:
        if required:
            raise ValueError(f"missing field '{keys[0]}'")
        return default
    if not isinstance(value, str):
        raise ValueError(f"field '{keys[0]}' must be a string")
    return value


def _num(data: dict, *keys: str, default: Any = None, required: bool = False) -> Any:
    value = _lookup(data, keys)
    if value is _MISSING:
        if required:
            raise ValueError(f"missing field '{keys[0]}'")
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field '{keys[0]}' must be a number")
    return float(value)


def _count(data: dict, *keys: str) -> int:
    value = _lookup(data, keys)
    if value is _MISSING:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"field '{keys[0]}' must be a non-negative integer")
    return value


def _flag(data: dict, *keys: str) -> bool:
    value = _lookup(data, keys)
    if value is _MISSING:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field '{keys[0]}' must be a boolean")
    return value


def _obj(data: dict, *keys: str) -> Optional[dict]:
    value = _lookup(data, keys)
    if value is _MISSING:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"field '{keys[0]}' must be an object")
    return value


def _urls(data: dict, key: str) -> list[str]:
    value = _lookup(data, (key,))
    if value is _MISSING:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field '{key}' must be an array")
    urls = []
    for entry in value:
        if not isinstance(entry, dict):
            raise ValueError(f"entries of '{key}' must be objects")
        url = _str(entry, "url")
        if url is not None:
            urls.append(url)
    return urls


def _ensure_dict(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object")
    return data


@dataclass
class _Sales:
    value: float
    currency: str
    formatted: str


def _sales(data: Optional[dict]) -> Optional[_Sales]:
    if data is None:
        return None
    return _Sales(
        value=_num(data, "value", required=True),
        currency=_str(data, "currency", default=""),
        formatted=_str(data, "formatted", default=""),
    )


# --- Conversions --------------------------------------------------------------


def search_product_from_json(data: Any) -> SearchProduct:
    """Build a SearchProduct from a product tile impression object."""
    data = _ensure_dict(data, "product tile")
    return SearchProduct(
        id=_str(data, "id", required=True),
        name=_str(data, "name", required=True),
        price=_num(data, "price", required=True),
        brand=_str(data, "brand", required=True),
        category=_str(data, "category", required=True),
        variant=_str(data, "variant", default=""),
        channel=_str(data, "channel", default=""),
    )


def _price_info(data: dict) -> PriceInfo:
    raw = _obj(data, "price")
    if raw is None:
        return PriceInfo(0.0, "", None, "EUR", None)
    sales = _sales(_obj(raw, "sales"))
    listed = _sales(_obj(raw, "list"))
    return PriceInfo(
        sales_value=sales.value if sales else 0.0,
        sales_formatted=sales.formatted if sales else "",
        list_value=listed.value if listed else None,
        currency=sales.currency if sales else "EUR",
        promotion_end=_str(raw, "online_to", "onlineTo"),
    )


def _price_per_unit(data: dict) -> Optional[PricePerUnit]:
    raw = _obj(data, "pricePerUnit")
    if raw is None:
        return None
    primary = _obj(raw, "primaryPrice")
    if primary is None:
        return None
    primary_sales = _sales(_obj(primary, "price"))
    secondary = _obj(raw, "secondaryPrice")
    secondary_formatted = None
    secondary_unit = None
    if secondary is not None:
        price = secondary.get("price")
        if isinstance(price, str):
            secondary_formatted = price
        secondary_unit = _str(secondary, "unit")
    return PricePerUnit(
        primary_value=primary_sales.value if primary_sales else 0.0,
        primary_unit=_str(primary, "unit", default=""),
        secondary_formatted=secondary_formatted,
        secondary_unit=secondary_unit,
    )


def _category(data: dict) -> CategoryInfo:
    gtm_path = _str(data, "gtmCategoryPath", default="")
    raw = _obj(data, "category")
    if raw is None:
        return CategoryInfo("", "", "", "", gtm_path)
    return CategoryInfo(
        id=_str(raw, "primaryCategoryId", default=""),
        name=_str(raw, "primaryCategoryDisplayName", default=""),
        top_level_id=_str(raw, "primaryCategoryTopLevelProductCategoryId", default=""),
        top_level_name=_str(
            raw, "primaryCategoryTopLevelProductCategoryDisplayName", default=""
        ),
        gtm_path=gtm_path,
    )


def _badge_info(data: dict) -> BadgeInfo:
    raw = _obj(data, "badgeInfo")
    if raw is None:
        return BadgeInfo()
    general = _obj(raw, "general")
    promo = _obj(raw, "promo")
    return BadgeInfo(
        general_title=_str(general, "title") if general else None,
        promo_title=_str(promo, "title") if promo else None,
    )


def _images(data: dict) -> ProductImages:
    tile = _obj(data, "productTileImage")
    return ProductImages(
        tile=_str(tile, "url") if tile else None,
        quick_view=_urls(data, "quickViewImages"),
        full=_urls(data, "pdpImages"),
    )


def product_detail_from_json(data: Any) -> ProductDetail:
    """Build a ProductDetail from the ``product`` object of Product-Variation."""
    data = _ensure_dict(data, "product")
    nutrition_url = _str(data, "nutritionalInfoUrlString")
    ean, supplier_id = extract_ean_supplier(nutrition_url)
    return ProductDetail(
        id=_str(data, "id", required=True),
        name=_str(data, "productName", default=""),
        brand=_str(data, "brand", default=""),
        product_type=_str(data, "productType", default=""),
        short_description=_str(data, "shortDescription"),
        rating=_num(data, "rating"),
        available=_flag(data, "available"),
        online=_flag(data, "online"),
        product_url=_str(data, "productUrl", "productURL", default=""),
        price=_price_info(data),
        price_per_unit=_price_per_unit(data),
        measurement_note=_str(data, "measurementNote"),
        min_order_quantity=_count(data, "minOrderQuantity"),
        max_order_quantity=_count(data, "maxOrderQuantity"),
        category=_category(data),
        badge_info=_badge_info(data),
        images=_images(data),
        nutritional_info_url=nutrition_url,
        ean=ean,
        supplier_id=supplier_id,
    )


def _url_decode(url: str) -> str:
    try:
        return unquote_to_bytes(url).decode("utf-8")
    except UnicodeDecodeError:
        return url


def _param(decoded: str, marker: str) -> Optional[str]:
    parts = decoded.split(marker)
    if len(parts) < 2:
        return None
    return parts[1].split("&")[0]


def extract_ean_supplier(url: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """Pull the EAN and supplier id out of a nutritional info URL."""
    if url is None:
        return None, None
    decoded = _url_decode(url)
    ean = _param(decoded, "ean=")
    if ean is not None:
        # Products with several EANs list them separated by '|'; keep the first.
        ean = ean.split("|")[0]
    return ean, _param(decoded, "supplierid=")


def store_from_json(data: Any) -> Store:
    """Build a Store from one entry of the Stores-FindStores response."""
    data = _ensure_dict(data, "store")
    return Store(
        id=_str(data, "id", "ID", required=True),
        name=_str(data, "name", default=""),
        address=_str(data, "address", "address1", default=""),
        city=_str(data, "city", default=""),
        postal_code=_str(data, "postal_code", "postalCode", default=""),
        latitude=_num(data, "latitude", default=0.0),
        longitude=_num(data, "longitude", default=0.0),
        phone=_str(data, "phone"),
        store_hours=_str(data, "store_hours", "storeHours"),
        is_pickup_store=_flag(data, "is_pickup_store", "isPickupStore"),
        is_galp_store=_flag(data, "is_galp_store", "isGalpStore"),
    )


def stores_from_json(data: Any) -> list[Store]:
    """Read the store list out of a Stores-FindStores response object."""
    data = _ensure_dict(data, "stores response")
    stores = data.get("stores")
    if stores is None:
        return []
    if not isinstance(stores, list):
        raise ValueError("field 'stores' must be an array")
    return [store_from_json(entry) for entry in stores]


def to_dict(obj: Any) -> Any:
    """Turn model objects into plain JSON-ready values."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_dict(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {key: to_dict(value) for key, value in obj.items()}
    return obj