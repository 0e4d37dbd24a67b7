"""Parsers for the HTML fragments returned by the shop's endpoints."""

from __future__ import annotations

import json
import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from cntshop.errors import NoResultsError
from cntshop.models import (
    CategorySuggestion,
    Flyer,
    Nutrient,
    NutritionalInfo,
    SearchProduct,
    SearchResponse,
    SuggestionResult,
    search_product_from_json,
)

_U32 = re.compile(r"\+?[0-9]+")
_U32_MAX = 2**32 - 1

_ENTITIES = (
    ("&quot;", '"'),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&apos;", "'"),
    ("&#39;", "'"),
    ("&iacute;", "í"),
    ("&aacute;", "á"),
    ("&eacute;", "é"),
    ("&oacute;", "ó"),
    ("&uacute;", "ú"),
    ("&atilde;", "ã"),
    ("&otilde;", "õ"),
    ("&ccedil;", "ç"),
    ("&Aacute;", "Á"),
    ("&Eacute;", "É"),
)

_NUTRITION_FIELDS = {
    "regulated_name": ".regulated-product-name",
    "ingredients": ".ingredients",
    "allergens": ".allergen-statement",
    "country_of_origin": ".country-origin",
    "storage_instructions": ".storage-instruction",
    "net_content": ".net-content",
    "net_content_uom": ".net-content--uom",
    "net_weight": ".net-weight",
    "producer_name": ".contact-information--name",
    "producer_address": ".contact-information--address",
    "preparation_instructions": ".preparation-instructions",
    "daily_value_intake_reference": ".daily-value-intake-reference",
    "serving_size": ".serving-size",
    "serving_size_uom": ".serving-size--uom",
}


def html_decode(text: str) -> str:
    """Replace the HTML entities the shop is known to emit."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _text(tag: Tag) -> str:
    return tag.get_text().strip()


def _attr(tag: Tag, name: str) -> Optional[str]:
    value = tag.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return value


def _parse_count(value: Optional[str]) -> Optional[int]:
    if value is None or not _U32.fullmatch(value):
        return None
    count = int(value)
    return count if count <= _U32_MAX else None


def _total_count(document: BeautifulSoup) -> int:
    # Search results carry data-gtm-results; category listings use data-total-count.
    gtm = document.select_one("[data-gtm-results]")
    if gtm is not None:
        count = _parse_count(_attr(gtm, "data-gtm-results"))
        if count is not None:
            return count
    footer = document.select_one("[data-total-count]")
    if footer is not None:
        count = _parse_count(_attr(footer, "data-total-count"))
        if count is not None:
            return count
    return 0


def _products(document: BeautifulSoup) -> list[SearchProduct]:
    products = []
    for tile in document.select("[data-product-tile-impression]"):
        raw = html_decode(_attr(tile, "data-product-tile-impression") or "")
        try:
            product = search_product_from_json(json.loads(raw))
        except ValueError:
            continue

        img = tile.select_one("img[data-src]")
        if img is not None:
            product.image_url = _attr(img, "data-src")

        unit = tile.select_one(".pwc-tile--price-secondary")
        if unit is not None:
            text = _text(unit)
            if text:
                product.unit_price = text

        products.append(product)
    return products


def parse_search_results(html: str, query: str) -> SearchResponse:
    """Read products and the total count from a search or browse page."""
    document = _soup(html)
    total = _total_count(document)
    products = _products(document)
    if not products and total == 0:
        raise NoResultsError()
    return SearchResponse(products=products, total=total, query=query)


def _link_texts(document: BeautifulSoup, selector: str) -> list[tuple[str, Tag]]:
    found = []
    for link in document.select(selector):
        text = _text(link)
        if text:
            found.append((text, link))
    return found


def parse_suggestions(html: str) -> SuggestionResult:
    """Read products, categories and popular terms from an autocomplete page."""
    document = _soup(html)
    categories = [
        CategorySuggestion(name=name, url=_attr(link, "href") or "")
        for name, link in _link_texts(document, ".suggestions-category a")
    ]
    popular = [text for text, _ in _link_texts(document, ".suggestions-popular a")]
    return SuggestionResult(
        products=_products(document),
        categories=categories,
        popular_terms=popular,
    )


def _nutrient_value(text: str) -> float:
    digits = "".join(c for c in text if c in "0123456789.,").replace(",", ".")
    try:
        return float(digits)
    except ValueError:
        return 0.0


def _nutrients(document: BeautifulSoup) -> list[Nutrient]:
    nutrients = []
    for row in document.select(".nutrients-table tr"):
        cells = [_text(td) for td in row.select("td")]
        if len(cells) < 2 or not cells[0]:
            continue
        nutrients.append(
            Nutrient(
                name=cells[0],
                value=_nutrient_value(cells[1]),
                unit=cells[2] if len(cells) > 2 else "",
            )
        )
    return nutrients


def parse_nutritional_info(html: str) -> NutritionalInfo:
    """Read the nutritional information tab of a product."""
    document = _soup(html)
    fields = {}
    for name, selector in _NUTRITION_FIELDS.items():
        element = document.select_one(selector)
        fields[name] = _text(element) if element is not None else None
    return NutritionalInfo(**fields, nutrients=_nutrients(document))


def _flyer_slug(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1]


def parse_flyers(html: str) -> list[Flyer]:
    """Read the flyer tiles from the flyers page."""
    document = _soup(html)
    flyers = []
    for tile in document.select(".ipaper-tile"):
        link = tile.select_one("a.ipaper-tile--image-link")
        if link is None:
            continue
        url = _attr(link, "href")
        if url is None:
            continue

        title_el = tile.select_one(".ipaper-tile--title")
        desc_el = tile.select_one(".ipaper-tile--description")
        img = tile.select_one("img[data-src]")

        flyers.append(
            Flyer(
                title=html_decode(_text(title_el)) if title_el is not None else "",
                description=html_decode(_text(desc_el)) if desc_el is not None else "",
                url=url,
                image_url=_attr(img, "data-src") if img is not None else None,
                slug=_flyer_slug(url),
            )
        )

    if not flyers:
        raise NoResultsError()
    return flyers