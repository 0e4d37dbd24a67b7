"""Asynchronous HTTP client for the shop's storefront endpoints."""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Any, Optional

import httpx

from cntshop.errors import ContinenteError, ParseError
from cntshop.models import (
    Flyer,
    NutritionalInfo,
    ProductDetail,
    SearchParams,
    SearchResponse,
    Store,
    SuggestionResult,
    product_detail_from_json,
    stores_from_json,
)
from cntshop.scraper import (
    parse_flyers,
    parse_nutritional_info,
    parse_search_results,
    parse_suggestions,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://www.continente.pt"
USER_AGENT = "Mozilla/5.0 (compatible; cntshop/0.1)"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MIN_PRICE = 0.01
MIN_SUGGEST_LENGTH = 5

_CONTROLLER_PATH = "/on/demandware.store/Sites-continente-Site/default/"


def _format_number(value: float) -> str:
    """Render a number the way the storefront expects it: no exponent, no '.0'."""
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    text = repr(float(value))
    if "e" in text or "E" in text:
        return format(Decimal(text), "f")
    return text


class ContinenteClient:
    """Client for search, browse, product, nutrition, suggestion, store and flyer data."""

    def __init__(self, base_url: str = BASE_URL, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            follow_redirects=True,
        )

    async def __aenter__(self) -> ContinenteClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    def endpoint(self, controller: str) -> str:
        """Full URL of a storefront controller."""
        return f"{self.base_url}{_CONTROLLER_PATH}{controller}"

    async def _get(
        self, url: str, params: Optional[list[tuple[str, str]]] = None
    ) -> httpx.Response:
        try:
            response = await self._http.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ContinenteError(f"HTTP request failed: {exc}") from exc
        return response

    async def search(self, query: str, params: SearchParams) -> SearchResponse:
        """Search products by free text."""
        logger.debug("Searching for %r with params: %r", query, params)
        pmin = params.price_min if params.price_min is not None else DEFAULT_MIN_PRICE
        query_params = [
            ("q", query),
            ("cgid", "col-produtos"),
            ("start", str(params.start)),
            ("sz", str(params.size)),
            ("pmin", _format_number(pmin)),
        ]
        if params.sort is not None:
            query_params.append(("srule", params.sort.as_str()))
        if params.price_max is not None:
            query_params.append(("pmax", _format_number(params.price_max)))
        if params.brand is not None:
            query_params += [("prefn1", "brand"), ("prefv1", params.brand)]

        offset = 2 if params.brand is not None else 1
        for number, (name, value) in enumerate(params.filters, start=offset):
            query_params += [(f"prefn{number}", name), (f"prefv{number}", value)]

        response = await self._get(self.endpoint("Search-ShowAjax"), query_params)
        return parse_search_results(response.text, query)

    async def browse(self, cgid: str, params: SearchParams) -> SearchResponse:
        """List the products of a category."""
        logger.debug("Browsing category %r", cgid)
        query_params = [
            ("cgid", cgid),
            ("start", str(params.start)),
            ("sz", str(params.size)),
        ]
        if params.sort is not None:
            query_params.append(("srule", params.sort.as_str()))

        response = await self._get(self.endpoint("Search-ShowAjax"), query_params)
        return parse_search_results(response.text, cgid)

    async def product(self, pid: str) -> ProductDetail:
        """Fetch the details of one product."""
        logger.debug("Fetching product %r", pid)
        response = await self._get(self.endpoint("Product-Variation"), [("pid", pid)])
        try:
            data = response.json()
            if not isinstance(data, dict) or "product" not in data:
                raise ValueError("missing field 'product'")
            return product_detail_from_json(data["product"])
        except (ValueError, TypeError) as exc:
            raise ParseError(f"Product-Variation?pid={pid}", str(exc)) from exc

    async def nutrition(self, pid: str, ean: str, supplier_id: str) -> NutritionalInfo:
        """Fetch the nutritional information tab of a product."""
        logger.debug("Fetching nutrition for pid=%s, ean=%s", pid, ean)
        response = await self._get(
            self.endpoint("Product-ProductNutritionalInfoTab"),
            [
                ("pid", pid),
                ("ean", ean),
                ("supplierid", supplier_id),
                ("enabledce", "true"),
            ],
        )
        return parse_nutritional_info(response.text)

    async def suggest(self, query: str) -> SuggestionResult:
        """Autocomplete suggestions; the query needs at least five characters."""
        if len(query.encode("utf-8")) < MIN_SUGGEST_LENGTH:
            raise ParseError(
                "SearchServices-GetSuggestions",
                "Query must be at least 5 characters",
            )
        logger.debug("Getting suggestions for %r", query)
        response = await self._get(
            self.endpoint("SearchServices-GetSuggestions"), [("q", query)]
        )
        return parse_suggestions(response.text)

    async def stores(self, lat: float, lon: float, radius: int) -> list[Store]:
        """Find stores within ``radius`` kilometres of a location."""
        logger.debug("Finding stores near (%s, %s) radius=%skm", lat, lon, radius)
        lat_text = _format_number(lat)
        lon_text = _format_number(lon)
        response = await self._get(
            self.endpoint("Stores-FindStores"),
            [("lat", lat_text), ("long", lon_text), ("radius", str(radius))],
        )
        try:
            return stores_from_json(response.json())
        except (ValueError, TypeError) as exc:
            raise ParseError(
                f"Stores-FindStores?lat={lat_text}&long={lon_text}", str(exc)
            ) from exc

    async def flyers(self) -> list[Flyer]:
        """Fetch the flyers currently published."""
        url = f"{self.base_url}/folhetos/"
        logger.debug("Fetching flyers from %s", url)
        response = await self._get(url)
        return parse_flyers(response.text)