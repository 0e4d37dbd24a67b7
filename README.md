# cntshop

An async Python client for the Continente online supermarket. It searches
products, browses categories by id, fetches product detail and nutritional
information, gives autocomplete suggestions, finds stores near a location and
lists the current flyers.

## Installation

```
pip install cntshop
```

## Usage

```python
import asyncio

from cntshop.client import ContinenteClient
from cntshop.models import SearchParams, SortRule


async def main():
    async with ContinenteClient() as client:
        params = SearchParams(sort=SortRule.PRICE_LOW_TO_HIGH, brand="Mimosa")
        results = await client.search("leite", params)
        print(results.total)
        for product in results.products:
            print(product.id, product.name, product.price, product.unit_price)

        detail = await client.product("6879912")
        print(detail.name, detail.price.sales_value, detail.price.currency)
        if detail.ean and detail.supplier_id:
            info = await client.nutrition(detail.id, detail.ean, detail.supplier_id)
            for nutrient in info.nutrients:
                print(nutrient.name, nutrient.value, nutrient.unit)

        for store in await client.stores(38.7, -9.1, 10):
            print(store.name, store.city)


asyncio.run(main())
```

`ContinenteClient(base_url=..., timeout=...)` takes an optional base URL
(the public storefront by default) and a timeout in seconds (30 by default).
Use it as an async context manager, or call `await client.aclose()` when done.

### Client methods

- `search(query, params)`: product search. `SearchParams` holds `start`,
  `size` (24 by default), `sort` (a `SortRule`), `price_min` (0.01 is sent
  when unset), `price_max`, `brand` and `filters`, a list of
  `(name, value)` pairs sent as extra refinements.
- `browse(cgid, params)`: products of a category id; only paging and sorting
  apply.
- `product(pid)`: full product detail, including the EAN and supplier id
  taken from the nutritional info URL.
- `nutrition(pid, ean, supplier_id)`: ingredients, allergens, origin and the
  nutrient table.
- `suggest(query)`: products, categories and popular search terms; the query
  must be at least 5 characters.
- `stores(lat, lon, radius)`: stores within `radius` km.
- `flyers()`: the current promotional flyers.
- `endpoint(controller)`: the full URL of a storefront controller.

### Parsing without the network

The parsers in `cntshop.scraper` work on HTML you already have:
`parse_search_results`, `parse_suggestions`, `parse_nutritional_info` and
`parse_flyers`; `html_decode` replaces the entities the site emits.
`cntshop.models` turns product and store JSON into dataclasses
(`search_product_from_json`, `product_detail_from_json`, `store_from_json`,
`stores_from_json`), `extract_ean_supplier` reads a nutritional info URL, and
`to_dict` turns any model into plain JSON-ready values.

### Errors

Every failure is raised as `cntshop.errors.ContinenteError` or a subclass:

- `NoResultsError` when a search, browse or flyers page has nothing to show;
- `ParseError` (with `url` and `message`) when product or store JSON cannot be
  read, or when a suggestion query is shorter than 5 characters;
- `ContinenteError` itself when the HTTP request fails or returns an error
  status.

## What it does not do

This is a library only: there is no command-line program, no configuration
file, no built-in list of category ids or lookup of categories by name, and
no table or text output formatting. Cart, checkout, login and wishlist
operations are not provided.

## Running the tests

```
pip install "cntshop[test]"
pytest
```