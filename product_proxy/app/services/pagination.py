"""
In-memory filtering and paging over a fully fetched product collection.
"""

from typing import List, Optional, Sequence

from ..schemas.pagination import PagedResponse, PaginationParameters
from ..schemas.product import Product


def filter_by_name(
    products: Sequence[Product], name_filter: Optional[str]
) -> List[Product]:
    """Keep products whose name contains ``name_filter``, ignoring case.

    A missing or blank filter keeps everything. Upstream order is preserved.
    """
    if not name_filter or not name_filter.strip():
        return list(products)

    needle = name_filter.casefold()
    return [p for p in products if needle in p.name.casefold()]


def paginate(
    products: Sequence[Product], params: PaginationParameters
) -> PagedResponse[Product]:
    """Filter then slice one page.

    ``total_count`` is the filtered count. The requested page number and size
    are echoed back unchanged, so a page past the end yields no items with
    the full filtered count.
    """
    filtered = filter_by_name(products, params.name_filter)
    start = params.offset
    items = filtered[start : start + params.page_size]

    return PagedResponse[Product](
        items=items,
        page_number=params.page_number,
        page_size=params.page_size,
        total_count=len(filtered),
    )
