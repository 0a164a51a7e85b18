"""Search, status filtering and pagination for the list views."""
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Union

ALL_STATUSES = "all"
ELLIPSIS = "ellipsis"
PAGE_SIZES = (5, 10, 20, 50)

# Fields searched by each list view
PRODUCT_SEARCH_FIELDS = ("name", "category")
ORDER_SEARCH_FIELDS = ("customer", "id", "email")
CONSULTATION_SEARCH_FIELDS = ("name", "company", "service", "email")


def _text(value: Any) -> str:
    return "" if value is None else str(value).lower()


def matches_search(item: Dict[str, Any], search_term: str, fields: Sequence[str]) -> bool:
    term = (search_term or "").lower()
    if not term:
        return True
    return any(term in _text(item.get(field)) for field in fields)


def matches_status(item: Dict[str, Any], status_filter: str, status_field: str = "status") -> bool:
    if not status_filter or status_filter.lower() == ALL_STATUSES:
        return True
    return _text(item.get(status_field)) == status_filter.lower()


def apply_filters(
    items: Sequence[Dict[str, Any]],
    search_term: str,
    status_filter: str,
    fields: Sequence[str] = CONSULTATION_SEARCH_FIELDS,
    status_field: str = "status",
) -> List[Dict[str, Any]]:
    return [
        item
        for item in items
        if matches_search(item, search_term, fields) and matches_status(item, status_filter, status_field)
    ]


@dataclass
class Page:
    items: List[Any]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentPage": self.page,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "limit": self.page_size,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
            "pages": page_numbers(self.page, self.total_pages),
        }


def total_pages_for(total_items: int, page_size: int) -> int:
    return max(1, math.ceil(total_items / page_size)) if page_size > 0 else 1


def paginate(items: Sequence[Any], page: int, page_size: int) -> Page:
    """Slice ``items[(page-1)*page_size : page*page_size]``; out-of-range pages clamp."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    total_pages = total_pages_for(len(items), page_size)
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_items=len(items),
        total_pages=total_pages,
    )


def page_numbers(current: int, total: int, max_visible: int = 5) -> List[Union[int, str]]:
    """Page links around ``current`` with "ellipsis" markers for the gaps.

    e.g. current=5, total=10 -> [1, "ellipsis", 4, 5, 6, "ellipsis", 10]
    """
    if total <= max_visible:
        return list(range(1, total + 1))
    if current <= 3:
        return [*range(1, 5), ELLIPSIS, total]
    if current >= total - 2:
        return [1, ELLIPSIS, *range(total - 3, total + 1)]
    return [1, ELLIPSIS, current - 1, current, current + 1, ELLIPSIS, total]


def window_page_numbers(current: int, total: int, max_visible: int = 5) -> List[int]:
    """Sliding window of page links without gaps, used by server-paginated lists."""
    start = max(1, current - max_visible // 2)
    end = min(total, start + max_visible - 1)
    if end - start + 1 < max_visible:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))


def server_page(pagination: Dict[str, Any], page: int, limit: int, received: int) -> Dict[str, Any]:
    """Normalize an upstream ``pagination`` block, filling gaps from the request."""
    pagination = pagination or {}
    current = pagination.get("currentPage") or page
    total_pages = pagination.get("totalPages") or 1
    return {
        "currentPage": current,
        "totalPages": total_pages,
        "totalItems": pagination.get("totalBookings") or pagination.get("totalItems") or received,
        "limit": pagination.get("limit") or limit,
        "hasNext": bool(pagination.get("hasNext")),
        "hasPrev": bool(pagination.get("hasPrev")),
        "pages": window_page_numbers(current, total_pages),
    }


@dataclass(frozen=True)
class ListState:
    search: str = ""
    status: str = ALL_STATUSES
    page: int = 1
    page_size: int = 10

    def with_search(self, search: str) -> "ListState":
        return replace(self, search=search or "", page=1)

    def with_status(self, status: str) -> "ListState":
        return replace(self, status=status or ALL_STATUSES, page=1)

    def with_page_size(self, page_size: int) -> "ListState":
        return replace(self, page_size=page_size, page=1)

    @classmethod
    def from_query(
        cls,
        search: str,
        status: str,
        page: int,
        page_size: int,
        prev_search: Optional[str] = None,
        prev_status: Optional[str] = None,
        prev_page_size: Optional[int] = None,
    ) -> "ListState":
        """Build the state for a list request.

        The ``prev_*`` values are the filters the requested page was computed
        under. When the search, status or page size differs from them the
        state goes back to page 1.
        """
        state = cls(
            search=(search if prev_search is None else prev_search) or "",
            status=(status if prev_status is None else prev_status) or ALL_STATUSES,
            page=page,
            page_size=page_size if prev_page_size is None else prev_page_size,
        )
        if (search or "") != state.search:
            state = state.with_search(search)
        if (status or ALL_STATUSES) != state.status:
            state = state.with_status(status)
        if page_size != state.page_size:
            state = state.with_page_size(page_size)
        return state
