"""
Client-side style guest search, category filtering and pagination
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def _field(guest: Any, name: str):
    if isinstance(guest, dict):
        return guest.get(name)
    return getattr(guest, name, None)


CATEGORY_PREDICATES: Dict[str, Callable[[Any], bool]] = {
    "attending": lambda g: _field(g, "rsvp_status") == "confirmed",
    "declined": lambda g: _field(g, "rsvp_status") == "declined",
    "pending": lambda g: _field(g, "rsvp_status") == "pending",
    "assigned": lambda g: bool(_field(g, "table_assignment")),
    "unassigned": lambda g: not _field(g, "table_assignment"),
    "dietary": lambda g: bool(_field(g, "dietary_restrictions")),
}

SEARCH_FIELDS = ("name", "email", "phone")


@dataclass
class Page(Generic[T]):
    items: List[T]
    page: int
    per_page: int
    total_pages: int
    total_items: int


class GuestFilterEngine:
    """Stateless search, filter and pagination over an in-memory guest list"""

    @staticmethod
    def matches_query(guest: Any, query: str) -> bool:
        if not query:
            return True
        needle = query.lower()
        for name in SEARCH_FIELDS:
            value = _field(guest, name)
            if value and needle in str(value).lower():
                return True
        return False

    @staticmethod
    def matches_category(guest: Any, category: Optional[str]) -> bool:
        if not category:
            return True
        try:
            predicate = CATEGORY_PREDICATES[category]
        except KeyError:
            raise ValueError(f"Unknown guest filter: {category}")
        return predicate(guest)

    @classmethod
    def filter(cls, guests: Sequence[T], query: str = "", category: Optional[str] = None) -> List[T]:
        if category and category not in CATEGORY_PREDICATES:
            raise ValueError(f"Unknown guest filter: {category}")
        return [
            g for g in guests
            if cls.matches_query(g, query) and cls.matches_category(g, category)
        ]

    @staticmethod
    def total_pages(item_count: int, per_page: int) -> int:
        return max(1, math.ceil(item_count / per_page))

    @classmethod
    def paginate(cls, filtered: Sequence[T], page: int, per_page: int) -> Page[T]:
        """Pages are 1-based; out-of-range requests are clamped"""
        if per_page < 1:
            raise ValueError("per_page must be at least 1")
        total_pages = cls.total_pages(len(filtered), per_page)
        page = max(1, min(page, total_pages))
        start = (page - 1) * per_page
        return Page(
            items=list(filtered[start:start + per_page]),
            page=page,
            per_page=per_page,
            total_pages=total_pages,
            total_items=len(filtered),
        )


class GuestListView:
    """Search text, one active category and the current page of a guest list"""

    def __init__(self, guests: Sequence = (), per_page: int = 10, category: Optional[str] = None):
        self.guests = list(guests)
        self.per_page = per_page
        self.query = ""
        self.category = category
        self._page = 1

    def set_guests(self, guests: Sequence) -> None:
        self.guests = list(guests)

    def set_query(self, query: str) -> None:
        self.query = query or ""
        self._page = 1

    def toggle_category(self, category: str) -> Optional[str]:
        if category not in CATEGORY_PREDICATES:
            raise ValueError(f"Unknown guest filter: {category}")
        self.category = None if self.category == category else category
        self._page = 1
        return self.category

    @property
    def filtered(self) -> List:
        return GuestFilterEngine.filter(self.guests, self.query, self.category)

    @property
    def total_pages(self) -> int:
        return GuestFilterEngine.total_pages(len(self.filtered), self.per_page)

    @property
    def page(self) -> int:
        self._page = max(1, min(self._page, self.total_pages))
        return self._page

    def go_to_page(self, page: int) -> int:
        self._page = max(1, min(page, self.total_pages))
        return self._page

    def current_page(self) -> Page:
        return GuestFilterEngine.paginate(self.filtered, self.page, self.per_page)
