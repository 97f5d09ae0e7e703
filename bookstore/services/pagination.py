"""
Offset pagination.
"""

from dataclasses import dataclass, field
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Keeps (page - 1) * size inside a 64-bit SQL integer
MAX_PAGE = 1_000_000


def normalize_paging(page: int, size: int) -> tuple[int, int]:
    """
    Clamp invalid input.

    Page below 1 becomes 1 and size below 1 the default. Values past
    MAX_PAGE or MAX_PAGE_SIZE are capped, so an absurd page yields an
    empty result instead of an offset the database cannot bind.
    """
    if page < 1:
        page = 1
    elif page > MAX_PAGE:
        page = MAX_PAGE
    if size < 1:
        size = DEFAULT_PAGE_SIZE
    elif size > MAX_PAGE_SIZE:
        size = MAX_PAGE_SIZE
    return page, size


def total_pages(total_items: int, size: int) -> int:
    """Ceiling division; zero items means zero pages."""
    return (total_items + size - 1) // size


@dataclass
class Page(Generic[T]):
    """One page of results plus paging metadata."""

    page: int
    size: int
    total_items: int
    items: Sequence[T] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_items, self.size)
