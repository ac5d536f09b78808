import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar


T = TypeVar('T')


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of an ordered result set.

    Example:
        >>> page = Page(items=['a', 'b'], page=0, size=2, total_elements=5)
        >>> page.total_pages
        3
        >>> page.last
        False
    """

    items: list[T]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total_elements / self.size)

    @property
    def last(self) -> bool:
        return self.page + 1 >= self.total_pages

    def to_dict(self, serialize: Callable[[T], Any]) -> dict[str, Any]:
        return {
            'content': [serialize(item) for item in self.items],
            'page': self.page,
            'size': self.size,
            'totalElements': self.total_elements,
            'totalPages': self.total_pages,
            'last': self.last,
        }
