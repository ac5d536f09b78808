"""Public, bounded substring search over links.

A link matches when the term occurs (case-insensitively) in any of its
reference code, description, brand name or full URL. Results are ordered by
reference code ascending, so pagination is stable regardless of insertion
order. Page size is clamped to 50 and pages beyond index 10 are rejected:
search serves narrow lookups, bulk traversal goes through the paginated
listing instead.

The store has no text index, so every search reads all links. They are read
in id order, `batch_size` at a time, and only matches are kept in memory.
Cost grows with the size of the store.
"""

from collections.abc import Iterator

from beartype import beartype

from linkfinder.constants import Defaults, Limits
from linkfinder.dao.base import LinkBaseDAO
from linkfinder.exceptions import PageLimitExceededError, ValidationError
from linkfinder.models import LinkModel, Page


def _matches(link: LinkModel, needle: str) -> bool:
    fields = (link.reference_code, link.description, link.brand_name, link.full_url)
    return any(needle in value.casefold() for value in fields if value)


def _order(link: LinkModel) -> tuple[str, str]:
    # Codes are unique case-insensitively, the raw code only breaks ties deterministically
    return link.reference_code.casefold(), link.reference_code


class SearchService:
    def __init__(self, link_dao: LinkBaseDAO, batch_size: int = Defaults.SEARCH_SCAN_BATCH):
        self.link_dao = link_dao
        self.batch_size = batch_size

    def _scan(self) -> Iterator[LinkModel]:
        offset = 0
        while True:
            links, total = self.link_dao.page(offset=offset, limit=self.batch_size, sort_field='id', descending=False)
            yield from links
            offset += self.batch_size
            if offset >= total:
                return

    @beartype
    def search(self, term: str, page: int = 0, size: int = Defaults.SEARCH_PAGE_SIZE) -> Page[LinkModel]:
        """Find links containing `term`.

        Args:
            term (str):
                Substring to look for. Surrounding whitespace is ignored and an
                empty term matches every link.
            page (int):
                Zero-based page index, at most 10.
            size (int):
                Page size. Values above 50 are clamped to 50.

        Returns:
            Page[LinkModel]:
                Matching links ordered by reference code ascending.

        Raises:
            ValidationError:
                If `page` is negative or `size` is not positive.
            PageLimitExceededError:
                If `page` is greater than 10.

        Example:
            >>> service.search('pi-3', page=0, size=999).size
            50
        """
        if page < 0:
            raise ValidationError('Page index must not be negative')
        if page > Limits.SEARCH_MAX_PAGE:
            raise PageLimitExceededError()
        if size < 1:
            raise ValidationError('Page size must be at least 1')
        size = min(size, Limits.SEARCH_MAX_PAGE_SIZE)

        needle = term.strip().casefold()
        matches = sorted((link for link in self._scan() if _matches(link, needle)), key=_order)

        start = page * size
        return Page(items=matches[start : start + size], page=page, size=size, total_elements=len(matches))
