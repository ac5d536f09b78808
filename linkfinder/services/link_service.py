"""Link management on top of a LinkBaseDAO.

Reference code uniqueness is checked here first so that the common case gets a
clean DuplicateReferenceCodeError, but the data store's own uniqueness key is
the authoritative guard: a ReferenceCodeTakenError surfaced by the write
(a concurrent writer won the race) is remapped to the same error.
"""

import logging
from datetime import datetime, UTC
from typing import Optional

from beartype import beartype

from linkfinder.constants import Defaults
from linkfinder.dao.base import LinkBaseDAO
from linkfinder.dao.exceptions import LinkNotFoundError, ReferenceCodeTakenError
from linkfinder.exceptions import DuplicateReferenceCodeError, NotFoundError, ValidationError
from linkfinder.models import LinkModel, LinkRequest, LinkStatus, Page


logger = logging.getLogger(__name__)

LINK_CREATED = 'LINK_CREATED'
LINK_UPDATED = 'LINK_UPDATED'
LINK_DELETED = 'LINK_DELETED'

# camelCase names used by API clients -> stored field names
SORT_FIELD_ALIASES = {
    'referenceCode': 'reference_code',
    'fullUrl': 'full_url',
    'brandName': 'brand_name',
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
}


def _duplicate(reference_code: str) -> DuplicateReferenceCodeError:
    return DuplicateReferenceCodeError(f"Reference code '{reference_code}' already exists")


class LinkService:
    def __init__(self, link_dao: LinkBaseDAO):
        self.link_dao = link_dao

    @beartype
    def create(self, request: LinkRequest, created_by: Optional[str] = None) -> LinkModel:
        """Persist a new ACTIVE link.

        Raises:
            DuplicateReferenceCodeError:
                If a link with the same reference code (case-insensitive) exists.
        """
        if self.link_dao.exists_reference_code(request.reference_code):
            raise _duplicate(request.reference_code)

        now = datetime.now(UTC)
        link = LinkModel(
            reference_code=request.reference_code,
            full_url=request.full_url,
            description=request.description,
            brand_name=request.brand_name,
            status=LinkStatus.ACTIVE,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        try:
            link = self.link_dao.insert(link)
        except ReferenceCodeTakenError as e:
            raise _duplicate(request.reference_code) from e

        logger.info('Link created.', extra={'event': LINK_CREATED, 'linkId': link.id, 'referenceCode': link.reference_code})
        return link

    @beartype
    def update(self, link_id: int, request: LinkRequest) -> LinkModel:
        """Replace all mutable fields of a link and refresh `updated_at`.

        The status is kept unless the request carries one.

        Raises:
            NotFoundError:
                If the link does not exist.
            DuplicateReferenceCodeError:
                If the new reference code belongs to a different link.
        """
        current = self.get(link_id)
        if self.link_dao.exists_reference_code(request.reference_code, exclude_id=link_id):
            raise _duplicate(request.reference_code)

        link = LinkModel(
            id=link_id,
            reference_code=request.reference_code,
            full_url=request.full_url,
            description=request.description,
            brand_name=request.brand_name,
            status=request.status or current.status,
            created_by=current.created_by,
            created_at=current.created_at,
            updated_at=datetime.now(UTC),
        )
        try:
            link = self.link_dao.update(link)
        except ReferenceCodeTakenError as e:
            raise _duplicate(request.reference_code) from e
        except LinkNotFoundError as e:
            raise NotFoundError('Link not found') from e

        logger.info('Link updated.', extra={'event': LINK_UPDATED, 'linkId': link_id, 'referenceCode': link.reference_code})
        return link

    @beartype
    def delete(self, link_id: int) -> None:
        try:
            self.link_dao.delete(link_id)
        except LinkNotFoundError as e:
            raise NotFoundError('Link not found') from e
        logger.info('Link deleted.', extra={'event': LINK_DELETED, 'linkId': link_id})

    @beartype
    def get(self, link_id: int) -> LinkModel:
        try:
            return self.link_dao.get(link_id)
        except LinkNotFoundError as e:
            raise NotFoundError('Link not found') from e

    @beartype
    def get_by_reference_code(self, reference_code: str) -> LinkModel:
        """Resolve a reference code (case-insensitive, surrounding whitespace ignored)."""
        code = reference_code.strip()
        if not code:
            raise NotFoundError('Link not found')
        try:
            return self.link_dao.get_by_reference_code(code)
        except LinkNotFoundError as e:
            raise NotFoundError('Link not found') from e

    @beartype
    def exists(self, reference_code: str) -> bool:
        return self.link_dao.exists_reference_code(reference_code)

    @beartype
    def list_all(
        self,
        page: int = 0,
        size: int = Defaults.LIST_PAGE_SIZE,
        sort_field: str = Defaults.LIST_SORT_FIELD,
        sort_dir: str = Defaults.LIST_SORT_DIR,
    ) -> Page[LinkModel]:
        """Return one page of all links ordered by `sort_field`.

        Raises:
            ValidationError:
                If `page` is negative, `size` is not positive, or the sort
                field or direction is unknown.
        """
        if page < 0:
            raise ValidationError('Page index must not be negative')
        if size < 1:
            raise ValidationError('Page size must be at least 1')

        field = SORT_FIELD_ALIASES.get(sort_field, sort_field)
        if field not in LinkBaseDAO.SORTABLE_FIELDS:
            raise ValidationError(f"Cannot sort by '{sort_field}'")

        direction = sort_dir.lower()
        if direction not in {'asc', 'desc'}:
            raise ValidationError("Sort direction must be 'asc' or 'desc'")

        items, total = self.link_dao.page(offset=page * size, limit=size, sort_field=field, descending=direction == 'desc')
        return Page(items=items, page=page, size=size, total_elements=total)
