"""Abstract base class for link data access objects (DAOs).

This interface defines the contract for storing and querying reference-code
links across different storage systems (e.g., Redis, DynamoDB, PostgreSQL).

Responsibilities:
    - Provide CRUD-like methods for LinkModel records keyed by surrogate id.
    - Enforce case-insensitive reference code uniqueness at the storage level.
      Application-level existence checks are only a courtesy; the write itself
      must fail with ReferenceCodeTakenError when the code is already claimed.
    - Provide ordered, paginated listing and a full scan for search.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkfinder.dao.redis import LinkRedisDAO
        >>> dao = LinkRedisDAO(...)

        >>> link = dao.insert(LinkModel(reference_code='PI-31001', full_url='https://example.com/doc1.pdf'))
        >>> link.id
        1

        >>> dao.get_by_reference_code('pi-31001').full_url
        'https://example.com/doc1.pdf'
"""

from abc import ABC, abstractmethod
from typing import Optional

from linkfinder.models import LinkModel


class LinkBaseDAO(ABC):
    """Interface for link data access objects (DAOs)

    Methods:
        insert(link: LinkModel, **kwargs) -> LinkModel:
            Persist a new link and return it with its assigned id.
            Raises ReferenceCodeTakenError if the reference code is already claimed.

        update(link: LinkModel, **kwargs) -> LinkModel:
            Replace all stored fields of an existing link.
            Raises LinkNotFoundError if the id does not exist.
            Raises ReferenceCodeTakenError if the new code belongs to a different link.

        delete(link_id: int, **kwargs) -> None:
            Hard delete a link and release its reference code.
            Raises LinkNotFoundError if the id does not exist.

        get(link_id: int, **kwargs) -> LinkModel:
            Retrieve a link by id. Raises LinkNotFoundError.

        get_by_reference_code(reference_code: str, **kwargs) -> LinkModel:
            Retrieve a link by case-insensitive reference code. Raises LinkNotFoundError.

        exists_reference_code(reference_code: str, exclude_id: Optional[int] = None, **kwargs) -> bool:
            Check whether a code is claimed, optionally ignoring one link id.

        page(offset: int, limit: int, sort_field: str, descending: bool, **kwargs) -> tuple[list[LinkModel], int]:
            Retrieve an ordered slice of all links and the total link count.

        all(**kwargs) -> list[LinkModel]:
            Retrieve every stored link.

    All methods raise DataStoreError on data store failures.
    """

    SORTABLE_FIELDS = frozenset(
        {
            'id',
            'reference_code',
            'full_url',
            'description',
            'brand_name',
            'status',
            'created_at',
            'updated_at',
        }
    )

    @abstractmethod
    def insert(self, link: LinkModel, **kwargs) -> LinkModel:
        """Persist a new link.

        Args:
            link (LinkModel):
                Link to store. Its `id` is ignored and assigned by the data store.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel:
                The stored link with its assigned id.

        Raises:
            ReferenceCodeTakenError:
                If another link already holds the reference code (case-insensitive),
                including when a concurrent writer claims it first.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def update(self, link: LinkModel, **kwargs) -> LinkModel:
        """Replace the stored fields of an existing link.

        Args:
            link (LinkModel):
                Link carrying the id of the record to replace and its new field values.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel:
                The updated link.

        Raises:
            LinkNotFoundError:
                If no link with `link.id` exists.

            ReferenceCodeTakenError:
                If the new reference code belongs to a different link.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, link_id: int, **kwargs) -> None:
        pass

    @abstractmethod
    def get(self, link_id: int, **kwargs) -> LinkModel:
        pass

    @abstractmethod
    def get_by_reference_code(self, reference_code: str, **kwargs) -> LinkModel:
        pass

    @abstractmethod
    def exists_reference_code(self, reference_code: str, exclude_id: Optional[int] = None, **kwargs) -> bool:
        pass

    @abstractmethod
    def page(self, offset: int, limit: int, sort_field: str = 'id', descending: bool = True, **kwargs) -> tuple[list[LinkModel], int]:
        """Retrieve an ordered slice of all links.

        Args:
            offset (int):
                Number of records to skip.

            limit (int):
                Maximum number of records to return.

            sort_field (str):
                One of SORTABLE_FIELDS. Defaults to 'id'.

            descending (bool):
                Sort direction. Defaults to True.

        Returns:
            tuple[list[LinkModel], int]:
                The requested slice and the total number of stored links.
        """
        pass
