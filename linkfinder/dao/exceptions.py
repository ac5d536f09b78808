"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a LinkModel is not found in the data store.

    ReferenceCodeTakenError:
        Raised when the storage-level uniqueness key for a reference code is
        already claimed (including by a concurrent writer).

    UserNotFoundError:
        Raised when a UserModel is not found in the data store.

    UserAlreadyExistsError:
        Raised when a username or email uniqueness key is already claimed.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from linkfinder.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with id '42' not found.")
    Traceback (most recent call last):
        ...
    linkfinder.dao.exceptions.LinkNotFoundError: Link with id '42' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class LinkNotFoundError(DAOError):
    """Exception raised when a LinkModel is not found in the data store."""

    pass


class ReferenceCodeTakenError(DAOError):
    """Exception raised when a reference code is already claimed in the data store."""

    pass


class UserNotFoundError(DAOError):
    """Exception raised when a UserModel is not found in the data store."""

    pass


class UserAlreadyExistsError(DAOError):
    """Exception raised when a username or email is already claimed in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass
