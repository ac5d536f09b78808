"""Abstract base class for operator account data access objects (DAOs).

Usernames are unique by exact match, emails are unique case-insensitively.
Role immutability and the SUPER_ADMIN deletion guard are enforced by
AuthService, not by the storage layer.

Example:
    >>> from linkfinder.dao.redis import UserRedisDAO
    >>> dao = UserRedisDAO(...)
    >>> dao.get_by_username('alice').role
    <Role.ADMIN: 'ADMIN'>
"""

from abc import ABC, abstractmethod

from linkfinder.models import UserModel, Role


class UserBaseDAO(ABC):
    """Interface for operator account data access objects (DAOs)

    Methods:
        insert(user: UserModel, **kwargs) -> UserModel:
            Persist a new user and return it with its assigned id.
            Raises UserAlreadyExistsError if the username or email is taken.

        get(user_id: int, **kwargs) -> UserModel:
            Raises UserNotFoundError if the id does not exist.

        get_by_username(username: str, **kwargs) -> UserModel:
            Raises UserNotFoundError if the username does not exist.

        exists_username(username: str, **kwargs) -> bool
        exists_email(email: str, **kwargs) -> bool

        list_by_role(role: Role, **kwargs) -> list[UserModel]:
            Users holding `role`, newest first.

        delete(user_id: int, **kwargs) -> None:
            Raises UserNotFoundError if the id does not exist.

    All methods raise DataStoreError on data store failures.
    """

    @abstractmethod
    def insert(self, user: UserModel, **kwargs) -> UserModel:
        pass

    @abstractmethod
    def get(self, user_id: int, **kwargs) -> UserModel:
        pass

    @abstractmethod
    def get_by_username(self, username: str, **kwargs) -> UserModel:
        pass

    @abstractmethod
    def exists_username(self, username: str, **kwargs) -> bool:
        pass

    @abstractmethod
    def exists_email(self, email: str, **kwargs) -> bool:
        pass

    @abstractmethod
    def list_by_role(self, role: Role, **kwargs) -> list[UserModel]:
        pass

    @abstractmethod
    def delete(self, user_id: int, **kwargs) -> None:
        pass
