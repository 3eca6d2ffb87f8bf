"""
User directory contract.

The federation resolver never owns user data. It reads it through a
``UserDirectory``, which exposes a broad search primitive and a per-user
attribute store. The search may match loosely (substring, case-insensitive);
callers are expected to re-filter the candidates themselves.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class DirectoryUser(BaseModel):
    """A user returned by a directory search."""

    model_config = ConfigDict(frozen=True)

    guid: str
    login: str
    email: str


class UserDirectory(ABC):
    """
    Read/write interface to the external user directory.

    Implementations must be safe to share between concurrent requests. The
    resolver only calls ``search_users`` and ``get_attribute``; writes go
    through ``set_attribute`` and are reserved for the account identifier
    editor, which performs its own authorization check first.
    """

    @abstractmethod
    async def search_users(self, term: str) -> List[DirectoryUser]:
        """
        Search users whose login or email contains ``term``.

        Args:
            term: Search term, matched loosely against login and email

        Returns:
            Candidate users, possibly including users that do not match exactly
        """

    @abstractmethod
    async def get_user(self, guid: str) -> Optional[DirectoryUser]:
        """Return the user with the given guid, or None."""

    @abstractmethod
    async def get_attribute(self, user_guid: str, key: str) -> Optional[str]:
        """
        Read a single attribute of a user.

        Returns:
            The stored value, or None if the attribute was never set
        """

    @abstractmethod
    async def set_attribute(
        self, user_guid: str, key: str, value: Optional[str]
    ) -> None:
        """
        Store an attribute for a user. A value of None removes the attribute.
        """
