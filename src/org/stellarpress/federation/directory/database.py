"""PostgreSQL-backed user directory.

Implements ``UserDirectory`` over the ``users`` and ``user_meta`` tables using
the async SQLAlchemy session factory shared by the application.
"""

import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from org.stellarpress.federation.directory.base import DirectoryUser, UserDirectory
from org.stellarpress.federation.model.users import (
    User,
    delete_user_meta_stmt,
    search_users_stmt,
    select_user_meta_stmt,
    upsert_user_meta_stmt,
)

logger = logging.getLogger(__name__)


def directory_user(user: User) -> DirectoryUser:
    return DirectoryUser(guid=user.guid, login=user.login, email=user.email)


class DatabaseUserDirectory(UserDirectory):
    """User directory reading and writing through SQLAlchemy.

    Each call opens its own short-lived session, so one instance can serve all
    requests.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def search_users(self, term: str) -> List[DirectoryUser]:
        async with self.session_maker() as session:
            results = await session.scalars(search_users_stmt(term))
            return [directory_user(user) for user in results]

    async def get_user(self, guid: str) -> Optional[DirectoryUser]:
        async with self.session_maker() as session:
            user = await session.scalar(select(User).where(User.guid == guid))
            if user is None:
                return None
            return directory_user(user)

    async def get_user_by_login(self, login: str) -> Optional[User]:
        async with self.session_maker() as session:
            return await session.scalar(select(User).where(User.login == login))

    async def get_attribute(self, user_guid: str, key: str) -> Optional[str]:
        async with self.session_maker() as session:
            return await session.scalar(select_user_meta_stmt(user_guid, key))

    async def set_attribute(
        self, user_guid: str, key: str, value: Optional[str]
    ) -> None:
        async with self.session_maker() as session:
            async with session.begin():
                if value is None:
                    await session.execute(delete_user_meta_stmt(user_guid, key))
                else:
                    await session.execute(upsert_user_meta_stmt(user_guid, key, value))
        logger.info("Updated %s for user %s", key, user_guid)

    async def add_user(self, user: User) -> None:
        async with self.session_maker() as session:
            async with session.begin():
                session.add(user)
