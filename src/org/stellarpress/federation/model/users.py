"""User directory data models.

Provides SQLAlchemy models for directory users and their per-user metadata,
where the Stellar account identifier of a user is stored.
"""

from datetime import datetime, timezone
from sqlalchemy import DateTime, ForeignKey, Index, delete, or_, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Mapped, mapped_column
from ulid import ULID

from org.stellarpress.federation.model.base import Base, guidpk, str64, str255, str512


class User(Base):
    """Directory user.

    Users are looked up by login or email when resolving Stellar addresses.
    Administrators may edit the metadata of any user.
    """

    __tablename__ = "users"

    guid: Mapped[guidpk]
    login: Mapped[str255]
    email: Mapped[str255]
    display_name: Mapped[str255] = mapped_column(default="")
    is_admin: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        Index("idx_users_login", "login", unique=True),
        Index("idx_users_email", "email"),
    )


class UserMeta(Base):
    """Single metadata value of a user, keyed by ``meta_key``."""

    __tablename__ = "user_meta"

    guid: Mapped[guidpk]
    user_guid: Mapped[str512] = mapped_column(
        ForeignKey("users.guid", ondelete="CASCADE")
    )
    meta_key: Mapped[str64]
    meta_value: Mapped[str512]

    __table_args__ = (
        Index("idx_user_meta_user_key", "user_guid", "meta_key", unique=True),
    )


def new_user(
    login: str, email: str, display_name: str = "", is_admin: bool = False
) -> User:
    return User(
        guid=str(ULID()),
        login=login,
        email=email,
        display_name=display_name,
        is_admin=is_admin,
    )


def search_users_stmt(term: str):
    """Create a case-insensitive substring search over login and email."""
    return (
        select(User)
        .where(
            or_(
                User.login.icontains(term, autoescape=True),
                User.email.icontains(term, autoescape=True),
            )
        )
        .order_by(User.guid)
    )


def select_user_meta_stmt(user_guid: str, meta_key: str):
    return select(UserMeta.meta_value).where(
        UserMeta.user_guid == user_guid, UserMeta.meta_key == meta_key
    )


def upsert_user_meta_stmt(user_guid: str, meta_key: str, meta_value: str):
    """Create PostgreSQL upsert statement for a user metadata value.

    Replaces the value when the user already has one for ``meta_key``.
    """
    return (
        insert(UserMeta)
        .values(
            [
                {
                    "guid": str(ULID()),
                    "user_guid": user_guid,
                    "meta_key": meta_key,
                    "meta_value": meta_value,
                }
            ]
        )
        .on_conflict_do_update(
            index_elements=["user_guid", "meta_key"],
            set_={"meta_value": meta_value},
        )
    )


def delete_user_meta_stmt(user_guid: str, meta_key: str):
    return delete(UserMeta).where(
        UserMeta.user_guid == user_guid, UserMeta.meta_key == meta_key
    )

