"""
Account identifier editor.

The only write path into the account identifier attribute. A user may edit
their own account identifier and administrators may edit anyone's; every other
caller is rejected before the directory is touched.
"""

from dataclasses import dataclass
import logging
from typing import Optional

from org.stellarpress.federation.directory.base import UserDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Editor:
    """
    Identity of the caller performing an edit.

    Attributes:
        guid: The guid of the editing user
        is_admin: Whether the editing user may edit other users
    """

    guid: str
    is_admin: bool = False

    def can_edit(self, user_guid: str) -> bool:
        return self.is_admin or self.guid == user_guid


class AuthorizationException(Exception):
    """
    Exception raised when an edit is not allowed.
    """

    @staticmethod
    def permission_denied() -> "AuthorizationException":
        """The editor may not edit the target user."""
        return AuthorizationException(
            "error-directory-1000 Permission denied"
        )

    @staticmethod
    def user_not_found() -> "AuthorizationException":
        """The target user does not exist in the directory."""
        return AuthorizationException("error-directory-1001 User not found")


async def set_account_identifier(
    directory: UserDirectory,
    editor: Editor,
    user_guid: str,
    value: Optional[str],
    account_identifier_key: str = "stellar_address",
) -> Optional[str]:
    """
    Set or clear the account identifier of a user.

    Args:
        directory: User directory to write to
        editor: Identity of the caller
        user_guid: The user whose account identifier is edited
        value: New account identifier; None or blank clears it
        account_identifier_key: Directory attribute holding the account identifier

    Returns:
        The stored value, or None when the attribute was cleared

    Raises:
        AuthorizationException: If the editor may not edit the user or the user
            does not exist
    """
    if not editor.can_edit(user_guid):
        logger.warning(
            "Editor %s denied editing account identifier of %s", editor.guid, user_guid
        )
        raise AuthorizationException.permission_denied()

    if await directory.get_user(user_guid) is None:
        raise AuthorizationException.user_not_found()

    stored = (value or "").strip() or None
    await directory.set_attribute(user_guid, account_identifier_key, stored)
    return stored
