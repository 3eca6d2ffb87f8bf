import argparse
import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from org.stellarpress.federation.app.config import Settings
from org.stellarpress.federation.directory.database import DatabaseUserDirectory
from org.stellarpress.federation.directory.editor import (
    AuthorizationException,
    Editor,
    set_account_identifier,
)
from org.stellarpress.federation.model.users import new_user

logger = logging.getLogger(__name__)


async def addUser(
    directory: DatabaseUserDirectory,
    login: str,
    email: str,
    display_name: str,
    is_admin: bool,
) -> None:
    user = new_user(login, email, display_name=display_name, is_admin=is_admin)
    await directory.add_user(user)
    print(f"{user.login} created: {user.guid}")


async def setAccount(
    directory: DatabaseUserDirectory,
    settings: Settings,
    login: str,
    account_id: Optional[str],
    editor_login: Optional[str],
) -> None:
    user = await directory.get_user_by_login(login)
    if user is None:
        print(f"No such user: {login}")
        return

    if editor_login is None:
        # Operators act as an administrator unless they name an editor.
        editor = Editor(guid="cli", is_admin=True)
    else:
        editor_user = await directory.get_user_by_login(editor_login)
        if editor_user is None:
            print(f"No such user: {editor_login}")
            return
        editor = Editor(guid=editor_user.guid, is_admin=editor_user.is_admin)

    try:
        stored = await set_account_identifier(
            directory, editor, user.guid, account_id, settings.account_identifier_key
        )
    except AuthorizationException as e:
        print(f"Cannot update {login}: {e}")
        return

    if stored is None:
        print(f"{login} account identifier cleared")
    else:
        print(f"{login} account identifier set to {stored}")


async def showUser(
    directory: DatabaseUserDirectory, settings: Settings, login: str
) -> None:
    user = await directory.get_user_by_login(login)
    if user is None:
        print(f"No such user: {login}")
        return
    account_id = await directory.get_attribute(
        user.guid, settings.account_identifier_key
    )
    print(f"guid: {user.guid}")
    print(f"login: {user.login}")
    print(f"email: {user.email}")
    print(f"admin: {user.is_admin}")
    print(f"account identifier: {account_id or '-'}")
    print(f"stellar address: {user.login}*{settings.site_host}")


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="federationutil", description="Federation directory utilities"
    )

    parser.add_argument(
        "--pg-dsn",
        default=None,
        help="The database to use instead of PG_DSN.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add_user = subparsers.add_parser("add-user", help="Add a directory user")
    add_user.add_argument("login", help="The login of the user.")
    add_user.add_argument("email", help="The email address of the user.")
    add_user.add_argument("--display-name", default="", help="The display name.")
    add_user.add_argument(
        "--admin", action="store_true", help="Allow the user to edit other users."
    )

    set_account = subparsers.add_parser(
        "set-account", help="Set or clear the account identifier of a user"
    )
    set_account.add_argument("login", help="The login of the user to update.")
    set_account.add_argument(
        "account_id",
        nargs="?",
        default=None,
        help="The account identifier. Omit to clear it.",
    )
    set_account.add_argument(
        "--as",
        dest="editor",
        default=None,
        help="Perform the edit as this user instead of as an administrator.",
    )

    show_user = subparsers.add_parser("show-user", help="Show a directory user")
    show_user.add_argument("login", help="The login of the user.")

    args = vars(parser.parse_args())
    command = args.get("command", None)

    settings = Settings()  # type: ignore
    pg_dsn = args.get("pg_dsn") or str(settings.pg_dsn)

    engine = create_async_engine(pg_dsn)
    directory = DatabaseUserDirectory(
        async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    )
    try:
        if command == "add-user":
            await addUser(
                directory,
                args["login"],
                args["email"],
                args["display_name"],
                args["admin"],
            )
        elif command == "set-account":
            await setAccount(
                directory, settings, args["login"], args["account_id"], args["editor"]
            )
        elif command == "show-user":
            await showUser(directory, settings, args["login"])
    finally:
        await engine.dispose()


def main() -> None:
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
