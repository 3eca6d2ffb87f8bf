"""
Stellar Federation name resolution.

``FederationResolver`` implements the ``type=name`` query of the Stellar
Federation protocol as a single pass through four stages:

1. Validate that both ``type`` and ``q`` were given and that ``type`` is
   ``name``.
2. Parse ``q`` as a ``name*domain`` Stellar address.
3. Refuse addresses whose domain is not a suffix of the site host, so the
   resolver never vouches for domains it does not serve.
4. Search the user directory for ``name``, keep users whose login or email is
   exactly ``name`` and who have an account identifier, and answer only when
   exactly one user remains.

Protocol errors are returned as ``FederationError`` values. Faults raised by
the user directory are not caught here and propagate to the caller.
"""

import logging
from typing import Dict, Optional

from org.stellarpress.federation.directory.base import DirectoryUser, UserDirectory
from org.stellarpress.federation.protocol.address import (
    StellarAddress,
    parse_stellar_address,
)
from org.stellarpress.federation.protocol.result import (
    FederationError,
    FederationResult,
    FederationSuccess,
)

logger = logging.getLogger(__name__)

NAME_QUERY_TYPE = "name"


def is_exact_match(user: DirectoryUser, name: str) -> bool:
    """Check if a search hit's login or email is exactly ``name``.

    ``name`` is already lower-case; stored values are compared lower-cased.
    """
    return user.login.lower() == name or user.email.lower() == name


def domain_is_served(domain: str, site_host: str) -> bool:
    """Check if ``domain`` is a suffix of the site host."""
    return site_host.endswith(domain)


class FederationResolver:
    """
    Stateless resolver for Stellar Federation name queries.

    Constructed once at startup and shared by all requests.

    Args:
        site_host: Hostname of the site this resolver answers for
        directory: User directory to search
        account_identifier_key: Directory attribute holding the account identifier
    """

    def __init__(
        self,
        site_host: str,
        directory: UserDirectory,
        account_identifier_key: str = "stellar_address",
    ) -> None:
        self.site_host = site_host.lower()
        self.directory = directory
        self.account_identifier_key = account_identifier_key

    async def resolve(
        self, query_type: Optional[str], q: Optional[str]
    ) -> FederationResult:
        """
        Resolve a federation query.

        Args:
            query_type: Value of the ``type`` parameter, None if absent
            q: Value of the ``q`` parameter, None if absent

        Returns:
            FederationSuccess or FederationError
        """
        if query_type is None or q is None:
            return FederationError.missing_parameters()
        if query_type != NAME_QUERY_TYPE:
            return FederationError.not_implemented()

        address = parse_stellar_address(q)
        if address is None:
            return FederationError.invalid_address()

        if not domain_is_served(address.domain, self.site_host):
            logger.debug(
                "Refusing %s: domain is not served by %s", address, self.site_host
            )
            return FederationError.not_found()

        return await self.lookup(address)

    async def lookup(self, address: StellarAddress) -> FederationResult:
        """Resolve an already validated address against the user directory."""
        candidates = await self.directory.search_users(address.name)

        matches: Dict[str, str] = {}
        for user in candidates:
            if user.guid in matches or not is_exact_match(user, address.name):
                continue
            account_id = await self.directory.get_attribute(
                user.guid, self.account_identifier_key
            )
            if account_id:
                matches[user.guid] = account_id

        if len(matches) != 1:
            if len(matches) > 1:
                logger.warning(
                    "Ambiguous address %s matches %d users: %s",
                    address,
                    len(matches),
                    ", ".join(sorted(matches)),
                )
            return FederationError.not_found()

        account_id = next(iter(matches.values()))
        return FederationSuccess(account_id=account_id, stellar_address=str(address))

