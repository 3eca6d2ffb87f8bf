"""Stellar address resolution against remote federation servers.

Discovers a domain's federation server from its stellar.toml and queries it for
an address, following the client side of the Stellar Federation protocol.
"""

from enum import Enum
from typing import Optional
from aiohttp import ClientSession
from pydantic import BaseModel, ValidationError
import sentry_sdk

from org.stellarpress.federation.protocol.address import (
    ADDRESS_SEPARATOR,
    parse_stellar_address,
)
from org.stellarpress.federation.protocol.discovery import (
    STELLAR_TOML_PATH,
    parse_federation_server,
)


class FederationRecord(BaseModel):
    """Successful federation answer.

    Contains the account identifier a Stellar address resolves to.
    """

    account_id: str
    stellar_address: str


class VerificationStatus(str, Enum):
    """Outcome of verifying that an address resolves to an expected account."""

    ok = "ok"
    mismatch = "mismatch"
    unresolved = "unresolved"


class Verification(BaseModel):
    status: VerificationStatus
    stellar_address: str
    account_id: Optional[str] = None


async def fetch_federation_server(
    session: ClientSession, domain: str
) -> Optional[str]:
    """Discover the federation server of a domain.

    Fetches https://{domain}/.well-known/stellar.toml and reads FEDERATION_SERVER.

    Args:
        session: HTTP client session
        domain: Domain part of a Stellar address

    Returns:
        Federation server URL if advertised, None if discovery fails
    """
    try:
        async with session.get(f"https://{domain}{STELLAR_TOML_PATH}") as resp:
            if resp.status != 200:
                return None
            body = await resp.text()
    except Exception as e:
        sentry_sdk.capture_exception(e)
        return None
    return parse_federation_server(body)


async def query_federation_server(
    session: ClientSession, federation_server: str, address: str
) -> Optional[FederationRecord]:
    """Ask a federation server for the account of an address.

    Args:
        session: HTTP client session
        federation_server: URL of the federation server
        address: Stellar address in ``name*domain`` form

    Returns:
        FederationRecord on a 200 answer, None otherwise
    """
    try:
        async with session.get(
            federation_server, params={"type": "name", "q": address}
        ) as resp:
            if resp.status != 200:
                return None
            body = await resp.json(content_type=None)
    except Exception as e:
        sentry_sdk.capture_exception(e)
        return None
    try:
        return FederationRecord.model_validate(body)
    except ValidationError:
        return None


async def resolve_address(
    session: ClientSession, address: str
) -> Optional[FederationRecord]:
    """Resolve a Stellar address to its account.

    Parses the address, discovers the federation server of its domain and
    queries it.

    Args:
        session: HTTP client session
        address: Stellar address in ``name*domain`` form

    Returns:
        FederationRecord if resolution succeeds, None if it fails at any step
    """
    parsed = parse_stellar_address(address.strip())
    if parsed is None:
        return None

    federation_server = await fetch_federation_server(session, parsed.domain)
    if federation_server is None:
        return None

    return await query_federation_server(session, federation_server, str(parsed))


def site_address(name: str, hostname: str) -> str:
    """Build the Stellar address of a user on a site.

    A leading ``www.`` is dropped from the hostname.
    """
    return f"{name}{ADDRESS_SEPARATOR}{hostname.lower().removeprefix('www.')}"


async def verify_address(
    session: ClientSession, address: str, expected_account_id: str
) -> Verification:
    """Check that a Stellar address resolves to the expected account.

    Args:
        session: HTTP client session
        address: Stellar address in ``name*domain`` form
        expected_account_id: Account identifier the address should resolve to

    Returns:
        Verification with status ok, mismatch or unresolved
    """
    record = await resolve_address(session, address)
    if record is None:
        return Verification(status=VerificationStatus.unresolved, stellar_address=address)
    if record.account_id == expected_account_id:
        status = VerificationStatus.ok
    else:
        status = VerificationStatus.mismatch
    return Verification(
        status=status, stellar_address=address, account_id=record.account_id
    )
