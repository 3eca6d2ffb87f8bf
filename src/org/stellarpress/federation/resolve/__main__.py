from typing import List, Optional
import argparse
import aiohttp
import asyncio
import logging

logger = logging.getLogger(__name__)

from org.stellarpress.federation.resolve.address import (
    resolve_address,
    site_address,
    verify_address,
)


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="resolve", description="Resolve Stellar addresses"
    )
    parser.add_argument(
        "address", nargs="+", help="The address(es) to resolve, as name*domain."
    )
    parser.add_argument(
        "--site",
        default=None,
        help="Treat each address as a bare name on this site hostname.",
    )
    parser.add_argument(
        "--expect",
        default=None,
        help="Verify that every address resolves to this account identifier.",
    )

    args = vars(parser.parse_args())

    addresses: List[str] = args.get("address", [])
    site: Optional[str] = args.get("site")
    expected: Optional[str] = args.get("expect")

    async with aiohttp.ClientSession() as session:
        for address in addresses:
            if site is not None:
                address = site_address(address, site)
            try:
                if expected is not None:
                    verification = await verify_address(session, address, expected)
                    print(
                        f"{verification.status.value} {address} "
                        f"{verification.account_id or ''}".rstrip()
                    )
                else:
                    record = await resolve_address(session, address)
                    print(f"resolved_address {address} {record}")
            except Exception:
                logging.exception("Exception resolving address %s", address)


def main() -> None:
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
