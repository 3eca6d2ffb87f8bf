"""Stellar address parsing.

A Stellar address has the form ``name*domain``. Both parts are case-insensitive
and are lower-cased on parse.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict

ADDRESS_SEPARATOR = "*"


class StellarAddress(BaseModel):
    """Parsed Stellar address.

    Instances only come out of ``parse_stellar_address``, so ``name`` and
    ``domain`` are always non-empty and lower-case.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    domain: str

    def __str__(self) -> str:
        return f"{self.name}{ADDRESS_SEPARATOR}{self.domain}"


def parse_stellar_address(value: str) -> Optional[StellarAddress]:
    """Parse ``name*domain`` into a StellarAddress.

    Args:
        value: Raw address string as received

    Returns:
        StellarAddress if the value has exactly one separator with non-empty
        parts on both sides, None otherwise
    """
    parts = value.split(ADDRESS_SEPARATOR)
    if len(parts) != 2 or parts[0] == "" or parts[1] == "":
        return None
    return StellarAddress(name=parts[0].lower(), domain=parts[1].lower())
