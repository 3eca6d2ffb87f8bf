"""stellar.toml discovery document helpers.

Builds the absolute resolver URL advertised in ``FEDERATION_SERVER`` and reads
it back out of a fetched document.
"""

import tomllib
from typing import Optional
from urllib.parse import urlparse, urlunparse

STELLAR_TOML_PATH = "/.well-known/stellar.toml"
STELLAR_TOML_CONTENT_TYPE = "text/toml"
FEDERATION_SERVER_KEY = "FEDERATION_SERVER"


def federation_server_url(site_url: str, federation_path: str) -> str:
    """Return the https URL of the resolver for a site.

    The resolver path is appended to the site path and the scheme is always
    ``https``, whatever scheme the site URL was configured with.
    """
    parsed = urlparse(site_url)
    path = parsed.path.rstrip("/") + "/" + federation_path.lstrip("/")
    return urlunparse(("https", parsed.netloc, path, "", "", ""))


def parse_federation_server(document: str) -> Optional[str]:
    """Extract ``FEDERATION_SERVER`` from a stellar.toml document.

    Returns:
        The server URL, or None if the document is not valid TOML or does not
        advertise a federation server
    """
    try:
        data = tomllib.loads(document)
    except tomllib.TOMLDecodeError:
        return None
    value = data.get(FEDERATION_SERVER_KEY)
    if isinstance(value, str) and value:
        return value
    return None
