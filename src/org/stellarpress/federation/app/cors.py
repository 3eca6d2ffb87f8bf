from typing import Dict

from org.stellarpress.federation.protocol.discovery import STELLAR_TOML_PATH


def is_public_path(path: str, federation_path: str) -> bool:
    return path == STELLAR_TOML_PATH or path == "/" + federation_path.lstrip("/")


def get_cors_headers(path: str, federation_path: str) -> Dict[str, str]:
    """Return CORS headers for a response to ``path``.

    Federation endpoints are readable from any origin. Internal endpoints get no
    CORS headers at all.
    """
    if not is_public_path(path, federation_path):
        return {}
    return {"Access-Control-Allow-Origin": "*"}
