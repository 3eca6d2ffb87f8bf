"""
Unit tests for stellar.toml helpers and federation results.
"""

import pytest

from org.stellarpress.federation.protocol.discovery import (
    federation_server_url,
    parse_federation_server,
)
from org.stellarpress.federation.protocol.result import (
    ErrorCode,
    FederationError,
    FederationSuccess,
)


class TestFederationServerUrl:
    def test_root_site(self):
        assert (
            federation_server_url("https://example.com", ".federation")
            == "https://example.com/.federation"
        )

    def test_http_site_is_upgraded_to_https(self):
        assert (
            federation_server_url("http://example.com/", ".federation")
            == "https://example.com/.federation"
        )

    def test_site_in_subdirectory(self):
        assert (
            federation_server_url("https://example.com/blog/", "/.federation")
            == "https://example.com/blog/.federation"
        )

    def test_port_is_kept(self):
        assert (
            federation_server_url("https://example.com:8443", ".federation")
            == "https://example.com:8443/.federation"
        )


class TestParseFederationServer:
    def test_parse_document(self):
        document = (
            "# StellarPress Federation\n"
            'FEDERATION_SERVER = "https://example.com/.federation"\n'
        )
        assert parse_federation_server(document) == "https://example.com/.federation"

    def test_missing_key(self):
        assert parse_federation_server('VERSION = "2.0.0"\n') is None

    def test_invalid_toml(self):
        assert parse_federation_server("<html>not toml</html>") is None

    def test_non_string_value(self):
        assert parse_federation_server("FEDERATION_SERVER = 42\n") is None


class TestResults:
    @pytest.mark.parametrize(
        "error,status",
        [
            (FederationError.missing_parameters(), 400),
            (FederationError.invalid_address(), 400),
            (FederationError.not_found(), 404),
            (FederationError.not_implemented(), 501),
        ],
    )
    def test_error_status(self, error, status):
        assert error.status == status

    def test_error_body_uses_plain_code(self):
        assert FederationError.not_found().body() == {
            "code": "not_found",
            "message": "Account not found",
        }

    def test_invalid_address_shares_invalid_request_code(self):
        assert FederationError.invalid_address().code == ErrorCode.invalid_request

    def test_success_body(self):
        result = FederationSuccess(account_id="GABC", stellar_address="a*example.com")
        assert result.status == 200
        assert result.body() == {"account_id": "GABC", "stellar_address": "a*example.com"}
