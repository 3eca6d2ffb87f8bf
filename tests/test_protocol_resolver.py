"""
Unit tests for the federation resolver in org.stellarpress.federation.protocol.resolver

Tests cover parameter validation, address parsing, the domain-authority check,
exact-match filtering of directory search hits and ambiguity handling, using an
in-memory user directory.
"""

import pytest
from unittest.mock import AsyncMock

from org.stellarpress.federation.protocol.resolver import (
    FederationResolver,
    domain_is_served,
    is_exact_match,
)
from org.stellarpress.federation.protocol.result import (
    ErrorCode,
    FederationError,
    FederationSuccess,
)
from org.stellarpress.federation.directory.base import DirectoryUser
from tests.test_helpers import ALICE_ACCOUNT, InMemoryUserDirectory


@pytest.fixture
def resolver(directory):
    return FederationResolver("example.com", directory)


class TestRequestValidation:
    """Test suite for the type/q parameter checks."""

    @pytest.mark.parametrize(
        "query_type,q",
        [(None, "alice*example.com"), ("name", None), (None, None)],
    )
    async def test_missing_parameters(self, resolver, query_type, q):
        result = await resolver.resolve(query_type, q)
        assert result == FederationError(
            code=ErrorCode.invalid_request,
            message="both q and type parameter are required",
        )
        assert result.status == 400

    @pytest.mark.parametrize("query_type", ["email", "id", "txid", "forward", "", "Name"])
    async def test_unsupported_type(self, resolver, query_type):
        result = await resolver.resolve(query_type, "alice*example.com")
        assert result.code == ErrorCode.not_implemented
        assert result.message == (
            "This operation is not implemented. Only type=name is supported."
        )
        assert result.status == 501

    async def test_unsupported_type_ignores_query(self, resolver):
        result = await resolver.resolve("id", "not an address")
        assert result.code == ErrorCode.not_implemented

    @pytest.mark.parametrize(
        "q", ["aliceexample.com", "alice**example.com", "*example.com", "alice*", ""]
    )
    async def test_malformed_address(self, resolver, directory, q):
        result = await resolver.resolve("name", q)
        assert result == FederationError(
            code=ErrorCode.invalid_request,
            message="Please use an address of the form name*domain.com",
        )
        assert result.status == 400
        assert directory.search_terms == []


class TestDomainAuthority:
    """Test suite for the domain-authority check."""

    async def test_foreign_domain_is_not_found(self, resolver, directory):
        result = await resolver.resolve("name", "alice*other.com")
        assert result == FederationError(
            code=ErrorCode.not_found, message="Account not found"
        )
        assert result.status == 404
        assert directory.search_terms == []

    async def test_longer_alias_of_site_domain(self, directory):
        resolver = FederationResolver("www.example.com", directory)
        result = await resolver.resolve("name", "alice*example.com")
        assert isinstance(result, FederationSuccess)

    async def test_subdomain_of_site_is_not_served(self, resolver):
        result = await resolver.resolve("name", "alice*www.example.com")
        assert result.code == ErrorCode.not_found

    async def test_site_host_is_lowercased(self, directory):
        resolver = FederationResolver("EXAMPLE.com", directory)
        result = await resolver.resolve("name", "alice*example.com")
        assert isinstance(result, FederationSuccess)

    def test_domain_is_served(self):
        assert domain_is_served("example.com", "example.com")
        assert domain_is_served("example.com", "blog.example.com")
        assert not domain_is_served("example.org", "example.com")


class TestLookup:
    """Test suite for directory lookup."""

    async def test_resolves_login(self, resolver):
        result = await resolver.resolve("name", "alice*example.com")
        assert result == FederationSuccess(
            account_id=ALICE_ACCOUNT, stellar_address="alice*example.com"
        )
        assert result.status == 200
        assert result.body() == {
            "account_id": ALICE_ACCOUNT,
            "stellar_address": "alice*example.com",
        }

    async def test_resolves_email(self, resolver):
        result = await resolver.resolve("name", "alice@mail.example.org*example.com")
        assert result.account_id == ALICE_ACCOUNT
        assert result.stellar_address == "alice@mail.example.org*example.com"

    @pytest.mark.parametrize(
        "q", ["Alice*Example.com", "alice*example.com", "ALICE*EXAMPLE.COM"]
    )
    async def test_case_insensitive(self, resolver, q):
        result = await resolver.resolve("name", q)
        assert result == FederationSuccess(
            account_id=ALICE_ACCOUNT, stellar_address="alice*example.com"
        )

    async def test_search_uses_lowercased_name(self, resolver, directory):
        await resolver.resolve("name", "ALICE*example.com")
        assert directory.search_terms == ["alice"]

    async def test_unknown_name(self, resolver):
        result = await resolver.resolve("name", "bob*example.com")
        assert result.code == ErrorCode.not_found

    async def test_substring_hit_is_not_a_match(self, resolver, directory):
        directory.add("alicia", "alicia@example.org", "GALICIA")
        result = await resolver.resolve("name", "alic*example.com")
        assert result.code == ErrorCode.not_found

    async def test_user_without_account_identifier(self, resolver, directory):
        directory.add("bob", "bob@example.org")
        result = await resolver.resolve("name", "bob*example.com")
        assert result.code == ErrorCode.not_found

    async def test_empty_account_identifier_is_ignored(self, resolver, directory):
        directory.add("carol", "carol@example.org", "")
        result = await resolver.resolve("name", "carol*example.com")
        assert result.code == ErrorCode.not_found

    async def test_ambiguous_match_fails_closed(self, resolver, directory):
        """A login and another user's email colliding must never pick one."""
        directory.add("dave", "dave@example.org", "GDAVE")
        directory.add("dave2", "dave", "GDAVEEMAIL")
        result = await resolver.resolve("name", "dave*example.com")
        assert result == FederationError(
            code=ErrorCode.not_found, message="Account not found"
        )

    async def test_ambiguity_only_counts_users_with_accounts(self, resolver, directory):
        directory.add("erin", "erin@example.org", "GERIN")
        directory.add("erin2", "erin")
        result = await resolver.resolve("name", "erin*example.com")
        assert result.account_id == "GERIN"

    async def test_duplicate_search_hits_count_once(self):
        user = DirectoryUser(guid="01J0000000000000000000000", login="frank", email="f@x.org")
        directory = AsyncMock()
        directory.search_users.return_value = [user, user]
        directory.get_attribute.return_value = "GFRANK"
        resolver = FederationResolver("example.com", directory)

        result = await resolver.resolve("name", "frank*example.com")

        assert result.account_id == "GFRANK"
        directory.get_attribute.assert_awaited_once_with(user.guid, "stellar_address")

    async def test_custom_account_identifier_key(self):
        directory = InMemoryUserDirectory()
        user = directory.add("grace", "grace@example.org")
        await directory.set_attribute(user.guid, "stellar_account", "GGRACE")
        resolver = FederationResolver("example.com", directory, "stellar_account")

        result = await resolver.resolve("name", "grace*example.com")

        assert result.account_id == "GGRACE"

    async def test_repeated_query_is_identical(self, resolver):
        first = await resolver.resolve("name", "alice*example.com")
        second = await resolver.resolve("name", "alice*example.com")
        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    async def test_directory_fault_propagates(self):
        directory = AsyncMock()
        directory.search_users.side_effect = ConnectionError("directory down")
        resolver = FederationResolver("example.com", directory)

        with pytest.raises(ConnectionError):
            await resolver.resolve("name", "alice*example.com")


class TestExactMatch:
    """Test suite for is_exact_match."""

    def test_login_match(self):
        user = DirectoryUser(guid="1", login="Alice", email="a@example.org")
        assert is_exact_match(user, "alice")

    def test_email_match(self):
        user = DirectoryUser(guid="1", login="alice", email="Alice@Example.org")
        assert is_exact_match(user, "alice@example.org")

    def test_no_match(self):
        user = DirectoryUser(guid="1", login="alice", email="alice@example.org")
        assert not is_exact_match(user, "alic")
