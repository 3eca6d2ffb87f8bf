"""
Stellar Address Resolution

This package resolves Stellar addresses against remote federation servers. It is
the client counterpart of the resolver served by this service and is used to check
that a site's users resolve to the accounts they registered.

Key Components:
- address.py: Discovery, query and verification functions
- __main__.py: CLI interface for resolution

The resolution flow follows the Stellar Federation protocol:
1. Parse the address into name and domain
2. Fetch https://{domain}/.well-known/stellar.toml and read FEDERATION_SERVER
3. Query FEDERATION_SERVER with type=name&q={address}
4. Return the account identifier from a 200 answer
"""
