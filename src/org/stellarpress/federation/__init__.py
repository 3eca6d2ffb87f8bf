"""
StellarPress Federation - Stellar Federation server for a site's users

This package resolves human-readable Stellar addresses of the form ``name*domain``
to Stellar account identifiers. A site's users register their account identifier
in the user directory; the service then answers federation queries for them.

Key Components:
- protocol: The federation protocol itself (address parsing, resolution, results)
- directory: The user directory contract, its PostgreSQL implementation and editor
- app: Web application layer with request handlers and server configuration
- model: Database models for users and their metadata
- resolve: Client-side resolution and verification of Stellar addresses

Protocol Overview:
1. Discovery:
   - The site serves /.well-known/stellar.toml
   - The document advertises the resolver URL in FEDERATION_SERVER

2. Resolution:
   - Clients query the resolver with type=name&q=name*domain
   - The resolver answers with the account identifier of exactly one user,
     or with a structured error
"""
