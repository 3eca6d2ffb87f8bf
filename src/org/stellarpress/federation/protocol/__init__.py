"""
Stellar Federation Protocol

This package implements the server side of the Stellar Federation protocol
independently of the web layer, so it can be exercised without HTTP.

Key Components:
- address.py: Parsing of ``name*domain`` Stellar addresses
- result.py: Success and error results with their HTTP status codes
- resolver.py: The ``type=name`` resolution state machine
- discovery.py: ``stellar.toml`` URL construction and parsing

Resolution Flow:
1. Require both ``type`` and ``q``, and only accept ``type=name``
2. Parse ``q`` as a Stellar address and lower-case it
3. Check that the address domain is served by this site
4. Search the user directory and answer only for a single unambiguous match
"""
