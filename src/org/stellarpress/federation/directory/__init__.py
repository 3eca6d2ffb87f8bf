"""
User Directory

The federation resolver reads users and their account identifiers from an
external user directory. This package defines that contract and its
PostgreSQL implementation.

Key Components:
- base.py: ``UserDirectory`` interface and the ``DirectoryUser`` search hit
- database.py: SQLAlchemy implementation over the ``users`` and ``user_meta`` tables
- editor.py: Authorization-gated writes of the account identifier attribute
"""
