"""
Database Models

This package defines the database models backing the user directory using
SQLAlchemy ORM.

Key Models:
- base.py: Base SQLAlchemy model with common type definitions
- users.py: Directory users and their metadata, including account identifiers
- health.py: Fault gauge used by the readiness probe

A user owns any number of metadata rows, at most one per ``meta_key``. The
Stellar account identifier is stored under the ``stellar_address`` key.
"""
