"""
Federation Application Layer

This package implements the web application layer of the federation service using
the aiohttp framework.

Key Components:
- cli.py: Entry point for running the application
- server.py: Application factory, middleware and route setup
- config.py: Configuration management using Pydantic settings
- handlers/: Request handlers for the federation and internal endpoints
- tasks.py: Background task draining the health gauge
- cors.py: CORS headers for the public federation endpoints
- metrics.py: Metrics client abstraction
- util/: Operator command line utilities
- templates/: Jinja2 template for stellar.toml

The application uses two middleware layers:
- Statsd middleware for request metrics
- Sentry middleware for error reporting

It provides the following endpoints:
- GET /.well-known/stellar.toml - discovery document
- GET /.federation - federation resolver
- GET /internal/alive, /internal/ready - liveness and readiness probes
"""
