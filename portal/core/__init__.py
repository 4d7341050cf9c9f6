"""
Core utilities shared across the portal API.

This package hosts configuration, logging, error types, password hashing and
request throttling. Routers and services depend on these primitives instead
of reading os.environ or wiring logging themselves.
"""
