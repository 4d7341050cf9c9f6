"""
Persistence adapters.

These modules encapsulate how data is stored on disk (JSON document for news,
CSV table for accounts). Services keep the in-memory copy authoritative and
call into here after every mutation.
"""
