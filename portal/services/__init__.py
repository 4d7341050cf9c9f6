"""
High-level use cases for the portal API.

Each service module owns one kind of state (news partitions, accounts,
sessions) and is the only code allowed to mutate it.

Routers (FastAPI endpoints) should call these services instead of touching
the JSON document, the CSV table or the session database directly.
"""
