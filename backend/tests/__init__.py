"""
Pytest suite for the storefront backend.

- unit: signature protocol, payment request builder, ITN processing, stores
- api: FastAPI app over in-memory SQLite with a recording mailer
"""
