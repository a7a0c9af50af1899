"""
Test suite for the sqlbrowse gateway.

- unit: components against an in-memory pool and aiohttp's test server
- integration: the full gateway against a live PostgreSQL instance
"""
