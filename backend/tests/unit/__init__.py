"""
Unit Tests

Unit tests run without external services. The database is an in-memory
SQLite instance and every LLM call is mocked.
"""
