"""
Test Suite for the Library Catalog API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_config.py: Settings validators
- test_security.py: Password hashing and tokens
- test_catalog.py: Catalog service functions
- test_events.py: Broadcaster delivery and overflow policies
- test_graphql.py: Queries, mutations and the authentication gate over HTTP
- test_subscriptions.py: bookAdded over WebSocket

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_graphql.py

    # Run with verbose output
    pytest -v
"""
