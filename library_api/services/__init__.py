"""
Services Package

This package contains business logic services that are:
- Separate from the GraphQL layer
- Reusable across resolvers and scripts
- Easier to test in isolation

Current services:
- catalog.py: Author/book/user reads and writes
- events.py: In-process publish/subscribe for subscriptions
- rate_limiter.py: Rate limiting with slowapi
- security.py: Password hashing and JWT utilities
"""
