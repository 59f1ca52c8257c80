"""
Library Catalog API Package

A GraphQL API for a book/author catalog.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and configuration
- models/: SQLAlchemy ORM models (Author, Book, User)
- schemas/: Pydantic input validation schemas
- services/: Business logic (catalog, security, events, rate limiting)
- graphql/: Strawberry schema, context and resolvers
"""

__version__ = "0.1.0"
