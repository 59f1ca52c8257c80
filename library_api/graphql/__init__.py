"""
GraphQL Package

This package provides the catalog's GraphQL API using Strawberry GraphQL.

Features:
- Queries: authorCount, bookCount, allBooks, allAuthors, me
- Mutations: addBook, editAuthor, createUser, login
- Subscriptions: bookAdded (over WebSocket)
- Authentication via JWT bearer token in context

Usage:
    The GraphQL endpoint is available at /graphql, with an interactive
    IDE when GRAPHQL_IDE is not "none".

Example Query:
    query {
        allBooks(genre: "refactoring") {
            title
            author { name bookCount }
        }
    }
"""

import logging

import strawberry
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.schema.config import StrawberryConfig
from strawberry.types import ExecutionContext

from library_api.config import get_settings
from library_api.graphql.context import get_context
from library_api.graphql.errors import AuthenticationError, NotFoundError, ValidationError
from library_api.graphql.mutations import Mutation
from library_api.graphql.queries import Query
from library_api.graphql.subscriptions import Subscription
from library_api.graphql.types import SCALAR_MAP

logger = logging.getLogger(__name__)

# Errors raised on purpose by resolvers; they reach the client with a code
EXPECTED_ERRORS = (AuthenticationError, ValidationError, NotFoundError)


class CatalogSchema(strawberry.Schema):
    """
    Schema that keeps client mistakes out of the error log.

    Strawberry logs every resolver error at ERROR level with a traceback.
    Errors carrying a client-facing code are logged at INFO instead, with
    their message, path and code only.
    """

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        unexpected = []

        for error in errors:
            if isinstance(error.original_error, EXPECTED_ERRORS):
                code = error.original_error.extensions["code"]
                path = ".".join(str(part) for part in error.path or [])
                logger.info(f"{code} at {path or '<root>'}: {error.message}")
            else:
                unexpected.append(error)

        if unexpected:
            super().process_errors(unexpected, execution_context)


schema = CatalogSchema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
    config=StrawberryConfig(scalar_map=SCALAR_MAP),
)


def create_graphql_router() -> GraphQLRouter:
    """
    Create the GraphQL router for FastAPI.

    Serves queries and mutations over HTTP and subscriptions over
    WebSocket on the same path.

    Returns:
        GraphQLRouter configured with schema and context
    """
    settings = get_settings()
    graphql_ide = None if settings.graphql_ide == "none" else settings.graphql_ide

    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide=graphql_ide,
    )


__all__ = ["schema", "create_graphql_router"]
