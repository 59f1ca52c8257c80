"""
GraphQL Subscription Resolvers

Live streams delivered over the /graphql WebSocket endpoint
(graphql-transport-ws and graphql-ws protocols, handled by Strawberry).
"""

from typing import AsyncGenerator

import strawberry
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.graphql.types.book import BookType
from library_api.services.events import EventType, get_broadcaster


@strawberry.type
class Subscription:
    """GraphQL Subscription type."""

    @strawberry.subscription(description="Books as they are added to the catalog")
    async def book_added(
        self,
        info: Info[GraphQLContext, None],
    ) -> AsyncGenerator[BookType, None]:
        """
        Stream every book added after the subscription starts.

        No past books are replayed.
        """
        async for book in get_broadcaster().subscribe(EventType.BOOK_ADDED):
            yield book
