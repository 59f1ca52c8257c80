"""
Subscription Tests

Tests for bookAdded over the /graphql WebSocket endpoint using the
graphql-transport-ws protocol:
- A subscriber opened before addBook receives exactly that book
- Closing the subscription unregisters it from the broadcaster
- An invalid bearer token is refused at connection time
"""

import time

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from library_api.services.events import EventType, get_broadcaster
from tests.test_graphql import ADD_BOOK_MUTATION, CLEAN_CODE, graphql_query

PROTOCOL = "graphql-transport-ws"

BOOK_ADDED_SUBSCRIPTION = """
subscription {
    bookAdded {
        title
        published
        genres
        author { name bookCount }
    }
}
"""


def wait_for_subscribers(count: int, timeout: float = 2.0) -> None:
    """Wait until the broadcaster has ``count`` bookAdded subscribers."""
    deadline = time.monotonic() + timeout
    while get_broadcaster().subscriber_count(EventType.BOOK_ADDED) != count:
        if time.monotonic() > deadline:
            raise AssertionError(f"expected {count} bookAdded subscribers")
        time.sleep(0.01)


def open_subscription(websocket) -> None:
    """Run the connection handshake and start a bookAdded subscription."""
    websocket.send_json({"type": "connection_init"})
    assert websocket.receive_json()["type"] == "connection_ack"

    websocket.send_json(
        {
            "id": "1",
            "type": "subscribe",
            "payload": {"query": BOOK_ADDED_SUBSCRIPTION},
        }
    )


class TestBookAddedSubscription:
    """Tests for the bookAdded subscription."""

    def test_receives_added_book(self, client: TestClient, token: str):
        with client.websocket_connect("/graphql", subprotocols=[PROTOCOL]) as websocket:
            open_subscription(websocket)
            wait_for_subscribers(1)

            result = graphql_query(client, ADD_BOOK_MUTATION, CLEAN_CODE, token=token)
            assert "errors" not in result

            message = websocket.receive_json()
            assert message["type"] == "next"
            assert message["id"] == "1"
            assert message["payload"]["data"]["bookAdded"] == {
                "title": "Clean Code",
                "published": 2008,
                "genres": ["programming"],
                "author": {"name": "Robert Martin", "bookCount": 1},
            }

            websocket.send_json({"id": "1", "type": "complete"})

        wait_for_subscribers(0)

    def test_failed_mutation_publishes_nothing(self, client: TestClient, token: str):
        with client.websocket_connect("/graphql", subprotocols=[PROTOCOL]) as websocket:
            open_subscription(websocket)
            wait_for_subscribers(1)

            # Rejected: author name too short
            graphql_query(
                client,
                ADD_BOOK_MUTATION,
                {**CLEAN_CODE, "author": "Bob"},
                token=token,
            )
            graphql_query(client, ADD_BOOK_MUTATION, CLEAN_CODE, token=token)

            # The first event delivered is the successful book
            message = websocket.receive_json()
            assert message["payload"]["data"]["bookAdded"]["author"]["name"] == "Robert Martin"

            websocket.send_json({"id": "1", "type": "complete"})

        wait_for_subscribers(0)

    def test_invalid_token_is_refused(self, client: TestClient):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect(
                "/graphql",
                subprotocols=[PROTOCOL],
                headers={"Authorization": "Bearer not-a-valid-token"},
            ) as websocket:
                websocket.receive_json()

        assert exc_info.value.code == 1008
