"""
Tests for OrderManagementClient against a mocked HTTP transport.

Verifies:
- Session acquisition exchanges the refresh token for an access token
- Order creation reports failures as results instead of raising
- Order details are flattened and errors raise UpstreamError
"""
import asyncio
import json
from decimal import Decimal
from uuid import uuid4

import httpx
import pytest

from app.clients.order_management_client import (
    OrderManagementClient,
    SessionError,
    UpstreamError,
)
from app.config import Settings
from app.services.identity_source import CustomerIdentity
from app.services.order_payload_builder import AddressResolver, OrderLineItem, OrderPayloadBuilder
from app.services.tour_data_loader import WarehouseInfo

API_URL = "https://orders.test/graphql"
AUTH_URL = "https://orders.test/auth"


def _settings(refresh_token="stored-refresh-token") -> Settings:
    return Settings(
        database_url="sqlite:///:memory:",
        order_api_url=API_URL,
        order_auth_url=AUTH_URL,
        order_api_refresh_token=refresh_token,
        order_api_timeout_seconds=5.0,
    )


def _sales_order():
    builder = OrderPayloadBuilder()
    address = AddressResolver().resolve(
        WarehouseInfo(id=uuid4(), name="Main", external_warehouse_id="WH-1")
    )
    line = OrderLineItem(
        product_id="A", quantity=1, unit_price=Decimal("10"), product_name="Product A", warehouse_id="WH-1"
    )
    identity = CustomerIdentity(first_name="Ada", last_name="Lovelace", email="ada@example.com")
    return builder.build_sales_order("SO-1", address, identity, [line])


def _purchase_order():
    line = OrderLineItem(
        product_id="A", quantity=6, unit_price=Decimal("0"), product_name="A", warehouse_id="WH-1"
    )
    return OrderPayloadBuilder().build_purchase_order("PO-1", "WH-1", [line])


class MockApi:
    """Routes auth and GraphQL requests to canned responses."""

    def __init__(self, graphql_response=None, auth_response=None):
        self.graphql_response = graphql_response or httpx.Response(200, json={"data": {}})
        self.auth_response = auth_response or httpx.Response(200, json={"access_token": "access-123"})
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == f"{AUTH_URL}/refresh":
            return self.auth_response
        return self.graphql_response


def _run(api: MockApi, coro_factory, refresh_token="stored-refresh-token"):
    async def _go():
        async with OrderManagementClient(
            settings=_settings(refresh_token), transport=httpx.MockTransport(api)
        ) as client:
            return await coro_factory(client)

    return asyncio.run(_go())


async def _with_session(client, call):
    await client.acquire_session()
    return await call(client)


class TestAcquireSession:
    def test_exchanges_refresh_token(self):
        api = MockApi()

        token = _run(api, lambda client: client.acquire_session())

        assert token == "access-123"
        body = json.loads(api.requests[0].content)
        assert body == {"refresh_token": "stored-refresh-token"}

    def test_missing_refresh_token(self):
        with pytest.raises(SessionError) as exc_info:
            _run(MockApi(), lambda client: client.acquire_session(), refresh_token="")

        assert "ORDER_API_REFRESH_TOKEN" in str(exc_info.value)

    def test_rejected_refresh_token(self):
        api = MockApi(auth_response=httpx.Response(401, json={"error": "invalid"}))

        with pytest.raises(SessionError) as exc_info:
            _run(api, lambda client: client.acquire_session())

        assert "HTTP 401" in str(exc_info.value)

    def test_response_without_token(self):
        api = MockApi(auth_response=httpx.Response(200, json={"expires_in": 3600}))

        with pytest.raises(SessionError):
            _run(api, lambda client: client.acquire_session())


class TestCreateOrders:
    def test_sales_order_success(self):
        api = MockApi(graphql_response=httpx.Response(200, json={
            "data": {"order_create": {"request_id": "r1", "order": {"id": "T3JkZXI6MQ==", "order_number": "SO-1"}}}
        }))

        result = _run(api, lambda client: _with_session(client, lambda c: c.create_sales_order(_sales_order())))

        assert result.success is True
        assert result.order["id"] == "T3JkZXI6MQ=="
        graphql_request = api.requests[-1]
        assert graphql_request.headers["Authorization"] == "Bearer access-123"
        variables = json.loads(graphql_request.content)["variables"]
        assert variables["data"]["order_number"] == "SO-1"
        assert variables["data"]["total_price"] == "10.00"

    def test_purchase_order_success(self):
        api = MockApi(graphql_response=httpx.Response(200, json={
            "data": {"purchase_order_create": {"purchase_order": {"id": "po-1", "po_number": "PO-1"}}}
        }))

        result = _run(api, lambda client: _with_session(client, lambda c: c.create_purchase_order(_purchase_order())))

        assert result.success is True
        assert result.order_number == "PO-1"

    def test_graphql_error_becomes_failed_result(self):
        api = MockApi(graphql_response=httpx.Response(200, json={
            "data": {"order_create": None},
            "errors": [{"message": "SKU A does not exist"}],
        }))

        result = _run(api, lambda client: _with_session(client, lambda c: c.create_sales_order(_sales_order())))

        assert result.success is False
        assert result.error == "SKU A does not exist"

    def test_missing_order_without_errors(self):
        result = _run(MockApi(), lambda client: _with_session(client, lambda c: c.create_sales_order(_sales_order())))

        assert result.success is False
        assert result.error == "Unknown error"

    def test_http_error_becomes_failed_result(self):
        api = MockApi(graphql_response=httpx.Response(500, text="upstream exploded"))

        result = _run(api, lambda client: _with_session(client, lambda c: c.create_sales_order(_sales_order())))

        assert result.success is False
        assert "500" in result.error
        assert "upstream exploded" in result.error

    def test_without_session_fails(self):
        api = MockApi()

        result = _run(api, lambda client: client.create_sales_order(_sales_order()))

        assert result.success is False
        assert "acquire_session" in result.error
        assert api.requests == []


class TestFetchOrderDetails:
    def test_flattens_line_items(self):
        api = MockApi(graphql_response=httpx.Response(200, json={"data": {"order": {"data": {
            "id": "o1",
            "order_number": "BULK-DEMO-1",
            "line_items": {"edges": [{"node": {"sku": "A", "quantity": 2}}, {"node": {"sku": "B", "quantity": 1}}]},
        }}}}))

        order = _run(api, lambda client: _with_session(client, lambda c: c.fetch_order_details("o1")))

        assert order["order_number"] == "BULK-DEMO-1"
        assert order["line_items"] == [{"sku": "A", "quantity": 2}, {"sku": "B", "quantity": 1}]

    def test_graphql_error_raises(self):
        api = MockApi(graphql_response=httpx.Response(200, json={"errors": [{"message": "not allowed"}]}))

        with pytest.raises(UpstreamError) as exc_info:
            _run(api, lambda client: _with_session(client, lambda c: c.fetch_order_details("o1")))

        assert str(exc_info.value) == "not allowed"

    def test_missing_order_raises(self):
        api = MockApi(graphql_response=httpx.Response(200, json={"data": {"order": None}}))

        with pytest.raises(UpstreamError):
            _run(api, lambda client: _with_session(client, lambda c: c.fetch_order_details("o404")))
