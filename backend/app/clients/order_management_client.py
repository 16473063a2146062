"""
Order Management API Client

Thin async GraphQL client for creating sales and purchase orders in the
external order-management system.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx

from app.config import Settings, get_settings
from app.services.order_payload_builder import PurchaseOrderRequest, SalesOrderRequest

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Raised when no access token can be obtained."""
    pass


class UpstreamError(Exception):
    """Raised when the order-management API fails."""
    pass


ORDER_CREATE_MUTATION = """
mutation OrderCreate($data: CreateOrderInput!) {
  order_create(data: $data) {
    request_id
    order {
      id
      order_number
      fulfillment_status
    }
  }
}
"""

PURCHASE_ORDER_CREATE_MUTATION = """
mutation PurchaseOrderCreate($data: CreatePurchaseOrderInput!) {
  purchase_order_create(data: $data) {
    request_id
    purchase_order {
      id
      po_number
      fulfillment_status
    }
  }
}
"""

ORDER_DETAILS_QUERY = """
query OrderDetails($id: String!) {
  order(id: $id) {
    data {
      id
      order_number
      fulfillment_status
      line_items(first: 20) {
        edges {
          node {
            id
            sku
            quantity
            quantity_pending_fulfillment
            fulfillment_status
            product_name
          }
        }
      }
    }
  }
}
"""


@dataclass(frozen=True)
class OrderSubmissionResult:
    """Outcome of one order create call."""
    order_number: str
    success: bool
    order: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, order_number: str, error: str) -> "OrderSubmissionResult":
        return cls(order_number=order_number, success=False, error=error)


class OrderManagementClient:
    """
    Async HTTP client for the order-management GraphQL API.

    Usage:
        async with OrderManagementClient() as client:
            await client.acquire_session()
            result = await client.create_sales_order(request)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        refresh_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: API configuration. Defaults to environment settings.
            refresh_token: Stored refresh credential. Defaults to
                ORDER_API_REFRESH_TOKEN.
            transport: Optional httpx transport (used by tests)
        """
        self.settings = settings or get_settings()
        self.refresh_token = refresh_token or self.settings.order_api_refresh_token
        self.api_url = self.settings.order_api_url
        self.auth_url = self.settings.order_auth_url.rstrip("/")
        self._access_token: Optional[str] = None
        self._client = httpx.AsyncClient(
            timeout=self.settings.order_api_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "OrderManagementClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    async def acquire_session(self) -> str:
        """
        Exchange the stored refresh token for an access token.

        Returns:
            Access token

        Raises:
            SessionError: If no refresh token is stored or the exchange fails
        """
        if not self.refresh_token:
            raise SessionError(
                "A refresh token is required. Set ORDER_API_REFRESH_TOKEN to configure it."
            )

        try:
            response = await self._client.post(
                f"{self.auth_url}/refresh",
                json={"refresh_token": self.refresh_token},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise SessionError(
                f"Failed to get access token: HTTP {e.response.status_code}. "
                "Please check your refresh token."
            ) from e
        except (httpx.RequestError, ValueError) as e:
            raise SessionError(f"Failed to get access token: {str(e)}") from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise SessionError("Failed to get access token: response did not include access_token")

        self._access_token = token
        logger.info("Order API session initialized")
        return token

    async def create_sales_order(self, request: SalesOrderRequest) -> OrderSubmissionResult:
        """
        Create a sales order.

        Never raises for API-level failures; they are reported as
        ``success=False`` results.
        """
        return await self._create(
            order_number=request.order_number,
            query=ORDER_CREATE_MUTATION,
            data=request.to_payload(),
            result_key="order_create",
            entity_key="order",
        )

    async def create_purchase_order(self, request: PurchaseOrderRequest) -> OrderSubmissionResult:
        """
        Create a purchase order.

        Never raises for API-level failures; they are reported as
        ``success=False`` results.
        """
        return await self._create(
            order_number=request.po_number,
            query=PURCHASE_ORDER_CREATE_MUTATION,
            data=request.to_payload(),
            result_key="purchase_order_create",
            entity_key="purchase_order",
        )

    async def fetch_order_details(self, order_id: str) -> Dict[str, Any]:
        """
        Fetch an order with its line items.

        Args:
            order_id: External order ID

        Returns:
            Order dict with ``line_items`` flattened to a list

        Raises:
            UpstreamError: On network failures, HTTP errors or GraphQL errors
        """
        if not order_id:
            raise ValueError("order_id is required")

        body = await self._graphql(ORDER_DETAILS_QUERY, {"id": order_id})
        errors = body.get("errors") or []
        if errors:
            raise UpstreamError(_first_error_message(errors))

        order = ((body.get("data") or {}).get("order") or {}).get("data")
        if not order:
            raise UpstreamError(f"Order {order_id} not found")

        edges = (order.get("line_items") or {}).get("edges") or []
        return {**order, "line_items": [edge.get("node") for edge in edges if edge.get("node")]}

    async def _create(
        self,
        order_number: str,
        query: str,
        data: Dict[str, Any],
        result_key: str,
        entity_key: str,
    ) -> OrderSubmissionResult:
        try:
            body = await self._graphql(query, {"data": data})
        except UpstreamError as e:
            return OrderSubmissionResult.failed(order_number, str(e))

        created = ((body.get("data") or {}).get(result_key) or {}).get(entity_key)
        if created:
            return OrderSubmissionResult(order_number=order_number, success=True, order=created)

        errors = body.get("errors") or []
        message = _first_error_message(errors) if errors else "Unknown error"
        return OrderSubmissionResult.failed(order_number, message)

    async def _graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        if not self._access_token:
            raise UpstreamError("No active session; call acquire_session() first")

        try:
            response = await self._client.post(
                self.api_url,
                json={"query": query, "variables": variables},
                headers={"Authorization": f"Bearer {self._access_token}"},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            error_text = e.response.text[:500] if e.response.text else ""
            raise UpstreamError(
                f"API returned error {e.response.status_code}: {error_text}"
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(f"API request failed: {str(e)}") from e
        except ValueError as e:
            raise UpstreamError(f"API returned invalid JSON: {str(e)}") from e


def _first_error_message(errors: Union[list, Any]) -> str:
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict):
            return str(first.get("message") or first)
        return str(first)
    return "Unknown error"
