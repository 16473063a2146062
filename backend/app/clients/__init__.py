"""
Clients package.

Thin clients for external systems. Clients translate transport failures
into the package's own exceptions and never retry.
"""

from app.clients.order_management_client import (
    OrderManagementClient,
    OrderSubmissionResult,
    SessionError,
    UpstreamError,
)

__all__ = [
    "OrderManagementClient",
    "OrderSubmissionResult",
    "SessionError",
    "UpstreamError",
]
