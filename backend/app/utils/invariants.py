"""
System invariants and validation utilities.

Enforces critical system constraints:
1. No SKU-dependent workflow without a product selection
2. No order line item with a quantity below one
3. No order whose totals drift from its line items
4. No tour status transition outside draft -> finalized

Fail fast with explicit errors.
"""

from decimal import Decimal
from typing import Iterable, Sequence


class InvariantViolationError(Exception):
    """Base exception for invariant violations."""

    def __init__(self, invariant_name: str, message: str, details: dict = None):
        self.invariant_name = invariant_name
        self.details = details or {}
        self.message = message
        super().__init__(message)


class EmptyProductSelectionError(InvariantViolationError):
    """Raised when a SKU-dependent workflow runs without selected products."""

    def __init__(self, message: str, details: dict = None):
        super().__init__("empty_product_selection", message, details)


class InvalidLineItemError(InvariantViolationError):
    """Raised when an order line item has a non-positive quantity."""

    def __init__(self, message: str, details: dict = None):
        super().__init__("invalid_line_item", message, details)


class OrderTotalsMismatchError(InvariantViolationError):
    """Raised when order totals differ from the sum of line-item subtotals."""

    def __init__(self, message: str, details: dict = None):
        super().__init__("order_totals_mismatch", message, details)


class InvalidTourStatusTransitionError(InvariantViolationError):
    """Raised when a tour status change is not an allowed transition."""

    def __init__(self, message: str, details: dict = None):
        super().__init__("invalid_tour_status_transition", message, details)


# Allowed tour status transitions (current -> targets)
ALLOWED_TOUR_TRANSITIONS = {
    "draft": {"draft", "finalized"},
    "finalized": {"finalized"},
}


def check_product_selection(workflow_label: str, product_ids: Sequence[str]) -> None:
    """
    Invariant: No SKU-dependent workflow without selected products.

    Args:
        workflow_label: Human-readable workflow label used in the error
        product_ids: Selected product identifiers

    Raises:
        EmptyProductSelectionError: If no products are selected
    """
    if not product_ids:
        raise EmptyProductSelectionError(
            f"No SKUs selected for {workflow_label}. Please select SKUs when creating the tour.",
            details={"workflow": workflow_label}
        )


def check_line_item_quantity(product_id: str, quantity: int) -> None:
    """
    Invariant: Every line item orders at least one unit.

    Raises:
        InvalidLineItemError: If quantity is not a positive integer
    """
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise InvalidLineItemError(
            f"Line item for {product_id} must have a quantity of at least 1, got {quantity!r}",
            details={"product_id": product_id, "quantity": quantity}
        )


def check_order_totals(
    line_subtotals: Iterable[Decimal],
    subtotal: Decimal,
    total_price: Decimal
) -> None:
    """
    Invariant: subtotal == total_price == sum of line subtotals.

    Raises:
        OrderTotalsMismatchError: If any of the three values differ
    """
    expected = sum(line_subtotals, Decimal("0"))
    if subtotal != expected or total_price != expected:
        raise OrderTotalsMismatchError(
            f"Order totals drifted: expected {expected}, got subtotal={subtotal} total={total_price}",
            details={
                "expected": str(expected),
                "subtotal": str(subtotal),
                "total_price": str(total_price)
            }
        )


def check_tour_status_transition(current: str, target: str) -> None:
    """
    Invariant: Tours only move draft -> finalized.

    Re-writing the current status is allowed so a finalized tour can be
    finalized again.

    Args:
        current: Current status value
        target: Requested status value

    Raises:
        InvalidTourStatusTransitionError: If the transition is not allowed
    """
    allowed = ALLOWED_TOUR_TRANSITIONS.get(current)
    if allowed is None or target not in allowed:
        raise InvalidTourStatusTransitionError(
            f"Cannot move tour from '{current}' to '{target}'",
            details={"current": current, "target": target}
        )


def validate_orchestrator_name(orchestrator_name: str) -> None:
    """
    Utility helper: Validate orchestrator name format.

    Args:
        orchestrator_name: Orchestrator name to validate

    Raises:
        ValueError: If orchestrator_name is invalid
    """
    if not orchestrator_name:
        raise ValueError("orchestrator_name cannot be empty")

    if not isinstance(orchestrator_name, str):
        raise ValueError(f"orchestrator_name must be a string, got {type(orchestrator_name)}")

    if len(orchestrator_name) > 100:
        raise ValueError(f"orchestrator_name too long (max 100 chars, got {len(orchestrator_name)})")

    if not orchestrator_name.replace('_', '').isalnum():
        raise ValueError("orchestrator_name must contain only alphanumeric characters and underscores")
