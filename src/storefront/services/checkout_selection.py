from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from storefront.core.exceptions import ValidationError
from storefront.domain.order import PAYMENT_METHODS
from storefront.repositories import AddressRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutSelection:
    address_id: int
    address_snapshot: Dict[str, Any]
    payment_method: str


class AddressPaymentSelector:
    """
    Validates the buyer's delivery address and payment method before any
    order write is attempted. Read-only: a failed selection leaves no trace.
    """

    def __init__(self, address_repository: AddressRepository):
        self.address_repo = address_repository

    def select(self, user_id: int, address_id: Optional[int], payment_method: Optional[str]) -> CheckoutSelection:
        field_errors: List[Dict[str, str]] = []
        address = None

        if address_id is None:
            field_errors.append({"field": "address_id", "message": "Please select a delivery address"})
        else:
            address = self.address_repo.get_for_user(user_id, address_id)
            if address is None:
                # Same message whether the address is missing or someone else's.
                field_errors.append({"field": "address_id", "message": "Selected address was not found"})

        if payment_method not in PAYMENT_METHODS:
            field_errors.append({
                "field": "payment_method",
                "message": f"Payment method must be one of: {', '.join(sorted(PAYMENT_METHODS))}",
            })

        if field_errors:
            logger.warning(f"Checkout selection rejected for user {user_id}: {field_errors}")
            raise ValidationError("Invalid checkout selection", field_errors)

        return CheckoutSelection(
            address_id=address.id,
            address_snapshot=address.snapshot(),
            payment_method=payment_method,
        )
