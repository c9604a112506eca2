from dataclasses import dataclass
from typing import Callable, Optional
import logging
import time

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.config import CheckoutConfig
from storefront.core.exceptions import (
    BaseAPIException, CartEmptyError, DatabaseError, OrderCreationFailed
)
from storefront.domain.order import initial_status
from storefront.models import Order
from storefront.repositories import AddressRepository, CartRepository, OrderRepository
from storefront.services.checkout_selection import AddressPaymentSelector, CheckoutSelection
from storefront.services.pricing import PriceBreakdown, PricingCalculator

logger = logging.getLogger(__name__)


@dataclass
class PlacedOrder:
    order: Order
    breakdown: Optional[PriceBreakdown]
    replayed: bool = False


class _TransientStoreError(Exception):
    """A store failure worth retrying (connection drop, lock timeout, serialization failure)"""


class OrderWriter:
    """
    Order placement as one atomic unit.

    Inside a single transaction the writer locks the user's cart rows, inserts
    the order header and one line item per cart row, then deletes the cart
    rows. Any failure rolls the whole transaction back, so there is never an
    order without items and never a cleared cart without an order.

    Business Rules:
    - Selection (address, payment method) is validated before the transaction
      and is never retried
    - An idempotency key that already produced an order returns that order
    - Without a client key, the key is derived from the locked cart contents
    - Transient store errors are retried with exponential backoff
    """

    def __init__(
        self,
        session: Session,
        checkout_config: CheckoutConfig,
        pricing: Optional[PricingCalculator] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.session = session
        self.config = checkout_config
        self.pricing = pricing or PricingCalculator.from_config(checkout_config)
        self.cart_repo = CartRepository(session)
        self.order_repo = OrderRepository(session)
        self.selector = AddressPaymentSelector(AddressRepository(session))
        self._sleep = sleep

    def place_order(
        self,
        user_id: int,
        address_id: Optional[int],
        payment_method: Optional[str],
        idempotency_key: Optional[str] = None,
    ) -> PlacedOrder:
        logger.info(f"Placing order for user {user_id} (key={idempotency_key})")

        selection = self.selector.select(user_id, address_id, payment_method)

        attempt = 0
        while True:
            attempt += 1
            try:
                return self._write(user_id, selection, idempotency_key)
            except _TransientStoreError as e:
                if attempt >= self.config.max_attempts:
                    logger.error(f"Order placement for user {user_id} failed after {attempt} attempts: {e}")
                    raise OrderCreationFailed(internal_message=str(e)) from e
                delay = min(
                    self.config.retry_base_delay * (2 ** (attempt - 1)),
                    self.config.retry_max_delay,
                )
                logger.warning(
                    f"Transient store error placing order for user {user_id} "
                    f"(attempt {attempt}), retrying in {delay:.2f}s: {e}"
                )
                self._sleep(delay)

    def _write(self, user_id: int, selection: CheckoutSelection, idempotency_key: Optional[str]) -> PlacedOrder:
        try:
            replayed = self._replay(user_id, idempotency_key)
            if replayed is not None:
                return replayed

            cart = self.cart_repo.get_snapshot(user_id, lock=True)
            if cart.is_empty:
                # A same-key request may have committed and cleared the cart
                # between the key lookup and the lock.
                replayed = self._replay(user_id, idempotency_key)
                if replayed is not None:
                    return replayed
                raise CartEmptyError()

            breakdown = self.pricing.calculate(cart.lines)
            order = self.order_repo.add_order(Order(
                user_id=user_id,
                status=initial_status(self.config.requires_manual_confirmation).value,
                payment_method=selection.payment_method,
                subtotal_paise=breakdown.subtotal,
                shipping_paise=breakdown.shipping,
                total_paise=breakdown.total,
                currency=self.config.currency,
                shipping_address_id=selection.address_id,
                shipping_address=selection.address_snapshot,
                idempotency_key=idempotency_key or cart.fingerprint(),
            ))
            self.order_repo.add_line_items(order, cart.lines)

            cleared = self.cart_repo.clear(user_id)
            if cleared != len(cart.lines):
                raise OrderCreationFailed(
                    "Your cart changed while placing the order. Please review it and try again.",
                    internal_message=f"expected to clear {len(cart.lines)} cart rows, cleared {cleared}",
                )

            self.session.commit()

        except BaseAPIException as e:
            self.session.rollback()
            if not isinstance(e, DatabaseError):
                raise
            return self._recover(user_id, idempotency_key, e.__cause__ or e)
        except SQLAlchemyError as e:
            self.session.rollback()
            return self._recover(user_id, idempotency_key, e)

        logger.info(
            f"Order {order.id} placed for user {user_id}: {len(cart.lines)} items, "
            f"total={breakdown.total} {self.config.currency}"
        )
        return PlacedOrder(order=order, breakdown=breakdown)

    def _replay(self, user_id: int, idempotency_key: Optional[str]) -> Optional[PlacedOrder]:
        if not idempotency_key:
            return None
        existing = self.order_repo.find_by_idempotency_key(user_id, idempotency_key)
        if existing is None:
            return None
        self.session.commit()
        logger.info(f"Replaying order {existing.id} for user {user_id} (key={idempotency_key})")
        return PlacedOrder(order=existing, breakdown=None, replayed=True)

    def _recover(self, user_id: int, idempotency_key: Optional[str], error: BaseException) -> PlacedOrder:
        """Decide what a rolled-back store failure means for the caller"""
        if isinstance(error, IntegrityError) and idempotency_key:
            # A concurrent request with the same key committed first.
            replayed = self._replay(user_id, idempotency_key)
            if replayed is not None:
                return replayed

        if isinstance(error, OperationalError):
            raise _TransientStoreError(str(error)) from error

        logger.error(f"Order placement for user {user_id} rolled back: {error}")
        raise OrderCreationFailed(internal_message=str(error)) from error
