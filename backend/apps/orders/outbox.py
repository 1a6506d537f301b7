from __future__ import annotations

from typing import Optional, Tuple

from apps.common import get_logger

from .protocols import CartClearTaskRepositoryProtocol, CartStoreProtocol

logger = get_logger(__name__).bind(component="orders", layer="outbox")


class CartClearOutbox:
    """Clears a customer's cart after checkout, parking failures as retryable tasks.

    The order is already committed when this runs, so nothing here may raise
    back into the checkout.
    """

    def __init__(self, carts: CartStoreProtocol, tasks: CartClearTaskRepositoryProtocol):
        self.carts = carts
        self.tasks = tasks
        self.logger = logger.bind(service="CartClearOutbox")

    def clear_after_checkout(self, customer_id: int, order_id: int) -> bool:
        """Returns True when the cart was cleared now, False when a retry task was queued."""
        try:
            self.carts.clear_cart(customer_id)
            return True
        except Exception as exc:
            self.logger.warning(
                "Cart clear after checkout failed; queueing retry",
                customer_id=customer_id,
                order_id=order_id,
                error=str(exc),
            )
            error = str(exc) or exc.__class__.__name__
        try:
            self.tasks.create(customer_id=customer_id, order_id=order_id, last_error=error)
        except Exception:
            self.logger.exception(
                "Could not queue cart clear task",
                customer_id=customer_id,
                order_id=order_id,
            )
        return False

    def replay(self, limit: Optional[int] = None) -> Tuple[int, int]:
        """Retry pending cart clears; returns (completed, still_failing)."""
        completed = failed = 0
        for task in self.tasks.pending(limit):
            try:
                self.carts.clear_cart(task.customer_id)
            except Exception as exc:
                failed += 1
                self.tasks.mark_failed(task, str(exc) or exc.__class__.__name__)
                self.logger.warning(
                    "Cart clear retry failed",
                    task_id=task.id,
                    customer_id=task.customer_id,
                    attempts=task.attempts,
                    error=str(exc),
                )
                continue
            completed += 1
            self.tasks.mark_done(task)
            self.logger.info(
                "Cart clear retry succeeded",
                task_id=task.id,
                customer_id=task.customer_id,
                order_id=task.order_id,
            )
        return completed, failed
