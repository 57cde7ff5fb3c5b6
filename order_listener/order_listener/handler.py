"""Order-creation handlers receiving canonical events."""

from typing import Protocol

from .logger import logger
from .schemas import OrderCreated


class OrderCreatedHandler(Protocol):
    """Anything that accepts a canonical order-created event."""

    def __call__(self, order: OrderCreated) -> None: ...


class LoggingOrderHandler:
    """Default handler: records each order and keeps the most recent ones.

    Order processing itself belongs to the downstream service; this handler
    only makes received orders visible in logs and through ``recent``.
    """

    def __init__(self, history_size: int = 100):
        self.history_size = history_size
        self._recent: list[OrderCreated] = []

    def __call__(self, order: OrderCreated) -> None:
        logger.info(
            f"Order created | order_code={order.order_code} | customer_code={order.customer_code} | "
            f"items={len(order.items)}"
        )
        self._recent.append(order)
        if len(self._recent) > self.history_size:
            del self._recent[0]

    @property
    def recent(self) -> list[OrderCreated]:
        return list(self._recent)
