"""Kafka consumer feeding order-created messages through the decode pipeline."""

import time
from collections.abc import Callable
from typing import Optional

from confluent_kafka import Consumer, KafkaError, KafkaException
from logging_utils.config import get_kafka_logger

from .config import SERVICE_NAME
from .errors import MalformedEventError, UnknownFieldMappingError
from .pipeline import OrderEventPipeline
from .schemas import OrderCreated

logger = get_kafka_logger(SERVICE_NAME)

DEFAULT_CONSUMER_CONFIG = {
    "auto.offset.reset": "earliest",
    "enable.auto.commit": True,
    "session.timeout.ms": 30000,
    "max.poll.interval.ms": 300000,
}


class OrderCreatedConsumer:
    """Consumes order-created events and hands canonical orders to a handler.

    A message that fails to decode or normalize is logged, counted and
    skipped; redelivery and dead-lettering are left to the deployment.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        group_id: str,
        pipeline: Optional[OrderEventPipeline] = None,
        auto_offset_reset: str = "earliest",
        enable_auto_commit: bool = True,
    ):
        """Initialize the order-created consumer.

        Args:
            bootstrap_servers: Kafka bootstrap servers
            group_id: Consumer group ID
            pipeline: Decode/normalize pipeline, defaults to mapping table v1
            auto_offset_reset: Where to start consuming from if no offset is stored
            enable_auto_commit: Whether to auto-commit offsets
        """
        self.pipeline = pipeline or OrderEventPipeline()
        self.stats = {
            "messages_processed": 0,
            "orders_handled": 0,
            "malformed": 0,
            "unmapped": 0,
            "errors": 0,
            "start_time": time.time(),
        }
        self._running = False

        logger.info(f"Initializing consumer | bootstrap_servers={bootstrap_servers} | group_id={group_id}")

        config = DEFAULT_CONSUMER_CONFIG.copy()
        config.update(
            {
                "bootstrap.servers": bootstrap_servers,
                "group.id": group_id,
                "auto.offset.reset": auto_offset_reset,
                "enable.auto.commit": enable_auto_commit,
            }
        )
        self.consumer = Consumer(config)

    def subscribe(self, topics: list[str]) -> None:
        """Subscribe to the specified Kafka topics."""
        logger.info(f"Subscribing to topics: {topics}")
        self.consumer.subscribe(topics)
        logger.info("Successfully subscribed to topics")

    def process_messages(self, handler: Callable[[OrderCreated], None]) -> None:
        """Poll and process messages until stopped or interrupted.

        Args:
            handler: Callback receiving each canonical order

        Raises:
            KafkaException: On broker errors other than partition EOF.
        """
        logger.info("Starting message processing loop")
        self._running = True
        try:
            while self._running:
                msg = self.consumer.poll(timeout=1.0)
                if msg is None:
                    continue

                if msg.error():
                    if msg.error().code() == KafkaError._PARTITION_EOF:
                        logger.debug("Reached end of partition")
                        continue
                    logger.error(f"Kafka error: {msg.error()}")
                    self.stats["errors"] += 1
                    raise KafkaException(msg.error())

                self.process_message(msg, handler)

        except KeyboardInterrupt:
            logger.info("Shutting down consumer...")
        finally:
            self._running = False
            self._log_status()
            self.consumer.close()

    def process_message(self, msg, handler: Callable[[OrderCreated], None]) -> Optional[OrderCreated]:
        """Decode, normalize and hand off a single Kafka message.

        Returns:
            OrderCreated: The canonical order, or None if the message was skipped.
        """
        coordinates = f"topic={msg.topic()} | partition={msg.partition()} | offset={msg.offset()}"
        self.stats["messages_processed"] += 1
        try:
            order = self.pipeline.process(msg.value())
        except MalformedEventError as e:
            self.stats["malformed"] += 1
            logger.error(f"Malformed order event | error={e} | field={e.field} | {coordinates}")
            return None
        except UnknownFieldMappingError as e:
            self.stats["unmapped"] += 1
            logger.error(
                f"Order event does not match field table | error={e} | wire_field={e.wire_field} | "
                f"canonical_field={e.canonical_field} | table_version={e.table_version} | {coordinates}"
            )
            return None

        try:
            handler(order)
        except Exception:
            self.stats["errors"] += 1
            logger.exception(f"Order handler failed | order_code={order.order_code} | {coordinates}")
            return None

        self.stats["orders_handled"] += 1
        logger.debug(f"Handled order | order_code={order.order_code} | {coordinates}")
        return order

    def snapshot(self) -> dict:
        """Current counters plus uptime in seconds."""
        stats = {key: value for key, value in self.stats.items() if key != "start_time"}
        stats["runtime_seconds"] = round(time.time() - self.stats["start_time"], 2)
        stats["running"] = self._running
        return stats

    def _log_status(self) -> None:
        s = self.snapshot()
        logger.info(
            f"Consumer status | messages_processed={s['messages_processed']} | orders_handled={s['orders_handled']} | "
            f"malformed={s['malformed']} | unmapped={s['unmapped']} | errors={s['errors']} | "
            f"runtime_seconds={s['runtime_seconds']}"
        )

    def stop(self) -> None:
        """Ask the processing loop to exit after the current poll."""
        self._running = False
