"""FastAPI server for the order listener."""

import threading
from contextlib import asynccontextmanager
from typing import Optional

from confluent_kafka.admin import AdminClient
from fastapi import FastAPI, HTTPException

from . import config
from .consumer import OrderCreatedConsumer
from .handler import LoggingOrderHandler, OrderCreatedHandler
from .logger import logger
from .mapping import get_mapping_table
from .pipeline import OrderEventPipeline


class ListenerState:
    """Runtime objects shared between the lifespan and the endpoints."""

    def __init__(self):
        self.consumer: Optional[OrderCreatedConsumer] = None
        self.consumer_thread: Optional[threading.Thread] = None
        self.handler: OrderCreatedHandler = LoggingOrderHandler()
        self.table = get_mapping_table(config.FIELD_MAPPING_VERSION)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the consumer thread on startup and stop it on shutdown."""
    pipeline = OrderEventPipeline(state.table, allow_extra_fields=config.ALLOW_EXTRA_FIELDS)
    state.consumer = OrderCreatedConsumer(
        bootstrap_servers=config.KAFKA_BOOTSTRAP_SERVERS,
        group_id=config.KAFKA_CONSUMER_GROUP,
        pipeline=pipeline,
        auto_offset_reset=config.AUTO_OFFSET_RESET,
    )
    state.consumer.subscribe([config.ORDER_CREATED_TOPIC])
    logger.info(f"Subscribed to topic: {config.ORDER_CREATED_TOPIC} | field_table=v{state.table.version}")

    state.consumer_thread = threading.Thread(
        target=state.consumer.process_messages, args=(state.handler,), daemon=True
    )
    state.consumer_thread.start()
    logger.info("Consumer thread started")

    yield

    logger.info("Shutting down order listener...")
    state.consumer.stop()
    state.consumer_thread.join(timeout=5)
    logger.info("Shutdown complete")


state = ListenerState()
app = FastAPI(title="Order Listener", lifespan=lifespan)


@app.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@app.get("/health/ready")
async def readiness_check():
    """Readiness check that verifies the Kafka connection."""
    try:
        admin = AdminClient({"bootstrap.servers": config.KAFKA_BOOTSTRAP_SERVERS})
        cluster_metadata = admin.list_topics(timeout=10)
        if cluster_metadata is not None:
            return {"status": "ready", "kafka": "connected"}
    except Exception as e:
        logger.error(f"Kafka connection failed: {e}")
    return {"status": "not ready", "kafka": "disconnected"}


@app.get("/stats")
async def consumer_stats():
    """Counters of the running consumer.

    Raises:
        HTTPException: If the consumer has not been started
    """
    if not state.consumer:
        raise HTTPException(status_code=503, detail="Consumer not started")
    return state.consumer.snapshot()


@app.get("/mapping")
async def field_mapping():
    """The wire -> canonical field table currently in use."""
    return {
        "version": state.table.version,
        "fields": {canonical: list(spellings) for canonical, spellings in state.table.aliases.items()},
    }
