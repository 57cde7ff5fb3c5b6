"""Test fixtures for the order listener tests."""

import json

import pytest

from order_listener.decoder import SchemaDecoder
from order_listener.normalizer import FieldNormalizer
from order_listener.pipeline import OrderEventPipeline


@pytest.fixture
def wire_order():
    """An order-created payload as the upstream producer sends it."""
    return {
        "codigoPedido": 123,
        "codigoClient": 456,
        "itens": [
            {"produto": "lapis", "quantidade": 2, "preco": 1.10},
            {"produto": "caderno", "quantidade": 1, "preco": 12.50},
            {"produto": "borracha", "quantidade": 3, "preco": 0.75},
        ],
    }


@pytest.fixture
def wire_order_bytes(wire_order):
    return json.dumps(wire_order).encode("utf-8")


@pytest.fixture
def decoder():
    return SchemaDecoder()


@pytest.fixture
def normalizer():
    return FieldNormalizer()


@pytest.fixture
def pipeline():
    return OrderEventPipeline()


@pytest.fixture
def log_records():
    """Loguru records emitted while the test runs."""
    from loguru import logger

    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(sink_id)
