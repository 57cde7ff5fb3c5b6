"""Tests for the order-created Kafka consumer."""

import json
from unittest.mock import MagicMock, Mock, patch

import pytest
from confluent_kafka import Consumer, KafkaError, KafkaException

from order_listener.consumer import OrderCreatedConsumer
from order_listener.schemas import OrderCreated


def make_message(value, offset=0):
    msg = Mock()
    msg.error.return_value = None
    msg.value.return_value = value
    msg.topic.return_value = "orders.created"
    msg.partition.return_value = 0
    msg.offset.return_value = offset
    return msg


@patch("order_listener.consumer.Consumer")
def test_create_consumer(mock_consumer):
    """Test Kafka consumer creation."""
    OrderCreatedConsumer("kafka:9092", "order-listener")
    mock_consumer.assert_called_once_with(
        {
            "auto.offset.reset": "earliest",
            "enable.auto.commit": True,
            "session.timeout.ms": 30000,
            "max.poll.interval.ms": 300000,
            "bootstrap.servers": "kafka:9092",
            "group.id": "order-listener",
        }
    )


@patch("order_listener.consumer.Consumer")
def test_subscribe(mock_consumer):
    consumer = OrderCreatedConsumer("localhost:9092", "test-group")
    consumer.subscribe(["orders.created"])
    mock_consumer.return_value.subscribe.assert_called_once_with(["orders.created"])


@patch("order_listener.consumer.Consumer")
def test_process_valid_and_invalid_messages(mock_consumer, wire_order):
    """Valid orders reach the handler; bad ones are counted and skipped."""
    mock_consumer.return_value.poll.side_effect = [
        make_message(json.dumps(wire_order).encode(), offset=1),
        None,
        make_message(b'{"codigoPedido": 1, "itens": []}', offset=2),
        make_message(b'{"codigoPedido": 1, "cliente": 2, "itens": []}', offset=3),
        make_message(b"not json", offset=4),
        KeyboardInterrupt,
    ]
    consumer = OrderCreatedConsumer("localhost:9092", "test-group")
    handler = MagicMock()

    consumer.process_messages(handler)

    assert handler.call_count == 1
    order = handler.call_args[0][0]
    assert isinstance(order, OrderCreated)
    assert order.order_code == wire_order["codigoPedido"]
    assert order.customer_code == wire_order["codigoClient"]
    assert consumer.stats["messages_processed"] == 4
    assert consumer.stats["orders_handled"] == 1
    assert consumer.stats["malformed"] == 2
    assert consumer.stats["unmapped"] == 1
    mock_consumer.return_value.close.assert_called_once()


@pytest.fixture
def mock_kafka_consumer(mocker):
    """Mock the Kafka consumer."""
    consumer_mock = mocker.MagicMock(spec=Consumer)
    mocker.patch("order_listener.consumer.Consumer", return_value=consumer_mock)
    return consumer_mock


def test_handler_failure_is_counted(mock_kafka_consumer, wire_order):
    consumer = OrderCreatedConsumer("localhost:9092", "test-group")
    handler = MagicMock(side_effect=RuntimeError("downstream unavailable"))

    assert consumer.process_message(make_message(json.dumps(wire_order).encode()), handler) is None
    assert consumer.stats["errors"] == 1
    assert consumer.stats["orders_handled"] == 0


@patch("order_listener.consumer.Consumer")
def test_partition_eof_is_ignored(mock_consumer):
    eof = Mock()
    eof.error.return_value.code.return_value = KafkaError._PARTITION_EOF
    mock_consumer.return_value.poll.side_effect = [eof, KeyboardInterrupt]

    consumer = OrderCreatedConsumer("localhost:9092", "test-group")
    consumer.process_messages(MagicMock())
    assert consumer.stats["errors"] == 0


@patch("order_listener.consumer.Consumer")
def test_broker_error_raises(mock_consumer):
    failing = Mock()
    failing.error.return_value.code.return_value = KafkaError._TRANSPORT
    mock_consumer.return_value.poll.side_effect = [failing]

    consumer = OrderCreatedConsumer("localhost:9092", "test-group")
    with pytest.raises(KafkaException):
        consumer.process_messages(MagicMock())
    assert consumer.stats["errors"] == 1
    mock_consumer.return_value.close.assert_called_once()


@patch("order_listener.consumer.Consumer")
def test_snapshot(mock_consumer):
    consumer = OrderCreatedConsumer("localhost:9092", "test-group")
    snapshot = consumer.snapshot()
    assert snapshot["messages_processed"] == 0
    assert snapshot["running"] is False
    assert "start_time" not in snapshot


def test_stop_ends_processing_loop(mock_kafka_consumer, wire_order):
    consumer = OrderCreatedConsumer("localhost:9092", "test-group")
    handler = MagicMock(side_effect=lambda order: consumer.stop())
    mock_kafka_consumer.poll.side_effect = [make_message(json.dumps(wire_order).encode()), AssertionError]

    consumer.process_messages(handler)

    handler.assert_called_once()
    assert mock_kafka_consumer.poll.call_count == 1
    mock_kafka_consumer.close.assert_called_once()
