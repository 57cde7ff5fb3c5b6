"""End-to-end tests of decode -> normalize."""

import json

import pytest

from order_listener.errors import MalformedEventError, UnknownFieldMappingError
from order_listener.mapping import CUSTOMER_CODE, ITEMS, ORDER_CODE, FieldMappingTable
from order_listener.pipeline import OrderEventPipeline, decode_and_normalize
from order_listener.schemas import OrderCreated


def test_minimal_order():
    order = decode_and_normalize(b'{"codigoPedido": 123, "codigoClient": 456, "itens": []}')
    assert order == OrderCreated(orderCode=123, customerCode=456, items=())
    assert order.to_wire() == {"orderCode": 123, "customerCode": 456, "items": []}


def test_missing_client_field():
    with pytest.raises(MalformedEventError) as exc_info:
        decode_and_normalize(b'{"codigoPedido": 123, "itens": []}')
    assert exc_info.value.field == "codigoClient"


def test_unrecognized_client_field():
    with pytest.raises(UnknownFieldMappingError):
        decode_and_normalize(b'{"codigoPedido": 123, "cliente": 456, "itens": []}')


def test_values_and_item_order_are_preserved(pipeline, wire_order_bytes, wire_order):
    order = pipeline.process(wire_order_bytes)
    assert order.order_code == wire_order["codigoPedido"]
    assert order.customer_code == wire_order["codigoClient"]
    assert [item.as_dict() for item in order.items] == wire_order["itens"]


def test_renormalizing_canonical_form_is_identity(pipeline, wire_order_bytes):
    order = pipeline.process(wire_order_bytes)
    again = pipeline.process(json.dumps(order.to_wire()).encode("utf-8"))
    assert again == order
    assert pipeline.process(order.to_wire()) == order


def test_custom_table_picks_up_renamed_producer_field():
    table = FieldMappingTable(
        version=2,
        aliases={
            ORDER_CODE: ("codigoPedido", ORDER_CODE),
            CUSTOMER_CODE: ("codigoClient", "idCliente", CUSTOMER_CODE),
            ITEMS: ("itens", ITEMS),
        },
    )
    payload = {"codigoPedido": 7, "idCliente": 8, "itens": [{"sku": "X"}]}

    with pytest.raises(UnknownFieldMappingError):
        OrderEventPipeline().process(payload)

    order = OrderEventPipeline(table).process(payload)
    assert order.customer_code == 8


def test_candidate_from_other_table_version_is_rejected():
    table = FieldMappingTable(
        version=2,
        aliases={ORDER_CODE: ("pedido",), CUSTOMER_CODE: ("cliente",), ITEMS: ("itens",)},
    )
    candidate = OrderEventPipeline(table).decoder.decode({"pedido": 1, "cliente": 2, "itens": []})
    with pytest.raises(UnknownFieldMappingError):
        OrderEventPipeline().normalizer.normalize(candidate)


def test_one_bad_payload_does_not_affect_the_next(pipeline):
    with pytest.raises(MalformedEventError):
        pipeline.process(b'{"codigoPedido": "x", "codigoClient": 1, "itens": []}')
    assert pipeline.process(b'{"codigoPedido": 1, "codigoClient": 2, "itens": []}').order_code == 1
