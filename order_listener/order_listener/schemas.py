"""Pydantic models for the order-created event, in wire and canonical form."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt

# Order and client codes are 64-bit identifiers upstream
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

Int64Code = Annotated[StrictInt, Field(ge=INT64_MIN, le=INT64_MAX)]


class OrderItemEvent(BaseModel):
    """A single line of an order-created event.

    The item layout belongs to the upstream producer and is not interpreted
    here: every key of the JSON object is kept verbatim and forwarded.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    def as_dict(self) -> dict[str, Any]:
        """Return the item's original key/value pairs."""
        return dict(self.__pydantic_extra__ or {})


class OrderCreatedEvent(BaseModel):
    """Candidate event as decoded from the wire.

    Attributes:
        order_code (int): Upstream order identifier (``codigoPedido``).
        client_code (int): Identifier of the ordering client (``codigoClient``).
        items (tuple[OrderItemEvent, ...]): Order lines, in wire order.
        source_fields (dict[str, str]): Attribute name -> wire spelling it was read from.
        mapping_version (int): Version of the mapping table used to decode.
    """

    model_config = ConfigDict(frozen=True)

    order_code: Int64Code
    client_code: Int64Code
    items: tuple[OrderItemEvent, ...]
    source_fields: dict[str, str]
    mapping_version: int


class OrderCreated(BaseModel):
    """Canonical order-created value handed to the order-creation handler.

    Attributes:
        order_code (int): Upstream order identifier.
        customer_code (int): Identifier of the customer who placed the order.
        items (tuple[OrderItemEvent, ...]): Order lines, in wire order.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "orderCode": 123,
                "customerCode": 456,
                "items": [{"produto": "lapis", "quantidade": 2, "preco": 1.1}],
            }
        },
    )

    order_code: Int64Code = Field(..., alias="orderCode")
    customer_code: Int64Code = Field(..., alias="customerCode")
    items: tuple[OrderItemEvent, ...] = Field(default=(), alias="items")

    def to_wire(self) -> dict[str, Any]:
        """Serialize using canonical field names.

        Returns:
            dict: ``{"orderCode": ..., "customerCode": ..., "items": [...]}``
        """
        return self.model_dump(by_alias=True, mode="json")
