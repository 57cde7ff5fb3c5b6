"""Schema decoder: raw order-created payload -> candidate OrderCreatedEvent."""

import json
from collections.abc import Mapping
from typing import Any, Union

from pydantic import ValidationError

from .errors import MalformedEventError, OrderEventError, UnknownFieldMappingError
from .logger import logger
from .mapping import CANONICAL_FIELDS, CUSTOMER_CODE, ITEMS, ORDER_CODE, ORDER_CREATED_V1, FieldMappingTable
from .schemas import OrderCreatedEvent

RawPayload = Union[bytes, bytearray, str, Mapping[str, Any]]

# Candidate attribute carrying each canonical field
CANDIDATE_ATTRIBUTES = {
    ORDER_CODE: "order_code",
    CUSTOMER_CODE: "client_code",
    ITEMS: "items",
}


class SchemaDecoder:
    """Turns one raw payload into a structurally valid candidate event.

    Field names are looked up through a ``FieldMappingTable`` so that the
    decoder accepts every spelling the table lists and nothing else.
    """

    def __init__(self, table: FieldMappingTable = ORDER_CREATED_V1, allow_extra_fields: bool = False):
        """Initialize the decoder.

        Args:
            table: Mapping table used to locate fields in the payload
            allow_extra_fields: Ignore payload keys the table does not know
                instead of rejecting the payload
        """
        self.table = table
        self.allow_extra_fields = allow_extra_fields

    def decode(self, payload: RawPayload) -> OrderCreatedEvent:
        """Decode a raw payload.

        Args:
            payload: JSON bytes/str, or an already parsed mapping.

        Returns:
            OrderCreatedEvent: The candidate event.

        Raises:
            MalformedEventError: If the payload does not match the expected shape.
            UnknownFieldMappingError: If a required field is missing and the
                payload carries field names the table cannot map (only when
                extra fields are not allowed).
        """
        try:
            return self._decode(payload)
        except OrderEventError as e:
            logger.debug(f"Order event rejected by decoder | error_type={type(e).__name__} | error={e}")
            raise

    def _decode(self, payload: RawPayload) -> OrderCreatedEvent:
        document = self._parse(payload)
        located = self.table.locate(document.keys())
        unknown = self.table.unmapped(document.keys())

        missing = [canonical for canonical in CANONICAL_FIELDS if canonical not in located]
        if missing:
            canonical = missing[0]
            if unknown and not self.allow_extra_fields:
                raise UnknownFieldMappingError(
                    f"required field {canonical!r} not found; wire field(s) {unknown} "
                    f"have no mapping in field table v{self.table.version}",
                    wire_field=unknown[0],
                    canonical_field=canonical,
                    table_version=self.table.version,
                )
            wire_name = self.table.primary_spelling(canonical)
            raise MalformedEventError(f"missing required field {wire_name!r} ({canonical})", field=wire_name)

        if unknown and not self.allow_extra_fields:
            raise MalformedEventError(f"unexpected field {unknown[0]!r}", field=unknown[0])

        values = {}
        for canonical, wire_name in located.items():
            value = document[wire_name]
            if value is None:
                raise MalformedEventError(f"field {wire_name!r} must not be null", field=wire_name)
            values[CANDIDATE_ATTRIBUTES[canonical]] = value

        self._check_items(values["items"], located[ITEMS])

        try:
            return OrderCreatedEvent(
                **values,
                source_fields={CANDIDATE_ATTRIBUTES[c]: w for c, w in located.items()},
                mapping_version=self.table.version,
            )
        except ValidationError as e:
            attribute_to_wire = {CANDIDATE_ATTRIBUTES[c]: w for c, w in located.items()}
            error = e.errors()[0]
            loc = error["loc"]
            wire_name = attribute_to_wire.get(loc[0]) if loc else None
            raise MalformedEventError(
                f"invalid value for field {wire_name!r}: {error['msg']}", field=wire_name
            ) from e

    def _parse(self, payload: RawPayload) -> Mapping[str, Any]:
        if isinstance(payload, Mapping):
            document = payload
        else:
            try:
                if isinstance(payload, (bytes, bytearray)):
                    payload = payload.decode("utf-8")
                document = json.loads(payload)
            except UnicodeDecodeError as e:
                raise MalformedEventError(f"payload is not valid UTF-8: {e}") from e
            except (json.JSONDecodeError, TypeError) as e:
                raise MalformedEventError(f"payload is not valid JSON: {e}") from e

        if not isinstance(document, Mapping):
            raise MalformedEventError(f"payload must be a JSON object, got {type(document).__name__}")
        return document

    @staticmethod
    def _check_items(items: Any, wire_name: str) -> None:
        # Items are opaque, but each must still be an object
        if not isinstance(items, (list, tuple)):
            raise MalformedEventError(f"field {wire_name!r} must be a list, got {type(items).__name__}", field=wire_name)
        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                item_field = f"{wire_name}[{index}]"
                raise MalformedEventError(
                    f"field {item_field!r} must be an object, got {type(item).__name__}", field=item_field
                )
