"""Field normalizer: candidate OrderCreatedEvent -> canonical OrderCreated."""

from pydantic import ValidationError

from .errors import MalformedEventError, OrderEventError, UnknownFieldMappingError
from .logger import logger
from .mapping import CANONICAL_FIELDS, ORDER_CREATED_V1, FieldMappingTable
from .schemas import OrderCreated, OrderCreatedEvent

VALUE_ATTRIBUTES = frozenset({"order_code", "client_code", "items"})


class FieldNormalizer:
    """Renames candidate fields to the canonical vocabulary.

    Every value is routed through ``table.canonical_for`` using the wire
    spelling it was decoded from; values themselves are never changed.
    """

    def __init__(self, table: FieldMappingTable = ORDER_CREATED_V1):
        self.table = table

    def normalize(self, candidate: OrderCreatedEvent) -> OrderCreated:
        """Produce the canonical event for a decoded candidate.

        Raises:
            UnknownFieldMappingError: If the candidate was decoded under another
                table version or carries a wire spelling this table cannot map.
        """
        try:
            return self._normalize(candidate)
        except OrderEventError as e:
            logger.debug(
                f"Order event rejected by normalizer | order_code={candidate.order_code} | "
                f"error_type={type(e).__name__} | error={e}"
            )
            raise

    def _normalize(self, candidate: OrderCreatedEvent) -> OrderCreated:
        if candidate.mapping_version != self.table.version:
            raise UnknownFieldMappingError(
                f"candidate was decoded with field table v{candidate.mapping_version}, "
                f"normalizer uses v{self.table.version}",
                table_version=self.table.version,
            )

        values = {}
        for attribute, wire_name in candidate.source_fields.items():
            if attribute not in VALUE_ATTRIBUTES:
                raise UnknownFieldMappingError(
                    f"candidate has no value attribute {attribute!r} for wire field {wire_name!r}",
                    wire_field=wire_name,
                    table_version=self.table.version,
                )
            canonical = self.table.canonical_for(wire_name)
            if canonical in values:
                raise MalformedEventError(f"field {canonical!r} is carried twice, last as {wire_name!r}", field=wire_name)
            values[canonical] = getattr(candidate, attribute)

        for canonical in CANONICAL_FIELDS:
            if canonical not in values:
                raise UnknownFieldMappingError(
                    f"no candidate field maps to {canonical!r} in field table v{self.table.version}",
                    canonical_field=canonical,
                    table_version=self.table.version,
                )

        try:
            return OrderCreated.model_validate(values)
        except ValidationError as e:
            # Only reachable if a spelling routes a value into a field of another type
            error = e.errors()[0]
            canonical = error["loc"][0] if error["loc"] else None
            raise MalformedEventError(
                f"invalid value for canonical field {canonical!r}: {error['msg']}", field=canonical
            ) from e
