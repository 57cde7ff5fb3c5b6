"""Decode -> normalize composition used by the consumer."""

from .decoder import RawPayload, SchemaDecoder
from .mapping import ORDER_CREATED_V1, FieldMappingTable
from .normalizer import FieldNormalizer
from .schemas import OrderCreated


class OrderEventPipeline:
    """Decoder and normalizer sharing one mapping table.

    Instances hold no mutable state and can be shared across threads.
    """

    def __init__(self, table: FieldMappingTable = ORDER_CREATED_V1, allow_extra_fields: bool = False):
        self.table = table
        self.decoder = SchemaDecoder(table, allow_extra_fields=allow_extra_fields)
        self.normalizer = FieldNormalizer(table)

    def process(self, payload: RawPayload) -> OrderCreated:
        """Turn one raw payload into a canonical ``OrderCreated``.

        Raises:
            MalformedEventError: If the payload is structurally invalid.
            UnknownFieldMappingError: If the payload drifted from the mapping table.
        """
        return self.normalizer.normalize(self.decoder.decode(payload))


def decode_and_normalize(
    payload: RawPayload, table: FieldMappingTable = ORDER_CREATED_V1, allow_extra_fields: bool = False
) -> OrderCreated:
    """One-shot helper around ``OrderEventPipeline``."""
    return OrderEventPipeline(table, allow_extra_fields=allow_extra_fields).process(payload)
