"""Errors raised while decoding and normalizing order events."""

from typing import Optional


class OrderEventError(Exception):
    """Base class for every error raised by the decode/normalize pipeline."""


class MalformedEventError(OrderEventError):
    """The payload does not structurally match the order-created schema.

    Attributes:
        field: Wire name of the offending field, when it can be determined.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UnknownFieldMappingError(OrderEventError):
    """A wire field cannot be resolved against the field mapping table.

    This signals schema drift between producer and consumer and is not
    transient: redelivering the same payload fails the same way.

    Attributes:
        wire_field: The wire spelling that could not be mapped.
        canonical_field: The canonical field left unresolved, if known.
        table_version: Version of the mapping table in use.
    """

    def __init__(
        self,
        message: str,
        wire_field: Optional[str] = None,
        canonical_field: Optional[str] = None,
        table_version: Optional[int] = None,
    ):
        super().__init__(message)
        self.wire_field = wire_field
        self.canonical_field = canonical_field
        self.table_version = table_version
