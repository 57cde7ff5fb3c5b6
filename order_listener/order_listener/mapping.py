"""Versioned table mapping wire field spellings to canonical field names.

The upstream producer names the customer identifier ``codigoClient`` while the
domain calls it ``customerCode``. Renames are resolved only through an explicit
table: a producer that starts sending a spelling the table does not list makes
decoding fail instead of having its value guessed into some other field.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .errors import MalformedEventError, UnknownFieldMappingError

ORDER_CODE = "orderCode"
CUSTOMER_CODE = "customerCode"
ITEMS = "items"

CANONICAL_FIELDS = (ORDER_CODE, CUSTOMER_CODE, ITEMS)


@dataclass(frozen=True)
class FieldMappingTable:
    """Fixed set of accepted wire spellings per canonical field.

    The first spelling listed for a field is its primary wire name, used when
    reporting errors about that field.
    """

    version: int
    aliases: Mapping[str, tuple[str, ...]]
    _reverse: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        missing = [name for name in CANONICAL_FIELDS if not self.aliases.get(name)]
        if missing:
            raise ValueError(f"mapping table v{self.version} has no spellings for {missing}")

        reverse = {}
        for canonical, spellings in self.aliases.items():
            for spelling in spellings:
                if reverse.setdefault(spelling, canonical) != canonical:
                    raise ValueError(
                        f"wire spelling {spelling!r} maps to both {reverse[spelling]!r} and {canonical!r}"
                    )
        object.__setattr__(self, "aliases", MappingProxyType({k: tuple(v) for k, v in self.aliases.items()}))
        object.__setattr__(self, "_reverse", MappingProxyType(reverse))

    def canonical_for(self, wire_name: str) -> str:
        """Resolve a wire spelling to its canonical field.

        Raises:
            UnknownFieldMappingError: If the table has no entry for ``wire_name``.
        """
        try:
            return self._reverse[wire_name]
        except KeyError:
            raise UnknownFieldMappingError(
                f"wire field {wire_name!r} has no mapping in field table v{self.version}",
                wire_field=wire_name,
                table_version=self.version,
            ) from None

    def spellings_for(self, canonical: str) -> tuple[str, ...]:
        return self.aliases[canonical]

    def primary_spelling(self, canonical: str) -> str:
        return self.aliases[canonical][0]

    def unmapped(self, keys: Iterable[str]) -> list[str]:
        """Keys that no canonical field accepts, in input order."""
        return [key for key in keys if key not in self._reverse]

    def locate(self, keys: Iterable[str]) -> dict[str, str]:
        """Find which wire spelling carries each canonical field.

        Args:
            keys: Field names present in a payload.

        Returns:
            dict: canonical field -> wire spelling, for the fields present.

        Raises:
            MalformedEventError: If one canonical field appears under two spellings.
        """
        found: dict[str, str] = {}
        for key in keys:
            canonical = self._reverse.get(key)
            if canonical is None:
                continue
            if canonical in found:
                raise MalformedEventError(
                    f"field {canonical!r} is present twice, as {found[canonical]!r} and {key!r}",
                    field=key,
                )
            found[canonical] = key
        return found


ORDER_CREATED_V1 = FieldMappingTable(
    version=1,
    aliases={
        ORDER_CODE: ("codigoPedido", ORDER_CODE),
        CUSTOMER_CODE: ("codigoClient", "codigoCliente", "clientCode", CUSTOMER_CODE),
        ITEMS: ("itens", ITEMS),
    },
)

MAPPING_TABLES: Mapping[int, FieldMappingTable] = MappingProxyType({ORDER_CREATED_V1.version: ORDER_CREATED_V1})


def get_mapping_table(version: int) -> FieldMappingTable:
    """Look up a registered mapping table by version.

    Raises:
        UnknownFieldMappingError: If no table is registered under ``version``.
    """
    try:
        return MAPPING_TABLES[version]
    except KeyError:
        raise UnknownFieldMappingError(
            f"no field mapping table registered for version {version}", table_version=version
        ) from None
