"""Entry filtering: ``-name``, ``-iname`` and ``-type`` predicates."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass

from pyfind.matcher import glob_match
from pyfind.scanner import Entry, EntryKind


class TypeFilter(enum.Enum):
    """Entry type accepted by ``-type``."""

    FILE = "f"
    DIRECTORY = "d"

    @classmethod
    def parse(cls, value: str) -> TypeFilter:
        """Parse a ``-type`` argument.

        Args:
            value: Raw CLI value, ``"f"`` or ``"d"``.

        Returns:
            TypeFilter: Matching member.

        Raises:
            ValueError: If *value* is neither ``"f"`` nor ``"d"``.
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"invalid argument to '-type': {value}") from None

    def accepts(self, kind: EntryKind) -> bool:
        if self is TypeFilter.FILE:
            return kind is EntryKind.FILE
        return kind is EntryKind.DIRECTORY


def lower_name(name: bytes) -> bytes:
    """Lowercase raw filesystem bytes.

    Bytes are decoded with the filesystem encoding, folded with
    ``str.lower`` and encoded back, so undecodable bytes pass through
    unchanged.
    """
    return os.fsencode(os.fsdecode(name).lower())


def _as_bytes(pattern: str | bytes) -> bytes:
    if isinstance(pattern, bytes):
        return pattern
    return os.fsencode(pattern)


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Immutable set of constraints an entry must satisfy.

    Attributes:
        name_pattern: Case-sensitive glob for the final path component.
        iname_pattern: Case-insensitive glob, already lowercased.
        type_filter: Required entry type. ``None`` means any type.
    """

    name_pattern: bytes | None = None
    iname_pattern: bytes | None = None
    type_filter: TypeFilter | None = None

    @classmethod
    def from_patterns(
        cls,
        name: str | bytes | None = None,
        iname: str | bytes | None = None,
        type_filter: TypeFilter | None = None,
    ) -> FilterConfig:
        """Build a config from user-supplied patterns.

        ``str`` patterns are encoded with the filesystem encoding. The
        ``iname`` pattern is lowercased here, once, rather than on every
        comparison.
        """
        return cls(
            name_pattern=_as_bytes(name) if name is not None else None,
            iname_pattern=lower_name(_as_bytes(iname)) if iname is not None else None,
            type_filter=type_filter,
        )

    def should_emit(self, entry: Entry) -> bool:
        return should_emit(entry, self)


def should_emit(entry: Entry, config: FilterConfig) -> bool:
    """Return whether *entry* satisfies every constraint in *config*.

    The type constraint is checked first and short-circuits the name
    checks. Entries without a final path component never satisfy a name
    constraint.

    Args:
        entry: Entry under evaluation.
        config: Active filter configuration.

    Returns:
        bool: ``True`` when all configured constraints pass.
    """
    if config.type_filter is not None and not config.type_filter.accepts(entry.kind):
        return False

    if config.name_pattern is not None:
        if entry.name is None or not glob_match(entry.name, config.name_pattern):
            return False

    if config.iname_pattern is not None:
        if entry.name is None or not glob_match(
            lower_name(entry.name), config.iname_pattern
        ):
            return False

    return True
