"""Depth-first directory traversal with symlink cycle tracking."""

from __future__ import annotations

import enum
import logging
import os
import stat
from collections.abc import Callable, Hashable, Iterator
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)


class EntryKind(enum.Enum):
    """File-type classification of an entry."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> EntryKind:
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISREG(mode):
            return cls.FILE
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class Entry:
    """A single filesystem entry discovered during traversal.

    Attributes:
        path: Path exactly as discovered. The start path is kept as given;
            descendants are ``<parent><sep><name>``.
        name: Raw bytes of the final path component, or ``None`` when the
            path has none (``.``, ``..``, ``/``).
        kind: Classification of the entry itself, not of a link target.
    """

    path: str
    name: bytes | None
    kind: EntryKind


class EntryFilter(Protocol):
    """Protocol for entry filtering.

    Keeps traversal logic decoupled from matching strategy.
    """

    def should_emit(self, entry: Entry) -> bool: ...


class _NullFilter:
    """Default pass-through filter that emits everything."""

    def should_emit(self, entry: Entry) -> bool:
        return True


IdentityFunc = Callable[[str], Hashable]


def stat_identity(path: str) -> tuple[int, int]:
    """Return the ``(st_dev, st_ino)`` identity of the object *path* resolves to.

    On Windows ``os.stat`` fills these fields with the volume serial number
    and file index, which serve the same purpose.

    Raises:
        OSError: If the target cannot be stat'ed (e.g. a dangling link).
    """
    st = os.stat(path)
    return (st.st_dev, st.st_ino)


@dataclass(slots=True)
class VisitedSet:
    """Identity tokens of symlinks already seen during one traversal."""

    _tokens: set[Hashable] = field(default_factory=set)

    def add(self, token: Hashable) -> bool:
        """Record *token*; return ``False`` if it was already present."""
        if token in self._tokens:
            return False
        self._tokens.add(token)
        return True

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)


def _final_component(path: str) -> bytes | None:
    base = os.path.basename(os.path.normpath(path))
    if base in ("", ".", ".."):
        return None
    return os.fsencode(base)


def _classify(dir_entry: os.DirEntry[str]) -> EntryKind:
    if dir_entry.is_symlink():
        return EntryKind.SYMLINK
    if dir_entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    if dir_entry.is_file(follow_symlinks=False):
        return EntryKind.FILE
    return EntryKind.OTHER


def walk(
    start: str | os.PathLike[str],
    entry_filter: EntryFilter | None = None,
    *,
    identify: IdentityFunc | None = None,
    visited: VisitedSet | None = None,
) -> Iterator[Entry]:
    """Walk *start* depth-first and yield entries accepted by *entry_filter*.

    The start path is evaluated first, following symlinks. Every directory
    is then listed in the order the OS returns it, and each child is
    evaluated before the walk descends into it. Only real directories are
    descended into; a symlink is never followed for recursion, and a
    symlink whose target identity was already seen is skipped entirely.

    Args:
        start: Path to start from. Yielded paths are built on it verbatim.
        entry_filter: Filter deciding which entries are yielded. Defaults
            to yielding everything.
        identify: Maps a symlink path to a hashable identity of its target.
            Defaults to :func:`stat_identity`.
        visited: Identity set for this run. A fresh set is used when omitted.

    Yields:
        Entry: Matching entries in discovery order.

    Raises:
        OSError: If a directory cannot be read or a symlink target cannot
            be identified. Entries already yielded remain valid.
    """
    active_filter = entry_filter or _NullFilter()
    identity = identify or stat_identity
    seen = visited if visited is not None else VisitedSet()
    start_path = os.fsdecode(start)

    try:
        st = os.stat(start_path)
    except OSError as exc:
        logger.debug("Cannot stat start path %s: %s", start_path, exc)
        return

    root = Entry(
        path=start_path,
        name=_final_component(start_path),
        kind=EntryKind.from_mode(st.st_mode),
    )
    if active_filter.should_emit(root):
        yield root

    if root.kind is EntryKind.DIRECTORY:
        yield from _walk_dir(start_path, active_filter, identity, seen)


def _list_dir(directory: str) -> list[tuple[str, str, EntryKind]]:
    logger.debug("Entering %s", directory)

    # Read the full listing so the handle is closed before descending.
    with os.scandir(directory) as it:
        return [
            (dir_entry.path, dir_entry.name, _classify(dir_entry)) for dir_entry in it
        ]


def _walk_dir(
    directory: str,
    entry_filter: EntryFilter,
    identify: IdentityFunc,
    visited: VisitedSet,
) -> Iterator[Entry]:
    # Stack items: remaining children of each open directory, innermost last.
    stack: list[Iterator[tuple[str, str, EntryKind]]] = [iter(_list_dir(directory))]

    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue

        path, name, kind = child
        if kind is EntryKind.SYMLINK and not visited.add(identify(path)):
            logger.debug("Skipping already visited link target: %s", path)
            continue

        entry = Entry(path=path, name=os.fsencode(name), kind=kind)
        if entry_filter.should_emit(entry):
            yield entry

        if kind is EntryKind.DIRECTORY:
            stack.append(iter(_list_dir(path)))


def scan(
    start: str | os.PathLike[str],
    entry_filter: EntryFilter | None = None,
) -> list[Entry]:
    """Walk *start* and return all matching entries as a list.

    Args:
        start: Path to start from.
        entry_filter: Optional filter implementation.

    Returns:
        list[Entry]: Matching entries in discovery order.
    """
    return list(walk(start, entry_filter))
