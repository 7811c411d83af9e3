"""Byte-level glob matching supporting ``*`` and ``?``."""

from __future__ import annotations

from typing import Final

_STAR: Final[int] = ord("*")
_QUESTION: Final[int] = ord("?")


def glob_match(name: bytes, pattern: bytes) -> bool:
    """Return whether *name* matches the glob *pattern*.

    ``*`` matches any run of bytes (including none), ``?`` matches exactly
    one byte and every other byte matches itself. Matching is byte-exact;
    callers fold case beforehand when they need case-insensitive results.

    Backtracking runs on an explicit stack of ``(name_index, pattern_index)``
    pairs, so input length is not limited by the interpreter's recursion
    limit.

    Args:
        name: Candidate name as raw bytes.
        pattern: Glob pattern as raw bytes.

    Returns:
        bool: ``True`` when the whole of *name* matches the whole of *pattern*.
    """
    stack: list[tuple[int, int]] = [(0, 0)]

    while stack:
        ni, pi = stack.pop()

        if pi == len(pattern):
            if ni == len(name):
                return True
            continue

        if pattern[pi] == _STAR:
            # Shortest expansion is popped first, then widen by one byte.
            if ni < len(name):
                stack.append((ni + 1, pi))
            stack.append((ni, pi + 1))
            continue

        if ni == len(name):
            continue

        if pattern[pi] == _QUESTION or pattern[pi] == name[ni]:
            stack.append((ni + 1, pi + 1))

    return False
