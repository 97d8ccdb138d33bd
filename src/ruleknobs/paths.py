"""Field path expressions.

A path expression addresses a location inside an object graph:

- ``"email"`` - a top-level key or attribute
- ``"address.city"`` - nested keys/attributes
- ``"items[0].name"`` - list index followed by a key
- ``"meta['content-type']"`` - quoted key for names that are not identifiers

Expressions are parsed once into a sequence of segments (``str`` for keys,
``int`` for indexes) and then interpreted by ``read`` and ``write``. Nothing
is evaluated: computed expressions such as ``"a || b"`` are rejected with
``UnresolvablePathError``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from .exceptions import UnresolvablePathError

Segment = Union[str, int]

_IDENTIFIER = r"[A-Za-z_$][\w$]*"
_FIRST_TOKEN = re.compile(rf"(?P<key>{_IDENTIFIER})")
_NEXT_TOKEN = re.compile(
    rf"\.(?P<key>{_IDENTIFIER})"
    r"|\[(?P<index>\d+)\]"
    r"|\['(?P<single>[^'\\]*)'\]"
    r'|\["(?P<double>[^"\\]*)"\]'
)
_BRACKET_TOKEN = re.compile(
    r"\[(?P<index>\d+)\]"
    r"|\['(?P<single>[^'\\]*)'\]"
    r'|\["(?P<double>[^"\\]*)"\]'
)


def _segment(token: re.Match[str]) -> Segment:
    groups = token.groupdict()
    if groups.get("index") is not None:
        return int(groups["index"])
    for name in ("key", "single", "double"):
        if groups.get(name) is not None:
            return groups[name]
    raise AssertionError(f"unmatched token: {token.group(0)}")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _is_writable_container(value: Any) -> bool:
    return isinstance(value, (MutableMapping, list))


@dataclass(frozen=True)
class FieldPath:
    """Parsed path expression with a read/write interpreter."""

    expression: str
    segments: tuple[Segment, ...]

    @classmethod
    def parse(cls, expression: str) -> FieldPath:
        """Parse a path expression.

        Raises:
            UnresolvablePathError: If the expression is not a plain
                key/index path
        """
        if not isinstance(expression, str) or not expression:
            raise UnresolvablePathError(str(expression), "empty or non-string expression")

        token = _FIRST_TOKEN.match(expression) or _BRACKET_TOKEN.match(expression)
        if token is None:
            raise UnresolvablePathError(expression, "must start with a name or a bracket")

        segments = [_segment(token)]
        position = token.end()
        while position < len(expression):
            token = _NEXT_TOKEN.match(expression, position)
            if token is None:
                raise UnresolvablePathError(
                    expression, f"unexpected input at position {position}"
                )
            segments.append(_segment(token))
            position = token.end()

        return cls(expression, tuple(segments))

    @classmethod
    def flat(cls, expression: str) -> FieldPath:
        """Path that treats the whole expression as a single key."""
        return cls(expression, (expression,))

    def read(self, root: Any) -> Any:
        """Read the value at this path, or ``None`` if any step is missing."""
        current = root
        for segment in self.segments:
            current = _read_step(current, segment)
            if current is None:
                return None
        return current

    def write(self, root: Any, value: Any) -> None:
        """Assign ``value`` at this path, creating intermediate containers.

        Missing intermediates become dicts (before a key) or lists (before an
        index, padded with ``None``).

        Raises:
            UnresolvablePathError: If an existing intermediate or the root is
                not a writable dict or list
        """
        current = root
        for segment, next_segment in zip(self.segments, self.segments[1:]):
            child = _child_for_write(self.expression, current, segment)
            if child is None:
                child = [] if isinstance(next_segment, int) else {}
                _assign(self.expression, current, segment, child)
            elif not _is_writable_container(child):
                raise UnresolvablePathError(
                    self.expression,
                    f"segment {segment!r} holds a {type(child).__name__}, not a container",
                )
            current = child
        _assign(self.expression, current, self.segments[-1], value)

    def __str__(self) -> str:
        return self.expression


def _read_step(current: Any, segment: Segment) -> Any:
    if current is None:
        return None
    if isinstance(current, Mapping):
        if segment in current:
            return current[segment]
        if isinstance(segment, int):
            return current.get(str(segment))
        return None
    if isinstance(segment, int):
        if _is_sequence(current) and segment < len(current):
            return current[segment]
        return None
    if _is_sequence(current) or isinstance(current, (str, bytes, int, float, bool)):
        return None
    # Only public attributes are fields
    if segment.startswith("_"):
        return None
    return getattr(current, segment, None)


def _child_for_write(expression: str, container: Any, segment: Segment) -> Any:
    if isinstance(container, Mapping):
        return container.get(segment)
    if isinstance(container, list) and isinstance(segment, int):
        return container[segment] if segment < len(container) else None
    raise UnresolvablePathError(
        expression, f"cannot address {segment!r} in a {type(container).__name__}"
    )


def _assign(expression: str, container: Any, segment: Segment, value: Any) -> None:
    if isinstance(container, MutableMapping):
        container[segment] = value
    elif isinstance(container, list) and isinstance(segment, int):
        if segment >= len(container):
            container.extend([None] * (segment + 1 - len(container)))
        container[segment] = value
    else:
        raise UnresolvablePathError(
            expression, f"cannot assign {segment!r} in a {type(container).__name__}"
        )


def read_path(expression: str, root: Any) -> Any:
    """Read the value at ``expression`` from ``root`` (``None`` when missing)."""
    return FieldPath.parse(expression).read(root)


def write_path(expression: str, root: Any, value: Any) -> None:
    """Write ``value`` at ``expression`` into ``root``."""
    FieldPath.parse(expression).write(root, value)


__all__ = ["FieldPath", "Segment", "read_path", "write_path"]
