from __future__ import annotations

from typing import Iterator

from ccode import ScriptValue


class SeenSet:
    """
    Structured values on the current serialization path, compared by
    identity. One instance belongs to one top-level call and is threaded
    through its recursion; it is never shared between calls.
    """

    __slots__ = ("_items",)

    def __init__(self, items: tuple[ScriptValue, ...] = ()):
        self._items: list[ScriptValue] = list(items)

    def __contains__(self, value: ScriptValue) -> bool:
        return any(item is value for item in self._items)

    def push(self, value: ScriptValue) -> None:
        self._items.append(value)

    def pop(self) -> ScriptValue:
        return self._items.pop()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ScriptValue]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"SeenSet({len(self._items)} values)"
