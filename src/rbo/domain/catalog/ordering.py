"""Dense manual ordering shared by every level of the catalog tree.

Siblings carry an ``order`` field that must always be exactly ``1..N``.
Drag-and-drop moves follow the board semantics staff are used to: the dragged
entry is taken out of the list and reinserted at the index the target occupied
before the move, then the whole sibling list is renumbered.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Hashable, Iterable, Sequence, TypeVar

from rbo.domain.common.errors import NotFoundError

T = TypeVar("T")


def renumber(items: Iterable[T]) -> list[T]:
    renumbered: list[Any] = []
    for index, item in enumerate(items):
        if getattr(item, "order") != index + 1:
            item = replace(item, order=index + 1)  # type: ignore[type-var]
        renumbered.append(item)
    return renumbered


def sort_by_order(items: Iterable[T]) -> list[T]:
    return sorted(items, key=lambda item: getattr(item, "order"))


def move_before(
    items: Sequence[T],
    id_of: Callable[[T], Hashable],
    dragged_id: Hashable,
    target_id: Hashable,
) -> list[T]:
    ordered = list(items)
    ids = [id_of(item) for item in ordered]
    if dragged_id not in ids:
        raise NotFoundError(f"entry {dragged_id} not found")
    if target_id not in ids:
        raise NotFoundError(f"entry {target_id} not found")

    dragged_index = ids.index(dragged_id)
    target_index = ids.index(target_id)
    dragged = ordered.pop(dragged_index)
    ordered.insert(target_index, dragged)
    return renumber(ordered)


def is_dense(orders: Iterable[int]) -> bool:
    values = sorted(orders)
    return values == list(range(1, len(values) + 1))


def next_id(ids: Iterable[int]) -> int:
    return max(ids, default=0) + 1
