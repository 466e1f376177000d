"""Per-position checked state over the merged ingredient list."""

from __future__ import annotations

from collections.abc import Sized


class ChecklistState:
    """In-memory checklist keyed by position in the current merged list.

    Positions are not migrated when the list is rebuilt: adding or deleting a
    custom ingredient may leave a check mark on whichever item now occupies a
    position.  Callers that need a clean slate after a rebuild call
    :meth:`clear`.
    """

    def __init__(self) -> None:
        self._checked: dict[int, bool] = {}

    @property
    def checked_items(self) -> dict[int, bool]:
        return dict(self._checked)

    def is_checked(self, position: int) -> bool:
        return self._checked.get(position, False)

    def toggle(self, position: int) -> bool:
        """Flip the state at ``position`` and return the new value."""

        if position < 0:
            raise IndexError(f"Checklist position must be non-negative, got {position}")
        self._checked[position] = not self._checked.get(position, False)
        return self._checked[position]

    def clear(self) -> None:
        self._checked.clear()

    def all_checked(self, ingredients: Sized | None, *, gating_enabled: bool) -> bool:
        """Return whether the dependent action (opening directions) is allowed.

        Gating is opt-in: with ``gating_enabled`` false the gate is always open,
        as it is for an absent or empty list.
        """

        if not gating_enabled or not ingredients:
            return True
        return all(self._checked.get(position, False) for position in range(len(ingredients)))
