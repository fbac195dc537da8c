import re
from typing import Iterable, Iterator, List, Optional

from models import DropdownItem

SEPARATOR = "_"
_WHITESPACE = re.compile(r"\s+")

# to_storage_key never yields an empty key for a non-blank name
NEW_EXERCISE_VALUE = ""
NEW_EXERCISE_ITEM = DropdownItem(label="+ New exercise", value=NEW_EXERCISE_VALUE)


def to_storage_key(display_name: str) -> str:
    """Return the canonical storage key for a user-entered exercise name."""
    return _WHITESPACE.sub(SEPARATOR, display_name.strip().lower())


def to_display_label(key: str) -> str:
    """Return a readable label for ``key``.

    Not an exact inverse of :func:`to_storage_key`: the original casing of
    mixed-case names is lost.
    """
    words = key.replace(SEPARATOR, " ").split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


def dropdown_item(key: str) -> DropdownItem:
    return DropdownItem(label=to_display_label(key), value=key)


def dropdown_items(keys: Iterable[str]) -> List[DropdownItem]:
    """Project storage keys to dropdown items sorted by label."""
    items = [dropdown_item(k) for k in keys if k and k.strip()]
    return sorted(items, key=lambda i: i.label.casefold())


def is_new_exercise(item: DropdownItem) -> bool:
    return item.value == NEW_EXERCISE_VALUE


class ExerciseCatalog:
    """Known exercises offered for selection.

    ``add`` is the only mutation; every item is keyed by its storage key so
    the list never holds two items for the same exercise.
    """

    def __init__(self) -> None:
        self._items: List[DropdownItem] = []

    def __iter__(self) -> Iterator[DropdownItem]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def get(self, key: str) -> Optional[DropdownItem]:
        for item in self._items:
            if item.value == key:
                return item
        return None

    def add(self, item: DropdownItem) -> DropdownItem:
        """Append ``item`` unless its key is already known.

        Returns the item stored for that key.
        """
        if is_new_exercise(item):
            raise ValueError("the new exercise option is not an exercise")
        existing = self.get(item.value)
        if existing is not None:
            return existing
        self._items.append(item)
        return item

    def items(self) -> List[DropdownItem]:
        return list(self._items)

    def options(self) -> List[DropdownItem]:
        """Items followed by the new exercise option."""
        return self.items() + [NEW_EXERCISE_ITEM]
