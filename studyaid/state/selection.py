from typing import FrozenSet, Iterable, Optional

from ..schemas import OutputType


class OutputSelection:
    def __init__(self, initial: Optional[Iterable[OutputType]] = None):
        self._kinds = set(initial) if initial is not None else {OutputType.FLASHCARDS}

    def toggle(self, kind: OutputType) -> bool:
        """Flip membership of `kind`; returns whether it is now selected."""
        if kind in self._kinds:
            self._kinds.discard(kind)
            return False
        self._kinds.add(kind)
        return True

    def selected(self, kind: OutputType) -> bool:
        return kind in self._kinds

    @property
    def kinds(self) -> FrozenSet[OutputType]:
        return frozenset(self._kinds)

    @property
    def is_empty(self) -> bool:
        return not self._kinds
