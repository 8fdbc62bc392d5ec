"""
Flashcard deck browser.

Navigation is a two-phase timed transition driven by an injected scheduler:

    IDLE --next/prev--> EXITING --delay--> (index moves) ENTERING --delay--> IDLE

While the phase is not IDLE the viewer is locked: flip, navigation and shuffle
requests are rejected, never queued.
"""
import random
from enum import Enum
from typing import List, Optional, Sequence

from ..schemas import Flashcard, FlashcardDeckView
from ..services.scheduler import Scheduler


class Phase(str, Enum):
    IDLE = "idle"
    EXITING = "exiting"
    ENTERING = "entering"


_EXIT = {1: "slide-out-left", -1: "slide-out-right"}
_ENTER = {1: "slide-in-right", -1: "slide-in-left"}


class FlashcardViewer:
    def __init__(
        self,
        cards: Sequence[Flashcard],
        scheduler: Scheduler,
        *,
        delay: float = 0.3,
        rng: Optional[random.Random] = None,
    ):
        self._scheduler = scheduler
        self._delay = delay
        self._rng = rng or random.Random()
        self._epoch = 0
        self.load(cards)

    def load(self, cards: Sequence[Flashcard]) -> None:
        """Reset to a fresh copy of `cards`; timers from the old deck are ignored."""
        self._epoch += 1
        self.deck: List[Flashcard] = list(cards)
        self.index = 0
        self.flipped = False
        self.phase = Phase.IDLE
        self.animation = ""

    @property
    def animating(self) -> bool:
        return self.phase is not Phase.IDLE

    @property
    def current(self) -> Optional[Flashcard]:
        return self.deck[self.index] if self.deck else None

    @property
    def can_prev(self) -> bool:
        return self.index > 0 and not self.animating

    @property
    def can_next(self) -> bool:
        return self.index < len(self.deck) - 1 and not self.animating

    def flip(self) -> bool:
        if self.animating or not self.deck:
            return False
        self.flipped = not self.flipped
        return True

    def next(self) -> bool:
        return self.can_next and self._navigate(1)

    def prev(self) -> bool:
        return self.can_prev and self._navigate(-1)

    def shuffle(self) -> bool:
        if self.animating or not self.deck:
            return False
        self._rng.shuffle(self.deck)  # Fisher-Yates
        self.index = 0
        self.flipped = False
        return True

    def handle_key(self, code: str) -> bool:
        """Returns True when the browser default (page scroll) must be suppressed."""
        if code == "ArrowRight":
            self.next()
        elif code == "ArrowLeft":
            self.prev()
        elif code == "Space":
            self.flip()
            return True
        return False

    # ---------- transition phases ----------
    def _navigate(self, step: int) -> bool:
        epoch = self._epoch
        self.phase = Phase.EXITING
        self.flipped = False
        self.animation = _EXIT[step]
        self._scheduler.call_later(self._delay, lambda: self._settle(epoch, step))
        return True

    def _settle(self, epoch: int, step: int) -> None:
        if epoch != self._epoch:
            return
        self.index = min(max(self.index + step, 0), len(self.deck) - 1)
        self.phase = Phase.ENTERING
        self.animation = _ENTER[step]
        self._scheduler.call_later(self._delay, lambda: self._release(epoch))

    def _release(self, epoch: int) -> None:
        if epoch != self._epoch:
            return
        self.phase = Phase.IDLE

    def view(self) -> FlashcardDeckView:
        card = self.current
        shown = None
        if card is not None:
            shown = card.answer if self.flipped else card.question
        return FlashcardDeckView(
            total=len(self.deck),
            index=self.index,
            flipped=self.flipped,
            animating=self.animating,
            animation=self.animation,
            card=card,
            shown=shown,
        )
