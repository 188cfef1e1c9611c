"""Two-press key gestures ("gg").

State machine: IDLE → AWAITING_SECOND → (fire | timeout → AWAITING_SECOND) → IDLE
The clock is injected so tests can drive time directly.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable

DOUBLE_PRESS_SECONDS = 0.35


class GesturePhase(Enum):
    IDLE = "idle"
    AWAITING_SECOND = "awaiting-second"


class DoublePressGesture:
    def __init__(
        self,
        window: float = DOUBLE_PRESS_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._window = window
        self._clock = clock
        self._phase = GesturePhase.IDLE
        self._key: str | None = None
        self._deadline = 0.0

    @property
    def phase(self) -> GesturePhase:
        return self._phase

    def press(self, key: str) -> bool:
        """Feed one key press. True when it completes the gesture.

        A press after the deadline (or of a different key) starts a new
        gesture instead of completing the old one.
        """
        now = self._clock()
        if (
            self._phase is GesturePhase.AWAITING_SECOND
            and key == self._key
            and now <= self._deadline
        ):
            self.reset()
            return True
        self._phase = GesturePhase.AWAITING_SECOND
        self._key = key
        self._deadline = now + self._window
        return False

    def reset(self) -> None:
        self._phase = GesturePhase.IDLE
        self._key = None
        self._deadline = 0.0
