"""Tests for the double-press gesture state machine."""

from hnclient.tui.gestures import DoublePressGesture, GesturePhase


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_two_presses_within_window_fire():
    clock = FakeClock()
    gesture = DoublePressGesture(window=0.35, clock=clock)

    assert gesture.press("g") is False
    assert gesture.phase is GesturePhase.AWAITING_SECOND
    clock.now += 0.2
    assert gesture.press("g") is True
    assert gesture.phase is GesturePhase.IDLE


def test_late_second_press_starts_new_gesture():
    clock = FakeClock()
    gesture = DoublePressGesture(window=0.35, clock=clock)

    gesture.press("g")
    clock.now += 1.0
    assert gesture.press("g") is False
    assert gesture.phase is GesturePhase.AWAITING_SECOND
    clock.now += 0.1
    assert gesture.press("g") is True


def test_reset_cancels_pending_press():
    gesture = DoublePressGesture(clock=FakeClock())

    gesture.press("g")
    gesture.reset()

    assert gesture.phase is GesturePhase.IDLE
    assert gesture.press("g") is False


def test_different_key_does_not_complete():
    gesture = DoublePressGesture(clock=FakeClock())

    gesture.press("g")

    assert gesture.press("x") is False
    assert gesture.press("x") is True
