#!filepath: tests/trim_test/test_clock.py
import pytest

from heaptrim.trim.catalog import ClockSpec
from heaptrim.trim.clock import ClockState, ClockTracker, PostThreshold, PreThreshold
from heaptrim.trim.record import RawRecord
from heaptrim.utils.errors import ConfigError, FormatError


def clock(value: int) -> RawRecord:
    return RawRecord(b"c %x" % value)


@pytest.fixture
def absolute() -> ClockSpec:
    return ClockSpec(tag="c", field_index=1, radix=16, mode="absolute")


def feed(tracker: ClockTracker, values) -> list[ClockState]:
    state = tracker.initial()
    states = []
    for v in values:
        state = tracker.advance(state, clock(v))
        states.append(state)
    return states


def test_initial_state_is_pre_threshold(absolute):
    state = ClockTracker(1000, absolute).initial()

    assert state.elapsed == 0
    assert state.phase == PreThreshold()
    assert not state.crossed
    assert state.origin_shift is None


def test_zero_threshold_starts_crossed(absolute):
    state = ClockTracker(0, absolute).initial()

    assert state.crossed
    assert state.origin_shift == 0


def test_crossing_at_exact_threshold(absolute):
    states = feed(ClockTracker(5, absolute), [3, 4, 5, 6])

    assert [s.crossed for s in states] == [False, False, True, True]
    assert states[2].phase == PostThreshold(origin_shift=5)


def test_crossing_past_threshold_shifts_by_threshold(absolute):
    states = feed(ClockTracker(1000, absolute), [0x7D0])

    assert states[0].elapsed == 2000
    assert states[0].origin_shift == 1000


def test_phase_never_goes_back(absolute):
    tracker = ClockTracker(5, absolute)
    state = tracker.advance(tracker.initial(), clock(10))

    state = tracker.advance(state, clock(10))

    assert state.crossed
    assert state.origin_shift == 5


def test_advance_does_not_mutate(absolute):
    tracker = ClockTracker(5, absolute)
    before = tracker.initial()

    after = tracker.advance(before, clock(3))

    assert before.elapsed == 0
    assert after.elapsed == 3


def test_backwards_clock_is_format_error(absolute):
    tracker = ClockTracker(100, absolute)
    state = tracker.advance(tracker.initial(), clock(50))

    with pytest.raises(FormatError):
        tracker.advance(state, clock(40))


def test_equal_clock_is_allowed(absolute):
    states = feed(ClockTracker(100, absolute), [50, 50])

    assert states[-1].elapsed == 50


def test_malformed_clock_is_format_error(absolute):
    tracker = ClockTracker(100, absolute)

    with pytest.raises(FormatError):
        tracker.advance(tracker.initial(), RawRecord(b"c"))
    with pytest.raises(FormatError):
        tracker.advance(tracker.initial(), RawRecord(b"c nothex"))


def test_delta_mode_accumulates():
    spec = ClockSpec(tag="T", field_index=1, radix=10, mode="delta")
    tracker = ClockTracker(10, spec)

    state = tracker.initial()
    for v in (b"T 4", b"T 4", b"T 4"):
        state = tracker.advance(state, RawRecord(v))

    assert state.elapsed == 12
    assert state.crossed


def test_negative_threshold_rejected(absolute):
    with pytest.raises(ConfigError):
        ClockTracker(-1, absolute)
