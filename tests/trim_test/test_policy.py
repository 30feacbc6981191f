#!filepath: tests/trim_test/test_policy.py
import pytest

from heaptrim.config.trim_config import EarlyClockPolicy
from heaptrim.trim.catalog import TagSpec
from heaptrim.trim.clock import ClockState, PostThreshold
from heaptrim.trim.policy import Disposition, RetentionPolicy
from heaptrim.trim.record import RecordKind

PRE = ClockState(elapsed=3)
POST = ClockState(elapsed=10, phase=PostThreshold(origin_shift=5))


@pytest.mark.parametrize("kind", [RecordKind.DEFINITION, RecordKind.OPAQUE])
@pytest.mark.parametrize("state", [PRE, POST])
def test_definitions_and_opaque_always_kept(kind, state):
    assert RetentionPolicy().decide(kind, state) == Disposition.KEEP


def test_timed_events_dropped_before_threshold():
    assert RetentionPolicy().decide(RecordKind.TIMED_EVENT, PRE) == Disposition.DROP


def test_timed_events_kept_after_threshold():
    assert RetentionPolicy().decide(RecordKind.TIMED_EVENT, POST) == Disposition.KEEP


def test_timed_event_with_time_field_rewritten():
    spec = TagSpec(kind=RecordKind.TIMED_EVENT, time_field=2)

    assert RetentionPolicy().decide(RecordKind.TIMED_EVENT, POST, spec) == Disposition.REWRITE
    assert (
        RetentionPolicy(preserve_time=True).decide(RecordKind.TIMED_EVENT, POST, spec)
        == Disposition.KEEP
    )


def test_post_threshold_clock_rewritten_unless_preserved():
    assert RetentionPolicy().decide(RecordKind.CLOCK_UPDATE, POST) == Disposition.REWRITE
    assert (
        RetentionPolicy(preserve_time=True).decide(RecordKind.CLOCK_UPDATE, POST)
        == Disposition.KEEP
    )


@pytest.mark.parametrize(
    "early, preserve, expected",
    [
        (EarlyClockPolicy.AUTO, False, Disposition.REWRITE),
        (EarlyClockPolicy.AUTO, True, Disposition.KEEP),
        (EarlyClockPolicy.KEEP, False, Disposition.KEEP),
        (EarlyClockPolicy.KEEP, True, Disposition.KEEP),
        (EarlyClockPolicy.CLAMP, False, Disposition.REWRITE),
        (EarlyClockPolicy.CLAMP, True, Disposition.KEEP),
        (EarlyClockPolicy.DROP, False, Disposition.DROP),
        (EarlyClockPolicy.DROP, True, Disposition.DROP),
    ],
)
def test_early_clock_policy(early, preserve, expected):
    policy = RetentionPolicy(preserve_time=preserve, early_clock=early)

    assert policy.decide(RecordKind.CLOCK_UPDATE, PRE) == expected


def test_early_clock_accepts_plain_string():
    assert RetentionPolicy(early_clock="drop").early_clock == EarlyClockPolicy.DROP


def test_default_policy_rewrites_early_clocks():
    assert RetentionPolicy().early_clock == EarlyClockPolicy.CLAMP
    assert RetentionPolicy(preserve_time=True).early_clock == EarlyClockPolicy.KEEP
