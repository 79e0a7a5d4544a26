import pytest

from tdswinners.ledger.interface import AccountSnapshot, LeaderScheduleCache
from tdswinners.validator.availability import compute_winners, count_leader_slots
from tdswinners.validator.exclusion import ExclusionPolicy


class _Blocks:
    def __init__(self, full):
        self.full = set(full)

    def is_full(self, slot):
        return slot in self.full


def _policy(ids):
    return ExclusionPolicy.from_reference_validators(ids.baseline, ids.bootstrap)


def test_count_leader_slots(ids):
    schedule = LeaderScheduleCache(first_slot=10, leaders=(ids.a, ids.b, ids.a))
    assigned, produced = count_leader_slots(_Blocks({10, 11}), schedule, last_slot=12)
    assert assigned == {ids.a: 2, ids.b: 1}
    assert produced == {ids.a: 1, ids.b: 1}


def test_availability_normalized_against_baseline(ids):
    # baseline produced 1 of 2, a produced 1 of 2, b produced 1 of 1
    schedule = LeaderScheduleCache(
        first_slot=0,
        leaders=(ids.baseline, ids.baseline, ids.a, ids.a, ids.b),
    )
    report = compute_winners(
        AccountSnapshot(slot=4),
        _Blocks({0, 2, 4}),
        ids.baseline,
        _policy(ids),
        schedule,
    )
    assert [(w.identity, w.metric_value) for w in report] == [
        (ids.b, pytest.approx(2.0)),
        (ids.a, pytest.approx(1.0)),
    ]
    assert "of baseline" in report.winners[0].details


def test_availability_zero_assigned_identity_is_omitted(ids):
    schedule = LeaderScheduleCache(first_slot=0, leaders=(ids.baseline, ids.a))
    report = compute_winners(
        AccountSnapshot(slot=1, balances={ids.c: 5}),
        _Blocks({0, 1}),
        ids.baseline,
        _policy(ids),
        schedule,
    )
    assert report.identities == [ids.a]


def test_availability_only_counts_replayed_range(ids):
    schedule = LeaderScheduleCache(first_slot=0, leaders=(ids.baseline, ids.a, ids.b))
    report = compute_winners(
        AccountSnapshot(slot=1),
        _Blocks({0, 1}),
        ids.baseline,
        _policy(ids),
        schedule,
    )
    assert ids.b not in report.identities


def test_availability_falls_back_to_raw_fraction(ids):
    schedule = LeaderScheduleCache(first_slot=0, leaders=(ids.baseline, ids.a, ids.a))
    report = compute_winners(
        AccountSnapshot(slot=2),
        _Blocks({1}),
        ids.baseline,
        _policy(ids),
        schedule,
    )
    assert [(w.identity, w.metric_value) for w in report] == [
        (ids.a, pytest.approx(0.5))
    ]
    assert "raw" in report.winners[0].details


def test_availability_raw_fraction_when_not_normalized(ids):
    schedule = LeaderScheduleCache(
        first_slot=0, leaders=(ids.baseline, ids.baseline, ids.a)
    )
    report = compute_winners(
        AccountSnapshot(slot=2),
        _Blocks({0, 2}),
        ids.baseline,
        _policy(ids),
        schedule,
        normalize=False,
    )
    assert report.winners[0].metric_value == pytest.approx(1.0)


def test_availability_tie_broken_by_identity_bytes(ids):
    schedule = LeaderScheduleCache(
        first_slot=0, leaders=(ids.c, ids.baseline, ids.a, ids.b)
    )
    report = compute_winners(
        AccountSnapshot(slot=3),
        _Blocks({0, 1, 2, 3}),
        ids.baseline,
        _policy(ids),
        schedule,
    )
    assert report.identities == [ids.a, ids.b, ids.c]


def test_availability_empty_replay(ids):
    schedule = LeaderScheduleCache(first_slot=0, leaders=(ids.baseline, ids.a))
    report = compute_winners(
        AccountSnapshot(slot=None),
        _Blocks(set()),
        ids.baseline,
        _policy(ids),
        schedule,
    )
    assert len(report) == 0
