import pytest

from tdswinners.ledger.interface import VoteAccount
from tdswinners.validator.models import SegmentEntry, VoteRecordEntry
from tdswinners.validator.observer import VoteObserver, on_entry


def _view(*pairs):
    return {
        identity: VoteAccount(node_identity=identity, confirmed_slot=slot)
        for identity, slot in pairs
    }


def test_on_entry_records_new_confirmation(ids):
    voter_record, segments = {}, {}
    on_entry(12, _view((ids.a, 10)), voter_record, segments, entry_index=50)

    assert voter_record == {
        ids.a: [
            VoteRecordEntry(
                identity=ids.a,
                slot_confirmed=10,
                observed_at_entry_index=50,
                observed_at_slot=12,
            )
        ]
    }
    assert segments == {10: [SegmentEntry(identity=ids.a, observed_at_entry_index=50)]}


def test_on_entry_deduplicates_repeated_confirmation(ids):
    voter_record, segments = {}, {}
    on_entry(12, _view((ids.a, 10)), voter_record, segments, entry_index=1)
    on_entry(12, _view((ids.a, 10)), voter_record, segments, entry_index=2)

    assert len(voter_record[ids.a]) == 1
    assert len(segments[10]) == 1


def test_on_entry_appends_when_confirmation_advances(ids):
    voter_record, segments = {}, {}
    on_entry(12, _view((ids.a, 10)), voter_record, segments, entry_index=1)
    on_entry(13, _view((ids.a, 11)), voter_record, segments, entry_index=2)

    assert [r.slot_confirmed for r in voter_record[ids.a]] == [10, 11]
    assert segments[11] == [SegmentEntry(identity=ids.a, observed_at_entry_index=2)]


def test_on_entry_ignores_accounts_without_confirmation(ids):
    voter_record, segments = {}, {}
    on_entry(3, _view((ids.a, None)), voter_record, segments, entry_index=0)
    assert voter_record == {}
    assert segments == {}


def test_on_entry_segment_order_follows_identity_bytes(ids):
    voter_record, segments = {}, {}
    view = _view((ids.c, 7), (ids.a, 7), (ids.b, 7))
    on_entry(8, view, voter_record, segments, entry_index=4)
    assert [s.identity for s in segments[7]] == [ids.a, ids.b, ids.c]


def test_observer_counts_entries_and_freezes(ids):
    observer = VoteObserver()
    observer(1, _view((ids.a, None)))
    observer(2, _view((ids.a, 1)))
    observer(2, _view((ids.a, 1), (ids.b, 1)))

    trace = observer.freeze()
    assert trace.entries_observed == 3
    assert [r.observed_at_entry_index for r in trace.voter_record[ids.a]] == [1]
    assert [s.identity for s in trace.slot_voter_segments[1]] == [ids.a, ids.b]
    assert isinstance(trace.voter_record[ids.a], tuple)
    with pytest.raises(TypeError):
        trace.voter_record[ids.c] = ()


def test_observer_rejects_writes_after_freeze(ids):
    observer = VoteObserver()
    observer.freeze()
    with pytest.raises(RuntimeError):
        observer(1, _view((ids.a, 1)))


def test_observer_freeze_is_stable(ids):
    observer = VoteObserver()
    observer(1, _view((ids.a, 1)))
    assert observer.freeze() is observer.freeze()


def test_observer_tolerates_slot_regression(ids):
    observer = VoteObserver()
    observer(5, _view((ids.a, 4)))
    observer(4, _view((ids.a, 3)))
    trace = observer.freeze()
    assert [r.slot_confirmed for r in trace.voter_record[ids.a]] == [4, 3]


def test_empty_trace():
    trace = VoteObserver().freeze()
    assert trace.entries_observed == 0
    assert dict(trace.voter_record) == {}
    assert dict(trace.slot_voter_segments) == {}
