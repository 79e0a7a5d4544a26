"""
Vote confirmation tracking
--------------------------

Driven by the ledger replay, one call per replayed entry. Each call compares the
confirmed slot of every vote account in the current view with the last one
recorded for that identity and records only the new confirmations:

    voter_record[identity]       -> [VoteRecordEntry, ...]   (observation order)
    slot_voter_segments[slot]    -> [SegmentEntry, ...]      (observation order)

The entry index is a running count of callbacks, so it orders confirmations
across the whole replay, not just within a slot.
"""

from logging import getLogger

from tdswinners.ledger.interface import VoteAccountsView
from tdswinners.utils.prometheus import ENTRIES_OBSERVED_TOTAL, VOTES_RECORDED_TOTAL
from tdswinners.validator.models import (
    SegmentEntry,
    SlotVoterSegments,
    VoteRecordEntry,
    VoterRecord,
    VoteTrace,
)

logger = getLogger(__name__)


def on_entry(
    current_slot: int,
    vote_accounts: VoteAccountsView,
    voter_record: VoterRecord,
    slot_voter_segments: SlotVoterSegments,
    entry_index: int,
) -> None:
    """Record every confirmation that landed since the previous entry."""
    for identity in sorted(vote_accounts):
        confirmed = vote_accounts[identity].confirmed_slot
        if confirmed is None:
            continue
        history = voter_record.get(identity)
        if history and history[-1].slot_confirmed == confirmed:
            continue
        voter_record.setdefault(identity, []).append(
            VoteRecordEntry(
                identity=identity,
                slot_confirmed=confirmed,
                observed_at_entry_index=entry_index,
                observed_at_slot=current_slot,
            )
        )
        slot_voter_segments.setdefault(confirmed, []).append(
            SegmentEntry(identity=identity, observed_at_entry_index=entry_index)
        )


class VoteObserver:
    """Single owner of the vote history while the ledger is replayed.

    Register the instance itself as the replay entry callback, then call
    :meth:`freeze` once the replay has returned to hand a read-only
    :class:`VoteTrace` to the calculators.
    """

    def __init__(self):
        self._voter_record: VoterRecord = {}
        self._slot_voter_segments: SlotVoterSegments = {}
        self._entry_index = 0
        self._trace: VoteTrace | None = None

    def __call__(self, slot: int, vote_accounts: VoteAccountsView) -> None:
        if self._trace is not None:
            raise RuntimeError("VoteObserver is frozen; replay has already finished")
        on_entry(
            slot,
            vote_accounts,
            self._voter_record,
            self._slot_voter_segments,
            self._entry_index,
        )
        ENTRIES_OBSERVED_TOTAL.inc()
        self._entry_index += 1

    def freeze(self) -> VoteTrace:
        if self._trace is not None:
            return self._trace
        trace = VoteTrace.from_containers(
            self._voter_record, self._slot_voter_segments, self._entry_index
        )
        VOTES_RECORDED_TOTAL.inc(sum(len(v) for v in trace.voter_record.values()))
        logger.info(
            "[observer] Frozen after %d entries: %d voters, %d confirmed slots",
            trace.entries_observed,
            len(trace.voter_record),
            len(trace.slot_voter_segments),
        )
        self._trace = trace
        return trace
