"""
Confirmation latency relative to the baseline validator.

For each slot the baseline confirmed, the entry index at which the baseline's
confirmation was first observed is the reference. Every other identity's first
confirmation of that slot scores ``own_index - baseline_index`` entries, which
is negative when it confirmed ahead of the baseline.

Per identity the offsets are reduced to their median. Identities that never
confirmed a slot the baseline also confirmed are left out of the ranking.
"""

from logging import getLogger
from typing import Mapping, Sequence

from tdswinners.utils.identity import ValidatorIdentity
from tdswinners.validator.exclusion import ExclusionPolicy
from tdswinners.validator.models import SegmentEntry, VoteRecordEntry, WinnerReport
from tdswinners.validator.scoring import build_report, median_offset

logger = getLogger(__name__)

CATEGORY = "Confirmation Latency"


def first_confirmation_index(
    segment: Sequence[SegmentEntry], identity: ValidatorIdentity
) -> int | None:
    for entry in segment:
        if entry.identity == identity:
            return entry.observed_at_entry_index
    return None


def offsets_by_identity(
    voter_record: Mapping[ValidatorIdentity, Sequence[VoteRecordEntry]],
    slot_voter_segments: Mapping[int, Sequence[SegmentEntry]],
    baseline: ValidatorIdentity,
    excluded: ExclusionPolicy,
) -> dict[ValidatorIdentity, list[int]]:
    baseline_index: dict[int, int] = {}
    for slot, segment in slot_voter_segments.items():
        idx = first_confirmation_index(segment, baseline)
        if idx is not None:
            baseline_index[slot] = idx

    offsets: dict[ValidatorIdentity, list[int]] = {}
    for identity in excluded.candidates(voter_record):
        seen_slots: set[int] = set()
        for record in voter_record[identity]:
            slot = record.slot_confirmed
            if slot in seen_slots or slot not in baseline_index:
                continue
            seen_slots.add(slot)
            offsets.setdefault(identity, []).append(
                record.observed_at_entry_index - baseline_index[slot]
            )
    return offsets


def compute_winners(
    voter_record: Mapping[ValidatorIdentity, Sequence[VoteRecordEntry]],
    slot_voter_segments: Mapping[int, Sequence[SegmentEntry]],
    baseline: ValidatorIdentity,
    excluded: ExclusionPolicy,
) -> WinnerReport:
    offsets = offsets_by_identity(voter_record, slot_voter_segments, baseline, excluded)
    if baseline not in voter_record:
        logger.warning("[latency] Baseline %s never confirmed a slot", baseline)

    metrics = {identity: median_offset(values) for identity, values in offsets.items()}

    def describe(identity: ValidatorIdentity, value: float) -> str:
        return (
            f"Median {value:+.1f} entries vs baseline "
            f"over {len(offsets[identity])} slots"
        )

    return build_report(CATEGORY, metrics, descending=False, describe=describe)
