"""
Availability during assigned leader slots.

For every slot from the start of the leader schedule up to the last replayed
slot, the scheduled leader is charged one assigned slot, and one produced slot
when the block store holds a full block for it.

    fraction(v) = produced(v) / assigned(v)
    metric(v)   = fraction(v) / fraction(baseline)

Outages that cost the baseline the same share of its slots cancel out of the
ratio. When the baseline fraction is undefined or zero the raw fraction is
reported instead.
"""

from collections import Counter
from logging import getLogger

from tdswinners.ledger.interface import AccountSnapshot, BlockStore, LeaderScheduleCache
from tdswinners.utils.identity import ValidatorIdentity
from tdswinners.validator.exclusion import ExclusionPolicy
from tdswinners.validator.models import WinnerReport
from tdswinners.validator.scoring import build_report, fraction

logger = getLogger(__name__)

CATEGORY = "Availability"


def count_leader_slots(
    block_store: BlockStore,
    leader_schedule: LeaderScheduleCache,
    last_slot: int | None,
) -> tuple[Counter, Counter]:
    """Return (assigned, produced) slot counts per scheduled leader."""
    assigned: Counter = Counter()
    produced: Counter = Counter()
    if last_slot is None:
        return assigned, produced
    for slot in range(leader_schedule.first_slot, last_slot + 1):
        leader = leader_schedule.slot_leader_at(slot)
        if leader is None:
            continue
        assigned[leader] += 1
        if block_store.is_full(slot):
            produced[leader] += 1
    return assigned, produced


def compute_winners(
    snapshot: AccountSnapshot,
    block_store: BlockStore,
    baseline: ValidatorIdentity,
    excluded: ExclusionPolicy,
    leader_schedule: LeaderScheduleCache,
    normalize: bool = True,
) -> WinnerReport:
    assigned, produced = count_leader_slots(block_store, leader_schedule, snapshot.slot)

    baseline_fraction = fraction(produced[baseline], assigned[baseline])
    if normalize and not baseline_fraction:
        logger.warning(
            "[availability] Baseline %s has no produced leader slots (%d/%d); "
            "reporting raw fractions",
            baseline,
            produced[baseline],
            assigned[baseline],
        )
    normalized = bool(normalize and baseline_fraction)
    divisor = baseline_fraction if normalized else 1.0

    metrics: dict[ValidatorIdentity, float] = {}
    for identity in excluded.candidates(assigned):
        own = fraction(produced[identity], assigned[identity])
        if own is None:
            continue
        metrics[identity] = own / divisor

    logger.debug(
        "[availability] %d scheduled leaders, %d candidates, baseline fraction=%s",
        len(assigned),
        len(metrics),
        baseline_fraction,
    )

    def describe(identity: ValidatorIdentity, value: float) -> str:
        basis = "of baseline" if normalized else "raw"
        return (
            f"Produced {produced[identity]}/{assigned[identity]} leader slots "
            f"({value:.4f} {basis})"
        )

    return build_report(CATEGORY, metrics, descending=True, describe=describe)
